from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from formintake.models import Complaint, JobApplication
from formintake.schemas.submission import SubmissionKind


@dataclass(frozen=True)
class KindSpec:
    kind: SubmissionKind
    model: type
    required_fields: tuple[str, ...]
    optional_fields: tuple[str, ...]
    object_prefix: str
    template_name: str
    subject: Callable[[dict[str, str]], str]
    # (row attribute, spreadsheet header)
    report_columns: tuple[tuple[str, str], ...]
    report_name: str

    @property
    def fields(self) -> tuple[str, ...]:
        return self.required_fields + self.optional_fields


JOB_APPLICATION = KindSpec(
    kind=SubmissionKind.JOB_APPLICATION,
    model=JobApplication,
    required_fields=("nombre", "email", "telefono", "cargo"),
    optional_fields=("mensaje",),
    object_prefix="HV",
    template_name="job_application",
    subject=lambda f: f"Nueva postulación: {f['nombre']} • {f['cargo']}",
    report_columns=(
        ("id", "ID"),
        ("created_at", "Fecha"),
        ("nombre", "Nombre"),
        ("email", "Email"),
        ("telefono", "Teléfono"),
        ("cargo", "Cargo"),
        ("mensaje", "Mensaje"),
        ("drive_file_url", "Archivo"),
        ("ip", "IP"),
        ("user_agent", "Navegador"),
    ),
    report_name="postulaciones",
)

COMPLAINT = KindSpec(
    kind=SubmissionKind.COMPLAINT,
    model=Complaint,
    required_fields=("nombre", "email", "telefono", "sucursal", "asunto", "mensaje"),
    optional_fields=(),
    object_prefix="QUEJA",
    template_name="complaint",
    subject=lambda f: f"Nuevo mensaje ({f['asunto']}) de {f['nombre']}",
    report_columns=(
        ("id", "ID"),
        ("created_at", "Fecha"),
        ("nombre", "Nombre"),
        ("email", "Email"),
        ("telefono", "Teléfono"),
        ("sucursal", "Sucursal"),
        ("asunto", "Asunto"),
        ("mensaje", "Mensaje"),
        ("drive_file_url", "Adjunto"),
        ("ip", "IP"),
        ("user_agent", "Navegador"),
    ),
    report_name="quejas",
)

KIND_SPECS: dict[SubmissionKind, KindSpec] = {
    SubmissionKind.JOB_APPLICATION: JOB_APPLICATION,
    SubmissionKind.COMPLAINT: COMPLAINT,
}


def get_kind_spec(kind: SubmissionKind) -> KindSpec:
    return KIND_SPECS[kind]
