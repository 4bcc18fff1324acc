import logging
from typing import Mapping

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from formintake.api import deps
from formintake.core.errors import IntakeError, Internal
from formintake.core.uploads import read_attachment
from formintake.request_context import get_request_context
from formintake.schemas.submission import IntakeAck, SubmissionKind
from formintake.services.intake import IntakePipeline

logger = logging.getLogger("formintake.intake")

router = APIRouter(prefix="/api", tags=["forms"])


async def _run_submission(
    request: Request,
    pipeline: IntakePipeline,
    kind: SubmissionKind,
    fields: Mapping[str, str | None],
    archivo: UploadFile | None,
) -> IntakeAck:
    context = get_request_context(request)
    try:
        attachment = await read_attachment(archivo, max_bytes=pipeline.config.max_attachment_bytes)
        return await pipeline.submit(kind, fields, attachment=attachment, origin=context.origin())
    except IntakeError:
        raise
    except Exception as exc:
        logger.exception("submission_failed", extra={"kind": kind.value, "request_id": context.request_id})
        raise Internal() from exc


@router.post("/formulario", response_model=IntakeAck)
async def submit_job_application(
    request: Request,
    nombre: str | None = Form(default=None),
    email: str | None = Form(default=None),
    telefono: str | None = Form(default=None),
    cargo: str | None = Form(default=None),
    mensaje: str | None = Form(default=None),
    archivo: UploadFile | None = File(default=None),
    pipeline: IntakePipeline = Depends(deps.get_intake_pipeline),
):
    fields = {"nombre": nombre, "email": email, "telefono": telefono, "cargo": cargo, "mensaje": mensaje}
    return await _run_submission(request, pipeline, SubmissionKind.JOB_APPLICATION, fields, archivo)


@router.post("/quejas", response_model=IntakeAck)
async def submit_complaint(
    request: Request,
    nombre: str | None = Form(default=None),
    email: str | None = Form(default=None),
    telefono: str | None = Form(default=None),
    sucursal: str | None = Form(default=None),
    asunto: str | None = Form(default=None),
    mensaje: str | None = Form(default=None),
    archivo: UploadFile | None = File(default=None),
    pipeline: IntakePipeline = Depends(deps.get_intake_pipeline),
):
    fields = {
        "nombre": nombre,
        "email": email,
        "telefono": telefono,
        "sucursal": sucursal,
        "asunto": asunto,
        "mensaje": mensaje,
    }
    return await _run_submission(request, pipeline, SubmissionKind.COMPLAINT, fields, archivo)
