from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("formintake.errors")

SERVER_ERROR_DETAIL = "Error del servidor."


class IntakeError(Exception):
    """Base class for every failure the intake service reports to a caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "server_error"
    detail: str = SERVER_ERROR_DETAIL

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)

    def to_payload(self) -> dict:
        return {"error": self.code, "detail": self.detail}


class MissingFields(IntakeError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "missing_fields"
    detail = "Faltan campos obligatorios."

    def __init__(self, fields: list[str]) -> None:
        self.fields = list(fields)
        super().__init__()

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["fields"] = self.fields
        return payload


class UnsupportedAttachmentType(IntakeError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    code = "unsupported_attachment_type"
    detail = "Tipo de archivo no permitido."


class AttachmentTooLarge(IntakeError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    code = "attachment_too_large"
    detail = "El archivo supera el tamaño máximo permitido."


class NotFound(IntakeError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    detail = "No hay registros."


# Server-side stages share the generic payload; the stage is only visible in logs.
class UploadFailed(IntakeError):
    pass


class PersistFailed(IntakeError):
    pass


class NotifyFailed(IntakeError):
    pass


class Internal(IntakeError):
    pass


async def _intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "intake_error",
            extra={
                "error_type": type(exc).__name__,
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
            },
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IntakeError, _intake_error_handler)
