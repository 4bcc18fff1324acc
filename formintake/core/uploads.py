from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from fastapi import UploadFile

from formintake.core.errors import AttachmentTooLarge, UnsupportedAttachmentType

ATTACHMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
}

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Attachment:
    filename: str
    content_type: str
    data: bytes
    # Set when the part exceeded the read limit; ``data`` is then dropped.
    oversized: bool = False

    @property
    def size(self) -> int:
        return len(self.data)


def normalize_content_type(raw: str | None) -> str:
    content_type = (raw or "").strip().lower()
    if ";" in content_type:
        content_type = content_type.split(";", 1)[0].strip()
    return content_type


async def read_attachment(upload: UploadFile | None, *, max_bytes: int | None = None) -> Attachment | None:
    """
    Reads a multipart file part; an empty part (no filename, no bytes) means no attachment.

    With ``max_bytes`` at most ``max_bytes + 1`` bytes are read. A part whose
    declared or read size goes over the limit comes back flagged ``oversized``.
    """
    if upload is None:
        return None
    filename = (upload.filename or "").strip()
    content_type = normalize_content_type(upload.content_type)

    if max_bytes is not None and upload.size is not None and upload.size > max_bytes:
        return Attachment(filename=filename, content_type=content_type, data=b"", oversized=True)

    data = await upload.read() if max_bytes is None else await upload.read(max_bytes + 1)
    if not filename and not data:
        return None
    if max_bytes is not None and len(data) > max_bytes:
        return Attachment(filename=filename, content_type=content_type, data=b"", oversized=True)
    return Attachment(filename=filename, content_type=content_type, data=data)


def validate_attachment(
    attachment: Attachment,
    *,
    allowed_mime_types: set[str] = ATTACHMENT_MIME_TYPES,
    max_bytes: int,
) -> None:
    if attachment.content_type not in allowed_mime_types:
        raise UnsupportedAttachmentType()
    if attachment.oversized or attachment.size > max_bytes:
        raise AttachmentTooLarge(
            f"El archivo supera el tamaño máximo permitido ({max_bytes // (1024 * 1024)}MB)."
        )


def collapse_whitespace(raw: str, replacement: str = " ") -> str:
    return _WHITESPACE_RE.sub(replacement, raw.strip())


def sanitize_object_label(raw: str) -> str:
    return collapse_whitespace(raw, "_")


def build_object_name(prefix: str, submitter_name: str, submitted_at: datetime) -> str:
    millis = int(submitted_at.timestamp() * 1000)
    return f"{prefix}_{sanitize_object_label(submitter_name)}_{millis}"
