from datetime import datetime, timezone
from io import BytesIO

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from formintake.core.errors import AttachmentTooLarge, UnsupportedAttachmentType
from formintake.core.uploads import (
    Attachment,
    build_object_name,
    normalize_content_type,
    read_attachment,
    sanitize_object_label,
    validate_attachment,
)


def _upload(filename: str, data: bytes, content_type: str) -> UploadFile:
    return UploadFile(file=BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


def test_sanitize_collapses_whitespace_runs():
    assert sanitize_object_label("  María   José\tGómez ") == "María_José_Gómez"


def test_build_object_name_uses_prefix_and_millis():
    submitted_at = datetime(2024, 2, 3, 4, 5, 6, 789000, tzinfo=timezone.utc)
    assert build_object_name("QUEJA", "Ana Ruiz", submitted_at) == f"QUEJA_Ana_Ruiz_{int(submitted_at.timestamp() * 1000)}"


def test_normalize_content_type_drops_parameters():
    assert normalize_content_type("Application/PDF; charset=binary") == "application/pdf"
    assert normalize_content_type(None) == ""


@pytest.mark.parametrize(
    "content_type",
    [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "image/jpeg",
        "image/png",
    ],
)
def test_whitelisted_types_pass(content_type):
    validate_attachment(Attachment("f", content_type, b"x"), max_bytes=10)


@pytest.mark.parametrize("content_type", ["application/zip", "text/html", "application/octet-stream", ""])
def test_other_types_rejected(content_type):
    with pytest.raises(UnsupportedAttachmentType):
        validate_attachment(Attachment("f", content_type, b"x"), max_bytes=10)


def test_size_limit():
    with pytest.raises(AttachmentTooLarge):
        validate_attachment(Attachment("f.pdf", "application/pdf", b"x" * 11), max_bytes=10)


async def test_read_attachment_treats_empty_part_as_absent():
    assert await read_attachment(None) is None
    assert await read_attachment(_upload("", b"", "application/octet-stream")) is None


async def test_read_attachment_reads_bytes_and_type():
    attachment = await read_attachment(_upload("hv.pdf", b"%PDF", "application/pdf"))

    assert attachment == Attachment(filename="hv.pdf", content_type="application/pdf", data=b"%PDF")
    assert attachment.size == 4


async def test_read_attachment_stops_after_limit():
    attachment = await read_attachment(_upload("hv.pdf", b"x" * 50, "application/pdf"), max_bytes=10)

    assert attachment.oversized is True
    assert attachment.data == b""
    with pytest.raises(AttachmentTooLarge):
        validate_attachment(attachment, max_bytes=10)


async def test_read_attachment_trusts_declared_size_without_reading():
    stream = BytesIO(b"%PDF" * 10)
    upload = UploadFile(
        file=stream,
        filename="hv.pdf",
        size=40,
        headers=Headers({"content-type": "application/pdf"}),
    )

    attachment = await read_attachment(upload, max_bytes=10)

    assert attachment.oversized is True
    assert stream.tell() == 0


async def test_read_attachment_at_limit_is_kept():
    attachment = await read_attachment(_upload("hv.pdf", b"x" * 10, "application/pdf"), max_bytes=10)

    assert attachment.oversized is False
    assert attachment.size == 10
    validate_attachment(attachment, max_bytes=10)
