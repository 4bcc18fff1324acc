from __future__ import annotations

import html
from datetime import datetime

from formintake.core.datetime_utils import isoformat_utc
from formintake.core.uploads import collapse_whitespace
from formintake.schemas.submission import AttachmentRef
from formintake.services.email import SafeHtml, render_template
from formintake.services.kinds import KindSpec

NO_ATTACHMENT = "No adjunto"
NO_MESSAGE = "(sin mensaje)"


def _attachment_link(attachment: AttachmentRef | None) -> SafeHtml | str:
    if attachment is None:
        return NO_ATTACHMENT
    return SafeHtml(f'<a href="{html.escape(attachment.public_url)}">Ver en Drive</a>')


def _subject_values(values: dict[str, str]) -> dict[str, str]:
    # A header line must not carry CR/LF from form input.
    return {key: collapse_whitespace(value or "") for key, value in values.items()}


def compose_notification(
    spec: KindSpec,
    values: dict[str, str],
    *,
    attachment: AttachmentRef | None,
    submitted_at: datetime,
) -> tuple[str, str]:
    """Returns ``(subject, html_body)`` for a submission."""
    context: dict[str, object] = dict(values)
    if not context.get("mensaje"):
        context["mensaje"] = NO_MESSAGE
    context["attachment_link"] = _attachment_link(attachment)
    context["submitted_at"] = isoformat_utc(submitted_at)
    return spec.subject(_subject_values(values)), render_template(spec.template_name, context)
