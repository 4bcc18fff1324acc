from __future__ import annotations

import base64
import html
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any, Protocol

from googleapiclient.discovery import build

from formintake.core.config import Settings
from formintake.core.paths import package_root
from formintake.services.google_auth import service_account_credentials

GMAIL_SCOPES = ["https://www.googleapis.com/auth/gmail.send"]


class Notifier(Protocol):
    enabled: bool

    def send(self, to: list[str], cc: list[str], subject: str, html_body: str) -> str | None: ...


class SafeHtml(str):
    """Marks a fragment built from already-escaped parts."""


def _template_path(name: str) -> Path:
    return package_root() / "templates" / "email" / f"{name}.html"


def render_template(name: str, context: dict[str, Any]) -> str:
    """Fills ``{placeholders}`` in an email template; plain values are HTML-escaped."""
    raw = _template_path(name).read_text(encoding="utf-8")
    values = {}
    for key, value in context.items():
        if isinstance(value, SafeHtml):
            values[key] = str(value)
        else:
            values[key] = html.escape("" if value is None else str(value))
    return raw.format_map(values)


class GmailNotifier:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def enabled(self) -> bool:
        return self._settings.enable_gmail

    def _client(self):
        sender = self._settings.gmail_sender_email
        if not sender:
            raise RuntimeError("INTAKE_GMAIL_SENDER_EMAIL (or EMAIL_FROM) is not set")
        credentials = service_account_credentials(self._settings, GMAIL_SCOPES, subject=sender)
        return build("gmail", "v1", credentials=credentials, cache_discovery=False)

    def send(self, to: list[str], cc: list[str], subject: str, html_body: str) -> str | None:
        if not self.enabled:
            return None
        if not to:
            raise RuntimeError("INTAKE_NOTIFY_TO (or EMAIL_TO) is not set")

        sender = self._settings.gmail_sender_email
        sender_name = self._settings.gmail_sender_name.strip() if self._settings.gmail_sender_name else ""
        message = MIMEText(html_body, "html", "utf-8")
        message["To"] = ", ".join(to)
        if cc:
            message["Cc"] = ", ".join(cc)
        message["From"] = f'"{sender_name}" <{sender}>' if sender_name else sender
        message["Subject"] = subject

        raw = base64.urlsafe_b64encode(message.as_bytes()).decode("utf-8")
        service = self._client()
        response = service.users().messages().send(userId="me", body={"raw": raw}).execute()
        return response.get("id")
