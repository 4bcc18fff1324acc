from __future__ import annotations

import google.auth
from google.oauth2.service_account import Credentials

from formintake.core.config import Settings
from formintake.core.paths import resolve_repo_path

TOKEN_URI = "https://oauth2.googleapis.com/token"


def service_account_credentials(settings: Settings, scopes: list[str], *, subject: str | None = None):
    """
    Credentials in order of preference: a service-account JSON file, the inline
    client email + private key pair, then application default credentials.

    ``subject`` (domain-wide delegation) is applied whenever the credentials
    support it. Default credentials that are not a service account (for example
    a gcloud user login) act as that user instead.
    """
    if settings.google_application_credentials:
        credentials = Credentials.from_service_account_file(
            str(resolve_repo_path(settings.google_application_credentials)), scopes=scopes
        )
    elif settings.google_client_email and settings.google_private_key:
        credentials = Credentials.from_service_account_info(
            {
                "client_email": settings.google_client_email,
                "private_key": settings.google_private_key_pem,
                "token_uri": TOKEN_URI,
            },
            scopes=scopes,
        )
    else:
        credentials, _ = google.auth.default(scopes=scopes)

    if subject and hasattr(credentials, "with_subject"):
        credentials = credentials.with_subject(subject)
    return credentials
