import google.auth

from formintake.core.config import Settings
from formintake.services import google_auth
from formintake.services.google_auth import service_account_credentials


class DelegatableCredentials:
    def __init__(self, subject=None) -> None:
        self.subject = subject

    def with_subject(self, subject):
        return DelegatableCredentials(subject)


class UserCredentials:
    pass


def _adc_settings() -> Settings:
    return Settings(
        _env_file=None,
        google_application_credentials="",
        google_client_email="",
        google_private_key="",
    )


def test_default_credentials_get_the_delegated_subject(monkeypatch):
    scopes_seen = []

    def fake_default(scopes=None):
        scopes_seen.append(scopes)
        return DelegatableCredentials(), "project-1"

    monkeypatch.setattr(google.auth, "default", fake_default)

    credentials = service_account_credentials(_adc_settings(), ["scope-a"], subject="envios@example.com")

    assert credentials.subject == "envios@example.com"
    assert scopes_seen == [["scope-a"]]


def test_default_user_credentials_are_returned_as_is(monkeypatch):
    user = UserCredentials()
    monkeypatch.setattr(google.auth, "default", lambda scopes=None: (user, None))

    assert service_account_credentials(_adc_settings(), ["scope-a"], subject="envios@example.com") is user


def test_inline_key_pair_is_delegated(monkeypatch):
    captured = {}

    def fake_from_info(info, scopes=None):
        captured["info"] = info
        return DelegatableCredentials()

    monkeypatch.setattr(google_auth.Credentials, "from_service_account_info", fake_from_info)
    settings = Settings(
        _env_file=None,
        google_application_credentials="",
        google_client_email="bot@project.iam.gserviceaccount.com",
        google_private_key="-----BEGIN-----\\nabc\\n-----END-----",
    )

    credentials = service_account_credentials(settings, ["scope-a"], subject="envios@example.com")

    assert credentials.subject == "envios@example.com"
    assert captured["info"]["private_key"] == "-----BEGIN-----\nabc\n-----END-----"
    assert captured["info"]["token_uri"] == google_auth.TOKEN_URI
