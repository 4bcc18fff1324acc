from __future__ import annotations

import os

from pydantic import AliasChoices, Field, field_validator

from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part and part.strip()]


def _env_files() -> list[str]:
    env = os.getenv("INTAKE_ENVIRONMENT", "").strip().lower()
    files = [".env"]
    if env and env != "development":
        files.append(f".env.{env}")
    else:
        files.append(".env.local")
    return files


class Settings(BaseSettings):
    app_name: str = "Formularios Casa del Kumis"
    environment: str = "development"
    log_level: str = "INFO"
    port: int = Field(default=3000, validation_alias=AliasChoices("INTAKE_PORT", "PORT"))

    database_url: str = Field(
        default="sqlite+aiosqlite:///./formintake.db",
        validation_alias=AliasChoices("INTAKE_DATABASE_URL", "DATABASE_URL"),
    )
    auto_create_tables: bool = False

    google_application_credentials: str = Field(
        default="",
        validation_alias=AliasChoices("INTAKE_GOOGLE_APPLICATION_CREDENTIALS", "GOOGLE_APPLICATION_CREDENTIALS"),
    )
    google_client_email: str = Field(
        default="",
        validation_alias=AliasChoices("INTAKE_GOOGLE_CLIENT_EMAIL", "GOOGLE_CLIENT_EMAIL"),
    )
    google_private_key: str = Field(
        default="",
        validation_alias=AliasChoices("INTAKE_GOOGLE_PRIVATE_KEY", "GOOGLE_PRIVATE_KEY"),
    )

    drive_folder_id: str = Field(
        default="",
        validation_alias=AliasChoices("INTAKE_DRIVE_FOLDER_ID", "GOOGLE_FOLDER_ID"),
    )
    drive_complaints_folder_id: str = Field(
        default="",
        validation_alias=AliasChoices("INTAKE_DRIVE_COMPLAINTS_FOLDER_ID", "GOOGLE_FOLDER_QUEJAS_ID"),
    )

    enable_gmail: bool = True
    gmail_sender_email: str = Field(
        default="",
        validation_alias=AliasChoices("INTAKE_GMAIL_SENDER_EMAIL", "EMAIL_FROM"),
    )
    gmail_sender_name: str = "Casa del Kumis"
    notify_to: str = Field(default="", validation_alias=AliasChoices("INTAKE_NOTIFY_TO", "EMAIL_TO"))
    notify_cc: str = Field(default="", validation_alias=AliasChoices("INTAKE_NOTIFY_CC", "EMAIL_CC"))
    notify_required: bool = False

    max_attachment_bytes: int = 10 * 1024 * 1024
    rate_limit_per_minute: int = 60
    rate_limit_max_keys: int = 10_000

    cors_allow_origins: str = Field(
        default="*",
        validation_alias=AliasChoices("INTAKE_CORS_ALLOW_ORIGINS", "ALLOWED_ORIGINS"),
    )

    model_config = SettingsConfigDict(
        env_prefix="INTAKE_",
        env_file=_env_files(),
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("database_url")
    @classmethod
    def require_async_driver(cls, value: str) -> str:
        scheme = value.split("://", 1)[0].lower()
        if "libsql" in scheme:
            raise ValueError("libSQL URLs are not supported; use an async driver URL such as sqlite+aiosqlite:///...")
        return value

    @property
    def notify_to_list(self) -> list[str]:
        return _split_csv(self.notify_to)

    @property
    def notify_cc_list(self) -> list[str]:
        return _split_csv(self.notify_cc)

    @property
    def cors_origin_list(self) -> list[str]:
        return _split_csv(self.cors_allow_origins) or ["*"]

    @property
    def complaints_folder_id(self) -> str:
        return self.drive_complaints_folder_id or self.drive_folder_id

    @property
    def google_private_key_pem(self) -> str:
        # Keys pasted into a single-line env var keep their newlines escaped.
        return self.google_private_key.replace("\\n", "\n")


settings = Settings()
