from functools import lru_cache
from typing import Annotated, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: Literal["development", "staging", "production"] = "development"
    port: int = 3000
    log_level: str = "INFO"
    tracing_enabled: bool = True

    # Token store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./comanda.db",
        validation_alias=AliasChoices("database_url", "COMANDA_DATABASE_URL"),
    )
    database_echo: bool = False

    # Push provider
    firebase_credentials_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "firebase_credentials_path",
            "FIREBASE_CREDENTIALS_PATH",
            "SERVICE_ACCOUNT",
        ),
    )
    firebase_app_name: str = "comanda-notifications"

    # Mail relay
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    smtp_use_ssl: bool = True
    smtp_use_tls: bool = False
    smtp_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("smtp_username", "SMTP_USERNAME", "MAIL"),
    )
    smtp_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("smtp_password", "SMTP_PASSWORD", "PASSWORD"),
    )
    smtp_sender_email: str | None = None
    smtp_sender_name: str = "Mi Comanda"
    smtp_timeout_seconds: float = 10.0

    # HTTP surface
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allowed_methods: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE"]
    )
    cors_allowed_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["Content-Type", "Authorization"]
    )

    @field_validator("cors_allowed_origins", "cors_allowed_methods", "cors_allowed_headers", mode="before")
    @classmethod
    def _parse_csv_list(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple, set)):
            return [str(item).strip() for item in value if str(item).strip()]
        return []

    @property
    def mail_sender_address(self) -> str | None:
        """Envelope sender, falling back to the authenticated SMTP account."""

        return self.smtp_sender_email or self.smtp_username

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_username and self.smtp_password)


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
