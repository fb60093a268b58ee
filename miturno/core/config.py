from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    database_ssl: bool = True

    # JWT
    secret_key: str
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    algorithm: str = "HS256"
    bcrypt_rounds: int = 12

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Booking rules
    default_service_duration_minutes: int = 30
    min_password_length: int = 6

    # Env
    env: str = "development"

    # Email. "smtp" uses the SMTP settings, "resend" posts to the Resend API.
    email_provider: str = "smtp"
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    from_email: str = ""
    from_name: str = "MiTurno"
    site_name: str = "MiTurno"
    currency_symbol: str = "$"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def email_enabled(self) -> bool:
        if not self.from_email:
            return False
        if self.email_provider == "resend":
            return bool(self.resend_api_key)
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)


settings = Settings()
