import os
from typing import Optional

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.mongodb_uri = self._get("MONGODB_URI")
        self.mongodb_database = os.getenv("MONGODB_DATABASE", "restaurant")
        self.mongodb_timeout_ms = self._get_int("MONGODB_TIMEOUT_MS", default=5000)
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = self._get_int("PORT", default=5000)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=10)
        self.password_reset_enabled = self._get_bool("PASSWORD_RESET_ENABLED", default=True)
        self.otp_expiry_minutes = self._get_int("OTP_EXPIRY_MINUTES", default=5)
        self.otp_cooldown_seconds = self._get_int("OTP_COOLDOWN_SECONDS", default=60)
        self.smtp_host = os.getenv("SMTP_HOST", "smtp.gmail.com")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        if self.password_reset_enabled:
            self.smtp_username: Optional[str] = self._get("SMTP_USERNAME")
            self.smtp_password: Optional[str] = self._get("SMTP_PASSWORD")
        else:
            self.smtp_username = os.getenv("SMTP_USERNAME")
            self.smtp_password = os.getenv("SMTP_PASSWORD")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL") or self.smtp_username
        self.smtp_from_name = os.getenv("SMTP_FROM_NAME", "Restaurant")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["http://localhost:5174"]

    @staticmethod
    def _get(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return value

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in _TRUTHY:
            return True
        if normalized in _FALSY:
            return False
        raise RuntimeError(f"Environment variable {key} must be a boolean")
