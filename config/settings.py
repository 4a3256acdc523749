"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings

from core.errors import ConfigurationError


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = ""                 # HMAC secret for bearer tokens (required)
    jwt_algorithm: str = "HS256"
    jwt_expiry_seconds: int = 604800     # 7 days; 0 issues tokens without ``exp``
    password_iterations: int = 10000     # PBKDF2-HMAC-SHA256 work factor

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = ""               # e.g. postgresql+asyncpg://user:pw@host:5432/todos (required)
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_recycle: int = 3600
    db_timeout_seconds: float = 10.0     # per persistence call; 0 disables
    db_auto_create: bool = True          # create tables at startup

    # ── Error responses ──────────────────────────────────────────────────
    strict_status_codes: bool = False    # 409/404/401 instead of the legacy 400s
    expose_error_details: bool = False   # never enable in production

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    def validate_runtime(self) -> None:
        """
        Fail fast when a required setting is missing.

        Only the setting names are reported, never their values.
        """
        missing = [
            name
            for name in ("database_url", "jwt_secret")
            if not getattr(self, name).strip()
        ]
        if missing:
            raise ConfigurationError(
                "Missing required configuration: "
                + ", ".join(name.upper() for name in missing)
            )


config = Settings()
