import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _build_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    return "postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}".format(
        user=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD", "postgres"),
        host=os.getenv("DB_HOST", "localhost"),
        port=os.getenv("DB_PORT", "5432"),
        name=os.getenv("DB_NAME", "performance_tracker"),
        sslmode=os.getenv("DB_SSLMODE", "disable"),
    )


class Config(BaseModel):
    app_name: str = "Performance Tracker"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api/v1"
    version: str = "1.0.0"

    # Server
    host: str = os.getenv("HOST", "localhost")
    port: int = int(os.getenv("PORT", "8080"))

    # Database
    database_url: str = Field(default_factory=_build_database_url)

    # Auth
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = os.getenv("JWT_ISSUER", "performance-tracker")
    access_token_expire_hours: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24"))
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # First-admin bootstrap
    install_key: str = os.getenv("INSTALL_KEY", "dev-only-install-key")
    default_company_name: str = os.getenv("DEFAULT_COMPANY_NAME", "Default Company")

    request_id_header: str = "X-Request-ID"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    rate_limit_login: str = os.getenv("RATE_LIMIT_LOGIN", "10/minute")

    # CORS: the configured origin first, local dev servers appended.
    cors_origin: Optional[str] = os.getenv("CORS_ORIGIN", "http://localhost:5173")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )

    @property
    def allowed_origins(self) -> List[str]:
        """Configured origin plus defaults, without duplicates or blanks."""
        origins = []
        for origin in [self.cors_origin, *self.cors_origins]:
            if origin and origin not in origins:
                origins.append(origin)
        return origins

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    _critical_missing = []
    if "dev-only" in settings.jwt_secret:
        _critical_missing.append("JWT_SECRET")
    if "dev-only" in settings.install_key:
        _critical_missing.append("INSTALL_KEY")
    if _critical_missing:
        raise RuntimeError(
            f"FATAL: The following secrets must be set for non-development environments: "
            f"{', '.join(_critical_missing)}. Set them as environment variables."
        )
elif "dev-only" in settings.jwt_secret:
    _logger.warning("Using insecure default JWT_SECRET - only acceptable in development.")
