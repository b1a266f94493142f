import warnings
from typing import List, Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ── Known insecure default secrets (must never be used in production) ──
_INSECURE_SECRETS = {
    "",
    "change_this",
    "super-secret-jwt-token-with-at-least-32-characters-long",
}


class Settings(BaseSettings):
    APP_NAME: str = "BlueprintOS"
    APP_ENV: str = "development"
    API_V1_STR: str = "/api/v1"

    # CORS
    BACKEND_CORS_ORIGINS: str = ""

    # Database (DATABASE_URL wins when set)
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "blueprintos"

    # Workspace hosting
    ROOT_DOMAIN: str = "blueprintos.com"
    RESERVED_SUBDOMAINS: List[str] = ["www", "app", "admin"]
    SUBDOMAIN_ALLOCATION_ATTEMPTS: int = 3

    # Identity provider (Supabase)
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = "change_this"
    SUPABASE_JWT_AUDIENCE: str = "authenticated"

    # OpenAI (landing page copy generation)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4"
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_MAX_TOKENS: int = 1500
    OPENAI_TIMEOUT: float = 30.0

    # Provisioning
    TRIAL_DAYS: int = 14

    # Profile loading (seconds between attempts after signup)
    PROFILE_LOAD_DELAYS: List[float] = [0.2, 0.5, 1.0, 2.0, 3.0]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @model_validator(mode="after")
    def _validate_production_security(self) -> "Settings":
        """Block startup if critical secrets are insecure in production / staging."""
        if self.APP_ENV in ("production", "staging"):
            if self.SUPABASE_JWT_SECRET in _INSECURE_SECRETS or len(self.SUPABASE_JWT_SECRET) < 32:
                raise ValueError(
                    "SUPABASE_JWT_SECRET is insecure. "
                    "Copy the project JWT secret into .env or the environment."
                )
            if not self.SUPABASE_SERVICE_ROLE_KEY:
                raise ValueError(
                    "SUPABASE_SERVICE_ROLE_KEY is required to provision accounts."
                )
            if not self.DATABASE_URL and self.POSTGRES_PASSWORD in ("postgres", ""):
                raise ValueError(
                    "POSTGRES_PASSWORD is set to default 'postgres'. "
                    "Set a strong password in .env or environment."
                )
            if not self.OPENAI_API_KEY:
                warnings.warn(
                    "OPENAI_API_KEY is not set; landing pages will use the fallback templates.",
                    UserWarning,
                    stacklevel=2,
                )
        return self

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"
        )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_staging(self) -> bool:
        return self.APP_ENV == "staging"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def allows_admin_recovery(self) -> bool:
        return self.is_development or self.is_staging

settings = Settings()
