"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version
    VERSION: str = "0.1.0"

    # Database (Postgres in production, SQLite for local runs)
    DATABASE_URL: str = "sqlite:///./statuspage.db"

    # Identity provider (Clerk Backend API)
    CLERK_SECRET_KEY: str = ""
    CLERK_API_URL: str = "https://api.clerk.com/v1"
    CLERK_API_TIMEOUT: float = 10.0

    # Session token verification (PEM public key for RS256, shared secret for HS256)
    SESSION_JWT_KEY: str = ""
    SESSION_JWT_ALGORITHMS: str = "RS256"
    SESSION_JWT_LEEWAY: int = 5
    SESSION_COOKIE_NAME: str = "__session"

    # Username that is always treated as an administrator
    SUPERADMIN_USERNAME: str = "admin123"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Logging / error tracking
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute, 0 disables)
    RATE_LIMIT_API: int = 120
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def session_jwt_algorithms_list(self) -> list[str]:
        """Parse SESSION_JWT_ALGORITHMS into a list."""
        return [a.strip() for a in self.SESSION_JWT_ALGORITHMS.split(",") if a.strip()]


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
