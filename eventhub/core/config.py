# eventhub/core/config.py

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Local development default; rejected outside local mode
DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"

    # --- Database URLs ---
    DATABASE_URL_LOCAL: str = "sqlite:///./eventhub.db"
    DATABASE_URL_PROD: str | None = None

    # --- Tokens ---
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 300
    RESET_TOKEN_EXPIRE_MINUTES: int = 10

    # Frontend origin, used for CORS and for the password reset link
    CLIENT_URL: str = "http://localhost:3000"

    # --- Email (Resend) ---
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "noreply@eventhub.local"

    # Seeded on startup when both are set
    FIRST_ADMIN_EMAIL: str | None = None
    FIRST_ADMIN_PASSWORD: str | None = None

    RATE_LIMIT_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def check_jwt_secret(self):
        if self.ENV != "local" and (
            not self.JWT_SECRET or self.JWT_SECRET == DEFAULT_JWT_SECRET
        ):
            raise ValueError("JWT_SECRET must be set outside local mode")
        return self

    # --- Dynamic Properties ---
    @property
    def DATABASE_URL(self) -> str:
        if self.ENV == "local":
            return self.DATABASE_URL_LOCAL
        if not self.DATABASE_URL_PROD:
            raise ValueError("DATABASE_URL_PROD must be set outside local mode")
        return self.DATABASE_URL_PROD


# Create a single instance of the settings
settings = Settings()
