import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

class Settings(BaseSettings):
    """Application settings."""

    # Application
    PROJECT_NAME: str = "FitCoach API"
    PROJECT_DESCRIPTION: str = "Backend API for the FitCoach Plus coaching platform"
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev_secret_key")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60  # 1 hour
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30  # 30 days
    JWT_ALGORITHM: str = "HS256"

    # Students added by a trainer log in with this password until they change it
    STUDENT_TEMP_PASSWORD: str = os.getenv("STUDENT_TEMP_PASSWORD", "temp123456")

    # One-off diet plan price for trainers on the free plan (cents)
    DIET_PLAN_PRICE_CENTS: int = int(os.getenv("DIET_PLAN_PRICE_CENTS", "790"))
    CURRENCY: str = os.getenv("CURRENCY", "BRL")

    # Local document store (localStorage stand-in used for demos and tests)
    LOCAL_STORAGE_PATH: str = os.getenv("LOCAL_STORAGE_PATH", "./fitcoach_local_storage.json")
    LOCAL_SESSION_HOURS: int = int(os.getenv("LOCAL_SESSION_HOURS", "24"))

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost", "http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]

    # Database
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOCAL_DATABASE_URL: str = os.getenv("LOCAL_DATABASE_URL", "sqlite:///./fitcoach_dev.db")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() == "true"
    AUTO_CREATE_TABLES: bool = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

    @property
    def database_url(self) -> str:
        """Get database URL based on environment."""
        if self.ENVIRONMENT == "development" or not self.DATABASE_URL:
            base_url = self.LOCAL_DATABASE_URL
        else:
            base_url = self.DATABASE_URL

        # Heroku-style URLs are not accepted by SQLAlchemy 1.4+
        if base_url.startswith("postgres://"):
            return base_url.replace("postgres://", "postgresql://", 1)
        return base_url

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

settings = Settings()
