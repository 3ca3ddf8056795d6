from dotenv import load_dotenv
import os
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


def _default_database_url() -> str:
    db_host = os.getenv("MYSQL_HOST", "db")
    db_user = os.getenv("MYSQL_USER", "user")
    db_password = os.getenv("MYSQL_PASSWORD", "123456")
    db_name = os.getenv("MYSQL_DB", "real_estate")
    db_port = os.getenv("MYSQL_PORT", "3306")
    return f"mysql+pymysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


class Settings(BaseSettings):
    """Runtime configuration read from the environment and `.env`."""

    model_config = SettingsConfigDict(extra="ignore", case_sensitive=False, populate_by_name=True)

    # Database configuration
    database_url: str = Field(default_factory=_default_database_url, alias="DATABASE_URL")

    # JWT configuration
    secret_key: str = Field(default="your_secret_key_here", alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=24 * 60, alias="ACCESS_TOKEN_EXPIRE_MINUTES", ge=1
    )
    token_cookie_name: str = Field(default="token", alias="TOKEN_COOKIE_NAME")

    # Application configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=5000, alias="APP_PORT")
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8501", alias="CORS_ORIGINS"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")

    # Cloudinary configuration
    cloudinary_cloud_name: str = Field(default="", alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str = Field(default="", alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str = Field(default="", alias="CLOUDINARY_API_SECRET")
    cloudinary_folder: str = Field(default="real-estate", alias="CLOUDINARY_FOLDER")

    # Email configuration
    email_from: str = Field(default="no-reply@realestate.com", alias="EMAIL_FROM")
    email_from_name: str = Field(default="Real Estate", alias="EMAIL_FROM_NAME")
    email_port: int = Field(default=1025, alias="EMAIL_PORT")
    email_server: str = Field(default="mailhog", alias="EMAIL_SERVER")
    email_enabled: bool = Field(default=True, alias="EMAIL_ENABLED")

    # Dashboard configuration
    api_base_url: str = Field(default="http://localhost:5000/api", alias="API_BASE_URL")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
