from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "Planner API"
    API_VERSION: str = "1.0.1"
    ENV: str = "production"

    # auth
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # database
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "planner_db"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    FRONTEND_URL: str = "http://localhost:3000"
    DEFAULT_TIMEZONE: str = "UTC"

    # email
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: str = "us-east-2"
    SES_SENDER: str = "Planner <noreply@planner.local>"

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @property
    def is_development(self) -> bool:
        return self.ENV.lower() in ("dev", "development", "test")


settings = Settings()
