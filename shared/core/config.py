import os
from typing import List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    APP_NAME: str = os.getenv("APP_NAME", "Luxury Hotel")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", 1440))  # 24 hours default

    # Full URLs win over the postgres parts below (sqlite is used by the tests)
    AUTH_DATABASE_URL: Optional[str] = os.getenv("AUTH_DATABASE_URL")
    HOTEL_DATABASE_URL: Optional[str] = os.getenv("HOTEL_DATABASE_URL")

    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST", "localhost")
    DB_PORT: str | None = os.getenv("DB_PORT", "5432")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "prefer")
    AUTH_DB_NAME: str | None = os.getenv("AUTH_DB_NAME", "hotel_auth")
    HOTEL_DB_NAME: str | None = os.getenv("HOTEL_DB_NAME", "hotel")

    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Email configuration for reservation and invoice mails
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", 587))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_USE_SSL: bool = os.getenv("SMTP_USE_SSL", "False").lower() == "true"
    EMAIL_SENDER: str = os.getenv("EMAIL_SENDER", "noreply@luxuryhotel.com")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()


def _postgres_url(db_name: str | None) -> str:
    return (
        f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{db_name}?sslmode={settings.DB_SSLMODE}"
    )


AUTH_DATABASE_URL = settings.AUTH_DATABASE_URL or _postgres_url(
    settings.AUTH_DB_NAME)

HOTEL_DATABASE_URL = settings.HOTEL_DATABASE_URL or _postgres_url(
    settings.HOTEL_DB_NAME)
