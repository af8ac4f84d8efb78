from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    APP_TITLE: str = Field("Product API")
    APP_VERSION: str = Field("1.0.0")
    APP_DESCRIPTION: str = Field("API documentation for the Product application.")
    LOG_LEVEL: str = Field("INFO")

    # OpenAPI / docs
    OPENAPI_SERVER_URL: str = Field("http://localhost:8080")
    OPENAPI_SERVER_DESCRIPTION: str = Field("Local Development Server")
    DISABLE_DOCS: bool = False

    # CORS: "http://localhost:3000,https://example.com"
    CORS_ORIGINS: Optional[str] = None

    # DB
    DATABASE_URL: str = Field("sqlite:///./app.db", description="postgresql+psycopg://appuser:<PASS>@db:5432/appdb")
    DB_SCHEMA: Optional[str] = None
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 1800  # sec (30 min)
    DB_POOL_TIMEOUT: int = 30    # sec

    # Creează tabelele din modele la pornire (fără migrații)
    SQLALCHEMY_CREATE_ALL: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in (self.CORS_ORIGINS or "").split(",") if o.strip()]


settings = Settings()
