from functools import lru_cache
from typing import List, Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


class Settings(BaseSettings):
    # Database
    database_url: str = Field(default="sqlite://data/users.db")
    repository_backend: str = Field(default="tortoise")
    generate_schemas: bool = Field(default=True)

    # Environment
    environment: str = Field(default="development")

    # Logging
    log_level: Optional[str] = Field(default=None)
    log_file: Optional[str] = Field(default=None)

    # CORS
    cors_origins: List[str] = Field(default=["http://localhost:5173"])

    # Paging
    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=20)

    # Rate limiting
    rate_limit: str = Field(default="100/minute")
    rate_limit_enabled: bool = Field(default=True)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator("repository_backend")
    @classmethod
    def validate_repository_backend(cls, v):
        v = v.lower()
        if v not in ("tortoise", "memory"):
            raise ValueError("REPOSITORY_BACKEND must be 'tortoise' or 'memory'")
        return v

    @model_validator(mode="after")
    def validate_page_sizes(self):
        if self.default_page_size < 1:
            raise ValueError("DEFAULT_PAGE_SIZE must be at least 1")
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE must not exceed MAX_PAGE_SIZE")
        return self

    @property
    def effective_log_level(self) -> str:
        # 本番環境ではINFO、それ以外ではDEBUGを既定とする
        if self.log_level:
            return self.log_level.upper()
        return "INFO" if self.environment == "production" else "DEBUG"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
