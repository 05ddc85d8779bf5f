from functools import lru_cache
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "project-tracker"
    env: str = "development"

    database_url: str = "sqlite+pysqlite:///./data/projects.db"

    rate_limit_global: str = "100/minute"
    rate_limit_write: str = "30/minute"

    default_page_limit: int = 10
    max_page_limit: int = 100
    max_body_bytes: int = 1_000_000

    cors_origins: str = "http://localhost:5173"
    cors_allow_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allow_headers: str = "Content-Type"
    cors_max_age: int = 600
    log_level: str = "INFO"
    auto_create_tables: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    @model_validator(mode="after")
    def validate_page_limits(self) -> "Settings":
        if self.max_page_limit < 1:
            raise ValueError("MAX_PAGE_LIMIT must be at least 1")
        if not 1 <= self.default_page_limit <= self.max_page_limit:
            raise ValueError("DEFAULT_PAGE_LIMIT must be between 1 and MAX_PAGE_LIMIT")
        return self

    @property
    def is_test(self) -> bool:
        return self.env.lower() == "test"

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def allowed_methods(self) -> list[str]:
        return [
            m.strip().upper() for m in self.cors_allow_methods.split(",") if m.strip()
        ]

    @property
    def allowed_headers(self) -> list[str]:
        return [h.strip() for h in self.cors_allow_headers.split(",") if h.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
