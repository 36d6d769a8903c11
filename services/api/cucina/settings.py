from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Catalog store
    store_backend: Literal["sql", "redis"] = "sql"
    store_key: str = "cucina-app-data"
    database_url: str = "sqlite:///./cucina.db"
    redis_url: str = "redis://localhost:6379/0"

    # HTTP
    rate_limit: str = "100/minute"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost",
        "http://127.0.0.1",
    ]


settings = Settings()
