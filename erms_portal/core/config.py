import os
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env.production", ".env"),
        case_sensitive=False,
        extra="allow",
    )

    port: int = int(os.getenv("PORT", 8000))
    api_prefix: str = "/api"

    # Upstream ERMS API
    erms_api_base: str = "http://localhost:5000/api"
    request_timeout: float = 15.0

    # Query cache
    cache_ttl_seconds: float = 30.0

    # Session cookie (holds the bearer token between requests)
    token_cookie_name: str = "auth_token"
    cookie_secure: bool = False

    log_level: str = "INFO"

    # CORS, comma-separated
    cors_origins: str = "*"

    def build_api_base(self) -> str:
        return self.erms_api_base.rstrip("/")

    def cors_origin_list(self) -> List[str]:
        return [v.strip() for v in self.cors_origins.split(",") if v.strip()]


settings = Settings()
