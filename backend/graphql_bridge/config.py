from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    runtime_mode: Literal["auto", "local_http", "function_invocation"] = Field(
        default="auto", alias="RUNTIME_MODE"
    )

    # Set by the function host for every invocation environment.
    aws_lambda_function_name: str | None = Field(default=None, alias="AWS_LAMBDA_FUNCTION_NAME")
    aws_lambda_runtime_api: str | None = Field(default=None, alias="AWS_LAMBDA_RUNTIME_API")

    api_base_path: str = Field(default="", alias="API_BASE_PATH")

    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    # Names uvicorn accepts as well as the stdlib.
    log_level: Literal["critical", "error", "warning", "info", "debug"] = Field(
        default="info", alias="LOG_LEVEL"
    )

    allowed_origins: str = Field(default="http://localhost:5173", alias="ALLOWED_ORIGINS")

    @field_validator("runtime_mode", mode="before")
    @classmethod
    def normalize_runtime_mode(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or "auto"
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("api_base_path")
    @classmethod
    def normalize_base_path(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    @property
    def has_function_signal(self) -> bool:
        return bool(self.aws_lambda_function_name or self.aws_lambda_runtime_api)

    @property
    def allowed_origins_list(self) -> list[str]:
        origins: list[str] = []
        for origin in self.allowed_origins.split(","):
            normalized_origin = origin.strip().rstrip("/")
            if normalized_origin:
                origins.append(normalized_origin)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
