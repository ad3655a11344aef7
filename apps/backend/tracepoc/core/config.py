from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="trace-poc", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="APP_LOG_LEVEL")
    public_base_url: str = Field(default="http://localhost:8000", alias="APP_PUBLIC_URL")
    simulated_latency_ms: int = Field(default=100, ge=0, alias="APP_SIMULATED_LATENCY_MS")

    otel_enabled: bool = Field(default=True, alias="OTEL_ENABLED")
    otel_exporter: Literal["otlp", "console", "none"] = Field(default="otlp", alias="OTEL_TRACES_EXPORTER")
    otel_exporter_otlp_endpoint: str = Field(
        default="http://otel-collector:4317",
        alias="OTEL_EXPORTER_OTLP_ENDPOINT",
    )
    otel_service_name: str = Field(default="trace-poc", alias="OTEL_SERVICE_NAME")
    tracer_name: str = Field(default="trace-poc", alias="OTEL_TRACER_NAME")

    @property
    def tracing_active(self) -> bool:
        return self.otel_enabled and self.otel_exporter != "none"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
