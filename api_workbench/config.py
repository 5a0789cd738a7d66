"""Application settings and loading."""

import json
import os
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError

ENV_PREFIX = "API_WORKBENCH_"

# Fixed per-call budget from request start to full response headers
DEFAULT_REQUEST_TIMEOUT = 30.0


class Settings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    database_url: str = "sqlite:///./api_workbench.db"
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    rate_limit: float = 10.0
    rate_limit_burst: int = Field(default=30, ge=1)
    log_level: str = "INFO"
    log_file: str | None = None
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from API_WORKBENCH_* environment variables.

    `cors_origins` accepts either a JSON list or a comma-separated string.
    Unknown variables are ignored.
    """
    if environ is None:
        environ = os.environ

    data: dict[str, object] = {}
    for name in Settings.model_fields:
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw is None:
            continue
        if name == "cors_origins":
            data[name] = _parse_list(raw)
        else:
            data[name] = raw

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def _parse_list(raw: str) -> list[str]:
    raw = raw.strip()
    if raw.startswith("["):
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid list value: {raw}") from e
        return [str(item) for item in value]
    return [item.strip() for item in raw.split(",") if item.strip()]
