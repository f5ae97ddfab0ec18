"""
Environment-driven settings. A ``.env`` file in the working directory is
loaded first; real environment variables win over it.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

import pydantic
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .errors import ValidationError

DEFAULT_DATABASE_URL = "sqlite:///mintpool.db"


def postgres_url(env: Mapping[str, str]) -> Optional[str]:
    """Compose a URL from POSTGRES_* variables, if the required ones are set."""
    try:
        user = env["POSTGRES_USER"]
        password = env["POSTGRES_PASSWORD"]
        db = env["POSTGRES_DB"]
    except KeyError:
        return None
    host = env.get("POSTGRES_HOST", "localhost")
    return "postgresql://" + user + ":" + password + "@" + host + "/" + db


class Settings(BaseModel):
    app_name: str = "mintpool"
    database_url: str = DEFAULT_DATABASE_URL
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)
    log_level: str = "INFO"

    model_config = {"frozen": True}

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {value!r}")
        return value

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ

        values = {
            "app_name": env.get("MINTPOOL_APP_NAME"),
            "database_url": env.get("MINTPOOL_DATABASE_URL") or postgres_url(env),
            "host": env.get("MINTPOOL_HOST"),
            "port": env.get("MINTPOOL_PORT"),
            "log_level": env.get("MINTPOOL_LOG_LEVEL"),
        }
        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except pydantic.ValidationError as exc:
            raise ValidationError(f"invalid settings: {exc}") from exc
