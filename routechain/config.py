"""
Application settings.

Settings is a frozen pydantic model: validated once, immutable afterwards.
Override what you need directly or through environment variables::

    settings = Settings(debug=True, port=3000)
    settings = Settings.from_env()  # reads ROUTECHAIN_DEBUG, ROUTECHAIN_PORT, ...
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Runtime settings for the ASGI adapter, logging and the CLI."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Runtime
    environment: str = "production"
    debug: bool = False  # include exception details in 500 responses

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True
    log_file: Optional[str] = None

    # Server (used by `routechain dev` and `routechain run`)
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=0, le=65535)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if isinstance(value, str):
            value = value.strip().upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @classmethod
    def from_env(
        cls,
        prefix: str = "ROUTECHAIN_",
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Each field is read from ``<prefix><FIELD NAME IN UPPERCASE>``; pydantic
        coerces the strings ("true", "8000", ...). Keyword overrides win over
        the environment.

        Raises:
            pydantic.ValidationError: If a value cannot be coerced
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = f"{prefix}{name.upper()}"
            if key in environ:
                values[name] = environ[key]
        values.update(overrides)
        return cls.model_validate(values)
