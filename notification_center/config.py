"""Runtime settings and logging setup."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, field_validator

from notification_center.domain.models import HandlerErrorPolicy, KeyMode


class Settings(BaseModel):
    log_level: str = "INFO"
    handler_errors: HandlerErrorPolicy = HandlerErrorPolicy.ISOLATE
    key_mode: KeyMode = KeyMode.TYPE

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``NOTIFY_*`` environment variables."""
        values: dict[str, str] = {}
        if level := os.environ.get("NOTIFY_LOG_LEVEL"):
            values["log_level"] = level
        if policy := os.environ.get("NOTIFY_HANDLER_ERRORS"):
            values["handler_errors"] = policy.lower()
        if mode := os.environ.get("NOTIFY_KEY_MODE"):
            values["key_mode"] = mode.lower()
        return cls(**values)


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging with a readable format."""
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
