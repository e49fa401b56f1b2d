"""Domain models for the notification center."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Callable

from pydantic import BaseModel, Field


Handler = Callable[[str, Any], None]


class HandlerErrorPolicy(StrEnum):
    PROPAGATE = "propagate"
    ISOLATE = "isolate"


class KeyMode(StrEnum):
    TYPE = "type"
    INSTANCE = "instance"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Subscription(BaseModel):
    """Handle returned by ``NotificationCenter.subscribe``.

    Pass it back to ``NotificationCenter.cancel`` to remove exactly the
    handler it was issued for.
    """

    id: str = Field(default_factory=_new_id)
    owner_key: str
    event_name: str
    created_at: datetime = Field(default_factory=_utcnow)


class DeliveryFailure(BaseModel):
    subscription_id: str
    owner_key: str
    error: str


class DeliveryReport(BaseModel):
    """Outcome of a single ``publish`` call."""

    event_name: str
    delivered: int = 0
    failures: list[DeliveryFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class DeliveryRecord(BaseModel):
    id: str = Field(default_factory=_new_id)
    listener: str
    event_name: str
    payload: Any = None
    received_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class PublishRequest(BaseModel):
    payload: Any = None


class UnsubscribeResponse(BaseModel):
    removed: bool
