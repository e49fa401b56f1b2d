"""Notification names and payloads used by the bundled listeners."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

LIVE_SCORE_ALERTS = "Live score alerts"


class LiveScoreAlert(BaseModel):
    """Payload posted under ``LIVE_SCORE_ALERTS``."""

    match_id: str
    home_score: int = Field(ge=0)
    away_score: int = Field(ge=0)
    minute: int | None = Field(default=None, ge=0)
    posted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
