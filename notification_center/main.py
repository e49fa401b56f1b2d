"""FastAPI application — HTTP surface over an in-process notification center."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import ValidationError

from notification_center.config import Settings, configure_logging
from notification_center.domain.events import LIVE_SCORE_ALERTS, LiveScoreAlert
from notification_center.domain.models import (
    DeliveryRecord,
    DeliveryReport,
    PublishRequest,
    Subscription,
    UnsubscribeResponse,
)
from notification_center.domain.registry import NotificationCenter
from notification_center.repos.memory import DeliveryLogRepository, ListenerRepository
from notification_center.services.listeners import ScoreListener

settings = Settings.from_env()
configure_logging(settings.log_level)

app = FastAPI(title="Notification Center")

# ── Singletons (created at import time for simplicity) ────────────────
center = NotificationCenter(
    error_policy=settings.handler_errors,
    key_mode=settings.key_mode,
)
delivery_repo = DeliveryLogRepository()
listener_repo = ListenerRepository()

# Notification names whose payloads must match a known model
PAYLOAD_MODELS = {LIVE_SCORE_ALERTS: LiveScoreAlert}


def _validated_payload(event_name: str, payload: Any) -> Any:
    model = PAYLOAD_MODELS.get(event_name)
    if model is None:
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False))


# ── Routes ────────────────────────────────────────────────────────────


@app.post("/notifications/{event_name}", response_model=DeliveryReport)
def publish_notification(event_name: str, body: PublishRequest) -> DeliveryReport:
    """Deliver a notification synchronously to every matching handler.

    Payloads for known notification names are validated before delivery.
    """
    payload = _validated_payload(event_name, body.payload)
    return center.publish(event_name, payload)


@app.get("/subscriptions")
def list_subscriptions() -> dict[str, dict[str, int]]:
    """Return handler counts per owner key and notification name."""
    return center.stats()


@app.delete("/subscriptions/{subscription_id}", status_code=204)
def cancel_subscription(subscription_id: str) -> None:
    """Remove a single handler by its subscription handle."""
    if not center.cancel(subscription_id):
        raise HTTPException(status_code=404, detail="Subscription not found")


@app.post("/listeners/score", response_model=Subscription, status_code=201)
def start_score_listener() -> Subscription | None:
    """Create a ScoreListener and subscribe it to live score alerts."""
    listener = ScoreListener(center, delivery_repo)
    listener_repo.add(listener)
    return listener.start_listening()


@app.delete("/listeners/score", response_model=UnsubscribeResponse)
def stop_score_listeners() -> UnsubscribeResponse:
    """Stop every ScoreListener started through this app."""
    removed = False
    for listener in listener_repo.list_all():
        removed = listener.stop_listening() or removed
    listener_repo.clear()
    return UnsubscribeResponse(removed=removed)


@app.get("/deliveries", response_model=list[DeliveryRecord])
def list_deliveries() -> list[DeliveryRecord]:
    """Return every notification the bundled listeners have received."""
    return delivery_repo.list_all()
