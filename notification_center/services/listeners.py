"""Sample consumers of the notification center."""

from __future__ import annotations

import logging
from typing import Any

from notification_center.domain.events import LIVE_SCORE_ALERTS
from notification_center.domain.models import DeliveryRecord, Subscription
from notification_center.domain.registry import NotificationCenter
from notification_center.repos.memory import DeliveryLogRepository

logger = logging.getLogger(__name__)


class ScoreListener:
    """Listens for live score alerts and writes each one to the delivery log.

    Subscriptions are keyed by type, so ``stop_listening`` on any instance
    stops every ScoreListener.
    """

    notification_name: str = LIVE_SCORE_ALERTS

    def __init__(
        self, center: NotificationCenter, deliveries: DeliveryLogRepository
    ) -> None:
        self.center = center
        self.deliveries = deliveries

    def start_listening(self) -> Subscription | None:
        return self.center.subscribe(self, self.notification_name, self.on_notification)

    def stop_listening(self) -> bool:
        return self.center.unsubscribe(self)

    def on_notification(self, event_name: str, payload: Any) -> None:
        logger.info("%s notification closure", self.notification_name)
        self.deliveries.add(
            DeliveryRecord(
                listener=type(self).__name__,
                event_name=event_name,
                payload=payload,
            )
        )
