"""In-memory repositories for delivered notifications and running listeners."""

from __future__ import annotations

import threading
from typing import Any

from notification_center.domain.models import DeliveryRecord


class DeliveryLogRepository:
    """List-backed store for DeliveryRecord instances."""

    def __init__(self) -> None:
        self._records: list[DeliveryRecord] = []
        self._lock = threading.Lock()

    def add(self, record: DeliveryRecord) -> None:
        with self._lock:
            self._records.append(record)

    def list_all(self) -> list[DeliveryRecord]:
        with self._lock:
            return list(self._records)

    def list_for_event(self, event_name: str) -> list[DeliveryRecord]:
        with self._lock:
            return [r for r in self._records if r.event_name == event_name]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class ListenerRepository:
    """List-backed store for listeners started through the HTTP app."""

    def __init__(self) -> None:
        self._listeners: list[Any] = []
        self._lock = threading.Lock()

    def add(self, listener: Any) -> None:
        with self._lock:
            self._listeners.append(listener)

    def list_all(self) -> list[Any]:
        with self._lock:
            return list(self._listeners)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()
