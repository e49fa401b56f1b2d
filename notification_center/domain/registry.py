"""Synchronous in-process notification center.

Handlers are registered against an owner and an event name. The owner only
contributes its type (or, in instance key mode, its identity): every instance
of a class shares one bucket, and ``unsubscribe`` drops that whole bucket.

In instance key mode a bucket belongs to the owner object itself. The owner is
held by weak reference where possible and its bucket is dropped once it is
garbage-collected, so a later object reusing the same ``id`` never inherits it.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Any, Callable, ClassVar

from notification_center.domain.models import (
    DeliveryFailure,
    DeliveryReport,
    Handler,
    HandlerErrorPolicy,
    KeyMode,
    Subscription,
)
from notification_center.services.owner_keys import owner_key

logger = logging.getLogger(__name__)

_Registration = tuple[Subscription, Handler]


def _check_event_name(event_name: Any) -> None:
    if not isinstance(event_name, str) or not event_name:
        raise ValueError("event_name must be a non-empty string")


def _owner_ref(owner: Any, on_collected: Callable[[Any], None]) -> Callable[[], Any]:
    try:
        return weakref.ref(owner, on_collected)
    except TypeError:
        # not weak-referenceable: held strongly so its id stays reserved
        return lambda: owner


class NotificationCenter:
    """Publish/subscribe registry keyed by owner type and event name.

    Handlers for one (owner, event name) pair run in registration order.
    Publishing is synchronous: ``publish`` returns once every matching handler
    has run.
    """

    _shared: ClassVar[NotificationCenter | None] = None
    _shared_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        error_policy: HandlerErrorPolicy = HandlerErrorPolicy.PROPAGATE,
        key_mode: KeyMode = KeyMode.TYPE,
    ) -> None:
        self.error_policy = error_policy
        self.key_mode = key_mode
        self._buckets: dict[str, dict[str, list[_Registration]]] = {}
        self._owners: dict[str, Callable[[], Any]] = {}
        self._collected: list[str] = []
        self._lock = threading.RLock()

    @classmethod
    def shared(cls) -> NotificationCenter:
        """Return the process-wide instance, creating it on first use."""
        if cls._shared is None:
            with cls._shared_lock:
                if cls._shared is None:
                    cls._shared = cls()
        return cls._shared

    @classmethod
    def reset_shared(cls) -> None:
        with cls._shared_lock:
            cls._shared = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def subscribe(
        self, owner: Any, event_name: str, handler: Handler
    ) -> Subscription | None:
        _check_event_name(event_name)
        if not callable(handler):
            raise TypeError("handler must be callable")

        key = owner_key(owner, self.key_mode)
        if key is None:
            logger.debug("Ignoring subscription to %r: owner type unresolved", event_name)
            return None

        subscription = Subscription(owner_key=key, event_name=event_name)
        with self._lock:
            self._purge_collected()
            if self.key_mode == KeyMode.INSTANCE:
                self._claim(key, owner)
            bucket = self._buckets.setdefault(key, {})
            bucket.setdefault(event_name, []).append((subscription, handler))
        logger.debug("Subscribed %s to %r (%s)", key, event_name, subscription.id)
        return subscription

    def unsubscribe(self, owner: Any) -> bool:
        """Remove every subscription stored under the owner's key.

        In type key mode this affects all instances of the owner's class.
        """
        key = owner_key(owner, self.key_mode)
        if key is None:
            return False

        with self._lock:
            self._purge_collected()
            removed = self._drop(key) if self._owned_by(key, owner) else None
        if removed is None:
            logger.info("Notification not found for %s", key)
            return False

        logger.debug("Unsubscribed %s from %d event(s)", key, len(removed))
        return True

    def cancel(self, subscription: Subscription | str) -> bool:
        """Remove the single handler registered under a subscription handle."""
        sub_id = subscription if isinstance(subscription, str) else subscription.id

        with self._lock:
            self._purge_collected()
            for key, bucket in self._buckets.items():
                for event_name, registrations in bucket.items():
                    for index, (sub, _) in enumerate(registrations):
                        if sub.id != sub_id:
                            continue
                        del registrations[index]
                        if not registrations:
                            del bucket[event_name]
                        if not bucket:
                            self._drop(key)
                        logger.debug("Cancelled subscription %s", sub_id)
                        return True

        logger.info("Subscription %s not found", sub_id)
        return False

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._owners.clear()
            self._collected.clear()

    # ------------------------------------------------------------------
    # Owner tracking (instance key mode)
    # ------------------------------------------------------------------

    def _claim(self, key: str, owner: Any) -> None:
        ref = self._owners.get(key)
        if ref is not None and ref() is owner:
            return
        # a bucket under this key belonged to a collected owner with the same id
        self._buckets.pop(key, None)
        self._owners[key] = _owner_ref(owner, lambda _ref: self._collected.append(key))

    def _owned_by(self, key: str, owner: Any) -> bool:
        if self.key_mode != KeyMode.INSTANCE:
            return True
        ref = self._owners.get(key)
        return ref is not None and ref() is owner

    def _purge_collected(self) -> None:
        collected, self._collected = self._collected, []
        for key in collected:
            ref = self._owners.get(key)
            if ref is not None and ref() is None:
                self._drop(key)
                logger.debug("Dropped subscriptions of collected owner %s", key)

    def _drop(self, key: str) -> dict[str, list[_Registration]] | None:
        self._owners.pop(key, None)
        return self._buckets.pop(key, None)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def publish(self, event_name: str, payload: Any = None) -> DeliveryReport:
        """Deliver ``(event_name, payload)`` to every matching handler.

        Handlers registered while a publish is running are not called by it.
        With ``HandlerErrorPolicy.PROPAGATE`` the first handler exception
        reaches the caller and later handlers are skipped; with
        ``HandlerErrorPolicy.ISOLATE`` it is logged and recorded in the report.
        """
        _check_event_name(event_name)

        with self._lock:
            self._purge_collected()
            targets = [
                registration
                for bucket in self._buckets.values()
                for name, registrations in bucket.items()
                if name == event_name
                for registration in registrations
            ]

        report = DeliveryReport(event_name=event_name)
        for subscription, handler in targets:
            if self.error_policy == HandlerErrorPolicy.PROPAGATE:
                handler(event_name, payload)
                report.delivered += 1
                continue

            try:
                handler(event_name, payload)
            except Exception as exc:
                logger.exception(
                    "Handler for %r owned by %s failed",
                    event_name,
                    subscription.owner_key,
                )
                report.failures.append(
                    DeliveryFailure(
                        subscription_id=subscription.id,
                        owner_key=subscription.owner_key,
                        error=repr(exc),
                    )
                )
            else:
                report.delivered += 1

        return report

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def is_subscribed(self, owner: Any, event_name: str | None = None) -> bool:
        key = owner_key(owner, self.key_mode)
        if key is None:
            return False
        with self._lock:
            self._purge_collected()
            bucket = self._buckets.get(key) if self._owned_by(key, owner) else None
            if not bucket:
                return False
            return event_name is None or event_name in bucket

    def owner_keys(self) -> list[str]:
        with self._lock:
            self._purge_collected()
            return list(self._buckets)

    def stats(self) -> dict[str, dict[str, int]]:
        """Handler counts per owner key and event name."""
        with self._lock:
            self._purge_collected()
            return {
                key: {name: len(regs) for name, regs in bucket.items()}
                for key, bucket in self._buckets.items()
            }

    def __len__(self) -> int:
        with self._lock:
            self._purge_collected()
            return sum(
                len(regs) for bucket in self._buckets.values() for regs in bucket.values()
            )
