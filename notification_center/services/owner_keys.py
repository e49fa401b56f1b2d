"""Service for deriving the registry key of a subscription owner."""

from __future__ import annotations

from typing import Any

from notification_center.domain.models import KeyMode


def type_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def owner_key(owner: Any, mode: KeyMode = KeyMode.TYPE) -> str | None:
    """Return the key an owner's subscriptions are stored under.

    In ``KeyMode.TYPE`` every instance of a class shares one key, and a class
    passed directly stands for its instances. ``KeyMode.INSTANCE`` appends the
    object identity so two instances never share a bucket.

    ``None`` has no resolvable owner type and yields ``None``.
    """
    if owner is None:
        return None

    if isinstance(owner, type):
        return type_name(owner)

    key = type_name(type(owner))
    if mode == KeyMode.INSTANCE:
        return f"{key}@{id(owner):x}"
    return key
