"""
Best-effort notifications from the diplomacy core.

Other subsystems (achievements, toasts, the royal-family bookkeeping that
attaches a new spouse to the player's line) subscribe here. Emitting with no
subscriber is a no-op, and a failing subscriber never interrupts the core.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class DiplomacyEvent(str, Enum):
    KINGDOM_CREATED = "kingdomCreated"
    KINGDOM_DESTROYED = "kingdomDestroyed"
    MARRIAGE_FORMED = "marriageFormed"
    MARRIAGE_REJECTED = "marriageRejected"
    RULER_SUCCEEDED = "rulerSucceeded"


Listener = Callable[[DiplomacyEvent, dict[str, Any]], None]


class EventBus:
    def __init__(self) -> None:
        self._listeners: dict[DiplomacyEvent, list[Listener]] = defaultdict(list)
        self._wildcard: list[Listener] = []

    def subscribe(self, event: DiplomacyEvent | None, listener: Listener) -> None:
        """Register a listener for one event, or for every event when ``event`` is None."""
        if event is None:
            self._wildcard.append(listener)
        else:
            self._listeners[DiplomacyEvent(event)].append(listener)

    def unsubscribe(self, event: DiplomacyEvent | None, listener: Listener) -> None:
        bucket = self._wildcard if event is None else self._listeners.get(DiplomacyEvent(event), [])
        if listener in bucket:
            bucket.remove(listener)

    def emit(self, event: DiplomacyEvent, payload: dict[str, Any]) -> None:
        listeners = [*self._listeners.get(event, []), *self._wildcard]
        for listener in listeners:
            try:
                listener(event, payload)
            except Exception:  # noqa: BLE001
                logger.exception("Listener %r failed while handling %s", listener, event.value)
