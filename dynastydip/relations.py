import logging

from utils.utils import clamp

logger = logging.getLogger(__name__)


class RelationLedger:
    """Bilateral relation scalars between the player's dynasty and each kingdom."""

    def __init__(self, context):
        self.context = context

    @property
    def _store(self):
        return self.context.relations

    def _clamp(self, value):
        config = self.context.config
        return clamp(float(value), config.relation_min, config.relation_max)

    def get(self, kingdom_id) -> float:
        return self._store.get(kingdom_id, 0.0)

    def set(self, kingdom_id, value) -> float:
        self._store[kingdom_id] = self._clamp(value)
        return self._store[kingdom_id]

    def seed(self, kingdom_id) -> None:
        """Start tracking a kingdom at the neutral value."""
        self._store[kingdom_id] = 0.0

    def adjust(self, kingdom_id, delta) -> float:
        """Apply a signed change (marriage, gift, rejection) and clamp."""
        previous = self.get(kingdom_id)
        updated = self.set(kingdom_id, previous + delta)
        logger.debug("Relation with %s: %.1f -> %.1f", kingdom_id, previous, updated)
        return updated

    def daily_drift(self) -> None:
        """Move every relation toward zero by the drift step without overshooting."""
        step = self.context.config.relation_drift
        for kingdom_id, value in list(self._store.items()):
            if value > 0:
                self._store[kingdom_id] = max(0.0, value - step)
            elif value < 0:
                self._store[kingdom_id] = min(0.0, value + step)

    def items(self) -> dict[str, float]:
        return dict(self._store)
