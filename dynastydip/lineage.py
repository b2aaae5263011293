import logging

logger = logging.getLogger(__name__)


class LineageTracker:
    """Ancestor sets per person, used to detect inbreeding between royals."""

    def __init__(self, context):
        self.context = context

    @property
    def _store(self):
        return self.context.lineage

    def register_lineage(self, person_id, parent_ids) -> frozenset:
        """
        Record the ancestors of person_id: its parents plus each parent's own
        ancestors. A record is written once; later registrations for the same
        person are ignored.
        """
        if person_id in self._store:
            logger.warning("Lineage for %s already registered. Ignoring new parents %s.", person_id, list(parent_ids))
            return frozenset(self._store[person_id])

        ancestors = set(parent_ids)
        for parent_id in parent_ids:
            ancestors.update(self._store.get(parent_id, ()))
        ancestors.discard(person_id)

        self._store[person_id] = ancestors
        return frozenset(ancestors)

    def ancestors(self, person_id) -> frozenset:
        return frozenset(self._store.get(person_id, ()))

    def check_inbreeding(self, person_id1, person_id2) -> bool:
        """True if the two people share any ancestor, at any depth."""
        ancestors1 = self._store.get(person_id1, set())
        ancestors2 = self._store.get(person_id2, set())
        return not ancestors1.isdisjoint(ancestors2)

    def items(self) -> dict[str, frozenset]:
        return {person_id: frozenset(a) for person_id, a in self._store.items()}
