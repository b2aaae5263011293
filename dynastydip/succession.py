import logging

from dynastydip.events import DiplomacyEvent
from dynastydip.kingdoms import KingdomRegistry

logger = logging.getLogger(__name__)


class SuccessionEngine:
    """Ages the royals of every active kingdom and resolves rulers' deaths."""

    def __init__(self, context, registry=None):
        self.context = context
        self.registry = registry or KingdomRegistry(context)

    def age_royals(self):
        config = self.context.config
        step = 1 / config.days_per_year

        for kingdom in self.context.active_kingdoms():
            # The whole family ages before the death roll, so an heir promoted
            # below has aged exactly once today and is not aged again as ruler.
            for member in kingdom.members():
                if member.alive:
                    member.age += step

            if self.ruler_death_check(kingdom):
                self.handle_ruler_death(kingdom)

    def ruler_death_check(self, kingdom) -> bool:
        """Rulers past the death age die with a small daily chance."""
        config = self.context.config
        if kingdom.ruler.age <= config.ruler_death_age:
            return False
        return self.context.rng.random() < config.ruler_death_chance

    def handle_ruler_death(self, kingdom):
        """
        Promote the first living, unmarried heir in list order. A kingdom with
        no such heir dies out with its ruler.
        """
        deceased = kingdom.ruler
        deceased.alive = False

        eligible = [h for h in kingdom.heirs if h.alive and not h.married]
        if not eligible:
            logger.info("%s of %s died without an eligible heir.", deceased.name, kingdom.name)
            self.registry.destroy_kingdom(kingdom.id)
            return None

        successor = eligible[0]
        kingdom.heirs = [h for h in kingdom.heirs if h.id != successor.id]
        successor.married = None
        kingdom.ruler = successor

        logger.info("%s has a new ruler: %s (age %d)", kingdom.name, successor.name, int(successor.age))
        self.context.events.emit(
            DiplomacyEvent.RULER_SUCCEEDED,
            {
                "kingdom": kingdom.model_copy(deep=True),
                "ruler": successor.model_copy(deep=True),
                "previousRuler": deceased.model_copy(deep=True),
            },
        )
        return successor
