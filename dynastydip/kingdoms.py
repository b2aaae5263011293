import logging

from dynastydip.events import DiplomacyEvent
from dynastydip.models import Gender, Kingdom, Person
from dynastydip.name_loader import DYNASTIES, KINGDOMS
from dynastydip.relations import RelationLedger
from utils.utils import generate_entity_id

logger = logging.getLogger(__name__)


class KingdomRegistry:
    """Creates, looks up and destroys the rival kingdoms."""

    def __init__(self, context, relations=None):
        self.context = context
        self.relations = relations or RelationLedger(context)

    # ------------------------------------------------------------------
    #  Lookups
    # ------------------------------------------------------------------

    def get_kingdom(self, kingdom_id):
        return self.context.find_kingdom(kingdom_id)

    def active_kingdoms(self):
        return self.context.active_kingdoms()

    def active_count(self):
        return len(self.context.active_kingdoms())

    def unused_names(self):
        taken = {k.name for k in self.context.kingdoms}
        return [n for n in self.context.name_loader.get_all_names(KINGDOMS) if n not in taken]

    # ------------------------------------------------------------------
    #  Generation
    # ------------------------------------------------------------------

    def _roll(self, int_range):
        return self.context.rng.randint(int_range.min, int_range.max)

    def generate_traits(self):
        """1-2 distinct traits from the configured pool, in draw order."""
        config = self.context.config
        traits = []
        for _ in range(self._roll(config.traits_per_person)):
            trait = self.context.rng.choice(config.trait_pool)
            if trait not in traits:
                traits.append(trait)
        return traits

    def _generate_person(self, prefix, dynasty, age_range, married):
        rng = self.context.rng
        gender = rng.choice((Gender.MALE, Gender.FEMALE))
        return Person(
            id=generate_entity_id(prefix, rng, self.context.current_day),
            name=self.context.name_loader.person_name(gender, rng),
            dynasty=dynasty,
            gender=gender,
            age=self._roll(age_range),
            traits=self.generate_traits(),
            alive=True,
            married=married,
        )

    def generate_ruler(self, dynasty):
        return self._generate_person("ruler", dynasty, self.context.config.ruler_age, married=None)

    def generate_heirs(self, dynasty):
        config = self.context.config
        return [
            self._generate_person("heir", dynasty, config.heir_age, married=False)
            for _ in range(self._roll(config.heirs_per_kingdom))
        ]

    def create_kingdom(self):
        """
        Create a kingdom with a fresh royal family.

        Returns None when the roster is at capacity or every kingdom name is
        already taken; callers must check the result.
        """
        config = self.context.config
        rng = self.context.rng

        if self.active_count() >= config.max_kingdoms:
            logger.debug("Kingdom cap of %d reached. No kingdom created.", config.max_kingdoms)
            return None

        available_names = self.unused_names()
        if not available_names:
            logger.debug("No unused kingdom names left. No kingdom created.")
            return None

        name = rng.choice(available_names)
        dynasty = self.context.name_loader.random_name(DYNASTIES, rng)

        kingdom = Kingdom(
            id=generate_entity_id("kingdom", rng, self.context.current_day),
            name=name,
            dynasty=dynasty,
            ruler=self.generate_ruler(dynasty),
            heirs=self.generate_heirs(dynasty),
            strength=self._roll(config.strength),
            wealth=self._roll(config.wealth),
            destroyed=False,
            destroyed_day=None,
            created_day=self.context.current_day,
        )

        self.context.kingdoms.append(kingdom)
        self.relations.seed(kingdom.id)

        logger.info("Kingdom created: %s (%s dynasty)", kingdom.name, kingdom.dynasty)
        return kingdom

    def generate_initial_kingdoms(self):
        """Seed the starting roster (2-3 kingdoms by default)."""
        created = []
        for _ in range(self._roll(self.context.config.initial_kingdoms)):
            kingdom = self.create_kingdom()
            if kingdom is not None:
                created.append(kingdom)
        return created

    # ------------------------------------------------------------------
    #  Destruction
    # ------------------------------------------------------------------

    def destroy_kingdom(self, kingdom_id):
        """Mark a kingdom fallen and its royals dead. No-op if missing or already destroyed."""
        kingdom = self.context.find_kingdom(kingdom_id)
        if kingdom is None or kingdom.destroyed:
            return False

        kingdom.destroyed = True
        kingdom.destroyed_day = self.context.current_day
        for member in kingdom.members():
            member.alive = False

        logger.info("Kingdom %s has been destroyed on day %d.", kingdom.name, kingdom.destroyed_day)
        self.context.events.emit(
            DiplomacyEvent.KINGDOM_DESTROYED,
            {"kingdom": kingdom.model_copy(deep=True)},
        )
        return True

    # ------------------------------------------------------------------
    #  Daily rolls
    # ------------------------------------------------------------------

    def survival_chance(self, threat_level=None):
        config = self.context.config
        if threat_level is None:
            threat_level = config.default_threat_level
        return config.survival_base - threat_level * config.threat_survival_penalty

    def daily_survival_check(self, threat_level=None):
        """Roll each active kingdom against the threat-scaled survival chance."""
        survival = self.survival_chance(threat_level)
        destroyed = []
        for kingdom in self.context.active_kingdoms():
            if self.context.rng.random() > survival:
                self.destroy_kingdom(kingdom.id)
                destroyed.append(kingdom)
        return destroyed

    def discovery_check(self, discovery_bonus=0.0):
        """Occasionally discover a new kingdom while below the cap."""
        config = self.context.config
        if self.active_count() >= config.max_kingdoms:
            return None

        chance = config.discovery_base_chance * (1 + discovery_bonus)
        if self.context.rng.random() >= chance:
            return None

        kingdom = self.create_kingdom()
        if kingdom is not None:
            logger.info("A new kingdom has been discovered: %s", kingdom.name)
            self.context.events.emit(
                DiplomacyEvent.KINGDOM_CREATED,
                {"kingdom": kingdom.model_copy(deep=True)},
            )
        return kingdom
