import logging
import random

from dynastydip.context import DiplomacyContext
from dynastydip.kingdoms import KingdomRegistry
from dynastydip.lineage import LineageTracker
from dynastydip.marriage import MarriageBroker
from dynastydip.models import DiplomacyBonuses, ProposalOutcome
from dynastydip.persistence import PersistenceAdapter
from dynastydip.relations import RelationLedger
from dynastydip.succession import SuccessionEngine

logger = logging.getLogger(__name__)


class DiplomacyCore:
    """
    Relations between the player's dynasty and the rival kingdoms.

    The host's day driver calls ``process_daily`` once per simulated day;
    marriage proposals, gifts and lineage registration are called on demand
    between ticks. Every accessor hands back copies, so callers cannot mutate
    the roster behind the core's back.
    """

    def __init__(self, config=None, repository=None, treasury=None, rng=None, events=None, name_loader=None, seed=None):
        if rng is None and seed is not None:
            rng = random.Random(seed)
        self.context = DiplomacyContext(config=config, rng=rng, events=events, name_loader=name_loader)
        self.bonuses = DiplomacyBonuses()

        self.relations = RelationLedger(self.context)
        self.lineage = LineageTracker(self.context)
        self.registry = KingdomRegistry(self.context, relations=self.relations)
        self.succession = SuccessionEngine(self.context, registry=self.registry)
        self.marriage = MarriageBroker(self.context, treasury=treasury, relations=self.relations, lineage=self.lineage)
        self.persistence = PersistenceAdapter(self.context, repository)

    @property
    def config(self):
        return self.context.config

    @property
    def events(self):
        return self.context.events

    @property
    def current_day(self):
        return self.context.current_day

    def init(self, current_day=None):
        """Restore saved state, seeding the starting kingdoms if there are none."""
        if current_day is not None:
            self.context.current_day = current_day
        self.persistence.load()

        if not self.context.kingdoms:
            self.registry.generate_initial_kingdoms()

        logger.info("Diplomacy initialized with %d kingdoms", len(self.context.kingdoms))
        return self

    # ------------------------------------------------------------------
    #  Daily tick
    # ------------------------------------------------------------------

    def process_daily(self, current_day, threat_level=None, bonuses=None) -> bool:
        """Run one simulated day. Returns whether the state was persisted."""
        self.context.current_day = current_day
        if bonuses is not None:
            self.bonuses = DiplomacyBonuses.model_validate(bonuses)

        self.registry.daily_survival_check(threat_level)
        self.relations.daily_drift()
        self.registry.discovery_check(self.bonuses.kingdom_discovery)
        self.succession.age_royals()

        return self.persistence.save()

    # ------------------------------------------------------------------
    #  Player operations
    # ------------------------------------------------------------------

    def get_marriage_candidates(self, seeker_gender, seeker_id=None):
        return self.marriage.get_candidates(seeker_gender, self.bonuses.marriage_chance, seeker_id=seeker_id)

    def propose_marriage(self, candidate_id, seeker_id):
        result = self.marriage.propose_marriage(candidate_id, seeker_id, self.bonuses.marriage_chance)
        if result.outcome is not ProposalOutcome.NOT_FOUND:
            self.persistence.save()
        return result

    def send_gift(self, kingdom_id, gold_amount) -> bool:
        sent = self.marriage.send_gift(kingdom_id, gold_amount)
        if sent:
            self.persistence.save()
        return sent

    def register_lineage(self, person_id, parent_ids):
        return self.lineage.register_lineage(person_id, list(parent_ids))

    def check_inbreeding(self, person_id1, person_id2) -> bool:
        return self.lineage.check_inbreeding(person_id1, person_id2)

    # ------------------------------------------------------------------
    #  Snapshots
    # ------------------------------------------------------------------

    def get_kingdom(self, kingdom_id):
        kingdom = self.registry.get_kingdom(kingdom_id)
        return None if kingdom is None else kingdom.model_copy(deep=True)

    def kingdoms(self):
        return [k.model_copy(deep=True) for k in self.context.kingdoms]

    def active_kingdoms(self):
        return [k.model_copy(deep=True) for k in self.registry.active_kingdoms()]

    def relation(self, kingdom_id) -> float:
        return self.relations.get(kingdom_id)

    def all_relations(self) -> dict[str, float]:
        return self.relations.items()

    def ancestors(self, person_id) -> frozenset:
        return self.lineage.ancestors(person_id)

    def serialize(self):
        return self.persistence.serialize()

    def deserialize(self, blob) -> bool:
        return self.persistence.deserialize(blob)
