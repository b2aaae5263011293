import logging
import math

from dynastydip.events import DiplomacyEvent
from dynastydip.lineage import LineageTracker
from dynastydip.models import (
    Dowry,
    Gender,
    MarriageCandidate,
    ProposalOutcome,
    ProposalResult,
)
from dynastydip.relations import RelationLedger

logger = logging.getLogger(__name__)


class MarriageBroker:
    """Finds marriage candidates among the rival heirs and negotiates alliances."""

    def __init__(self, context, treasury=None, relations=None, lineage=None):
        self.context = context
        self.treasury = treasury
        self.relations = relations or RelationLedger(context)
        self.lineage = lineage or LineageTracker(context)

    # ------------------------------------------------------------------
    #  Odds and dowries
    # ------------------------------------------------------------------

    def marriage_chance(self, relation, marriage_bonus=0.0):
        config = self.context.config
        chance = config.marriage_base_chance + relation / config.marriage_relation_divisor + marriage_bonus
        return max(0.0, min(config.marriage_max_chance, chance))

    def calculate_dowry(self, kingdom, heir) -> Dowry:
        config = self.context.config
        gold = math.floor(kingdom.wealth * config.dowry_gold_rate)
        soldiers = math.floor(kingdom.strength * config.dowry_soldier_rate)

        for trait, multiplier in config.dowry_trait_multipliers.items():
            if heir.has_trait(trait):
                gold *= multiplier

        return Dowry(gold=gold, soldiers=soldiers)

    # ------------------------------------------------------------------
    #  Candidates
    # ------------------------------------------------------------------

    def _is_candidate(self, heir, target_gender=None):
        if not heir.marriageable:
            return False
        if heir.age < self.context.config.marriage_min_age:
            return False
        return target_gender is None or heir.gender == target_gender

    def get_candidates(self, seeker_gender, marriage_bonus=0.0, seeker_id=None):
        """Eligible heirs of opposite gender from every friendly active kingdom."""
        target_gender = Gender(seeker_gender).opposite()
        candidates = []

        for kingdom in self.context.active_kingdoms():
            relation = self.relations.get(kingdom.id)
            if relation < 0:
                continue

            for heir in kingdom.heirs:
                if not self._is_candidate(heir, target_gender):
                    continue
                candidates.append(
                    MarriageCandidate(
                        person=heir.model_copy(deep=True),
                        kingdom=kingdom.model_copy(deep=True),
                        marriage_chance=self.marriage_chance(relation, marriage_bonus),
                        dowry=self.calculate_dowry(kingdom, heir),
                        inbreeding_risk=(
                            seeker_id is not None
                            and self.lineage.check_inbreeding(seeker_id, heir.id)
                        ),
                    )
                )

        return candidates

    def find_candidate(self, candidate_id):
        """Locate a marriageable heir by id. Returns (heir, kingdom) or (None, None)."""
        for kingdom in self.context.active_kingdoms():
            heir = kingdom.find_heir(candidate_id)
            if heir is not None and self._is_candidate(heir):
                return heir, kingdom
        return None, None

    # ------------------------------------------------------------------
    #  Proposals
    # ------------------------------------------------------------------

    def propose_marriage(self, candidate_id, seeker_id, marriage_bonus=0.0) -> ProposalResult:
        candidate, kingdom = self.find_candidate(candidate_id)
        if candidate is None:
            logger.warning("Marriage candidate %s not found.", candidate_id)
            return ProposalResult(outcome=ProposalOutcome.NOT_FOUND)

        relation = self.relations.get(kingdom.id)
        acceptance = self.marriage_chance(relation, marriage_bonus)

        if self.context.rng.random() < acceptance:
            return self.execute_marriage(candidate, kingdom, seeker_id)

        self.relations.adjust(kingdom.id, -self.context.config.rejection_relation_penalty)
        logger.info("%s has rejected the marriage proposal for %s.", kingdom.name, candidate.name)
        self.context.events.emit(
            DiplomacyEvent.MARRIAGE_REJECTED,
            {
                "candidate": candidate.model_copy(deep=True),
                "kingdom": kingdom.model_copy(deep=True),
                "royalId": seeker_id,
            },
        )
        return ProposalResult(outcome=ProposalOutcome.REJECTED, kingdom_id=kingdom.id)

    def execute_marriage(self, candidate, kingdom, seeker_id) -> ProposalResult:
        candidate.married = True
        self.relations.adjust(kingdom.id, self.context.config.marriage_relation_gain)

        dowry = self.calculate_dowry(kingdom, candidate)
        if self.treasury is not None:
            self.treasury.credit_gold(dowry.gold)
        else:
            logger.warning("No treasury attached. Dowry of %s gold from %s is lost.", dowry.gold, kingdom.name)

        logger.info(
            "Marriage alliance formed with %s: %s weds %s (dowry %s gold, %d soldiers)",
            kingdom.name, candidate.name, seeker_id, dowry.gold, dowry.soldiers,
        )
        spouse = candidate.model_copy(deep=True)
        self.context.events.emit(
            DiplomacyEvent.MARRIAGE_FORMED,
            {
                "spouse": spouse,
                "kingdom": kingdom.model_copy(deep=True),
                "royalId": seeker_id,
                "dowry": dowry.model_copy(),
            },
        )
        return ProposalResult(
            outcome=ProposalOutcome.ACCEPTED,
            kingdom_id=kingdom.id,
            spouse=spouse,
            dowry=dowry,
        )

    # ------------------------------------------------------------------
    #  Gifts
    # ------------------------------------------------------------------

    def send_gift(self, kingdom_id, gold_amount) -> bool:
        """Spend treasury gold to improve relations by gold / 10 points."""
        kingdom = self.context.find_kingdom(kingdom_id)
        if kingdom is None or kingdom.destroyed:
            logger.warning("Cannot send gift: kingdom %s not found.", kingdom_id)
            return False
        if gold_amount <= 0:
            logger.warning("Gift amount must be positive, got %s.", gold_amount)
            return False
        if self.treasury is None or self.treasury.gold < gold_amount:
            logger.info("Not enough gold to send %s gold to %s.", gold_amount, kingdom.name)
            return False
        if not self.treasury.debit_gold(gold_amount):
            return False

        gain = math.floor(gold_amount / self.context.config.gift_gold_per_relation_point)
        self.relations.adjust(kingdom.id, gain)
        logger.info("Sent %s gold to %s. Relations +%d.", gold_amount, kingdom.name, gain)
        return True
