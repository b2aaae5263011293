import random

import pytest

from conftest import FixedRandom, add_kingdom, make_kingdom, make_person
from dynastydip.context import DiplomacyContext
from dynastydip.events import DiplomacyEvent
from dynastydip.lineage import LineageTracker
from dynastydip.marriage import MarriageBroker
from dynastydip.models import Gender, ProposalOutcome
from dynastydip.treasury import GoldLedger


@pytest.fixture
def broker(context, treasury):
    return MarriageBroker(context, treasury=treasury)


def test_candidates_filter_on_eligibility(broker, context):
    heirs = [
        make_person("bride", gender=Gender.FEMALE, age=20),
        make_person("groom", gender=Gender.MALE, age=20),
        make_person("too_young", gender=Gender.FEMALE, age=15.5),
        make_person("taken", gender=Gender.FEMALE, age=22, married=True),
        make_person("deceased", gender=Gender.FEMALE, age=22),
    ]
    heirs[-1].alive = False
    add_kingdom(context, make_kingdom(heirs=heirs), relation=0)

    candidates = broker.get_candidates(Gender.MALE)

    assert [c.person.id for c in candidates] == ["bride"]


def test_candidates_skip_hostile_and_destroyed_kingdoms(broker, context):
    add_kingdom(context, make_kingdom("k1", name="Valdoria", heirs=[make_person("a")]), relation=-1)
    fallen = add_kingdom(context, make_kingdom("k2", name="Karthune", heirs=[make_person("b")]), relation=50)
    fallen.destroyed = True
    add_kingdom(context, make_kingdom("k3", name="Sunhaven", heirs=[make_person("c")]), relation=0)

    assert [c.person.id for c in broker.get_candidates("male")] == ["c"]


def test_marriage_chance_at_relation_fifty(broker, context):
    add_kingdom(context, make_kingdom(heirs=[make_person("bride")]), relation=50)

    (candidate,) = broker.get_candidates(Gender.MALE, marriage_bonus=0.0)

    assert candidate.marriage_chance == pytest.approx(0.55)


def test_marriage_chance_is_capped(broker):
    assert broker.marriage_chance(100, marriage_bonus=0.5) == pytest.approx(0.95)
    assert broker.marriage_chance(-100, marriage_bonus=0.0) == 0.0


def test_candidates_are_snapshots(broker, context):
    kingdom = add_kingdom(context, make_kingdom(heirs=[make_person("bride")]))

    (candidate,) = broker.get_candidates(Gender.MALE)
    candidate.person.married = True
    candidate.kingdom.wealth = 0

    assert kingdom.heirs[0].married is False
    assert kingdom.wealth == 200


def test_candidates_flag_inbreeding_risk(context, treasury):
    lineage = LineageTracker(context)
    broker = MarriageBroker(context, treasury=treasury, lineage=lineage)
    add_kingdom(context, make_kingdom(heirs=[make_person("cousin"), make_person("stranger")]))
    lineage.register_lineage("cousin", ["grandmother"])
    lineage.register_lineage("prince", ["grandmother"])

    flags = {c.person.id: c.inbreeding_risk for c in broker.get_candidates(Gender.MALE, seeker_id="prince")}

    assert flags == {"cousin": True, "stranger": False}


@pytest.mark.parametrize(
    "traits, expected_gold",
    [
        ([], 20),
        (["beautiful"], 30),
        (["wise"], 26),
        (["wise", "beautiful"], 20 * 1.5 * 1.3),
        (["brave"], 20),
    ],
)
def test_dowry_trait_multipliers(broker, traits, expected_gold):
    kingdom = make_kingdom(wealth=205, strength=99)
    heir = make_person("h", traits=traits)

    dowry = broker.calculate_dowry(kingdom, heir)

    assert dowry.gold == pytest.approx(expected_gold)
    assert dowry.soldiers == 4


def test_accepted_proposal_executes_marriage(broker, context, rng, treasury, listener):
    kingdom = add_kingdom(context, make_kingdom(heirs=[make_person("bride", traits=["beautiful"])]), relation=80)
    rng.queue(0.1)

    result = broker.propose_marriage("bride", "prince_edmund")

    assert result.outcome is ProposalOutcome.ACCEPTED
    assert result.accepted
    assert kingdom.heirs[0].married is True
    assert context.relations[kingdom.id] == 100
    assert treasury.gold == pytest.approx(100 + 30)
    assert result.dowry.gold == pytest.approx(30)

    (event, payload), = listener.received
    assert event is DiplomacyEvent.MARRIAGE_FORMED
    assert payload["spouse"].id == "bride"
    assert payload["kingdom"].id == kingdom.id
    assert payload["royalId"] == "prince_edmund"
    assert payload["dowry"].gold == pytest.approx(30)


def test_married_heir_is_no_longer_offered(broker, context, rng):
    add_kingdom(context, make_kingdom(heirs=[make_person("bride")]), relation=80)
    rng.queue(0.0)
    broker.propose_marriage("bride", "prince")

    assert broker.get_candidates(Gender.MALE) == []
    assert broker.propose_marriage("bride", "other_prince").outcome is ProposalOutcome.NOT_FOUND


def test_rejected_proposal_costs_relations(broker, context, rng, treasury, listener):
    kingdom = add_kingdom(context, make_kingdom(heirs=[make_person("bride")]), relation=50)
    rng.queue(0.56)

    result = broker.propose_marriage("bride", "prince")

    assert result.outcome is ProposalOutcome.REJECTED
    assert context.relations[kingdom.id] == 40
    assert kingdom.heirs[0].married is False
    assert treasury.gold == 100
    assert listener.names() == [DiplomacyEvent.MARRIAGE_REJECTED]


def test_rejection_penalty_clamps_at_minimum(broker, context, rng):
    kingdom = add_kingdom(context, make_kingdom(heirs=[make_person("bride")]), relation=-95)
    rng.queue(0.99)

    broker.propose_marriage("bride", "prince")

    assert context.relations[kingdom.id] == -100


def test_unknown_candidate_is_not_found(broker, context, listener):
    add_kingdom(context, make_kingdom(heirs=[make_person("bride")]), relation=50)

    result = broker.propose_marriage("ghost", "prince")

    assert result.outcome is ProposalOutcome.NOT_FOUND
    assert not result.accepted
    assert listener.received == []


def test_acceptance_frequency_matches_chance():
    trials = 10_000
    context = DiplomacyContext(rng=random.Random(2024))
    kingdom = add_kingdom(context, make_kingdom(heirs=[make_person("bride")]))
    broker = MarriageBroker(context, treasury=GoldLedger())

    accepted = 0
    for _ in range(trials):
        context.relations[kingdom.id] = 50
        kingdom.heirs[0].married = False
        if broker.propose_marriage("bride", "prince").accepted:
            accepted += 1

    assert accepted / trials == pytest.approx(0.55, abs=0.02)


def test_gift_improves_relations(broker, context, treasury):
    kingdom = add_kingdom(context, make_kingdom(), relation=10)

    assert broker.send_gift(kingdom.id, 55)

    assert treasury.gold == 45
    assert context.relations[kingdom.id] == 15


def test_gift_requires_enough_gold(broker, context, treasury):
    kingdom = add_kingdom(context, make_kingdom(), relation=10)

    assert not broker.send_gift(kingdom.id, 500)

    assert treasury.gold == 100
    assert context.relations[kingdom.id] == 10


def test_gift_to_fallen_kingdom_is_refused(broker, context, treasury):
    kingdom = add_kingdom(context, make_kingdom())
    kingdom.destroyed = True

    assert not broker.send_gift(kingdom.id, 50)
    assert not broker.send_gift("kingdom_nowhere", 50)
    assert treasury.gold == 100


def test_marriage_without_treasury_still_forms_alliance():
    context = DiplomacyContext(rng=FixedRandom(0.0))
    kingdom = add_kingdom(context, make_kingdom(heirs=[make_person("bride")]))
    broker = MarriageBroker(context)

    assert broker.propose_marriage("bride", "prince").accepted
    assert kingdom.heirs[0].married is True
