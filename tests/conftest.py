import random

import pytest

from dynastydip.config_loader import DiplomacyConfig
from dynastydip.context import DiplomacyContext
from dynastydip.models import Gender, Kingdom, Person
from dynastydip.name_loader import NameLoader
from dynastydip.persistence import InMemoryRepository
from dynastydip.simulation import DiplomacyCore
from dynastydip.treasury import GoldLedger


class FixedRandom(random.Random):
    """random.Random whose ``random()`` replays queued values before falling back to the seed."""

    def __init__(self, *rolls, seed=1234):
        super().__init__(seed)
        self.rolls = list(rolls)

    def queue(self, *rolls):
        self.rolls.extend(rolls)

    def random(self):
        if self.rolls:
            return self.rolls.pop(0)
        return super().random()

    # Defining getrandbits keeps randint/choice on the bit-based path, so they
    # never consume the queued rolls.
    def getrandbits(self, k):
        return super().getrandbits(k)


class RecordingListener:
    def __init__(self):
        self.received = []

    def __call__(self, event, payload):
        self.received.append((event, payload))

    def names(self):
        return [event for event, _ in self.received]


def make_person(person_id, gender=Gender.FEMALE, age=20.0, traits=None, married=False, name=None):
    return Person(
        id=person_id,
        name=name or person_id.title(),
        dynasty="Blackwood",
        gender=gender,
        age=age,
        traits=traits or [],
        alive=True,
        married=married,
    )


def make_kingdom(kingdom_id="kingdom_valdoria", name="Valdoria", ruler_age=45.0, heirs=None, wealth=200, strength=80, created_day=1):
    ruler = make_person(f"{kingdom_id}_ruler", gender=Gender.MALE, age=ruler_age, married=None)
    return Kingdom(
        id=kingdom_id,
        name=name,
        dynasty="Blackwood",
        ruler=ruler,
        heirs=heirs if heirs is not None else [],
        strength=strength,
        wealth=wealth,
        created_day=created_day,
    )


def add_kingdom(context, kingdom, relation=0.0):
    context.kingdoms.append(kingdom)
    context.relations[kingdom.id] = relation
    return kingdom


@pytest.fixture
def config():
    return DiplomacyConfig()


@pytest.fixture
def rng():
    return FixedRandom()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def context(config, rng, listener, tmp_path):
    ctx = DiplomacyContext(config=config, rng=rng, name_loader=NameLoader(tmp_path / "no_name_lists"))
    ctx.events.subscribe(None, listener)
    return ctx


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def treasury():
    return GoldLedger(100)


@pytest.fixture
def core(config, rng, listener, repository, treasury, tmp_path):
    core = DiplomacyCore(
        config=config,
        repository=repository,
        treasury=treasury,
        rng=rng,
        name_loader=NameLoader(tmp_path / "no_name_lists"),
    )
    core.events.subscribe(None, listener)
    return core
