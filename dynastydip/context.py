import random

from dynastydip.config_loader import DiplomacyConfig
from dynastydip.events import EventBus
from dynastydip.name_loader import NameLoader
from dynastydip.paths import NAME_LISTS_DIR


class DiplomacyContext:
    """
    Everything the diplomacy components share: the three owned stores
    (kingdom roster, relation scalars, lineage records) plus the injected
    collaborators (config, random source, event bus, name pools).

    One context belongs to one DiplomacyCore. Components hold a reference to
    it and never keep their own copy of the stores.
    """

    def __init__(self, config=None, rng=None, events=None, name_loader=None):
        self.config: DiplomacyConfig = config or DiplomacyConfig()
        self.rng: random.Random = rng or random.Random()
        self.events: EventBus = events or EventBus()
        self.name_loader: NameLoader = name_loader or NameLoader(NAME_LISTS_DIR)
        self.current_day = 1

        self.kingdoms = []  # list[Kingdom], creation order
        self.relations = {}  # kingdom_id -> float
        self.lineage = {}  # person_id -> set[ancestor_id]

    def find_kingdom(self, kingdom_id):
        for kingdom in self.kingdoms:
            if kingdom.id == kingdom_id:
                return kingdom
        return None

    def active_kingdoms(self):
        return [k for k in self.kingdoms if not k.destroyed]

    def reset_stores(self):
        self.kingdoms = []
        self.relations = {}
        self.lineage = {}
