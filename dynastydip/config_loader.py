import json
import logging
import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

###############################
### Imported to other files ###
###############################
# Toggle this to True if you want to log which config files were loaded
LOADED_INFO_FILES = False
###############################

CONFIG_FILENAME = "diplomacy.json"


class IntRange(BaseModel):
    """Inclusive integer range used for random rolls."""

    min: int
    max: int

    @model_validator(mode="after")
    def max_not_below_min(self) -> "IntRange":
        if self.max < self.min:
            raise ValueError(f"range max ({self.max}) must be >= min ({self.min}).")
        return self


class DiplomacyConfig(BaseModel):
    """Full shape of config/diplomacy.json. Keys are camelCase on disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    # Roster
    max_kingdoms: int = Field(default=5, gt=0)
    initial_kingdoms: IntRange = Field(default_factory=lambda: IntRange(min=2, max=3))
    ruler_age: IntRange = Field(default_factory=lambda: IntRange(min=30, max=59))
    heir_age: IntRange = Field(default_factory=lambda: IntRange(min=16, max=30))
    heirs_per_kingdom: IntRange = Field(default_factory=lambda: IntRange(min=1, max=3))
    traits_per_person: IntRange = Field(default_factory=lambda: IntRange(min=1, max=2))
    strength: IntRange = Field(default_factory=lambda: IntRange(min=50, max=99))
    wealth: IntRange = Field(default_factory=lambda: IntRange(min=100, max=299))
    trait_pool: list[str] = Field(
        default_factory=lambda: [
            "brave", "cunning", "kind", "cruel", "wise",
            "foolish", "ambitious", "humble", "beautiful", "plain",
        ],
        min_length=1,
    )

    # Daily rolls
    survival_base: float = Field(default=0.999, ge=0.0, le=1.0)
    threat_survival_penalty: float = Field(default=0.0005, ge=0.0)
    default_threat_level: float = 1.0
    discovery_base_chance: float = Field(default=0.001, ge=0.0, le=1.0)
    ruler_death_age: float = Field(default=80, ge=0)
    ruler_death_chance: float = Field(default=0.01, ge=0.0, le=1.0)
    days_per_year: int = Field(default=365, gt=0)

    # Relations
    relation_min: float = -100
    relation_max: float = 100
    relation_drift: float = Field(default=0.1, ge=0.0)

    # Marriage
    marriage_min_age: float = Field(default=16, ge=0)
    marriage_base_chance: float = Field(default=0.3, ge=0.0, le=1.0)
    marriage_relation_divisor: float = Field(default=200, gt=0)
    marriage_max_chance: float = Field(default=0.95, ge=0.0, le=1.0)
    marriage_relation_gain: float = 30
    rejection_relation_penalty: float = 10
    dowry_gold_rate: float = Field(default=0.1, ge=0.0)
    dowry_soldier_rate: float = Field(default=0.05, ge=0.0)
    # Applied in insertion order: base → beautiful → wise
    dowry_trait_multipliers: dict[str, float] = Field(
        default_factory=lambda: {"beautiful": 1.5, "wise": 1.3}
    )

    # Gifts
    gift_gold_per_relation_point: int = Field(default=10, gt=0)

    # Persistence
    storage_key: str = Field(default="diplomacyState", min_length=1)

    @model_validator(mode="after")
    def relation_bounds_ordered(self) -> "DiplomacyConfig":
        if self.relation_min >= self.relation_max:
            raise ValueError("relationMin must be lower than relationMax.")
        if not self.relation_min <= 0 <= self.relation_max:
            raise ValueError("The relation range must contain the neutral value 0.")
        return self


class ConfigLoader:
    def __init__(self, config_folder='config'):
        self.config_folder = config_folder
        self.config = DiplomacyConfig()
        self.load_configs()

    def load_configs(self):
        file_path = os.path.join(self.config_folder, CONFIG_FILENAME)
        if not os.path.exists(file_path):
            logger.warning("Configuration file %s not found in %s. Using defaults.", CONFIG_FILENAME, self.config_folder)
            return

        with open(file_path, 'r', encoding='utf-8') as file:
            try:
                raw = json.load(file)
            except json.JSONDecodeError as e:
                raise ValueError(f"Error parsing {CONFIG_FILENAME}: {e}")

        try:
            self.config = DiplomacyConfig.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid {CONFIG_FILENAME}: {e}")

        unknown = sorted(set(self.config.model_extra or {}))
        for key in unknown:
            logger.warning("Diplomacy parameter '%s' is currently unused.", key)

        if LOADED_INFO_FILES:
            logger.info("Loaded configuration from %s.", file_path)

    def get_config(self) -> DiplomacyConfig:
        return self.config

    def get(self, key, default=None):
        return getattr(self.config, key, default)
