"""
dynastydip/name_loader.py
~~~~~~~~~~~~~~~~~~~~~~~~~
Loads name pools (kingdoms, dynasties, male and female given names) from text
files and provides random selection with an in-memory cache to avoid repeated
disk reads.

Name files live in the configured folder and are named ``<pool>.txt``
(e.g. ``kingdoms.txt``, ``female.txt``), one name per line.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

from dynastydip.models import Gender

logger = logging.getLogger(__name__)

KINGDOMS = "kingdoms"
DYNASTIES = "dynasties"

# Used when a pool file is missing or empty.
DEFAULT_POOLS: dict[str, list[str]] = {
    KINGDOMS: [
        "Valdoria", "Karthune", "Elmsworth", "Drakenhold", "Silvermere",
        "Thornwick", "Ironforge", "Sunhaven", "Moonshadow", "Stormreach",
        "Goldcrest", "Ravenmoor", "Ashenvale", "Crystalpeak", "Shadowfen",
    ],
    DYNASTIES: [
        "von Aldric", "de Montfort", "Blackwood", "Dragonbane", "Silverhand",
        "Ironwill", "Sunfire", "Moonwhisper", "Stormborn", "Goldenheart",
    ],
    "male": [
        "Alexander", "Wilhelm", "Edward", "Richard", "Henry",
        "Frederick", "Charles", "Louis", "Arthur", "Edmund",
    ],
    "female": [
        "Elizabeth", "Catherine", "Victoria", "Eleanor", "Margaret",
        "Isabella", "Sophia", "Charlotte", "Anne", "Mary",
    ],
}


class NameLoader:
    """Loads and caches name pools from disk."""

    def __init__(self, name_list_folder: str | Path = "name_lists") -> None:
        self._folder = Path(name_list_folder)
        self._cache: dict[str, list[str]] = {}

        if not self._folder.is_dir():
            logger.warning(
                "Name lists folder '%s' not found. Using built-in names.",
                self._folder,
            )

    # ------------------------------------------------------------------
    #  Private helpers
    # ------------------------------------------------------------------

    def _load(self, pool: str) -> list[str]:
        """Load a pool from disk into the cache if not already present."""
        key = pool.lower()
        if key in self._cache:
            return self._cache[key]

        file_path = self._folder / f"{key}.txt"
        names: list[str] = []

        try:
            names = [line.strip() for line in file_path.read_text(encoding="utf-8").splitlines() if line.strip()]
            if not names:
                raise ValueError("Name list is empty.")
        except FileNotFoundError:
            logger.debug("Name file not found: %s. Using built-in names.", file_path)
            names = list(DEFAULT_POOLS.get(key, []))
        except ValueError:
            logger.warning("Name file is empty: %s. Using built-in names.", file_path)
            names = list(DEFAULT_POOLS.get(key, []))

        # Keep first occurrence only; kingdom names must be unique.
        names = list(dict.fromkeys(names))
        self._cache[key] = names
        return names

    # ------------------------------------------------------------------
    #  Public API
    # ------------------------------------------------------------------

    def get_all_names(self, pool: str) -> list[str]:
        """Return a copy of the full name list for the given pool."""
        names = self._load(pool)
        if not names:
            logger.error("No names available for pool '%s'.", pool)
        return list(names)

    def random_name(self, pool: str, rng: random.Random) -> str:
        """Return a single random name from the given pool."""
        names = self._load(pool)
        if not names:
            return f"Nameless_{pool}"
        return rng.choice(names)

    def person_name(self, gender: Gender | str, rng: random.Random) -> str:
        return self.random_name(Gender(gender).value, rng)
