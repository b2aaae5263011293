"""
Saving and restoring the diplomacy stores.

The core never touches storage directly: a ``StorageRepository`` is injected
and the ``PersistenceAdapter`` turns the context's stores into the
``diplomacyState`` blob and back. Storage failures degrade to "no state
change" and are logged, never raised to the caller.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from dynastydip.models import DiplomacyState
from utils.utils import clamp

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A repository could not read or write a blob."""


# Anything a host repository may raise while reading or writing.
REPOSITORY_ERRORS = (StorageError, OSError, TypeError, ValueError)


class StorageRepository(Protocol):
    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, blob: Any) -> None: ...


class InMemoryRepository:
    """Keeps blobs as JSON text in a dict, so saved state cannot alias live objects."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def load(self, key: str) -> Any | None:
        text = self._blobs.get(key)
        return None if text is None else json.loads(text)

    def save(self, key: str, blob: Any) -> None:
        self._blobs[key] = json.dumps(blob)

    def __contains__(self, key: str) -> bool:
        return key in self._blobs


class JsonFileRepository:
    """One ``<key>.json`` file per key inside a save directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def load(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def save(self, key: str, blob: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(blob, f, indent=4, ensure_ascii=False)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Could not write {path}: {e}") from e


class PersistenceAdapter:
    def __init__(self, context, repository: StorageRepository | None = None) -> None:
        self.context = context
        self.repository = repository

    @property
    def storage_key(self) -> str:
        return self.context.config.storage_key

    # ------------------------------------------------------------------
    #  Blob conversion
    # ------------------------------------------------------------------

    def serialize(self) -> dict[str, Any]:
        state = DiplomacyState(
            kingdoms=self.context.kingdoms,
            relations=list(self.context.relations.items()),
            lineage=[
                (person_id, sorted(ancestors))
                for person_id, ancestors in self.context.lineage.items()
            ],
        )
        return state.model_dump(mode="json", by_alias=True)

    def deserialize(self, blob: Any) -> bool:
        """
        Replace the context's stores with the contents of ``blob``. Missing
        or malformed input resets every store to empty and returns False.
        """
        self.context.reset_stores()

        if blob is None:
            return False

        try:
            if isinstance(blob, (str, bytes)):
                blob = json.loads(blob)
            state = DiplomacyState.model_validate(blob)
            relations = self._restore_relations(state.relations)
        except (ValueError, ValidationError) as e:
            logger.warning("Discarding malformed diplomacy state: %s", e)
            return False

        self.context.kingdoms = [k.model_copy(deep=True) for k in state.kingdoms]
        self.context.relations = relations
        self.context.lineage = {person_id: set(ancestors) for person_id, ancestors in state.lineage}
        return True

    def _restore_relations(self, pairs) -> dict[str, float]:
        """Saved relations are clamped into the configured range; NaN or infinite values are malformed."""
        config = self.context.config
        relations = {}
        for kingdom_id, value in pairs:
            value = float(value)
            if not math.isfinite(value):
                raise ValueError(f"relation for {kingdom_id} is not a finite number: {value}")
            restored = clamp(value, config.relation_min, config.relation_max)
            if restored != value:
                logger.warning("Clamped saved relation for %s from %.1f to %.1f", kingdom_id, value, restored)
            relations[kingdom_id] = restored
        return relations

    # ------------------------------------------------------------------
    #  Repository I/O
    # ------------------------------------------------------------------

    def save(self) -> bool:
        if self.repository is None:
            return False
        try:
            self.repository.save(self.storage_key, self.serialize())
        except REPOSITORY_ERRORS as e:
            logger.warning("Failed to save diplomacy state: %s", e)
            return False
        return True

    def load(self) -> bool:
        if self.repository is None:
            self.context.reset_stores()
            return False
        try:
            blob = self.repository.load(self.storage_key)
        except REPOSITORY_ERRORS as e:
            logger.warning("Failed to load diplomacy state, starting empty: %s", e)
            self.context.reset_stores()
            return False

        loaded = self.deserialize(blob)
        if loaded:
            logger.info(
                "Loaded diplomacy state: %d kingdoms, %d relations, %d lineage records",
                len(self.context.kingdoms), len(self.context.relations), len(self.context.lineage),
            )
        return loaded
