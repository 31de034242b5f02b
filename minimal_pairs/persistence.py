"""
Progress persistence for Minimal Pairs.

The whole progress record (stats, ledger, active categories, session
number) is written as one JSON document after every mutation and read
once at startup. The file location comes from `Settings.state_path`.

An absent or corrupt record means "no prior progress". Write failures are
logged and swallowed: the in-memory state stays authoritative for the run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from .item_store import Category
from .ledger import LEITNER_BOXES

# =============================================================================
# Persisted Record
# =============================================================================


class CategoryStatsRecord(BaseModel):
    correct: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class StatsRecord(BaseModel):
    total_correct: int = Field(default=0, ge=0)
    total_answered: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    max_streak: int = Field(default=0, ge=0)
    categories: dict[str, CategoryStatsRecord] = Field(default_factory=dict)


class LedgerEntryRecord(BaseModel):
    box: int = Field(default=1, ge=1, le=LEITNER_BOXES)
    last_reviewed_session: int = Field(default=0, ge=0)


def _all_categories() -> list[str]:
    return [category.value for category in Category]


class PersistedState(BaseModel):
    """Serialized progress, overwritten wholesale on every save."""

    stats: StatsRecord = Field(default_factory=StatsRecord)
    ledger: dict[str, LedgerEntryRecord] = Field(default_factory=dict)
    active_categories: list[str] = Field(default_factory=_all_categories)
    session_number: int = Field(default=1, ge=1)


# =============================================================================
# Gateways
# =============================================================================


class PersistenceGateway(Protocol):
    """Load/save capability injected into the quiz core."""

    def load(self) -> PersistedState | None:
        """Return the saved record, or None when there is no usable one."""
        ...

    def save(self, state: PersistedState) -> None:
        """Store the record. Must not raise on storage failure."""
        ...


class JsonFileGateway:
    """Stores the progress record as a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> PersistedState | None:
        if not self.path.exists():
            logger.debug(f"No saved progress at {self.path}")
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
            state = PersistedState.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load progress from {self.path}, starting fresh: {e}")
            return None

        logger.info(f"Loaded progress from {self.path} (session {state.session_number})")
        return state

    def save(self, state: PersistedState) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(state.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to save progress to {self.path}: {e}")


class MemoryGateway:
    """Keeps the last saved record in memory only."""

    def __init__(self, initial: PersistedState | None = None):
        self.saved: PersistedState | None = initial
        self.save_count = 0

    def load(self) -> PersistedState | None:
        return self.saved.model_copy(deep=True) if self.saved else None

    def save(self, state: PersistedState) -> None:
        self.saved = state.model_copy(deep=True)
        self.save_count += 1
