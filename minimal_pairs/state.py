"""
Explicit quiz state.

Everything the core mutates lives in one QuizState object that is passed
to the answer processor and owned by the engine; there is no module-level
state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from .item_store import Category
from .ledger import ReviewLedger
from .persistence import (
    CategoryStatsRecord,
    LedgerEntryRecord,
    PersistedState,
    StatsRecord,
)
from .presentation import Presentation
from .session import CategoryStats, SessionTracker, Stats


def _parse_categories(values: list[str]) -> set[Category]:
    categories = set()
    for value in values:
        category = Category.parse(value)
        if category is None:
            logger.debug(f"Ignoring unknown category '{value}' in saved progress")
            continue
        categories.add(category)
    return categories


@dataclass
class QuizState:
    """Persisted progress plus the transient session."""

    ledger: ReviewLedger = field(default_factory=ReviewLedger)
    stats: Stats = field(default_factory=Stats)
    active_categories: set[Category] = field(default_factory=lambda: set(Category))
    session: SessionTracker = field(default_factory=SessionTracker)
    current: Presentation | None = None

    def to_record(self) -> PersistedState:
        return PersistedState(
            stats=StatsRecord(
                total_correct=self.stats.total_correct,
                total_answered=self.stats.total_answered,
                streak=self.stats.streak,
                max_streak=self.stats.max_streak,
                categories={
                    category.value: CategoryStatsRecord(correct=c.correct, total=c.total)
                    for category, c in self.stats.categories.items()
                },
            ),
            ledger={
                item_id: LedgerEntryRecord(**fields)
                for item_id, fields in self.ledger.to_dict().items()
            },
            # Category order keeps the saved file stable between writes
            active_categories=[c.value for c in Category if c in self.active_categories],
            session_number=self.session.session_number,
        )

    @classmethod
    def from_record(cls, record: PersistedState) -> QuizState:
        stats = Stats(
            total_correct=record.stats.total_correct,
            total_answered=record.stats.total_answered,
            streak=record.stats.streak,
            max_streak=record.stats.max_streak,
        )
        for key, counters in record.stats.categories.items():
            category = Category.parse(key)
            if category is not None:
                stats.categories[category] = CategoryStats(
                    correct=counters.correct, total=counters.total
                )

        ledger = ReviewLedger.from_dict(
            {item_id: entry.model_dump() for item_id, entry in record.ledger.items()}
        )

        return cls(
            ledger=ledger,
            stats=stats,
            active_categories=_parse_categories(record.active_categories),
            session=SessionTracker(session_number=record.session_number),
        )
