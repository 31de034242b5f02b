"""
Session Tracker and Answer Statistics.

Stats are persisted and only reset by an explicit progress reset.
The tracker's answered set and queue are transient: they live for one
session and are rebuilt whenever the session or active categories change.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Set
from dataclasses import dataclass, field

from loguru import logger

from .item_store import Category, Item, ItemStore
from .ledger import ReviewLedger
from .scheduler import QueuePlan, plan_session

# =============================================================================
# Stats
# =============================================================================


def _percent(correct: int, total: int) -> int:
    return round(correct / total * 100) if total > 0 else 0


@dataclass
class CategoryStats:
    """Answer counters for one category."""

    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> int:
        return _percent(self.correct, self.total)


@dataclass
class Stats:
    """Aggregate answer counters."""

    total_correct: int = 0
    total_answered: int = 0
    streak: int = 0
    max_streak: int = 0
    categories: dict[Category, CategoryStats] = field(default_factory=dict)

    @property
    def accuracy(self) -> int:
        """Overall accuracy as a rounded percentage (0 when nothing answered)."""
        return _percent(self.total_correct, self.total_answered)

    def for_category(self, category: Category) -> CategoryStats:
        if category not in self.categories:
            self.categories[category] = CategoryStats()
        return self.categories[category]

    def record(self, category: Category, is_correct: bool) -> None:
        self.total_answered += 1
        if is_correct:
            self.total_correct += 1
            self.streak += 1
            self.max_streak = max(self.max_streak, self.streak)
        else:
            self.streak = 0

        counters = self.for_category(category)
        counters.total += 1
        if is_correct:
            counters.correct += 1


# =============================================================================
# Session Tracker
# =============================================================================


class SessionTracker:
    """
    Tracks the current session.

    - session_number: monotonic, persisted, advanced only by start_new_session()
    - answered: ids answered this session (transient)
    - queue: ids still to present this session (transient, consumed by next_item)
    """

    def __init__(self, session_number: int = 1):
        if session_number < 1:
            raise ValueError(f"session_number must be >= 1, got {session_number}")
        self.session_number = session_number
        self.answered: set[str] = set()
        self.queue: list[str] = []
        self.last_plan = QueuePlan()

    def rebuild(
        self,
        items: Iterable[Item],
        ledger: ReviewLedger,
        active_categories: Set[Category],
        rng: random.Random,
    ) -> QueuePlan:
        """Replace the queue with a fresh plan for the current session."""
        self.last_plan = plan_session(
            items, ledger, active_categories, self.session_number, self.answered, rng
        )
        self.queue = self.last_plan.queue
        return self.last_plan

    def next_item(self, store: ItemStore) -> Item | None:
        """
        Pop the next unanswered item from the front of the queue.

        Returns:
            The item, or None when the queue is exhausted
        """
        while self.queue:
            item_id = self.queue.pop(0)
            if item_id in self.answered:
                continue
            item = store.get(item_id)
            if item is None:
                logger.warning(f"Queued item '{item_id}' is not in the item store")
                continue
            return item
        return None

    def mark_answered(self, item_id: str) -> None:
        self.answered.add(item_id)

    def start_new_session(self) -> int:
        self.answered.clear()
        self.queue = []
        self.session_number += 1
        logger.info(f"Started session {self.session_number}")
        return self.session_number

    def reset(self) -> None:
        self.session_number = 1
        self.answered.clear()
        self.queue = []
        self.last_plan = QueuePlan()

    def progress(self, active_total: int) -> float:
        """Share of active items answered this session, 0.0-1.0."""
        if active_total <= 0:
            return 0.0
        return min(1.0, len(self.answered) / active_total)
