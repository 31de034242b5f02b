"""
Leitner Session Scheduler.

Builds the review queue for the current session:
1. Keep items from active categories not yet answered this session
2. Split into due reviews (reviewed before, interval elapsed) and new items
3. Due reviews first, lowest box first (stable on item order)
4. New items after, shuffled

Items that were reviewed but are not yet due are left out of the session.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Set
from dataclasses import dataclass, field

from loguru import logger

from .item_store import Category, Item
from .ledger import ReviewLedger


@dataclass
class QueuePlan:
    """A prepared session queue with its two partitions."""

    due_ids: list[str] = field(default_factory=list)
    new_ids: list[str] = field(default_factory=list)

    @property
    def queue(self) -> list[str]:
        return self.due_ids + self.new_ids

    @property
    def total(self) -> int:
        return len(self.due_ids) + len(self.new_ids)


def shuffle_in_place(values: list, rng: random.Random) -> list:
    """Fisher-Yates shuffle driven by the injected random source."""
    for i in range(len(values) - 1, 0, -1):
        j = rng.randint(0, i)
        values[i], values[j] = values[j], values[i]
    return values


def plan_session(
    items: Iterable[Item],
    ledger: ReviewLedger,
    active_categories: Set[Category],
    session_number: int,
    answered_this_session: Set[str],
    rng: random.Random,
) -> QueuePlan:
    """
    Partition and order the items for a session.

    Does not modify the ledger; items without an entry are treated as new.
    """
    due: list[tuple[int, str]] = []
    new_ids: list[str] = []

    for item in items:
        if item.category not in active_categories or item.id in answered_this_session:
            continue

        entry = ledger.lookup(item.id)
        if entry.is_new:
            new_ids.append(item.id)
        elif entry.is_due(session_number):
            due.append((entry.box, item.id))

    # list.sort is stable, so equal boxes keep item order
    due.sort(key=lambda pair: pair[0])
    shuffle_in_place(new_ids, rng)

    plan = QueuePlan(due_ids=[item_id for _, item_id in due], new_ids=new_ids)
    logger.debug(
        f"Session {session_number} queue: {len(plan.due_ids)} due + "
        f"{len(plan.new_ids)} new = {plan.total} items"
    )
    return plan


def build_queue(
    items: Iterable[Item],
    ledger: ReviewLedger,
    active_categories: Set[Category],
    session_number: int,
    answered_this_session: Set[str],
    rng: random.Random,
) -> list[str]:
    """Ordered item ids due this session: due reviews, then new items."""
    return plan_session(
        items, ledger, active_categories, session_number, answered_this_session, rng
    ).queue
