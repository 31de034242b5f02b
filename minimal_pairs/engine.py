"""
Quiz Engine: the core's inbound and outbound API.

Inbound (user actions):
- answer(slot)
- request_next()
- toggle_category(category, enabled)
- continue_reviewing()
- reset_all_progress()

Outbound (QuizListener notifications for the presentation layer):
- on_item_presented(item, correct_slot)
- on_answer_result(is_correct, explanation)
- on_queue_exhausted(reason)
- on_stats_changed(stats)

Every action runs to completion synchronously and saves progress through
the injected gateway.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Protocol

from loguru import logger

from .answers import AnswerOutcome, AnswerProcessor
from .item_store import Category, Item, ItemStore
from .persistence import PersistenceGateway
from .presentation import Presentation, Slot, present
from .session import Stats
from .state import QuizState

# =============================================================================
# Notifications
# =============================================================================


class ExhaustionReason(str, Enum):
    """Why there is nothing left to present."""

    NO_ACTIVE_CATEGORIES = "no_active_categories"  # empty state
    ALL_DONE = "all_done"  # session complete


class QuizListener(Protocol):
    """Receives the engine's outbound notifications."""

    def on_item_presented(self, item: Item, correct_slot: Slot) -> None: ...

    def on_answer_result(self, is_correct: bool, explanation: str) -> None: ...

    def on_queue_exhausted(self, reason: ExhaustionReason) -> None: ...

    def on_stats_changed(self, stats: Stats) -> None: ...


class NullListener:
    """Listener that ignores every notification."""

    def on_item_presented(self, item: Item, correct_slot: Slot) -> None:
        pass

    def on_answer_result(self, is_correct: bool, explanation: str) -> None:
        pass

    def on_queue_exhausted(self, reason: ExhaustionReason) -> None:
        pass

    def on_stats_changed(self, stats: Stats) -> None:
        pass


# =============================================================================
# Engine
# =============================================================================


class QuizEngine:
    """
    Drives a Leitner review session over an ItemStore.

    The random source is injected so queue order and slot assignment are
    reproducible under a fixed seed.
    """

    def __init__(
        self,
        store: ItemStore,
        gateway: PersistenceGateway,
        rng: random.Random | None = None,
        listener: QuizListener | None = None,
    ):
        self.store = store
        self.gateway = gateway
        self.rng = rng or random.Random()
        self.listener: QuizListener = listener or NullListener()
        self.processor = AnswerProcessor(gateway)
        self.state = QuizState()

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    def start(self, present_first: bool = True) -> Presentation | None:
        """
        Load saved progress, build the first queue and present the first item.

        Missing or corrupt progress starts from defaults.
        """
        record = self.gateway.load()
        self.state = QuizState.from_record(record) if record else QuizState()

        for item in self.store:
            self.state.ledger.entry(item.id)

        self._rebuild()
        self.listener.on_stats_changed(self.state.stats)

        logger.info(
            f"Quiz started: {len(self.store)} items, "
            f"{len(self.state.active_categories)} active categories, "
            f"session {self.state.session.session_number}"
        )

        if not present_first:
            return None
        return self.request_next()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def current(self) -> Presentation | None:
        return self.state.current

    @property
    def session_number(self) -> int:
        return self.state.session.session_number

    def active_items(self) -> list[Item]:
        return self.store.in_categories(self.state.active_categories)

    def box_counts(self) -> dict[int, int]:
        """Items per Leitner box, active categories only."""
        return self.state.ledger.box_counts(item.id for item in self.active_items())

    def progress(self) -> float:
        return self.state.session.progress(len(self.active_items()))

    def preview(self, limit: int = 10) -> list[tuple[Item, str]]:
        """Upcoming items with their status ('due' or 'new'), queue order."""
        due_ids = set(self.state.session.last_plan.due_ids)
        upcoming = []
        for item_id in self.state.session.queue:
            if len(upcoming) >= limit:
                break
            item = self.store.get(item_id)
            if item is None or item_id in self.state.session.answered:
                continue
            upcoming.append((item, "due" if item_id in due_ids else "new"))
        return upcoming

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def request_next(self) -> Presentation | None:
        """Present the next queued item, or report why there is none."""
        item = self.state.session.next_item(self.store)

        if item is None:
            self.state.current = None
            if not self.state.active_categories or len(self.store) == 0:
                reason = ExhaustionReason.NO_ACTIVE_CATEGORIES
            else:
                reason = ExhaustionReason.ALL_DONE
            logger.debug(f"Queue exhausted: {reason.value}")
            self.listener.on_queue_exhausted(reason)
            return None

        presentation = present(item, self.rng)
        self.state.current = presentation
        self.listener.on_item_presented(item, presentation.correct_slot)
        return presentation

    def answer(self, slot: Slot) -> AnswerOutcome | None:
        """
        Answer the current item.

        Returns:
            The outcome, or None when there is no current item or it was
            already answered
        """
        presentation = self.state.current
        if presentation is None or presentation.answered:
            logger.debug("Ignoring answer: nothing to answer")
            return None
        if presentation.item.id in self.state.session.answered:
            logger.debug(f"Ignoring answer: {presentation.item.id} already answered")
            return None

        try:
            slot = Slot(slot)
        except ValueError:
            logger.debug(f"Ignoring answer: invalid slot {slot!r}")
            return None

        outcome = self.processor.submit(self.state, presentation, slot)

        self.listener.on_answer_result(outcome.is_correct, outcome.item.explanation)
        self.listener.on_stats_changed(self.state.stats)
        return outcome

    def toggle_category(self, category: Category, enabled: bool) -> bool:
        """
        Enable or disable a category and rebuild the queue (same session).

        Returns:
            True if the current item was dropped and the engine advanced
        """
        category = Category(category)
        if enabled:
            self.state.active_categories.add(category)
        else:
            self.state.active_categories.discard(category)

        self._save()
        self._rebuild()

        current = self.state.current
        if current is not None and current.item.category not in self.state.active_categories:
            self.request_next()
            return True
        return False

    def continue_reviewing(self) -> Presentation | None:
        """Start the next session and present its first item."""
        self.state.session.start_new_session()
        self.state.current = None
        self._save()
        self._rebuild()
        return self.request_next()

    def reset_all_progress(self) -> Presentation | None:
        """Forget all boxes and stats and return to session 1."""
        self.state.stats = Stats()
        self.state.ledger.reset()
        self.state.session.reset()
        self.state.current = None
        self._save()

        logger.info("All progress reset")
        self.listener.on_stats_changed(self.state.stats)

        self._rebuild()
        return self.request_next()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _rebuild(self) -> None:
        self.state.session.rebuild(
            self.store, self.state.ledger, self.state.active_categories, self.rng
        )

    def _save(self) -> None:
        self.gateway.save(self.state.to_record())
