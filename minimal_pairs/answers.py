"""
Answer Processor.

Applies one submitted answer to the quiz state:
- marks the item answered for this session
- updates aggregate and per-category stats
- promotes (correct) or demotes (incorrect) the item's Leitner box
- persists the whole progress record

Call exactly once per presentation; the engine guards against repeats.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .item_store import Item
from .persistence import PersistenceGateway
from .presentation import Presentation, Slot
from .state import QuizState


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of a submitted answer."""

    item: Item
    is_correct: bool
    selected_slot: Slot
    correct_slot: Slot
    box: int


class AnswerProcessor:
    """Records answers into a QuizState and saves it through the gateway."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def submit(
        self,
        state: QuizState,
        presentation: Presentation,
        slot: Slot,
    ) -> AnswerOutcome:
        slot = Slot(slot)
        item = presentation.item
        is_correct = presentation.is_correct(slot)
        session_number = state.session.session_number

        presentation.answered = True
        state.session.mark_answered(item.id)
        state.stats.record(item.category, is_correct)

        if is_correct:
            entry = state.ledger.promote(item.id, session_number)
        else:
            entry = state.ledger.demote(item.id, session_number)

        self.gateway.save(state.to_record())

        logger.debug(
            f"Answer for {item.id}: {'correct' if is_correct else 'incorrect'} "
            f"(box {entry.box}, streak {state.stats.streak})"
        )

        return AnswerOutcome(
            item=item,
            is_correct=is_correct,
            selected_slot=slot,
            correct_slot=presentation.correct_slot,
            box=entry.box,
        )
