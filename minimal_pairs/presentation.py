"""
Option presentation: places the two sentences of a pair into slots A and B.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum

from .item_store import Item


class Slot(str, Enum):
    A = "A"
    B = "B"

    @classmethod
    def from_index(cls, index: int) -> Slot:
        """0 -> A, 1 -> B."""
        return (cls.A, cls.B)[index]


@dataclass
class Presentation:
    """One showing of an item, with the slot holding the correct sentence."""

    item: Item
    correct_slot: Slot
    answered: bool = False

    def text(self, slot: Slot) -> str:
        return self.item.correct if slot == self.correct_slot else self.item.incorrect

    def is_correct(self, slot: Slot) -> bool:
        return slot == self.correct_slot


def present(item: Item, rng: random.Random) -> Presentation:
    """Assign the correct sentence to A or B with a fair coin flip."""
    correct_slot = Slot.A if rng.random() < 0.5 else Slot.B
    return Presentation(item=item, correct_slot=correct_slot)
