"""
Review Ledger: Leitner Box State.

One entry per item:
- box: 1-5, the item's mastery tier
- last_reviewed_session: session number of the last answer (0 = never)

Review intervals are counted in sessions, doubling per box:

    box 1 -> every session
    box 2 -> every 2 sessions
    box 3 -> every 4 sessions
    box 4 -> every 8 sessions
    box 5 -> every 16 sessions
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from loguru import logger

LEITNER_BOXES = 5
REVIEW_INTERVALS: tuple[int, ...] = (1, 2, 4, 8, 16)


def review_interval(box: int) -> int:
    """Sessions that must pass before an item in `box` is due again."""
    if not 1 <= box <= LEITNER_BOXES:
        raise ValueError(f"box must be between 1 and {LEITNER_BOXES}, got {box}")
    return REVIEW_INTERVALS[box - 1]


# =============================================================================
# Ledger Entry
# =============================================================================


@dataclass
class LedgerEntry:
    """Scheduling record for a single item."""

    box: int = 1
    last_reviewed_session: int = 0

    def __post_init__(self) -> None:
        if not 1 <= self.box <= LEITNER_BOXES:
            raise ValueError(f"box must be between 1 and {LEITNER_BOXES}, got {self.box}")
        if self.last_reviewed_session < 0:
            raise ValueError(
                f"last_reviewed_session must be >= 0, got {self.last_reviewed_session}"
            )

    @property
    def is_new(self) -> bool:
        """Never answered."""
        return self.last_reviewed_session == 0

    def sessions_since_review(self, session_number: int) -> int:
        return session_number - self.last_reviewed_session

    def is_due(self, session_number: int) -> bool:
        """Reviewed before and its box interval has elapsed."""
        if self.is_new:
            return False
        return self.sessions_since_review(session_number) >= review_interval(self.box)

    def promote(self, session_number: int) -> None:
        self.box = min(self.box + 1, LEITNER_BOXES)
        self.last_reviewed_session = session_number

    def demote(self, session_number: int) -> None:
        # A single miss sends the item all the way back to box 1.
        self.box = 1
        self.last_reviewed_session = session_number

    def to_dict(self) -> dict[str, int]:
        return {"box": self.box, "last_reviewed_session": self.last_reviewed_session}


# =============================================================================
# Review Ledger
# =============================================================================


class ReviewLedger:
    """
    Map of item id -> LedgerEntry.

    Entries are created lazily with the defaults (box 1, never reviewed)
    the first time `entry()` is called for an id. `lookup()` reads without
    creating, for callers that must not mutate the ledger.
    """

    def __init__(self, entries: Mapping[str, LedgerEntry] | None = None):
        self._entries: dict[str, LedgerEntry] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._entries

    def entry(self, item_id: str) -> LedgerEntry:
        """Get the entry for an item, creating the default one if needed."""
        if item_id not in self._entries:
            self._entries[item_id] = LedgerEntry()
        return self._entries[item_id]

    def lookup(self, item_id: str) -> LedgerEntry:
        """Get the entry for an item without recording it."""
        return self._entries.get(item_id) or LedgerEntry()

    def promote(self, item_id: str, session_number: int) -> LedgerEntry:
        entry = self.entry(item_id)
        old_box = entry.box
        entry.promote(session_number)
        logger.debug(f"Promoted {item_id}: box {old_box} -> {entry.box}")
        return entry

    def demote(self, item_id: str, session_number: int) -> LedgerEntry:
        entry = self.entry(item_id)
        old_box = entry.box
        entry.demote(session_number)
        logger.debug(f"Demoted {item_id}: box {old_box} -> 1")
        return entry

    def box_counts(self, item_ids: Iterable[str]) -> dict[int, int]:
        """Number of the given items currently in each box."""
        counts = {box: 0 for box in range(1, LEITNER_BOXES + 1)}
        for item_id in item_ids:
            counts[self.lookup(item_id).box] += 1
        return counts

    def reset(self) -> None:
        self._entries.clear()

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {item_id: entry.to_dict() for item_id, entry in self._entries.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, int]]) -> ReviewLedger:
        return cls({item_id: LedgerEntry(**fields) for item_id, fields in data.items()})
