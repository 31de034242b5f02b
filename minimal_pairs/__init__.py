"""
Minimal Pairs: Leitner-scheduled German grammar quiz.

Presents pairs of correct/incorrect sentences and schedules their review
with a five-box Leitner system counted in sessions.

Components:
- ItemStore: JSON loading of items per grammar category
- ReviewLedger: Leitner box and last-reviewed session per item
- build_queue: due reviews (lowest box first) then shuffled new items
- SessionTracker / Stats: current session and answer counters
- AnswerProcessor: promotes/demotes items and saves progress
- QuizEngine: user actions in, listener notifications out
- JsonFileGateway: JSON persistence of progress
"""

from .answers import AnswerOutcome, AnswerProcessor
from .engine import ExhaustionReason, NullListener, QuizEngine, QuizListener
from .item_store import Category, Item, ItemStore
from .ledger import LEITNER_BOXES, REVIEW_INTERVALS, LedgerEntry, ReviewLedger, review_interval
from .persistence import JsonFileGateway, MemoryGateway, PersistedState, PersistenceGateway
from .presentation import Presentation, Slot, present
from .scheduler import QueuePlan, build_queue, plan_session
from .session import CategoryStats, SessionTracker, Stats
from .state import QuizState

__all__ = [
    # Items
    "Category",
    "Item",
    "ItemStore",
    # Ledger
    "LEITNER_BOXES",
    "REVIEW_INTERVALS",
    "LedgerEntry",
    "ReviewLedger",
    "review_interval",
    # Scheduling
    "QueuePlan",
    "build_queue",
    "plan_session",
    # Session
    "CategoryStats",
    "SessionTracker",
    "Stats",
    "QuizState",
    # Answers
    "Presentation",
    "Slot",
    "present",
    "AnswerOutcome",
    "AnswerProcessor",
    # Persistence
    "PersistenceGateway",
    "PersistedState",
    "JsonFileGateway",
    "MemoryGateway",
    # Engine
    "QuizEngine",
    "QuizListener",
    "NullListener",
    "ExhaustionReason",
]
