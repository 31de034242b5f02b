"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from minimal_pairs.item_store import Category, Item, ItemStore  # noqa: E402
from minimal_pairs.persistence import MemoryGateway  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def make_item(item_id: str, category: Category = Category.KASUS) -> Item:
    """Build a minimal pair with predictable texts."""
    return Item(
        id=item_id,
        category=category,
        correct=f"{item_id} richtig",
        incorrect=f"{item_id} falsch",
        highlight=("richtig", "falsch"),
        explanation=f"Erklärung zu {item_id}",
    )


class RecordingListener:
    """QuizListener that records every notification in order."""

    def __init__(self):
        self.events = []

    def on_item_presented(self, item, correct_slot):
        self.events.append(("presented", item.id, correct_slot))

    def on_answer_result(self, is_correct, explanation):
        self.events.append(("answer", is_correct, explanation))

    def on_queue_exhausted(self, reason):
        self.events.append(("exhausted", reason))

    def on_stats_changed(self, stats):
        self.events.append(("stats", stats.total_answered))

    def of_kind(self, kind):
        return [event for event in self.events if event[0] == kind]


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng():
    """Seeded random source for reproducible order."""
    return random.Random(1234)


@pytest.fixture
def sample_items():
    """Three kasus items and two passiv items, in load order."""
    return [
        make_item("ks-1", Category.KASUS),
        make_item("ks-2", Category.KASUS),
        make_item("ks-3", Category.KASUS),
        make_item("pv-1", Category.PASSIV),
        make_item("pv-2", Category.PASSIV),
    ]


@pytest.fixture
def store(sample_items):
    return ItemStore.from_items(sample_items)


@pytest.fixture
def gateway():
    return MemoryGateway()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def item_factory():
    return make_item
