"""
Unit tests for the Leitner session scheduler.

Tests queue membership (category, answered, due/new) and ordering
(due before new, ascending box, stable ties, seeded shuffle).
"""

import random

import pytest

from minimal_pairs.item_store import Category
from minimal_pairs.ledger import LedgerEntry, ReviewLedger
from minimal_pairs.scheduler import build_queue, plan_session, shuffle_in_place

ALL = frozenset(Category)


@pytest.fixture
def kasus_items(item_factory):
    return [item_factory(f"k{i}", Category.KASUS) for i in range(1, 7)]


class TestMembership:
    def test_only_active_categories(self, sample_items, rng):
        queue = build_queue(sample_items, ReviewLedger(), {Category.PASSIV}, 1, set(), rng)
        assert sorted(queue) == ["pv-1", "pv-2"]

    def test_no_active_categories_gives_empty_queue(self, sample_items, rng):
        assert build_queue(sample_items, ReviewLedger(), set(), 1, set(), rng) == []

    def test_answered_items_excluded(self, sample_items, rng):
        queue = build_queue(sample_items, ReviewLedger(), ALL, 1, {"ks-1", "pv-2"}, rng)
        assert sorted(queue) == ["ks-2", "ks-3", "pv-1"]

    def test_not_yet_due_items_omitted(self, sample_items, rng):
        ledger = ReviewLedger(
            {
                "ks-1": LedgerEntry(box=3, last_reviewed_session=2),  # due from session 6
                "ks-2": LedgerEntry(box=1, last_reviewed_session=4),  # due from session 5
            }
        )
        queue = build_queue(sample_items, ledger, {Category.KASUS}, 5, set(), rng)
        assert "ks-1" not in queue
        assert "ks-2" in queue

        queue = build_queue(sample_items, ledger, {Category.KASUS}, 6, set(), rng)
        assert "ks-1" in queue

    def test_fresh_items_always_new(self, sample_items, rng):
        plan = plan_session(sample_items, ReviewLedger(), ALL, 40, set(), rng)
        assert plan.due_ids == []
        assert sorted(plan.new_ids) == sorted(item.id for item in sample_items)

    def test_each_item_at_most_once(self, sample_items, rng):
        ledger = ReviewLedger({"ks-1": LedgerEntry(box=1, last_reviewed_session=1)})
        queue = build_queue(sample_items, ledger, ALL, 3, set(), rng)
        assert len(queue) == len(set(queue)) == len(sample_items)

    def test_ledger_not_modified(self, sample_items, rng):
        ledger = ReviewLedger()
        build_queue(sample_items, ledger, ALL, 1, set(), rng)
        assert len(ledger) == 0


class TestOrdering:
    def test_due_items_sorted_by_box_then_item_order(self, kasus_items, rng):
        ledger = ReviewLedger(
            {
                "k1": LedgerEntry(box=3, last_reviewed_session=1),
                "k2": LedgerEntry(box=1, last_reviewed_session=4),
                "k3": LedgerEntry(box=2, last_reviewed_session=2),
                "k4": LedgerEntry(box=1, last_reviewed_session=3),
                "k5": LedgerEntry(box=3, last_reviewed_session=1),
            }
        )
        plan = plan_session(kasus_items, ledger, ALL, 5, set(), rng)

        assert plan.due_ids == ["k2", "k4", "k3", "k1", "k5"]
        assert plan.new_ids == ["k6"]

    def test_due_before_new(self, kasus_items, rng):
        ledger = ReviewLedger(
            {
                "k4": LedgerEntry(box=2, last_reviewed_session=1),
                "k5": LedgerEntry(box=1, last_reviewed_session=2),
            }
        )
        queue = build_queue(kasus_items, ledger, ALL, 3, set(), rng)

        assert queue[:2] == ["k5", "k4"]
        assert sorted(queue[2:]) == ["k1", "k2", "k3", "k6"]

    def test_new_items_shuffled_reproducibly(self, kasus_items):
        first = build_queue(kasus_items, ReviewLedger(), ALL, 1, set(), random.Random(7))
        second = build_queue(kasus_items, ReviewLedger(), ALL, 1, set(), random.Random(7))
        assert first == second
        assert sorted(first) == [item.id for item in kasus_items]


class TestShuffle:
    def test_shuffle_is_permutation(self, rng):
        values = list(range(20))
        shuffled = shuffle_in_place(values.copy(), rng)
        assert sorted(shuffled) == values

    def test_shuffle_reaches_every_order(self):
        rng = random.Random(0)
        seen = {tuple(shuffle_in_place([1, 2, 3], rng)) for _ in range(300)}
        assert len(seen) == 6

    def test_short_lists_unchanged(self, rng):
        assert shuffle_in_place([], rng) == []
        assert shuffle_in_place(["only"], rng) == ["only"]
