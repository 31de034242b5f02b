"""
Item Store: Minimal Pair Loader.

Loads the quiz items once at startup from one JSON document per
grammar category:

    <data_dir>/<category>.json  ->  {"items": [{id, correct, incorrect,
                                                highlight[], explanation}]}

The category is attached by the loader from the file name. A missing or
malformed document contributes zero items; nothing here is fatal.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger

# =============================================================================
# Categories
# =============================================================================


class Category(str, Enum):
    """The ten fixed grammar topics."""

    WECHSELPRAEPOSITIONEN = "wechselpraepositionen"
    DATIV_VERBEN = "dativ-verben"
    KASUS = "kasus"
    KOMMASETZUNG = "kommasetzung"
    WORTSTELLUNG = "wortstellung"
    ADJEKTIVENDUNGEN = "adjektivendungen"
    KONJUNKTIV_II = "konjunktiv-ii"
    VERGLEICHE = "vergleiche"
    PASSIV = "passiv"
    RELATIVPRONOMEN = "relativpronomen"

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: str) -> Category | None:
        """Return the category for an identifier, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


DISPLAY_NAMES: dict[Category, str] = {
    Category.WECHSELPRAEPOSITIONEN: "Wechselpräpositionen",
    Category.DATIV_VERBEN: "Dativ-Verben",
    Category.KASUS: "Kasus (Fälle)",
    Category.KOMMASETZUNG: "Kommasetzung",
    Category.WORTSTELLUNG: "Wortstellung",
    Category.ADJEKTIVENDUNGEN: "Adjektivendungen",
    Category.KONJUNKTIV_II: "Konjunktiv II",
    Category.VERGLEICHE: "Vergleiche",
    Category.PASSIV: "Passiv",
    Category.RELATIVPRONOMEN: "Relativpronomen",
}


# =============================================================================
# Item
# =============================================================================


@dataclass(frozen=True)
class Item:
    """
    A single minimal pair.

    `highlight` lists the substrings that differ between the two
    sentences so a front end can mark them.
    """

    id: str
    category: Category
    correct: str
    incorrect: str
    highlight: tuple[str, ...] = ()
    explanation: str = ""

    @classmethod
    def from_dict(cls, data: dict, category: Category) -> Item:
        """
        Create an Item from a JSON record.

        Raises:
            KeyError: a required field is missing
            TypeError: a field has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"item record must be an object, got {type(data).__name__}")

        fields = {name: data[name] for name in ("id", "correct", "incorrect")}
        for name, value in fields.items():
            if not isinstance(value, str) or not value:
                raise TypeError(f"'{name}' must be a non-empty string")

        highlight = data.get("highlight") or []
        if not isinstance(highlight, list) or not all(isinstance(h, str) for h in highlight):
            raise TypeError("'highlight' must be a list of strings")

        explanation = data.get("explanation") or ""
        if not isinstance(explanation, str):
            raise TypeError("'explanation' must be a string")

        return cls(
            id=fields["id"],
            category=category,
            correct=fields["correct"],
            incorrect=fields["incorrect"],
            highlight=tuple(h for h in highlight if h),
            explanation=explanation,
        )


# =============================================================================
# Item Store
# =============================================================================


class ItemStore:
    """
    Immutable-after-load collection of quiz items.

    Items keep their load order (category order, then file order), which
    the scheduler relies on for its stable sort.
    """

    DEFAULT_DATA_DIR = Path("data")

    def __init__(self, data_dir: Path | None = None):
        self.data_dir = data_dir or self.DEFAULT_DATA_DIR
        self._items: dict[str, Item] = {}
        self._files_loaded: list[Path] = []

    @classmethod
    def from_items(cls, items: Iterable[Item]) -> ItemStore:
        """Build a store from already constructed items."""
        store = cls()
        for item in items:
            store._add(item)
        return store

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items.values())

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def get(self, item_id: str) -> Item | None:
        return self._items.get(item_id)

    def in_categories(self, categories: Iterable[Category]) -> list[Item]:
        """Items whose category is in `categories`, in load order."""
        wanted = set(categories)
        return [item for item in self._items.values() if item.category in wanted]

    def counts_by_category(self) -> dict[Category, int]:
        counts = {category: 0 for category in Category}
        for item in self._items.values():
            counts[item.category] += 1
        return counts

    def load(self) -> int:
        """
        Load every category file from the data directory.

        Returns:
            Number of items loaded
        """
        self._items.clear()
        self._files_loaded.clear()

        for category in Category:
            self._load_category(category)

        logger.info(
            f"ItemStore loaded: {len(self._items)} items from "
            f"{len(self._files_loaded)}/{len(Category)} category files"
        )
        return len(self._items)

    def _load_category(self, category: Category) -> int:
        path = self.data_dir / f"{category.value}.json"

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"No data for category '{category.value}' ({path} missing)")
            return 0
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load {path}: {e}")
            return 0

        records = data.get("items") if isinstance(data, dict) else None
        if not isinstance(records, list):
            logger.warning(f"Malformed document {path}: expected an 'items' list")
            return 0

        loaded = 0
        for record in records:
            try:
                item = Item.from_dict(record, category)
            except (KeyError, TypeError) as e:
                logger.warning(f"Invalid item in {path}: {e}")
                continue
            if self._add(item):
                loaded += 1

        self._files_loaded.append(path)
        logger.debug(f"Loaded {loaded} items from {path.name}")
        return loaded

    def _add(self, item: Item) -> bool:
        if item.id in self._items:
            logger.warning(f"Duplicate item id '{item.id}' ignored")
            return False
        self._items[item.id] = item
        return True
