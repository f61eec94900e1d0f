"""Tests for the default checklist catalog and checklist statistics."""

from collections import Counter
from types import SimpleNamespace

from backend.checklist.catalog import (
    DEFAULT_CHECKLIST_ITEMS,
    DEFAULT_DESCRIPTION,
    get_checklist_stats,
    get_item_description,
)
from backend.database.enums import ChecklistCategory, Importance


def test_default_catalog_shape() -> None:
    """The catalog composition feeds the MFA and hygiene components directly."""
    categories = Counter(entry["category"] for entry in DEFAULT_CHECKLIST_ITEMS)
    importance = Counter(entry["importance"] for entry in DEFAULT_CHECKLIST_ITEMS)

    assert len(DEFAULT_CHECKLIST_ITEMS) == 22
    assert set(categories) == set(ChecklistCategory)
    assert categories[ChecklistCategory.AUTHENTICATION] == 5
    assert importance[Importance.ESSENTIAL] == 10


def test_titles_are_unique_and_described() -> None:
    titles = [entry["title"] for entry in DEFAULT_CHECKLIST_ITEMS]
    assert len(titles) == len(set(titles))
    for title in titles:
        assert get_item_description(title) != DEFAULT_DESCRIPTION


def test_unknown_title_gets_default_description() -> None:
    assert get_item_description("Something new") == DEFAULT_DESCRIPTION


def test_checklist_stats() -> None:
    items = [
        SimpleNamespace(category="passwords", importance="essential", is_completed=True),
        SimpleNamespace(category="passwords", importance="recommended", is_completed=False),
        SimpleNamespace(category="privacy", importance="advanced", is_completed=False),
    ]
    stats = get_checklist_stats(items)

    assert stats["overall"] == {"total": 3, "completed": 1, "percentage": 33}
    assert stats["by_category"] == {
        "passwords": {"total": 2, "completed": 1},
        "privacy": {"total": 1, "completed": 0},
    }
    assert stats["by_importance"]["essential"] == {"total": 1, "completed": 1}


def test_checklist_stats_empty() -> None:
    stats = get_checklist_stats([])
    assert stats["overall"] == {"total": 0, "completed": 0, "percentage": 0}
    assert stats["by_category"] == {}
