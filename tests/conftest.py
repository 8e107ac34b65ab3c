"""Shared fixtures: a small glass-industry category hierarchy.

    Glass Pool Fencing (glass)
        Semi-Frameless (semi)
        Frameless Panels (frameless)
            Clear Glass (clear)
                12mm Thick (12mm)
                10mm Thick (10mm)
            Tinted Glass (tinted)
    Hardware (hardware)
        Hinges (hinges)
        Spigots (spigots)
    Shower Screens (shower)
        Fixed Panels (fixed)
"""

import pytest

from taxonomy.core.category_store import Category, CategoryNode, CategoryStore


@pytest.fixture
def categories() -> list[Category]:
    """Top-level categories in display order."""
    return [
        Category(id="glass", name="Glass Pool Fencing", color="#3B82F6", sort_order=0),
        Category(id="hardware", name="Hardware", color="#10B981", sort_order=1),
        Category(id="shower", name="Shower Screens", color="#F59E0B", sort_order=2),
    ]


@pytest.fixture
def nodes() -> list[CategoryNode]:
    """Flat node list, deliberately not in tree order."""
    return [
        CategoryNode(id="12mm", name="12mm Thick", root_category_id="glass", parent_id="clear", level=2),
        CategoryNode(id="frameless", name="Frameless Panels", root_category_id="glass", sort_order=1),
        CategoryNode(id="semi", name="Semi-Frameless", root_category_id="glass", sort_order=0),
        CategoryNode(id="clear", name="Clear Glass", root_category_id="glass", parent_id="frameless", level=1),
        CategoryNode(
            id="tinted",
            name="Tinted Glass",
            root_category_id="glass",
            parent_id="frameless",
            level=1,
            sort_order=1,
        ),
        CategoryNode(
            id="10mm",
            name="10mm Thick",
            root_category_id="glass",
            parent_id="clear",
            level=2,
            sort_order=1,
        ),
        CategoryNode(id="hinges", name="Hinges", root_category_id="hardware"),
        CategoryNode(id="spigots", name="Spigots", root_category_id="hardware", sort_order=1),
        CategoryNode(id="fixed", name="Fixed Panels", root_category_id="shower"),
    ]


@pytest.fixture
def store(nodes: list[CategoryNode], categories: list[Category]) -> CategoryStore:
    """Loaded store over the sample hierarchy."""
    return CategoryStore.load(nodes, categories)
