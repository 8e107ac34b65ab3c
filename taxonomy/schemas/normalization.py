"""Adapters from persistence payloads to a CategoryStore.

Category payloads arrive either as flat node lists or as categories with a
``subcategories`` list whose entries may nest further nodes under
``children``. Both shapes are flattened into canonical records here.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from taxonomy.core.category_store import CategoryStore
from taxonomy.infra.logging import get_logger
from taxonomy.schemas.category import CategoryNodeRecord, CategoryRecord

logger = get_logger(__name__)

NESTED_KEYS = ("subcategories", "children")
ROOT_KEYS = ("rootCategoryId", "root_category_id", "categoryId", "category_id")


def flatten_category_payload(
    payload: Iterable[Mapping[str, Any]],
) -> tuple[list[CategoryRecord], list[CategoryNodeRecord]]:
    """Split a category payload into top-level and node records.

    Nested nodes inherit their category id and, when missing, their parent
    id from the enclosing entry.

    Args:
        payload: Categories, each optionally carrying nested subcategories

    Returns:
        Tuple of (category records, node records)

    Raises:
        pydantic.ValidationError: If a record lacks required fields
    """
    categories: list[CategoryRecord] = []
    nodes: list[CategoryNodeRecord] = []

    for raw_category in payload:
        category = CategoryRecord.model_validate(raw_category)
        categories.append(category)
        for raw_node in _nested(raw_category):
            _collect_nodes(raw_node, category.id, None, nodes)

    logger.debug(
        "Flattened category payload",
        categories=len(categories),
        nodes=len(nodes),
    )
    return categories, nodes


def store_from_records(
    categories: Iterable[Mapping[str, Any] | CategoryRecord],
    nodes: Iterable[Mapping[str, Any] | CategoryNodeRecord],
    max_depth: int | None = None,
) -> CategoryStore:
    """Validate flat records and load them into a store."""
    category_records = [
        c if isinstance(c, CategoryRecord) else CategoryRecord.model_validate(c)
        for c in categories
    ]
    node_records = [
        n if isinstance(n, CategoryNodeRecord) else CategoryNodeRecord.model_validate(n)
        for n in nodes
    ]
    return CategoryStore.load(
        [record.to_node() for record in node_records],
        [record.to_category() for record in category_records],
        max_depth=max_depth,
    )


def store_from_payload(
    payload: Iterable[Mapping[str, Any]],
    max_depth: int | None = None,
) -> CategoryStore:
    """Flatten a (possibly nested) category payload and load it."""
    categories, nodes = flatten_category_payload(payload)
    return store_from_records(categories, nodes, max_depth=max_depth)


def _nested(raw: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    entries: list[Mapping[str, Any]] = []
    for key in NESTED_KEYS:
        entries.extend(raw.get(key) or [])
    return entries


def _collect_nodes(
    raw_node: Mapping[str, Any],
    category_id: str,
    parent_id: str | None,
    nodes: list[CategoryNodeRecord],
) -> None:
    data = {key: value for key, value in raw_node.items() if key not in NESTED_KEYS}
    if not any(data.get(key) for key in ROOT_KEYS):
        data["categoryId"] = category_id
    if parent_id is not None and not (data.get("parentId") or data.get("parent_id")):
        data["parentId"] = parent_id

    record = CategoryNodeRecord.model_validate(data)
    nodes.append(record)

    for child in _nested(raw_node):
        _collect_nodes(child, category_id, record.id, nodes)


__all__ = ["flatten_category_payload", "store_from_payload", "store_from_records"]
