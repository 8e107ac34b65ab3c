"""Pydantic schemas for records crossing the persistence boundary."""

from taxonomy.schemas.category import (
    CategoryNodeRecord,
    CategoryRecord,
    ProductClassification,
)
from taxonomy.schemas.normalization import (
    flatten_category_payload,
    store_from_payload,
    store_from_records,
)

__all__ = [
    "CategoryNodeRecord",
    "CategoryRecord",
    "ProductClassification",
    "flatten_category_payload",
    "store_from_payload",
    "store_from_records",
]
