"""Boundary schemas for category records and product classifications.

Persistence collaborators hand over records whose field names vary
(``parentId`` / ``parent_id``, ``categoryId`` / ``rootCategoryId`` ...).
These models accept the known variants and convert to the canonical
dataclasses, so the core never branches on field names.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from taxonomy.core.category_store import Category, CategoryNode, CategoryStore
from taxonomy.core.path_resolver import SelectionChain, resolve_partial

CLASSIFICATION_LEVELS = 4


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class CategoryRecord(BaseModel):
    """Top-level category as supplied by the persistence layer."""

    id: str = Field(min_length=1, description="Category id")
    name: str = Field(description="Display name")
    color: str = Field(default="", description="Presentation hint, passed through")
    sort_order: int = Field(
        default=0,
        validation_alias=AliasChoices("sortOrder", "sort_order"),
        description="Display order among categories",
    )

    model_config = {"extra": "ignore", "populate_by_name": True, "coerce_numbers_to_str": True}

    def to_category(self) -> Category:
        return Category(id=self.id, name=self.name, color=self.color, sort_order=self.sort_order)


class CategoryNodeRecord(BaseModel):
    """Subcategory record as supplied by the persistence layer."""

    id: str = Field(min_length=1, description="Node id")
    name: str = Field(description="Display name")
    color: str = Field(default="", description="Presentation hint, passed through")
    level: int = Field(default=0, ge=0, description="Declared level (recomputed on load)")
    parent_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("parentId", "parent_id"),
        description="Parent node id, empty for a direct child of the category",
    )
    root_category_id: str = Field(
        validation_alias=AliasChoices(
            "rootCategoryId", "root_category_id", "categoryId", "category_id"
        ),
        description="Top-level category id",
    )
    sort_order: int = Field(
        default=0,
        validation_alias=AliasChoices("sortOrder", "sort_order"),
        description="Display order among siblings",
    )

    model_config = {"extra": "ignore", "populate_by_name": True, "coerce_numbers_to_str": True}

    @field_validator("parent_id", mode="before")
    @classmethod
    def validate_parent_id(cls, v: Any) -> Any:
        """Treat empty strings as no parent."""
        return _blank_to_none(v)

    def to_node(self) -> CategoryNode:
        return CategoryNode(
            id=self.id,
            name=self.name,
            root_category_id=self.root_category_id,
            parent_id=self.parent_id,
            level=self.level,
            color=self.color,
            sort_order=self.sort_order,
        )


class ProductClassification(BaseModel):
    """A product's category assignment in its persisted four-field shape.

    Example JSON:
        {
            "mainCategoryId": "glass",
            "subCategoryId": "frameless",
            "subSubCategoryId": null,
            "subSubSubCategoryId": null
        }
    """

    main_category_id: str | None = Field(default=None, alias="mainCategoryId")
    sub_category_id: str | None = Field(default=None, alias="subCategoryId")
    sub_sub_category_id: str | None = Field(default=None, alias="subSubCategoryId")
    sub_sub_sub_category_id: str | None = Field(default=None, alias="subSubSubCategoryId")

    model_config = {"extra": "ignore", "populate_by_name": True, "coerce_numbers_to_str": True}

    @field_validator(
        "main_category_id",
        "sub_category_id",
        "sub_sub_category_id",
        "sub_sub_sub_category_id",
        mode="before",
    )
    @classmethod
    def validate_ids(cls, v: Any) -> Any:
        """Treat empty strings as unset."""
        return _blank_to_none(v)

    @classmethod
    def from_chain(cls, chain: Sequence[str]) -> "ProductClassification":
        """Spread a SelectionChain over the four level fields.

        Raises:
            ValueError: If the chain is deeper than four levels
        """
        if len(chain) > CLASSIFICATION_LEVELS:
            raise ValueError(
                f"Chain has {len(chain)} levels, at most {CLASSIFICATION_LEVELS} can be stored"
            )
        padded = list(chain) + [None] * (CLASSIFICATION_LEVELS - len(chain))
        return cls(
            main_category_id=padded[0],
            sub_category_id=padded[1],
            sub_sub_category_id=padded[2],
            sub_sub_sub_category_id=padded[3],
        )

    def candidate_ids(self) -> list[str | None]:
        """Level-ordered ids, as consumed by resolve_partial."""
        return [
            self.main_category_id,
            self.sub_category_id,
            self.sub_sub_category_id,
            self.sub_sub_sub_category_id,
        ]

    def to_chain(self, store: CategoryStore) -> SelectionChain:
        """Resolve against the store, keeping the longest valid prefix."""
        return resolve_partial(self.candidate_ids(), store)

    def to_record(self) -> dict[str, str | None]:
        """Serialize with the persisted camelCase field names."""
        return self.model_dump(by_alias=True)


__all__ = [
    "CLASSIFICATION_LEVELS",
    "CategoryNodeRecord",
    "CategoryRecord",
    "ProductClassification",
]
