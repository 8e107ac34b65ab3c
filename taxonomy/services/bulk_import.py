"""Bulk Import Service - assign categories to parsed import rows.

Rows arrive already parsed (one mapping per spreadsheet row). Each row is
assigned in one of two ways:

1. Explicit: the row names its category (and optionally up to three
   subcategories). Names are matched case-insensitively, level by level.
2. Auto: the row names no category, so the Auto-Classifier scores the
   product name and code.

Rows that cannot be assigned confidently are queued for manual assignment.
The batch is only finished once every queued row has been assigned.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Literal

from pydantic import BaseModel, Field

from taxonomy.core.auto_classifier import classify_row
from taxonomy.core.cascading_selector import InvalidSelection
from taxonomy.core.category_store import Category, CategoryNode, CategoryStore
from taxonomy.core.keyword_config import normalize_keyword_families
from taxonomy.core.path_resolver import SelectionChain, resolve_partial
from taxonomy.infra.logging import get_logger
from taxonomy.schemas.category import CLASSIFICATION_LEVELS, ProductClassification

logger = get_logger(__name__)

AssignmentSource = Literal["explicit", "auto", "manual"]

SUBCATEGORY_HEADERS = ("Subcategory 1", "Subcategory 2", "Subcategory 3")


class ImportRow(BaseModel):
    """The classification-relevant fields of one import row."""

    sku: str = Field(default="", description="Product code")
    name: str = Field(default="", description="Product name")
    category: str | None = Field(default=None, description="Main category name, if given")
    subcategories: list[str] = Field(
        default_factory=list,
        description="Subcategory names by level, if given",
    )

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}

    @classmethod
    def from_csv_row(cls, row: Mapping[str, Any]) -> "ImportRow":
        """Build from a template row.

        Accepts both plain headers (``SKU``) and the bold template
        headers (``**SKU**``).
        """
        cleaned = {
            _clean_header(key): "" if value is None else str(value).strip()
            for key, value in row.items()
            if key
        }
        return cls(
            sku=cleaned.get("SKU", ""),
            name=cleaned.get("Product Name", ""),
            category=cleaned.get("Category") or None,
            subcategories=[cleaned.get(header, "") for header in SUBCATEGORY_HEADERS],
        )


@dataclass(frozen=True)
class RowAssignment:
    """Category assignment for one import row.

    Attributes:
        index: Row position in the batch
        row: The parsed row
        chain: Assigned SelectionChain (empty while unassigned)
        source: How the chain was obtained
        confidence: Classifier confidence for auto assignments
        suggested_category_id: Classifier's best guess, kept for manual review
        needs_manual_assignment: Whether a person must still choose
    """

    index: int
    row: ImportRow
    chain: SelectionChain
    source: AssignmentSource
    confidence: int | None = None
    suggested_category_id: str | None = None
    needs_manual_assignment: bool = False

    def to_classification(self) -> ProductClassification:
        return ProductClassification.from_chain(self.chain)


def parse_rows(raw_rows: Iterable[Mapping[str, Any]]) -> list[ImportRow]:
    """Convert raw template rows, skipping rows without a SKU."""
    rows: list[ImportRow] = []
    skipped = 0
    for raw in raw_rows:
        row = ImportRow.from_csv_row(raw)
        if not row.sku:
            skipped += 1
            continue
        rows.append(row)

    if skipped:
        logger.debug("Skipped import rows without SKU", skipped=skipped)
    return rows


class ImportBatch:
    """Assignments for one import, with its manual-assignment queue."""

    def __init__(self, store: CategoryStore, assignments: Sequence[RowAssignment]) -> None:
        self._store = store
        self._assignments = list(assignments)

    @property
    def assignments(self) -> list[RowAssignment]:
        return list(self._assignments)

    @property
    def is_complete(self) -> bool:
        return not any(a.needs_manual_assignment for a in self._assignments)

    def pending(self) -> list[RowAssignment]:
        """Rows still needing manual assignment, in row order."""
        return [a for a in self._assignments if a.needs_manual_assignment]

    def next_pending(self, after: int | None = None) -> RowAssignment | None:
        """First pending row after the given index (or from the start)."""
        for assignment in self._assignments:
            if after is not None and assignment.index <= after:
                continue
            if assignment.needs_manual_assignment:
                return assignment
        return None

    def assign_manually(self, index: int, chain: Sequence[str]) -> RowAssignment:
        """Record a person's choice for one row.

        Args:
            index: Row index within the batch
            chain: Chosen SelectionChain (at least the main category)

        Returns:
            The updated assignment

        Raises:
            InvalidSelection: If the chain is empty, too deep, or not a
                valid path in the store
            IndexError: If the row index is out of range
        """
        if index < 0:
            raise IndexError(f"Row index must not be negative, got {index}")
        current = self._assignments[index]
        chain = tuple(chain)

        if not chain:
            raise InvalidSelection(0, None, "a main category is required")
        if len(chain) > CLASSIFICATION_LEVELS:
            raise InvalidSelection(
                CLASSIFICATION_LEVELS,
                chain[CLASSIFICATION_LEVELS],
                f"selection is limited to {CLASSIFICATION_LEVELS} levels",
            )

        resolved = resolve_partial(chain, self._store)
        if resolved != chain:
            level = len(resolved)
            raise InvalidSelection(level, chain[level], "not a valid path in the category store")

        updated = replace(
            current,
            chain=chain,
            source="manual",
            needs_manual_assignment=False,
        )
        self._assignments[index] = updated

        logger.info(
            "Row assigned manually",
            index=index,
            sku=current.row.sku,
            chain=chain,
            remaining=len(self.pending()),
        )
        return updated

    def to_classifications(self) -> list[ProductClassification]:
        """Four-field classifications for every row, in row order.

        Raises:
            ValueError: If rows still need manual assignment
        """
        pending = self.pending()
        if pending:
            raise ValueError(
                f"{len(pending)} rows still need manual assignment: "
                f"{[a.index for a in pending]}"
            )
        return [a.to_classification() for a in self._assignments]


class BulkImportService:
    """Assigns categories to import rows against one store snapshot.

    Holds no per-row state; the same service can assign any number of
    batches.
    """

    def __init__(
        self,
        store: CategoryStore,
        keyword_families: Mapping[str, Sequence[str]] | None = None,
        threshold: int | None = None,
    ) -> None:
        """Initialize bulk import service.

        Args:
            store: Category store snapshot to assign against
            keyword_families: Classifier keyword table (defaults to configured)
            threshold: Manual-assignment threshold (defaults to settings)
        """
        self.store = store
        self.keyword_families = (
            normalize_keyword_families(keyword_families) if keyword_families is not None else None
        )
        self.threshold = threshold

    def assign(self, row: ImportRow, index: int = 0) -> RowAssignment:
        """Assign one row explicitly or by auto-classification."""
        if row.category:
            return self._assign_explicit(row, index)
        return self._assign_auto(row, index)

    def assign_all(self, rows: Iterable[ImportRow]) -> ImportBatch:
        """Assign every row and collect the batch."""
        assignments = [self.assign(row, index) for index, row in enumerate(rows)]
        batch = ImportBatch(self.store, assignments)

        logger.info(
            "Import rows assigned",
            total=len(assignments),
            explicit=sum(1 for a in assignments if a.source == "explicit"),
            auto=sum(1 for a in assignments if a.source == "auto"),
            needs_manual=len(batch.pending()),
        )
        return batch

    def _assign_auto(self, row: ImportRow, index: int) -> RowAssignment:
        result = classify_row(
            row.name,
            row.sku,
            self.store,
            keyword_families=self.keyword_families,
            threshold=self.threshold,
        )
        suggested = result.category.id if result.category else None

        if result.needs_manual_assignment:
            return RowAssignment(
                index=index,
                row=row,
                chain=(),
                source="auto",
                confidence=result.confidence,
                suggested_category_id=suggested,
                needs_manual_assignment=True,
            )

        return RowAssignment(
            index=index,
            row=row,
            chain=(suggested,),
            source="auto",
            confidence=result.confidence,
            suggested_category_id=suggested,
        )

    def _assign_explicit(self, row: ImportRow, index: int) -> RowAssignment:
        category = _find_by_name(self.store.categories(), row.category or "")
        if category is None:
            logger.warning(
                "Import row names an unknown category",
                index=index,
                sku=row.sku,
                category=row.category,
            )
            return RowAssignment(
                index=index,
                row=row,
                chain=(),
                source="explicit",
                needs_manual_assignment=True,
            )

        chain = [category.id]
        for level, name in enumerate(row.subcategories[: CLASSIFICATION_LEVELS - 1], start=1):
            if not name.strip():
                break
            node = _find_by_name(self.store.children_of(chain[-1]), name)
            if node is None:
                logger.warning(
                    "Import row names an unknown subcategory, keeping parent",
                    index=index,
                    sku=row.sku,
                    level=level,
                    subcategory=name,
                )
                break
            chain.append(node.id)

        return RowAssignment(index=index, row=row, chain=tuple(chain), source="explicit")


def _clean_header(header: str) -> str:
    return str(header).strip().strip("*").strip()


def _find_by_name(
    candidates: Iterable[Category | CategoryNode],
    name: str,
) -> Category | CategoryNode | None:
    wanted = name.strip().lower()
    for candidate in candidates:
        if candidate.name.strip().lower() == wanted:
            return candidate
    return None


__all__ = [
    "BulkImportService",
    "ImportBatch",
    "ImportRow",
    "RowAssignment",
    "parse_rows",
]
