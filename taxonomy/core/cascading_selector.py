"""Cascading Selector - level-by-level drill-down with reset-on-change.

Changing the selection at one level always clears every deeper level, so a
stale descendant can never outlive a changed ancestor.

Each screen or session owns its own selector. The store it reads from is
shared; the selector state is not.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from taxonomy.config import settings
from taxonomy.core.category_store import Category, CategoryNode, CategoryStore, TaxonomyError
from taxonomy.core.path_resolver import (
    BREADCRUMB_SEPARATOR,
    SelectionChain,
    describe_path,
    resolve_partial,
)
from taxonomy.infra.logging import get_logger

if TYPE_CHECKING:
    from taxonomy.schemas.category import ProductClassification

logger = get_logger(__name__)


class InvalidSelection(TaxonomyError):
    """Raised when a selection is not a legal child of the chain's tail.

    The selector state is left unchanged; callers should treat the attempt
    as a no-op.
    """

    def __init__(self, level: int, node_id: str | None, reason: str) -> None:
        self.level = level
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"Cannot select '{node_id}' at level {level}: {reason}")


class CascadingSelector:
    """Stateful controller for one drill-down selection.

    Usage:
        selector = CascadingSelector(store)
        selector.select(0, "glass")
        options = selector.options_for(1)
        selector.select(1, options[0].id)
    """

    def __init__(
        self,
        store: CategoryStore,
        initial_chain: Sequence[str | None] = (),
        max_levels: int | None = None,
    ) -> None:
        """Initialize selector.

        Args:
            store: Category store to select from
            initial_chain: Previously saved chain to redisplay (may be stale)
            max_levels: Maximum chain length (defaults to settings)

        Raises:
            ValueError: If max_levels is below 1
        """
        if max_levels is None:
            max_levels = settings.max_selection_levels
        if max_levels < 1:
            raise ValueError(f"max_levels must be at least 1, got {max_levels}")

        self._store = store
        self._max_levels = max_levels
        self._chain: SelectionChain = ()
        if initial_chain:
            self.restore(initial_chain)

    @property
    def current_chain(self) -> SelectionChain:
        return self._chain

    @property
    def depth(self) -> int:
        return len(self._chain)

    @property
    def max_levels(self) -> int:
        return self._max_levels

    @property
    def leaf_id(self) -> str | None:
        """Deepest selected id, or None when nothing is selected."""
        return self._chain[-1] if self._chain else None

    def select(self, level: int, node_id: str | None = None) -> SelectionChain:
        """Select ``node_id`` at ``level``, clearing everything deeper.

        An empty ``node_id`` clears this level and everything below it.

        Args:
            level: Chain position (0 is the top-level category)
            node_id: Category id (level 0), node id, or empty to clear

        Returns:
            The new current chain

        Raises:
            InvalidSelection: If the id is not a legal choice at this level
        """
        if level < 0:
            raise InvalidSelection(level, node_id, "level must not be negative")

        if not node_id:
            self._chain = self._chain[:level]
            return self._chain

        self._validate(level, node_id)
        self._chain = self._chain[:level] + (node_id,)

        logger.debug("Selection changed", level=level, node_id=node_id, chain=self._chain)
        return self._chain

    def options_for(self, level: int) -> list[Category] | list[CategoryNode]:
        """Candidates for a level's dropdown.

        Returns top-level categories for level 0 and the children of the
        selected parent otherwise. An empty list means the level has no
        resolvable parent yet and should not be rendered.
        """
        if level == 0:
            return self._store.categories()
        if level < 0 or level >= self._max_levels or level > len(self._chain):
            return []
        return self._store.children_of(self._chain[level - 1])

    def restore(self, chain: Sequence[str | None]) -> SelectionChain:
        """Re-seed from a saved chain, keeping its longest valid prefix."""
        self._chain = resolve_partial(list(chain)[: self._max_levels], self._store)
        return self._chain

    def clear(self) -> None:
        self._chain = ()

    def breadcrumb(self, separator: str = BREADCRUMB_SEPARATOR) -> str:
        return describe_path(self._chain, self._store, separator)

    def to_assignment(self) -> ProductClassification:
        """Current chain in the persisted four-field shape."""
        from taxonomy.schemas.category import ProductClassification

        return ProductClassification.from_chain(self._chain)

    def _validate(self, level: int, node_id: str) -> None:
        if level >= self._max_levels:
            reason = f"selection is limited to {self._max_levels} levels"
        elif level > len(self._chain):
            reason = f"no selection at level {level - 1}"
        elif level == 0:
            reason = "" if self._store.get_category(node_id) else "not a top-level category"
        elif self._store.is_child(self._chain[level - 1], node_id):
            reason = ""
        else:
            reason = f"not a child of '{self._chain[level - 1]}'"

        if reason:
            logger.info(
                "Rejected invalid selection",
                level=level,
                node_id=node_id,
                reason=reason,
                chain=self._chain,
            )
            raise InvalidSelection(level, node_id, reason)


__all__ = ["CascadingSelector", "InvalidSelection"]
