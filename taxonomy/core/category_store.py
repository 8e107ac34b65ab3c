"""Category Store - read-only index over the flat category node list.

The flat list of parent-pointer records is the single source of truth for
the hierarchy. Everything else (trees, paths, selector options) is derived
from a loaded store on demand.

Levels and root categories supplied by the persistence layer are not
trusted: both are recomputed from the parent chain at load time, and any
disagreement with the input is logged and corrected.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from taxonomy.config import settings
from taxonomy.infra.logging import get_logger

logger = get_logger(__name__)


class TaxonomyError(Exception):
    """Base class for category hierarchy errors."""

    pass


class CycleDetected(TaxonomyError):
    """Raised when parent-pointer traversal from a node does not terminate.

    Attributes:
        node_id: Node whose ancestor walk failed
        path: Ids visited before the walk was abandoned
    """

    def __init__(self, node_id: str, path: tuple[str, ...], max_depth: int) -> None:
        self.node_id = node_id
        self.path = path
        self.max_depth = max_depth
        super().__init__(
            f"Ancestor walk from node '{node_id}' did not terminate within "
            f"{max_depth} hops (visited: {' -> '.join(path)})"
        )


@dataclass(frozen=True)
class Category:
    """Top-level category. Always present, never a CategoryNode itself."""

    id: str
    name: str
    color: str = ""
    sort_order: int = 0


@dataclass(frozen=True)
class CategoryNode:
    """One subcategory beneath a top-level category.

    Attributes:
        id: Opaque unique identifier
        name: Display label
        root_category_id: Top-level category this node belongs to
        parent_id: Parent node id, None for a direct child of the category
        level: Depth below the category (0 for direct children)
        color: Presentation hint, passed through untouched
        sort_order: Display order among siblings
    """

    id: str
    name: str
    root_category_id: str
    parent_id: str | None = None
    level: int = 0
    color: str = ""
    sort_order: int = 0


class CategoryStore:
    """Indexed, immutable snapshot of categories and their nodes.

    Build one with ``CategoryStore.load``; the constructor expects
    already-validated data and is not meant to be called directly.

    A store can be shared freely between readers. It never changes after
    load.
    """

    def __init__(
        self,
        categories: dict[str, Category],
        nodes: dict[str, CategoryNode],
        max_depth: int,
    ) -> None:
        self._categories = categories
        self._nodes = nodes
        self._max_depth = max_depth

        self._category_children: dict[str, list[CategoryNode]] = {}
        self._node_children: dict[str, list[CategoryNode]] = {}
        for node in nodes.values():
            if node.parent_id is None:
                self._category_children.setdefault(node.root_category_id, []).append(node)
            else:
                self._node_children.setdefault(node.parent_id, []).append(node)

        # sorted() is stable, so equal sort_order keeps input order
        for index in (self._category_children, self._node_children):
            for parent_id, children in index.items():
                index[parent_id] = sorted(children, key=lambda n: n.sort_order)

    @classmethod
    def load(
        cls,
        flat_nodes: Iterable[CategoryNode],
        top_level_categories: Iterable[Category],
        max_depth: int | None = None,
    ) -> "CategoryStore":
        """Validate flat records and build a store.

        Args:
            flat_nodes: Subcategory records in any order
            top_level_categories: Top-level categories in display order
            max_depth: Maximum parent hops before a node is rejected as cyclic
                (defaults to settings.max_depth)

        Returns:
            Loaded CategoryStore

        Raises:
            CycleDetected: If any node's ancestor walk does not terminate
            ValueError: If max_depth is below 1
        """
        if max_depth is None:
            max_depth = settings.max_depth
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")

        categories: dict[str, Category] = {}
        for category in top_level_categories:
            if category.id in categories:
                logger.warning("Duplicate category id ignored", category_id=category.id)
                continue
            categories[category.id] = category

        raw_nodes: dict[str, CategoryNode] = {}
        for node in flat_nodes:
            if node.id in raw_nodes:
                logger.warning("Duplicate node id ignored", node_id=node.id)
                continue
            raw_nodes[node.id] = node

        nodes: dict[str, CategoryNode] = {}
        dropped: list[str] = []

        for node in raw_nodes.values():
            ancestry = _walk_ancestry(node, raw_nodes, max_depth)
            topmost = ancestry[-1]

            if topmost.parent_id:
                logger.warning(
                    "Node references a missing parent, dropping",
                    node_id=node.id,
                    missing_parent_id=topmost.parent_id,
                )
                dropped.append(node.id)
                continue

            root_category_id = topmost.root_category_id
            if root_category_id not in categories:
                logger.warning(
                    "Node belongs to an unknown category, dropping",
                    node_id=node.id,
                    root_category_id=root_category_id,
                )
                dropped.append(node.id)
                continue

            level = len(ancestry) - 1
            if node.level != level:
                logger.warning(
                    "Correcting node level",
                    node_id=node.id,
                    declared_level=node.level,
                    computed_level=level,
                )
            if node.root_category_id != root_category_id:
                logger.warning(
                    "Correcting node root category",
                    node_id=node.id,
                    declared_root=node.root_category_id,
                    computed_root=root_category_id,
                )

            nodes[node.id] = replace(
                node,
                level=level,
                root_category_id=root_category_id,
                parent_id=node.parent_id or None,
            )

        logger.info(
            "Category store loaded",
            categories=len(categories),
            nodes=len(nodes),
            dropped=len(dropped),
            max_depth=max_depth,
        )

        return cls(categories, nodes, max_depth)

    @property
    def max_depth(self) -> int:
        """Parent-hop bound the store was validated with."""
        return self._max_depth

    def categories(self) -> list[Category]:
        """Top-level categories in store order."""
        return list(self._categories.values())

    def nodes(self) -> list[CategoryNode]:
        """All nodes in store order."""
        return list(self._nodes.values())

    def get_category(self, category_id: str | None) -> Category | None:
        if not category_id:
            return None
        return self._categories.get(category_id)

    def get_node(self, node_id: str | None) -> CategoryNode | None:
        if not node_id:
            return None
        return self._nodes.get(node_id)

    def contains(self, item_id: str | None) -> bool:
        """Whether the id names a known category or node."""
        return self.get_category(item_id) is not None or self.get_node(item_id) is not None

    def parent_of(self, node_id: str) -> CategoryNode | None:
        """Parent node, or None for a level-0 or unknown node."""
        node = self.get_node(node_id)
        if node is None or node.parent_id is None:
            return None
        return self._nodes.get(node.parent_id)

    def children_of(self, parent_id: str | None, level: int | None = None) -> list[CategoryNode]:
        """Children of a category or node, ordered by sort_order.

        Args:
            parent_id: Top-level category id (returns its level-0 nodes)
                or node id
            level: Optional level filter applied to the children

        Returns:
            Ordered list of CategoryNode (empty for unknown ids)
        """
        if not parent_id:
            return []

        if parent_id in self._categories:
            children = self._category_children.get(parent_id, [])
        else:
            children = self._node_children.get(parent_id, [])

        if level is not None:
            return [child for child in children if child.level == level]
        return list(children)

    def nodes_for_category(self, category_id: str) -> list[CategoryNode]:
        """All nodes whose root is the given category, in store order."""
        return [node for node in self._nodes.values() if node.root_category_id == category_id]

    def is_child(self, parent_id: str | None, child_id: str | None) -> bool:
        """Whether parent_id -> child_id is a valid edge.

        A top-level category id is a valid parent for its level-0 nodes.
        """
        child = self.get_node(child_id)
        if child is None or not parent_id:
            return False
        if parent_id in self._categories:
            return child.parent_id is None and child.root_category_id == parent_id
        return child.parent_id == parent_id

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, item_id: object) -> bool:
        return isinstance(item_id, str) and self.contains(item_id)

    def __repr__(self) -> str:
        return f"<CategoryStore(categories={len(self._categories)}, nodes={len(self._nodes)})>"


def _walk_ancestry(
    node: CategoryNode,
    raw_nodes: dict[str, CategoryNode],
    max_depth: int,
) -> list[CategoryNode]:
    """Walk parent pointers from node to its topmost known ancestor.

    Returns the visited nodes, starting with ``node``. The last entry is
    either a parentless node or one whose parent is missing from the input.

    Raises:
        CycleDetected: On a revisited node or more than max_depth hops
    """
    ancestry: list[CategoryNode] = []
    seen: set[str] = set()
    current = node

    while True:
        if current.id in seen or len(ancestry) > max_depth:
            path = tuple(n.id for n in ancestry)
            logger.error(
                "Cycle detected in category hierarchy",
                node_id=node.id,
                path=path,
                max_depth=max_depth,
            )
            raise CycleDetected(node.id, path, max_depth)

        seen.add(current.id)
        ancestry.append(current)

        if not current.parent_id:
            return ancestry

        parent = raw_nodes.get(current.parent_id)
        if parent is None:
            return ancestry
        current = parent


__all__ = ["Category", "CategoryNode", "CategoryStore", "CycleDetected", "TaxonomyError"]
