"""Tree Builder - derive a navigable forest from a CategoryStore.

The forest is a disposable index for repeated descendant queries. It is
rebuilt from the store whenever needed and never written back.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from taxonomy.core.category_store import Category, CategoryNode, CategoryStore


@dataclass
class TreeNode:
    """A category or node with its materialized children.

    Attributes:
        item: Wrapped Category (tree root) or CategoryNode
        depth: Position in a selection chain (0 for the category itself,
            ``node.level + 1`` for nodes)
        children: Child TreeNodes ordered by sort_order
    """

    item: Category | CategoryNode
    depth: int
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def is_category(self) -> bool:
        return isinstance(self.item, Category)

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and all descendants, depth-first pre-order."""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def find(self, item_id: str) -> "TreeNode | None":
        """Find a descendant (or self) by id."""
        for tree_node in self.walk():
            if tree_node.id == item_id:
                return tree_node
        return None

    def descendant_ids(self) -> list[str]:
        """Ids of all descendants, excluding self."""
        return [tree_node.id for tree_node in self.walk() if tree_node is not self]


def build_tree(store: CategoryStore) -> list[TreeNode]:
    """Build one tree per top-level category.

    Args:
        store: Loaded category store (not mutated)

    Returns:
        Forest of TreeNodes in category store order
    """
    forest: list[TreeNode] = []
    for category in store.categories():
        root = TreeNode(item=category, depth=0)
        _attach_children(root, store)
        forest.append(root)
    return forest


def _attach_children(parent: TreeNode, store: CategoryStore) -> None:
    # Recursion depth is bounded by the store's validated max_depth
    for node in store.children_of(parent.id):
        child = TreeNode(item=node, depth=node.level + 1)
        _attach_children(child, store)
        parent.children.append(child)


def flatten_tree(forest: list[TreeNode]) -> Iterator[tuple[TreeNode, int]]:
    """Yield ``(tree_node, depth)`` pairs for indented rendering."""
    for root in forest:
        for tree_node in root.walk():
            yield tree_node, tree_node.depth


__all__ = ["TreeNode", "build_tree", "flatten_tree"]
