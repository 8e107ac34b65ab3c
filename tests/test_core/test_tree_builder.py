"""Tests for tree building from the flat store."""

from collections import Counter

from taxonomy.core.category_store import Category, CategoryNode, CategoryStore
from taxonomy.core.tree_builder import TreeNode, build_tree, flatten_tree


def test_one_tree_per_category(store: CategoryStore):
    """The forest has one root per top-level category, in store order."""
    forest = build_tree(store)

    assert [root.id for root in forest] == ["glass", "hardware", "shower"]
    assert all(root.is_category for root in forest)
    assert all(root.depth == 0 for root in forest)


def test_every_node_appears_exactly_once(store: CategoryStore):
    forest = build_tree(store)

    seen = Counter(tree_node.id for root in forest for tree_node in root.walk() if not tree_node.is_category)

    assert set(seen) == {node.id for node in store.nodes()}
    assert all(count == 1 for count in seen.values())


def test_depth_matches_level(store: CategoryStore):
    """Each node sits at the depth implied by its level."""
    forest = build_tree(store)

    for root in forest:
        for tree_node in root.walk():
            if not tree_node.is_category:
                assert tree_node.depth == tree_node.item.level + 1


def test_node_sits_under_its_root_category(store: CategoryStore):
    forest = build_tree(store)

    for root in forest:
        for tree_node in root.walk():
            if not tree_node.is_category:
                assert tree_node.item.root_category_id == root.id


def test_children_are_sorted(store: CategoryStore):
    glass = build_tree(store)[0]
    assert [child.id for child in glass.children] == ["semi", "frameless"]


def test_find_and_descendants(store: CategoryStore):
    glass = build_tree(store)[0]

    frameless = glass.find("frameless")

    assert isinstance(frameless, TreeNode)
    assert frameless.name == "Frameless Panels"
    assert set(frameless.descendant_ids()) == {"clear", "tinted", "12mm", "10mm"}
    assert glass.find("hinges") is None


def test_walk_is_preorder(store: CategoryStore):
    glass = build_tree(store)[0]
    assert [n.id for n in glass.walk()] == [
        "glass",
        "semi",
        "frameless",
        "clear",
        "12mm",
        "10mm",
        "tinted",
    ]


def test_flatten_tree_yields_depths(store: CategoryStore):
    flattened = [(n.id, depth) for n, depth in flatten_tree(build_tree(store))]

    assert flattened[:4] == [("glass", 0), ("semi", 1), ("frameless", 1), ("clear", 2)]
    assert ("hardware", 0) in flattened
    assert ("12mm", 3) in flattened


def test_build_does_not_mutate_store(store: CategoryStore):
    before = store.nodes()
    build_tree(store)
    assert store.nodes() == before


def test_category_without_nodes_has_empty_tree():
    store = CategoryStore.load([], [Category(id="empty", name="Empty")])

    forest = build_tree(store)

    assert len(forest) == 1
    assert forest[0].children == []


def test_rebuild_is_equivalent(store: CategoryStore):
    """The forest can be re-derived from the store at any time."""
    first = [(n.id, d) for n, d in flatten_tree(build_tree(store))]
    second = [(n.id, d) for n, d in flatten_tree(build_tree(store))]
    assert first == second


def test_deep_chain_builds():
    nodes = [CategoryNode(id="n0", name="N0", root_category_id="cat")]
    for i in range(1, 20):
        nodes.append(CategoryNode(id=f"n{i}", name=f"N{i}", root_category_id="cat", parent_id=f"n{i - 1}"))
    store = CategoryStore.load(nodes, [Category(id="cat", name="Cat")])

    root = build_tree(store)[0]

    assert root.find("n19").depth == 20
