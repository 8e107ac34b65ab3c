"""Core module - category store, tree, paths, selection, matching, classification."""

from taxonomy.core.auto_classifier import ClassificationResult, classify, classify_row
from taxonomy.core.cascading_selector import CascadingSelector, InvalidSelection
from taxonomy.core.category_store import (
    Category,
    CategoryNode,
    CategoryStore,
    CycleDetected,
    TaxonomyError,
)
from taxonomy.core.keyword_config import KeywordConfigError, get_keyword_families
from taxonomy.core.match_engine import filter_products, matches, matches_assignment, matches_node
from taxonomy.core.path_resolver import (
    SelectionChain,
    describe_path,
    path_names,
    resolve_partial,
    resolve_path,
)
from taxonomy.core.tree_builder import TreeNode, build_tree, flatten_tree

__all__ = [
    "CascadingSelector",
    "Category",
    "CategoryNode",
    "CategoryStore",
    "ClassificationResult",
    "CycleDetected",
    "InvalidSelection",
    "KeywordConfigError",
    "SelectionChain",
    "TaxonomyError",
    "TreeNode",
    "build_tree",
    "classify",
    "classify_row",
    "describe_path",
    "filter_products",
    "flatten_tree",
    "get_keyword_families",
    "matches",
    "matches_assignment",
    "matches_node",
    "path_names",
    "resolve_partial",
    "resolve_path",
]
