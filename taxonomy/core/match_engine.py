"""Match Engine - ancestor-or-self filtering.

A product matches a filter when the filter chain is a prefix of the
product's chain. A shallow filter therefore matches everything beneath it,
and a filter deeper than the product's own assignment never matches.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, TypeVar

from taxonomy.core.category_store import CategoryStore
from taxonomy.core.path_resolver import resolve_partial, resolve_path

if TYPE_CHECKING:
    from taxonomy.schemas.category import ProductClassification

T = TypeVar("T")


def matches(product_chain: Sequence[str], filter_chain: Sequence[str]) -> bool:
    """Whether filter_chain is a prefix of (or equal to) product_chain.

    An empty filter matches every product.
    """
    if len(filter_chain) > len(product_chain):
        return False
    return all(p == f for p, f in zip(product_chain, filter_chain))


def matches_node(
    product_leaf_id: str | None,
    filter_chain: Sequence[str],
    store: CategoryStore,
) -> bool:
    """Match a product recorded by its deepest assigned id."""
    return matches(resolve_path(product_leaf_id, store), filter_chain)


def matches_assignment(
    assignment: ProductClassification,
    filter_chain: Sequence[str],
    store: CategoryStore,
) -> bool:
    """Match a product recorded in the four-field persisted shape.

    Stale ids shorten the product chain before matching, so a product whose
    deeper assignment no longer exists can still match shallower filters.
    """
    return matches(resolve_partial(assignment.candidate_ids(), store), filter_chain)


def filter_products(
    products: Iterable[T],
    filter_chain: Sequence[str],
    chain_of: Callable[[T], Sequence[str]],
) -> list[T]:
    """Keep the products whose chain matches, preserving input order.

    Args:
        products: Items to filter
        filter_chain: User-selected filter chain
        chain_of: Extracts a product's SelectionChain

    Returns:
        Matching products
    """
    if not filter_chain:
        return list(products)
    return [product for product in products if matches(chain_of(product), filter_chain)]


__all__ = ["filter_products", "matches", "matches_assignment", "matches_node"]
