"""Path Resolver - rebuild root-to-leaf selection chains.

Resolution never fails. A dangling or misplaced id truncates the chain to
its longest valid prefix, so callers should read a shorter-than-expected
chain as "some specificity was lost" and degrade display or filtering
accordingly.
"""

from collections.abc import Sequence

from taxonomy.core.category_store import CategoryStore
from taxonomy.infra.logging import get_logger

logger = get_logger(__name__)

SelectionChain = tuple[str, ...]

BREADCRUMB_SEPARATOR = " → "


def resolve_path(leaf_id: str | None, store: CategoryStore) -> SelectionChain:
    """Walk parent pointers from leaf_id up to its top-level category.

    Args:
        leaf_id: Node id, or a top-level category id
        store: Category store to resolve against

    Returns:
        Chain in root-to-leaf order; ``()`` when leaf_id is unknown
    """
    if not leaf_id:
        return ()

    if store.get_category(leaf_id) is not None:
        return (leaf_id,)

    node = store.get_node(leaf_id)
    if node is None:
        logger.warning("Unresolved leaf id", node_id=leaf_id)
        return ()

    ids = [node.id]
    parent = store.parent_of(node.id)
    while parent is not None:
        ids.append(parent.id)
        parent = store.parent_of(parent.id)
    ids.append(node.root_category_id)

    return tuple(reversed(ids))


def resolve_partial(
    candidate_ids: Sequence[str | None],
    store: CategoryStore,
) -> SelectionChain:
    """Assemble a chain from separately stored, level-indexed ids.

    ``candidate_ids`` is ``[mainCategoryId, subId?, subSubId?, subSubSubId?]``.
    Each entry must resolve and be a child of the previous entry. The chain
    stops at the first empty or unresolvable entry; deeper ids are only
    meaningful relative to their immediate parent, so they are never used
    past a gap.

    Args:
        candidate_ids: Level-ordered ids, possibly sparse or stale
        store: Category store to resolve against

    Returns:
        Longest valid prefix as a SelectionChain
    """
    chain: list[str] = []

    for level, candidate in enumerate(candidate_ids):
        if not candidate:
            ignored = [c for c in candidate_ids[level + 1:] if c]
            if ignored:
                logger.warning(
                    "Ignoring ids below an empty level",
                    level=level,
                    ignored_ids=ignored,
                )
            break

        if level == 0:
            valid = store.get_category(candidate) is not None
        else:
            valid = store.is_child(chain[-1], candidate)

        if not valid:
            logger.warning(
                "Unresolved ancestor, truncating chain",
                node_id=candidate,
                level=level,
                resolved=tuple(chain),
            )
            break

        chain.append(candidate)

    return tuple(chain)


def path_names(chain: Sequence[str], store: CategoryStore) -> list[str]:
    """Display names for the resolvable prefix of a chain."""
    names: list[str] = []
    for item_id in resolve_partial(chain, store):
        item = store.get_category(item_id) or store.get_node(item_id)
        if item is not None:
            names.append(item.name)
    return names


def describe_path(
    chain: Sequence[str],
    store: CategoryStore,
    separator: str = BREADCRUMB_SEPARATOR,
) -> str:
    """Breadcrumb text such as ``"Glass → Frameless → 12mm"``."""
    return separator.join(path_names(chain, store))


__all__ = [
    "BREADCRUMB_SEPARATOR",
    "SelectionChain",
    "describe_path",
    "path_names",
    "resolve_partial",
    "resolve_path",
]
