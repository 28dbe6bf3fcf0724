"""Ancestor-chain resolution for repost lineages."""

from lyntfeed.logging import get_logger
from lyntfeed.models.item import ItemView
from lyntfeed.store.base import ItemStore


DEFAULT_MAX_DEPTH = 64

_log = get_logger("chain")


async def resolve_chain(
    store: ItemStore,
    viewer_id: str,
    start_parent_id: str | None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[ItemView]:
    """
    Walk parent pointers back from a leaf item.

    Only original (non-repost) items are included; reposts along the way
    are stepped through but left out of the result. The walk ends at a
    missing parent, an id already visited, or after max_depth fetches.

    Args:
        store: Item store to read from
        viewer_id: User the per-viewer fields are derived for
        start_parent_id: Parent id of the leaf item
        max_depth: Maximum number of parents fetched

    Returns:
        Original items ordered root first, immediate parent last
    """
    chain: list[ItemView] = []
    visited: set[str] = set()
    current = start_parent_id

    while current:
        if current in visited:
            _log.warning("chain_truncated", reason="cycle", item_id=current, length=len(chain))
            break
        if len(visited) >= max_depth:
            _log.warning("chain_truncated", reason="max_depth", item_id=current, length=len(chain))
            break

        visited.add(current)
        parent = await store.fetch_for_read(current, viewer_id)
        if parent is None:
            break

        if not parent.is_repost:
            chain.insert(0, parent)
        current = parent.parent_id

    return chain
