# utils/reorder.py
import logging
from typing import Dict, List, Sequence

logger = logging.getLogger(__name__)


def _field(item, name):
    return item[name] if isinstance(item, dict) else getattr(item, name)


def reorder_siblings(siblings: Sequence, moved_id, new_index: int) -> List[Dict]:
    """Move one item within its sibling group and renumber the group 0..n-1.

    ``siblings`` are dicts or objects with ``id`` and ``sort_order``; they are
    put in ``sort_order`` order first (stable). ``new_index`` is clamped into
    range. An id that is not part of the group leaves the group untouched.
    """
    ordered = sorted(siblings, key=lambda s: _field(s, "sort_order") or 0)
    ids = [_field(s, "id") for s in ordered]
    if moved_id not in ids:
        logger.debug("Item %s is not in this sibling group; ignoring move", moved_id)
        return [{"id": _field(s, "id"), "sort_order": _field(s, "sort_order")} for s in ordered]

    ids.remove(moved_id)
    new_index = max(0, min(int(new_index), len(ids)))
    ids.insert(new_index, moved_id)
    return [{"id": i, "sort_order": pos} for pos, i in enumerate(ids)]


def sort_order_delta(before: Sequence, after: Sequence[Dict]) -> List[Dict]:
    """Only the ``{"id", "sort_order"}`` pairs whose sort order changed."""
    old = {_field(s, "id"): _field(s, "sort_order") for s in before}
    return [row for row in after if old.get(row["id"]) != row["sort_order"]]
