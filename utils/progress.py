# utils/progress.py
from typing import Iterable, List, Sequence

from models.enums import TaskStatus


def _status(t) -> TaskStatus:
    raw = t["status"] if isinstance(t, dict) else t.status
    return TaskStatus.coerce(raw, TaskStatus.TODO)


def compute_progress(tasks: Iterable) -> float:
    """Percent of tasks completed, ignoring cancelled ones."""
    vals = [_status(t) for t in tasks]
    vals = [s for s in vals if s is not TaskStatus.CANCELLED]
    if not vals:
        return 0.0
    done = sum(1 for s in vals if s is TaskStatus.COMPLETED)
    return float(done * 100.0 / len(vals))


def milestone_progress(tasks: Sequence[dict], milestones: Sequence[dict]) -> List[dict]:
    rows = []
    for m in sorted(milestones, key=lambda m: m.get("sort_order") or 0):
        mine = [t for t in tasks if t.get("milestone_id") == m["id"]]
        rows.append({"Milestone": m["title"], "Tasks": len(mine), "Progress": compute_progress(mine)})
    loose = [t for t in tasks if t.get("milestone_id") is None]
    if loose:
        rows.append({"Milestone": "No milestone", "Tasks": len(loose), "Progress": compute_progress(loose)})
    return rows
