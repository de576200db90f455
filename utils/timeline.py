# utils/timeline.py
from datetime import date
from typing import Mapping, Optional, Sequence

import pandas as pd

from utils.due_dates import due_state
from utils.roles import role_label, role_tags

COLUMNS = ["Task", "Due", "Due state", "Assignee", "Priority", "Status"]


def _get(t, name):
    return t.get(name) if isinstance(t, dict) else getattr(t, name, None)


def assignee_label(assignee_ids, roles, names: Mapping[int, str]) -> str:
    """Assignee names, then one "Unassigned: <role>" badge per role still waiting."""
    parts = [names.get(i, f"Contact #{i}") for i in assignee_ids or []]
    parts += [f"Unassigned: {role_label(r)}" for r in role_tags(roles)]
    return ", ".join(parts) or "—"


def tasks_frame(tasks: Sequence, names: Mapping[int, str], today: Optional[date] = None) -> pd.DataFrame:
    """Table of tasks in the given order, titles indented by depth.

    Accepts materialized tasks or stored task dicts. ``names`` maps contact
    ids to display names.
    """
    rows = []
    for t in tasks:
        depth = _get(t, "depth")
        if depth is None:
            depth = _get(t, "level") or 0
        role = _get(t, "unassigned_role") or _get(t, "assigned_to_role")
        ids = _get(t, "assignee_ids")
        if not ids and _get(t, "assigned_to") is not None:
            ids = [_get(t, "assigned_to")]
        rows.append({
            "Task": ("    " * depth) + ("↳ " if depth else "") + (_get(t, "title") or ""),
            "Due": _get(t, "due_date"),
            "Due state": due_state(_get(t, "due_date"), today) or "",
            "Assignee": assignee_label(ids, role, names),
            "Priority": _get(t, "priority"),
            "Status": _get(t, "status"),
        })
    return pd.DataFrame(rows, columns=COLUMNS)
