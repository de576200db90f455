# utils/materialize.py
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Mapping, Optional, Sequence

from models.contact import Contact
from models.enums import TaskPriority, TaskStatus
from utils.due_dates import compute_due_date
from utils.hierarchy import InvalidTemplateStructure, TemplateNode
from utils.roles import join_roles, resolve_assignees

logger = logging.getLogger(__name__)


@dataclass
class MaterializedTask:
    key: int                      # batch-local identity, allocated in traversal order
    parent_key: Optional[int]     # key of the parent's materialized task
    title: str
    description: str
    priority: str
    due_date: date
    assigned_to: Optional[int]    # first of assignee_ids
    milestone_id: Optional[int]
    sort_order: int
    depth: int
    days_from_meeting: int
    based_on_secondary: bool
    template_id: Optional[int]
    status: str = TaskStatus.TODO.value
    assignee_ids: List[int] = field(default_factory=list)
    unassigned_roles: List[str] = field(default_factory=list)

    @property
    def unassigned_role(self) -> Optional[str]:
        """Roles still waiting for a team member, comma-separated as stored."""
        return join_roles(self.unassigned_roles)

    @property
    def is_unassigned_role(self) -> bool:
        return bool(self.unassigned_roles)


def materialize(tree: Sequence[TemplateNode], meeting_date, secondary_date,
                team_members: Sequence[Contact],
                milestone_ids: Optional[Mapping[int, int]] = None) -> List[MaterializedTask]:
    """Walk the template tree depth-first and emit dated, assigned tasks.

    Output is in pre-order, so every parent precedes its children and a
    store can insert the list front to back. ``parent_key`` refers to the
    ``key`` of another record in the same list. ``milestone_ids`` maps
    template milestone ids onto the new project's milestone ids.
    """
    milestone_ids = milestone_ids or {}
    out: List[MaterializedTask] = []
    visited = set()

    # (node, parent_key, sibling_index, depth); pushed reversed so pops come out in order
    stack = [(n, None, i, 0) for i, n in reversed(list(enumerate(tree)))]
    while stack:
        node, parent_key, index, depth = stack.pop()
        if id(node) in visited:
            raise InvalidTemplateStructure(
                f"Invalid template structure: task template {node.id} is reachable twice")
        visited.add(id(node))

        t = node.template
        roles = resolve_assignees(t.assignee_role, team_members)
        task = MaterializedTask(
            key=len(out),
            parent_key=parent_key,
            title=(t.title or "").strip(),
            description=t.description or "",
            priority=TaskPriority.coerce(t.priority, TaskPriority.MEDIUM).value,
            due_date=compute_due_date(meeting_date, secondary_date,
                                      t.days_from_meeting or 0, bool(t.based_on_secondary)),
            assigned_to=roles.contact_ids[0] if roles.contact_ids else None,
            milestone_id=milestone_ids.get(t.milestone_id) if t.milestone_id is not None else None,
            sort_order=index,
            depth=depth,
            days_from_meeting=t.days_from_meeting or 0,
            based_on_secondary=bool(t.based_on_secondary),
            template_id=t.id,
            assignee_ids=roles.contact_ids,
            unassigned_roles=roles.unassigned_roles,
        )
        out.append(task)
        stack.extend((c, task.key, i, depth + 1) for i, c in reversed(list(enumerate(node.children))))

    unassigned = sum(1 for t in out if t.is_unassigned_role)
    logger.info("Materialized %d tasks (%d waiting on a role)", len(out), unassigned)
    return out
