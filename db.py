# db.py

#============================================================#
#                          ClientHub                         #
#============================================================#
# Purpose     : Client projects seeded from meeting templates#
#               with dated, role-assigned task trees         #
#               (SQLite/Postgres via SQLModel)               #
#                                                            #
# Change Log  :                                              #
#  - V1.0.0 : Templates, materialization, task reordering.   #
#  - V1.1.0 : Reschedule on meeting move, pending roles.     #
#  - V1.2.0 : Multi-role template tasks, task assignees.     #
#============================================================#


from __future__ import annotations

import logging
import os
from datetime import date
from typing import Optional, List, Dict

from sqlmodel import SQLModel, Session, create_engine, select, col

from models import (
    Contact, ContactType, ContactStatus, ProjectType, ProjectTemplate,
    TemplateMilestone, TaskTemplate, Project, Milestone, Task, TaskAssignee, TaskStatus,
)
from utils.due_dates import parse_date, reschedule
from utils.hierarchy import build_tree
from utils.materialize import materialize
from utils.reorder import reorder_siblings, sort_order_delta
from utils.roles import join_roles, resolve_pending

logger = logging.getLogger(__name__)


# ---- Settings: Streamlit secrets, then environment, then default ----
def setting(name: str, default: Optional[str] = None) -> Optional[str]:
    try:
        import streamlit as st
        value = st.secrets.get(name)
    except Exception:
        value = None
    return value or os.getenv(name) or default


DATABASE_URL = setting("DATABASE_URL", "sqlite:///clienthub.db")
LOG_LEVEL = setting("LOG_LEVEL", "INFO")

engine = create_engine(DATABASE_URL, pool_pre_ping=True)


def init_db():
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)


# default for "leave this field as it is"
_UNCHANGED = object()


# ---- contacts ----
def add_contact(first_name: str, last_name: str, contact_type: str = ContactType.CLIENT.value,
                role: Optional[str] = None, status: str = ContactStatus.ACTIVE.value,
                email: Optional[str] = None) -> int:
    with get_session() as s:
        c = Contact(first_name=first_name.strip(), last_name=last_name.strip(),
                    contact_type=ContactType.coerce(contact_type, ContactType.CLIENT).value,
                    role=role or None, status=ContactStatus.coerce(status, ContactStatus.ACTIVE).value,
                    email=(email.strip().lower() if email else None))
        s.add(c); s.commit()
        return c.id


def set_contact_status(contact_id: int, status: str) -> None:
    with get_session() as s:
        c = s.get(Contact, contact_id)
        if not c:
            raise ValueError("Contact not found")
        c.status = ContactStatus.coerce(status, ContactStatus.ACTIVE).value
        s.add(c); s.commit()


def get_team_members() -> List[Contact]:
    """Team members in id order; role resolution takes the first match."""
    with get_session() as s:
        q = (select(Contact)
             .where(Contact.contact_type == ContactType.TEAM_MEMBER.value)
             .order_by(Contact.id))
        return list(s.exec(q).all())


def get_clients() -> List[Contact]:
    with get_session() as s:
        q = (select(Contact)
             .where(Contact.contact_type != ContactType.TEAM_MEMBER.value)
             .order_by(Contact.last_name, Contact.first_name))
        return list(s.exec(q).all())


def contact_names() -> Dict[int, str]:
    with get_session() as s:
        return {c.id: c.full_name for c in s.exec(select(Contact)).all()}


# ---- templates ----
def create_template(name: str, meeting_type: Optional[str] = None, description: Optional[str] = None) -> int:
    with get_session() as s:
        mt = ProjectType.coerce(meeting_type)
        t = ProjectTemplate(name=name.strip(), meeting_type=mt.value if mt else None, description=description)
        s.add(t); s.commit()
        return t.id


def add_template_milestone(template_id: int, title: str, sort_order: int = 0,
                           description: Optional[str] = None) -> int:
    with get_session() as s:
        if not s.get(ProjectTemplate, template_id):
            raise ValueError("Template not found")
        m = TemplateMilestone(template_id=template_id, title=title.strip(),
                              sort_order=sort_order, description=description)
        s.add(m); s.commit()
        return m.id


def add_template_task(template_id: int, title: str, days_from_meeting: int = 0,
                      based_on_secondary: bool = False, assignee_role=None,
                      parent_template_id: Optional[int] = None, milestone_id: Optional[int] = None,
                      priority: str = "medium", description: Optional[str] = None,
                      sort_order: Optional[int] = None) -> int:
    """Add a task to a template. Without ``sort_order`` it goes last among its siblings.

    ``assignee_role`` is one role tag or a list of them.
    """
    with get_session() as s:
        if not s.get(ProjectTemplate, template_id):
            raise ValueError("Template not found")
        if sort_order is None:
            siblings = s.exec(select(TaskTemplate).where(
                TaskTemplate.template_id == template_id,
                TaskTemplate.parent_template_id == parent_template_id)).all()
            sort_order = max((t.sort_order for t in siblings), default=-1) + 1
        t = TaskTemplate(template_id=template_id, title=title.strip(), description=description,
                         priority=priority, days_from_meeting=int(days_from_meeting),
                         based_on_secondary=based_on_secondary, assignee_role=join_roles(assignee_role),
                         parent_template_id=parent_template_id, milestone_id=milestone_id,
                         sort_order=sort_order)
        s.add(t); s.commit()
        return t.id


def get_templates() -> List[ProjectTemplate]:
    with get_session() as s:
        return list(s.exec(select(ProjectTemplate).order_by(ProjectTemplate.name)).all())


def get_template_tasks(template_id: int) -> List[TaskTemplate]:
    with get_session() as s:
        q = select(TaskTemplate).where(TaskTemplate.template_id == template_id).order_by(TaskTemplate.id)
        return list(s.exec(q).all())


def get_template_milestones(template_id: int) -> List[TemplateMilestone]:
    with get_session() as s:
        q = (select(TemplateMilestone)
             .where(TemplateMilestone.template_id == template_id)
             .order_by(TemplateMilestone.sort_order, TemplateMilestone.id))
        return list(s.exec(q).all())


def find_template_for_meeting_type(meeting_type: Optional[str]) -> Optional[ProjectTemplate]:
    mt = ProjectType.coerce(meeting_type)
    if mt is None or mt is ProjectType.OTHER:
        return None
    with get_session() as s:
        q = (select(ProjectTemplate)
             .where(ProjectTemplate.meeting_type == mt.value)
             .order_by(ProjectTemplate.id))
        return s.exec(q).first()


def duplicate_template(template_id: int, new_name: Optional[str] = None) -> int:
    """Copy a template with its milestones and task tree; returns the new template id."""
    with get_session() as s:
        src = s.get(ProjectTemplate, template_id)
        if not src:
            raise ValueError("Template not found")
        copy = ProjectTemplate(name=(new_name or f"{src.name} (copy)").strip(),
                               meeting_type=None, description=src.description)
        s.add(copy); s.flush()

        milestone_map = {}
        for m in s.exec(select(TemplateMilestone).where(TemplateMilestone.template_id == template_id)).all():
            nm = TemplateMilestone(template_id=copy.id, title=m.title,
                                   description=m.description, sort_order=m.sort_order)
            s.add(nm); s.flush()
            milestone_map[m.id] = nm.id

        tasks = s.exec(select(TaskTemplate).where(TaskTemplate.template_id == template_id)).all()
        task_map = {}
        for t in tasks:
            nt = TaskTemplate(template_id=copy.id, milestone_id=milestone_map.get(t.milestone_id),
                              title=t.title, description=t.description, priority=t.priority,
                              days_from_meeting=t.days_from_meeting,
                              based_on_secondary=t.based_on_secondary,
                              assignee_role=t.assignee_role, sort_order=t.sort_order)
            s.add(nt); s.flush()
            task_map[t.id] = nt
        # parents are linked in a second pass, a child may come before its parent
        for t in tasks:
            parent = task_map.get(t.parent_template_id)
            if parent is not None:
                task_map[t.id].parent_template_id = parent.id
                s.add(task_map[t.id])
        s.commit()
        logger.info("Duplicated template %s as %s (%d tasks)", template_id, copy.id, len(tasks))
        return copy.id


# ---- projects ----
def create_project_from_template(name: str, template_id: int, meeting_date, secondary_date=None,
                                 client_id: Optional[int] = None, project_type: Optional[str] = None,
                                 description: Optional[str] = None) -> Dict:
    """Create a project and its milestones and tasks from a template in one transaction.

    Raises ``InvalidTemplateStructure`` for a cyclic template; nothing is written then.
    """
    meeting = parse_date(meeting_date)
    secondary = parse_date(secondary_date)
    if meeting is None:
        raise ValueError("Meeting date is required")

    team = get_team_members()
    with get_session() as s:
        template = s.get(ProjectTemplate, template_id)
        if not template:
            raise ValueError("Template not found")
        template_tasks = s.exec(select(TaskTemplate)
                                .where(TaskTemplate.template_id == template_id)
                                .order_by(TaskTemplate.id)).all()
        template_milestones = s.exec(select(TemplateMilestone)
                                     .where(TemplateMilestone.template_id == template_id)
                                     .order_by(TemplateMilestone.sort_order, TemplateMilestone.id)).all()

        # validate the template before anything is added to the session
        tree = build_tree(template_tasks)

        pt = ProjectType.coerce(project_type or template.meeting_type)
        p = Project(name=name.strip(), description=description, client_id=client_id,
                    project_type=pt.value if pt else None, template_id=template_id,
                    meeting_date=meeting, secondary_date=secondary)
        s.add(p); s.flush()

        milestone_ids = {}
        for m in template_milestones:
            pm = Milestone(project_id=p.id, title=m.title, description=m.description or "",
                           sort_order=m.sort_order)
            s.add(pm); s.flush()
            milestone_ids[m.id] = pm.id

        planned = materialize(tree, meeting, secondary, team, milestone_ids)
        task_ids = {}
        for mt in planned:
            t = Task(project_id=p.id, milestone_id=mt.milestone_id,
                     parent_task_id=task_ids[mt.parent_key] if mt.parent_key is not None else None,
                     title=mt.title, description=mt.description, priority=mt.priority,
                     status=mt.status, due_date=mt.due_date, assigned_to=mt.assigned_to,
                     assigned_to_role=mt.unassigned_role, sort_order=mt.sort_order,
                     level=mt.depth, days_from_meeting=mt.days_from_meeting,
                     based_on_secondary=mt.based_on_secondary)
            s.add(t); s.flush()
            task_ids[mt.key] = t.id
            for contact_id in mt.assignee_ids:
                s.add(TaskAssignee(task_id=t.id, contact_id=contact_id))
        s.commit()

        unassigned = sorted({r for mt in planned for r in mt.unassigned_roles})
        logger.info("Created project %s from template %s with %d tasks", p.id, template_id, len(planned))
        return {
            "project_id": p.id,
            "task_count": len(planned),
            "milestone_count": len(milestone_ids),
            "unassigned_roles": unassigned,
            "message": f"Created project with {len(planned)} tasks from {template.name} template",
        }


def create_project(name: str, meeting_date=None, project_type: Optional[str] = None,
                   secondary_date=None, client_id: Optional[int] = None,
                   description: Optional[str] = None) -> Dict:
    """Use the template registered for the meeting type when there is one."""
    template = find_template_for_meeting_type(project_type) if meeting_date else None
    if template is not None:
        return create_project_from_template(name, template.id, meeting_date, secondary_date,
                                            client_id=client_id, project_type=project_type,
                                            description=description)
    logger.info("No template for meeting type %r; creating an empty project", project_type)
    with get_session() as s:
        pt = ProjectType.coerce(project_type)
        p = Project(name=name.strip(), description=description, client_id=client_id,
                    project_type=pt.value if pt else None,
                    meeting_date=parse_date(meeting_date), secondary_date=parse_date(secondary_date))
        s.add(p); s.commit()
        return {"project_id": p.id, "task_count": 0, "milestone_count": 0,
                "unassigned_roles": [], "message": "Created project without a template"}


def get_projects() -> List[Project]:
    with get_session() as s:
        return list(s.exec(select(Project).order_by(col(Project.created_at).desc())).all())


def get_project(project_id: int) -> Optional[Project]:
    with get_session() as s:
        return s.get(Project, project_id)


def _task_dict(t: Task, assignee_ids: List[int]) -> Dict:
    return {
        "id": t.id,
        "title": t.title,
        "status": t.status,
        "priority": t.priority,
        "due_date": t.due_date,
        "assigned_to": t.assigned_to,
        "assignee_ids": assignee_ids,
        "assigned_to_role": t.assigned_to_role,
        "milestone_id": t.milestone_id,
        "parent_task_id": t.parent_task_id,
        "sort_order": t.sort_order,
        "level": t.level,
    }


def get_tasks_for_project(project_id: int) -> List[Dict]:
    """Plain dicts in display order: milestone, then pre-order by sort order."""
    with get_session() as s:
        tasks = s.exec(select(Task).where(Task.project_id == project_id)).all()
        m_order = {m.id: m.sort_order for m in s.exec(
            select(Milestone).where(Milestone.project_id == project_id)).all()}
        links = s.exec(select(TaskAssignee)
                       .join(Task, col(TaskAssignee.task_id) == Task.id)
                       .where(Task.project_id == project_id)
                       .order_by(TaskAssignee.id)).all()

    assignees: Dict[int, List[int]] = {}
    for a in links:
        assignees.setdefault(a.task_id, []).append(a.contact_id)

    children: Dict[Optional[int], List[Task]] = {}
    ids = {t.id for t in tasks}
    for t in tasks:
        parent = t.parent_task_id if t.parent_task_id in ids else None
        children.setdefault(parent, []).append(t)
    for group in children.values():
        group.sort(key=lambda t: (t.sort_order, t.id))

    # tasks outside any milestone come after every milestone
    roots = sorted(children.get(None, []),
                   key=lambda t: (t.milestone_id not in m_order, m_order.get(t.milestone_id, 0),
                                  t.sort_order, t.id))
    out = []
    stack = list(reversed(roots))
    while stack:
        t = stack.pop()
        out.append(_task_dict(t, assignees.get(t.id, [])))
        stack.extend(reversed(children.get(t.id, [])))
    return out


def get_milestones_for_project(project_id: int) -> List[Dict]:
    with get_session() as s:
        rows = s.exec(select(Milestone)
                      .where(Milestone.project_id == project_id)
                      .order_by(Milestone.sort_order, Milestone.id)).all()
        return [{"id": m.id, "title": m.title, "status": m.status, "sort_order": m.sort_order}
                for m in rows]


def set_task_status(task_id: int, status: str) -> None:
    with get_session() as s:
        t = s.get(Task, task_id)
        if not t:
            raise ValueError("Task not found")
        t.status = TaskStatus.coerce(status, TaskStatus.TODO).value
        s.add(t); s.commit()


def move_task(task_id: int, new_index: int, parent_task_id=_UNCHANGED) -> List[Dict]:
    """Apply a drag-and-drop move inside a sibling group.

    Siblings share project, milestone and parent. A move that names a
    different parent is ignored. Returns the ``{"id", "sort_order"}`` rows
    that changed.
    """
    with get_session() as s:
        t = s.get(Task, task_id)
        if not t:
            raise ValueError("Task not found")
        if parent_task_id is not _UNCHANGED and parent_task_id != t.parent_task_id:
            logger.info("Ignoring move of task %s to another parent (%s -> %s)",
                        task_id, t.parent_task_id, parent_task_id)
            return []
        siblings = s.exec(select(Task).where(
            Task.project_id == t.project_id,
            Task.milestone_id == t.milestone_id,
            Task.parent_task_id == t.parent_task_id,
        ).order_by(Task.sort_order, Task.id)).all()
        before = [{"id": x.id, "sort_order": x.sort_order} for x in siblings]
        delta = sort_order_delta(before, reorder_siblings(before, task_id, new_index))
        by_id = {x.id: x for x in siblings}
        for row in delta:
            by_id[row["id"]].sort_order = row["sort_order"]
            s.add(by_id[row["id"]])
        s.commit()
        return delta


def update_project_dates(project_id: int, meeting_date, secondary_date=_UNCHANGED) -> int:
    """Move the anchor dates and recompute task due dates. Returns tasks changed.

    Leaving out ``secondary_date`` keeps the stored DRPM date; pass None to clear it.
    """
    meeting = parse_date(meeting_date)
    if meeting is None:
        raise ValueError("Meeting date is required")
    with get_session() as s:
        p = s.get(Project, project_id)
        if not p:
            raise ValueError("Project not found")
        p.meeting_date = meeting
        if secondary_date is not _UNCHANGED:
            p.secondary_date = parse_date(secondary_date)
        s.add(p)
        tasks = s.exec(select(Task).where(Task.project_id == project_id)).all()
        changes = reschedule(tasks, p.meeting_date, p.secondary_date)
        for t in tasks:
            if t.id in changes:
                t.due_date = changes[t.id]
                s.add(t)
        s.commit()
        logger.info("Project %s moved to %s; %d task dates updated", project_id, meeting, len(changes))
        return len(changes)


def resolve_pending_roles(project_id: int) -> int:
    """Assign tasks whose roles had no active team member at creation time.

    Returns how many tasks gained an assignee; roles still unmatched stay on the task.
    """
    team = get_team_members()
    with get_session() as s:
        tasks = s.exec(select(Task).where(Task.project_id == project_id,
                                          col(Task.assigned_to_role).is_not(None))).all()
        resolved = resolve_pending(tasks, team)
        for t in tasks:
            res = resolved.get(t.id)
            if res is None:
                continue
            linked = set(s.exec(select(TaskAssignee.contact_id).where(TaskAssignee.task_id == t.id)).all())
            for contact_id in res.contact_ids:
                if contact_id not in linked:
                    s.add(TaskAssignee(task_id=t.id, contact_id=contact_id))
            if t.assigned_to is None:
                t.assigned_to = res.contact_ids[0]
            t.assigned_to_role = join_roles(res.unassigned_roles)
            s.add(t)
        s.commit()
        return len(resolved)
