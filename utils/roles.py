# utils/roles.py
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from models.contact import Contact
from models.enums import ContactRole, ContactStatus, ContactType

logger = logging.getLogger(__name__)

# Seed records named after a role; they stand in for a hire and never take work.
PLACEHOLDER_NAMES = {
    ("admin", "assistant"),
    ("financial", "planner"),
    ("insurance", "business"),
    ("insurance", "health"),
}


@dataclass
class RoleResolution:
    contact_ids: List[int] = field(default_factory=list)
    unassigned_roles: List[str] = field(default_factory=list)


def role_tags(value) -> List[str]:
    """Role tags from one tag, a comma-separated string or a list. Order kept, no repeats."""
    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    tags = []
    for item in items:
        tag = str(item or "").strip().lower()
        if tag and tag != "none" and tag not in tags:
            tags.append(tag)
    return tags


def join_roles(tags) -> Optional[str]:
    return ",".join(role_tags(tags)) or None


def role_label(tag) -> str:
    """Display name of a role tag; tags we don't know keep their own wording."""
    role = ContactRole.coerce(tag, ContactRole.OTHER)
    raw = str(tag or "").strip()
    if role is ContactRole.OTHER and raw and raw.lower() != ContactRole.OTHER.value:
        return raw.replace("_", " ").title()
    return role.label


def is_placeholder(member: Contact) -> bool:
    name = ((member.first_name or "").strip().lower(), (member.last_name or "").strip().lower())
    return name in PLACEHOLDER_NAMES


def is_assignable(member: Contact) -> bool:
    """Active, non-placeholder team member."""
    if ContactType.coerce(member.contact_type, ContactType.TEAM_MEMBER) is not ContactType.TEAM_MEMBER:
        return False
    if ContactStatus.coerce(member.status) is not ContactStatus.ACTIVE:
        return False
    return not is_placeholder(member)


def resolve_assignee(role, team_members: Sequence[Contact]) -> Optional[Contact]:
    """First assignable team member holding ``role``, or None when nobody does."""
    wanted = ContactRole.coerce(role)
    if wanted is None:
        return None
    if wanted is ContactRole.OTHER:
        logger.info("Role %r is not a known role; leaving it for manual assignment", role)
        return None
    for member in team_members:
        if ContactRole.coerce(member.role) is wanted and is_assignable(member):
            return member
    logger.info("No active team member found for role %s", wanted.value)
    return None


def resolve_assignees(roles, team_members: Sequence[Contact]) -> RoleResolution:
    """Resolve every role on its own.

    Each resolved role contributes its member once; roles nobody holds are
    kept, raw tag and all, for manual assignment.
    """
    result = RoleResolution()
    for tag in role_tags(roles):
        member = resolve_assignee(tag, team_members)
        if member is None:
            result.unassigned_roles.append(tag)
        elif member.id not in result.contact_ids:
            result.contact_ids.append(member.id)
    return result


def resolve_pending(tasks: Iterable, team_members: Sequence[Contact]) -> dict:
    """Resolve roles stored tasks are still waiting on.

    Returns ``{task_id: RoleResolution}`` for tasks that gained at least one
    assignee; ``unassigned_roles`` is what the task keeps waiting on.
    """
    resolved = {}
    for t in tasks:
        pending = role_tags(t.assigned_to_role)
        if not pending:
            continue
        res = resolve_assignees(pending, team_members)
        if res.contact_ids:
            resolved[t.id] = res
    return resolved
