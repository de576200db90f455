# tests/test_roles.py
from types import SimpleNamespace

from utils.roles import (
    RoleResolution, is_assignable, resolve_assignee, resolve_assignees, resolve_pending, role_label, role_tags,
)


def test_first_active_member_with_role(member):
    team = [member(1, "Ann", "Lee", "tax_planner"),
            member(2, "Jane", "Doe", "financial_planner"),
            member(3, "Bob", "Roe", "financial_planner")]
    assert resolve_assignee("financial_planner", team).id == 2


def test_inactive_members_are_skipped(member):
    team = [member(2, "Jane", "Doe", "financial_planner", status="inactive"),
            member(3, "Bob", "Roe", "financial_planner")]
    assert resolve_assignee("financial_planner", team).id == 3
    assert resolve_assignee("financial_planner", team[:1]) is None


def test_placeholder_members_are_skipped(member):
    placeholder = member(1, "Financial", "Planner", "financial_planner")
    assert not is_assignable(placeholder)
    assert resolve_assignee("financial_planner", [placeholder]) is None


def test_non_team_contacts_are_skipped(member):
    client = member(1, "Cal", "Client", "financial_planner")
    client.contact_type = "client"
    assert resolve_assignee("financial_planner", [client]) is None


def test_no_role_and_unknown_role(member):
    team = [member(1, "Oscar", "Other", "other")]
    assert resolve_assignee(None, team) is None
    assert resolve_assignee("", team) is None
    assert resolve_assignee("other", team) is None
    assert resolve_assignee("paralegal", team) is None


def test_role_match_is_case_insensitive(member):
    team = [member(1, "Jane", "Doe", "Financial_Planner")]
    assert resolve_assignee("FINANCIAL_PLANNER", team).id == 1


def test_resolve_pending(member):
    tasks = [SimpleNamespace(id=10, assigned_to=None, assigned_to_role="tax_planner"),
             SimpleNamespace(id=11, assigned_to=None, assigned_to_role="estate_attorney"),
             SimpleNamespace(id=12, assigned_to=7, assigned_to_role=None),
             SimpleNamespace(id=13, assigned_to=None, assigned_to_role=None)]
    team = [member(4, "Tia", "Tax", "tax_planner")]
    assert resolve_pending(tasks, team) == {10: RoleResolution([4], [])}


def test_role_tags_accept_lists_and_comma_strings():
    assert role_tags(None) == []
    assert role_tags("financial_planner") == ["financial_planner"]
    assert role_tags(" Tax_Planner , financial_planner,tax_planner,none") == ["tax_planner", "financial_planner"]
    assert role_tags(["accountant", "", None, "accountant"]) == ["accountant"]


def test_resolve_assignees_partial(member):
    team = [member(1, "Jane", "Doe", "financial_planner"),
            member(2, "Tia", "Tax", "tax_planner"),
            member(3, "Ann", "Lee", "financial_planner")]
    result = resolve_assignees(["financial_planner", "estate_attorney", "tax_planner"], team)
    assert result == RoleResolution(contact_ids=[1, 2], unassigned_roles=["estate_attorney"])


def test_resolve_assignees_one_member_once(member):
    team = [member(1, "Jane", "Doe", "financial_planner")]
    result = resolve_assignees("financial_planner,financial_planner", team)
    assert result.contact_ids == [1]
    assert resolve_assignees(None, team) == RoleResolution()


def test_other_and_unknown_roles_stay_pending(member):
    team = [member(1, "Oscar", "Other", "other"), member(2, "Pat", "Legal", "paralegal")]
    tasks = [SimpleNamespace(id=20, assigned_to=None, assigned_to_role="other"),
             SimpleNamespace(id=21, assigned_to=None, assigned_to_role="paralegal")]
    assert resolve_pending(tasks, team) == {}
    assert resolve_assignees("paralegal", team).unassigned_roles == ["paralegal"]


def test_role_label():
    assert role_label("tax_planner") == "Tax Planner"
    assert role_label("other") == "Other"
    assert role_label("paralegal") == "Paralegal"
    assert role_label("estate_paralegal") == "Estate Paralegal"
