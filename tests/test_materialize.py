# tests/test_materialize.py
from datetime import date

import pytest

from utils.hierarchy import InvalidTemplateStructure, TemplateNode, build_tree
from utils.materialize import materialize

MEETING = date(2025, 6, 15)
DRPM = date(2025, 6, 1)


@pytest.fixture
def kickoff_tree(tt):
    return build_tree([
        tt(10, "Kickoff", days=0),
        tt(11, "Prep Docs", parent=10, days=-5, role="financial_planner", sort=0),
        tt(12, "Send Summary", parent=10, days=3, secondary=True, sort=1),
    ])


def test_kickoff_scenario(kickoff_tree, member):
    team = [member(7, "Jane", "Doe", "financial_planner")]
    kickoff, prep, summary = materialize(kickoff_tree, MEETING, DRPM, team)

    assert (kickoff.title, kickoff.due_date, kickoff.assigned_to) == ("Kickoff", date(2025, 6, 15), None)
    assert kickoff.unassigned_role is None
    assert (prep.title, prep.due_date, prep.assigned_to) == ("Prep Docs", date(2025, 6, 10), 7)
    assert (summary.title, summary.due_date, summary.assigned_to) == ("Send Summary", date(2025, 6, 4), None)
    assert summary.unassigned_role is None

    assert prep.parent_key == kickoff.key and summary.parent_key == kickoff.key
    assert [t.depth for t in (kickoff, prep, summary)] == [0, 1, 1]
    assert [t.sort_order for t in (kickoff, prep, summary)] == [0, 0, 1]
    assert all(t.status == "todo" for t in (kickoff, prep, summary))


def test_unmatched_role_is_flagged(kickoff_tree):
    out = materialize(kickoff_tree, MEETING, DRPM, [])
    prep = out[1]
    assert prep.assigned_to is None
    assert prep.unassigned_role == "financial_planner"
    assert prep.is_unassigned_role
    assert not out[0].is_unassigned_role


def test_one_record_per_template_in_preorder(tt):
    flat = [tt(1), tt(2, parent=1, sort=1), tt(3, parent=1, sort=0), tt(4, parent=3), tt(5, sort=1), tt(6)]
    out = materialize(build_tree(flat), MEETING, None, [])
    assert len(out) == len(flat)
    assert [t.template_id for t in out] == [1, 3, 4, 2, 6, 5]
    assert [t.key for t in out] == list(range(6))
    parents = {t.template_id: t.parent_key for t in out}
    keys = {t.template_id: t.key for t in out}
    assert parents == {1: None, 3: keys[1], 4: keys[3], 2: keys[1], 6: None, 5: None}
    assert [t.sort_order for t in out] == [0, 0, 0, 1, 1, 2]


def test_parent_keys_point_inside_the_batch(tt):
    out = materialize(build_tree([tt(100), tt(200, parent=100), tt(300, parent=200)]), MEETING, None, [])
    keys = {t.key for t in out}
    assert all(t.parent_key in keys for t in out if t.parent_key is not None)
    # template ids are never used as parent references
    assert all(t.parent_key not in (100, 200, 300) for t in out)


def test_same_inputs_same_output(kickoff_tree, member):
    team = [member(7, "Jane", "Doe", "financial_planner"), member(8, "Jim", "Doe", "financial_planner")]
    first = materialize(kickoff_tree, MEETING, DRPM, team)
    second = materialize(kickoff_tree, MEETING, DRPM, team)
    assert first == second
    assert first[1].assigned_to == 7


def test_milestones_are_remapped(tt):
    out = materialize(build_tree([tt(1, milestone=5), tt(2, milestone=6), tt(3)]), MEETING, None, [],
                      milestone_ids={5: 50})
    assert [t.milestone_id for t in out] == [50, None, None]


def test_deep_tree_does_not_recurse(tt):
    flat = [tt(1)] + [tt(i, parent=i - 1) for i in range(2, 3001)]
    out = materialize(build_tree(flat), MEETING, None, [])
    assert len(out) == 3000
    assert out[-1].depth == 2999


def test_node_reached_twice_is_rejected(tt):
    shared = TemplateNode(tt(2))
    tree = [TemplateNode(tt(1), children=[shared]), shared]
    with pytest.raises(InvalidTemplateStructure):
        materialize(tree, MEETING, None, [])


def test_unknown_roles_are_flagged_with_their_tag(tt, member):
    team = [member(7, "Oscar", "Other", "other")]
    out = materialize(build_tree([tt(1, role="other"), tt(2, role="Paralegal")]), MEETING, None, team)
    assert out[0].assigned_to is None and out[0].unassigned_role == "other"
    assert out[1].assigned_to is None and out[1].unassigned_role == "paralegal"


def test_several_roles_on_one_task(tt, member):
    team = [member(7, "Jane", "Doe", "financial_planner"), member(8, "Tia", "Tax", "tax_planner")]
    out = materialize(build_tree([tt(1, role="tax_planner,estate_attorney,financial_planner")]),
                      MEETING, None, team)
    task = out[0]
    assert task.assignee_ids == [8, 7]
    assert task.assigned_to == 8
    assert task.unassigned_roles == ["estate_attorney"]
    assert task.unassigned_role == "estate_attorney"
    assert task.is_unassigned_role
