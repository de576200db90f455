# tests/test_timeline.py
from datetime import date

from utils.hierarchy import build_tree
from utils.materialize import materialize
from utils.timeline import COLUMNS, tasks_frame


def test_preview_frame(tt, member):
    tree = build_tree([tt(1, "Kickoff"), tt(2, "Prep Docs", parent=1, days=-5, role="financial_planner"),
                       tt(3, "Call Client", parent=1, days=2, role="tax_planner")])
    team = [member(7, "Jane", "Doe", "financial_planner")]
    planned = materialize(tree, date(2025, 6, 15), None, team)

    df = tasks_frame(planned, {7: "Jane Doe"}, today=date(2025, 6, 12))
    assert list(df.columns) == COLUMNS
    assert df["Task"].tolist() == ["Kickoff", "    ↳ Prep Docs", "    ↳ Call Client"]
    assert df["Assignee"].tolist() == ["—", "Jane Doe", "Unassigned: Tax Planner"]
    assert df["Due state"].tolist() == ["upcoming", "overdue", "upcoming"]


def test_frame_from_stored_rows():
    rows = [{"title": "Kickoff", "level": 0, "due_date": None, "assigned_to": 3,
             "assigned_to_role": None, "priority": "high", "status": "todo"}]
    df = tasks_frame(rows, {})
    assert df.loc[0, "Assignee"] == "Contact #3"
    assert df.loc[0, "Due state"] == ""


def test_empty_frame_keeps_columns():
    assert list(tasks_frame([], {}).columns) == COLUMNS


def test_several_assignees_and_waiting_roles():
    rows = [{"title": "Review", "level": 0, "due_date": None, "assigned_to": 3, "assignee_ids": [3, 4],
             "assigned_to_role": "estate_attorney,paralegal", "priority": "high", "status": "todo"}]
    df = tasks_frame(rows, {3: "Jane Doe", 4: "Tia Tax"})
    assert df.loc[0, "Assignee"] == "Jane Doe, Tia Tax, Unassigned: Estate Attorney, Unassigned: Paralegal"
