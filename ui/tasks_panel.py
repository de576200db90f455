# ui/tasks_panel.py
import streamlit as st
import pandas as pd

import db
from models.enums import TaskStatus
from utils.due_dates import due_state
from utils.progress import compute_progress, milestone_progress
from utils.roles import role_label, role_tags

STATUS_ORDER = [s.value for s in TaskStatus if s is not TaskStatus.OTHER]
DUE_BADGE = {"overdue": "🔴", "today": "🟡", "upcoming": ""}


def _siblings(tasks, t):
    return [x for x in tasks
            if x["parent_task_id"] == t["parent_task_id"] and x["milestone_id"] == t["milestone_id"]]


def render_tasks_panel(project_id: int):
    project = db.get_project(project_id)
    tasks = db.get_tasks_for_project(project_id)
    milestones = db.get_milestones_for_project(project_id)
    names = db.contact_names()

    st.subheader(f"Tasks — {project.name}")
    st.progress(int(compute_progress(tasks)), text=f"{compute_progress(tasks):.0f}% complete")
    with st.expander("Milestones"):
        st.dataframe(pd.DataFrame(milestone_progress(tasks, milestones)), hide_index=True)

    with st.expander("Meeting dates"):
        with st.form(f"dates_{project_id}"):
            c1, c2 = st.columns(2)
            new_meeting = c1.date_input("Meeting date", value=project.meeting_date)
            new_secondary = c2.date_input("DRPM date", value=project.secondary_date)
            moved = st.form_submit_button("Update dates")
        if moved and not new_meeting:
            st.warning("Please pick a meeting date.")
        elif moved:
            n = db.update_project_dates(project_id, new_meeting, new_secondary)
            st.success(f"Updated {n} task due dates")
            st.rerun()

    waiting = [t for t in tasks if t["assigned_to_role"]]
    if waiting:
        c1, c2 = st.columns([3, 1])
        c1.warning(f"{len(waiting)} tasks are waiting on a team member for their role.")
        if c2.button("Resolve roles"):
            n = db.resolve_pending_roles(project_id)
            st.success(f"Assigned {n} tasks")
            st.rerun()

    titles = {m["id"]: m["title"] for m in milestones}
    current_milestone = object()
    for t in tasks:
        if t["level"] == 0 and t["milestone_id"] != current_milestone:
            current_milestone = t["milestone_id"]
            st.markdown(f"#### {titles.get(current_milestone, 'No milestone')}")

        group = _siblings(tasks, t)
        idx = [x["id"] for x in group].index(t["id"])
        indent = max(0.01, 0.4 * t["level"])
        pad, c_title, c_due, c_who, c_status, c_up, c_down = st.columns([indent, 4, 1.3, 2, 1.5, 0.4, 0.4])

        badge = DUE_BADGE.get(due_state(t["due_date"]), "")
        c_title.markdown(f"{badge} {t['title']}")
        c_due.write(t["due_date"] or "—")
        who = [names.get(i, f"#{i}") for i in t["assignee_ids"]]
        who += [f":orange[Unassigned: {role_label(r)}]" for r in role_tags(t["assigned_to_role"])]
        c_who.markdown(", ".join(who) or "—")

        status = t["status"] if t["status"] in STATUS_ORDER else STATUS_ORDER[0]
        new_status = c_status.selectbox("Status", STATUS_ORDER, index=STATUS_ORDER.index(status),
                                        key=f"st_{t['id']}", label_visibility="collapsed")
        if new_status != status:
            db.set_task_status(t["id"], new_status)
            st.rerun()

        # up/down buttons stand in for drag-and-drop
        if c_up.button("↑", key=f"up_{t['id']}", disabled=idx == 0):
            db.move_task(t["id"], idx - 1)
            st.rerun()
        if c_down.button("↓", key=f"dn_{t['id']}", disabled=idx == len(group) - 1):
            db.move_task(t["id"], idx + 1)
            st.rerun()
