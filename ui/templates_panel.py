# ui/templates_panel.py
import streamlit as st

import db
from models.enums import ContactRole, ProjectType, TaskPriority
from utils.hierarchy import InvalidTemplateStructure, build_tree, walk
from utils.roles import role_label, role_tags


def _offset_label(t) -> str:
    anchor = "DRPM" if t.based_on_secondary else "meeting"
    return f"{t.days_from_meeting:+d}d from {anchor}"


def render_templates_panel():
    st.subheader("Templates")
    with st.form("new_template", clear_on_submit=True):
        c1, c2 = st.columns([3, 1])
        name = c1.text_input("Template name")
        mtype = c2.selectbox("Meeting type", ProjectType.choices(), format_func=lambda v: v.upper())
        if st.form_submit_button("Create template") and name:
            db.create_template(name, mtype)
            st.success(f"Created template {name}")

    templates = db.get_templates()
    if not templates:
        return
    template = st.selectbox("Template", templates, format_func=lambda t: t.name, key="tpl_pick")
    milestones = db.get_template_milestones(template.id)
    tasks = db.get_template_tasks(template.id)
    m_titles = {m.id: m.title for m in milestones}

    try:
        tree = build_tree(tasks)
    except InvalidTemplateStructure as e:
        st.error(str(e))
        tree = []
    for node, depth in walk(tree):
        t = node.template
        roles = ", ".join(role_label(r) for r in role_tags(t.assignee_role))
        role = f" · {roles}" if roles else ""
        section = f" · _{m_titles[t.milestone_id]}_" if t.milestone_id in m_titles else ""
        st.markdown(f"{'&nbsp;' * 6 * depth}{'↳ ' if depth else ''}**{t.title}** "
                    f"({_offset_label(t)}{role}){section}")

    c1, c2 = st.columns(2)
    with c1.form("add_milestone", clear_on_submit=True):
        m_title = st.text_input("Milestone title")
        if st.form_submit_button("Add milestone") and m_title:
            db.add_template_milestone(template.id, m_title, sort_order=len(milestones))
            st.rerun()
    with c2:
        copy_name = st.text_input("Copy as", value=f"{template.name} (copy)")
        if st.button("Duplicate template"):
            db.duplicate_template(template.id, copy_name)
            st.success("Template duplicated")

    with st.form("add_template_task", clear_on_submit=True):
        st.markdown("**Add task**")
        c1, c2, c3 = st.columns(3)
        title = c1.text_input("Title")
        parent = c2.selectbox("Parent", [None] + tasks,
                              format_func=lambda t: "— top level —" if t is None else t.title)
        milestone = c3.selectbox("Milestone", [None] + milestones,
                                 format_func=lambda m: "—" if m is None else m.title)
        days = c1.number_input("Days from meeting", value=0, step=1)
        on_drpm = c2.checkbox("Offset from DRPM date")
        roles = c3.multiselect("Roles", ContactRole.choices(), format_func=lambda v: ContactRole(v).label)
        priority = c1.selectbox("Priority", TaskPriority.choices(), index=1)
        if st.form_submit_button("Add task") and title:
            db.add_template_task(template.id, title, days_from_meeting=int(days),
                                 based_on_secondary=on_drpm, assignee_role=roles,
                                 parent_template_id=parent.id if parent else None,
                                 milestone_id=milestone.id if milestone else None,
                                 priority=priority)
            st.rerun()
