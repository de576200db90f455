# ui/projects_panel.py

import streamlit as st
from datetime import date

import db
from models.enums import ProjectType
from utils.hierarchy import InvalidTemplateStructure, build_tree
from utils.materialize import materialize
from utils.roles import role_label
from utils.timeline import tasks_frame

__all__ = ["render_projects", "render_new_project"]


def render_projects():
    """Dropdown of existing projects; returns the selected project id."""
    st.subheader("Projects")
    projects = db.get_projects()
    if not projects:
        st.info("No projects yet. Create one from a template.")
        return None

    proj_options = {f"{p.name} (#{p.id})": p.id for p in projects}
    selected_label = st.selectbox("Select a project", ["—"] + list(proj_options.keys()))
    return proj_options.get(selected_label)


def render_new_project():
    """Project creation from a template, with a preview of the tasks it will create."""
    st.subheader("New Project from Template")

    templates = db.get_templates()
    if not templates:
        st.info("Create a template first.")
        return None

    template = st.selectbox("Template", templates, format_func=lambda t: t.name)
    clients = db.get_clients()
    c1, c2 = st.columns(2)
    with c1:
        p_name = st.text_input("Project name", placeholder="Smith Family – Annual Review")
        meeting = st.date_input("Meeting date", value=date.today(), key="np_meeting")
        use_secondary = st.checkbox("Set DRPM date", value=False)
        secondary = st.date_input("DRPM date", value=date.today(), key="np_secondary",
                                  disabled=not use_secondary)
    with c2:
        client = st.selectbox("Client", [None] + clients,
                              format_func=lambda c: "—" if c is None else c.full_name)
        types = ProjectType.choices()
        default_type = template.meeting_type if template.meeting_type in types else ProjectType.OTHER.value
        p_type = st.selectbox("Meeting type", types, index=types.index(default_type),
                              format_func=lambda v: v.upper())
        p_desc = st.text_area("Description", placeholder="Short project description…")

    secondary = secondary if use_secondary else None
    team = db.get_team_members()
    try:
        planned = materialize(build_tree(db.get_template_tasks(template.id)), meeting, secondary, team)
    except InvalidTemplateStructure as e:
        st.error(str(e))
        return None

    st.markdown(f"**Preview** — {len(planned)} tasks")
    st.dataframe(tasks_frame(planned, {m.id: m.full_name for m in team}),
                 use_container_width=True, hide_index=True)
    waiting = sorted({r for t in planned for r in t.unassigned_roles})
    if waiting:
        st.warning("No active team member for: " + ", ".join(role_label(r) for r in waiting))

    if st.button("Create project", type="primary"):
        if not p_name:
            st.warning("Please enter a project name.")
            return None
        result = db.create_project_from_template(
            p_name, template.id, meeting, secondary,
            client_id=client.id if client else None, project_type=p_type, description=p_desc)
        st.success(result["message"])
        return result["project_id"]
    return None
