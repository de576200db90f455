# main.py

#============================================================#
#                          ClientHub                         #
#============================================================#
# Purpose     : Client projects seeded from meeting templates#
#               with dated, role-assigned task trees         #
#               Run with: streamlit run main.py              #
#============================================================#

import logging

import streamlit as st

import db
from ui.members_panel import render_members_panel
from ui.projects_panel import render_new_project, render_projects
from ui.tasks_panel import render_tasks_panel
from ui.templates_panel import render_templates_panel

st.set_page_config(page_title="ClientHub - Projects", layout="wide")


@st.cache_resource
def _init_once():
    logging.basicConfig(level=getattr(logging, str(db.LOG_LEVEL).upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    db.init_db()
    return True


_init_once()

with st.sidebar:
    st.title("ClientHub")
    page = st.radio("Go to", ["Projects", "New project", "Templates", "Team"])

if page == "Projects":
    pid = st.session_state.get("selected_project_id") or render_projects()
    if pid:
        if st.sidebar.button("Back to project list"):
            st.session_state.pop("selected_project_id", None)
            st.rerun()
        render_tasks_panel(pid)
elif page == "New project":
    created = render_new_project()
    if created:
        st.session_state["selected_project_id"] = created
elif page == "Templates":
    render_templates_panel()
else:
    render_members_panel()
