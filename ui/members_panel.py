# ui/members_panel.py
import streamlit as st
import pandas as pd

import db
from models.enums import ContactRole, ContactStatus, ContactType
from utils.roles import is_assignable


def render_members_panel():
    st.subheader("Team Members")
    with st.form("add_member", clear_on_submit=True):
        c1, c2 = st.columns(2)
        first = c1.text_input("First name")
        last = c2.text_input("Last name")
        email = c1.text_input("Email")
        role = c2.selectbox("Role", ContactRole.choices(), format_func=lambda v: ContactRole(v).label)
        add_btn = st.form_submit_button("Add")
    if add_btn and first and last:
        db.add_contact(first, last, ContactType.TEAM_MEMBER.value, role=role, email=email)
        st.success(f"Added {first} {last} as {ContactRole(role).label}")

    members = db.get_team_members()
    data = [{"Name": m.full_name,
             "Role": ContactRole.coerce(m.role, ContactRole.OTHER).label,
             "Status": m.status,
             "Takes template tasks": is_assignable(m)}
            for m in members]
    st.dataframe(pd.DataFrame(data) if data else pd.DataFrame(columns=["Name", "Role", "Status", "Takes template tasks"]),
                 hide_index=True)

    if members:
        c1, c2, c3 = st.columns([2, 1, 1])
        who = c1.selectbox("Member", members, format_func=lambda m: m.full_name)
        status = c2.selectbox("Status", [ContactStatus.ACTIVE.value, ContactStatus.INACTIVE.value])
        if c3.button("Set status"):
            db.set_contact_status(who.id, status)
            st.rerun()
