import streamlit as st

from botpanel.components.common import run_action
from botpanel.services.bot_service import BotService
from botpanel.services.session_manager import SessionManager


def role_panel(service: BotService):
    api_client = service.api_client
    bot_name = service.bot.name
    st.subheader("Roles")

    roles = run_action("fetch roles", api_client.fetch_roles, bot_name) or []
    members = run_action("fetch members", api_client.fetch_members,
                         bot_name) or []
    if not roles or not members:
        st.info("No roles or members available")
        return

    role = st.selectbox("Role", options=[r.name for r in roles],
                        key="role_select")
    member_options = {m.label: m.id for m in members}
    selected = st.multiselect("Members", options=list(member_options.keys()),
                              key="role_members")
    member_ids = [member_options[label] for label in selected]

    col1, col2 = st.columns(2)
    assignment = None
    if col1.button("Assign", use_container_width=True):
        assignment = run_action(
            "assign role",
            lambda: api_client.assign_role(role, member_ids),
            bot_name
        )
    if col2.button("Remove", use_container_width=True):
        assignment = run_action(
            "remove role",
            lambda: api_client.remove_role(role, member_ids),
            bot_name
        )

    if assignment is not None:
        SessionManager.add_event(
            "roles", f"{assignment.role}: {len(assignment.assigned)} changed")
        if assignment.assigned:
            st.success(f"Updated: {', '.join(assignment.assigned)}")
        if assignment.failed:
            st.warning(f"Failed: {', '.join(assignment.failed)}")
