import streamlit as st

from botpanel.components.common import run_action
from botpanel.services.bot_service import BotService
from botpanel.services.session_manager import SessionManager


def group_manager(service: BotService):
    bot = service.bot
    st.subheader("Groups")

    if bot.groups:
        for group in bot.groups:
            col1, col2, col3 = st.columns([6, 3, 3])
            col1.write(group.name)
            if group.attendance_active:
                col2.success("Attendance running")
            elif group.is_valid:
                col2.write("Valid")
            else:
                col2.warning("Not validated")
            if col3.button("Remove", key=f"remove_group_{group.name}",
                           use_container_width=True):
                if run_action("remove group",
                              lambda: service.remove_group(group.name),
                              bot.name):
                    SessionManager.add_event(
                        "groups", f"Removed {group.name}")
                    st.rerun()
    else:
        st.write("No groups yet")

    with st.form(key="add_group", clear_on_submit=True):
        cols = st.columns([6, 2])
        name = cols[0].text_input(
            "Group name",
            placeholder="Role name on the server",
            label_visibility="collapsed"
        )
        if cols[1].form_submit_button("Add") and name.strip():
            group = run_action(
                "add group", lambda: service.add_group(name), bot.name)
            if group is not None:
                SessionManager.add_event("groups", f"Added {group.name}")
                st.rerun()

    if bot.groups and st.button("Validate groups"):
        groups = run_action("validate groups", service.validate_groups, bot.name)
        if groups is not None:
            valid = sum(1 for group in groups if group.is_valid)
            SessionManager.add_event(
                "groups", f"{valid} of {len(groups)} groups valid")
            st.rerun()
