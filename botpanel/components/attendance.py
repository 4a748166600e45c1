import streamlit as st

from botpanel.components.common import channel_picker, run_action
from botpanel.services.bot_service import BotService
from botpanel.services.session_manager import SessionManager


def attendance_panel(service: BotService):
    bot = service.bot
    api_client = service.api_client
    st.subheader("Attendance")

    last_file = st.session_state.last_result
    if last_file is not None:
        st.info(f"Last attendance saved to {last_file.filename} "
                f"({last_file.present_count} present)")

    running = bot.attendance_group
    if running is not None:
        st.success(f"Attendance running for {running.name}")
        if st.button("Stop attendance"):
            attendance_file = run_action(
                "stop attendance",
                lambda: service.stop_attendance(running.name),
                bot.name
            )
            if attendance_file is not None:
                SessionManager.add_event(
                    "attendance", f"Saved {attendance_file.filename}")
                st.session_state.last_result = attendance_file
                st.rerun()
    else:
        valid_groups = [group.name for group in bot.groups if group.is_valid]
        if not valid_groups:
            st.info("Add and validate a group first.")
        else:
            group_name = st.selectbox(
                "Group", options=valid_groups, key="attendance_group")
            channels = run_action(
                "fetch channels", api_client.fetch_channels, bot.name) or []
            channel_id = channel_picker(
                "Channel", channels, key="attendance_channel")
            if channel_id and st.button("Start attendance"):
                result = run_action(
                    "start attendance",
                    lambda: service.start_attendance(group_name, channel_id),
                    bot.name
                )
                if result is not None:
                    SessionManager.add_event(
                        "attendance", f"Started for {group_name}")
                    st.rerun()

    st.markdown("---")
    show_attendance_files(service)


def show_attendance_files(service: BotService):
    api_client = service.api_client
    files = run_action(
        "fetch attendance files",
        api_client.fetch_attendance_files,
        service.bot.name
    ) or []
    if not files:
        st.write("No attendance files available")
        return

    options = {f.filename: f for f in files}
    filename = st.selectbox(
        "Attendance file", options=list(options.keys()), key="attendance_file")
    attendance_file = run_action(
        "fetch attendance file",
        lambda: api_client.fetch_attendance_file(filename),
        service.bot.name
    )
    if attendance_file is None:
        return

    st.write(f"{attendance_file.present_count} of "
             f"{len(attendance_file.entries)} present")
    if attendance_file.entries:
        st.dataframe(
            [entry.model_dump() for entry in attendance_file.entries],
            use_container_width=True
        )

    if st.button("Delete file", key=f"delete_attendance_{filename}"):
        if run_action("delete attendance file",
                      lambda: api_client.delete_attendance_file(filename),
                      service.bot.name):
            SessionManager.add_event("attendance", f"Deleted {filename}")
            st.rerun()
