import streamlit as st

from botpanel.components.common import channel_picker, run_action
from botpanel.services.bot_service import BotService
from botpanel.services.session_manager import SessionManager


def message_panel(service: BotService):
    api_client = service.api_client
    bot_name = service.bot.name

    channels = run_action("fetch channels", api_client.fetch_channels,
                          bot_name) or []
    channel_id = channel_picker("Channel", channels, key="message_channel")
    if not channel_id:
        return

    st.subheader("Send message")
    with st.form(key="send_message", clear_on_submit=True):
        content = st.text_area("Message", label_visibility="collapsed")
        if st.form_submit_button("Send") and content.strip():
            if run_action("send message",
                          lambda: api_client.send_message(channel_id, content),
                          bot_name):
                SessionManager.add_event("messages", "Message sent")
                st.success("Message sent")

    st.subheader("Clear messages")
    limit = st.number_input("How many (0 = all)", min_value=0, value=50)
    if not st.session_state.confirm_clear:
        if st.button("Clear"):
            st.session_state.confirm_clear = True
            st.rerun()
        return

    st.warning("Messages cannot be restored once deleted.")
    col1, col2 = st.columns(2)
    if col1.button("Confirm", use_container_width=True):
        st.session_state.confirm_clear = False
        result = run_action(
            "clear messages",
            lambda: api_client.clear_messages(channel_id, int(limit) or None),
            bot_name
        )
        if result is not None:
            SessionManager.add_event(
                "messages", f"Deleted {result.deleted} messages")
            st.success(f"Deleted {result.deleted} messages")
    if col2.button("Cancel", use_container_width=True):
        st.session_state.confirm_clear = False
        st.rerun()
