import streamlit as st

from botpanel.components.common import run_action
from botpanel.services.bot_service import BotService
from botpanel.services.session_manager import SessionManager


def show_sidebar(service: BotService):
    bot = service.bot
    with st.sidebar:
        st.title(bot.name)
        show_status(service)
        st.markdown("---")
        show_settings(service)
        st.markdown("---")
        show_history()


def show_status(service: BotService):
    bot = service.bot
    status = run_action("read status", service.refresh_status, bot.name)
    if status is None:
        st.warning("Server not reachable")
    elif status.running:
        mode = "developer" if status.developer_mode else "production"
        st.success(f"Running ({mode} mode)")
    else:
        st.info("Stopped")

    col1, col2 = st.columns(2)
    if col1.button("Start", disabled=bot.is_active, use_container_width=True):
        result = run_action("start bot", service.start, bot.name)
        if result is not None:
            SessionManager.add_event("bot", result.message or "Bot started")
            st.rerun()
    if col2.button("Stop", disabled=not bot.is_active, use_container_width=True):
        result = run_action("stop bot", service.stop, bot.name)
        if result is not None:
            SessionManager.add_event("bot", result.message or "Bot stopped")
            st.rerun()


def show_settings(service: BotService):
    bot = service.bot
    st.subheader("Settings")
    with st.form(key=f"settings_{bot.id}"):
        name = st.text_input("Bot name", value=bot.name)
        server_ip = st.text_input("Server", value=bot.api_client.server_ip)
        api_key = st.text_input(
            "API key", value=bot.api_client.api_key, type="password")
        token = st.text_input("Token", value=bot.token, type="password")
        dev_token = st.text_input(
            "Developer token", value=bot.dev_token, type="password")
        role = st.text_input("Staff role", value=bot.role)
        developer_mode = st.checkbox(
            "Developer mode", value=bot.is_developer_mode)
        submitted = st.form_submit_button("Save")

    if not submitted:
        return

    run_action(
        "save credentials",
        lambda: service.update_credentials(token, dev_token, role),
        bot.name
    )
    run_action(
        "update connection",
        lambda: service.update_connection(server_ip, api_key),
        bot.name
    )
    run_action(
        "switch mode",
        lambda: service.toggle_developer_mode(developer_mode),
        bot.name
    )
    if name.strip() != bot.name:
        run_action("rename bot", lambda: service.rename(name), bot.name)
    SessionManager.add_event("settings", "Settings saved")
    st.rerun()


def show_history():
    st.subheader("History")
    events = st.session_state.events
    if not events:
        st.write("Nothing yet")
        return
    for event in reversed(events):
        st.caption(f"{event['timestamp']} · {event['kind']}: {event['text']}")
