import logging

import streamlit as st

from botpanel.components.attendance import attendance_panel
from botpanel.components.common import run_action
from botpanel.components.group_manager import group_manager
from botpanel.components.messages import message_panel
from botpanel.components.roles import role_panel
from botpanel.components.sidebar import show_sidebar
from botpanel.components.surveys import survey_panel
from botpanel.core.config import settings
from botpanel.services.bot_service import BotService
from botpanel.services.bot_store import BotStore
from botpanel.services.session_manager import SessionManager

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def no_bot_view(store: BotStore):
    st.warning("No Bot Available")
    if st.button("Create Bot"):
        bot = run_action("create bot", store.create_default)
        if bot is not None:
            logger.info(f"Created bot {bot.id}")
            st.rerun()


def main():
    st.set_page_config(page_title="Bot Panel")
    SessionManager.initialize_session()

    store = run_action("load bots", BotStore)
    if store is None:
        return

    bot = store.first()
    if bot is None:
        no_bot_view(store)
        return

    service = run_action("connect to server", lambda: BotService(bot, store))
    if service is None:
        return
    show_sidebar(service)

    groups, attendance, surveys, roles, messages = st.tabs(
        ["Groups", "Attendance", "Surveys", "Roles", "Messages"])
    with groups:
        group_manager(service)
    with attendance:
        attendance_panel(service)
    with surveys:
        survey_panel(service)
    with roles:
        role_panel(service)
    with messages:
        message_panel(service)


if __name__ == "__main__":
    main()
