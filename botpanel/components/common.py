from typing import Optional

import streamlit as st

from botpanel.core.exceptions import BotPanelError
from botpanel.services.session_manager import SessionManager
from botpanel.utils import ErrorHandler


def run_action(operation: str, action, bot_name: Optional[str] = None):
    """Run an API action and show failures instead of raising them."""
    try:
        return action()
    except (BotPanelError, ValueError) as e:
        message = ErrorHandler.handle_api_error(operation, e, bot_name)
        SessionManager.add_event("error", message)
        st.error(message)
        return None


def channel_picker(label: str, channels, key: str):
    text_channels = [c for c in channels if c.type == "text"]
    if not text_channels:
        st.info("No text channels available")
        return None
    options = {f"#{c.name}": c.id for c in text_channels}
    selected = st.selectbox(label, options=list(options.keys()), key=key)
    return options[selected]
