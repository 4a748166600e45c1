import streamlit as st
from datetime import datetime

MAX_EVENTS = 20


class SessionManager:
    @staticmethod
    def initialize_session():
        if "last_result" not in st.session_state:
            st.session_state.last_result = None
        if "confirm_clear" not in st.session_state:
            st.session_state.confirm_clear = False
        if "events" not in st.session_state:
            st.session_state.events = []

    @staticmethod
    def add_event(kind: str, text: str):
        st.session_state.events.append({
            "kind": kind,
            "text": text,
            "timestamp": datetime.now().strftime("%H:%M")
        })
        # Keep only the most recent entries
        del st.session_state.events[:-MAX_EVENTS]
