import streamlit as st

from botpanel.components.common import channel_picker, run_action
from botpanel.services.bot_service import BotService
from botpanel.services.session_manager import SessionManager


def survey_panel(service: BotService):
    api_client = service.api_client
    bot_name = service.bot.name
    st.subheader("New survey")

    channels = run_action("fetch channels", api_client.fetch_channels,
                          bot_name) or []
    with st.form(key="survey_form", clear_on_submit=True):
        title = st.text_input("Question")
        options_text = st.text_area("Options (one per line)")
        duration = st.number_input(
            "Duration in minutes (0 = until closed)", min_value=0, value=0)
        channel_id = channel_picker("Channel", channels, key="survey_channel")
        submitted = st.form_submit_button("Post survey")

    if submitted and channel_id:
        options = options_text.splitlines()
        result = run_action(
            "create survey",
            lambda: api_client.create_survey(
                title, options, channel_id, int(duration) or None),
            bot_name
        )
        if result is not None:
            SessionManager.add_event("survey", result.message or title)
            st.success("Survey posted")

    st.markdown("---")
    show_survey_files(service)


def show_survey_files(service: BotService):
    api_client = service.api_client
    bot_name = service.bot.name
    st.subheader("Results")

    files = run_action("fetch survey files", api_client.fetch_survey_files,
                       bot_name) or []
    if not files:
        st.write("No survey results available")
        return

    options = {f"{f.title or f.filename}": f.filename for f in files}
    label = st.selectbox("Survey", options=list(options.keys()),
                         key="survey_file")
    filename = options[label]
    survey = run_action(
        "fetch survey file",
        lambda: api_client.fetch_survey_file(filename),
        bot_name
    )
    if survey is None:
        return

    st.write(f"{survey.total_votes} votes")
    if survey.results:
        st.bar_chart({r.option: r.votes for r in survey.results})

    if st.button("Delete results", key=f"delete_survey_{filename}"):
        if run_action("delete survey file",
                      lambda: api_client.delete_survey_file(filename),
                      bot_name):
            SessionManager.add_event("survey", f"Deleted {filename}")
            st.rerun()
