import logging

import streamlit as st

from ai.chat import GREETING, ChatTurn, step
from ai.selector import PROVIDERS, require_provider
from config import configure_logging, load_settings
from documents.errors import ResumateError
from documents.formatters import export

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="ResuMate Chatbot", layout="centered")

st.title("ResuMate Chatbot")
st.caption("Your personal AI career assistant to help you build a resume.")

# ---------------- Sidebar: provider, keys ----------------
with st.sidebar:
    st.header("Model Provider")
    names = list(PROVIDERS)
    provider_pref = st.selectbox("Provider", names,
                                 index=names.index(settings.provider) if settings.provider in names else 0)
    model = st.text_input("Model (blank = provider default)", value=settings.model or "")
    typed = {
        "gemini": st.text_input("Gemini API Key", type="password"),
        "openai": st.text_input("OpenAI API Key", type="password"),
        "anthropic": st.text_input("Anthropic API Key", type="password"),
    }
    keys = settings.with_keys(typed)
    if st.button("Start over"):
        st.session_state.pop("chat_history", None)
        st.session_state.pop("chat_resume", None)

# stored history excludes the greeting; it is prepended for each model call
if "chat_history" not in st.session_state:
    st.session_state["chat_history"] = ()
if "chat_resume" not in st.session_state:
    st.session_state["chat_resume"] = None

with st.chat_message("assistant"):
    st.markdown(GREETING)
for turn in st.session_state["chat_history"]:
    with st.chat_message("user" if turn.role == "user" else "assistant"):
        st.markdown(turn.content)

message = st.chat_input("Type your message...")
if message:
    with st.chat_message("user"):
        st.markdown(message)
    try:
        provider = require_provider(provider_pref, keys)
        history = (ChatTurn("model", GREETING),) + st.session_state["chat_history"]
        with st.spinner("Thinking..."):
            result = step(history, message, provider, model=(model or None))
        # drop the greeting again before storing
        st.session_state["chat_history"] = result.history[1:]
        if result.resume_data is not None:
            st.session_state["chat_resume"] = result.resume_data
        with st.chat_message("assistant"):
            st.markdown(result.response)
    except ResumateError as e:
        logger.warning("Chatbot turn failed: %s", e)
        with st.chat_message("assistant"):
            st.markdown("Sorry, I ran into an error. Please try sending your message again.")
        st.error(f"The chatbot could not respond: {e}")

resume = st.session_state.get("chat_resume")
if resume is not None:
    st.write("---")
    st.success(f"Your resume is ready, {resume.name}!")
    cols = st.columns(3)
    for col, fmt in zip(cols, ("docx", "pdf", "txt")):
        with col:
            try:
                file_name, mime, data = export(resume, fmt, settings.pdf_page)
                st.download_button(f"⬇️ Download {fmt.upper()}", data=data, file_name=file_name,
                                   mime=mime, key=f"chat_dl_{fmt}")
            except ResumateError as e:
                logger.exception("Export to %s failed", fmt)
                st.error(f"Could not build the {fmt.upper()} file: {e}")
