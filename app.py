import json
import logging

import streamlit as st

from ai.selector import PROVIDERS, require_provider
from config import configure_logging, load_settings
from documents.errors import ExtractionError, ResumateError
from documents.formatters import build_text, export
from documents.io_utils import TextExtractor, read_file
from documents.layout import layout
from documents.schema import resume_to_dict
from pipeline import check_inputs, run_tailoring

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="ResuMate: AI Resume Tailor", layout="wide")

# -------------------------
# Stable result state
# -------------------------
if "tailoring" not in st.session_state:
    st.session_state["tailoring"] = None
if "resume_name" not in st.session_state:
    st.session_state["resume_name"] = ""

st.title("ResuMate")
st.caption("Upload your resume and paste a job description. ResuMate extracts the JD keywords, "
           "suggests edits, and rewrites your resume for ATS screening. Nothing is stored.")
st.caption("No resume yet? Build one with the chatbot: `streamlit run chatbot_app.py`.")

# -------------------------
# Sidebar: provider, keys, model
# -------------------------
with st.sidebar:
    st.header("Model Provider")
    names = list(PROVIDERS)
    provider_pref = st.selectbox("Provider", names,
                                 index=names.index(settings.provider) if settings.provider in names else 0)
    model = st.text_input("Model (blank = provider default)", value=settings.model or "")
    temperature = st.slider("Temperature", 0.0, 1.0, settings.temperature, 0.05)
    max_tokens = st.number_input("Max output tokens", 512, 16384, settings.max_tokens, step=512)
    st.caption("Keys from .env are used unless you enter one here. Keys are not stored.")
    typed = {
        "gemini": st.text_input("Gemini API Key", type="password"),
        "openai": st.text_input("OpenAI API Key", type="password"),
        "anthropic": st.text_input("Anthropic API Key", type="password"),
    }
    keys = settings.with_keys(typed)

# -------------------------
# Inputs
# -------------------------
extractor = TextExtractor(settings.extraction)

col1, col2 = st.columns(2)
with col1:
    resume_file = st.file_uploader("Upload your Resume (PDF/DOCX/TXT)", type=["pdf", "docx", "txt"])
    resume_text = ""
    if resume_file:
        try:
            resume_text = read_file(resume_file, extractor)
            st.success(f"Loaded {resume_file.name}: {len(resume_text)} characters")
        except ExtractionError as e:
            st.error(str(e))
with col2:
    jd_text = st.text_area("Paste Job Description", height=300, placeholder="Paste the JD here...")

if st.button("Tailor my resume", type="primary"):
    problems = check_inputs(resume_text, jd_text)
    if problems:
        for p in problems:
            st.warning(p)
        st.stop()
    try:
        provider = require_provider(provider_pref, keys)
        with st.spinner("Analyzing the job description and tailoring your resume..."):
            st.session_state["tailoring"] = run_tailoring(
                resume_text, jd_text, provider,
                model_name=(model or None),
                temperature=temperature,
                max_tokens=int(max_tokens),
                schema_retries=1,
            )
    except ResumateError as e:
        st.error(str(e))
    except Exception as e:
        logger.exception("Tailoring failed: %s", e)
        st.error("Could not process your request. Please check the files and try again.")

# -------------------------
# Results
# -------------------------
result = st.session_state.get("tailoring")
if result is not None:
    for name, err in result.errors.items():
        st.error(f"{name.capitalize()} failed: {err}")

    st.write("---")
    c1, c2 = st.columns(2)
    with c1:
        st.subheader("JD Keyword Analysis")
        if result.keywords:
            st.markdown(result.keywords)
        ov = result.overlap or {}
        if ov:
            st.metric("Local keyword overlap", f"{ov.get('match_score', 0)} / 100")
            missing = [w for w, _ in ov.get("missing", [])]
            if missing:
                st.caption("JD terms not found in your resume: " + ", ".join(missing))
    with c2:
        st.subheader("Suggested Edits")
        if result.suggestions:
            st.markdown(result.suggestions)

    resume = result.resume
    if resume is not None:
        st.subheader("Tailored Resume")
        preview, structured = st.tabs(["Full text", "Structured layout"])
        with preview:
            st.text(resume.full_resume_text)
        with structured:
            st.text(build_text(layout(resume)))
            with st.expander("Structured data (JSON)"):
                st.code(json.dumps(resume_to_dict(resume), indent=2)[:8000])

        st.write("### Export")
        cols = st.columns(3)
        for col, fmt in zip(cols, ("docx", "pdf", "txt")):
            with col:
                try:
                    file_name, mime, data = export(resume, fmt, settings.pdf_page)
                    st.download_button(f"⬇️ Download {fmt.upper()}", data=data, file_name=file_name,
                                       mime=mime, key=f"dl_{fmt}")
                except ResumateError as e:
                    logger.exception("Export to %s failed", fmt)
                    st.error(f"Could not build the {fmt.upper()} file: {e}")
