import logging
import os

import streamlit as st

from mediassist.infrastructure.config import Settings
from mediassist.infrastructure.llm.gemini_client import GeminiReasoningAdapter
from mediassist.application.use_cases import DiagnosisAnalysisUseCase
from mediassist.application.session import DiagnosisSession, SessionPhase
from mediassist.presentation.report import show_report
from mediassist.presentation.screens import clear_form_state, show_consent_screen, show_symptom_form


logger = logging.getLogger(__name__)


FOOTER = "© MediAssist AI. For informational purposes only. Not a medical device."


def _init_session_state(settings: Settings):
    if "diagnosis_session" not in st.session_state:
        llm = GeminiReasoningAdapter(settings=settings)
        analysis = DiagnosisAnalysisUseCase(llm=llm, model=settings.gemini_model)
        st.session_state.diagnosis_session = DiagnosisSession(analysis, camera_enabled=settings.camera_enabled)


def _require_gemini_key(settings: Settings) -> bool:
    if not settings.gemini_api_key:
        st.error(
            "❌ **Gemini API Key Missing**\n\n"
            "Add `GEMINI_API_KEY` to `.streamlit/secrets.toml` or as an environment variable.\n\n"
            "See README for setup instructions."
        )
        return False
    return True


def _reset_session():
    session: DiagnosisSession = st.session_state.diagnosis_session
    session.reset()
    clear_form_state()


def _render_header():
    title, tag = st.columns([4, 1])
    with title:
        st.markdown("# 🩺 MediAssist AI")
    with tag:
        st.caption("Beta Preview")


def _run_analysis(session: DiagnosisSession):
    if session.phase == SessionPhase.FAILED:
        session.dismiss_error()
    with st.spinner("Analyzing Symptoms... Our AI is reviewing your inputs. This may take a few seconds."):
        phase = session.submit()
    logger.info("Submission finished in phase %s", phase.value)
    st.rerun()


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="MediAssist AI",
        page_icon="🩺",
        layout="centered",
    )

    settings = Settings()
    _render_header()
    if not _require_gemini_key(settings):
        st.stop()

    _init_session_state(settings)
    session: DiagnosisSession = st.session_state.diagnosis_session

    if not show_consent_screen(session):
        st.stop()

    if session.phase == SessionPhase.SUBMITTING:
        # The previous run was interrupted before the response was committed
        logger.info("Abandoning interrupted submission")
        session.abandon_submission()

    if session.phase == SessionPhase.SUCCESS and session.result is not None:
        show_report(session.result, on_reset=_reset_session)
    else:
        if show_symptom_form(session):
            _run_analysis(session)
        if session.phase == SessionPhase.FAILED and session.error is not None:
            st.error(session.error.message)

    st.divider()
    st.caption(FOOTER)


if __name__ == "__main__":
    main()
