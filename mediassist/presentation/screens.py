"""Consent gate and symptom intake form."""
import logging
from typing import List

import streamlit as st

from mediassist.application.camera import capture_photo
from mediassist.application.session import DiagnosisSession, SessionPhase
from mediassist.domain.errors import CameraAccessError, MediaValidationError
from mediassist.domain.models import MAX_MEDIA_ITEMS, RawFile
from mediassist.infrastructure.camera.streamlit_camera import StreamlitCameraAdapter


logger = logging.getLogger(__name__)


TEXT_KEY = "symptom_text"
NONCE_KEY = "media_widget_nonce"
NOTICES_KEY = "media_notices"

UPLOAD_TYPES = ["png", "jpg", "jpeg", "webp"]

DISCLAIMER_PARAGRAPHS = [
    "**MediAssist AI is not a doctor.** The information provided by this application "
    "is for educational and informational purposes only.",
    "It is **not** intended to be a substitute for professional medical advice, diagnosis, "
    "or treatment. Always seek the advice of your physician or other qualified health "
    "provider with any questions you may have regarding a medical condition.",
]

EMERGENCY_NOTICE = (
    "If you think you may have a medical emergency, call your doctor or emergency services immediately."
)


def show_consent_screen(session: DiagnosisSession) -> bool:
    """
    Display the medical disclaimer.

    Returns:
        True once the user has accepted it
    """
    if session.phase != SessionPhase.AWAITING_CONSENT:
        return True

    st.markdown("## ⚠️ Important Medical Disclaimer")
    for paragraph in DISCLAIMER_PARAGRAPHS:
        st.markdown(paragraph)
    st.error(EMERGENCY_NOTICE)

    if st.button("I Understand & Agree", type="primary", width="stretch"):
        session.accept_consent()
        st.rerun()
        return True

    st.caption("Please accept the disclaimer to continue.")
    return False


def _bump_media_widgets() -> None:
    # New widget keys drop the files already consumed by the collector
    st.session_state[NONCE_KEY] = st.session_state.get(NONCE_KEY, 0) + 1


def _notify(messages: List[str]) -> None:
    st.session_state[NOTICES_KEY] = messages


def _to_raw_files(uploaded) -> List[RawFile]:
    return [RawFile(name=f.name, mime_type=f.type, data=f.getvalue()) for f in uploaded]


def _handle_uploads(session: DiagnosisSession, uploaded) -> None:
    report = session.collector.add(*_to_raw_files(uploaded))
    if not report.ok:
        logger.info("%d of %d uploads rejected", len(report.rejected), len(uploaded))
    _notify([str(e) for e in report.rejected])
    _bump_media_widgets()
    st.rerun()


def _handle_capture(session: DiagnosisSession, snapshot) -> None:
    try:
        capture_photo(StreamlitCameraAdapter(snapshot), session.collector)
        _notify([])
    except (CameraAccessError, MediaValidationError) as e:
        logger.info("Camera capture rejected: %s", e)
        _notify([str(e)])
    _bump_media_widgets()
    st.rerun()


def _remove_active(session: DiagnosisSession) -> None:
    try:
        session.collector.remove(session.collector.cursor)
    except MediaValidationError as e:
        _notify([str(e)])


def _select(session: DiagnosisSession, index: int) -> None:
    try:
        session.collector.select(index)
    except MediaValidationError as e:
        _notify([str(e)])


def _show_carousel(session: DiagnosisSession) -> None:
    collector = session.collector
    active = collector.active
    if active is None:
        return

    st.image(active.to_bytes(), caption=f"Image {collector.cursor + 1} of {collector.count}", width="stretch")

    prev_col, remove_col, next_col = st.columns([1, 1, 1])
    with prev_col:
        st.button("◀ Previous", on_click=collector.previous, disabled=collector.count <= 1, width="stretch")
    with remove_col:
        st.button("🗑️ Remove", on_click=_remove_active, args=(session,), width="stretch")
    with next_col:
        st.button("Next ▶", on_click=collector.next, disabled=collector.count <= 1, width="stretch")

    thumbs = st.columns(MAX_MEDIA_ITEMS)
    for idx, item in enumerate(collector.items):
        with thumbs[idx]:
            st.image(item.to_bytes(), width=80)
            label = "●" if idx == collector.cursor else str(idx + 1)
            st.button(label, key=f"thumb_{idx}", on_click=_select, args=(session, idx))


def show_symptom_form(session: DiagnosisSession) -> bool:
    """
    Display the intake form.

    Returns:
        True if the user pressed Analyze with a non-empty description
    """
    if TEXT_KEY not in st.session_state:
        st.session_state[TEXT_KEY] = session.intake.text

    st.markdown("### 🩺 Symptom Checker")
    st.caption("Describe your symptoms and upload images if relevant.")

    text = st.text_area(
        "Describe your symptoms",
        key=TEXT_KEY,
        height=160,
        placeholder=(
            "Describe what you're feeling in detail. E.g., 'Sharp pain in lower right abdomen, "
            "started 2 hours ago, accompanied by nausea...'"
        ),
    )
    session.set_text(text)
    st.caption(f"{len(text)} chars")

    collector = session.collector
    st.markdown(f"**Visual Evidence** (Optional) · Max {MAX_MEDIA_ITEMS} images")

    nonce = st.session_state.get(NONCE_KEY, 0)
    if not collector.is_full:
        uploaded = st.file_uploader(
            "JPG, PNG or WEBP up to 5MB",
            type=UPLOAD_TYPES,
            accept_multiple_files=True,
            key=f"uploader_{nonce}",
        )
        if uploaded:
            _handle_uploads(session, uploaded)

        if collector.camera_enabled:
            with st.expander("📷 Take a photo"):
                snapshot = st.camera_input("Camera", key=f"camera_{nonce}", label_visibility="collapsed")
                if snapshot is not None:
                    _handle_capture(session, snapshot)

    for message in st.session_state.get(NOTICES_KEY, []):
        st.warning(message)

    _show_carousel(session)

    return st.button(
        "🔍 Analyze Symptoms",
        type="primary",
        disabled=not session.intake.has_text(),
        width="stretch",
    )


def clear_form_state() -> None:
    st.session_state[TEXT_KEY] = ""
    st.session_state[NOTICES_KEY] = []
    _bump_media_widgets()
