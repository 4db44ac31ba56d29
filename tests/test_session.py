"""Tests for the diagnosis session lifecycle."""
import json

import pytest

from conftest import DummyLLM, VALID_RESPONSE
from mediassist.application.session import (
    GENERIC_FAILURE_MESSAGE,
    DiagnosisSession,
    SessionPhase,
)
from mediassist.application.use_cases import DiagnosisAnalysisUseCase
from mediassist.domain.errors import (
    CapacityExceeded,
    ErrorKind,
    InvalidTransition,
    TransportError,
)
from mediassist.domain.models import UrgencyLevel


def _session(llm=None) -> DiagnosisSession:
    session = DiagnosisSession(DiagnosisAnalysisUseCase(llm=llm or DummyLLM()))
    session.accept_consent()
    return session


class TestConsent:

    def test_starts_awaiting_consent(self):
        session = DiagnosisSession(DiagnosisAnalysisUseCase(llm=DummyLLM()))
        assert session.phase is SessionPhase.AWAITING_CONSENT

    def test_submit_before_consent_is_invalid(self):
        session = DiagnosisSession(DiagnosisAnalysisUseCase(llm=DummyLLM()))
        session.set_text("headache")
        with pytest.raises(InvalidTransition):
            session.submit()

    def test_consent_is_one_way(self):
        session = _session()
        assert session.phase is SessionPhase.IDLE
        with pytest.raises(InvalidTransition):
            session.accept_consent()


class TestSubmit:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_stays_idle(self, text):
        llm = DummyLLM()
        session = _session(llm)
        session.set_text(text)

        assert session.begin_submission() is None
        assert session.submit() is SessionPhase.IDLE
        assert session.error is None
        assert llm.calls == []

    def test_submit_sends_media_and_text(self, png_file):
        llm = DummyLLM()
        session = _session(llm)
        session.set_text("itchy rash on arm")
        session.collector.add(png_file(), png_file(name="second.png"))

        session.submit()

        parts = llm.calls[0].parts
        assert len(parts) == 3
        assert parts[-1].kind == "text"

    def test_second_submission_while_submitting_is_invalid(self):
        session = _session()
        session.set_text("cough")
        session.begin_submission()
        assert session.phase is SessionPhase.SUBMITTING
        with pytest.raises(InvalidTransition):
            session.begin_submission()

    def test_failure_records_generic_message(self):
        session = _session(DummyLLM(error=TimeoutError("read timed out")))
        session.set_text("dizziness")

        assert session.submit() is SessionPhase.FAILED
        assert session.error.kind is ErrorKind.TRANSPORT
        assert session.error.message == GENERIC_FAILURE_MESSAGE
        assert "read timed out" in session.error.detail
        assert session.result is None

    def test_schema_failure_goes_to_failed(self):
        payload = dict(VALID_RESPONSE)
        del payload["disclaimer"]
        session = _session(DummyLLM(payload=json.dumps(payload)))
        session.set_text("fever")

        assert session.submit() is SessionPhase.FAILED
        assert session.error.kind is ErrorKind.SCHEMA_VALIDATION
        assert session.result is None

    def test_failure_keeps_intake_and_allows_resubmit(self, png_file):
        llm = DummyLLM(error=ConnectionError("offline"))
        session = _session(llm)
        session.set_text("swollen ankle")
        session.collector.add(png_file())
        session.submit()

        session.dismiss_error()
        assert session.phase is SessionPhase.IDLE
        assert session.intake.text == "swollen ankle"
        assert session.collector.count == 1

        llm.error = None
        assert session.submit() is SessionPhase.SUCCESS

    def test_dismiss_error_only_from_failed(self):
        session = _session()
        with pytest.raises(InvalidTransition):
            session.dismiss_error()


class TestReset:

    def test_end_to_end_success_then_reset(self):
        session = _session()
        session.set_text("sharp abdominal pain")

        assert session.submit() is SessionPhase.SUCCESS
        assert session.result.urgency is UrgencyLevel.HIGH

        session.reset()
        assert session.phase is SessionPhase.IDLE
        assert session.result is None
        assert session.error is None
        assert session.intake.text == ""
        assert session.collector.count == 0

    def test_reset_from_failed_clears_everything(self, png_file):
        session = _session(DummyLLM(error=ConnectionError("offline")))
        session.set_text("rash")
        session.collector.add(png_file())
        session.submit()

        session.reset()
        assert session.phase is SessionPhase.IDLE
        assert session.error is None
        assert session.intake.text == ""
        assert session.collector.count == 0

    def test_reset_from_idle_is_invalid(self):
        session = _session()
        with pytest.raises(InvalidTransition):
            session.reset()

    def test_reset_while_submitting_discards_late_result(self):
        session = _session()

        class ResettingLLM(DummyLLM):
            def generate_structured_json(self, call):
                session.reset()
                return super().generate_structured_json(call)

        session.analysis.llm = ResettingLLM()
        session.set_text("chest tightness")

        assert session.submit() is SessionPhase.IDLE
        assert session.result is None

    def test_reset_while_submitting_discards_late_failure(self):
        session = _session()

        class ResettingFailingLLM(DummyLLM):
            def generate_structured_json(self, call):
                session.reset()
                raise ConnectionError("dropped")

        session.analysis.llm = ResettingFailingLLM()
        session.set_text("chest tightness")

        assert session.submit() is SessionPhase.IDLE
        assert session.error is None

    def test_abandon_submission_keeps_intake(self, valid_payload):
        from mediassist.domain.models import DiagnosisResult

        session = _session()
        session.set_text("numb left arm")
        token = session.begin_submission()

        session.abandon_submission()
        assert session.phase is SessionPhase.IDLE
        assert session.intake.text == "numb left arm"
        assert token.cancelled
        assert session.complete(token, DiagnosisResult.model_validate(valid_payload)) is False

    def test_stale_token_cannot_commit(self, valid_payload):
        from mediassist.domain.models import DiagnosisResult

        session = _session()
        session.set_text("cough")
        old_token = session.begin_submission()
        session.reset()
        session.set_text("cough again")
        session.begin_submission()

        result = DiagnosisResult.model_validate(valid_payload)
        assert session.complete(old_token, result) is False
        assert session.fail(old_token, TransportError("late")) is False
        assert session.phase is SessionPhase.SUBMITTING


def test_six_image_adds_do_not_touch_session(png_file):
    session = _session()
    reports = [session.collector.add(png_file(name=f"img{i}.png")) for i in range(6)]

    assert session.collector.count == 5
    assert isinstance(reports[-1].rejected[0], CapacityExceeded)
    assert session.phase is SessionPhase.IDLE
    assert session.error is None
