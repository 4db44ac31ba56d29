import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from mediassist.application.request_builder import build_request
from mediassist.application.use_cases import CancellationToken, DiagnosisAnalysisUseCase
from mediassist.domain.errors import (
    AnalysisCancelled,
    AnalysisError,
    ErrorKind,
    InvalidTransition,
)
from mediassist.domain.media import MediaCollector
from mediassist.domain.models import DiagnosisResult, SymptomIntake


logger = logging.getLogger(__name__)


GENERIC_FAILURE_MESSAGE = "Failed to analyze symptoms. Please try again or verify your API key."


class SessionPhase(str, Enum):
    AWAITING_CONSENT = "awaiting_consent"
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class SessionError(BaseModel):
    kind: ErrorKind
    message: str
    detail: str


class DiagnosisSession:
    """Drives one user's pass from consent through submission to a result."""

    def __init__(self, analysis: DiagnosisAnalysisUseCase, camera_enabled: bool = False):
        self.analysis = analysis
        self.collector = MediaCollector(camera_enabled=camera_enabled)
        self.phase = SessionPhase.AWAITING_CONSENT
        self.submitted: Optional[SymptomIntake] = None
        self.result: Optional[DiagnosisResult] = None
        self.error: Optional[SessionError] = None
        self._token: Optional[CancellationToken] = None

    @property
    def intake(self) -> SymptomIntake:
        return self.collector.intake

    def set_text(self, text: str) -> None:
        self.intake.text = text

    def accept_consent(self) -> None:
        self._require("accept consent", SessionPhase.AWAITING_CONSENT)
        self.phase = SessionPhase.IDLE

    def begin_submission(self) -> Optional[CancellationToken]:
        """
        Move Idle -> Submitting.

        Returns:
            The token for the new request, or None when the symptom text is blank
            (the session stays Idle and no error is recorded)
        """
        self._require("submit", SessionPhase.IDLE)
        if not self.intake.has_text():
            logger.debug("Submit ignored: symptom text is empty")
            return None

        self.submitted = self.intake.model_copy(deep=True)
        self.result = None
        self.error = None
        self._token = CancellationToken()
        self.phase = SessionPhase.SUBMITTING
        return self._token

    def complete(self, token: CancellationToken, result: DiagnosisResult) -> bool:
        if not self._is_live(token):
            logger.info("Discarding stale analysis result")
            return False
        self.result = result
        self.phase = SessionPhase.SUCCESS
        self._token = None
        return True

    def fail(self, token: CancellationToken, error: AnalysisError) -> bool:
        if not self._is_live(token):
            logger.info("Discarding stale analysis failure: %s", error.kind.value)
            return False
        self.error = SessionError(kind=error.kind, message=GENERIC_FAILURE_MESSAGE, detail=error.detail)
        self.phase = SessionPhase.FAILED
        self._token = None
        return True

    def submit(self) -> SessionPhase:
        token = self.begin_submission()
        if token is None:
            return self.phase

        request = build_request(self.submitted.text, self.submitted.media)
        try:
            result = self.analysis.analyze(request, cancel_token=token)
        except AnalysisCancelled:
            logger.info("Analysis cancelled by session reset")
            return self.phase
        except AnalysisError as e:
            logger.error("Analysis failed (%s): %s", e.kind.value, e.detail)
            self.fail(token, e)
            return self.phase

        self.complete(token, result)
        return self.phase

    def reset(self) -> None:
        self._require("reset", SessionPhase.SUCCESS, SessionPhase.FAILED, SessionPhase.SUBMITTING)
        if self._token is not None:
            self._token.cancel()
            self._token = None
        self.collector.clear()
        self.intake.text = ""
        self.submitted = None
        self.result = None
        self.error = None
        self.phase = SessionPhase.IDLE

    def abandon_submission(self) -> None:
        """Submitting -> Idle without a result; the intake is kept and any late response is dropped."""
        self._require("abandon submission", SessionPhase.SUBMITTING)
        self._token.cancel()
        self._token = None
        self.phase = SessionPhase.IDLE

    def dismiss_error(self) -> None:
        """Failed -> Idle, keeping the intake so it can be resubmitted as is."""
        self._require("dismiss error", SessionPhase.FAILED)
        self.error = None
        self.phase = SessionPhase.IDLE

    def _is_live(self, token: CancellationToken) -> bool:
        return (
            self.phase == SessionPhase.SUBMITTING
            and token is self._token
            and not token.cancelled
        )

    def _require(self, action: str, *allowed: SessionPhase) -> None:
        if self.phase not in allowed:
            raise InvalidTransition(action, self.phase.value)
