import json
import logging
from typing import Optional

from pydantic import ValidationError

from mediassist.application.ports import ReasoningServicePort
from mediassist.application.schemas import (
    DIAGNOSIS_RESPONSE_SCHEMA,
    REQUIRED_RESULT_FIELDS,
    AnalysisRequest,
    GenerationSettings,
    ServiceCall,
)
from mediassist.domain.errors import (
    AnalysisCancelled,
    EmptyResponseError,
    SchemaValidationError,
    TransportError,
)
from mediassist.domain.models import DiagnosisResult


logger = logging.getLogger(__name__)


DEFAULT_MODEL = "gemini-3-pro-preview"

SYSTEM_INSTRUCTION = (
    "You are a helpful and responsible AI medical assistant. "
    "You must always prioritize user safety and recommend professional medical help."
)

TEMPERATURE = 0.3


class CancellationToken:
    """Handle for one in-flight analysis; cancelled when the session moves on."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def build_generation_settings() -> GenerationSettings:
    return GenerationSettings(
        response_mime_type="application/json",
        response_schema=DIAGNOSIS_RESPONSE_SCHEMA,
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=TEMPERATURE,
    )


def parse_diagnosis(raw: Optional[str]) -> DiagnosisResult:
    """
    Decode the service payload into a DiagnosisResult.

    Raises:
        EmptyResponseError: no text came back
        SchemaValidationError: not JSON, or any mandatory field missing or malformed
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError("No response generated from AI model.")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SchemaValidationError("Response is not valid JSON.", detail=str(e)) from e

    if not isinstance(data, dict):
        raise SchemaValidationError("Response is not a JSON object.", detail=type(data).__name__)

    missing = [key for key in REQUIRED_RESULT_FIELDS if key not in data]
    if missing:
        raise SchemaValidationError(
            "Response is missing required fields.",
            detail="missing: " + ", ".join(missing),
        )

    try:
        return DiagnosisResult.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError("Response does not match the diagnosis schema.", detail=str(e)) from e


class DiagnosisAnalysisUseCase:
    def __init__(self, llm: ReasoningServicePort, model: str = DEFAULT_MODEL):
        self.llm = llm
        self.model = model

    def build_call(self, request: AnalysisRequest) -> ServiceCall:
        return ServiceCall(model=self.model, parts=request.parts, config=build_generation_settings())

    def analyze(self, request: AnalysisRequest, cancel_token: Optional[CancellationToken] = None) -> DiagnosisResult:
        call = self.build_call(request)
        logger.info("Requesting analysis: model=%s images=%d", self.model, len(request.media_parts))

        try:
            raw = self.llm.generate_structured_json(call)
        except Exception as e:
            logger.exception("Analysis call failed: %s", e)
            raise TransportError("The analysis service could not be reached.", detail=repr(e)) from e

        if cancel_token is not None and cancel_token.cancelled:
            raise AnalysisCancelled("Session moved on before the response arrived.")

        try:
            result = parse_diagnosis(raw)
        except (EmptyResponseError, SchemaValidationError) as e:
            preview = (raw or "")[:200]
            logger.warning("Diagnosis response rejected (%s): %s. Raw: %s", e.kind.value, e.detail, preview)
            raise

        logger.info("Analysis complete: urgency=%s conditions=%d", result.urgency.value, len(result.conditions))
        return result
