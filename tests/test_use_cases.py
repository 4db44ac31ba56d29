import json
import pytest

from conftest import DummyLLM
from mediassist.application.request_builder import build_request
from mediassist.application.schemas import DIAGNOSIS_RESPONSE_SCHEMA
from mediassist.application.use_cases import (
    SYSTEM_INSTRUCTION,
    CancellationToken,
    DiagnosisAnalysisUseCase,
    parse_diagnosis,
)
from mediassist.domain.errors import (
    AnalysisCancelled,
    EmptyResponseError,
    ErrorKind,
    SchemaValidationError,
    TransportError,
)
from mediassist.domain.models import DiagnosisResult, MediaItem, UrgencyLevel


def test_analyze_returns_diagnosis():
    llm = DummyLLM()
    usecase = DiagnosisAnalysisUseCase(llm=llm)
    result = usecase.analyze(build_request("sharp abdominal pain", []))

    assert isinstance(result, DiagnosisResult)
    assert result.urgency is UrgencyLevel.HIGH
    assert result.conditions[0].name == "Appendicitis"
    assert result.conditions[0].matched_symptoms == ["sharp abdominal pain"]
    assert result.questions_to_ask_doctor == ["Do I need an ultrasound?"]


def test_analyze_sends_fixed_generation_config():
    llm = DummyLLM()
    usecase = DiagnosisAnalysisUseCase(llm=llm, model="gemini-test")
    media = [MediaItem.from_bytes(b"img", "image/png")]
    usecase.analyze(build_request("rash", media))

    call = llm.calls[0]
    assert call.model == "gemini-test"
    assert call.config.temperature == 0.3
    assert call.config.response_mime_type == "application/json"
    assert call.config.response_schema == DIAGNOSIS_RESPONSE_SCHEMA
    assert call.config.system_instruction == SYSTEM_INSTRUCTION
    assert len(call.parts) == 2


def test_transport_failure_is_wrapped():
    usecase = DiagnosisAnalysisUseCase(llm=DummyLLM(error=ConnectionError("network down")))
    with pytest.raises(TransportError) as exc_info:
        usecase.analyze(build_request("cough", []))
    assert exc_info.value.kind is ErrorKind.TRANSPORT
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.parametrize("payload", [None, "", "   "])
def test_empty_response(payload):
    llm = DummyLLM()
    llm.payload = payload
    with pytest.raises(EmptyResponseError):
        DiagnosisAnalysisUseCase(llm=llm).analyze(build_request("cough", []))


@pytest.mark.parametrize(
    "field",
    ["summary", "urgency", "potentialConditions", "recommendedActions", "questionsToAskDoctor", "disclaimer"],
)
def test_missing_mandatory_field(valid_payload, field):
    del valid_payload[field]
    with pytest.raises(SchemaValidationError) as exc_info:
        parse_diagnosis(json.dumps(valid_payload))
    assert field in exc_info.value.detail


def test_unknown_urgency_is_rejected(valid_payload):
    valid_payload["urgency"] = "Unknown"
    with pytest.raises(SchemaValidationError):
        parse_diagnosis(json.dumps(valid_payload))


def test_condition_missing_field_is_rejected(valid_payload):
    del valid_payload["potentialConditions"][0]["commonSymptomsMatched"]
    with pytest.raises(SchemaValidationError):
        parse_diagnosis(json.dumps(valid_payload))


@pytest.mark.parametrize("raw", ["not json", "[1, 2, 3]", '"just a string"'])
def test_non_object_payload(raw):
    with pytest.raises(SchemaValidationError):
        parse_diagnosis(raw)


def test_free_text_probability_is_accepted(valid_payload):
    valid_payload["potentialConditions"][0]["probability"] = "Somewhat plausible"
    result = parse_diagnosis(json.dumps(valid_payload))
    assert result.conditions[0].probability == "Somewhat plausible"


def test_cancelled_token_discards_response():
    token = CancellationToken()
    token.cancel()
    with pytest.raises(AnalysisCancelled):
        DiagnosisAnalysisUseCase(llm=DummyLLM()).analyze(build_request("cough", []), cancel_token=token)


def test_cancellation_token_flag():
    token = CancellationToken()
    assert token.cancelled is False
    token.cancel()
    assert token.cancelled is True
