import json

import pytest
from PIL import Image

from mediassist.domain.models import RawFile


VALID_RESPONSE = {
    "summary": "Your symptoms may point to an abdominal problem that needs prompt attention.",
    "urgency": "High",
    "potentialConditions": [
        {
            "name": "Appendicitis",
            "probability": "High likelihood",
            "description": "Inflammation of the appendix.",
            "commonSymptomsMatched": ["sharp abdominal pain"],
        },
        {
            "name": "Gastroenteritis",
            "probability": "Moderate",
            "description": "Inflammation of the stomach and intestines.",
            "commonSymptomsMatched": ["abdominal pain"],
        },
        {
            "name": "Kidney stone",
            "probability": "rare",
            "description": "Hard deposit in the urinary tract.",
            "commonSymptomsMatched": [],
        },
    ],
    "recommendedActions": ["Go to the ER if pain worsens", "Avoid eating until assessed"],
    "questionsToAskDoctor": ["Do I need an ultrasound?"],
    "disclaimer": "This is not a professional medical diagnosis.",
}


class DummyLLM:
    """Reasoning service double returning a canned payload and recording calls."""

    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = json.dumps(VALID_RESPONSE) if payload is None else payload
        self.error = error
        self.calls = []

    def generate_structured_json(self, call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def valid_payload():
    return json.loads(json.dumps(VALID_RESPONSE))


@pytest.fixture
def png_file():
    def _make(name="rash.png", size=64):
        return RawFile(name=name, mime_type="image/png", data=b"\x89PNG" + b"\x00" * size)
    return _make


@pytest.fixture
def frame():
    return Image.new("RGBA", (16, 12), (200, 30, 30, 255))
