from typing import List, Literal, Union

from pydantic import BaseModel, Field


class MediaPart(BaseModel):
    kind: Literal["media"] = "media"
    mime_type: str
    data: str  # raw base64, no data URI envelope


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str


Part = Union[MediaPart, TextPart]


class AnalysisRequest(BaseModel):
    parts: List[Part]

    @property
    def media_parts(self) -> List[MediaPart]:
        return [p for p in self.parts if isinstance(p, MediaPart)]

    @property
    def text_part(self) -> TextPart:
        return self.parts[-1]


class GenerationSettings(BaseModel):
    response_mime_type: str = "application/json"
    response_schema: dict
    system_instruction: str
    temperature: float = Field(0.3, ge=0.0, le=2.0)


class ServiceCall(BaseModel):
    model: str
    parts: List[Part]
    config: GenerationSettings


URGENCY_LABELS = ["Low", "Medium", "High", "Emergency"]

REQUIRED_RESULT_FIELDS = [
    "summary",
    "urgency",
    "potentialConditions",
    "recommendedActions",
    "questionsToAskDoctor",
    "disclaimer",
]

REQUIRED_CONDITION_FIELDS = ["name", "probability", "description", "commonSymptomsMatched"]


DIAGNOSIS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "STRING",
            "description": "A brief, empathetic summary of the analysis.",
        },
        "urgency": {
            "type": "STRING",
            "enum": URGENCY_LABELS,
            "description": "The estimated urgency level of the condition.",
        },
        "potentialConditions": {
            "type": "ARRAY",
            "description": "List of potential medical conditions matching the symptoms.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING", "description": "Name of the condition."},
                    "probability": {"type": "STRING", "description": "Estimated likelihood (High/Medium/Low)."},
                    "description": {"type": "STRING", "description": "Brief explanation of the condition."},
                    "commonSymptomsMatched": {
                        "type": "ARRAY",
                        "items": {"type": "STRING"},
                        "description": "List of user symptoms that match this condition.",
                    },
                },
                "required": REQUIRED_CONDITION_FIELDS,
            },
        },
        "recommendedActions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of recommended next steps (e.g., 'Visit ER', 'Rest', 'Hydrate').",
        },
        "questionsToAskDoctor": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of questions the user should ask their healthcare provider.",
        },
        "disclaimer": {
            "type": "STRING",
            "description": "Mandatory medical disclaimer text.",
        },
    },
    "required": REQUIRED_RESULT_FIELDS,
}
