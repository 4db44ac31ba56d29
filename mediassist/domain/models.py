import base64
import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


MAX_FILE_BYTES = 5 * 1024 * 1024
MAX_MEDIA_ITEMS = 5
ACCEPTED_MIME_TYPES = ("image/png", "image/jpeg", "image/webp")

_DATA_URI = re.compile(r"^data:(.+);base64,(.+)$", re.DOTALL)


class MediaItem(BaseModel):
    """One encoded image, stored as a ``data:<mime>;base64,`` URI."""

    model_config = ConfigDict(frozen=True)

    data: str
    mime_type: str
    size_bytes: int = Field(..., ge=0, le=MAX_FILE_BYTES)

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "MediaItem":
        encoded = base64.b64encode(raw).decode("ascii")
        return cls(data=f"data:{mime_type};base64,{encoded}", mime_type=mime_type, size_bytes=len(raw))

    @property
    def raw_base64(self) -> str:
        match = _DATA_URI.match(self.data)
        if not match:
            return self.data
        return match.group(2)

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.raw_base64)


class SymptomIntake(BaseModel):
    text: str = ""
    media: List[MediaItem] = []
    cursor: int = 0

    @model_validator(mode="after")
    def check_bounds(self):
        if len(self.media) > MAX_MEDIA_ITEMS:
            raise ValueError(f"at most {MAX_MEDIA_ITEMS} images are allowed")
        if self.media and not 0 <= self.cursor < len(self.media):
            raise ValueError("cursor must point at an existing image")
        if not self.media and self.cursor != 0:
            raise ValueError("cursor must be 0 when there are no images")
        return self

    def has_text(self) -> bool:
        return bool(self.text.strip())


class UrgencyLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    EMERGENCY = "Emergency"

    @property
    def rank(self) -> int:
        return _URGENCY_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, UrgencyLevel):
            return NotImplemented
        return self.rank >= other.rank


_URGENCY_ORDER = [UrgencyLevel.LOW, UrgencyLevel.MEDIUM, UrgencyLevel.HIGH, UrgencyLevel.EMERGENCY]


class MedicalCondition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    probability: str
    description: str
    matched_symptoms: List[str] = Field(..., alias="commonSymptomsMatched")


class DiagnosisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    urgency: UrgencyLevel
    conditions: List[MedicalCondition] = Field(..., alias="potentialConditions")
    recommended_actions: List[str] = Field(..., alias="recommendedActions")
    questions_to_ask_doctor: List[str] = Field(..., alias="questionsToAskDoctor")
    disclaimer: str


class RawFile(BaseModel):
    """An uploaded file before it has been validated and encoded."""

    name: str
    mime_type: Optional[str] = None
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)
