import logging

from pydantic import BaseModel

from .models import UrgencyLevel


logger = logging.getLogger(__name__)


class UrgencyDisplay(BaseModel):
    rank: int
    bucket: str
    title: str
    icon: str
    tone: str


class ProbabilityBadge(BaseModel):
    bucket: str
    recognized: bool = True


URGENCY_DISPLAY = {
    UrgencyLevel.EMERGENCY: ("emergency", "🚨", "error"),
    UrgencyLevel.HIGH: ("high", "⚠️", "warning"),
    UrgencyLevel.MEDIUM: ("medium", "ℹ️", "info"),
    UrgencyLevel.LOW: ("low", "✅", "success"),
}

# Relative width of the probability bar per bucket
PROBABILITY_WEIGHT = {"high": 0.75, "medium": 0.5, "low": 0.25}


def urgency_display(level: UrgencyLevel) -> UrgencyDisplay:
    bucket, icon, tone = URGENCY_DISPLAY[level]
    return UrgencyDisplay(
        rank=level.rank,
        bucket=bucket,
        title=f"{level.value} Urgency",
        icon=icon,
        tone=tone,
    )


def classify_probability(label: str) -> ProbabilityBadge:
    p = (label or "").lower()
    if "high" in p:
        return ProbabilityBadge(bucket="high")
    if "medium" in p or "moderate" in p:
        return ProbabilityBadge(bucket="medium")
    if "low" in p:
        return ProbabilityBadge(bucket="low")
    logger.warning("Unrecognized probability label %r; showing as low", label)
    return ProbabilityBadge(bucket="low", recognized=False)


def probability_bucket(label: str) -> str:
    return classify_probability(label).bucket
