from typing import Sequence

from mediassist.application.schemas import AnalysisRequest, MediaPart, TextPart
from mediassist.domain.models import MediaItem


INSTRUCTION_TEMPLATE = """
      You are an expert AI medical assistant. Your goal is to analyze the provided symptoms and/or visual evidence to suggest potential medical conditions.

      User Symptoms: "{symptoms}"

      INSTRUCTIONS:
      1. Analyze the symptoms carefully.
      2. If images are provided, analyze visual markers (rashes, swelling, discoloration, etc.) across all images.
      3. Provide a list of 3-5 potential conditions sorted by likelihood.
      4. Assess the urgency level accurately. If symptoms suggest heart attack, stroke, severe allergic reaction, or other life-threatening issues, mark as EMERGENCY.
      5. Provide actionable non-medical advice (e.g., "Apply cold compress", "Go to the ER").
      6. ALWAYS emphasize that you are an AI and this is NOT a professional medical diagnosis.

      Format the output strictly as JSON according to the schema.
    """


def build_instruction(symptoms: str) -> str:
    # str.replace keeps braces in user text intact
    return INSTRUCTION_TEMPLATE.replace("{symptoms}", symptoms)


def build_request(text: str, media: Sequence[MediaItem]) -> AnalysisRequest:
    parts = [MediaPart(mime_type=item.mime_type, data=item.raw_base64) for item in media]
    parts.append(TextPart(text=build_instruction(text)))
    return AnalysisRequest(parts=parts)
