import base64
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from mediassist.application.ports import ReasoningServicePort
from mediassist.application.schemas import MediaPart, ServiceCall
from mediassist.infrastructure.config import Settings


logger = logging.getLogger(__name__)


class GeminiReasoningAdapter(ReasoningServicePort):
    def __init__(self, settings: Settings | None = None, client: Optional[genai.Client] = None):
        self.settings = settings or Settings()
        self._client = client
        if self._client is None:
            self._init_client()

    def _init_client(self):
        api_key = self.settings.gemini_api_key
        if not api_key:
            logger.error("Gemini API key is missing.")
            self._client = None
            return
        timeout_ms = int(self.settings.request_timeout * 1000)
        try:
            self._client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=timeout_ms),
            )
        except Exception as e:
            logger.exception("Failed to initialize Gemini client: %s", e)
            self._client = None

    def generate_structured_json(self, call: ServiceCall) -> Optional[str]:
        if not self._client:
            raise RuntimeError("Gemini client not initialized (missing API key or client error)")
        response = self._client.models.generate_content(
            model=call.model,
            contents=to_genai_parts(call),
            config=types.GenerateContentConfig(
                response_mime_type=call.config.response_mime_type,
                response_schema=call.config.response_schema,
                system_instruction=call.config.system_instruction,
                temperature=call.config.temperature,
            ),
        )
        return response.text


def to_genai_parts(call: ServiceCall) -> List[types.Part]:
    parts = []
    for part in call.parts:
        if isinstance(part, MediaPart):
            parts.append(types.Part.from_bytes(data=base64.b64decode(part.data), mime_type=part.mime_type))
        else:
            parts.append(types.Part.from_text(text=part.text))
    return parts
