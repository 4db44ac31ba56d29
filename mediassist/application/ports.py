from typing import Optional, Protocol

from PIL import Image

from mediassist.application.schemas import ServiceCall


class ReasoningServicePort(Protocol):
    def generate_structured_json(self, call: ServiceCall) -> Optional[str]:
        """
        Sends one generation call and returns the raw text payload (JSON expected),
        or None when the service produced no text.
        """
        ...


class CameraPort(Protocol):
    def open(self, facing: str = "environment") -> None:
        ...

    def grab_frame(self) -> Image.Image:
        ...

    def close(self) -> None:
        ...
