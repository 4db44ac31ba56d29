"""Error taxonomy for the intake and analysis pipeline."""
from enum import Enum
from typing import Optional


class MediAssistError(Exception):
    """Base class for every error raised by the pipeline."""


class MediaValidationError(MediAssistError):
    """A media operation was rejected by the collector."""


class SizeExceeded(MediaValidationError):
    def __init__(self, name: str, size_bytes: int, limit: int):
        self.name = name
        self.size_bytes = size_bytes
        self.limit = limit
        super().__init__(f"File {name} exceeds {limit // (1024 * 1024)}MB limit.")


class CapacityExceeded(MediaValidationError):
    def __init__(self, name: str, limit: int):
        self.name = name
        self.limit = limit
        super().__init__(f"{name} was not added: you can upload a maximum of {limit} images.")


class IndexOutOfRange(MediaValidationError):
    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Image index {index} is out of range (have {count}).")


class UnsupportedMediaType(MediaValidationError):
    def __init__(self, name: str, mime_type: str):
        self.name = name
        self.mime_type = mime_type
        super().__init__(f"File {name} has unsupported type {mime_type or 'unknown'}.")


class CameraAccessError(MediAssistError):
    """Camera permission was denied or the device could not be used."""


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    EMPTY_RESPONSE = "empty_response"
    SCHEMA_VALIDATION = "schema_validation"


class AnalysisError(MediAssistError):
    kind: ErrorKind

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail or message


class TransportError(AnalysisError):
    kind = ErrorKind.TRANSPORT


class EmptyResponseError(AnalysisError):
    kind = ErrorKind.EMPTY_RESPONSE


class SchemaValidationError(AnalysisError):
    kind = ErrorKind.SCHEMA_VALIDATION


class AnalysisCancelled(MediAssistError):
    """The session abandoned the request before its response arrived."""


class InvalidTransition(MediAssistError):
    """A session action was attempted from a phase that does not allow it."""

    def __init__(self, action: str, phase: str):
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} while session is {phase}.")
