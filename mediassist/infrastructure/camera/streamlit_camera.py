import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from mediassist.application.ports import CameraPort
from mediassist.domain.errors import CameraAccessError


logger = logging.getLogger(__name__)


class StreamlitCameraAdapter(CameraPort):
    """
    Wraps the value of ``st.camera_input``.

    The browser owns the device stream; this adapter only holds the snapshot
    for the duration of a capture and drops it on close.
    """

    def __init__(self, snapshot):
        self._snapshot = snapshot
        self._buffer: Optional[bytes] = None

    def open(self, facing: str = "environment") -> None:
        if self._snapshot is None:
            raise CameraAccessError("No photo was taken. Allow camera access in your browser and try again.")
        logger.debug("Camera opened (preferred facing=%s)", facing)
        self._buffer = self._snapshot.getvalue()

    def grab_frame(self) -> Image.Image:
        if self._buffer is None:
            raise CameraAccessError("Camera is not open.")
        try:
            frame = Image.open(io.BytesIO(self._buffer))
            frame.load()
        except (UnidentifiedImageError, OSError) as e:
            raise CameraAccessError(f"Camera returned an unreadable frame: {e}") from e
        return frame

    def close(self) -> None:
        self._buffer = None
        self._snapshot = None
