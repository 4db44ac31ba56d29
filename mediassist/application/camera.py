import logging
from contextlib import contextmanager
from typing import Iterator

from mediassist.application.ports import CameraPort
from mediassist.domain.errors import CameraAccessError, CapacityExceeded
from mediassist.domain.media import MediaCollector
from mediassist.domain.models import MAX_MEDIA_ITEMS, MediaItem


logger = logging.getLogger(__name__)


REAR_FACING = "environment"


@contextmanager
def camera_session(camera: CameraPort, facing: str = REAR_FACING) -> Iterator[CameraPort]:
    """Open the camera for the duration of the block and always release it."""
    try:
        try:
            camera.open(facing=facing)
        except CameraAccessError:
            raise
        except Exception as e:
            raise CameraAccessError(f"Unable to access camera: {e}") from e
        yield camera
    finally:
        try:
            camera.close()
        except Exception as e:
            logger.warning("Camera release failed: %s", e)


def capture_photo(camera: CameraPort, collector: MediaCollector) -> MediaItem:
    """
    Take one still and add it to the collection.

    Raises:
        CameraAccessError: camera disabled, permission denied, or no frame delivered
        CapacityExceeded: the collection is already full
    """
    if not collector.camera_enabled:
        raise CameraAccessError("Camera capture is not available.")
    if collector.is_full:
        raise CapacityExceeded("camera capture", MAX_MEDIA_ITEMS)
    with camera_session(camera) as cam:
        try:
            frame = cam.grab_frame()
        except CameraAccessError:
            raise
        except Exception as e:
            raise CameraAccessError(f"Could not capture photo: {e}") from e
        return collector.capture(frame)
