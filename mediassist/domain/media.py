import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from PIL import Image

from mediassist.domain.errors import (
    CapacityExceeded,
    IndexOutOfRange,
    MediaValidationError,
    SizeExceeded,
    UnsupportedMediaType,
)
from mediassist.domain.models import (
    ACCEPTED_MIME_TYPES,
    MAX_FILE_BYTES,
    MAX_MEDIA_ITEMS,
    MediaItem,
    RawFile,
    SymptomIntake,
)


logger = logging.getLogger(__name__)


CAPTURE_JPEG_QUALITY = 0.8


@dataclass
class AddReport:
    added: List[MediaItem] = field(default_factory=list)
    rejected: List[MediaValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected


class MediaCollector:
    """Owns the ordered images of an intake and the carousel cursor."""

    def __init__(self, intake: Optional[SymptomIntake] = None, camera_enabled: bool = False):
        self.intake = intake or SymptomIntake()
        self.camera_enabled = camera_enabled

    @property
    def items(self) -> List[MediaItem]:
        return list(self.intake.media)

    @property
    def count(self) -> int:
        return len(self.intake.media)

    @property
    def cursor(self) -> int:
        return self.intake.cursor

    @property
    def is_full(self) -> bool:
        return self.count >= MAX_MEDIA_ITEMS

    @property
    def active(self) -> Optional[MediaItem]:
        if not self.intake.media:
            return None
        return self.intake.media[self.intake.cursor]

    def add(self, *files: RawFile) -> AddReport:
        """
        Validate and append uploaded files.

        Each file is checked on its own, so a batch that overflows the
        collection keeps the files that fit and reports the rest.

        Returns:
            AddReport with the appended items and one error per rejected file
        """
        report = AddReport()
        was_empty = self.count == 0
        for raw in files:
            try:
                item = self._encode_upload(raw)
            except MediaValidationError as e:
                logger.info("Rejected image %s: %s", raw.name, e)
                report.rejected.append(e)
                continue
            self.intake.media.append(item)
            report.added.append(item)

        if was_empty and report.added:
            self.intake.cursor = 0
        return report

    def capture(self, frame: Image.Image) -> MediaItem:
        """JPEG-encode a camera still and make it the active image."""
        if self.is_full:
            raise CapacityExceeded("camera capture", MAX_MEDIA_ITEMS)

        buffer = io.BytesIO()
        frame.convert("RGB").save(buffer, format="JPEG", quality=int(CAPTURE_JPEG_QUALITY * 100))
        raw = buffer.getvalue()
        if len(raw) > MAX_FILE_BYTES:
            raise SizeExceeded("camera capture", len(raw), MAX_FILE_BYTES)

        item = MediaItem.from_bytes(raw, "image/jpeg")
        self.intake.media.append(item)
        self.intake.cursor = self.count - 1
        return item

    def remove(self, index: int) -> MediaItem:
        if not 0 <= index < self.count:
            raise IndexOutOfRange(index, self.count)
        removed = self.intake.media.pop(index)

        if not self.intake.media:
            self.intake.cursor = 0
        elif self.intake.cursor >= self.count:
            self.intake.cursor = self.count - 1
        return removed

    def select(self, index: int) -> None:
        if not 0 <= index < self.count:
            raise IndexOutOfRange(index, self.count)
        self.intake.cursor = index

    def next(self) -> int:
        if self.count > 1:
            self.intake.cursor = (self.intake.cursor + 1) % self.count
        return self.intake.cursor

    def previous(self) -> int:
        if self.count > 1:
            self.intake.cursor = (self.intake.cursor - 1 + self.count) % self.count
        return self.intake.cursor

    def clear(self) -> None:
        self.intake.media.clear()
        self.intake.cursor = 0

    def _encode_upload(self, raw: RawFile) -> MediaItem:
        if raw.mime_type not in ACCEPTED_MIME_TYPES:
            raise UnsupportedMediaType(raw.name, raw.mime_type or "")
        if raw.size_bytes > MAX_FILE_BYTES:
            raise SizeExceeded(raw.name, raw.size_bytes, MAX_FILE_BYTES)
        if self.is_full:
            raise CapacityExceeded(raw.name, MAX_MEDIA_ITEMS)
        return MediaItem.from_bytes(raw.data, raw.mime_type)
