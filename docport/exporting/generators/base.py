import json
import math
from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import ClassVar

from docport.documents.models import DocumentRecord
from docport.exporting.exceptions import PayloadTooLargeError
from docport.exporting.models import GeneratedFile, GenerateOptions


def estimate_size(records: list[DocumentRecord], multiplier: float) -> int:
    """Rough output size: serialized record length scaled by a per-format factor."""
    total = sum(
        len(json.dumps(asdict(record), default=str, ensure_ascii=False)) for record in records
    )
    return math.ceil(total * multiplier)


class BaseGenerator(ABC):
    """Renders records into one downloadable file, enforcing a byte ceiling.

    The ceiling is checked twice: against a cheap estimate before any
    rendering, and against the real output afterwards.
    """

    format_label: ClassVar[str]
    media_type: ClassVar[str]
    extension: ClassVar[str]
    size_multiplier: ClassVar[float] = 1.0

    def __init__(self, max_bytes: int) -> None:
        self._max_bytes = max_bytes

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def estimate(self, records: list[DocumentRecord]) -> int:
        return estimate_size(records, self.size_multiplier)

    def generate(self, records: list[DocumentRecord], options: GenerateOptions) -> GeneratedFile:
        """Render ``records`` into file bytes.

        Raises:
            PayloadTooLargeError: if the estimated or the actual size exceeds
                the ceiling of this format.
        """
        estimated = self.estimate(records)
        if estimated > self._max_bytes:
            raise PayloadTooLargeError(self.format_label, self._max_bytes, estimated)

        content = self._render(records, options)
        if len(content) > self._max_bytes:
            raise PayloadTooLargeError(self.format_label, self._max_bytes, len(content))

        return GeneratedFile(content=content, media_type=self.media_type, extension=self.extension)

    @abstractmethod
    def _render(self, records: list[DocumentRecord], options: GenerateOptions) -> bytes:
        """Produce the file bytes."""
