import codecs
import re
from abc import ABC, abstractmethod
from typing import ClassVar

from docport.importing.exceptions import ParseError
from docport.importing.models import ImportFormat, ParseLimits, ParseResult
from docport.logging.logger import Log

_TAG_SPLIT_RE = re.compile(r"[,;|]")


def decode_text(data: bytes) -> str:
    """Decode uploaded bytes, honouring UTF-8 and UTF-16 byte order marks.

    Raises:
        ParseError: if the bytes are not valid text.
    """
    try:
        if data.startswith(codecs.BOM_UTF8):
            return data[len(codecs.BOM_UTF8):].decode("utf-8")
        if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
            return data.decode("utf-16")
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError("파일을 UTF-8 텍스트로 읽을 수 없습니다.") from exc


def split_tags(raw: str, pattern: re.Pattern[str] = _TAG_SPLIT_RE) -> list[str]:
    """Split a joined tag string, keeping order and dropping blanks."""
    return [tag.strip() for tag in pattern.split(raw) if tag.strip()]


class BaseParser(ABC):
    """Contract for all import format parsers."""

    format: ClassVar[ImportFormat]

    def parse(
        self,
        data: bytes,
        limits: ParseLimits,
        filename: str | None = None,
    ) -> ParseResult:
        """Turn uploaded bytes into candidate records.

        Record-level problems and truncation notes are collected in
        ``ParseResult.errors``; already parsed records are always returned.

        Raises:
            ParseError: if the file cannot be read as this format at all.
        """
        text = decode_text(data)
        if not text.strip():
            raise ParseError("파일이 비어있습니다.")

        result = self._parse_text(text, limits, filename)
        Log.info(
            f"[File Parse Success] Type: {self.format.value}, "
            f"Documents: {len(result.records)}, Size: {len(data)} bytes"
        )
        return result

    @abstractmethod
    def _parse_text(
        self,
        text: str,
        limits: ParseLimits,
        filename: str | None,
    ) -> ParseResult:
        """Parse decoded, non-empty text."""
