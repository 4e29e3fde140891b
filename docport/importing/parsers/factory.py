from pathlib import PurePath

from docport.importing.models import ImportFormat
from docport.importing.parsers.base import BaseParser
from docport.importing.parsers.csv_parser import CsvParser
from docport.importing.parsers.json_parser import JsonParser
from docport.importing.parsers.text_parser import TextParser

_EXTENSIONS: dict[str, ImportFormat] = {
    ".json": ImportFormat.JSON,
    ".csv": ImportFormat.CSV,
    ".txt": ImportFormat.TXT,
}

_MIME_TYPES: dict[str, ImportFormat] = {
    "application/json": ImportFormat.JSON,
    "text/csv": ImportFormat.CSV,
    "application/csv": ImportFormat.CSV,
    "text/plain": ImportFormat.TXT,
}


def detect_format(filename: str | None, content_type: str | None) -> ImportFormat | None:
    """Resolve the upload format from its extension, falling back to the MIME type."""
    if filename:
        fmt = _EXTENSIONS.get(PurePath(filename).suffix.lower())
        if fmt is not None:
            return fmt
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        return _MIME_TYPES.get(mime)
    return None


class ParserFactory:
    """Creates the parser for an import format."""

    PARSERS: dict[ImportFormat, type[BaseParser]] = {
        ImportFormat.JSON: JsonParser,
        ImportFormat.CSV: CsvParser,
        ImportFormat.TXT: TextParser,
    }

    @classmethod
    def create(cls, fmt: ImportFormat) -> BaseParser:
        parser_cls = cls.PARSERS.get(fmt)
        if parser_cls is None:
            raise ValueError(f"Unknown import format '{fmt}'. Choose from: {list(cls.PARSERS)}")
        return parser_cls()
