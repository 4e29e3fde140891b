class ImportPipelineError(Exception):
    """Base exception for all import-related errors."""


class ParseError(ImportPipelineError):
    """Raised when an uploaded file cannot be decoded as its declared format."""


class RecordError(ImportPipelineError):
    """Raised by a parser for a single malformed record; never leaves the parser."""


class NothingToImportError(ImportPipelineError):
    """Raised when a file parsed but produced no importable documents."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
