class ExportError(Exception):
    """Base exception for all export-related errors."""


class NotFoundError(ExportError):
    """Raised when the requested documents resolve to nothing owned by the caller."""


class PayloadTooLargeError(ExportError):
    """Raised when the estimated or generated output exceeds the format ceiling."""

    def __init__(self, format_label: str, max_bytes: int, size: int) -> None:
        self.format_label = format_label
        self.max_bytes = max_bytes
        self.size = size
        max_mb = round(max_bytes / 1024 / 1024)
        super().__init__(
            f"파일 크기가 너무 큽니다. {format_label.upper()} 형식의 최대 크기는 "
            f"{max_mb}MB입니다. 문서 수를 줄여주세요."
        )
