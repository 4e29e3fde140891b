from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from docport.documents.models import DocumentCategory, DocumentRecord
from docport.documents.serialization import document_to_payload


class ImportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    TXT = "txt"


@dataclass(frozen=True)
class ParseLimits:
    max_documents: int = 500


@dataclass
class ParseResult:
    """Candidate records (no id, no owner) plus non-fatal parse errors."""

    records: list[DocumentRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def is_full(self, limits: ParseLimits) -> bool:
        return len(self.records) >= limits.max_documents

    def note_truncated(self, limits: ParseLimits) -> None:
        self.errors.append(
            f"문서 개수가 제한(최대 {limits.max_documents}개)을 초과하여 "
            f"처음 {limits.max_documents}개만 가져옵니다."
        )


@dataclass(frozen=True)
class UploadedFile:
    filename: str | None
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class ImportOptions:
    """Batch options.

    ``update_existing`` takes precedence over ``skip_duplicates`` when a
    candidate matches an existing title. ``category`` and ``tags`` override
    the values found in the file.
    """

    skip_duplicates: bool = True
    update_existing: bool = False
    category: DocumentCategory | None = None
    tags: list[str] | None = None


@dataclass
class ImportResponse:
    success: bool
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    documents: list[DocumentRecord] = field(default_factory=list)

    @classmethod
    def failure(cls, errors: list[str]) -> "ImportResponse":
        return cls(success=False, errors=errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "documents": [document_to_payload(doc) for doc in self.documents],
        }
