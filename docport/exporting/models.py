from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from docport.documents.models import DocumentRecord


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def media_type(self) -> str:
        return {
            ExportFormat.JSON: "application/json",
            ExportFormat.CSV: "text/csv",
            ExportFormat.PDF: "application/pdf",
        }[self]


class LetterDesign(str, Enum):
    FORMAL = "formal"
    BUSINESS = "business"
    PERSONAL = "personal"
    THANKYOU = "thankyou"
    INVITATION = "invitation"

    @property
    def label(self) -> str:
        return {
            LetterDesign.FORMAL: "정식편지",
            LetterDesign.BUSINESS: "비즈니스편지",
            LetterDesign.PERSONAL: "개인편지",
            LetterDesign.THANKYOU: "감사편지",
            LetterDesign.INVITATION: "초대편지",
        }[self]


@dataclass(frozen=True)
class ExportRequest:
    format: ExportFormat
    document_ids: list[str] = field(default_factory=list)
    include_content: bool = True


@dataclass(frozen=True)
class LetterOptions:
    design: LetterDesign
    recipient: str | None = None
    sender: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class LetterExportRequest:
    title: str
    content: str
    options: LetterOptions


@dataclass(frozen=True)
class GenerateOptions:
    owner_id: str
    include_metadata: bool = True
    exported_at: datetime | None = None
    letter: LetterOptions | None = None


@dataclass(frozen=True)
class GeneratedFile:
    content: bytes
    media_type: str
    extension: str

    @property
    def byte_size(self) -> int:
        return len(self.content)


@dataclass
class ExportJob:
    """Everything produced by one export request."""

    owner_id: str
    format: str
    records: list[DocumentRecord]
    content: bytes
    filename: str
    download_url: str

    @property
    def byte_size(self) -> int:
        return len(self.content)


@dataclass
class ExportResponse:
    download_url: str
    count: int
    format: ExportFormat
    file_size: int
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "downloadUrl": self.download_url,
            "metadata": {
                "count": self.count,
                "format": self.format.value,
                "fileSize": self.file_size,
                "timestamp": self.timestamp.isoformat(),
            },
        }


@dataclass
class LetterExportResponse:
    download_url: str
    filename: str
    file_size: int
    timestamp: datetime
    design: LetterDesign

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "downloadUrl": self.download_url,
            "metadata": {
                "filename": self.filename,
                "fileSize": self.file_size,
                "timestamp": self.timestamp.isoformat(),
                "design": self.design.value,
            },
        }
