from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from docport.documents.text import count_words_from_html, create_excerpt_from_html


class DocumentCategory(str, Enum):
    EMAIL = "email"
    LETTER = "letter"
    CREATIVE = "creative"
    BUSINESS = "business"
    PERSONAL = "personal"
    DRAFT = "draft"
    OTHER = "other"


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    COMPLETED = "completed"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class DocumentRecord:
    """A document moving through import or export.

    Candidate records produced by a parser have no ``id`` and no
    ``owner_id``. ``excerpt`` and ``word_count`` are derived from
    ``content`` on construction; use ``with_content`` to change the body.
    """

    title: str
    content: str = ""
    category: DocumentCategory = DocumentCategory.OTHER
    tags: list[str] = field(default_factory=list)
    status: DocumentStatus = DocumentStatus.DRAFT
    id: str | None = None
    owner_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_modified_at: datetime | None = None
    excerpt: str = field(init=False, default="")
    word_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "excerpt", create_excerpt_from_html(self.content))
        object.__setattr__(self, "word_count", count_words_from_html(self.content))

    def with_content(self, content: str) -> "DocumentRecord":
        return replace(self, content=content)

    def without_content(self) -> "DocumentRecord":
        """Blank the body while keeping excerpt and word count of the original."""
        blank = replace(self, content="")
        object.__setattr__(blank, "excerpt", self.excerpt)
        object.__setattr__(blank, "word_count", self.word_count)
        return blank


class OutcomeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ImportOutcome:
    """Final result for one candidate record of a batch."""

    kind: OutcomeKind
    candidate: DocumentRecord
    record: DocumentRecord | None = None
    reason: str | None = None


@dataclass
class BatchImportResult:
    """Per-record outcomes of one batch, in parser order."""

    outcomes: list[ImportOutcome] = field(default_factory=list)

    @property
    def successful(self) -> list[DocumentRecord]:
        return [
            outcome.record
            for outcome in self.outcomes
            if outcome.kind in (OutcomeKind.CREATED, OutcomeKind.UPDATED)
            and outcome.record is not None
        ]

    @property
    def skipped(self) -> list[ImportOutcome]:
        return [o for o in self.outcomes if o.kind is OutcomeKind.SKIPPED]

    @property
    def failed(self) -> list[ImportOutcome]:
        return [o for o in self.outcomes if o.kind is OutcomeKind.FAILED]

    @property
    def total_processed(self) -> int:
        return len(self.outcomes)
