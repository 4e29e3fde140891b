import re
from dataclasses import dataclass, field
from pathlib import PurePath

from docport.documents.categories import normalize_category
from docport.documents.models import DocumentCategory, DocumentRecord
from docport.importing.exceptions import RecordError
from docport.importing.models import ImportFormat, ParseLimits, ParseResult
from docport.importing.parsers.base import BaseParser, split_tags

SEPARATOR_PATTERNS = (
    re.compile(r"^-{3,}\s*$", re.MULTILINE),
    re.compile(r"^={3,}\s*$", re.MULTILINE),
    re.compile(r"^#{3,}\s*$", re.MULTILINE),
    re.compile(r"^\*{3,}\s*$", re.MULTILINE),
)

_HEADING_RE = re.compile(r"^#{1,2}\s+(.+)$")
_TITLE_PREFIX_RE = re.compile(r"^(?:제목|title|subject|주제)\s*:\s*(.+)$", re.IGNORECASE)
_CATEGORY_LINE_RE = re.compile(r"^(?:category|카테고리)\s*:\s*(.*)$", re.IGNORECASE)
_TAGS_LINE_RE = re.compile(r"^(?:tags|태그)\s*:\s*(.*)$", re.IGNORECASE)

FALLBACK_TITLE = "가져온 문서"
MAX_INFERRED_TITLE_LENGTH = 100

_CATEGORY_KEYWORDS = (
    (DocumentCategory.EMAIL, ("이메일", "@")),
    (DocumentCategory.LETTER, ("편지", "인사")),
    (DocumentCategory.PERSONAL, ("메모", "노트", "일기", "diary")),
)


@dataclass
class Section:
    title: str | None
    body: str
    category: str | None = None
    tags: list[str] = field(default_factory=list)


def split_sections(text: str) -> list[str]:
    """Split on the first separator family that yields more than one section."""
    for pattern in SEPARATOR_PATTERNS:
        parts = [part.strip() for part in pattern.split(text)]
        parts = [part for part in parts if part]
        if len(parts) > 1:
            return parts
    return [text.strip()]


def detect_title(segment: str) -> tuple[str | None, str]:
    """Return ``(title, remaining body)``; title is None when none is found."""
    lines = segment.split("\n")
    first = lines[0].strip()
    rest = "\n".join(lines[1:]).strip()

    for pattern in (_HEADING_RE, _TITLE_PREFIX_RE):
        match = pattern.match(first)
        if match:
            return match.group(1).strip(), rest

    if (
        first
        and len(first) <= MAX_INFERRED_TITLE_LENGTH
        and not any(mark in first for mark in ".?!")
        and len(rest) > len(first) * 2
    ):
        return first, rest

    return None, segment


def extract_metadata_lines(body: str) -> tuple[str, str | None, list[str]]:
    """Pull ``Category:`` and ``Tags:`` lines out of the body."""
    category: str | None = None
    tags: list[str] = []
    kept: list[str] = []
    for line in body.split("\n"):
        stripped = line.strip()
        category_match = _CATEGORY_LINE_RE.match(stripped)
        if category_match and category is None:
            category = category_match.group(1).strip()
            continue
        tags_match = _TAGS_LINE_RE.match(stripped)
        if tags_match and not tags:
            tags = split_tags(tags_match.group(1))
            continue
        kept.append(line)
    return "\n".join(kept).strip(), category, tags


def guess_category(text: str) -> DocumentCategory:
    lowered = text.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DocumentCategory.OTHER


class TextParser(BaseParser):
    """Parses plain-text uploads, one document per separated section."""

    format = ImportFormat.TXT

    def _parse_text(
        self,
        text: str,
        limits: ParseLimits,
        filename: str | None,
    ) -> ParseResult:
        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        segments = split_sections(normalized)
        base_title = PurePath(filename).stem if filename else FALLBACK_TITLE
        base_title = base_title or FALLBACK_TITLE

        result = ParseResult()
        for index, segment in enumerate(segments, start=1):
            if result.is_full(limits):
                result.note_truncated(limits)
                break
            placeholder = f"{base_title} ({index})" if len(segments) > 1 else base_title
            try:
                result.records.append(self._build_record(segment, placeholder))
            except RecordError as exc:
                result.errors.append(f"섹션 {index}: {exc}")

        return result

    @staticmethod
    def _build_record(segment: str, placeholder: str) -> DocumentRecord:
        title, body = detect_title(segment)
        content, category, tags = extract_metadata_lines(body)
        if not content:
            raise RecordError("내용이 비어있습니다.")

        title = title or placeholder
        if category:
            resolved = normalize_category(category)
        else:
            resolved = guess_category(f"{title}\n{content}")

        return DocumentRecord(title=title, content=content, category=resolved, tags=tags)
