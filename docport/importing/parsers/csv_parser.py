import csv
import io
from dataclasses import dataclass

from docport.documents.categories import normalize_category
from docport.documents.models import DocumentRecord
from docport.importing.exceptions import ParseError, RecordError
from docport.importing.models import ImportFormat, ParseLimits, ParseResult
from docport.importing.parsers.base import BaseParser, split_tags

# Header aliases, matched case-insensitively.
_TITLE_HEADERS = frozenset({"title", "name", "subject", "제목", "이름", "주제"})
_CONTENT_HEADERS = frozenset(
    {"content", "body", "text", "description", "내용", "본문", "텍스트", "설명"}
)
_CATEGORY_HEADERS = frozenset(
    {"category", "type", "group", "class", "카테고리", "유형", "그룹", "분류"}
)
_TAGS_HEADERS = frozenset({"tags", "keywords", "labels", "태그", "키워드", "라벨"})

# Cells may be as large as an upload; overlong bodies fail per record on import.
FIELD_SIZE_LIMIT = 16 * 1024 * 1024
csv.field_size_limit(max(csv.field_size_limit(), FIELD_SIZE_LIMIT))


@dataclass
class ColumnMapping:
    title: int | None = None
    content: int | None = None
    category: int | None = None
    tags: int | None = None


def map_headers(headers: list[str]) -> ColumnMapping:
    """Find the first column for each known field."""
    mapping = ColumnMapping()
    for index, raw in enumerate(headers):
        header = raw.strip().lower()
        if mapping.title is None and header in _TITLE_HEADERS:
            mapping.title = index
        elif mapping.content is None and header in _CONTENT_HEADERS:
            mapping.content = index
        elif mapping.category is None and header in _CATEGORY_HEADERS:
            mapping.category = index
        elif mapping.tags is None and header in _TAGS_HEADERS:
            mapping.tags = index
    return mapping


def _cell(row: list[str], index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


class CsvParser(BaseParser):
    """Parses CSV uploads whose first row is a header."""

    format = ImportFormat.CSV

    def _parse_text(
        self,
        text: str,
        limits: ParseLimits,
        filename: str | None,
    ) -> ParseResult:
        rows: list[tuple[int, list[str]]] = []
        reader = csv.reader(io.StringIO(text))
        start_line = 1
        try:
            for row in reader:
                if any(cell.strip() for cell in row):
                    rows.append((start_line, row))
                # quoted cells may span several physical lines
                start_line = reader.line_num + 1
        except csv.Error as exc:
            raise ParseError(f"CSV 파싱 오류: {exc}") from exc

        result = ParseResult()
        if not rows:
            result.errors.append("CSV 파일에 데이터가 없습니다.")
            return result
        if len(rows) == 1:
            result.errors.append("헤더만 있고 데이터가 없습니다.")
            return result

        mapping = map_headers(rows[0][1])
        if mapping.title is None:
            result.errors.append("제목 열을 찾을 수 없습니다. (title, name, subject 중 하나 필요)")
            return result
        if mapping.content is None:
            result.errors.append(
                "내용 열을 찾을 수 없습니다. (content, body, text, description 중 하나 필요)"
            )
            return result

        for line_number, row in rows[1:]:
            if result.is_full(limits):
                result.note_truncated(limits)
                break
            try:
                result.records.append(self._build_record(row, mapping))
            except RecordError as exc:
                result.errors.append(f"행 {line_number}: {exc}")

        return result

    @staticmethod
    def _build_record(row: list[str], mapping: ColumnMapping) -> DocumentRecord:
        title = _cell(row, mapping.title)
        if not title:
            raise RecordError("제목이 비어있습니다.")

        content = _cell(row, mapping.content)
        if not content:
            raise RecordError("내용이 비어있습니다.")

        return DocumentRecord(
            title=title,
            content=content,
            category=normalize_category(_cell(row, mapping.category)),
            tags=split_tags(_cell(row, mapping.tags)),
        )
