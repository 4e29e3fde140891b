import json
from typing import Any

from docport.documents.categories import normalize_category
from docport.documents.models import DocumentRecord
from docport.importing.exceptions import ParseError, RecordError
from docport.importing.models import ImportFormat, ParseLimits, ParseResult
from docport.importing.parsers.base import BaseParser

_TITLE_KEYS = ("title", "name", "subject")
_CONTENT_KEYS = ("content", "body", "text", "description")
_CATEGORY_KEYS = ("category", "type", "group")


def _first_string(doc: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = doc.get(key)
        if isinstance(value, str):
            return value.strip()
    return None


def _string_items(values: list[Any]) -> list[str]:
    return [v.strip() for v in values if isinstance(v, str) and v.strip()]


def _looks_like_document(item: Any) -> bool:
    return isinstance(item, dict) and bool(item.get("title") or item.get("content"))


def extract_documents(payload: Any) -> list[Any]:
    """Locate the list of document objects inside a decoded JSON payload.

    Accepts an array, ``{"documents": [...]}`` (our own export format),
    ``{"data": [...]}``, a single document object, or an object holding one
    array of document-like objects. Returns an empty list for anything else.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    for key in ("documents", "data"):
        if isinstance(payload.get(key), list):
            return payload[key]

    if _looks_like_document(payload):
        return [payload]

    for value in payload.values():
        if isinstance(value, list) and value and _looks_like_document(value[0]):
            return value
    return []


class JsonParser(BaseParser):
    """Parses JSON uploads: single object, array, or wrapped document list."""

    format = ImportFormat.JSON

    def _parse_text(
        self,
        text: str,
        limits: ParseLimits,
        filename: str | None,
    ) -> ParseResult:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError("올바른 JSON 형식이 아닙니다.") from exc

        result = ParseResult()
        items = extract_documents(payload)
        if not items:
            result.errors.append("유효한 문서가 없습니다.")
            return result

        for index, item in enumerate(items):
            if result.is_full(limits):
                result.note_truncated(limits)
                break
            try:
                result.records.append(self._build_record(item))
            except RecordError as exc:
                result.errors.append(f"문서 {index + 1}: {exc}")

        return result

    @staticmethod
    def _build_record(item: Any) -> DocumentRecord:
        if not isinstance(item, dict):
            raise RecordError("문서는 객체여야 합니다.")

        title = _first_string(item, _TITLE_KEYS)
        if not title:
            raise RecordError("제목이 필요합니다.")

        content = _first_string(item, _CONTENT_KEYS)
        if not content:
            raise RecordError("내용이 필요합니다.")

        raw_tags = item.get("tags")
        if isinstance(raw_tags, list):
            tags = _string_items(raw_tags)
        elif isinstance(raw_tags, str):
            tags = [tag.strip() for tag in raw_tags.split(",") if tag.strip()]
        elif isinstance(item.get("keywords"), list):
            tags = _string_items(item["keywords"])
        else:
            tags = []

        return DocumentRecord(
            title=title,
            content=content,
            category=normalize_category(_first_string(item, _CATEGORY_KEYS)),
            tags=tags,
        )
