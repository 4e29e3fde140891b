from datetime import datetime
from typing import Any

from docport.documents.models import DocumentRecord


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def document_to_payload(record: DocumentRecord, include_metadata: bool = True) -> dict[str, Any]:
    """Serialize a record to the camelCase shape used by exports and API responses."""
    payload: dict[str, Any] = {
        "id": record.id,
        "title": record.title,
        "content": record.content,
        "category": record.category.value,
        "tags": list(record.tags),
    }
    if include_metadata:
        payload.update(
            {
                "status": record.status.value,
                "excerpt": record.excerpt,
                "wordCount": record.word_count,
                "createdAt": _isoformat(record.created_at),
                "updatedAt": _isoformat(record.updated_at),
                "lastModifiedAt": _isoformat(record.last_modified_at),
            }
        )
    return payload
