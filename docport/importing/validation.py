from docport.documents.models import DocumentRecord

DEFAULT_MAX_TITLE_LENGTH = 255
DEFAULT_MAX_CONTENT_LENGTH = 50_000


def validate_document_data(
    record: DocumentRecord,
    max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH,
) -> str | None:
    """Return the first problem with a candidate record, or None if it can be stored."""
    title = record.title.strip()
    if not title:
        return "문서 제목이 필요합니다."
    if len(title) > max_title_length:
        return f"제목이 너무 깁니다. (최대 {max_title_length}자)"

    if not record.content.strip():
        return "문서 내용이 필요합니다."
    if len(record.content) > max_content_length:
        return f"내용이 너무 깁니다. (최대 {max_content_length:,}자)"

    return None
