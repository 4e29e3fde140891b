from docport.documents.models import DocumentCategory

# Free-text labels found in user files and older exports.
_ALIASES: dict[str, DocumentCategory] = {
    "mail": DocumentCategory.EMAIL,
    "e-mail": DocumentCategory.EMAIL,
    "이메일": DocumentCategory.EMAIL,
    "메일": DocumentCategory.EMAIL,
    "편지": DocumentCategory.LETTER,
    "서신": DocumentCategory.LETTER,
    "창작": DocumentCategory.CREATIVE,
    "업무": DocumentCategory.BUSINESS,
    "비즈니스": DocumentCategory.BUSINESS,
    "개인": DocumentCategory.PERSONAL,
    "메모": DocumentCategory.PERSONAL,
    "일기": DocumentCategory.PERSONAL,
    "초안": DocumentCategory.DRAFT,
    "기타": DocumentCategory.OTHER,
}


def normalize_category(raw: str | DocumentCategory | None) -> DocumentCategory:
    """Map a user supplied category label onto the fixed enumeration.

    Unknown and empty labels fall back to OTHER.
    """
    if isinstance(raw, DocumentCategory):
        return raw
    if raw is None:
        return DocumentCategory.OTHER

    label = raw.strip().lower()
    if not label:
        return DocumentCategory.OTHER
    try:
        return DocumentCategory(label)
    except ValueError:
        return _ALIASES.get(label, DocumentCategory.OTHER)
