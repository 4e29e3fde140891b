import codecs
from typing import Any

from docport.config.settings import Settings
from docport.exporting.models import (
    ExportFormat,
    ExportRequest,
    LetterDesign,
    LetterExportRequest,
    LetterOptions,
)
from docport.guard.exceptions import ValidationError
from docport.importing.models import ImportFormat, UploadedFile
from docport.importing.parsers.factory import detect_format

UNTITLED_DOCUMENT = "제목 없는 문서"
BINARY_SNIFF_BYTES = 4096


def _text_head(head: bytes) -> str:
    """Decode the start of an upload for sniffing; a cut multi-byte character is dropped."""
    if head.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return head[: len(head) - len(head) % 2].decode("utf-16", errors="ignore")
    return head.decode("utf-8", errors="ignore")


def _max_upload_bytes(fmt: ImportFormat, settings: Settings) -> int:
    return {
        ImportFormat.JSON: settings.import_max_json_bytes,
        ImportFormat.CSV: settings.import_max_csv_bytes,
        ImportFormat.TXT: settings.import_max_txt_bytes,
    }[fmt]


def validate_import_upload(upload: UploadedFile | None, settings: Settings) -> ImportFormat:
    """Check an uploaded file before parsing and return its format.

    Raises:
        ValidationError: if the file is missing, of an unsupported type,
            over its per-type size cap, or not a text file.
    """
    if upload is None:
        raise ValidationError('파일이 없습니다. "file" 필드에 파일을 업로드해주세요.')

    fmt = detect_format(upload.filename, upload.content_type)
    if fmt is None:
        raise ValidationError(
            "지원하지 않는 파일 형식입니다. JSON, CSV, TXT 파일만 업로드 가능합니다."
        )

    max_bytes = _max_upload_bytes(fmt, settings)
    if len(upload.data) > max_bytes:
        raise ValidationError(
            f"파일 크기가 너무 큽니다. {fmt.value.upper()} 파일의 최대 크기는 "
            f"{round(max_bytes / 1024 / 1024)}MB입니다."
        )

    head = upload.data[:BINARY_SNIFF_BYTES]
    if b"\x00" in head and not head.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        raise ValidationError("텍스트 파일이 아닙니다. 바이너리 파일은 지원하지 않습니다.")
    if fmt is ImportFormat.JSON:
        stripped = _text_head(head).lstrip("\ufeff \t\r\n")
        if stripped and not stripped.startswith(("{", "[")):
            raise ValidationError("올바른 JSON 형식이 아닙니다.")

    return fmt


def validate_export_payload(payload: Any, settings: Settings) -> ExportRequest:
    """Validate a decoded export request body.

    Raises:
        ValidationError: with the message shown to the caller.
    """
    if not isinstance(payload, dict):
        raise ValidationError("올바른 요청 형식이 아닙니다.")

    try:
        fmt = ExportFormat(payload.get("format"))
    except ValueError:
        raise ValidationError("지원하지 않는 형식입니다. (json, csv, pdf 중 선택)") from None

    document_ids = payload.get("documentIds")
    if document_ids is None:
        document_ids = []
    if not isinstance(document_ids, list) or len(document_ids) > settings.export_max_document_ids:
        raise ValidationError(
            "문서 ID 목록이 올바르지 않거나 너무 많습니다. "
            f"(최대 {settings.export_max_document_ids}개)"
        )
    if any(not isinstance(doc_id, str) for doc_id in document_ids):
        raise ValidationError("문서 ID는 문자열이어야 합니다.")

    include_content = payload.get("includeContent", True)
    if not isinstance(include_content, bool):
        raise ValidationError("includeContent 값은 true 또는 false여야 합니다.")

    return ExportRequest(format=fmt, document_ids=document_ids, include_content=include_content)


def validate_letter_payload(payload: Any, settings: Settings) -> LetterExportRequest:
    """Validate a decoded letter export request body.

    Raises:
        ValidationError: with the message shown to the caller.
    """
    if not isinstance(payload, dict):
        raise ValidationError("올바른 요청 형식이 아닙니다.")
    if payload.get("format") != "letter":
        raise ValidationError("올바르지 않은 내보내기 형식입니다.")

    options = payload.get("letterOptions")
    if not isinstance(options, dict) or not options.get("design"):
        raise ValidationError("편지 디자인을 선택해주세요.")
    try:
        design = LetterDesign(options["design"])
    except ValueError:
        raise ValidationError("편지 옵션이 올바르지 않습니다.") from None

    content = payload.get("content") or ""
    title = payload.get("title") or ""
    if not isinstance(content, str) or not isinstance(title, str):
        raise ValidationError("올바른 요청 형식이 아닙니다.")
    if not content and (not title or title == UNTITLED_DOCUMENT):
        raise ValidationError("내보낼 내용이 없습니다.")
    if len(content) > settings.import_max_content_length:
        raise ValidationError(
            f"내용이 너무 깁니다. (최대 {settings.import_max_content_length:,}자)"
        )

    def _optional(key: str) -> str | None:
        value = options.get(key)
        return value.strip() or None if isinstance(value, str) else None

    return LetterExportRequest(
        title=title or UNTITLED_DOCUMENT,
        content=content,
        options=LetterOptions(
            design=design,
            recipient=_optional("recipient"),
            sender=_optional("sender"),
            date=_optional("date"),
        ),
    )
