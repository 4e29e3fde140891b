import pytest

from docport.config.settings import Settings
from docport.exporting.models import ExportFormat, LetterDesign
from docport.guard.exceptions import ValidationError
from docport.guard.validators import (
    validate_export_payload,
    validate_import_upload,
    validate_letter_payload,
)
from docport.importing.models import ImportFormat, UploadedFile


class TestValidateImportUpload:
    def test_returns_detected_format(self, settings: Settings) -> None:
        upload = UploadedFile("docs.csv", "text/csv", b"title,content\na,b\n")

        assert validate_import_upload(upload, settings) is ImportFormat.CSV

    def test_rejects_missing_file(self, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="파일이 없습니다"):
            validate_import_upload(None, settings)

    def test_rejects_unsupported_type(self, settings: Settings) -> None:
        upload = UploadedFile("report.docx", "application/msword", b"PK")

        with pytest.raises(ValidationError, match="JSON, CSV, TXT 파일만"):
            validate_import_upload(upload, settings)

    def test_rejects_file_over_type_cap(self) -> None:
        settings = Settings(import_max_txt_bytes=10)
        upload = UploadedFile("notes.txt", "text/plain", b"x" * 11)

        with pytest.raises(ValidationError, match="TXT 파일의 최대 크기"):
            validate_import_upload(upload, settings)

    def test_rejects_binary_content(self, settings: Settings) -> None:
        upload = UploadedFile("notes.txt", "text/plain", b"MZ\x00\x00binary")

        with pytest.raises(ValidationError, match="바이너리 파일은 지원하지 않습니다"):
            validate_import_upload(upload, settings)

    def test_accepts_utf16_text(self, settings: Settings) -> None:
        upload = UploadedFile("notes.txt", "text/plain", "안녕".encode("utf-16"))

        assert validate_import_upload(upload, settings) is ImportFormat.TXT

    def test_rejects_json_that_is_not_an_object_or_array(self, settings: Settings) -> None:
        upload = UploadedFile("data.json", "application/json", b"<html></html>")

        with pytest.raises(ValidationError, match="JSON"):
            validate_import_upload(upload, settings)

    @pytest.mark.parametrize("encoding", ["utf-16", "utf-16-be", "utf-8-sig"])
    def test_accepts_json_with_byte_order_mark(self, settings: Settings, encoding: str) -> None:
        bom = "\ufeff" if encoding == "utf-16-be" else ""
        data = (bom + ' [{"title": "a", "content": "b"}]').encode(encoding)
        upload = UploadedFile("d.json", "application/json", data)

        assert validate_import_upload(upload, settings) is ImportFormat.JSON


class TestValidateExportPayload:
    def test_builds_request_with_defaults(self, settings: Settings) -> None:
        request = validate_export_payload({"format": "pdf"}, settings)

        assert request.format is ExportFormat.PDF
        assert request.document_ids == []
        assert request.include_content is True

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            (None, "올바른 요청 형식이 아닙니다."),
            ([], "올바른 요청 형식이 아닙니다."),
            ({"format": "xml"}, "지원하지 않는 형식입니다."),
            ({"format": "json", "documentIds": "abc"}, "문서 ID 목록이 올바르지 않거나"),
            ({"format": "json", "documentIds": [str(i) for i in range(101)]}, "최대 100개"),
            ({"format": "json", "documentIds": [1, 2]}, "문서 ID는 문자열이어야 합니다."),
            ({"format": "csv", "includeContent": "yes"}, "includeContent"),
        ],
    )
    def test_rejects_invalid_payloads(
        self, settings: Settings, payload: object, message: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_export_payload(payload, settings)

        assert message in str(exc_info.value)

    def test_accepts_hundred_ids(self, settings: Settings) -> None:
        ids = [f"doc-{i}" for i in range(100)]

        assert validate_export_payload({"format": "json", "documentIds": ids}, settings).document_ids == ids


class TestValidateLetterPayload:
    def _payload(self, **overrides: object) -> dict:
        payload: dict = {
            "format": "letter",
            "title": "감사 편지",
            "content": "도와주셔서 감사합니다.",
            "letterOptions": {"design": "thankyou", "recipient": " 김선생 ", "sender": ""},
        }
        payload.update(overrides)
        return payload

    def test_builds_letter_request(self, settings: Settings) -> None:
        request = validate_letter_payload(self._payload(), settings)

        assert request.options.design is LetterDesign.THANKYOU
        assert request.options.recipient == "김선생"
        assert request.options.sender is None
        assert request.title == "감사 편지"

    def test_requires_letter_format(self, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="올바르지 않은 내보내기 형식입니다."):
            validate_letter_payload(self._payload(format="pdf"), settings)

    def test_requires_design(self, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="편지 디자인을 선택해주세요."):
            validate_letter_payload(self._payload(letterOptions={}), settings)

    def test_rejects_unknown_design(self, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="편지 옵션이 올바르지 않습니다."):
            validate_letter_payload(self._payload(letterOptions={"design": "poster"}), settings)

    def test_requires_something_to_export(self, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="내보낼 내용이 없습니다."):
            validate_letter_payload(self._payload(content="", title="제목 없는 문서"), settings)

    def test_title_alone_is_enough(self, settings: Settings) -> None:
        request = validate_letter_payload(self._payload(content=""), settings)

        assert request.content == ""

    def test_rejects_oversized_content(self, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="내용이 너무 깁니다"):
            validate_letter_payload(self._payload(content="가" * 50_001), settings)
