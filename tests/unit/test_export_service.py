import json
import re
from unittest.mock import patch

import pytest

from docport.config.settings import Settings
from docport.documents.models import DocumentRecord
from docport.exporting.assembler import ExportAssembler
from docport.exporting.exceptions import NotFoundError, PayloadTooLargeError
from docport.exporting.models import (
    ExportFormat,
    ExportRequest,
    LetterDesign,
    LetterExportRequest,
    LetterOptions,
)
from docport.exporting.service import ExportService
from docport.exporting.storage import ExportStorage


def _make_service(fake_repo, settings: Settings) -> tuple[ExportService, ExportStorage]:
    storage = ExportStorage(
        settings.export_dir, settings.export_url_prefix, settings.export_file_ttl_seconds
    )
    return ExportService(ExportAssembler(fake_repo), storage, settings), storage


def _stored_name(url: str) -> str:
    return url.rsplit("/", 1)[1]


class TestExport:
    def test_exports_json_with_metadata(self, fake_repo, settings: Settings) -> None:
        fake_repo.seed("user-1", DocumentRecord(title="첫 글", content="내용 하나"))
        fake_repo.seed("user-1", DocumentRecord(title="둘째 글", content="내용 둘"))
        service, storage = _make_service(fake_repo, settings)

        response = service.export("user-1", ExportRequest(format=ExportFormat.JSON))

        assert response.count == 2
        assert response.download_url.startswith("/exports/temp/user-1_")
        assert re.fullmatch(r"user-1_\d+_[0-9a-f]{8}_documents\.json", _stored_name(response.download_url))
        path = storage.resolve(_stored_name(response.download_url))
        payload = json.loads(path.read_bytes())
        assert payload["metadata"]["totalDocuments"] == 2
        assert payload["metadata"]["ownerId"] == "user-1"
        assert response.file_size == path.stat().st_size

    def test_response_dict_shape(self, fake_repo, settings: Settings) -> None:
        fake_repo.seed("user-1", DocumentRecord(title="글", content="내용"))
        service, _ = _make_service(fake_repo, settings)

        body = service.export("user-1", ExportRequest(format=ExportFormat.CSV)).to_dict()

        assert body["success"] is True
        assert body["metadata"]["format"] == "csv"
        assert body["metadata"]["count"] == 1
        assert set(body["metadata"]) == {"count", "format", "fileSize", "timestamp"}

    def test_excludes_content_on_request(self, fake_repo, settings: Settings) -> None:
        doc = fake_repo.seed("user-1", DocumentRecord(title="글", content="비공개 본문"))
        service, storage = _make_service(fake_repo, settings)

        response = service.export(
            "user-1",
            ExportRequest(format=ExportFormat.JSON, document_ids=[doc.id], include_content=False),
        )

        payload = json.loads(storage.resolve(_stored_name(response.download_url)).read_bytes())
        assert payload["documents"][0]["content"] == ""
        assert payload["documents"][0]["excerpt"] == "비공개 본문"

    def test_foreign_ids_raise_not_found(self, fake_repo, settings: Settings) -> None:
        doc = fake_repo.seed("user-2", DocumentRecord(title="남의 글", content="내용"))
        service, _ = _make_service(fake_repo, settings)

        with pytest.raises(NotFoundError):
            service.export("user-1", ExportRequest(format=ExportFormat.PDF, document_ids=[doc.id]))

    def test_oversized_export_stores_nothing(self, fake_repo, settings: Settings) -> None:
        fake_repo.seed("user-1", DocumentRecord(title="글", content="내용"))
        small = settings.model_copy(update={"export_max_csv_bytes": 10})
        service, _ = _make_service(fake_repo, small)

        with pytest.raises(PayloadTooLargeError):
            service.export("user-1", ExportRequest(format=ExportFormat.CSV))

        assert not settings.export_dir.exists() or list(settings.export_dir.iterdir()) == []

    def test_cleans_expired_files_first(self, fake_repo, settings: Settings) -> None:
        fake_repo.seed("user-1", DocumentRecord(title="글", content="내용"))
        service, storage = _make_service(fake_repo, settings)

        with patch.object(storage, "cleanup_expired", return_value=0) as cleanup:
            service.export("user-1", ExportRequest(format=ExportFormat.JSON))

        cleanup.assert_called_once_with()


class TestExportLetter:
    def test_renders_letter_pdf(self, fake_repo, settings: Settings) -> None:
        service, storage = _make_service(fake_repo, settings)
        request = LetterExportRequest(
            title="감사 편지",
            content="도와주셔서 감사합니다.",
            options=LetterOptions(design=LetterDesign.THANKYOU, recipient="김선생"),
        )

        response = service.export_letter("user-1", request)

        assert re.fullmatch(r"감사편지_\d{8}\.pdf", response.filename)
        assert _stored_name(response.download_url).endswith("_letter.pdf")
        path = storage.resolve(_stored_name(response.download_url))
        assert path.read_bytes().startswith(b"%PDF")
        assert response.to_dict()["metadata"]["design"] == "thankyou"
        assert fake_repo.documents == {}
