from unittest.mock import MagicMock

from docport.database.exceptions import PersistenceError
from docport.documents.models import DocumentCategory, DocumentRecord, OutcomeKind
from docport.importing.batch_importer import BatchImporter
from docport.importing.models import ImportOptions
from docport.importing.validation import validate_document_data


def _make_record(title: str, content: str = "본문 내용입니다.", **kwargs: object) -> DocumentRecord:
    return DocumentRecord(title=title, content=content, **kwargs)  # type: ignore[arg-type]


class TestValidateDocumentData:
    def test_accepts_valid_record(self) -> None:
        assert validate_document_data(_make_record("제목")) is None

    def test_requires_title_and_content(self) -> None:
        assert validate_document_data(_make_record("  ")) == "문서 제목이 필요합니다."
        assert validate_document_data(_make_record("제목", " ")) == "문서 내용이 필요합니다."

    def test_enforces_length_limits(self) -> None:
        assert validate_document_data(_make_record("가" * 256)) == "제목이 너무 깁니다. (최대 255자)"
        assert (
            validate_document_data(_make_record("제목", "a" * 50_001))
            == "내용이 너무 깁니다. (최대 50,000자)"
        )

    def test_content_at_limit_is_accepted(self) -> None:
        assert validate_document_data(_make_record("제목", "a" * 50_000)) is None


class TestImportBatch:
    def test_creates_all_new_records(self, fake_repo) -> None:
        importer = BatchImporter(fake_repo)

        result = importer.import_batch(
            [_make_record("하나"), _make_record("둘")], "user-1", ImportOptions()
        )

        assert [o.kind for o in result.outcomes] == [OutcomeKind.CREATED, OutcomeKind.CREATED]
        assert {r.owner_id for r in result.successful} == {"user-1"}
        assert len(fake_repo.documents) == 2

    def test_one_invalid_record_does_not_affect_others(self, fake_repo) -> None:
        records = [_make_record("하나"), _make_record(""), _make_record("셋")]

        result = BatchImporter(fake_repo).import_batch(records, "user-1", ImportOptions())

        assert len(result.successful) == 2
        assert len(result.failed) == 1
        assert result.failed[0].reason == "문서 제목이 필요합니다."
        assert result.total_processed == 3

    def test_skips_duplicates_on_second_import(self, fake_repo) -> None:
        importer = BatchImporter(fake_repo)
        records = [_make_record("하나"), _make_record("둘")]

        first = importer.import_batch(records, "user-1", ImportOptions())
        second = importer.import_batch(records, "user-1", ImportOptions())

        assert len(first.successful) == 2
        assert len(second.successful) == 0
        assert [o.reason for o in second.skipped] == ["duplicate", "duplicate"]
        assert len(fake_repo.documents) == 2

    def test_duplicates_within_one_batch_are_skipped(self, fake_repo) -> None:
        records = [_make_record("같은 제목"), _make_record("같은 제목", "다른 내용")]

        result = BatchImporter(fake_repo).import_batch(records, "user-1", ImportOptions())

        assert [o.kind for o in result.outcomes] == [OutcomeKind.CREATED, OutcomeKind.SKIPPED]

    def test_same_title_of_another_owner_is_not_a_duplicate(self, fake_repo) -> None:
        fake_repo.seed("user-2", _make_record("공유 제목"))

        result = BatchImporter(fake_repo).import_batch(
            [_make_record("공유 제목")], "user-1", ImportOptions()
        )

        assert result.outcomes[0].kind is OutcomeKind.CREATED

    def test_update_existing_wins_over_skip(self, fake_repo) -> None:
        existing = fake_repo.seed("user-1", _make_record("보고서", "예전 내용"))
        candidate = _make_record(
            "보고서", "새로운 내용입니다", category=DocumentCategory.BUSINESS, tags=["주간"]
        )

        result = BatchImporter(fake_repo).import_batch(
            [candidate], "user-1", ImportOptions(skip_duplicates=True, update_existing=True)
        )

        outcome = result.outcomes[0]
        assert outcome.kind is OutcomeKind.UPDATED
        assert outcome.record is not None
        assert outcome.record.id == existing.id
        assert outcome.record.owner_id == "user-1"
        assert outcome.record.content == "새로운 내용입니다"
        assert outcome.record.word_count == 2
        assert outcome.record.category is DocumentCategory.BUSINESS
        assert outcome.record.tags == ["주간"]
        assert len(fake_repo.documents) == 1

    def test_creates_duplicate_when_skipping_disabled(self, fake_repo) -> None:
        fake_repo.seed("user-1", _make_record("보고서"))

        result = BatchImporter(fake_repo).import_batch(
            [_make_record("보고서")], "user-1", ImportOptions(skip_duplicates=False)
        )

        assert result.outcomes[0].kind is OutcomeKind.CREATED
        assert len(fake_repo.documents) == 2

    def test_persistence_error_becomes_failed_outcome(self, fake_repo) -> None:
        fake_repo.fail_titles.add("실패")

        result = BatchImporter(fake_repo).import_batch(
            [_make_record("성공"), _make_record("실패")], "user-1", ImportOptions()
        )

        assert len(result.successful) == 1
        assert result.failed[0].reason == "문서 저장 중 오류가 발생했습니다."

    def test_unexpected_error_becomes_failed_outcome(self) -> None:
        repo = MagicMock()
        repo.find_by_owner_and_title.side_effect = RuntimeError("boom")

        result = BatchImporter(repo).import_batch([_make_record("하나")], "user-1", ImportOptions())

        assert result.outcomes[0].kind is OutcomeKind.FAILED

    def test_sanitizes_before_storing(self, fake_repo) -> None:
        record = _make_record("<b>굵은</b> 제목", "<p onclick='x'>안전</p><script>bad()</script>")

        result = BatchImporter(fake_repo).import_batch([record], "user-1", ImportOptions())

        stored = result.successful[0]
        assert stored.title == "굵은 제목"
        assert stored.content == "<p>안전</p>"

    def test_markup_only_title_fails(self, fake_repo) -> None:
        result = BatchImporter(fake_repo).import_batch(
            [_make_record("<i></i>")], "user-1", ImportOptions()
        )

        assert result.failed[0].reason == "문서 제목이 필요합니다."

    def test_persistence_error_is_not_raised(self) -> None:
        repo = MagicMock()
        repo.find_by_owner_and_title.return_value = None
        repo.create.side_effect = PersistenceError("disk full")

        result = BatchImporter(repo).import_batch([_make_record("하나")], "user-1", ImportOptions())

        assert result.failed[0].candidate.title == "하나"
