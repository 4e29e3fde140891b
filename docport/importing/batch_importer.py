from dataclasses import replace

from docport.database.exceptions import PersistenceError
from docport.database.repositories.document_repository import DocumentRepository
from docport.documents.models import (
    BatchImportResult,
    DocumentRecord,
    DocumentStatus,
    ImportOutcome,
    OutcomeKind,
)
from docport.documents.text import html_to_plain_text, sanitize_content
from docport.importing.models import ImportOptions
from docport.importing.validation import (
    DEFAULT_MAX_CONTENT_LENGTH,
    DEFAULT_MAX_TITLE_LENGTH,
    validate_document_data,
)
from docport.logging.logger import Log

DUPLICATE_REASON = "duplicate"
SAVE_FAILED_MESSAGE = "문서 저장 중 오류가 발생했습니다."


class BatchImporter:
    """Persists parsed candidates one by one.

    Each record gets exactly one outcome; a failing record never aborts
    the rest of the batch and nothing already written is rolled back.
    """

    def __init__(
        self,
        repo: DocumentRepository,
        max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
        max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH,
    ) -> None:
        self._repo = repo
        self._max_title_length = max_title_length
        self._max_content_length = max_content_length

    def import_batch(
        self,
        records: list[DocumentRecord],
        owner_id: str,
        options: ImportOptions,
    ) -> BatchImportResult:
        result = BatchImportResult()
        for candidate in records:
            result.outcomes.append(self._import_one(candidate, owner_id, options))

        Log.info(
            f"Batch for user {owner_id}: {len(result.successful)} stored, "
            f"{len(result.skipped)} skipped, {len(result.failed)} failed"
        )
        return result

    def _import_one(
        self,
        candidate: DocumentRecord,
        owner_id: str,
        options: ImportOptions,
    ) -> ImportOutcome:
        error = validate_document_data(
            candidate, self._max_title_length, self._max_content_length
        )
        if error is not None:
            return ImportOutcome(OutcomeKind.FAILED, candidate, reason=error)

        clean = self._sanitize(candidate)
        error = validate_document_data(clean, self._max_title_length, self._max_content_length)
        if error is not None:
            return ImportOutcome(OutcomeKind.FAILED, candidate, reason=error)

        try:
            existing = self._repo.find_by_owner_and_title(owner_id, clean.title)
            if existing is not None and options.update_existing:
                stored = self._repo.update_imported_fields(existing.id, owner_id, clean)
                return ImportOutcome(OutcomeKind.UPDATED, candidate, record=stored)
            if existing is not None and options.skip_duplicates:
                return ImportOutcome(
                    OutcomeKind.SKIPPED, candidate, record=existing, reason=DUPLICATE_REASON
                )
            stored = self._repo.create(clean, owner_id)
            return ImportOutcome(OutcomeKind.CREATED, candidate, record=stored)
        except PersistenceError as exc:
            Log.error(f"Failed to store document '{clean.title}' for user {owner_id}: {exc}")
            return ImportOutcome(OutcomeKind.FAILED, candidate, reason=SAVE_FAILED_MESSAGE)
        except Exception:
            Log.exception(f"Unexpected error storing document '{clean.title}' for user {owner_id}")
            return ImportOutcome(OutcomeKind.FAILED, candidate, reason=SAVE_FAILED_MESSAGE)

    @staticmethod
    def _sanitize(candidate: DocumentRecord) -> DocumentRecord:
        return replace(
            candidate,
            title=html_to_plain_text(candidate.title).strip(),
            content=sanitize_content(candidate.content),
            status=DocumentStatus.DRAFT,
            id=None,
            owner_id=None,
        )
