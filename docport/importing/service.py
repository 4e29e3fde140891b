import time
from dataclasses import replace

from docport.config.settings import Settings
from docport.documents.models import DocumentRecord
from docport.guard.validators import validate_import_upload
from docport.importing.batch_importer import BatchImporter
from docport.importing.exceptions import NothingToImportError
from docport.importing.models import ImportOptions, ImportResponse, ParseLimits, UploadedFile
from docport.importing.parsers.factory import ParserFactory
from docport.logging.logger import Log

NOTHING_PARSED_MESSAGE = "파일 파싱에 실패했거나 유효한 문서가 없습니다."


def apply_overrides(records: list[DocumentRecord], options: ImportOptions) -> list[DocumentRecord]:
    """Replace per-record category and tags with request-level values when given."""
    if options.category is None and options.tags is None:
        return records
    return [
        replace(
            record,
            category=options.category if options.category is not None else record.category,
            tags=list(options.tags) if options.tags is not None else record.tags,
        )
        for record in records
    ]


class ImportService:
    """Runs an import: validate upload -> parse -> persist batch."""

    def __init__(self, importer: BatchImporter, settings: Settings) -> None:
        self._importer = importer
        self._settings = settings

    def import_file(
        self,
        owner_id: str,
        upload: UploadedFile | None,
        options: ImportOptions,
    ) -> ImportResponse:
        """Import every document found in the uploaded file.

        Raises:
            ValidationError: if the upload is missing, unsupported or too large.
            ParseError: if the file cannot be read as its format.
            NothingToImportError: if parsing produced no candidate records.
        """
        started = time.monotonic()
        fmt = validate_import_upload(upload, self._settings)

        parser = ParserFactory.create(fmt)
        parsed = parser.parse(
            upload.data,
            ParseLimits(max_documents=self._settings.import_max_documents),
            upload.filename,
        )
        if not parsed.records:
            raise NothingToImportError(parsed.errors or [NOTHING_PARSED_MESSAGE])

        records = apply_overrides(parsed.records, options)
        batch = self._importer.import_batch(records, owner_id, options)

        errors = list(parsed.errors)
        errors += [f'"{o.candidate.title}": {o.reason}' for o in batch.failed]
        response = ImportResponse(
            success=len(batch.successful) > 0,
            imported=len(batch.successful),
            skipped=len(batch.skipped),
            errors=errors,
            documents=batch.successful,
        )

        elapsed_ms = int((time.monotonic() - started) * 1000)
        Log.info(
            f"[Import Success] User: {owner_id}, File: {upload.filename}, "
            f"Imported: {response.imported}, Skipped: {response.skipped}, Time: {elapsed_ms}ms"
        )
        return response
