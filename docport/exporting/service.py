import time
import uuid
from datetime import datetime, timezone

from docport.config.settings import Settings
from docport.documents.models import DocumentCategory, DocumentRecord
from docport.exporting.assembler import ExportAssembler
from docport.exporting.generators.factory import GeneratorFactory
from docport.exporting.models import (
    ExportJob,
    ExportRequest,
    ExportResponse,
    GenerateOptions,
    LetterExportRequest,
    LetterExportResponse,
)
from docport.exporting.storage import ExportStorage, safe_filename_part
from docport.logging.logger import Log


class ExportService:
    """Runs an export: assemble -> generate -> store."""

    def __init__(
        self,
        assembler: ExportAssembler,
        storage: ExportStorage,
        settings: Settings,
    ) -> None:
        self._assembler = assembler
        self._storage = storage
        self._settings = settings

    def export(self, owner_id: str, request: ExportRequest) -> ExportResponse:
        """Export the caller's documents in the requested format.

        Raises:
            NotFoundError: if no requested document belongs to the caller.
            PayloadTooLargeError: if the output would exceed the format ceiling.
            PersistenceError: if the documents cannot be read.
        """
        started = time.monotonic()
        self._storage.cleanup_expired()

        records = self._assembler.assemble(
            owner_id, request.document_ids, request.include_content
        )
        now = datetime.now(timezone.utc)
        generator = GeneratorFactory.create(request.format, self._settings)
        generated = generator.generate(
            records, GenerateOptions(owner_id=owner_id, include_metadata=True, exported_at=now)
        )

        filename = (
            f"{safe_filename_part(owner_id)}_{int(now.timestamp() * 1000)}_"
            f"{uuid.uuid4().hex[:8]}_documents.{generated.extension}"
        )
        job = ExportJob(
            owner_id=owner_id,
            format=request.format.value,
            records=records,
            content=generated.content,
            filename=filename,
            download_url=self._storage.save(filename, generated.content),
        )

        elapsed_ms = int((time.monotonic() - started) * 1000)
        Log.info(
            f"[Export Success] User: {owner_id}, Format: {job.format}, "
            f"Documents: {len(job.records)}, Size: {job.byte_size} bytes, Time: {elapsed_ms}ms"
        )
        return ExportResponse(
            download_url=job.download_url,
            count=len(job.records),
            format=request.format,
            file_size=job.byte_size,
            timestamp=now,
        )

    def export_letter(self, owner_id: str, request: LetterExportRequest) -> LetterExportResponse:
        """Render the editor's current content as a designed letter PDF.

        Raises:
            PayloadTooLargeError: if the PDF would exceed the PDF ceiling.
        """
        started = time.monotonic()
        self._storage.cleanup_expired()

        now = datetime.now(timezone.utc)
        record = DocumentRecord(
            title=request.title,
            content=request.content,
            category=DocumentCategory.LETTER,
            owner_id=owner_id,
        )
        generated = GeneratorFactory.create_letter(self._settings).generate(
            [record],
            GenerateOptions(
                owner_id=owner_id,
                include_metadata=False,
                exported_at=now,
                letter=request.options,
            ),
        )

        design = request.options.design
        filename = f"{design.label}_{now:%Y%m%d}.pdf"
        stored_name = (
            f"{safe_filename_part(owner_id)}_{int(now.timestamp() * 1000)}_"
            f"{uuid.uuid4().hex[:8]}_letter.pdf"
        )
        download_url = self._storage.save(stored_name, generated.content)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        Log.info(
            f"[Letter Export Success] User: {owner_id}, Design: {design.value}, "
            f"Size: {generated.byte_size} bytes, Time: {elapsed_ms}ms"
        )
        return LetterExportResponse(
            download_url=download_url,
            filename=filename,
            file_size=generated.byte_size,
            timestamp=now,
            design=design,
        )
