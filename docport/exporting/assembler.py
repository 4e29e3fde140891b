from docport.database.repositories.document_repository import DocumentRepository
from docport.documents.models import DocumentRecord
from docport.exporting.exceptions import NotFoundError

REQUESTED_NOT_FOUND_MESSAGE = "요청한 문서를 찾을 수 없습니다."
NOTHING_TO_EXPORT_MESSAGE = "내보낼 문서가 없습니다."


class ExportAssembler:
    """Resolves the documents an export request may see."""

    def __init__(self, repo: DocumentRepository) -> None:
        self._repo = repo

    def assemble(
        self,
        owner_id: str,
        document_ids: list[str] | None,
        include_content: bool = True,
    ) -> list[DocumentRecord]:
        """Return the caller's documents, optionally without their bodies.

        An empty or missing id list selects every document of the owner.
        Ids that do not exist or belong to someone else are dropped silently.

        Raises:
            NotFoundError: if nothing is left to export.
        """
        if document_ids:
            records = self._repo.find_by_ids_for_owner(owner_id, document_ids)
        else:
            records = self._repo.find_all_by_owner(owner_id)

        if not records:
            raise NotFoundError(
                REQUESTED_NOT_FOUND_MESSAGE if document_ids else NOTHING_TO_EXPORT_MESSAGE
            )

        if include_content:
            return records

        return [record.without_content() for record in records]
