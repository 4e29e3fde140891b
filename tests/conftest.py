import itertools
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import pytest

from docport.config.settings import Settings
from docport.database.exceptions import PersistenceError
from docport.documents.models import DocumentRecord


class FakeDocumentRepository:
    """In-memory stand-in for DocumentRepository with the same method surface."""

    def __init__(self) -> None:
        self.documents: dict[str, DocumentRecord] = {}
        self.fail_titles: set[str] = set()
        self._ids = itertools.count(1)

    def seed(self, owner_id: str, record: DocumentRecord) -> DocumentRecord:
        return self.create(record, owner_id)

    def find_by_owner_and_title(self, owner_id: str, title: str) -> DocumentRecord | None:
        for doc in self.documents.values():
            if doc.owner_id == owner_id and doc.title == title.strip():
                return doc
        return None

    def find_by_ids_for_owner(self, owner_id: str, document_ids: list[str]) -> list[DocumentRecord]:
        return [
            doc
            for doc_id, doc in self.documents.items()
            if doc_id in document_ids and doc.owner_id == owner_id
        ]

    def find_all_by_owner(self, owner_id: str) -> list[DocumentRecord]:
        return [doc for doc in self.documents.values() if doc.owner_id == owner_id]

    def create(self, record: DocumentRecord, owner_id: str) -> DocumentRecord:
        if record.title in self.fail_titles:
            raise PersistenceError(f"Failed to create document: {record.title}")
        now = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
        stored = replace(
            record,
            id=f"doc-{next(self._ids)}",
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            last_modified_at=now,
        )
        self.documents[stored.id] = stored
        return stored

    def update_imported_fields(
        self, document_id: str, owner_id: str, record: DocumentRecord
    ) -> DocumentRecord:
        existing = self.documents.get(document_id)
        if existing is None or existing.owner_id != owner_id:
            raise PersistenceError(f"Document {document_id} not found")
        later = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)
        updated = replace(
            existing,
            content=record.content,
            category=record.category,
            tags=list(record.tags),
            updated_at=later,
            last_modified_at=later,
        )
        self.documents[document_id] = updated
        return updated


@pytest.fixture()
def fake_repo() -> FakeDocumentRepository:
    return FakeDocumentRepository()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        export_dir=tmp_path / "exports",
    )
