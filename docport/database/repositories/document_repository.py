from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row

from docport.database.connection import get_connection
from docport.database.exceptions import PersistenceError
from docport.documents.categories import normalize_category
from docport.documents.models import DocumentRecord, DocumentStatus

_COLUMNS = """
    id::text AS id, user_id, title, content, category, tags, status,
    created_at, updated_at, last_modified_at
"""


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except psycopg.Error as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc


class DocumentRepository:
    """Database operations for the documents table.

    Every write commits on its own; a batch import is never wrapped in a
    single transaction.
    """

    def find_by_owner_and_title(self, owner_id: str, title: str) -> DocumentRecord | None:
        """Return the owner's document with exactly this title, if any."""
        with _translate_errors("look up document by title"), get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE user_id = %s AND title = %s
                    ORDER BY created_at
                    LIMIT 1
                    """,
                    (owner_id, title.strip()),
                )
                row = cur.fetchone()

        return _to_record(row) if row is not None else None

    def find_by_ids_for_owner(
        self, owner_id: str, document_ids: list[str]
    ) -> list[DocumentRecord]:
        """Fetch the requested documents, silently dropping ids the owner does not have."""
        if not document_ids:
            return []
        with _translate_errors("fetch documents by id"), get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE user_id = %s AND id::text = ANY(%s)
                    ORDER BY updated_at DESC
                    """,
                    (owner_id, list(document_ids)),
                )
                rows = cur.fetchall()

        return [_to_record(row) for row in rows]

    def find_all_by_owner(self, owner_id: str) -> list[DocumentRecord]:
        with _translate_errors("fetch documents"), get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE user_id = %s
                    ORDER BY updated_at DESC
                    """,
                    (owner_id,),
                )
                rows = cur.fetchall()

        return [_to_record(row) for row in rows]

    def create(self, record: DocumentRecord, owner_id: str) -> DocumentRecord:
        """Insert a new document for the owner and return the stored row.

        Raises:
            PersistenceError: if the database rejects the write.
        """
        with _translate_errors("create document"), get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents
                    (user_id, title, content, excerpt, word_count, category, tags, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        owner_id,
                        record.title,
                        record.content,
                        record.excerpt,
                        record.word_count,
                        record.category.value,
                        list(record.tags),
                        record.status.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise PersistenceError("Insert returned no row")
        return _to_record(row)

    def update_imported_fields(
        self, document_id: str, owner_id: str, record: DocumentRecord
    ) -> DocumentRecord:
        """Overwrite body, category and tags of an existing document.

        The owner column is part of the filter and never part of the update.

        Raises:
            PersistenceError: if the document does not exist for this owner
                or the database rejects the write.
        """
        with _translate_errors("update document"), get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE documents
                    SET content = %s,
                        excerpt = %s,
                        word_count = %s,
                        category = %s,
                        tags = %s,
                        updated_at = NOW(),
                        last_modified_at = NOW()
                    WHERE id::text = %s AND user_id = %s
                    RETURNING {_COLUMNS}
                    """,
                    (
                        record.content,
                        record.excerpt,
                        record.word_count,
                        record.category.value,
                        list(record.tags),
                        document_id,
                        owner_id,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise PersistenceError(f"Document {document_id} not found")
        return _to_record(row)


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=str(row["id"]),
        owner_id=row["user_id"],
        title=row["title"],
        content=row["content"] or "",
        category=normalize_category(row["category"]),
        tags=list(row["tags"] or []),
        status=DocumentStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        last_modified_at=row["last_modified_at"],
    )
