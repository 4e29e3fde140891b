import csv
import io

from docport.documents.models import DocumentRecord
from docport.exporting.generators.base import BaseGenerator
from docport.exporting.models import GenerateOptions

BASE_COLUMNS = ["id", "title", "content", "category", "tags"]
METADATA_COLUMNS = ["status", "createdAt", "updatedAt"]


def _iso(value) -> str:
    return value.isoformat() if value is not None else ""


class CsvGenerator(BaseGenerator):
    """Exports one row per record; the header matches the CSV importer's aliases."""

    format_label = "csv"
    media_type = "text/csv"
    extension = "csv"
    size_multiplier = 0.8

    def _render(self, records: list[DocumentRecord], options: GenerateOptions) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        header = BASE_COLUMNS + (METADATA_COLUMNS if options.include_metadata else [])
        writer.writerow(header)

        for record in records:
            row = [
                record.id or "",
                record.title,
                record.content,
                record.category.value,
                ", ".join(record.tags),
            ]
            if options.include_metadata:
                row += [record.status.value, _iso(record.created_at), _iso(record.updated_at)]
            writer.writerow(row)

        # BOM so spreadsheet applications detect UTF-8 Korean text.
        return buffer.getvalue().encode("utf-8-sig")
