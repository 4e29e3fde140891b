import json
from datetime import datetime, timezone

from docport.documents.models import DocumentRecord
from docport.documents.serialization import document_to_payload
from docport.exporting.generators.base import BaseGenerator
from docport.exporting.models import GenerateOptions


class JsonGenerator(BaseGenerator):
    """Exports records as UTF-8 JSON that the JSON importer reads back."""

    format_label = "json"
    media_type = "application/json"
    extension = "json"
    size_multiplier = 1.2

    def _render(self, records: list[DocumentRecord], options: GenerateOptions) -> bytes:
        documents = [document_to_payload(r, options.include_metadata) for r in records]
        if options.include_metadata:
            exported_at = options.exported_at or datetime.now(timezone.utc)
            payload: object = {
                "metadata": {
                    "exportedAt": exported_at.isoformat(),
                    "format": "json",
                    "ownerId": options.owner_id,
                    "totalDocuments": len(records),
                },
                "documents": documents,
            }
        else:
            payload = documents
        return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")
