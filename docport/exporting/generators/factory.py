from docport.config.settings import Settings
from docport.exporting.generators.base import BaseGenerator
from docport.exporting.generators.csv_generator import CsvGenerator
from docport.exporting.generators.json_generator import JsonGenerator
from docport.exporting.generators.letter_generator import LetterGenerator
from docport.exporting.generators.pdf_generator import PdfGenerator
from docport.exporting.models import ExportFormat


class GeneratorFactory:
    """Creates the generator for an export format with its size ceiling."""

    GENERATORS: dict[ExportFormat, type[BaseGenerator]] = {
        ExportFormat.JSON: JsonGenerator,
        ExportFormat.CSV: CsvGenerator,
        ExportFormat.PDF: PdfGenerator,
    }

    @classmethod
    def create(cls, fmt: ExportFormat, settings: Settings) -> BaseGenerator:
        generator_cls = cls.GENERATORS.get(fmt)
        if generator_cls is None:
            raise ValueError(
                f"Unknown export format '{fmt}'. Choose from: {list(cls.GENERATORS)}"
            )
        return generator_cls(cls.max_bytes(fmt, settings))

    @classmethod
    def create_letter(cls, settings: Settings) -> LetterGenerator:
        return LetterGenerator(settings.export_max_pdf_bytes)

    @staticmethod
    def max_bytes(fmt: ExportFormat, settings: Settings) -> int:
        return {
            ExportFormat.JSON: settings.export_max_json_bytes,
            ExportFormat.CSV: settings.export_max_csv_bytes,
            ExportFormat.PDF: settings.export_max_pdf_bytes,
        }[fmt]
