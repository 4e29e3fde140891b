import io
from datetime import datetime, timezone
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import HRFlowable, KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from docport.documents.models import DocumentRecord
from docport.documents.text import content_to_paragraphs
from docport.exporting.generators.base import BaseGenerator
from docport.exporting.generators.fonts import LATIN_FONT, register_korean_fonts
from docport.exporting.models import GenerateOptions

MUTED = colors.HexColor("#718096")
ACCENT = colors.HexColor("#3182ce")
TEXT = colors.HexColor("#2d3748")


def format_korean_date(value: datetime) -> str:
    return f"{value.year}년 {value.month:02d}월 {value.day:02d}일"


def draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont(LATIN_FONT, 9)
    canvas.setFillColor(MUTED)
    canvas.drawCentredString(A4[0] / 2, 12 * mm, f"- {doc.page} -")
    canvas.restoreState()


class PdfGenerator(BaseGenerator):
    """Exports records as an A4 PDF, one titled section per document."""

    format_label = "pdf"
    media_type = "application/pdf"
    extension = "pdf"
    size_multiplier = 3.0

    def _render(self, records: list[DocumentRecord], options: GenerateOptions) -> bytes:
        _, sans = register_korean_fonts()
        styles = {
            "heading": ParagraphStyle(
                "heading", fontName=sans, fontSize=20, leading=26,
                alignment=TA_CENTER, textColor=ACCENT,
            ),
            "summary": ParagraphStyle(
                "summary", fontName=sans, fontSize=10, leading=14,
                alignment=TA_CENTER, textColor=MUTED,
            ),
            "title": ParagraphStyle(
                "title", fontName=sans, fontSize=14, leading=20,
                textColor=TEXT, spaceBefore=6, spaceAfter=6,
            ),
            "body": ParagraphStyle(
                "body", fontName=sans, fontSize=10.5, leading=17,
                textColor=TEXT, spaceAfter=6, wordWrap="CJK",
            ),
            "meta": ParagraphStyle(
                "meta", fontName=sans, fontSize=8.5, leading=12, textColor=MUTED,
            ),
        }

        exported_at = options.exported_at or datetime.now(timezone.utc)
        story: list = [
            Paragraph("문서 내보내기", styles["heading"]),
            Spacer(1, 4 * mm),
            Paragraph(
                f"내보낸 날짜: {format_korean_date(exported_at)} · 문서 수: {len(records)}개",
                styles["summary"],
            ),
            Spacer(1, 4 * mm),
            HRFlowable(width="100%", thickness=1.5, color=ACCENT),
            Spacer(1, 6 * mm),
        ]

        for number, record in enumerate(records, start=1):
            story.append(
                KeepTogether(
                    [Paragraph(f"{number}. {escape(record.title)}", styles["title"])]
                    + self._metadata(record, options, styles["meta"])
                )
            )
            for paragraph in content_to_paragraphs(record.content):
                story.append(Paragraph(escape(paragraph).replace("\n", "<br/>"), styles["body"]))
            story += [
                Spacer(1, 4 * mm),
                HRFlowable(width="100%", thickness=0.5, color=colors.HexColor("#e2e8f0")),
                Spacer(1, 4 * mm),
            ]

        story.append(Paragraph("AI 글쓰기 도우미에서 내보낸 문서입니다.", styles["summary"]))

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=22 * mm,
            title="문서 내보내기",
            author=options.owner_id,
        )
        doc.build(story, onFirstPage=draw_page_number, onLaterPages=draw_page_number)
        return buffer.getvalue()

    @staticmethod
    def _metadata(
        record: DocumentRecord, options: GenerateOptions, style: ParagraphStyle
    ) -> list:
        if not options.include_metadata:
            return []
        parts = [f"카테고리: {record.category.value}"]
        if record.created_at is not None:
            parts.append(f"작성일: {format_korean_date(record.created_at)}")
        if record.updated_at is not None:
            parts.append(f"수정일: {format_korean_date(record.updated_at)}")
        if record.tags:
            parts.append("태그: " + ", ".join(record.tags))
        return [Paragraph(escape(" | ".join(parts)), style), Spacer(1, 2 * mm)]
