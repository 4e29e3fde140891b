import io
from dataclasses import dataclass
from datetime import datetime, timezone
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from docport.documents.models import DocumentRecord
from docport.documents.text import content_to_paragraphs
from docport.exporting.generators.base import BaseGenerator
from docport.exporting.generators.fonts import register_korean_fonts
from docport.exporting.generators.pdf_generator import format_korean_date
from docport.exporting.models import GenerateOptions, LetterDesign, LetterOptions

EMPTY_CONTENT_TEXT = "내용을 입력해주세요."
UNTITLED_DOCUMENT = "제목 없는 문서"


@dataclass(frozen=True)
class LetterLayout:
    serif: bool
    accent: str
    date_alignment: int
    closing: str
    default_sender: str
    heading: str | None = None
    subheading: str | None = None
    ornament: str | None = None
    recipient_format: str | None = "{}"
    title_format: str | None = "{}"
    title_as_recipient: bool = False
    sender_format: str = "{}"
    farewell: str | None = None
    separator: str | None = None


# Decorations are limited to symbols present in the Korean CID fonts.
LAYOUTS: dict[LetterDesign, LetterLayout] = {
    LetterDesign.FORMAL: LetterLayout(
        serif=True,
        accent="#4a5568",
        date_alignment=TA_RIGHT,
        recipient_format="{} 귀하",
        closing="경의를 표하며",
        default_sender="보내는 이",
    ),
    LetterDesign.BUSINESS: LetterLayout(
        serif=False,
        accent="#3182ce",
        date_alignment=TA_LEFT,
        heading="업무 서신",
        title_format="제목: {}",
        closing="감사합니다.",
        default_sender="담당자",
    ),
    LetterDesign.PERSONAL: LetterLayout(
        serif=False,
        accent="#f56565",
        date_alignment=TA_RIGHT,
        ornament="♡",
        recipient_format=None,
        title_as_recipient=True,
        closing="",
        default_sender="당신의 친구",
        sender_format="{} 드림",
    ),
    LetterDesign.THANKYOU: LetterLayout(
        serif=True,
        accent="#d69e2e",
        date_alignment=TA_CENTER,
        ornament="★ ☆ ★",
        heading="감사의 마음을 담아",
        recipient_format="{} 님께",
        title_format=None,
        farewell="진심으로 감사드립니다",
        closing="깊은 감사와 함께",
        default_sender="감사하는 마음으로",
    ),
    LetterDesign.INVITATION: LetterLayout(
        serif=False,
        accent="#667eea",
        date_alignment=TA_CENTER,
        ornament="◆ ◇ ◆",
        heading="초대장",
        subheading="특별한 순간에 함께해 주세요",
        recipient_format="{} 님을 정중히 초대합니다",
        title_format=None,
        separator="※ ※ ※",
        closing="당신의 참석을 기다리며",
        default_sender="초대하는 이",
    ),
}


def default_letter_date(now: datetime | None = None) -> str:
    return format_korean_date(now or datetime.now(timezone.utc))


def letter_paragraphs(content: str) -> list[str]:
    """Paragraphs for the letter body, each joined onto a single line."""
    paragraphs = [" ".join(p.split("\n")) for p in content_to_paragraphs(content)]
    return paragraphs or [EMPTY_CONTENT_TEXT]


class LetterGenerator(BaseGenerator):
    """Renders a single document as a designed Korean letter."""

    format_label = "pdf"
    media_type = "application/pdf"
    extension = "pdf"
    size_multiplier = 3.0

    def _render(self, records: list[DocumentRecord], options: GenerateOptions) -> bytes:
        if not records:
            raise ValueError("A letter needs exactly one document")
        record = records[0]
        letter = options.letter or LetterOptions(design=LetterDesign.FORMAL)
        layout = LAYOUTS[letter.design]

        serif, sans = register_korean_fonts()
        font = serif if layout.serif else sans
        accent = colors.HexColor(layout.accent)
        text = colors.HexColor("#2d3748")

        def style(
            name: str, size: float, alignment: int = TA_LEFT, color=text, **kwargs
        ) -> ParagraphStyle:
            return ParagraphStyle(
                name, fontName=font, fontSize=size, leading=size * 1.8,
                alignment=alignment, textColor=color, **kwargs,
            )

        story: list = []
        if layout.ornament:
            story += [Paragraph(layout.ornament, style("ornament", 18, TA_CENTER, color=accent))]
        if layout.heading:
            story.append(Paragraph(layout.heading, style("heading", 20, TA_CENTER, color=accent)))
        if layout.subheading:
            story.append(Paragraph(layout.subheading, style("subheading", 11, TA_CENTER)))
        if layout.heading or layout.ornament:
            story += [Spacer(1, 4 * mm), HRFlowable(width="100%", thickness=1.5, color=accent)]
        story.append(Spacer(1, 8 * mm))

        date = letter.date or default_letter_date(options.exported_at)
        story += [Paragraph(escape(date), style("date", 12, layout.date_alignment)), Spacer(1, 6 * mm)]

        has_title = bool(record.title) and record.title != UNTITLED_DOCUMENT
        if layout.title_as_recipient and has_title:
            story.append(Paragraph(escape(record.title), style("recipient", 13)))
        elif layout.recipient_format and letter.recipient:
            story.append(
                Paragraph(escape(layout.recipient_format.format(letter.recipient)), style("recipient", 13))
            )
        story.append(Spacer(1, 6 * mm))

        if layout.title_format and has_title and not layout.title_as_recipient:
            story += [
                Paragraph(
                    escape(layout.title_format.format(record.title)),
                    style("title", 16, TA_CENTER if layout.serif else TA_LEFT),
                ),
                Spacer(1, 8 * mm),
            ]

        if layout.separator:
            story.append(Paragraph(layout.separator, style("separator", 12, TA_CENTER, color=accent)))
        body = style("body", 11.5, TA_JUSTIFY, firstLineIndent=11.5 * 2, spaceAfter=8, wordWrap="CJK")
        for paragraph in letter_paragraphs(record.content):
            story.append(Paragraph(escape(paragraph), body))
        if layout.separator:
            story.append(Paragraph(layout.separator, style("separator-end", 12, TA_CENTER, color=accent)))

        story.append(Spacer(1, 10 * mm))
        if layout.farewell:
            story += [Paragraph(layout.farewell, style("farewell", 13, TA_CENTER, color=accent)), Spacer(1, 6 * mm)]
        if layout.closing:
            story.append(Paragraph(layout.closing, style("closing", 11.5, TA_RIGHT)))
        sender = layout.sender_format.format(letter.sender or layout.default_sender)
        story.append(Paragraph(escape(sender), style("sender", 13, TA_RIGHT)))

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=25 * mm,
            rightMargin=25 * mm,
            topMargin=25 * mm,
            bottomMargin=25 * mm,
            title=record.title or "편지",
            author=options.owner_id,
        )
        doc.build(story)
        return buffer.getvalue()
