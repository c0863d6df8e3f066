"""ReportLab PDF Generation Service Implementation

Renders invoice layouts using the ReportLab platypus engine.
"""

import base64
import binascii
import logging
import os
import threading
from io import BytesIO
from typing import Dict, List, Optional, Tuple, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4, LEGAL, LETTER
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from src.app.invoicing.blocks import (
    AddressBlock,
    AddressSectionBlock,
    Align,
    BankDetailsBlock,
    DocumentLayout,
    FooterBlock,
    HeaderBlock,
    ItemTableBlock,
    PaymentScheduleBlock,
    TableCell,
    TotalsBlock,
)
from src.app.invoicing.layout import resolve_column_widths
from src.app.services.pdf_service import PdfService

logger = logging.getLogger(__name__)

PAGE_SIZES = {
    "A4": A4,
    "LETTER": LETTER,
    "LEGAL": LEGAL,
}

PRIMARY_COLOR = colors.HexColor("#2C3E50")
MUTED_COLOR = colors.HexColor("#7F8C8D")
GRID_COLOR = colors.HexColor("#BDC3C7")

REGULAR_FONT_NAME = "InvoiceSans"
BOLD_FONT_NAME = "InvoiceSans-Bold"
FALLBACK_FONTS = ("Helvetica", "Helvetica-Bold")

LOGO_MAX_HEIGHT = 20 * mm
LOGO_MAX_WIDTH = 60 * mm

_font_lock = threading.Lock()
_registered_fonts: Optional[Tuple[str, str]] = None


def ensure_fonts_registered(
    font_path: Optional[str] = None,
    bold_font_path: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Register the invoice fonts once per process

    Later calls return the first outcome whatever paths they pass. Missing or
    unreadable font files fall back to the built-in Helvetica pair.

    Returns:
        (regular font name, bold font name)
    """
    global _registered_fonts

    with _font_lock:
        if _registered_fonts is not None:
            return _registered_fonts

        fonts = FALLBACK_FONTS
        if font_path and os.path.exists(font_path):
            try:
                pdfmetrics.registerFont(TTFont(REGULAR_FONT_NAME, font_path))
                bold_name = REGULAR_FONT_NAME
                if bold_font_path and os.path.exists(bold_font_path):
                    pdfmetrics.registerFont(TTFont(BOLD_FONT_NAME, bold_font_path))
                    bold_name = BOLD_FONT_NAME
                fonts = (REGULAR_FONT_NAME, bold_name)
                logger.info(f"Registered invoice font {font_path}")
            except TTFError as e:
                logger.warning(f"Could not load invoice font {font_path}, using Helvetica: {e}")
        elif font_path:
            logger.warning(f"Invoice font {font_path} not found, using Helvetica")

        _registered_fonts = fonts
        return fonts


def _numbered_canvas(footer: Optional[FooterBlock], font_name: str, margin: float):
    """Canvas class that paints the footer once the page count is known"""

    class NumberedCanvas(canvas.Canvas):
        def __init__(self, *args, **kwargs):
            canvas.Canvas.__init__(self, *args, **kwargs)
            self._saved_page_states = []

        def showPage(self):
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            page_count = len(self._saved_page_states)
            for state in self._saved_page_states:
                self.__dict__.update(state)
                self._draw_footer(page_count)
                canvas.Canvas.showPage(self)
            canvas.Canvas.save(self)

        def _draw_footer(self, page_count: int):
            if footer is None:
                return
            page_width = self._pagesize[0]
            y = margin / 2
            self.saveState()
            self.setFont(font_name, 7)
            self.setFillColor(MUTED_COLOR)
            self.drawString(margin, y, footer.text)
            self.drawRightString(
                page_width - margin,
                y,
                footer.page_number.resolve(self.getPageNumber(), page_count),
            )
            self.restoreState()

    return NumberedCanvas


def load_logo(logo: Optional[str]) -> Optional[Tuple[Union[str, BytesIO], Tuple[int, int]]]:
    """
    Read a logo given as a data URI or a file path

    Returns:
        (image source, (width, height)), or None when the logo is unusable
    """
    if not logo:
        return None

    try:
        if logo.startswith("data:"):
            _, _, payload = logo.partition(",")
            source = BytesIO(base64.b64decode(payload))
            size = ImageReader(source).getSize()
            source.seek(0)
            return source, size
        if os.path.exists(logo):
            return logo, ImageReader(logo).getSize()
        logger.warning(f"Logo file {logo} not found, rendering without logo")
    except (OSError, ValueError, binascii.Error) as e:
        logger.warning(f"Could not read logo, rendering without logo: {e}")
    return None


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Renders each layout block as platypus flowables; the footer is painted by
    the canvas so its page number can refer to the final page count.
    """

    def __init__(
        self,
        page_size: str = "A4",
        margin: float = 20 * mm,
        font_path: Optional[str] = None,
        bold_font_path: Optional[str] = None,
    ):
        if page_size.upper() not in PAGE_SIZES:
            raise ValueError(f"Unsupported page size {page_size!r}")
        self.page_size = PAGE_SIZES[page_size.upper()]
        self.margin = margin
        self.font_path = font_path
        self.bold_font_path = bold_font_path

    def render(self, layout: DocumentLayout) -> bytes:
        """
        Render an invoice layout

        Args:
            layout: Ordered document blocks with metadata

        Returns:
            PDF document as bytes
        """
        font, bold_font = ensure_fonts_registered(self.font_path, self.bold_font_path)
        self._styles = self._build_styles(font, bold_font)

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.page_size,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=layout.metadata.title,
            author=layout.metadata.author,
            subject=layout.metadata.subject,
            keywords=layout.metadata.keywords,
            creator=layout.metadata.title,
        )

        elements = []
        table_widths: List[float] = [doc.width]
        footer = None
        for block in layout.blocks:
            if isinstance(block, HeaderBlock):
                elements.extend(self._header(block, doc.width))
            elif isinstance(block, AddressSectionBlock):
                elements.extend(self._addresses(block, doc.width))
            elif isinstance(block, ItemTableBlock):
                table_widths = resolve_column_widths(block.columns, doc.width)
                elements.extend(self._item_table(block, table_widths))
            elif isinstance(block, TotalsBlock):
                elements.extend(self._totals(block, table_widths))
            elif isinstance(block, PaymentScheduleBlock):
                elements.extend(self._payment_schedule(block, doc.width))
            elif isinstance(block, BankDetailsBlock):
                elements.extend(self._bank_details(block, doc.width))
            elif isinstance(block, FooterBlock):
                footer = block

        doc.build(elements, canvasmaker=_numbered_canvas(footer, font, self.margin))
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _build_styles(self, font: str, bold_font: str) -> Dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()["Normal"]
        return {
            "title": ParagraphStyle("InvoiceTitle", parent=base, fontName=bold_font,
                                    fontSize=24, leading=28, textColor=PRIMARY_COLOR),
            "muted": ParagraphStyle("InvoiceMuted", parent=base, fontName=font,
                                    fontSize=10, textColor=MUTED_COLOR),
            "label": ParagraphStyle("InvoiceLabel", parent=base, fontName=bold_font,
                                    fontSize=9, textColor=PRIMARY_COLOR),
            "body": ParagraphStyle("InvoiceBody", parent=base, fontName=font, fontSize=9, leading=12),
            "body_right": ParagraphStyle("InvoiceBodyRight", parent=base, fontName=font,
                                         fontSize=9, leading=12, alignment=TA_RIGHT),
            "bold": ParagraphStyle("InvoiceBold", parent=base, fontName=bold_font, fontSize=9, leading=12),
            "bold_right": ParagraphStyle("InvoiceBoldRight", parent=base, fontName=bold_font,
                                         fontSize=9, leading=12, alignment=TA_RIGHT),
        }

    def _text(self, text: str, style: str) -> Paragraph:
        return Paragraph(escape(text), self._styles[style])

    def _cell(self, cell: TableCell) -> Paragraph:
        if cell.emphasized:
            style = "bold_right" if cell.align == Align.RIGHT else "bold"
        else:
            style = "body_right" if cell.align == Align.RIGHT else "body"
        return self._text(cell.text, style)

    def _header(self, block: HeaderBlock, width: float) -> list:
        info = [
            self._text(block.title, "title"),
            self._text(block.invoice_number, "muted"),
            self._text(block.invoice_date, "muted"),
        ]

        aside = []
        loaded = load_logo(block.logo)
        if loaded is not None:
            source, (image_width, image_height) = loaded
            scale = min(LOGO_MAX_WIDTH / image_width, LOGO_MAX_HEIGHT / image_height, 1)
            logo = Image(source, width=image_width * scale, height=image_height * scale)
            logo.hAlign = "RIGHT"
            aside.append(logo)
        if block.due_date:
            aside.append(self._text(f"Due Date: {block.due_date}", "body_right"))

        table = Table([[info, aside]], colWidths=[width * 0.6, width * 0.4])
        table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        return [table, Spacer(1, 8 * mm)]

    def _address(self, block: AddressBlock) -> list:
        return [self._text(block.label.upper(), "label")] + [
            self._text(line, "body") for line in block.lines
        ]

    def _addresses(self, block: AddressSectionBlock, width: float) -> list:
        table = Table(
            [[self._address(block.sender), self._address(block.recipient)]],
            colWidths=[width / 2, width / 2],
        )
        table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        return [table, Spacer(1, 8 * mm)]

    def _item_table(self, block: ItemTableBlock, widths: List[float]) -> list:
        data = [[self._cell(cell) for cell in block.header.cells]]
        data.extend([self._cell(cell) for cell in row.cells] for row in block.rows)

        table = Table(data, colWidths=widths, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("LINEBELOW", (0, 0), (-1, 0), 1, PRIMARY_COLOR),
                    ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        return [table]

    def _totals(self, block: TotalsBlock, widths: List[float]) -> list:
        data = [[self._cell(cell) for cell in row.cells] for row in block.rows]
        if len(widths) != len(data[0]):
            widths = [sum(widths)]

        commands = [
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        for index, row in enumerate(block.rows):
            if row.emphasized:
                commands.append(("LINEABOVE", (0, index), (-1, index), 1, PRIMARY_COLOR))

        table = Table(data, colWidths=widths)
        table.setStyle(TableStyle(commands))
        return [table, Spacer(1, 6 * mm)]

    def _payment_schedule(self, block: PaymentScheduleBlock, width: float) -> list:
        data = [[self._text(block.title, "label"), "", ""]]
        data.extend(
            [
                self._text(row.description, "body"),
                self._text(row.percentage, "body_right"),
                self._text(row.amount, "body_right"),
            ]
            for row in block.rows
        )

        table = Table(data, colWidths=[width * 0.6, width * 0.15, width * 0.25])
        table.setStyle(
            TableStyle(
                [
                    ("SPAN", (0, 0), (-1, 0)),
                    ("LINEBELOW", (0, 0), (-1, 0), 1, PRIMARY_COLOR),
                    ("LINEBELOW", (0, 1), (-1, -1), 0.5, GRID_COLOR),
                ]
            )
        )
        return [table, Spacer(1, 6 * mm)]

    def _bank_details(self, block: BankDetailsBlock, width: float) -> list:
        elements = [self._text(block.title.upper(), "label"), Spacer(1, 2 * mm)]
        if block.entries:
            table = Table(
                [[self._text(entry.label, "muted"), self._text(entry.value, "body")] for entry in block.entries],
                colWidths=[width * 0.3, width * 0.7],
            )
            table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
            elements.append(table)
        return elements
