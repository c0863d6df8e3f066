"""Document Layout Engine

Maps an assembled invoice record to the ordered block sequence a paginated
renderer consumes: header, addresses, item table, totals, the optional
payment schedule with bank details, and the footer.
"""

import logging
import re
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import List, Optional, Sequence
from src.domain.base import BaseModel
from src.domain.column import CellValue, ColumnDefinition, ColumnType
from src.domain.invoice import BankDetails, ClientInfo, CompanyInfo, InvoiceRecord
from .blocks import (
    AddressBlock,
    AddressSectionBlock,
    Align,
    BankDetailField,
    BankDetailsBlock,
    DocumentLayout,
    DocumentMetadata,
    FooterBlock,
    HeaderBlock,
    ItemTableBlock,
    PageNumberPlaceholder,
    PaymentScheduleBlock,
    ScheduleRow,
    TableCell,
    TableColumn,
    TableRow,
    TotalsBlock,
    TotalsRow,
    TotalsRowKind,
)
from .calculator import HUNDRED, ONE, ZERO, clamp
from .columns import get_cell_value, normalize_columns
from .currency import format_currency

logger = logging.getLogger(__name__)

# Relative widths: the first column takes 3 units, every other column 1
FIRST_COLUMN_WEIGHT = 3
COLUMN_WEIGHT = 1

# Bank detail values the entry form pre-fills; never printed
BANK_DETAIL_PLACEHOLDERS = frozenset({"Bank Name", "SWIFT", "Account Number", "Account Name"})

_POINTS_PER_UNIT = {
    "pt": 1.0,
    "px": 1.0,
    "in": 72.0,
    "cm": 72.0 / 2.54,
    "mm": 72.0 / 25.4,
}

_WIDTH_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(pt|px|in|cm|mm|%)?\s*$")


class LayoutOptions(BaseModel):
    """Static text of the document, overridable per deployment"""

    title: str = "INVOICE"
    footer_text: str = "THIS IS A COMPUTER GENERATED INVOICE. NO SIGNATURE IS REQUIRED."
    page_number_template: str = "Page {page} of {total}"
    document_title: str = "Invoice App"
    subject: str = "Invoice for services"
    keywords: str = "invoice, billing, receipt"


def format_date(value: Optional[date]) -> Optional[str]:
    """DD-MM-YYYY"""
    if value is None:
        return None
    return value.strftime("%d-%m-%Y")


def format_plain_number(value: Decimal) -> str:
    """Decimal without exponent or trailing zeros: 2.50 -> "2.5", 1E+2 -> "100" """
    with localcontext() as context:
        context.prec = max(context.prec, len(value.as_tuple().digits))
        text = format(value.normalize(), "f")
    return "0" if text in ("-0", "") else text


def format_percent(value: Decimal) -> str:
    """Percentage rounded to two places, trailing zeros dropped"""
    if not value.is_finite():
        value = ZERO
    return format_plain_number(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def column_weight(index: int) -> int:
    return FIRST_COLUMN_WEIGHT if index == 0 else COLUMN_WEIGHT


def parse_width(width: Optional[str], available_width: float) -> Optional[float]:
    """
    Convert a column width to points

    Accepts pt, px, in, cm, mm, a percentage of available_width, or a bare
    number of points. Anything else leaves the column flexible (None).
    """
    if not width:
        return None

    match = _WIDTH_PATTERN.match(width)
    if not match:
        logger.debug(f"Ignoring unparseable column width {width!r}")
        return None

    amount = float(match.group(1))
    unit = match.group(2) or "pt"
    if unit == "%":
        return available_width * amount / 100
    return amount * _POINTS_PER_UNIT[unit]


def resolve_column_widths(columns: Sequence[TableColumn], available_width: float) -> List[float]:
    """
    Absolute column widths in points

    Fixed-width columns keep their width; the remaining space is shared by the
    flexible columns in proportion to their weight. When fixed widths exceed
    the available width, flexible columns get 0.
    """
    fixed = [parse_width(column.width, available_width) for column in columns]
    flexible_space = max(available_width - sum(width for width in fixed if width is not None), 0.0)
    total_weight = sum(column.weight for column, width in zip(columns, fixed) if width is None)

    widths = []
    for column, width in zip(columns, fixed):
        if width is not None:
            widths.append(width)
        elif total_weight:
            widths.append(flexible_space * column.weight / total_weight)
        else:
            widths.append(0.0)
    return widths


def _align_for(value_type: ColumnType) -> Align:
    return Align.RIGHT if value_type.is_numeric else Align.LEFT


def _table_columns(columns: List[ColumnDefinition]) -> List[TableColumn]:
    return [
        TableColumn(
            key=column.key,
            label=column.label,
            value_type=column.value_type,
            align=_align_for(column.value_type),
            weight=column_weight(index),
            width=column.width,
        )
        for index, column in enumerate(columns)
    ]


def _header_label(column: ColumnDefinition, currency_code: str) -> str:
    label = column.label.upper()
    if column.value_type == ColumnType.CURRENCY:
        label = f"{label} ({currency_code})"
    return label


def _cell_text(cell: CellValue, currency_code: str) -> str:
    if cell.number is None:
        return cell.text or ""
    if cell.value_type == ColumnType.CURRENCY:
        return format_currency(cell.number, currency_code)
    return format_plain_number(cell.number)


def build_header(record: InvoiceRecord, options: LayoutOptions) -> HeaderBlock:
    due_date = record.due_date
    if due_date is None and record.payment is not None:
        due_date = record.payment.due_date

    return HeaderBlock(
        title=options.title,
        invoice_number=record.invoice_number,
        invoice_date=format_date(record.invoice_date),
        due_date=format_date(due_date),
        logo=record.company.logo or None,
    )


def _address_block(label: str, name: str, company: Optional[str], party) -> AddressBlock:
    candidates = [
        name,
        party.registration_number,
        company if company and company != name else None,
        party.address,
        party.postal_code,
        party.email,
        party.phone,
    ]
    return AddressBlock(
        label=label,
        lines=[line.strip() for line in candidates if line and line.strip()],
    )


def build_address_section(company: CompanyInfo, client: ClientInfo) -> AddressSectionBlock:
    """From shows the owner (or the company itself); To falls back to "Client" when unnamed"""
    sender_name = company.owner_name or company.name
    recipient_name = client.name or client.company_name or "Client"
    return AddressSectionBlock(
        sender=_address_block("From", sender_name, company.name, company),
        recipient=_address_block("To", recipient_name, client.company_name, client),
    )


def build_item_table(record: InvoiceRecord, columns: List[ColumnDefinition]) -> ItemTableBlock:
    code = record.currency
    header = TableRow(
        cells=[
            TableCell(text=_header_label(column, code), align=_align_for(column.value_type), emphasized=True)
            for column in columns
        ]
    )
    rows = [
        TableRow(
            cells=[
                TableCell(
                    text=_cell_text(get_cell_value(item, column), code),
                    align=_align_for(column.value_type),
                )
                for column in columns
            ]
        )
        for item in record.items
    ]
    return ItemTableBlock(columns=_table_columns(columns), header=header, rows=rows)


def _totals_cells(column_count: int, label: str, amount_text: str, emphasized: bool) -> List[TableCell]:
    """Label in the second-to-last slot, amount in the last, other slots empty"""
    if column_count <= 1:
        return [TableCell(text=f"{label} {amount_text}", align=Align.RIGHT, emphasized=emphasized)]

    cells = []
    for index in range(column_count):
        if index == column_count - 2:
            cells.append(TableCell(text=label, align=Align.RIGHT, emphasized=emphasized))
        elif index == column_count - 1:
            cells.append(TableCell(text=amount_text, align=Align.RIGHT, emphasized=emphasized))
        else:
            cells.append(TableCell())
    return cells


def build_totals(record: InvoiceRecord, column_count: int) -> TotalsBlock:
    code = record.currency

    def row(kind: TotalsRowKind, label: str, amount: Decimal, emphasized: bool = False) -> TotalsRow:
        return TotalsRow(
            row_kind=kind,
            label=label,
            amount=amount,
            cells=_totals_cells(column_count, label, format_currency(amount, code), emphasized),
            emphasized=emphasized,
        )

    rows = [row(TotalsRowKind.SUBTOTAL, f"SUBTOTAL ({code})", record.subtotal)]

    discount = record.discount
    if discount is not None:
        label = "DISCOUNT"
        if discount.description:
            label += f" ({discount.description})"
        rate = clamp(discount.rate, ZERO, HUNDRED)
        if rate > 0:
            label += f" ({format_percent(rate)}%)"
        rows.append(row(TotalsRowKind.DISCOUNT, f"{label} ({code})", -discount.amount))

    if record.tax.enabled:
        tax_label = (record.tax.label or "Tax").upper()
        percent = clamp(record.tax.rate, ZERO, ONE) * HUNDRED
        rows.append(
            row(TotalsRowKind.TAX, f"{tax_label} ({format_percent(percent)}%) ({code})", record.tax.amount)
        )

    rows.append(row(TotalsRowKind.TOTAL, f"TOTAL ({code})", record.total, emphasized=True))
    return TotalsBlock(rows=rows)


def build_payment_schedule(record: InvoiceRecord) -> Optional[PaymentScheduleBlock]:
    """Only when the record asks for it and has at least one entry"""
    if not record.show_payment_schedule or not record.payment_schedule:
        return None

    return PaymentScheduleBlock(
        rows=[
            ScheduleRow(
                description=entry.description,
                percentage=f"{format_percent(entry.percentage)}%",
                amount=format_currency(entry.amount, record.currency),
            )
            for entry in record.payment_schedule
        ]
    )


def _shows_bank_value(value: Optional[str]) -> bool:
    return bool(value and value.strip()) and value.strip() not in BANK_DETAIL_PLACEHOLDERS


def build_bank_details(bank: Optional[BankDetails]) -> BankDetailsBlock:
    if bank is None:
        return BankDetailsBlock()

    candidates = [
        ("Bank Name", bank.bank_name),
        ("Account Name", bank.account_name),
        ("Account Number", bank.account_number),
        ("SWIFT Code", bank.swift_code),
    ]
    return BankDetailsBlock(
        entries=[
            BankDetailField(label=label, value=value)
            for label, value in candidates
            if _shows_bank_value(value)
        ]
    )


def build_metadata(record: InvoiceRecord, options: LayoutOptions) -> DocumentMetadata:
    return DocumentMetadata(
        title=options.document_title,
        author=record.company.owner_name or record.company.name,
        subject=options.subject,
        keywords=options.keywords,
    )


def build_layout(record: InvoiceRecord, options: Optional[LayoutOptions] = None) -> DocumentLayout:
    """
    Lay out an assembled invoice record

    The record is read as-is: amounts must already be derived by the assembly
    pipeline. Block order is fixed; the payment schedule and bank details
    appear together or not at all.

    Args:
        record: Finalized invoice record
        options: Static document text (defaults apply when omitted)

    Returns:
        DocumentLayout with metadata and the ordered blocks
    """
    options = options or LayoutOptions()
    columns = normalize_columns(record.columns)

    blocks = [
        build_header(record, options),
        build_address_section(record.company, record.client),
        build_item_table(record, columns),
        build_totals(record, len(columns)),
    ]

    schedule = build_payment_schedule(record)
    if schedule is not None:
        blocks.append(schedule)
        bank = record.payment.bank_details if record.payment is not None else None
        blocks.append(build_bank_details(bank))

    blocks.append(
        FooterBlock(
            text=options.footer_text,
            page_number=PageNumberPlaceholder(template=options.page_number_template),
        )
    )

    logger.debug(f"Laid out invoice {record.invoice_number} as {len(blocks)} blocks")
    return DocumentLayout(metadata=build_metadata(record, options), blocks=blocks)
