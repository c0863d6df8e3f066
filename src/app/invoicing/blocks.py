"""Layout Blocks

Self-contained structural units of an invoice document, consumed by a
renderer in order. Blocks carry display-ready text; no block knows its own
page number except through the footer's deferred placeholder.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from pydantic import Field
from src.domain.base import BaseModel
from src.domain.column import ColumnType


class Align(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class HeaderBlock(BaseModel):
    kind: Literal["header"] = "header"
    title: str
    invoice_number: str
    invoice_date: str
    due_date: Optional[str] = None
    logo: Optional[str] = None


class AddressBlock(BaseModel):
    """One party: a label ("From" / "To") and its non-empty lines in display order"""

    label: str
    lines: List[str] = Field(default_factory=list)


class AddressSectionBlock(BaseModel):
    kind: Literal["address"] = "address"
    sender: AddressBlock
    recipient: AddressBlock


class TableColumn(BaseModel):
    """
    Column slot of the item table

    weight is the relative share of flexible space; a width (e.g. "30mm",
    "20%", "72") fixes this column and takes it out of the weighting.
    """

    key: str
    label: str
    value_type: ColumnType
    align: Align
    weight: int
    width: Optional[str] = None


class TableCell(BaseModel):
    text: str = ""
    align: Align = Align.LEFT
    emphasized: bool = False


class TableRow(BaseModel):
    cells: List[TableCell]


class ItemTableBlock(BaseModel):
    kind: Literal["item_table"] = "item_table"
    columns: List[TableColumn]
    header: TableRow
    rows: List[TableRow] = Field(default_factory=list)


class TotalsRowKind(str, Enum):
    SUBTOTAL = "subtotal"
    DISCOUNT = "discount"
    TAX = "tax"
    TOTAL = "total"


class TotalsRow(BaseModel):
    """A totals line spread over the item table's column slots"""

    row_kind: TotalsRowKind
    label: str
    amount: Decimal
    cells: List[TableCell]
    emphasized: bool = False


class TotalsBlock(BaseModel):
    kind: Literal["totals"] = "totals"
    rows: List[TotalsRow]


class ScheduleRow(BaseModel):
    description: str
    percentage: str
    amount: str


class PaymentScheduleBlock(BaseModel):
    kind: Literal["payment_schedule"] = "payment_schedule"
    title: str = "PAYMENT SCHEDULE"
    rows: List[ScheduleRow]


class BankDetailField(BaseModel):
    label: str
    value: str


class BankDetailsBlock(BaseModel):
    kind: Literal["bank_details"] = "bank_details"
    title: str = "Bank Transfer Details"
    entries: List[BankDetailField] = Field(default_factory=list)


class PageNumberPlaceholder(BaseModel):
    """Resolved by the renderer at paint time"""

    template: str = "Page {page} of {total}"

    def resolve(self, page: int, total: int) -> str:
        return self.template.format(page=page, total=total)


class FooterBlock(BaseModel):
    kind: Literal["footer"] = "footer"
    text: str
    page_number: PageNumberPlaceholder = Field(default_factory=PageNumberPlaceholder)


LayoutBlock = Annotated[
    Union[
        HeaderBlock,
        AddressSectionBlock,
        ItemTableBlock,
        TotalsBlock,
        PaymentScheduleBlock,
        BankDetailsBlock,
        FooterBlock,
    ],
    Field(discriminator="kind"),
]


class DocumentMetadata(BaseModel):
    title: str
    author: str
    subject: str
    keywords: str
    language: str = "en-US"


class DocumentLayout(BaseModel):
    """Ordered block sequence for one finalized invoice"""

    metadata: DocumentMetadata
    blocks: List[LayoutBlock]

    def kinds(self) -> List[str]:
        return [block.kind for block in self.blocks]

    def find(self, kind: str):
        return next((block for block in self.blocks if block.kind == kind), None)
