"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs. All of them read and
write camelCase like the invoice record itself.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import Field
from src.domain.base import BaseModel
from src.domain.column import ColumnType
from src.domain.invoice import InvoiceRecord, InvoiceState
from src.app.invoicing.blocks import DocumentLayout
from src.app.invoicing.payment_schedule import ScheduleSummary


class ValidationIssue(BaseModel):
    """A reported (non-fatal) validation failure"""

    code: str
    message: str


class AssembledInvoiceDTO(BaseModel):
    """
    Result of one pipeline run

    state is "validated" (or "finalized") when the schedule holds, otherwise
    "computed" with validation_failed set and the issues listed.
    """

    state: InvoiceState = Field(
        ...,
        description="Pipeline state reached"
    )

    record: InvoiceRecord = Field(
        ...,
        description="Normalized record with every derived amount recomputed"
    )

    validation_failed: bool = Field(
        default=False,
        description="True when the record may not be finalized"
    )

    issues: List[ValidationIssue] = Field(
        default_factory=list,
        description="Reasons validation failed"
    )

    schedule_summary: Optional[ScheduleSummary] = Field(
        default=None,
        description="Allocation status of the payment schedule, when there is one"
    )


class FinalizedInvoiceDTO(BaseModel):
    """Finalized record plus its document layout"""

    record: InvoiceRecord
    layout: DocumentLayout


class InvoicePdfDTO(BaseModel):
    """Rendered invoice with a summary of its amounts"""

    invoice_number: str
    currency: str
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal
    pdf_base64: str = Field(
        ...,
        description="PDF document, base64 encoded"
    )
    generated_at: datetime


class AddColumnCommandDTO(BaseModel):
    """
    Command DTO for adding a custom column

    Used as input to AddInvoiceColumn use case.
    """

    key: str = Field(
        ...,
        description="Column key used in line item custom fields (e.g. projectCode)"
    )

    label: str = Field(
        ...,
        description="Header label"
    )

    value_type: ColumnType = Field(
        default=ColumnType.TEXT,
        description="text, number or currency"
    )

    required: bool = False

    width: Optional[str] = Field(
        default=None,
        description="Fixed width (e.g. 30mm, 20%); flexible when omitted"
    )


class UpdateColumnCommandDTO(BaseModel):
    """Command DTO for patching one column"""

    column_id: str
    patch: Dict[str, Any] = Field(
        ...,
        description="Field values to change, e.g. {\"label\": \"Hours\"}"
    )


class ReorderColumnsCommandDTO(BaseModel):
    from_index: int
    to_index: int


class EditPercentageCommandDTO(BaseModel):
    """Command DTO for editing one payment schedule entry's percentage"""

    index: int = Field(
        ...,
        ge=0,
        description="Position of the entry in the schedule"
    )

    percentage: Decimal = Field(
        ...,
        description="Requested percentage; capped so the schedule stays at or below 100"
    )
