"""Invoice Domain Entity

The invoice record aggregate: parties, line items, columns, tax, discount
and payment schedule.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import ConfigDict, Field
from src.domain.base import BaseModel, generate_uuid
from src.domain.column import ColumnDefinition
from src.domain.line_item import LineItem


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class InvoiceState(str, Enum):
    """Assembly pipeline states"""
    DRAFT = "draft"            # As entered or imported, possibly inconsistent
    NORMALIZED = "normalized"  # Columns and items synchronized
    COMPUTED = "computed"      # Derived amounts recalculated
    VALIDATED = "validated"    # Schedule invariant holds
    FINALIZED = "finalized"    # Immutable, ready for layout and export


class CompanyInfo(BaseModel):
    """Issuer identity and address"""

    owner_name: Optional[str] = None
    name: str = Field(description="Company name (required)")
    registration_number: Optional[str] = None
    address: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: str = ""
    email: str = ""
    website: Optional[str] = None
    logo: Optional[str] = Field(
        default=None,
        description="Logo as a file path or data URI"
    )
    tax_id: Optional[str] = None


class ClientInfo(BaseModel):
    """Recipient identity and address"""

    name: Optional[str] = None
    company_name: Optional[str] = None
    contact_person: Optional[str] = None
    registration_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class BankDetails(BaseModel):
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
    swift_code: Optional[str] = None


class PaymentInfo(BaseModel):
    terms: Optional[str] = None
    method: Optional[str] = None
    due_date: Optional[date] = None
    bank_details: Optional[BankDetails] = None


class TaxConfig(BaseModel):
    """
    Tax configuration

    Domain Rules:
    - rate is a fraction in [0, 1]; user input in percent is converted at the boundary
    - amount = subtotal * rate when enabled, else 0 (derived)
    """

    enabled: bool = False
    rate: Decimal = Field(
        default=Decimal("0"),
        description="Fractional tax rate (0.07 = 7%)"
    )
    amount: Decimal = Decimal("0")
    label: Optional[str] = Field(
        default=None,
        description="Display label (GST, VAT, Sales Tax)"
    )


class DiscountConfig(BaseModel):
    """
    Discount configuration (legacy)

    Domain Rules:
    - rate is a percentage in [0, 100], unlike TaxConfig.rate
    - amount = subtotal * rate / 100 (derived)
    """

    rate: Decimal = Field(
        default=Decimal("0"),
        description="Discount percentage (10 = 10%)"
    )
    amount: Decimal = Decimal("0")
    description: Optional[str] = None


class PaymentScheduleEntry(BaseModel):
    """
    Payment schedule installment

    Domain Rules:
    - percentage in [0, 100]
    - amount = grand total * percentage / 100 (derived)
    """

    id: str = Field(default_factory=generate_uuid)
    description: str = ""
    percentage: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")


class InvoiceRecord(BaseModel):
    """
    Invoice Record - Aggregate root

    Domain Rules:
    - subtotal = sum(item.total)
    - total = subtotal - discount.amount + tax.amount
    - Derived fields are written only by the assembly pipeline
    - Immutable once assembled; edits go back through the pipeline
    """

    invoice_number: str = Field(
        description="Invoice number (e.g., INV-2025-001)"
    )

    invoice_date: date = Field(
        description="Issue date"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date"
    )

    currency: str = Field(
        default="USD",
        description="Currency code (ISO 4217)"
    )

    status: Optional[InvoiceStatus] = None

    po_number: Optional[str] = None

    company: CompanyInfo

    client: ClientInfo

    items: List[LineItem] = Field(
        description="Ordered line items"
    )

    columns: List[ColumnDefinition] = Field(
        default_factory=list,
        description="Item table columns (defaults applied when empty)"
    )

    subtotal: Decimal = Decimal("0")

    tax: TaxConfig = Field(default_factory=TaxConfig)

    discount: Optional[DiscountConfig] = None

    total: Decimal = Decimal("0")

    payment_schedule: Optional[List[PaymentScheduleEntry]] = None

    show_payment_schedule: bool = Field(
        default=False,
        description="Render the payment schedule and bank details blocks"
    )

    payment: Optional[PaymentInfo] = None

    notes: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "invoiceNumber": "INV-FRL-2025-001",
                "invoiceDate": "2025-01-15",
                "dueDate": "2025-02-14",
                "currency": "USD",
                "company": {"name": "Your Company Name", "address": "123 Business Street"},
                "client": {"name": "John Smith", "companyName": "Client Company Ltd"},
                "items": [
                    {"id": "1", "description": "Service Description", "quantity": 1, "unitPrice": 1000}
                ],
                "tax": {"enabled": True, "rate": 0.07, "label": "GST"},
                "paymentSchedule": [
                    {"id": "1", "description": "Upon signing", "percentage": 30},
                    {"id": "2", "description": "Upon delivery", "percentage": 70},
                ],
                "showPaymentSchedule": True,
            }
        }
    )
