from .base import BaseModel, generate_uuid
from .column import ColumnDefinition, ColumnType, CellValue
from .line_item import LineItem
from .invoice import (
    InvoiceRecord,
    InvoiceState,
    InvoiceStatus,
    CompanyInfo,
    ClientInfo,
    BankDetails,
    PaymentInfo,
    TaxConfig,
    DiscountConfig,
    PaymentScheduleEntry,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "ColumnDefinition",
    "ColumnType",
    "CellValue",
    "LineItem",
    "InvoiceRecord",
    "InvoiceState",
    "InvoiceStatus",
    "CompanyInfo",
    "ClientInfo",
    "BankDetails",
    "PaymentInfo",
    "TaxConfig",
    "DiscountConfig",
    "PaymentScheduleEntry",
]
