from .accept_draft import AcceptInvoiceDraft
from .assemble_invoice import AssembleInvoice
from .finalize_invoice import FinalizeInvoice
from .update_draft import UpdateInvoiceDraft
from .manage_columns import (
    AddInvoiceColumn,
    RemoveInvoiceColumn,
    UpdateInvoiceColumn,
    ReorderInvoiceColumns,
)
from .edit_payment_schedule import EditPaymentPercentage
from .build_layout import BuildInvoiceLayout
from .generate_invoice_pdf import GenerateInvoicePdf

__all__ = [
    "AcceptInvoiceDraft",
    "AssembleInvoice",
    "FinalizeInvoice",
    "UpdateInvoiceDraft",
    "AddInvoiceColumn",
    "RemoveInvoiceColumn",
    "UpdateInvoiceColumn",
    "ReorderInvoiceColumns",
    "EditPaymentPercentage",
    "BuildInvoiceLayout",
    "GenerateInvoicePdf",
]
