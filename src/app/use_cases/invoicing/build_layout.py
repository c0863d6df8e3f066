"""BuildInvoiceLayout Use Case

Finalizes a draft and maps it to document blocks for preview or export.
"""

from libs.result import Result, Return
from src.app.invoicing.layout import LayoutOptions, build_layout
from .accept_draft import DraftInput
from .dtos import FinalizedInvoiceDTO
from .finalize_invoice import FinalizeInvoice


class BuildInvoiceLayout:
    """
    Use Case: Lay out an invoice

    Business Rules:
    1. Only a finalized record is laid out; finalization errors pass through
    2. Block order is fixed; payment schedule and bank details are conditional
    """

    def __init__(self, options: LayoutOptions = None, finalize_invoice: FinalizeInvoice = None):
        self.options = options or LayoutOptions()
        self.finalize_invoice = finalize_invoice or FinalizeInvoice()

    def execute(self, draft: DraftInput) -> Result[FinalizedInvoiceDTO]:
        finalized = self.finalize_invoice.execute(draft)
        if finalized.is_err():
            return finalized

        record = finalized.value.record
        return Return.ok(
            FinalizedInvoiceDTO(record=record, layout=build_layout(record, self.options))
        )
