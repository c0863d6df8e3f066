"""FinalizeInvoice Use Case

The only transition into the finalized state, from which preview and export
are permitted.
"""

from libs.result import Result, Return, Error
from src.domain.invoice import InvoiceState
from .accept_draft import DraftInput
from .assemble_invoice import AssembleInvoice
from .dtos import AssembledInvoiceDTO


class FinalizeInvoice:
    """
    Use Case: Finalize an invoice

    Business Rules:
    1. The draft is assembled again from scratch
    2. Finalization is refused while validation fails (SCHEDULE_OVER_ALLOCATED)
    """

    def __init__(self, assemble_invoice: AssembleInvoice = None):
        self.assemble_invoice = assemble_invoice or AssembleInvoice()

    def execute(self, draft: DraftInput) -> Result[AssembledInvoiceDTO]:
        assembled = self.assemble_invoice.execute(draft)
        if assembled.is_err():
            return assembled

        result = assembled.value
        if result.validation_failed:
            issue = result.issues[0] if result.issues else None
            return Return.err(
                Error(
                    code=issue.code if issue else "INVALID_INVOICE_DATA",
                    message="Invoice cannot be finalized until validation passes",
                    reason=issue.message if issue else None,
                )
            )

        return Return.ok(result.model_copy(update={"state": InvoiceState.FINALIZED}))
