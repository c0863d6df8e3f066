"""EditPaymentPercentage Use Case

Interactive edit of one installment's percentage under the capping policy.
"""

import logging
from libs.result import Result, Return, Error
from src.app.invoicing.payment_schedule import apply_percentage_edit
from .accept_draft import DraftInput
from .assemble_invoice import AssembleInvoice
from .dtos import AssembledInvoiceDTO, EditPercentageCommandDTO

logger = logging.getLogger(__name__)


class EditPaymentPercentage:
    """
    Use Case: Edit a payment schedule percentage

    Business Rules:
    1. The entry must exist (SCHEDULE_ENTRY_NOT_FOUND)
    2. The new percentage is capped at what the other entries leave over,
       floored at 0; an over-large value is truncated, not refused
    3. Amounts are rederived from the current grand total

    Flow:
    1. Assemble the draft to get the current grand total
    2. Apply the capped edit
    3. Assemble again with the edited schedule
    """

    def __init__(self, assemble_invoice: AssembleInvoice = None):
        self.assemble_invoice = assemble_invoice or AssembleInvoice()

    def execute(self, draft: DraftInput, command: EditPercentageCommandDTO) -> Result[AssembledInvoiceDTO]:
        assembled = self.assemble_invoice.execute(draft)
        if assembled.is_err():
            return assembled

        record = assembled.value.record
        schedule = record.payment_schedule or []
        if command.index >= len(schedule):
            return Return.err(
                Error(
                    code="SCHEDULE_ENTRY_NOT_FOUND",
                    message=f"Payment schedule has no entry at position {command.index}",
                    reason=f"Schedule has {len(schedule)} entries",
                )
            )

        edited = apply_percentage_edit(schedule, command.index, command.percentage, record.total)
        applied = edited[command.index].percentage
        if applied != command.percentage:
            logger.debug(
                f"Capped schedule entry {command.index} of {record.invoice_number} "
                f"from {command.percentage}% to {applied}%"
            )

        return self.assemble_invoice.execute(record.model_copy(update={"payment_schedule": edited}))
