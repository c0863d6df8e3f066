"""AssembleInvoice Use Case

Runs a draft through Normalized -> Computed -> Validated. Every run is a full
re-derivation from the draft; nothing computed earlier is reused.
"""

import logging
from libs.result import Result, Return
from src.app.invoicing.calculator import (
    HUNDRED,
    ONE,
    ZERO,
    clamp,
    compute_discount,
    compute_grand_total,
    compute_item_total,
    compute_subtotal,
    compute_tax,
    to_amount,
)
from src.app.invoicing.columns import normalize_columns, reconcile_items
from src.app.invoicing.payment_schedule import (
    normalize_entries,
    recompute_amounts,
    summarize_schedule,
)
from src.domain.invoice import InvoiceRecord, InvoiceState
from .accept_draft import AcceptInvoiceDraft, DraftInput
from .dtos import AssembledInvoiceDTO, ValidationIssue

logger = logging.getLogger(__name__)


def normalize_record(record: InvoiceRecord) -> InvoiceRecord:
    """
    Fill defaults and bring items in line with the columns

    - Missing columns become the four built-ins; orders become dense
    - Item custom fields are pruned and seeded to match the custom columns
    - Quantities and prices are clamped to finite, non-negative values
    - Tax rate is clamped to [0, 1], discount rate and entry percentages to [0, 100]
    """
    columns = normalize_columns(record.columns)

    items = [
        item.model_copy(
            update={
                "quantity": to_amount(item.quantity),
                "unit_price": to_amount(item.unit_price),
            }
        )
        for item in reconcile_items(record.items, columns)
    ]

    tax = record.tax.model_copy(update={"rate": clamp(record.tax.rate, ZERO, ONE)})

    discount = record.discount
    if discount is not None:
        discount = discount.model_copy(update={"rate": clamp(discount.rate, ZERO, HUNDRED)})

    schedule = record.payment_schedule
    if schedule is not None:
        schedule = normalize_entries(schedule)

    return record.model_copy(
        update={
            "columns": columns,
            "items": items,
            "tax": tax,
            "discount": discount,
            "payment_schedule": schedule,
        }
    )


def compute_record(record: InvoiceRecord) -> InvoiceRecord:
    """Recalculate every derived amount from quantities, prices and rates"""
    items = [
        item.model_copy(update={"total": compute_item_total(item.quantity, item.unit_price)})
        for item in record.items
    ]

    subtotal = compute_subtotal(items)
    tax_amount = compute_tax(subtotal, record.tax)
    discount_amount = compute_discount(subtotal, record.discount)
    total = compute_grand_total(subtotal, tax_amount, discount_amount)

    discount = record.discount
    if discount is not None:
        discount = discount.model_copy(update={"amount": discount_amount})

    schedule = record.payment_schedule
    if schedule is not None:
        schedule = recompute_amounts(schedule, total)

    return record.model_copy(
        update={
            "items": items,
            "subtotal": subtotal,
            "tax": record.tax.model_copy(update={"amount": tax_amount}),
            "discount": discount,
            "total": total,
            "payment_schedule": schedule,
        }
    )


class AssembleInvoice:
    """
    Use Case: Assemble a draft invoice

    Business Rules:
    1. The draft must be accepted first (shape and column checks)
    2. Derived fields are always recomputed, never trusted from input
    3. An over-allocated payment schedule is reported, not refused: the
       result stays in "computed" with validation_failed set

    Flow:
    1. Accept draft
    2. Normalize columns, items and rates
    3. Compute item totals, subtotal, tax, discount, grand total, schedule amounts
    4. Validate the schedule percentage sum
    """

    def __init__(self, accept_draft: AcceptInvoiceDraft = None):
        self.accept_draft = accept_draft or AcceptInvoiceDraft()

    def execute(self, draft: DraftInput) -> Result[AssembledInvoiceDTO]:
        """
        Execute invoice assembly

        Args:
            draft: Draft record or its serialized form

        Returns:
            Result[AssembledInvoiceDTO]: Assembled record with its state, or the
            acceptance error
        """
        # Step 1: Accept draft
        accepted = self.accept_draft.execute(draft)
        if accepted.is_err():
            return accepted

        # Step 2-3: Normalize and compute
        record = compute_record(normalize_record(accepted.value))

        # Step 4: Validate schedule
        if record.payment_schedule is None:
            return Return.ok(AssembledInvoiceDTO(state=InvoiceState.VALIDATED, record=record))

        summary = summarize_schedule(record.payment_schedule)
        if summary.is_valid:
            return Return.ok(
                AssembledInvoiceDTO(
                    state=InvoiceState.VALIDATED,
                    record=record,
                    schedule_summary=summary,
                )
            )

        logger.info(
            f"Invoice {record.invoice_number} schedule over-allocated: "
            f"{summary.total_percentage}%"
        )
        return Return.ok(
            AssembledInvoiceDTO(
                state=InvoiceState.COMPUTED,
                record=record,
                validation_failed=True,
                issues=[
                    ValidationIssue(
                        code="SCHEDULE_OVER_ALLOCATED",
                        message=f"Payment schedule allocates {summary.total_percentage}% "
                                f"of the invoice total; the maximum is 100%",
                    )
                ],
                schedule_summary=summary,
            )
        )
