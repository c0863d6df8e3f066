"""Column Management Use Cases

Apply a column operation to a draft and carry it over to the line items.
A refused operation leaves the draft untouched.
"""

import logging
from typing import Callable, List
from libs.result import Result, Return
from src.app.invoicing.columns import (
    add_column,
    normalize_columns,
    remove_column,
    reorder_columns,
    sync_items_with_columns,
    update_column,
)
from src.domain.column import ColumnDefinition
from src.domain.invoice import InvoiceRecord
from .accept_draft import AcceptInvoiceDraft, DraftInput
from .dtos import AddColumnCommandDTO, ReorderColumnsCommandDTO, UpdateColumnCommandDTO

logger = logging.getLogger(__name__)

ColumnOperation = Callable[[List[ColumnDefinition]], Result[List[ColumnDefinition]]]


class _ColumnUseCase:
    def __init__(self, accept_draft: AcceptInvoiceDraft = None):
        self.accept_draft = accept_draft or AcceptInvoiceDraft()

    def _apply(self, draft: DraftInput, operation: ColumnOperation) -> Result[InvoiceRecord]:
        accepted = self.accept_draft.execute(draft)
        if accepted.is_err():
            return accepted

        record = accepted.value
        old_columns = normalize_columns(record.columns)

        changed = operation(old_columns)
        if changed.is_err():
            logger.info(f"Column change refused on {record.invoice_number}: {changed.error.code}")
            return changed

        new_columns = changed.value
        items = sync_items_with_columns(record.items, old_columns, new_columns)
        return Return.ok(record.model_copy(update={"columns": new_columns, "items": items}))


class AddInvoiceColumn(_ColumnUseCase):
    """
    Use Case: Add a custom column

    Business Rules:
    1. Key must be well formed, not reserved and unique (INVALID_COLUMN_KEY)
    2. The column is appended at the right end
    3. Every item is seeded with the column's default value
    """

    def execute(self, draft: DraftInput, command: AddColumnCommandDTO) -> Result[InvoiceRecord]:
        return self._apply(
            draft,
            lambda columns: add_column(
                columns,
                key=command.key,
                label=command.label,
                value_type=command.value_type,
                required=command.required,
                width=command.width,
            ),
        )


class RemoveInvoiceColumn(_ColumnUseCase):
    """
    Use Case: Remove a column

    Business Rules:
    1. Required columns cannot be removed (REQUIRED_COLUMN)
    2. The column's values are deleted from every item
    """

    def execute(self, draft: DraftInput, column_id: str) -> Result[InvoiceRecord]:
        return self._apply(draft, lambda columns: remove_column(columns, column_id))


class UpdateInvoiceColumn(_ColumnUseCase):
    """
    Use Case: Patch a column

    A renamed custom key moves to the new key on every item with the column's
    default value; the old values are dropped.
    """

    def execute(self, draft: DraftInput, command: UpdateColumnCommandDTO) -> Result[InvoiceRecord]:
        return self._apply(draft, lambda columns: update_column(columns, command.column_id, command.patch))


class ReorderInvoiceColumns(_ColumnUseCase):
    """Use Case: Move a column to another position"""

    def execute(self, draft: DraftInput, command: ReorderColumnsCommandDTO) -> Result[InvoiceRecord]:
        return self._apply(
            draft,
            lambda columns: reorder_columns(columns, command.from_index, command.to_index),
        )
