"""UpdateInvoiceDraft Use Case

Applies a partial edit from the form layer to a draft.
"""

from typing import Any, Dict, Mapping
from libs.result import Result, Return, Error
from src.domain.invoice import InvoiceRecord
from .accept_draft import AcceptInvoiceDraft, DraftInput


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Nested objects merge key by key; lists and scalars are replaced"""
    merged = dict(base)
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class UpdateInvoiceDraft:
    """
    Use Case: Update a draft invoice

    Business Rules:
    1. The patch uses the serialized record shape (camelCase keys)
    2. Absent keys keep their current value; nested objects merge
    3. The merged draft is accepted again; derived fields are left for assembly
    """

    def __init__(self, accept_draft: AcceptInvoiceDraft = None):
        self.accept_draft = accept_draft or AcceptInvoiceDraft()

    def execute(self, draft: DraftInput, patch: Mapping[str, Any]) -> Result[InvoiceRecord]:
        """
        Execute draft update

        Args:
            draft: Current draft record or its serialized form
            patch: Partial record, e.g. {"tax": {"enabled": True}}

        Returns:
            Result[InvoiceRecord]: Updated draft, or the acceptance error
        """
        if not isinstance(patch, Mapping):
            return Return.err(
                Error(
                    code="INVALID_INVOICE_DATA",
                    message="Invoice update must be an object",
                    reason=f"Got {type(patch).__name__}",
                )
            )

        if isinstance(draft, InvoiceRecord):
            base = draft.model_dump(mode="json", by_alias=True)
        else:
            base = dict(draft)

        return self.accept_draft.execute(deep_merge(base, patch))
