"""AcceptInvoiceDraft Use Case

Entry point of the assembly pipeline: turns raw form or imported data into a
draft invoice record, or refuses it with a reason.
"""

import logging
from typing import Any, Mapping, Union
from pydantic import ValidationError
from libs.result import Result, Return, Error
from src.app.invoicing.columns import validate_column_set
from src.app.invoicing.currency import DEFAULT_CURRENCY
from src.domain.invoice import InvoiceRecord

logger = logging.getLogger(__name__)

DraftInput = Union[InvoiceRecord, Mapping[str, Any]]


def describe_validation_error(error: ValidationError, limit: int = 5) -> str:
    """'items.0.quantity: Input should be a valid decimal; ...'"""
    parts = []
    for detail in error.errors()[:limit]:
        location = ".".join(str(part) for part in detail.get("loc", ())) or "record"
        parts.append(f"{location}: {detail.get('msg')}")
    if error.error_count() > limit:
        parts.append(f"and {error.error_count() - limit} more")
    return "; ".join(parts)


class AcceptInvoiceDraft:
    """
    Use Case: Accept a draft invoice

    Business Rules:
    1. Input must have the shape of an invoice record (camelCase or snake_case)
    2. Required top-level fields must be present; no partial recovery
    3. The column set must be consistent (unique, well-formed keys)
    4. A missing or empty currency takes the configured default

    The accepted record is a Draft: derived amounts are not trusted yet.
    """

    def __init__(self, default_currency: str = DEFAULT_CURRENCY):
        self.default_currency = default_currency

    def execute(self, raw: DraftInput) -> Result[InvoiceRecord]:
        """
        Execute draft acceptance

        Args:
            raw: Invoice record, or a mapping shaped like its serialized form

        Returns:
            Result[InvoiceRecord]: Draft record, or INVALID_INVOICE_DATA /
            INVALID_COLUMN_CONFIGURATION
        """
        if isinstance(raw, InvoiceRecord):
            record = raw
        elif isinstance(raw, Mapping):
            data = dict(raw)
            if not data.get("currency"):
                data["currency"] = self.default_currency
            try:
                record = InvoiceRecord.model_validate(data)
            except ValidationError as e:
                reason = describe_validation_error(e)
                logger.info(f"Rejected invoice draft: {reason}")
                return Return.err(
                    Error(
                        code="INVALID_INVOICE_DATA",
                        message="Invoice data is missing required fields or has invalid values",
                        reason=reason,
                    )
                )
        else:
            return Return.err(
                Error(
                    code="INVALID_INVOICE_DATA",
                    message="Invoice data must be an object",
                    reason=f"Got {type(raw).__name__}",
                )
            )

        problem = validate_column_set(record.columns)
        if problem is not None:
            logger.info(f"Rejected invoice draft {record.invoice_number}: {problem}")
            return Return.err(
                Error(
                    code="INVALID_COLUMN_CONFIGURATION",
                    message="Invoice columns are inconsistent",
                    reason=problem,
                )
            )

        return Return.ok(record)
