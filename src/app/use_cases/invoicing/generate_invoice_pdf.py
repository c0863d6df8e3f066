"""GenerateInvoicePdf Use Case

Finalizes a draft, lays it out and renders it through the PDF service.
"""

import base64
import logging
from datetime import datetime, timezone
from libs.result import Result, Return, Error
from src.app.services.pdf_service import PdfService
from .accept_draft import DraftInput
from .build_layout import BuildInvoiceLayout
from .dtos import InvoicePdfDTO

logger = logging.getLogger(__name__)


class GenerateInvoicePdf:
    """
    Use Case: Generate invoice PDF

    Business Rules:
    1. Only a finalized record is exported; validation failures block export
    2. Renderer failures are reported as GENERATE_INVOICE_PDF_FAILED
    3. Returns PDF as base64-encoded string with the invoice amounts

    Flow:
    1. Finalize and lay out the draft
    2. Render PDF using PDF service
    3. Return response with PDF as base64
    """

    def __init__(self, pdf_service: PdfService, build_invoice_layout: BuildInvoiceLayout = None):
        self.pdf_service = pdf_service
        self.build_invoice_layout = build_invoice_layout or BuildInvoiceLayout()

    def execute(self, draft: DraftInput) -> Result[InvoicePdfDTO]:
        """
        Execute invoice PDF generation

        Args:
            draft: Draft record or its serialized form

        Returns:
            Result[InvoicePdfDTO]: Success with PDF or error
        """
        # Step 1: Finalize and lay out
        built = self.build_invoice_layout.execute(draft)
        if built.is_err():
            return built

        record = built.value.record

        # Step 2: Render PDF
        try:
            pdf_bytes = self.pdf_service.render(built.value.layout)
        except Exception as e:
            logger.exception(f"Rendering invoice {record.invoice_number} failed")
            return Return.err(
                Error(
                    code="GENERATE_INVOICE_PDF_FAILED",
                    message="Failed to generate invoice PDF",
                    reason=str(e),
                )
            )

        # Step 3: Build response
        discount_amount = record.discount.amount if record.discount is not None else 0
        response = InvoicePdfDTO(
            invoice_number=record.invoice_number,
            currency=record.currency,
            subtotal=record.subtotal,
            tax_amount=record.tax.amount,
            discount_amount=discount_amount,
            total=record.total,
            pdf_base64=base64.b64encode(pdf_bytes).decode("utf-8"),
            generated_at=datetime.now(timezone.utc),
        )

        logger.info(f"Generated PDF for invoice {record.invoice_number} ({len(pdf_bytes)} bytes)")
        return Return.ok(response)
