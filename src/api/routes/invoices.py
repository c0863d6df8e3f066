"""Invoice API Routes

FastAPI routes for invoice assembly, finalization and PDF export. Request
bodies are invoice drafts in the serialized record shape.
"""

import base64
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoicing.assemble_invoice import AssembleInvoice
from src.app.use_cases.invoicing.build_layout import BuildInvoiceLayout
from src.app.use_cases.invoicing.dtos import AssembledInvoiceDTO, FinalizedInvoiceDTO
from src.app.use_cases.invoicing.generate_invoice_pdf import GenerateInvoicePdf
from src.depends import get_assemble_invoice, get_build_invoice_layout, get_pdf_service
from src.api.error import ClientError

router = APIRouter(prefix="/invoices", tags=["Invoices"])

_ERROR_RESPONSES = {
    400: {
        "description": "Invalid invoice data or finalization refused",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "SCHEDULE_OVER_ALLOCATED",
                        "message": "Invoice cannot be finalized until validation passes"
                    }
                }
            }
        }
    }
}


@router.post(
    "/assemble",
    response_model=AssembledInvoiceDTO,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def assemble_invoice(
    draft: Dict[str, Any] = Body(...),
    use_case: AssembleInvoice = Depends(get_assemble_invoice),
):
    """
    Normalize a draft and recompute every derived amount.

    An over-allocated payment schedule is not an error here: the response has
    `state: "computed"`, `validationFailed: true` and the issue listed.

    **Returns:**
    - 200: Assembled record with its pipeline state
    - 400: Draft is malformed or its columns are inconsistent
    """
    result = use_case.execute(draft)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/finalize",
    response_model=FinalizedInvoiceDTO,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def finalize_invoice(
    draft: Dict[str, Any] = Body(...),
    use_case: BuildInvoiceLayout = Depends(get_build_invoice_layout),
):
    """
    Finalize a draft and return it with its document layout.

    **Returns:**
    - 200: Finalized record and ordered layout blocks
    - 400: Draft is malformed or validation failed
    """
    result = use_case.execute(draft)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        **_ERROR_RESPONSES,
        500: {
            "description": "Rendering failed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "GENERATE_INVOICE_PDF_FAILED",
                            "message": "Failed to generate invoice PDF"
                        }
                    }
                }
            }
        }
    }
)
async def download_invoice_pdf(
    draft: Dict[str, Any] = Body(...),
    build_invoice_layout: BuildInvoiceLayout = Depends(get_build_invoice_layout),
    pdf_service: PdfService = Depends(get_pdf_service),
):
    """
    Finalize a draft and return it as a PDF file.

    **Returns:**
    - 200: PDF file as binary response
    - 400: Draft is malformed or validation failed
    - 500: Renderer failed
    """
    use_case = GenerateInvoicePdf(pdf_service, build_invoice_layout)
    result = await run_in_threadpool(use_case.execute, draft)

    if result.is_err():
        if result.error.code == "GENERATE_INVOICE_PDF_FAILED":
            raise ClientError(result.error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        raise ClientError(result.error)

    pdf_bytes = base64.b64decode(result.value.pdf_base64)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=invoice_{result.value.invoice_number}.pdf"
        }
    )
