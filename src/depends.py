from config import ApplicationConfig
from src.adapter.services.pdf_service import ReportLabPdfService
from src.app.invoicing.layout import LayoutOptions
from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoicing.accept_draft import AcceptInvoiceDraft
from src.app.use_cases.invoicing.assemble_invoice import AssembleInvoice
from src.app.use_cases.invoicing.build_layout import BuildInvoiceLayout
from src.app.use_cases.invoicing.finalize_invoice import FinalizeInvoice


def get_pdf_service() -> PdfService:
    return ReportLabPdfService(
        page_size=ApplicationConfig.PDF_PAGE_SIZE,
        margin=float(ApplicationConfig.PDF_MARGIN_PT),
        font_path=ApplicationConfig.PDF_FONT_PATH,
        bold_font_path=ApplicationConfig.PDF_BOLD_FONT_PATH,
    )


def get_layout_options() -> LayoutOptions:
    return LayoutOptions(
        footer_text=ApplicationConfig.PDF_FOOTER_TEXT,
        document_title=ApplicationConfig.PDF_DOCUMENT_TITLE,
    )


def get_assemble_invoice() -> AssembleInvoice:
    return AssembleInvoice(AcceptInvoiceDraft(default_currency=ApplicationConfig.DEFAULT_CURRENCY))


def get_build_invoice_layout() -> BuildInvoiceLayout:
    return BuildInvoiceLayout(
        options=get_layout_options(),
        finalize_invoice=FinalizeInvoice(get_assemble_invoice()),
    )
