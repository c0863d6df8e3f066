from .pdf_service import ReportLabPdfService, ensure_fonts_registered

__all__ = [
    "ReportLabPdfService",
    "ensure_fonts_registered",
]
