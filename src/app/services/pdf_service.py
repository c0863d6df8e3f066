"""PDF Generation Service Interface

Defines the contract for rendering a laid-out invoice to PDF.
"""

from abc import ABC, abstractmethod
from src.app.invoicing.blocks import DocumentLayout


class PdfService(ABC):
    """
    Service interface for PDF generation

    Implementations own pagination, fonts and page-number resolution; the
    layout decides structure and proportions only.
    """

    @abstractmethod
    def render(self, layout: DocumentLayout) -> bytes:
        """
        Render an invoice layout

        Args:
            layout: Ordered document blocks with metadata

        Returns:
            PDF document as bytes
        """
        pass
