"""Integration tests for Invoice API endpoints"""

import pytest
from decimal import Decimal
from unittest.mock import MagicMock
from httpx import AsyncClient

from config import ApplicationConfig
from src.depends import get_pdf_service

INVOICES_URL = f"{ApplicationConfig.API_PREFIX}/invoices"


class TestAssembleInvoiceAPI:
    """Integration tests for POST /invoices/assemble"""

    @pytest.mark.asyncio
    async def test_assemble_success(self, client: AsyncClient, sample_draft):
        """POST /assemble with a valid draft returns 200 and derived amounts"""
        # Act
        response = await client.post(f"{INVOICES_URL}/assemble", json=sample_draft)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "validated"
        assert data["validationFailed"] is False
        assert Decimal(data["record"]["subtotal"]) == Decimal("1000")
        assert Decimal(data["record"]["tax"]["amount"]) == Decimal("70")
        assert Decimal(data["record"]["total"]) == Decimal("1070")
        assert [Decimal(entry["amount"]) for entry in data["record"]["paymentSchedule"]] == [
            Decimal("321"), Decimal("642"), Decimal("107"),
        ]

    @pytest.mark.asyncio
    async def test_assemble_over_allocated(self, client: AsyncClient, sample_draft):
        """POST /assemble reports an over-allocated schedule without failing"""
        # Arrange
        sample_draft["paymentSchedule"][0]["percentage"] = 50

        # Act
        response = await client.post(f"{INVOICES_URL}/assemble", json=sample_draft)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "computed"
        assert data["validationFailed"] is True
        assert data["issues"][0]["code"] == "SCHEDULE_OVER_ALLOCATED"
        assert Decimal(data["scheduleSummary"]["remaining"]) == Decimal("-20")

    @pytest.mark.asyncio
    async def test_assemble_missing_fields(self, client: AsyncClient, sample_draft):
        """POST /assemble without an invoice number returns 400"""
        # Arrange
        del sample_draft["invoiceNumber"]

        # Act
        response = await client.post(f"{INVOICES_URL}/assemble", json=sample_draft)

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INVOICE_DATA"

    @pytest.mark.asyncio
    async def test_assemble_non_object_body(self, client: AsyncClient):
        """POST /assemble with an array body returns 400"""
        response = await client.post(f"{INVOICES_URL}/assemble", json=[1, 2, 3])

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestFinalizeInvoiceAPI:
    """Integration tests for POST /invoices/finalize"""

    @pytest.mark.asyncio
    async def test_finalize_success(self, client: AsyncClient, sample_draft):
        # Act
        response = await client.post(f"{INVOICES_URL}/finalize", json=sample_draft)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["record"]["total"]) == Decimal("1070")
        kinds = [block["kind"] for block in data["layout"]["blocks"]]
        assert kinds == [
            "header", "address", "item_table", "totals", "payment_schedule", "bank_details", "footer",
        ]

    @pytest.mark.asyncio
    async def test_finalize_refused(self, client: AsyncClient, sample_draft):
        """POST /finalize with a schedule over 100% returns 400"""
        # Arrange
        sample_draft["paymentSchedule"][2]["percentage"] = 20

        # Act
        response = await client.post(f"{INVOICES_URL}/finalize", json=sample_draft)

        # Assert
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "SCHEDULE_OVER_ALLOCATED"
        assert error["message"] == "Invoice cannot be finalized until validation passes"


    @pytest.mark.asyncio
    async def test_finalize_very_large_amounts(self, client: AsyncClient, sample_draft):
        """POST /finalize with amounts past 28 digits returns 200 with every digit laid out"""
        # Arrange
        sample_draft["items"][0]["quantity"] = "10000000000000"
        sample_draft["items"][0]["unitPrice"] = "10000000000000"

        # Act
        response = await client.post(f"{INVOICES_URL}/finalize", json=sample_draft)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["record"]["total"]) == Decimal("1.07E+26")
        totals = next(block for block in data["layout"]["blocks"] if block["kind"] == "totals")
        assert totals["rows"][-1]["cells"][-1]["text"] == "$107,000,000,000,000,000,000,000,000.00"

    @pytest.mark.asyncio
    async def test_download_pdf_very_large_amounts(self, client: AsyncClient, sample_draft):
        sample_draft["items"][0]["quantity"] = "10000000000000"
        sample_draft["items"][0]["unitPrice"] = "10000000000000"

        response = await client.post(f"{INVOICES_URL}/pdf", json=sample_draft)

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")


class TestInvoicePdfAPI:
    """Integration tests for POST /invoices/pdf"""

    @pytest.mark.asyncio
    async def test_download_pdf(self, client: AsyncClient, sample_draft):
        # Act
        response = await client.post(f"{INVOICES_URL}/pdf", json=sample_draft)

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == "attachment; filename=invoice_INV-FRL-2025-001.pdf"
        assert response.content.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_download_pdf_refused(self, client: AsyncClient, sample_draft):
        sample_draft["paymentSchedule"][1]["percentage"] = 90

        response = await client.post(f"{INVOICES_URL}/pdf", json=sample_draft)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "SCHEDULE_OVER_ALLOCATED"

    @pytest.mark.asyncio
    async def test_download_pdf_renderer_failure(self, app, client: AsyncClient, sample_draft):
        """POST /pdf returns 500 when the renderer raises"""
        # Arrange
        failing_service = MagicMock()
        failing_service.render.side_effect = RuntimeError("renderer crashed")
        app.dependency_overrides[get_pdf_service] = lambda: failing_service

        # Act
        response = await client.post(f"{INVOICES_URL}/pdf", json=sample_draft)

        # Assert
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "GENERATE_INVOICE_PDF_FAILED"


class TestHealthAPI:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
