"""Unit tests for the document layout engine"""

import pytest
from decimal import Decimal
from pydantic import ValidationError
from src.app.invoicing.blocks import Align, PageNumberPlaceholder, TableColumn
from src.app.invoicing.layout import (
    LayoutOptions,
    build_layout,
    format_percent,
    parse_width,
    resolve_column_widths,
)
from src.app.use_cases.invoicing.assemble_invoice import compute_record, normalize_record
from src.domain.column import ColumnType
from src.domain.invoice import InvoiceRecord


def assemble(draft) -> InvoiceRecord:
    return compute_record(normalize_record(InvoiceRecord.model_validate(draft)))


def table_column(weight, width=None):
    return TableColumn(key="k", label="K", value_type=ColumnType.TEXT, align=Align.LEFT, weight=weight, width=width)


class TestBlockOrder:
    """Test block sequence and conditional sections"""

    def test_full_layout_order(self, sample_draft):
        layout = build_layout(assemble(sample_draft))

        assert layout.kinds() == [
            "header", "address", "item_table", "totals", "payment_schedule", "bank_details", "footer",
        ]

    def test_schedule_hidden_unless_requested(self, sample_draft):
        sample_draft["showPaymentSchedule"] = False

        layout = build_layout(assemble(sample_draft))

        assert layout.kinds() == ["header", "address", "item_table", "totals", "footer"]

    def test_schedule_hidden_when_empty(self, sample_draft):
        """Test bank details disappear together with an empty schedule"""
        sample_draft["paymentSchedule"] = []

        layout = build_layout(assemble(sample_draft))

        assert layout.find("payment_schedule") is None
        assert layout.find("bank_details") is None


class TestHeaderAndAddresses:
    """Test header and address blocks"""

    def test_header(self, sample_draft):
        header = build_layout(assemble(sample_draft)).find("header")

        assert header.title == "INVOICE"
        assert header.invoice_number == "INV-FRL-2025-001"
        assert header.invoice_date == "15-01-2025"
        assert header.due_date == "14-02-2025"
        assert header.logo is None

    def test_due_date_falls_back_to_payment_info(self, sample_draft):
        del sample_draft["dueDate"]
        sample_draft["payment"]["dueDate"] = "2025-03-01"

        header = build_layout(assemble(sample_draft)).find("header")

        assert header.due_date == "01-03-2025"

    def test_address_lines(self, sample_draft):
        section = build_layout(assemble(sample_draft)).find("address")

        assert section.sender.label == "From"
        assert section.sender.lines == [
            "John Doe", "REG123456", "Your Company Name", "123 Business Street",
            "123456", "contact@yourcompany.com", "+65 1234 5678",
        ]
        assert section.recipient.label == "To"
        assert section.recipient.lines[:3] == ["John Smith", "REG654321", "Client Company Ltd"]

    def test_company_line_omitted_when_same_as_name(self, sample_draft):
        sample_draft["company"].pop("ownerName")
        sample_draft["client"] = {"companyName": "Solo Ltd"}

        section = build_layout(assemble(sample_draft)).find("address")

        assert section.sender.lines.count("Your Company Name") == 1
        assert section.recipient.lines == ["Solo Ltd"]

    def test_unnamed_client(self, sample_draft):
        sample_draft["client"] = {}

        section = build_layout(assemble(sample_draft)).find("address")

        assert section.recipient.lines == ["Client"]


class TestItemTable:
    """Test item table header, cells and weights"""

    def test_header_labels_and_alignment(self, sample_draft):
        table = build_layout(assemble(sample_draft)).find("item_table")

        assert [cell.text for cell in table.header.cells] == ["DESCRIPTION", "QUANTITY", "RATE (USD)", "TOTAL (USD)"]
        assert [cell.align for cell in table.header.cells] == [Align.LEFT, Align.RIGHT, Align.RIGHT, Align.RIGHT]
        assert [column.weight for column in table.columns] == [3, 1, 1, 1]

    def test_row_cells(self, sample_draft):
        table = build_layout(assemble(sample_draft)).find("item_table")

        assert [cell.text for cell in table.rows[0].cells] == ["Service Description", "1", "$1,000.00", "$1,000.00"]

    def test_custom_columns(self, sample_draft):
        sample_draft["columns"] = [
            {"id": "desc", "key": "description", "label": "Description", "type": "text", "required": True, "order": 0},
            {"id": "code", "key": "projectCode", "label": "Project Code", "type": "text", "order": 1},
            {"id": "qty", "key": "quantity", "label": "Hours", "type": "number", "required": True, "order": 2},
            {"id": "rate", "key": "unitPrice", "label": "Rate", "type": "currency", "required": True, "order": 3},
            {"id": "fee", "key": "fee", "label": "Fee", "type": "currency", "order": 4},
            {"id": "total", "key": "total", "label": "Total", "type": "currency", "order": 5},
        ]
        sample_draft["currency"] = "EUR"
        sample_draft["items"][0]["quantity"] = 2.5
        sample_draft["items"][0]["customFields"] = {"projectCode": "PX-9", "fee": 12}

        table = build_layout(assemble(sample_draft)).find("item_table")

        assert [cell.text for cell in table.header.cells] == [
            "DESCRIPTION", "PROJECT CODE", "HOURS", "RATE (EUR)", "FEE (EUR)", "TOTAL (EUR)",
        ]
        assert [cell.text for cell in table.rows[0].cells] == [
            "Service Description", "PX-9", "2.5", "€1,000.00", "€12.00", "€2,500.00",
        ]

    def test_amounts_beyond_default_precision(self, sample_draft):
        """Test very large amounts still format with every digit"""
        # Arrange
        sample_draft["items"][0]["quantity"] = "10000000000000"
        sample_draft["items"][0]["unitPrice"] = "10000000000000"

        # Act
        layout = build_layout(assemble(sample_draft))

        # Assert
        row = layout.find("item_table").rows[0]
        assert [cell.text for cell in row.cells] == [
            "Service Description", "10000000000000", "$10,000,000,000,000.00", "$100,000,000,000,000,000,000,000,000.00",
        ]
        totals = layout.find("totals")
        assert totals.rows[-1].cells[-1].text == "$107,000,000,000,000,000,000,000,000.00"


class TestTotals:
    """Test totals rows and slot placement"""

    def test_totals_rows(self, sample_draft):
        totals = build_layout(assemble(sample_draft)).find("totals")

        assert [row.label for row in totals.rows] == ["SUBTOTAL (USD)", "GST (7%) (USD)", "TOTAL (USD)"]
        assert [row.amount for row in totals.rows] == [Decimal("1000"), Decimal("70"), Decimal("1070")]
        assert [row.emphasized for row in totals.rows] == [False, False, True]

    def test_label_and_amount_slots(self, sample_draft):
        totals = build_layout(assemble(sample_draft)).find("totals")

        cells = totals.rows[-1].cells
        assert [cell.text for cell in cells] == ["", "", "TOTAL (USD)", "$1,070.00"]
        assert cells[2].align == Align.RIGHT
        assert cells[3].emphasized is True

    def test_single_column_shares_slot(self, sample_draft):
        sample_draft["columns"] = [
            {"id": "desc", "key": "description", "label": "Description", "type": "text", "required": True},
        ]

        totals = build_layout(assemble(sample_draft)).find("totals")

        assert [cell.text for cell in totals.rows[0].cells] == ["SUBTOTAL (USD) $1,000.00"]

    def test_tax_row_omitted_when_disabled(self, sample_draft):
        sample_draft["tax"]["enabled"] = False

        totals = build_layout(assemble(sample_draft)).find("totals")

        assert [row.row_kind.value for row in totals.rows] == ["subtotal", "total"]

    def test_tax_label_defaults(self, sample_draft):
        sample_draft["tax"]["label"] = None

        totals = build_layout(assemble(sample_draft)).find("totals")

        assert totals.rows[1].label == "TAX (7%) (USD)"

    def test_discount_row(self, sample_draft):
        sample_draft["discount"] = {"rate": 10, "amount": 0, "description": "Loyalty"}

        totals = build_layout(assemble(sample_draft)).find("totals")

        discount = totals.rows[1]
        assert discount.label == "DISCOUNT (Loyalty) (10%) (USD)"
        assert discount.amount == Decimal("-100")
        assert discount.cells[-1].text == "-$100.00"
        assert totals.rows[-1].amount == Decimal("970")


class TestScheduleBankAndFooter:
    """Test payment schedule, bank details and footer blocks"""

    def test_schedule_rows(self, sample_draft):
        schedule = build_layout(assemble(sample_draft)).find("payment_schedule")

        assert schedule.title == "PAYMENT SCHEDULE"
        assert [(row.description, row.percentage, row.amount) for row in schedule.rows] == [
            ("Upon signing", "30%", "$321.00"),
            ("Upon delivery", "60%", "$642.00"),
            ("Upon acceptance", "10%", "$107.00"),
        ]

    def test_bank_details(self, sample_draft):
        bank = build_layout(assemble(sample_draft)).find("bank_details")

        assert bank.title == "Bank Transfer Details"
        assert [(entry.label, entry.value) for entry in bank.entries] == [
            ("Bank Name", "DBS Bank"),
            ("Account Name", "Resetrix Pte Ltd"),
            ("Account Number", "123-456789-001"),
            ("SWIFT Code", "DBSSSGSG"),
        ]

    def test_bank_placeholders_skipped(self, sample_draft):
        sample_draft["payment"]["bankDetails"] = {
            "bankName": "Bank Name", "accountName": "  ", "accountNumber": "001-2", "swiftCode": "SWIFT",
        }

        bank = build_layout(assemble(sample_draft)).find("bank_details")

        assert [entry.label for entry in bank.entries] == ["Account Number"]

    def test_padded_bank_placeholders_skipped(self, sample_draft):
        sample_draft["payment"]["bankDetails"] = {
            "bankName": " Bank Name ", "accountName": "Account Name  ", "accountNumber": " 001-2 ", "swiftCode": "DBSSSGSG",
        }

        bank = build_layout(assemble(sample_draft)).find("bank_details")

        assert [entry.label for entry in bank.entries] == ["Account Number", "SWIFT Code"]

    def test_footer_and_metadata(self, sample_draft):
        options = LayoutOptions(footer_text="Custom footer", document_title="Acme Invoices")

        layout = build_layout(assemble(sample_draft), options)

        footer = layout.find("footer")
        assert footer.text == "Custom footer"
        assert footer.page_number.resolve(2, 3) == "Page 2 of 3"
        assert layout.metadata.title == "Acme Invoices"
        assert layout.metadata.author == "John Doe"

    def test_options_from_camel_case(self):
        options = LayoutOptions.model_validate({"footerText": "Paid in full", "documentTitle": "Receipts"})

        assert options.footer_text == "Paid in full"
        assert options.document_title == "Receipts"
        assert options.title == "INVOICE"

    def test_options_are_frozen(self):
        options = LayoutOptions()

        with pytest.raises(ValidationError):
            options.title = "RECEIPT"

    def test_placeholder_template(self):
        assert PageNumberPlaceholder(template="{page}/{total}").resolve(1, 4) == "1/4"


class TestColumnWidths:
    """Test width parsing and resolution"""

    @pytest.mark.parametrize(
        "width, expected",
        [("72", 72.0), ("72pt", 72.0), ("1in", 72.0), ("2.54cm", 72.0), ("25%", 150.0)],
    )
    def test_parse_width(self, width, expected):
        assert parse_width(width, 600.0) == pytest.approx(expected)

    @pytest.mark.parametrize("width", [None, "", "wide", "-5mm"])
    def test_unparseable_width_is_flexible(self, width):
        assert parse_width(width, 600.0) is None

    def test_weighted_widths(self):
        columns = [table_column(3), table_column(1), table_column(1), table_column(1)]

        assert resolve_column_widths(columns, 600.0) == pytest.approx([300.0, 100.0, 100.0, 100.0])

    def test_fixed_width_overrides_weight(self):
        columns = [table_column(3), table_column(1, "20%"), table_column(1), table_column(1)]

        assert resolve_column_widths(columns, 600.0) == pytest.approx([288.0, 120.0, 96.0, 96.0])

    def test_fixed_widths_exceeding_space(self):
        columns = [table_column(3), table_column(1, "700")]

        assert resolve_column_widths(columns, 600.0) == pytest.approx([0.0, 700.0])


class TestFormatPercent:
    @pytest.mark.parametrize(
        "value, expected",
        [(Decimal("7.00"), "7"), (Decimal("7.5"), "7.5"), (Decimal("33.3333"), "33.33"), (Decimal("100"), "100")],
    )
    def test_format_percent(self, value, expected):
        assert format_percent(value) == expected
