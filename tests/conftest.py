import pytest


@pytest.fixture
def sample_draft():
    """Draft as the entry form submits it: camelCase keys, derived amounts stale"""
    return {
        "invoiceNumber": "INV-FRL-2025-001",
        "invoiceDate": "2025-01-15",
        "dueDate": "2025-02-14",
        "currency": "USD",
        "status": "draft",
        "company": {
            "ownerName": "John Doe",
            "name": "Your Company Name",
            "registrationNumber": "REG123456",
            "address": "123 Business Street",
            "city": "Singapore",
            "country": "Singapore",
            "postalCode": "123456",
            "email": "contact@yourcompany.com",
            "phone": "+65 1234 5678",
        },
        "client": {
            "name": "John Smith",
            "companyName": "Client Company Ltd",
            "address": "456 Client Avenue",
            "postalCode": "654321",
            "email": "client@clientcompany.com",
            "phone": "+65 8765 4321",
            "registrationNumber": "REG654321",
        },
        "items": [
            {"id": "1", "description": "Service Description", "quantity": 1, "unitPrice": 1000, "total": 0},
        ],
        "subtotal": 0,
        "tax": {"enabled": True, "rate": 0.07, "amount": 0, "label": "GST"},
        "total": 0,
        "payment": {
            "bankDetails": {
                "bankName": "DBS Bank",
                "accountNumber": "123-456789-001",
                "swiftCode": "DBSSSGSG",
                "accountName": "Resetrix Pte Ltd",
            },
        },
        "paymentSchedule": [
            {"id": "1", "description": "Upon signing", "percentage": 30, "amount": 0},
            {"id": "2", "description": "Upon delivery", "percentage": 60, "amount": 0},
            {"id": "3", "description": "Upon acceptance", "percentage": 10, "amount": 0},
        ],
        "showPaymentSchedule": True,
        "notes": "Thank you for your business!",
    }
