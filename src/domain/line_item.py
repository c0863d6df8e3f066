"""Line Item Domain Entity

Tracks individual line items within an invoice.
"""

from decimal import Decimal
from typing import Dict, Optional, Union
from pydantic import Field, field_validator
from src.domain.base import BaseModel, generate_uuid

CustomFieldValue = Union[Decimal, str]


class LineItem(BaseModel):
    """
    Line Item - One row of the invoice item table

    Domain Rules:
    - total = quantity * unit_price, always recomputed by the pipeline
    - custom_fields only holds keys of currently defined custom columns
    - An empty custom_fields map is stored as absent
    """

    id: str = Field(
        default_factory=generate_uuid,
        description="Line item identifier"
    )

    description: str = Field(
        default="",
        description="Line item description"
    )

    quantity: Decimal = Field(
        default=Decimal("0"),
        description="Quantity (hours, units, man-days)"
    )

    unit_price: Decimal = Field(
        default=Decimal("0"),
        description="Price per unit"
    )

    total: Decimal = Field(
        default=Decimal("0"),
        description="quantity * unit_price (derived)"
    )

    custom_fields: Optional[Dict[str, CustomFieldValue]] = Field(
        default=None,
        description="Values for custom columns, keyed by column key"
    )

    @field_validator("custom_fields")
    @classmethod
    def drop_empty_custom_fields(cls, v):
        if not v:
            return None
        return v
