"""Column Domain Entity

Describes one column of the invoice item table, built-in or custom.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from pydantic import AliasChoices, Field
from src.domain.base import BaseModel


class ColumnType(str, Enum):
    """Value type of a column's cells"""
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"

    @property
    def is_numeric(self) -> bool:
        return self in (ColumnType.NUMBER, ColumnType.CURRENCY)


# Keys backed by LineItem attributes rather than custom_fields
BUILT_IN_KEYS: tuple[str, ...] = ("description", "quantity", "unitPrice", "total")

# "id" is the line item identifier and cannot name a custom column either
RESERVED_KEYS: tuple[str, ...] = ("id",) + BUILT_IN_KEYS


class ColumnDefinition(BaseModel):
    """
    Column Definition - One column of the item table

    Domain Rules:
    - key is unique within a column set and matches [A-Za-z][A-Za-z0-9_]*
    - Reserved keys are only allowed on the matching built-in column
    - order is dense (0..n-1) after every column operation
    - Required columns cannot be removed
    """

    id: str = Field(
        description="Unique column identifier"
    )

    key: str = Field(
        description="Business key (built-in field name or custom field key)"
    )

    label: str = Field(
        description="Display label for the table header"
    )

    value_type: ColumnType = Field(
        default=ColumnType.TEXT,
        validation_alias=AliasChoices("valueType", "value_type", "type"),
        serialization_alias="valueType",
        description="Cell value type (text, number, currency)"
    )

    required: bool = Field(
        default=False,
        description="Required columns cannot be removed"
    )

    order: int = Field(
        default=0,
        description="Left-to-right rendering position"
    )

    width: Optional[str] = Field(
        default=None,
        description="Optional fixed width (e.g. '30mm', '20%', '80pt')"
    )

    @property
    def is_built_in(self) -> bool:
        return self.key in BUILT_IN_KEYS

    @property
    def default_value(self) -> Union[Decimal, str]:
        """Seed value for a new custom field of this column"""
        return Decimal("0") if self.value_type.is_numeric else ""


class CellValue(BaseModel):
    """
    Typed value of one table cell

    Exactly one of text/number is set. value_type records which slot the
    column model resolved the value into.
    """

    value_type: ColumnType = Field(
        description="Resolved cell type"
    )

    text: Optional[str] = Field(
        default=None,
        description="Text value (text columns, or unparseable numeric input)"
    )

    number: Optional[Decimal] = Field(
        default=None,
        description="Numeric value (number and currency columns)"
    )

    @classmethod
    def of_text(cls, text: str) -> "CellValue":
        return cls(value_type=ColumnType.TEXT, text=text)

    @classmethod
    def of_number(cls, number: Decimal, value_type: ColumnType = ColumnType.NUMBER) -> "CellValue":
        return cls(value_type=value_type, number=number)
