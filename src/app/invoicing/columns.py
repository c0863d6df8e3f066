"""Column Model

Operations on the item table's column set, and synchronization of line item
custom fields with that set. This module is the only place that translates a
column's business key into a typed cell value.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional
from libs.result import Result, Return, Error
from src.domain.base import generate_uuid
from src.domain.column import (
    RESERVED_KEYS,
    CellValue,
    ColumnDefinition,
    ColumnType,
)
from src.domain.line_item import LineItem

COLUMN_KEY_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# LineItem attribute behind each built-in key
_BUILT_IN_ATTRIBUTES = {
    "description": "description",
    "quantity": "quantity",
    "unitPrice": "unit_price",
    "total": "total",
}


# Patch keys accepted by update_column, by field name or wire alias
_PATCHABLE_FIELDS = {
    "key": "key",
    "label": "label",
    "value_type": "value_type",
    "valueType": "value_type",
    "type": "value_type",
    "required": "required",
    "order": "order",
    "width": "width",
}


class ColumnKeyError(str, Enum):
    """Reasons a column key is refused"""
    EMPTY = "Column key is required"
    INVALID_FORMAT = (
        "Column key must start with a letter and contain only letters, numbers, and underscores"
    )
    RESERVED = "This key is reserved and cannot be used"
    DUPLICATE = "Column key must be unique"


def generate_column_id() -> str:
    return f"col_{generate_uuid()[:12]}"


def get_default_columns() -> List[ColumnDefinition]:
    """The four built-in columns in their canonical order"""
    return [
        ColumnDefinition(id="desc", key="description", label="Description",
                         value_type=ColumnType.TEXT, required=True, order=0),
        ColumnDefinition(id="qty", key="quantity", label="Quantity",
                         value_type=ColumnType.NUMBER, required=True, order=1),
        ColumnDefinition(id="rate", key="unitPrice", label="Rate",
                         value_type=ColumnType.CURRENCY, required=True, order=2),
        ColumnDefinition(id="total", key="total", label="Total",
                         value_type=ColumnType.CURRENCY, required=False, order=3),
    ]


def sort_columns(columns: List[ColumnDefinition]) -> List[ColumnDefinition]:
    """Columns by order; sorted() is stable so ties keep insertion order"""
    return sorted(columns, key=lambda column: column.order)


def _renumber(columns: List[ColumnDefinition]) -> List[ColumnDefinition]:
    return [
        column if column.order == index else column.model_copy(update={"order": index})
        for index, column in enumerate(columns)
    ]


def normalize_columns(columns: Optional[List[ColumnDefinition]]) -> List[ColumnDefinition]:
    """Sorted, densely ordered column list; the defaults when none are given"""
    if not columns:
        return get_default_columns()
    return _renumber(sort_columns(columns))


def validate_column_key(
    key: Optional[str],
    columns: List[ColumnDefinition],
    exclude_id: Optional[str] = None,
) -> Optional[ColumnKeyError]:
    """
    Check a proposed custom column key

    Args:
        key: Proposed key (surrounding whitespace ignored)
        columns: Current column set
        exclude_id: Column being edited, left out of the uniqueness check

    Returns:
        None when the key is valid, otherwise the reason it is refused
    """
    if not key or not key.strip():
        return ColumnKeyError.EMPTY

    key = key.strip()
    if not COLUMN_KEY_PATTERN.match(key):
        return ColumnKeyError.INVALID_FORMAT

    if key in RESERVED_KEYS:
        return ColumnKeyError.RESERVED

    if any(column.key == key and column.id != exclude_id for column in columns):
        return ColumnKeyError.DUPLICATE

    return None


def validate_column_set(columns: List[ColumnDefinition]) -> Optional[str]:
    """
    Check an imported column set as a whole

    Built-in keys are accepted on their own columns; every other key must pass
    the same checks as a newly added column.

    Returns:
        None when the set is consistent, otherwise a description of the first problem
    """
    seen: set[str] = set()
    for column in columns:
        if column.key in seen:
            return f"Duplicate column key '{column.key}'"
        seen.add(column.key)

        if column.is_built_in:
            continue

        reason = validate_column_key(column.key, [])
        if reason is not None:
            return f"Column '{column.key}': {reason.value}"

    return None


def _key_error(reason: ColumnKeyError, key: Optional[str]) -> Error:
    return Error(
        code="INVALID_COLUMN_KEY",
        message=reason.value,
        reason=f"Rejected column key: {key!r}",
    )


def _find_column(columns: List[ColumnDefinition], column_id: str) -> Optional[ColumnDefinition]:
    return next((column for column in columns if column.id == column_id), None)


def _column_not_found(column_id: str) -> Error:
    return Error(
        code="COLUMN_NOT_FOUND",
        message=f"Column with ID {column_id} not found",
        reason="Column does not exist",
    )


def add_column(
    columns: List[ColumnDefinition],
    key: str,
    label: str,
    value_type: ColumnType = ColumnType.TEXT,
    required: bool = False,
    width: Optional[str] = None,
) -> Result[List[ColumnDefinition]]:
    """
    Add a custom column at the right end of the table

    The new column gets a fresh id and order = max(order) + 1.

    Returns:
        Result with the new column list sorted by order, or INVALID_COLUMN_KEY
    """
    reason = validate_column_key(key, columns)
    if reason is not None:
        return Return.err(_key_error(reason, key))

    max_order = max((column.order for column in columns), default=-1)
    new_column = ColumnDefinition(
        id=generate_column_id(),
        key=key.strip(),
        label=label,
        value_type=value_type,
        required=required,
        order=max_order + 1,
        width=width,
    )
    return Return.ok(sort_columns(columns + [new_column]))


def remove_column(columns: List[ColumnDefinition], column_id: str) -> Result[List[ColumnDefinition]]:
    """
    Remove a column and renumber the rest densely

    Returns:
        Result with the new column list, or COLUMN_NOT_FOUND / REQUIRED_COLUMN
    """
    target = _find_column(columns, column_id)
    if target is None:
        return Return.err(_column_not_found(column_id))

    if target.required:
        return Return.err(
            Error(
                code="REQUIRED_COLUMN",
                message=f"Column '{target.label}' is required and cannot be removed",
                reason="Required columns cannot be removed",
            )
        )

    remaining = [column for column in columns if column.id != column_id]
    return Return.ok(_renumber(sort_columns(remaining)))


def update_column(
    columns: List[ColumnDefinition],
    column_id: str,
    patch: Dict[str, Any],
) -> Result[List[ColumnDefinition]]:
    """
    Apply a partial update to one column

    A key change is re-validated, excluding the edited column from the
    uniqueness check. Built-in columns keep their key.

    Args:
        columns: Current column set
        column_id: Column to edit
        patch: Field values by field name or alias (e.g. {"label": "Hours"})

    Returns:
        Result with the updated column list sorted by order
    """
    target = _find_column(columns, column_id)
    if target is None:
        return Return.err(_column_not_found(column_id))

    data = target.model_dump()
    for name, value in patch.items():
        field_name = _PATCHABLE_FIELDS.get(name)
        if field_name is not None:
            data[field_name] = value

    new_key = data.get("key")
    if new_key != target.key:
        if target.is_built_in:
            return Return.err(
                Error(
                    code="INVALID_COLUMN_KEY",
                    message="The key of a built-in column cannot be changed",
                    reason=f"Column '{target.key}' is built in",
                )
            )
        reason = validate_column_key(new_key, columns, exclude_id=column_id)
        if reason is not None:
            return Return.err(_key_error(reason, new_key))
        data["key"] = new_key.strip()

    updated = ColumnDefinition.model_validate(data)
    return Return.ok(
        _renumber(sort_columns([updated if column.id == column_id else column for column in columns]))
    )


def reorder_columns(
    columns: List[ColumnDefinition],
    from_index: int,
    to_index: int,
) -> Result[List[ColumnDefinition]]:
    """Move the column at from_index to to_index and renumber densely"""
    ordered = sort_columns(columns)
    if not (0 <= from_index < len(ordered)) or not (0 <= to_index < len(ordered)):
        return Return.err(
            Error(
                code="INVALID_COLUMN_POSITION",
                message=f"Cannot move column from position {from_index} to {to_index}",
                reason=f"Positions must be between 0 and {len(ordered) - 1}",
            )
        )

    moved = ordered.pop(from_index)
    ordered.insert(to_index, moved)
    return Return.ok(_renumber(ordered))


def custom_column_keys(columns: List[ColumnDefinition]) -> List[str]:
    return [column.key for column in columns if not column.is_built_in]


def _with_custom_fields(item: LineItem, fields: Dict[str, Any]) -> LineItem:
    return item.model_copy(update={"custom_fields": fields or None})


def sync_items_with_columns(
    items: List[LineItem],
    old_columns: List[ColumnDefinition],
    new_columns: List[ColumnDefinition],
) -> List[LineItem]:
    """
    Carry a column change over to the line items

    Custom keys present in old_columns but not in new_columns are deleted from
    every item; keys new in new_columns are seeded with 0 (number, currency) or
    "" (text). Items left without custom fields store none.
    """
    old_keys = custom_column_keys(old_columns)
    new_keys = custom_column_keys(new_columns)

    removed = [key for key in old_keys if key not in new_keys]
    added = [column for column in new_columns if not column.is_built_in and column.key not in old_keys]

    if not removed and not added:
        return list(items)

    synced = []
    for item in items:
        fields = dict(item.custom_fields or {})
        for key in removed:
            fields.pop(key, None)
        for column in added:
            fields[column.key] = column.default_value
        synced.append(_with_custom_fields(item, fields))
    return synced


def reconcile_items(items: List[LineItem], columns: List[ColumnDefinition]) -> List[LineItem]:
    """
    Bring imported items in line with a column set they may not match

    Drops custom fields with no matching column and seeds missing ones, keeping
    existing values. Numeric strings in number and currency columns become
    numbers again, since serialized records carry decimals as strings. Used by
    the pipeline's normalize step.
    """
    custom_columns = [column for column in columns if not column.is_built_in]

    reconciled = []
    for item in items:
        current = item.custom_fields or {}
        fields = {
            column.key: _coerce_stored(column, current.get(column.key, column.default_value))
            for column in custom_columns
        }
        if fields == current:
            reconciled.append(item)
        else:
            reconciled.append(_with_custom_fields(item, fields))
    return reconciled


def _parse_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def get_cell_value(item: LineItem, column: ColumnDefinition) -> CellValue:
    """
    Resolve the typed value shown in an item's cell for a column

    Built-in keys read the item attribute; any other key reads custom_fields,
    falling back to the column's default when missing. Numeric cells holding
    NaN or infinity show as 0.
    """
    if column.is_built_in:
        raw = getattr(item, _BUILT_IN_ATTRIBUTES[column.key])
    else:
        raw = (item.custom_fields or {}).get(column.key, column.default_value)

    if not column.value_type.is_numeric:
        return CellValue.of_text("" if raw is None else str(raw))

    number = _parse_number(raw)
    if number is None:
        return CellValue.of_text(str(raw))
    if not number.is_finite():
        number = Decimal("0")
    return CellValue.of_number(number, column.value_type)


def set_cell_value(item: LineItem, column: ColumnDefinition, value: Any) -> LineItem:
    """
    Store a value into an item's cell for a column

    Numeric columns store numbers when the value parses as one; text columns
    store strings.
    """
    if column.is_built_in:
        attribute = _BUILT_IN_ATTRIBUTES[column.key]
        if attribute == "description":
            stored = "" if value is None else str(value)
        else:
            stored = _parse_number(value)
            if stored is None:
                stored = Decimal("0")
        return item.model_copy(update={attribute: stored})

    if column.value_type.is_numeric:
        number = _parse_number(value)
        stored = number if number is not None else str(value)
    else:
        stored = "" if value is None else str(value)

    fields = dict(item.custom_fields or {})
    fields[column.key] = stored
    return _with_custom_fields(item, fields)


def _coerce_stored(column: ColumnDefinition, value: Any) -> Any:
    if column.value_type.is_numeric and isinstance(value, str):
        number = _parse_number(value)
        if number is not None and number.is_finite():
            return number
    return value
