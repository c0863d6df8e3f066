from .currency import (
    Currency,
    DEFAULT_CURRENCY,
    SUPPORTED_CURRENCIES,
    format_currency,
    get_currency_by_code,
    get_currency_options,
    get_currency_symbol,
    is_valid_currency_code,
)
from .columns import (
    ColumnKeyError,
    add_column,
    get_cell_value,
    get_default_columns,
    normalize_columns,
    reconcile_items,
    remove_column,
    reorder_columns,
    set_cell_value,
    sync_items_with_columns,
    update_column,
    validate_column_key,
    validate_column_set,
)
from .calculator import (
    compute_discount,
    compute_grand_total,
    compute_item_total,
    compute_subtotal,
    compute_tax,
    percent_to_rate,
)
from .payment_schedule import (
    SCHEDULE_EPSILON,
    ScheduleSummary,
    apply_percentage_edit,
    clamp_edited_percentage,
    is_valid,
    recompute_amounts,
    remaining,
    summarize_schedule,
    total_percentage,
)
from .layout import LayoutOptions, build_layout, resolve_column_widths
from .blocks import DocumentLayout

__all__ = [
    "Currency",
    "DEFAULT_CURRENCY",
    "SUPPORTED_CURRENCIES",
    "format_currency",
    "get_currency_by_code",
    "get_currency_options",
    "get_currency_symbol",
    "is_valid_currency_code",
    "ColumnKeyError",
    "add_column",
    "get_cell_value",
    "get_default_columns",
    "normalize_columns",
    "reconcile_items",
    "remove_column",
    "reorder_columns",
    "set_cell_value",
    "sync_items_with_columns",
    "update_column",
    "validate_column_key",
    "validate_column_set",
    "compute_discount",
    "compute_grand_total",
    "compute_item_total",
    "compute_subtotal",
    "compute_tax",
    "percent_to_rate",
    "SCHEDULE_EPSILON",
    "ScheduleSummary",
    "apply_percentage_edit",
    "clamp_edited_percentage",
    "is_valid",
    "recompute_amounts",
    "remaining",
    "summarize_schedule",
    "total_percentage",
    "LayoutOptions",
    "build_layout",
    "resolve_column_widths",
    "DocumentLayout",
]
