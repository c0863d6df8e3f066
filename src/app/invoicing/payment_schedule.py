"""Payment Schedule Validator

Keeps the sum of installment percentages at or below 100% and derives each
installment's amount from the grand total. Over-allocation is reported, never
raised.
"""

from decimal import Decimal
from typing import List, Sequence
from pydantic import Field
from src.domain.base import BaseModel
from src.domain.invoice import PaymentScheduleEntry
from .calculator import HUNDRED, ZERO, Number, clamp, to_amount

# Sums within this distance of 100 count as exactly 100
SCHEDULE_EPSILON = Decimal("1e-9")


class ScheduleSummary(BaseModel):
    """Allocation status of a schedule, as shown next to the entries"""

    total_percentage: Decimal = Field(description="Sum of all entry percentages")
    remaining: Decimal = Field(description="100 - total_percentage (negative when over)")
    is_valid: bool = Field(description="total_percentage <= 100 within epsilon")


def total_percentage(schedule: Sequence[PaymentScheduleEntry]) -> Decimal:
    return sum((to_amount(entry.percentage) for entry in schedule), ZERO)


def remaining(schedule: Sequence[PaymentScheduleEntry]) -> Decimal:
    return HUNDRED - total_percentage(schedule)


def is_valid(schedule: Sequence[PaymentScheduleEntry]) -> bool:
    return total_percentage(schedule) <= HUNDRED + SCHEDULE_EPSILON


def summarize_schedule(schedule: Sequence[PaymentScheduleEntry]) -> ScheduleSummary:
    total = total_percentage(schedule)
    return ScheduleSummary(
        total_percentage=total,
        remaining=HUNDRED - total,
        is_valid=total <= HUNDRED + SCHEDULE_EPSILON,
    )


def clamp_edited_percentage(
    schedule: Sequence[PaymentScheduleEntry],
    edited_index: int,
    proposed_value: Number,
) -> Decimal:
    """
    Cap an edited entry's percentage so the schedule stays at or below 100%

    The edited entry may take at most what the other entries leave over; the
    result is never negative. An over-large value is truncated, not refused.

    Args:
        schedule: Current entries
        edited_index: Position of the entry being edited (out of range means a new entry)
        proposed_value: Percentage typed by the user

    Returns:
        min(proposed_value, 100 - sum(other percentages)), floored at 0
    """
    others = sum(
        (to_amount(entry.percentage) for index, entry in enumerate(schedule) if index != edited_index),
        ZERO,
    )
    capped = min(to_amount(proposed_value), HUNDRED - others)
    return max(capped, ZERO)


def recompute_amounts(
    schedule: Sequence[PaymentScheduleEntry],
    grand_total: Number,
) -> List[PaymentScheduleEntry]:
    """Every entry's amount = grand_total * percentage / 100"""
    total = to_amount(grand_total)
    return [
        entry.model_copy(update={"amount": total * to_amount(entry.percentage) / HUNDRED})
        for entry in schedule
    ]


def normalize_entries(schedule: Sequence[PaymentScheduleEntry]) -> List[PaymentScheduleEntry]:
    """Clamp each entry's percentage into [0, 100]"""
    normalized = []
    for entry in schedule:
        percentage = clamp(entry.percentage, ZERO, HUNDRED)
        if percentage != entry.percentage:
            entry = entry.model_copy(update={"percentage": percentage})
        normalized.append(entry)
    return normalized


def apply_percentage_edit(
    schedule: Sequence[PaymentScheduleEntry],
    edited_index: int,
    proposed_value: Number,
    grand_total: Number,
) -> List[PaymentScheduleEntry]:
    """Set one entry's percentage under the capping policy and rederive amounts"""
    percentage = clamp_edited_percentage(schedule, edited_index, proposed_value)
    edited = [
        entry.model_copy(update={"percentage": percentage}) if index == edited_index else entry
        for index, entry in enumerate(schedule)
    ]
    return recompute_amounts(edited, grand_total)


def new_schedule_entry(description: str = "New payment term") -> PaymentScheduleEntry:
    return PaymentScheduleEntry(description=description, percentage=ZERO, amount=ZERO)


def remove_schedule_entry(
    schedule: Sequence[PaymentScheduleEntry],
    index: int,
) -> List[PaymentScheduleEntry]:
    return [entry for position, entry in enumerate(schedule) if position != index]
