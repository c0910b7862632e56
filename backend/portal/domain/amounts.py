"""
Submission pay calculation.

Hourly: regular_rate * regular_hours + overtime_rate * overtime_hours.
Fixed: the monthly rate; hours are tracked but do not change pay.
Missing values count as zero and every amount is rounded to cents.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from portal.domain.entities import ContractorType

DEFAULT_HOURLY_RATE = Decimal("75")
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")

_CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce numbers and numeric strings; None, blanks and garbage become 0."""
    if value is None or value == "":
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def round_currency(amount: Any) -> Decimal:
    return to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)


def normalize_contractor_type(value: Any) -> ContractorType:
    """``"Fixed"``/``"fixed"`` are FIXED; anything else is HOURLY."""
    text = str(getattr(value, "value", value) or "").strip().upper()
    return ContractorType.FIXED if text == ContractorType.FIXED.value else ContractorType.HOURLY


def default_overtime_rate(hourly_rate: Any, multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER) -> Decimal:
    rate = to_decimal(hourly_rate) or DEFAULT_HOURLY_RATE
    return round_currency(rate * multiplier)


@dataclass(frozen=True)
class PaySummary:
    contractor_type: ContractorType
    regular_amount: Decimal
    overtime_amount: Decimal
    total_amount: Decimal
    monthly_rate: Optional[Decimal]
    display_label: str


def calculate_hourly_total(regular_rate: Any, regular_hours: Any, overtime_rate: Any, overtime_hours: Any):
    """``(regular_amount, overtime_amount, total_amount)`` for an hourly contractor."""
    regular_amount = round_currency(to_decimal(regular_rate) * to_decimal(regular_hours))
    overtime_amount = round_currency(to_decimal(overtime_rate) * to_decimal(overtime_hours))
    return regular_amount, overtime_amount, round_currency(regular_amount + overtime_amount)


def pay_summary(
    contractor_type: Any,
    regular_hours: Any = 0,
    overtime_hours: Any = 0,
    regular_rate: Any = None,
    overtime_rate: Any = None,
    monthly_rate: Any = None,
    stored_total: Any = None,
) -> PaySummary:
    """
    Full pay breakdown for display.

    For hourly contractors without usable rates, falls back to
    ``stored_total``.
    """
    kind = normalize_contractor_type(contractor_type)
    if kind == ContractorType.FIXED:
        total = round_currency(monthly_rate)
        return PaySummary(kind, Decimal("0.00"), Decimal("0.00"), total, total, "Monthly Rate")

    regular_amount, overtime_amount, total = calculate_hourly_total(
        regular_rate, regular_hours, overtime_rate, overtime_hours
    )
    if total <= 0:
        total = round_currency(stored_total)
    return PaySummary(kind, regular_amount, overtime_amount, total, None, "Total Amount")


def calculate_total_for_storage(
    contractor_type: Any,
    regular_hours: Any,
    overtime_hours: Any,
    hourly_rate: Any = None,
    overtime_rate: Any = None,
    monthly_rate: Any = None,
    default_hourly_rate: Decimal = DEFAULT_HOURLY_RATE,
    overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER,
) -> Decimal:
    """Total to persist on a new submission, applying default rates where missing."""
    if normalize_contractor_type(contractor_type) == ContractorType.FIXED:
        return round_currency(monthly_rate)
    rate = to_decimal(hourly_rate) or to_decimal(default_hourly_rate)
    ot_rate = to_decimal(overtime_rate) or round_currency(rate * to_decimal(overtime_multiplier))
    return calculate_hourly_total(rate, regular_hours, ot_rate, overtime_hours)[2]
