"""
Pay calculation tests.
"""

from decimal import Decimal

from portal.domain.amounts import (
    calculate_hourly_total,
    calculate_total_for_storage,
    default_overtime_rate,
    pay_summary,
    round_currency,
)
from portal.domain.entities import ContractorType


def test_hourly_total_rounds_each_product():
    regular, overtime, total = calculate_hourly_total("33.333", "3", "50.005", "1")
    assert regular == Decimal("100.00")
    assert overtime == Decimal("50.01")
    assert total == Decimal("150.01")


def test_round_currency_half_up_and_garbage():
    assert round_currency("2.675") == Decimal("2.68")
    assert round_currency(None) == Decimal("0.00")
    assert round_currency("not a number") == Decimal("0.00")


def test_default_overtime_rate_is_time_and_a_half():
    assert default_overtime_rate(80) == Decimal("120.00")


def test_fixed_pay_ignores_hours():
    summary = pay_summary(ContractorType.FIXED, regular_hours=200, overtime_hours=20, monthly_rate="9000")
    assert summary.total_amount == Decimal("9000.00")
    assert summary.overtime_amount == Decimal("0.00")
    assert summary.display_label == "Monthly Rate"


def test_hourly_summary_falls_back_to_stored_total():
    summary = pay_summary("hourly", regular_hours=10, stored_total="1234.5")
    assert summary.total_amount == Decimal("1234.50")
    assert summary.display_label == "Total Amount"


def test_total_for_storage_applies_defaults():
    # 160h at the default 75/h plus 10h at 112.50/h
    assert calculate_total_for_storage("HOURLY", 160, 10) == Decimal("13125.00")
    assert calculate_total_for_storage("HOURLY", 10, 2, hourly_rate=100, overtime_rate=200) == Decimal("1400.00")
    assert calculate_total_for_storage("FIXED", 10, 2, monthly_rate=5000) == Decimal("5000.00")
