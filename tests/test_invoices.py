"""
Invoice number sequencing tests.
"""

from portal.domain.invoices import invoice_prefix, is_valid_invoice_number, next_invoice_number


def test_first_number_of_the_year():
    assert next_invoice_number(2026, []) == "INV-2026-0001"


def test_continues_after_highest_sequence():
    issued = ["INV-2026-0002", "INV-2026-0007", "INV-2026-0003"]
    assert next_invoice_number(2026, issued) == "INV-2026-0008"


def test_sequence_restarts_each_year():
    assert next_invoice_number(2027, ["INV-2026-0041"]) == "INV-2027-0001"


def test_sequence_compares_numerically_past_four_digits():
    assert next_invoice_number(2026, ["INV-2026-9999", "INV-2026-10000"]) == "INV-2026-10001"


def test_malformed_numbers_are_ignored():
    assert next_invoice_number(2026, ["INV-2026-abc", "", "INV-2026-"]) == "INV-2026-0001"


def test_custom_prefix():
    assert invoice_prefix(2026, "ACME") == "ACME-2026-"
    assert next_invoice_number(2026, ["ACME-2026-0004", "INV-2026-0099"], prefix="ACME") == "ACME-2026-0005"


def test_is_valid_invoice_number():
    assert is_valid_invoice_number("INV-2026-0001")
    assert is_valid_invoice_number("INV-2026-12345")
    assert not is_valid_invoice_number("INV-26-0001")
    assert not is_valid_invoice_number("INV-2026-001")
    assert not is_valid_invoice_number("ACME-2026-0001")
