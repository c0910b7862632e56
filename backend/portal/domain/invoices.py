"""
Sequential invoice numbers of the form ``{PREFIX}-{YEAR}-{SEQUENCE}``.

The sequence restarts at 0001 every year and is at least four digits wide.
"""

import re
from typing import Iterable, Optional

DEFAULT_INVOICE_PREFIX = "INV"
SEQUENCE_WIDTH = 4


def invoice_prefix(year: int, prefix: str = DEFAULT_INVOICE_PREFIX) -> str:
    return f"{prefix}-{year:04d}-"


def _sequence(number: str, year_prefix: str) -> Optional[int]:
    if not number or not number.startswith(year_prefix):
        return None
    tail = number[len(year_prefix):]
    return int(tail) if tail.isdigit() else None


def next_invoice_number(year: int, existing: Iterable[str], prefix: str = DEFAULT_INVOICE_PREFIX) -> str:
    """
    Next number after the highest sequence already issued for ``year``.

    Numbers for other years or with a malformed sequence are ignored.
    Sequences compare numerically, so ``INV-2026-10000`` follows ``INV-2026-9999``.
    """
    year_prefix = invoice_prefix(year, prefix)
    sequences = [s for s in (_sequence(n, year_prefix) for n in existing) if s is not None]
    next_sequence = max(sequences, default=0) + 1
    return f"{year_prefix}{next_sequence:0{SEQUENCE_WIDTH}d}"


def is_valid_invoice_number(value: str, prefix: str = DEFAULT_INVOICE_PREFIX) -> bool:
    pattern = rf"^{re.escape(prefix)}-\d{{4}}-\d{{{SEQUENCE_WIDTH},}}$"
    return re.match(pattern, value or "") is not None
