"""
Booking reference numbers.

Format: ``<PREFIX>-YYYY-NNNN`` (for example ``EAT-2026-0142``). The sequence
is per year, starts at 0001 and wraps back to 0001 after 9999.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

DEFAULT_PREFIX = "EAT"
MAX_SEQUENCE = 9999


def _pattern(prefix: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(prefix)}-(\d{{4}})-(\d{{4}})$")


def year_prefix(year: int, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}-{year:04d}-"


def format_reference_number(year: int, sequence: int, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{year_prefix(year, prefix)}{sequence:04d}"


def is_valid_reference_number(ref, prefix: str = DEFAULT_PREFIX) -> bool:
    return isinstance(ref, str) and _pattern(prefix).match(ref) is not None


def parse_sequence(ref, year: int, prefix: str = DEFAULT_PREFIX) -> Optional[int]:
    """Sequence part of ``ref`` when it belongs to ``year``."""
    if not isinstance(ref, str):
        return None
    match = _pattern(prefix).match(ref)
    if match is None or int(match.group(1)) != year:
        return None
    return int(match.group(2))


def next_sequence(latest: Optional[int]) -> Tuple[int, bool]:
    """
    The sequence after ``latest`` and whether it wrapped.

    ``latest`` is None for the first booking of a year.
    """
    if latest is None:
        return 1, False
    if latest >= MAX_SEQUENCE:
        return 1, True
    return latest + 1, False
