"""
Phone identity resolution.

Contacts arrive with inconsistent formats ("+1 (415) 555-0100", "4155550100",
"14155550100"). Two numbers are treated as the same contact when their digits
are equal, or when both have at least ten digits and share the last ten.
This is a heuristic: short or malformed numbers can collide.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, TypeVar

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from engagement.exceptions import ValidationError

SUFFIX_LENGTH = 10

_NON_DIGITS = re.compile(r"\D")

T = TypeVar("T")


def normalize_phone(phone: Optional[str]) -> str:
    """Strip everything but digits. None and empty input give ""."""
    if not phone:
        return ""
    return _NON_DIGITS.sub("", str(phone))


def phone_suffix(phone: Optional[str]) -> str:
    """Last ten digits of the normalized phone (all digits when shorter)."""
    return normalize_phone(phone)[-SUFFIX_LENGTH:]


def phones_match(a: Optional[str], b: Optional[str]) -> bool:
    normalized_a = normalize_phone(a)
    normalized_b = normalize_phone(b)
    if not normalized_a or not normalized_b:
        return False
    if normalized_a == normalized_b:
        return True
    return (
        len(normalized_a) >= SUFFIX_LENGTH
        and len(normalized_b) >= SUFFIX_LENGTH
        and normalized_a[-SUFFIX_LENGTH:] == normalized_b[-SUFFIX_LENGTH:]
    )


def require_phone(phone: Optional[str]) -> str:
    """Normalize a phone for a write path. Raises ValidationError when no digits remain."""
    normalized = normalize_phone(phone)
    if not normalized:
        raise ValidationError("Phone is required")
    return normalized


def phone_filter(column, phone: str) -> ColumnElement[bool]:
    """
    Candidate filter for a phone column: exact match or same ten-digit suffix.

    Candidates must still be confirmed with phones_match, since LIKE alone
    also accepts stored numbers shorter than ten digits.
    """
    normalized = normalize_phone(phone)
    return or_(column == normalized, column.like(f"%{phone_suffix(normalized)}"))


def pick_match(phone: str, records: Iterable[T], attr: str = "phone") -> Optional[T]:
    """First record whose phone matches, preferring an exact digit match."""
    normalized = normalize_phone(phone)
    matches = [r for r in records if phones_match(getattr(r, attr), normalized)]
    for record in matches:
        if getattr(record, attr) == normalized:
            return record
    return matches[0] if matches else None
