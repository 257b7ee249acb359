"""Tests for phone identity resolution."""

import pytest

from engagement.core.phone import (
    normalize_phone,
    phone_suffix,
    phones_match,
    pick_match,
    require_phone,
)
from engagement.exceptions import ValidationError
from engagement.models.agent_assignment import AgentAssignment


def test_normalize_strips_punctuation():
    """Only digits survive normalization."""
    assert normalize_phone("+1 (415) 555-0100") == "14155550100"


@pytest.mark.parametrize("value", [None, "", "   ", "abc"])
def test_normalize_empty_input(value):
    """Missing or digit-free input normalizes to an empty string."""
    assert normalize_phone(value) == ""


def test_phone_suffix_takes_last_ten_digits():
    """The match suffix is the last ten digits."""
    assert phone_suffix("+1 415 555 0100") == "4155550100"
    assert phone_suffix("5550100") == "5550100"


@pytest.mark.parametrize(
    "a,b",
    [
        ("+1 415 555 0100", "4155550100"),
        ("14155550100", "(415) 555-0100"),
        ("0014155550100", "+1-415-555-0100"),
        ("5550100", "555-0100"),
    ],
)
def test_phones_match(a, b):
    """Numbers with the same last ten digits match."""
    assert phones_match(a, b)
    assert phones_match(b, a)


@pytest.mark.parametrize(
    "a,b",
    [
        ("4155550100", "4155550101"),
        ("5550100", "4155550100"),
        ("", ""),
        (None, "4155550100"),
    ],
)
def test_phones_do_not_match(a, b):
    """Different subscriber numbers do not match."""
    assert not phones_match(a, b)


def test_require_phone_rejects_empty():
    """A phone without digits raises ValidationError."""
    with pytest.raises(ValidationError):
        require_phone("+-- ")


def test_require_phone_returns_digits():
    """A valid phone comes back normalized."""
    assert require_phone("+1 415 555 0100") == "14155550100"


def test_pick_match_prefers_exact_digits():
    """An exact digit match beats a suffix match."""
    suffix_only = AgentAssignment(phone="4155550100", agent_id="a")
    exact = AgentAssignment(phone="14155550100", agent_id="b")
    unrelated = AgentAssignment(phone="4155550199", agent_id="c")

    assert pick_match("+1 415 555 0100", [suffix_only, unrelated, exact]) is exact
    assert pick_match("4155550100", [unrelated, suffix_only]) is suffix_only
    assert pick_match("999", [suffix_only, exact]) is None
