"""
Field Codecs

Pure functions converting fields between their stored form and the
form the editor shows and edits. No state, no I/O.

- Dates: ``date`` <-> ``"YYYY-MM-DD"``, and ``date`` <-> storage instant
- Amounts: minor units <-> masked currency text (``"- $ 1 234.50"``)
- Categories: ``Category`` <-> serialized selection string

DESIGN DECISION: The category selection carries the whole serialized
category rather than just its key, so the selected category's
description survives type switches and list reloads in edit mode.
"""

import re
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import ValidationError

from finance_tracker.editor.errors import DecodeError, MalformedSelectionError
from finance_tracker.models import local_date
from finance_tracker.models.transaction import Category, TransactionType


# =============================================================================
# DATES
# =============================================================================

def date_to_draft(day: date) -> str:
    """Calendar date as the date input's ``YYYY-MM-DD`` value."""
    return day.isoformat()


def draft_to_date(value: str) -> date:
    """
    Parse a date input value into a calendar date.

    The string is read as a plain calendar day, never as a UTC instant,
    so the day cannot shift with the host offset. ``YYYY/MM/DD`` is
    accepted as well.

    Raises:
        DecodeError: If the value is not a calendar date
    """
    text = (value or "").strip().replace("/", "-")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise DecodeError("date", f"Not a valid date: {value!r}")


def date_to_instant(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Local midnight of ``day`` in ``tz`` (host zone when None)."""
    return local_date.to_instant(day, tz)


def instant_to_date(instant: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of a storage instant as seen in ``tz``."""
    return local_date.from_instant(instant, tz)


def today_draft(tz: Optional[tzinfo] = None) -> str:
    """Today's local date in draft form."""
    return date_to_draft(local_date.today(tz))


# =============================================================================
# AMOUNTS
# =============================================================================

_NON_DIGITS = re.compile(r"\D")

# Longest digit run read as an amount; anything longer is not a real amount
MAX_AMOUNT_DIGITS = 18


def currency_prefix(transaction_type: Optional[TransactionType]) -> str:
    """Sign token shown before a masked amount."""
    if transaction_type == TransactionType.INCOME:
        return "+ $"
    if transaction_type == TransactionType.EXPENSE:
        return "- $"
    return "$"


def amount_to_masked(
    minor_units: int,
    transaction_type: Optional[TransactionType] = None,
) -> str:
    """
    Format minor units as masked currency text.

    Exactly two fraction digits, thousands separated by spaces:
    ``amount_to_masked(123450, EXPENSE) == "- $ 1 234.50"``
    """
    value = Decimal(minor_units).scaleb(-2)
    number = f"{value:,.2f}".replace(",", " ")
    return f"{currency_prefix(transaction_type)} {number}"


def masked_to_amount(value: str) -> Optional[int]:
    """
    Read masked currency text back as minor units.

    Every non-digit is dropped and the remaining digits are the amount
    in cents, so typing after the last digit shifts the value like a
    till. Never raises: text without any digit, or with more digits
    than any amount has, gives None, which the draft reports as a
    missing amount.
    """
    digits = _NON_DIGITS.sub("", value or "")
    if not digits or len(digits) > MAX_AMOUNT_DIGITS:
        return None
    return int(digits)


# =============================================================================
# CATEGORIES
# =============================================================================

def category_to_draft(category: Category) -> str:
    """Serialize a category into a selection value."""
    return category.model_dump_json()


def draft_to_category(value: str) -> Category:
    """
    Deserialize a selection value back into a category.

    Raises:
        MalformedSelectionError: If the value is not a serialized category
    """
    try:
        return Category.model_validate_json(value)
    except (ValidationError, ValueError, TypeError):
        raise MalformedSelectionError()


def category_label(category: Category) -> str:
    """Selector label, prefixed with the ordering hint when there is one."""
    if category.ordering:
        return f"{category.ordering} - {category.value}"
    return category.value


def selectable_categories(
    categories: Iterable[Category],
    transaction_type: Optional[TransactionType],
) -> list[Category]:
    """
    Categories offered for a transaction type.

    Matching-type categories plus OTHER ones; nothing until a type is chosen.
    """
    return [c for c in categories if c.applies_to(transaction_type)]
