from __future__ import annotations

import re

from slotbook.application.exceptions import ValidationError
from slotbook.domain.entities.profile import ClientProfile

CONTACT_DIGITS = 11  # DDD + 9XXXXXXXX

_NON_DIGITS = re.compile(r"\D")
_DISPLAY_PATTERN = re.compile(r"(\d{2})(\d{2})(\d{5})(\d{4})")
_LOCAL_PATTERN = re.compile(r"(\d{2})(\d{5})(\d{4})")


def normalize_contact_number(raw: str | None) -> str:
    """Strip everything that is not a digit."""
    return _NON_DIGITS.sub("", raw or "")


def format_contact_number(digits: str | None) -> str:
    """
    Render a stored number for display.
    11 digits: 11987654321 -> (11) 98765-4321
    13 digits (with country code): 5511987654321 -> +55 (11) 98765-4321
    """
    if not digits:
        return "Not provided"
    if len(digits) == CONTACT_DIGITS:
        return _LOCAL_PATTERN.sub(r"(\1) \2-\3", digits)
    if _DISPLAY_PATTERN.fullmatch(digits):
        return "+" + _DISPLAY_PATTERN.sub(r"\1 (\2) \3-\4", digits)
    return digits


def build_profile(name: str | None, contact_number: str | None) -> ClientProfile:
    """
    Validate raw profile input and build a ClientProfile.
    Name needs at least first and last name; the number must have exactly 11 digits.
    """
    cleaned_name = (name or "").strip()
    if len(cleaned_name.split()) < 2:
        raise ValidationError("Please enter your full name (first and last name).")

    digits = normalize_contact_number(contact_number)
    if len(digits) != CONTACT_DIGITS:
        raise ValidationError("The contact number must have 11 digits (area code + 9XXXX-XXXX).")

    return ClientProfile(name=cleaned_name, contact_number=digits, profile_complete=True)
