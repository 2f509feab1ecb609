"""Phone number normalization for guest lookups."""

import re

_DIGITS = re.compile(r"\d+")


def normalize_phone(phone: str) -> str:
    """
    Reduce a phone number to its digits, keeping a leading '+'.

    Example:
        >>> normalize_phone(" +90 (532) 555-12-34 ")
        '+905325551234'

    Raises:
        ValueError: If the number contains no digits
    """
    stripped = phone.strip()
    digits = "".join(_DIGITS.findall(stripped))
    if not digits:
        raise ValueError("Phone number must contain digits")
    return f"+{digits}" if stripped.startswith("+") else digits
