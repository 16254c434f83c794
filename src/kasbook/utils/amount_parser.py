"""Amount parsing utilities."""

import re

_THOUSANDS_GROUPED = re.compile(r"^\d{1,3}([.,]\d{3})+$")


def parse_amount(amount_str: str) -> int:
    """Parse a Rupiah amount string into whole Rupiah.

    Handles the formats operators type or paste:
    - "150000"
    - "Rp 150.000" / "Rp150,000"
    - "1.500.000"
    - "-25.000" and "(25.000)" for negative amounts
    - "50rb" / "2jt" shorthand for thousands and millions

    Args:
        amount_str: Amount string

    Returns:
        Integer amount

    Raises:
        ValueError: If amount string cannot be parsed or has a fractional part
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip().lower()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1].strip()
    if text.startswith("-"):
        is_negative = not is_negative
        text = text[1:].strip()

    text = re.sub(r"^rp\.?", "", text).strip()

    multiplier = 1
    if text.endswith("rb"):
        multiplier, text = 1_000, text[:-2].strip()
    elif text.endswith("jt"):
        multiplier, text = 1_000_000, text[:-2].strip()

    text = text.replace(" ", "")
    if _THOUSANDS_GROUPED.match(text):
        text = re.sub(r"[.,]", "", text)
    elif multiplier != 1 and re.fullmatch(r"\d+[.,]\d+", text):
        # "1,5jt" is one and a half million
        whole, fraction = re.split(r"[.,]", text)
        value = int(whole) * multiplier + int(fraction) * multiplier // (10 ** len(fraction))
        return -value if is_negative else value

    if not text.isdigit():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    value = int(text) * multiplier
    return -value if is_negative else value


def format_rupiah(amount: int) -> str:
    """Format whole Rupiah the way receipts print them, e.g. ``Rp 1.500.000``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {abs(amount):,}".replace(",", ".")
