"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₺123.45", "$123.45", "123.45 TL"
    - "-123.45"
    - "1,234.56"
    - "1.234,56" (Turkish grouping with decimal comma)
    - "123,45" (decimal comma; "1,234" is read as grouping)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = str(amount_str).strip()
    text = re.sub(r"(?i)\s*(tl|try)$", "", text)
    text = re.sub(r"[₺$€£\s]", "", text)

    if "," in text and "." in text:
        # Whichever separator comes last is the decimal mark
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        if re.fullmatch(r"-?\d{1,3}(,\d{3})+", text):
            text = text.replace(",", "")
        else:
            text = text.replace(",", ".")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount


def parse_positive_amount(amount_str) -> Decimal:
    """Parse an amount that must be strictly greater than zero.

    Accepts Decimals and ints as-is, strings through ``parse_amount``.

    Raises:
        ValueError: If the amount cannot be parsed or is not positive
    """
    if isinstance(amount_str, Decimal):
        amount = amount_str
    elif isinstance(amount_str, int) and not isinstance(amount_str, bool):
        amount = Decimal(amount_str)
    else:
        amount = parse_amount(amount_str)
    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount must be a positive number, got '{amount_str}'")
    return amount
