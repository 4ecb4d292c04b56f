import re
from typing import Callable, Union

# Rupiah amounts are whole numbers grouped with dots: 1.500.000
THOUSAND_SEPARATOR = "."

_NON_DIGITS = re.compile(r"\D")
_GROUP_BOUNDARY = re.compile(r"\B(?=(\d{3})+(?!\d))")


def format_thousands(value: Union[int, str]) -> str:
    """
    Format an amount with a dot before every group of three digits.

    Non-digit characters are stripped first, so already formatted input is
    accepted. Leading zeros are dropped.

    Examples:
        >>> format_thousands(1500000)
        '1.500.000'
        >>> format_thousands("Rp 25.000")
        '25.000'
        >>> format_thousands("")
        ''
        >>> format_thousands(0)
        '0'
    """
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return ""
    digits = digits.lstrip("0") or "0"
    return _GROUP_BOUNDARY.sub(THOUSAND_SEPARATOR, digits)


def parse_thousands(display: str) -> int:
    """
    Parse a dot-grouped amount back to an integer.

    Like format_thousands, every non-digit character is dropped, so signs,
    spaces and stray letters never reach int(). Returns 0 when no digits
    remain.

    Examples:
        >>> parse_thousands("1.500.000")
        1500000
        >>> parse_thousands("12abc")
        12
        >>> parse_thousands("abc")
        0
    """
    digits = _NON_DIGITS.sub("", display or "")
    if not digits:
        return 0
    try:
        return int(digits, 10)
    except ValueError:
        # Past the interpreter's int conversion limit.
        return 0


def mask_currency_input(raw: str, deliver: Callable[[str], None]) -> None:
    """Keep only digits from `raw`, group them and hand the result to `deliver`."""
    digits = _NON_DIGITS.sub("", raw or "")
    deliver(format_thousands(digits))


def format_rupiah(amount: int) -> str:
    """Render an amount the way receipts show it: 'Rp 1.500.000', '-Rp 500.000'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {format_thousands(abs(int(amount)))}"
