"""Conversion between link IDs and their base36 short codes."""

import re
import string

from .exceptions import InvalidCode


# Base36 characters (digits then lowercase letters)
BASE36_CHARS = string.digits + string.ascii_lowercase

# IDs are signed 64-bit integers
MAX_ID = 2 ** 63 - 1

_CODE_PATTERN = re.compile(r"[0-9a-zA-Z]+")


def format_id(link_id: int) -> str:
    """Convert a link ID to its short code.

    Args:
        link_id: Non-negative integer ID

    Returns:
        Lowercase base36 string without leading zeros
    """
    if link_id < 0:
        raise ValueError(f"link IDs are never negative, got {link_id}")

    if link_id == 0:
        return BASE36_CHARS[0]

    result = []
    base = len(BASE36_CHARS)

    while link_id > 0:
        link_id, remainder = divmod(link_id, base)
        result.append(BASE36_CHARS[remainder])

    return "".join(reversed(result))


def parse_id(short_code: str) -> int:
    """Convert a short code back to its link ID.

    Parsing is case-insensitive.

    Args:
        short_code: Base36 string

    Returns:
        Integer ID

    Raises:
        InvalidCode: If the code is empty, has characters outside the base36
            alphabet or does not fit in a signed 64-bit integer
    """
    if not short_code:
        raise InvalidCode("short code is empty")

    if not _CODE_PATTERN.fullmatch(short_code):
        raise InvalidCode(f"'{short_code}' is not a base36 number")

    link_id = int(short_code, 36)

    if link_id > MAX_ID:
        raise InvalidCode(f"'{short_code}' is out of range for a 64-bit ID")

    return link_id

