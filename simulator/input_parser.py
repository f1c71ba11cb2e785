"""
Input parsing for simulation requests

Converts the raw strings typed into the request form into the integers the
controller accepts. Errors are raised before any simulation state exists.
"""

import re
from typing import List

from .errors import InvalidInputError

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def _to_floor(token: str) -> int:
    if not _INTEGER_PATTERN.match(token):
        raise InvalidInputError(f"Invalid floor number: {token}")
    return int(token)


def parse_floors(floors_string: str) -> List[int]:
    """
    Parse a comma-separated list of floor numbers.

    Tokens are trimmed, blank tokens are skipped and order and duplicates are
    preserved, so "9, 11,,13" gives [9, 11, 13].

    Args:
        floors_string: Comma-separated floor numbers (e.g. "1,2,3")

    Returns:
        List of floor numbers

    Raises:
        InvalidInputError: If the input is empty, a token is not an integer,
            or no floor remains after skipping blanks
    """
    if not floors_string or not isinstance(floors_string, str):
        raise InvalidInputError("Floors string is required")

    floors = []
    for token in floors_string.split(","):
        token = token.strip()
        if token:
            floors.append(_to_floor(token))

    if not floors:
        raise InvalidInputError("At least one destination floor is required")

    return floors


def parse_start_floor(start_floor: str) -> int:
    """Parse the start floor field"""
    if isinstance(start_floor, int) and not isinstance(start_floor, bool):
        return start_floor
    if not isinstance(start_floor, str) or not start_floor.strip():
        raise InvalidInputError("Start floor must be a valid number")
    token = start_floor.strip()
    if not _INTEGER_PATTERN.match(token):
        raise InvalidInputError("Start floor must be a valid number")
    return int(token)
