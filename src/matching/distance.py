"""
Distance strategies for ride matching.

The default strategy approximates distance from postal-code arithmetic. It
is a crude proxy, not geodesic distance: two codes 1000 apart count as
roughly one kilometre. Anything implementing `DistanceStrategy` (e.g. a
geocoding client) can replace it without touching the matcher.
"""

from typing import Optional, Protocol

UNKNOWN_DISTANCE = 999


class DistanceStrategy(Protocol):
    """Distance between two postal codes as a non-negative integer."""

    def distance(self, a: Optional[str], b: Optional[str]) -> int:
        ...


def parse_postal_code(postal_code: Optional[str]) -> Optional[int]:
    """
    Parse a postal code to an integer.

    Args:
        postal_code: Postal code string like "682001" or " 682 001"

    Returns:
        Integer value or None if missing or non-numeric

    Examples:
        >>> parse_postal_code("682001")
        682001
        >>> parse_postal_code("68A001") is None
        True
    """
    if postal_code is None:
        return None
    digits = str(postal_code).replace(" ", "")
    if not digits.isdecimal():
        return None
    try:
        return int(digits)
    except ValueError:
        return None


class PostalCodeDistance:
    """Distance as floor(|a - b| / 1000) over numeric postal codes."""

    def __init__(self, unit: int = 1000, unknown: int = UNKNOWN_DISTANCE):
        self.unit = unit
        self.unknown = unknown

    def distance(self, a: Optional[str], b: Optional[str]) -> int:
        """
        Approximate distance between two postal codes.

        Returns:
            Distance units, or the unknown sentinel (999) when either code is
            missing or non-numeric
        """
        code_a = parse_postal_code(a)
        code_b = parse_postal_code(b)
        if code_a is None or code_b is None:
            return self.unknown
        return abs(code_a - code_b) // self.unit
