"""Ordnance Survey National Grid references.

A grid reference names a 100km square with two letters taken from a 5x5
lettered grid that skips "I", then gives the easting and northing inside
that square. The first letter picks the 500km square (S, T, N, O, H, ...)
measured from the false origin at SV; the second picks the 100km square
within it.

    format_grid_ref(530047, 180339)        -> "TQ 30047 80339"
    format_grid_ref(530047, 180339, 6)     -> "TQ 300 803"
    parse_grid_ref("TQ 30047 80339")       -> GridRef(530047.0, 180339.0)
"""

import math
import re
from typing import NamedTuple

MAX_EASTING = 700000
MAX_NORTHING = 1300000

_VALID_DIGITS = (0, 2, 4, 6, 8, 10, 12, 14, 16)

_NUMERIC_REF_RE = re.compile(r"^(\d+(?:\.\d+)?),\s*(\d+(?:\.\d+)?)$")
_LETTER_REF_RE = re.compile(r"^[HJNOST][ABCDEFGHJKLMNOPQRSTUVWXYZ]\s*[0-9]+\s*[0-9]+$", re.IGNORECASE)


class GridRef(NamedTuple):
    """A validated OSGB36 easting/northing pair, in metres."""

    easting: float
    northing: float

    def __str__(self) -> str:
        return format_grid_ref(self.easting, self.northing)


def grid_ref(easting, northing) -> GridRef:
    """Build a GridRef, rejecting values outside the National Grid.

    Raises TypeError for non-numeric input and ValueError for NaN or
    out-of-range coordinates.
    """
    e = float(easting)
    n = float(northing)
    if math.isnan(e) or not 0 <= e <= MAX_EASTING:
        raise ValueError(f"invalid easting '{easting}'")
    if math.isnan(n) or not 0 <= n <= MAX_NORTHING:
        raise ValueError(f"invalid northing '{northing}'")
    return GridRef(e, n)


def _format_metres(value: float, pad: int) -> str:
    """Plain metres with up to 3 decimals, zero-padded to *pad* integer digits."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    whole, dot, frac = text.partition(".")
    return whole.zfill(pad) + dot + frac


def format_grid_ref(easting, northing, digits: int = 10) -> str:
    """Format an easting/northing as a lettered grid reference.

    *digits* is the total count of numeric digits (10 = 1m resolution);
    0 returns the fully numeric "eeeeee,nnnnnn" form instead.
    """
    if digits not in _VALID_DIGITS:
        raise ValueError(f"invalid precision '{digits}'")
    e, n = grid_ref(easting, northing)

    if digits == 0:
        n_pad = 6 if n < 1e6 else 0
        return f"{_format_metres(e, 6)},{_format_metres(n, n_pad)}"

    e100km = int(e // 100000)
    n100km = int(n // 100000)

    # Letter indices counted from 'A'; 'I' is skipped
    l1 = (19 - n100km) - (19 - n100km) % 5 + (e100km + 10) // 5
    l2 = (19 - n100km) * 5 % 25 + e100km % 5
    if l1 > 7:
        l1 += 1
    if l2 > 7:
        l2 += 1
    letters = chr(ord("A") + l1) + chr(ord("A") + l2)

    half = digits // 2
    scale = 10 ** (5 - half)
    e_part = math.floor((e % 100000) / scale)
    n_part = math.floor((n % 100000) / scale)
    return f"{letters} {e_part:0{half}d} {n_part:0{half}d}"


def parse_grid_ref(text: str) -> GridRef:
    """Parse a lettered ("TQ 30047 80339", "TQ3004780339", "tq 300 803")
    or numeric ("530047,180339") grid reference.

    Shorter references resolve to the south-west corner of the square
    they name. Raises ValueError on anything that is not a grid reference.
    """
    ref = str(text).strip()

    m = _NUMERIC_REF_RE.match(ref)
    if m:
        return grid_ref(m.group(1), m.group(2))

    if not _LETTER_REF_RE.match(ref):
        raise ValueError(f"invalid grid reference '{text}'")

    upper = ref.upper()
    l1 = ord(upper[0]) - ord("A")
    l2 = ord(upper[1]) - ord("A")
    if l1 > 7:
        l1 -= 1
    if l2 > 7:
        l2 -= 1

    # 100km square indices from the false origin (square SV)
    e100km = ((l1 - 2) % 5) * 5 + (l2 % 5)
    n100km = (19 - (l1 // 5) * 5) - (l2 // 5)

    parts = ref[2:].split()
    if len(parts) == 1:
        digits = parts[0]
        parts = [digits[: len(digits) // 2], digits[len(digits) // 2:]]
    if len(parts) != 2 or len(parts[0]) != len(parts[1]):
        raise ValueError(f"invalid grid reference '{text}'")

    return grid_ref(
        e100km * 100000 + _offset_metres(parts[0]),
        n100km * 100000 + _offset_metres(parts[1]),
    )


def _offset_metres(part: str) -> float:
    """Metres into the 100km square; digits past the fifth are decimals."""
    whole = int(part[:5].ljust(5, "0"))
    if len(part) <= 5:
        return whole
    return whole + float("0." + part[5:])
