from __future__ import annotations

import math
import re
from typing import Iterable, List, Optional

from config import Range
from errors import OneSampParseError

# Leading numeric prefixes, read the way sscanf("%d") / sscanf("%lf") would.
_INT_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX_RE = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))",
    re.IGNORECASE,
)
_MOTIF_LIST_RE = re.compile(r"^\d+(?:,\d+)*$")


def flag_letter(token: str) -> str:
    return token[1] if len(token) > 1 else ""


def payload(token: str) -> str:
    return token[2:]


def _leading_int(text: str) -> tuple[Optional[int], str]:
    match = _INT_PREFIX_RE.match(text)
    if not match:
        return None, text
    return int(match.group(1)), text[match.end():]


def _leading_float(text: str) -> tuple[Optional[float], str]:
    match = _FLOAT_PREFIX_RE.match(text)
    if not match:
        return None, text
    return float(match.group(1)), text[match.end():]


def _nonnegative(value):
    if value is None or value < 0:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def parse_positive_int(token: str) -> Optional[int]:
    value, _ = _leading_int(payload(token))
    return _nonnegative(value)


def parse_positive_double(token: str) -> Optional[float]:
    value, _ = _leading_float(payload(token))
    return _nonnegative(value)


def _ordered_pair(lo, hi) -> Range:
    lo = _nonnegative(lo)
    hi = _nonnegative(hi)
    if hi is None:
        hi = lo
    if lo is not None and hi is not None and lo > hi:
        lo, hi = hi, lo
    return Range(lo, hi)


def _parse_pair(token: str, leading) -> Range:
    lo, rest = leading(payload(token))
    hi = None
    if lo is not None and rest.startswith(","):
        hi, _ = leading(rest[1:])
    return _ordered_pair(lo, hi)


def parse_positive_int_pair(token: str) -> Range:
    """
    Read `a,b` (or `a`) from the payload of an integer range flag.

    A missing or negative upper value falls back to the lower value; a missing
    or negative lower value is left unset. Endpoints are returned ordered.
    """
    return _parse_pair(token, _leading_int)


def parse_positive_double_pair(token: str) -> Range:
    return _parse_pair(token, _leading_float)


def parse_keyword(token: str, choices: Iterable[str], row: int = 0) -> str:
    word = payload(token)
    if word not in set(choices):
        raise OneSampParseError(
            "Mangled command line argument under -{flag}: check documentation.",
            row=row,
            column=2,
            flag=flag_letter(token),
        )
    return word


def parse_motif_lengths(token: str) -> Optional[List[int]]:
    """
    Motif lengths listed after `-m`, e.g. `-m2,3,4`.

    Returns None when the payload is empty or not a comma separated integer
    list; such a token only selects microsatellite loci.
    """
    text = payload(token)
    if not _MOTIF_LIST_RE.match(text):
        return None
    return [int(part) for part in text.split(",")]
