from __future__ import annotations

import math
import re
from typing import Optional

_DEGREE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)$")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_degree(value) -> Optional[int]:
    """Convert an "obtained/total" degree string (e.g. "18/20") to a whole percentage.

    Returns None for anything that is not a degree string. A zero total yields 0.
    """
    if not isinstance(value, str):
        return None
    match = _DEGREE_RE.match(value.strip())
    if not match:
        return None
    obtained = float(match.group(1))
    total = float(match.group(2))
    if total <= 0:
        return 0
    return round_half_up(obtained / total * 100)
