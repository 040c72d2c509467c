import re
from typing import Optional

_INT_PREFIX = re.compile(r'\s*([+-]?\d+)')
_FLOAT_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')
_INFINITY = re.compile(r'\s*([+-]?)Infinity')


def parse_int(text: str) -> Optional[int]:
    """Parse the leading integer of `text`; None when there is none.

    Like the usual scripting-language `parseInt`, trailing garbage is
    ignored, so `"42px"` gives 42 and `"3.9"` gives 3.
    """
    m = _INT_PREFIX.match(text)
    if m is None:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # beyond the interpreter's integer string conversion limit
        return None


def parse_float(text: str) -> Optional[float]:
    """Parse the leading decimal number of `text`; None when there is none."""
    m = _FLOAT_PREFIX.match(text)
    if m is not None:
        return float(m.group(1))
    m = _INFINITY.match(text)
    if m is not None:
        return float('-inf') if m.group(1) == '-' else float('inf')
    return None
