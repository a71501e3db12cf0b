"""
Duration strings in the "1s", "500ms", "1m30s" notation.
"""

import re

_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,  # U+00B5 micro sign
    'μs': 1e-6,  # U+03BC greek mu
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}

_COMPONENT = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)')

_NANOS_PER_SECOND = 1000000000


def parse_duration(text: str) -> float:
    """Parse a duration string into seconds.

    Raises ValueError for anything that is not a sequence of
    number+unit groups with an optional leading sign.
    """
    original = text
    text = text.strip()
    sign = 1.0
    if text[:1] in ('+', '-'):
        if text[0] == '-':
            sign = -1.0
        text = text[1:]

    if text == '0':
        return 0.0
    if not text:
        raise ValueError(f"invalid duration {original!r}")

    total = 0.0
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if not match:
            raise ValueError(f"invalid duration {original!r}")
        total += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()

    return sign * total


def _fraction(value: int, scale: int) -> str:
    whole, remainder = divmod(value, scale)
    if not remainder:
        return str(whole)
    digits = len(str(scale)) - 1
    return f"{whole}.{remainder:0{digits}d}".rstrip('0')


def format_duration(seconds: float) -> str:
    """Render seconds the way Go prints a time.Duration, e.g. 15.234ms or 1m1.5s."""
    nanos = int(round(seconds * _NANOS_PER_SECOND))
    if nanos == 0:
        return '0s'

    sign = '-' if nanos < 0 else ''
    nanos = abs(nanos)

    if nanos < 1000:
        return f"{sign}{nanos}ns"
    if nanos < 1000000:
        return f"{sign}{_fraction(nanos, 1000)}µs"
    if nanos < _NANOS_PER_SECOND:
        return f"{sign}{_fraction(nanos, 1000000)}ms"

    hours, nanos = divmod(nanos, 3600 * _NANOS_PER_SECOND)
    minutes, nanos = divmod(nanos, 60 * _NANOS_PER_SECOND)
    secs = _fraction(nanos, _NANOS_PER_SECOND) + 's'

    if hours:
        return f"{sign}{hours}h{minutes}m{secs}"
    if minutes:
        return f"{sign}{minutes}m{secs}"
    return sign + secs
