import re
from typing import Any

DAY_RE = re.compile(r"(\d+(?:\.\d+)?)\s*d(?:ays?)?", re.IGNORECASE)
HOUR_RE = re.compile(r"(\d+(?:\.\d+)?)\s*h(?:ours?)?", re.IGNORECASE)
MINUTE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*m(?:in(?:utes?)?)?", re.IGNORECASE)
NUMBER_RE = re.compile(r"^(\d+(?:\.\d+)?)$")


def parse_duration(value: Any) -> int:
    """Convert a duration such as "2h 30m", "1d 4h", "45m" or "1.5h" to minutes.

    A bare number is read as hours. Integers are taken as minutes already.
    Anything unparseable yields 0 so that partial user input never breaks
    task generation.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if not isinstance(value, str):
        return 0

    text = value.strip().lower()
    if not text:
        return 0

    day_match = DAY_RE.search(text)
    hour_match = HOUR_RE.search(text)
    minute_match = MINUTE_RE.search(text)

    total = 0.0
    if day_match:
        total += float(day_match.group(1)) * 24 * 60
    if hour_match:
        total += float(hour_match.group(1)) * 60
    if minute_match:
        total += float(minute_match.group(1))

    if not (day_match or hour_match or minute_match):
        number_match = NUMBER_RE.match(text)
        if number_match:
            total = float(number_match.group(1)) * 60

    return int(round(total))
