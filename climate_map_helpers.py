import math
import re

import numpy as np

TRAILING_YEAR = re.compile(r"(\d{4})\s*$")


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def to_float(value):
    """Parse a finite float from a number or numeric string, else None."""
    if is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(number):
        return None
    return number


def trailing_year(text):
    """Extract the trailing 4-digit year from a date string."""
    if is_blank(text):
        return None
    match = TRAILING_YEAR.search(str(text))
    return int(match.group(1)) if match else None


def first_present(properties: dict, fields) -> object:
    """Return the value of the first field present with a non-blank value."""
    for field in fields:
        value = properties.get(field)
        if not is_blank(value):
            return value
    return None
