"""Text-to-number conversion for the journal's numeric text fields."""

import math


def to_number(value) -> float | None:
    """Return value as a finite float, or None when missing or non-numeric.

    Accepts the journal's numeric text ("12.5", " 3 ") as well as plain
    numbers. Blank strings, NaN and infinities are treated as missing.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None
