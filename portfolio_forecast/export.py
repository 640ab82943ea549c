"""
export.py

Serializes a projection into comma-delimited text for download.
"""

import decimal
import json
import math
import time
from typing import Optional, Sequence

from calculators import ProjectionRow


def _format_number(value: float) -> str:
    """
    Render a float with JavaScript's Number-to-String rules: shortest
    round-trip digits, plain notation for decimal exponents in (-7, 21],
    otherwise 'd.ddde+N' / 'd.ddde-N'.
    """
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    shortest = decimal.Decimal(repr(abs(value))).normalize()
    _, digit_tuple, exponent = shortest.as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k  # position of the decimal point relative to the digits

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * (-n) + digits
    else:
        mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
        power = n - 1
        text = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return sign + text


def _json_literal(value) -> str:
    """
    Encode one cell as a JSON literal the way a browser's JSON.stringify
    would: numbers unquoted in JavaScript notation, non-finite numbers as
    null, missing cells as an empty string.
    """
    if value is None:
        return '""'
    if isinstance(value, float):
        if not math.isfinite(value):
            return "null"
        return _format_number(value)
    return json.dumps(value)


def to_delimited_text(rows: Sequence[ProjectionRow]) -> str:
    """
    Header from the first row's field names, then one line per row with
    each value JSON-encoded so embedded commas, quotes and newlines stay
    inside their cell.
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_json_literal(row.get(h)) for h in headers))
    return "\n".join(lines)


def export_filename(now: Optional[float] = None) -> str:
    """
    Download name for the CSV, stamped with epoch milliseconds.
    """
    if now is None:
        now = time.time()
    return f"projection_{int(now * 1000)}.csv"
