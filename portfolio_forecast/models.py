"""
models.py

Contains the value types shared by the forecaster:
- CatalogEntry (a ticker offered in the dropdown)
- AssetRow (one user-entered holding)
- normalization helpers for symbols, amounts and the horizon
"""

import decimal
import math
import numbers
import re
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional

MIN_HORIZON = 1
MAX_HORIZON = 50

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def new_asset_id() -> str:
    return uuid.uuid4().hex


def normalize_symbol(symbol: Optional[str]) -> str:
    """
    Trim and upper-case a ticker so lookups are case-insensitive.
    """
    if symbol is None:
        return ""
    return str(symbol).strip().upper()


def parse_amount(value) -> float:
    """
    Coerce user input into a dollar amount.

    Numbers pass through; strings are read from their leading numeric
    prefix ("12.5k" -> 12.5). Anything unparsable, NaN or infinite is 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, decimal.Decimal):
        amount = float(value) if value.is_finite() else 0.0
    elif isinstance(value, numbers.Real):
        amount = float(value)
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        amount = float(match.group(1)) if match else 0.0
    else:
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def clamp_horizon(value) -> int:
    """
    Coerce user input into a whole number of years within [MIN_HORIZON, MAX_HORIZON].
    Unparsable input counts as 0 and therefore clamps up to MIN_HORIZON.
    """
    years = 0
    if isinstance(value, bool) or value is None:
        years = 0
    elif isinstance(value, numbers.Integral):
        years = int(value)
    elif isinstance(value, (numbers.Real, decimal.Decimal)):
        if isinstance(value, decimal.Decimal) and value.is_snan():
            value = math.nan
        number = float(value)
        if math.isnan(number):
            years = 0
        elif math.isinf(number):
            years = MAX_HORIZON if number > 0 else MIN_HORIZON
        else:
            years = math.trunc(number)
    elif isinstance(value, str):
        match = _INT_PREFIX.match(value)
        years = int(match.group(1)) if match else 0
    return max(MIN_HORIZON, min(MAX_HORIZON, years))


@dataclass(frozen=True)
class CatalogEntry:
    """
    A ticker offered in the asset dropdown, with an optional display label.
    """

    symbol: str
    label: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.label:
            return f"{self.symbol} – {self.label}"
        return self.symbol


@dataclass(frozen=True)
class AssetRow:
    """
    One holding in the portfolio: a ticker symbol and the dollars currently in it.

    Rows are immutable; updates produce a new row carrying the same id.
    """

    symbol: str
    amount: float = 0.0
    id: str = field(default_factory=new_asset_id)

    def __post_init__(self):
        object.__setattr__(self, "amount", parse_amount(self.amount))

    def with_symbol(self, symbol: str) -> "AssetRow":
        return replace(self, symbol=symbol)

    def with_amount(self, amount) -> "AssetRow":
        return replace(self, amount=amount)
