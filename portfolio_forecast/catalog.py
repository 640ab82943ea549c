"""
catalog.py

Static configuration for the forecaster:
- the ticker catalog offered in the dropdown
- the average annual return table (illustrative defaults)
- horizon limits and default amounts
- an optional CSV override loaded with pandas
"""

import logging
import os
from typing import Dict, List, Optional, Tuple

import pandas as pd

from models import CatalogEntry, normalize_symbol

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PORTFOLIO_FORECAST_CONFIG"

DEFAULT_HORIZON = 5

DEFAULT_SYMBOL = "SPY"
DEFAULT_NEW_AMOUNT = 10_000
DEFAULT_INITIAL_AMOUNT = 100_000

DEFAULT_CATALOG: List[CatalogEntry] = [
    CatalogEntry("SPY", "SPDR S&P 500 ETF"),
    CatalogEntry("VOO", "Vanguard S&P 500"),
    CatalogEntry("QQQ", "Invesco QQQ"),
    CatalogEntry("DIA", "SPDR Dow Jones"),
    CatalogEntry("IWM", "iShares Russell 2000"),
    CatalogEntry("VT", "Vanguard Total World"),
    CatalogEntry("VTI", "Vanguard Total US"),
    CatalogEntry("AAPL"), CatalogEntry("MSFT"), CatalogEntry("GOOGL"), CatalogEntry("AMZN"),
    CatalogEntry("META"), CatalogEntry("NVDA"), CatalogEntry("TSLA"), CatalogEntry("BRK.B"),
    CatalogEntry("UNH"), CatalogEntry("JPM"), CatalogEntry("V"), CatalogEntry("MA"),
    CatalogEntry("BABA"), CatalogEntry("JD"), CatalogEntry("PDD"),
    CatalogEntry("BTC-USD", "Bitcoin"),
    CatalogEntry("ETH-USD", "Ethereum"),
]

# Average annual return in percent (10 means +10%/year)
DEFAULT_RETURNS: Dict[str, float] = {
    "SPY": 10, "VOO": 10, "QQQ": 13, "DIA": 7, "IWM": 9, "VT": 8, "VTI": 10,
    "AAPL": 25, "MSFT": 20, "GOOGL": 18, "AMZN": 27, "META": 22, "NVDA": 35,
    "TSLA": 35, "BRK.B": 19, "UNH": 15, "JPM": 12, "V": 18, "MA": 18,
    "BABA": 12, "JD": 10, "PDD": 40,
    "BTC-USD": 120, "ETH-USD": 90,
}

REQUIRED_COLUMNS = ("symbol", "avg_return")


class CatalogConfigError(ValueError):
    """
    Raised when a catalog/return CSV cannot be turned into configuration.
    """


class ReturnLookup:
    """
    Maps a ticker symbol to its assumed average annual return (percent).
    Unknown symbols resolve to 0.0 rather than raising.
    """

    def __init__(self, table: Optional[Dict[str, float]] = None):
        source = DEFAULT_RETURNS if table is None else table
        self._table = {normalize_symbol(k): float(v) for k, v in source.items()}

    def lookup(self, symbol: Optional[str]) -> float:
        key = normalize_symbol(symbol)
        if key not in self._table:
            logger.debug("No average return configured for %r; using 0%%", key)
            return 0.0
        return self._table[key]

    __call__ = lookup

    def __contains__(self, symbol) -> bool:
        return normalize_symbol(symbol) in self._table

    def __len__(self) -> int:
        return len(self._table)

    def as_dict(self) -> Dict[str, float]:
        return dict(self._table)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "ReturnLookup":
        """
        Build a lookup from a frame with 'symbol' and 'avg_return' columns.
        """
        _check_columns(df)
        returns = pd.to_numeric(df["avg_return"], errors="coerce")
        if returns.isna().any():
            bad = df.loc[returns.isna(), "symbol"].tolist()
            raise CatalogConfigError(f"Non-numeric avg_return for: {bad}")
        return cls(dict(zip(df["symbol"].astype(str), returns.astype(float))))


def _check_columns(df: pd.DataFrame) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise CatalogConfigError(f"Config is missing required column(s): {', '.join(missing)}")
    blank = df["symbol"].isna() | (df["symbol"].astype(str).str.strip() == "")
    if blank.any():
        rows = [int(i) + 1 for i in df.index[blank]]
        raise CatalogConfigError(f"Blank symbol in config row(s): {rows}")


def catalog_from_frame(df: pd.DataFrame) -> List[CatalogEntry]:
    """
    Build the dropdown catalog from a config frame, keeping row order.
    The optional 'label' column supplies display labels.
    """
    _check_columns(df)
    entries = []
    for record in df.to_dict("records"):
        label = record.get("label")
        label = None if label is None or pd.isna(label) else str(label).strip() or None
        entries.append(CatalogEntry(normalize_symbol(str(record["symbol"])), label))
    return entries


def load_config(path: Optional[str] = None) -> Tuple[List[CatalogEntry], ReturnLookup]:
    """
    Return (catalog, return lookup).

    When 'path' is None the PORTFOLIO_FORECAST_CONFIG environment variable
    is consulted; when neither is set the built-in defaults are used.
    A CSV replaces both the catalog and the return table.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return list(DEFAULT_CATALOG), ReturnLookup()

    # Tickers such as "NA" or "NULL" are symbols, not missing values
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip().lower() for c in df.columns]
    catalog = catalog_from_frame(df)
    lookup = ReturnLookup.from_frame(df)
    logger.info("Loaded %d catalog entries from %s", len(catalog), path)
    return catalog, lookup
