"""
calculators.py

Provides the core calculation logic for:
- the year-by-year projection table (one compounding step per year)
- summary metrics: current total, projected end value and CAGR
- a pandas view of the projection for charting
"""

import math
from typing import Callable, Dict, List, NamedTuple, Sequence

import numpy as np
import pandas as pd

from models import AssetRow

ProjectionRow = Dict[str, float]


class ProjectionSummary(NamedTuple):
    current_total: float
    projected_end: float
    cagr: float


def project(rows: Sequence[AssetRow], horizon: int, lookup: Callable[[str], float]) -> List[ProjectionRow]:
    """
    Return one row per year from 0..horizon with the total and each asset's value.

    Each asset's principal is tracked individually and grows once per year
    by its looked-up average return. Asset fields are keyed by symbol, so a
    later row sharing a symbol overwrites the earlier row's field while
    'Total' still includes both.
    """
    horizon = max(int(horizon), 0)

    # 1) Set up a vector of principals, one per asset
    amounts = np.array([row.amount for row in rows], dtype=float)
    amounts = np.nan_to_num(amounts, nan=0.0)
    growth = np.array([1 + lookup(row.symbol) / 100 for row in rows], dtype=float)

    projection = []
    for year in range(horizon + 1):
        # 2) Record this year's snapshot
        snapshot = {"Year": year, "Total": float(amounts.sum())}
        for i, row in enumerate(rows):
            snapshot[row.symbol] = float(amounts[i])
        projection.append(snapshot)

        if year == horizon:
            break

        # 3) Grow each principal by its annual rate
        amounts = amounts * growth

    return projection


def current_total(projection: Sequence[ProjectionRow]) -> float:
    if not projection:
        return 0.0
    return projection[0]["Total"]


def projected_end(projection: Sequence[ProjectionRow]) -> float:
    if not projection:
        return 0.0
    return projection[-1]["Total"]


def compound_annual_growth_rate(start_value: float, end_value: float, years: int) -> float:
    """
    Calculates the constant annual rate (percent) that turns 'start_value'
    into 'end_value' over 'years'.

    A non-positive start has no meaningful rate and yields 0. A negative
    end/start ratio has no real root beyond a single year and yields NaN.
    """
    if start_value <= 0:
        return 0.0
    if years < 1:
        raise ValueError(f"CAGR needs at least one year, got {years}")

    ratio = end_value / start_value
    if years == 1:
        return (ratio - 1) * 100
    if ratio < 0:
        return math.nan
    return (ratio ** (1 / years) - 1) * 100


def summarize(projection: Sequence[ProjectionRow], years: int) -> ProjectionSummary:
    start = current_total(projection)
    end = projected_end(projection)
    return ProjectionSummary(start, end, compound_annual_growth_rate(start, end, years))


def projection_frame(projection: Sequence[ProjectionRow]) -> pd.DataFrame:
    """
    The projection as a DataFrame, columns in the same order as the CSV header.
    """
    if not projection:
        return pd.DataFrame(columns=["Year", "Total"])
    return pd.DataFrame(list(projection), columns=list(projection[0].keys()))
