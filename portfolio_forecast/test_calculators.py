import math

import pytest
import numpy as np
import pandas as pd

from calculators import (
    project,
    current_total,
    projected_end,
    compound_annual_growth_rate,
    summarize,
    projection_frame,
)
from catalog import ReturnLookup
from models import AssetRow


@pytest.fixture
def lookup():
    return ReturnLookup({"SPY": 10, "QQQ": 13, "FLAT": 0, "BTC-USD": 120})


# =====================================================
# Tests for project
# =====================================================
@pytest.mark.parametrize("horizon", [0, 1, 5, 50])
def test_project_row_count_and_years(lookup, horizon):
    rows = [AssetRow("SPY", 1000), AssetRow("QQQ", 500)]
    projection = project(rows, horizon, lookup)
    assert len(projection) == horizon + 1
    assert [r["Year"] for r in projection] == list(range(horizon + 1))


def test_project_single_asset_one_year(lookup):
    projection = project([AssetRow("SPY", 100000)], 1, lookup)
    assert projection[0] == {"Year": 0, "Total": 100000, "SPY": 100000}
    assert projection[1]["Year"] == 1
    assert np.isclose(projection[1]["Total"], 110000)
    assert np.isclose(projection[1]["SPY"], 110000)


def test_project_two_assets_two_years(lookup):
    rows = [AssetRow("SPY", 100000), AssetRow("QQQ", 100000)]
    projection = project(rows, 2, lookup)
    assert np.isclose(projection[2]["SPY"], 121000)
    assert np.isclose(projection[2]["QQQ"], 127690)
    assert np.isclose(projection[2]["Total"], 248690)


def test_project_total_matches_asset_fields(lookup):
    rows = [AssetRow("SPY", 2500), AssetRow("QQQ", 7000), AssetRow("BTC-USD", 300)]
    for row in project(rows, 10, lookup):
        assert np.isclose(row["Total"], row["SPY"] + row["QQQ"] + row["BTC-USD"])


def test_project_year_zero_equals_inputs_exactly(lookup):
    rows = [AssetRow("SPY", 1234.56), AssetRow("QQQ", 0.1)]
    first = project(rows, 3, lookup)[0]
    assert first["SPY"] == 1234.56
    assert first["QQQ"] == 0.1


def test_project_zero_return_is_constant(lookup):
    rows = [AssetRow("FLAT", 5000), AssetRow("UNKNOWN", 2500)]
    totals = [r["Total"] for r in project(rows, 20, lookup)]
    assert all(t == 7500 for t in totals)


def test_project_horizon_zero_applies_no_growth(lookup):
    projection = project([AssetRow("BTC-USD", 100)], 0, lookup)
    assert projection == [{"Year": 0, "Total": 100, "BTC-USD": 100}]


def test_project_negative_amount_compounds(lookup):
    projection = project([AssetRow("SPY", -1000)], 2, lookup)
    assert np.isclose(projection[2]["SPY"], -1210)


def test_project_empty_portfolio(lookup):
    projection = project([], 4, lookup)
    assert len(projection) == 5
    assert all(r["Total"] == 0 and set(r) == {"Year", "Total"} for r in projection)


def test_project_symbol_lookup_is_case_insensitive(lookup):
    projection = project([AssetRow(" spy ", 100)], 1, lookup)
    assert np.isclose(projection[1][" spy "], 110)


def test_project_duplicate_symbols_last_writer_wins(lookup):
    rows = [AssetRow("SPY", 100), AssetRow("SPY", 300)]
    first = project(rows, 1, lookup)[0]
    assert first["SPY"] == 300
    assert first["Total"] == 400
    assert list(first) == ["Year", "Total", "SPY"]


def test_project_nan_amount_treated_as_zero(lookup):
    row = AssetRow("SPY", 100)
    object.__setattr__(row, "amount", float("nan"))
    projection = project([row], 1, lookup)
    assert projection[0]["Total"] == 0
    assert projection[1]["SPY"] == 0


def test_project_accepts_plain_callable():
    projection = project([AssetRow("ANY", 100)], 1, lambda symbol: 50)
    assert np.isclose(projection[1]["Total"], 150)


# =====================================================
# Tests for summary metrics
# =====================================================
def test_current_and_projected_end(lookup):
    projection = project([AssetRow("SPY", 100000)], 3, lookup)
    assert current_total(projection) == 100000
    assert np.isclose(projected_end(projection), 133100)


def test_totals_of_empty_projection():
    assert current_total([]) == 0.0
    assert projected_end([]) == 0.0


def test_cagr_single_asset_matches_its_return(lookup):
    projection = project([AssetRow("SPY", 100000)], 1, lookup)
    summary = summarize(projection, 1)
    assert np.isclose(summary.cagr, 10)


def test_cagr_blended_portfolio_between_returns(lookup):
    projection = project([AssetRow("SPY", 100000), AssetRow("QQQ", 100000)], 10, lookup)
    cagr = summarize(projection, 10).cagr
    assert 10 < cagr < 13


@pytest.mark.parametrize("start", [0, -100])
def test_cagr_zero_for_non_positive_start(start):
    assert compound_annual_growth_rate(start, 500, 5) == 0.0


@pytest.mark.parametrize("years", [2, 3, 10])
def test_cagr_negative_ratio_is_nan(years):
    assert math.isnan(compound_annual_growth_rate(100, -50, years))


def test_cagr_negative_ratio_over_one_year_is_real():
    assert np.isclose(compound_annual_growth_rate(10, -8, 1), -180.0)


def test_cagr_one_year_with_negative_holding(lookup):
    projection = project([AssetRow("BTC-USD", -100), AssetRow("FLAT", 150)], 1, lookup)
    # 50 -> -70 over one year
    assert np.isclose(summarize(projection, 1).cagr, -240.0)


def test_cagr_full_loss_is_minus_hundred():
    assert np.isclose(compound_annual_growth_rate(100, 0, 4), -100)


def test_cagr_requires_a_year():
    with pytest.raises(ValueError):
        compound_annual_growth_rate(100, 200, 0)


def test_summarize_empty_portfolio(lookup):
    summary = summarize(project([], 5, lookup), 5)
    assert summary == (0.0, 0.0, 0.0)


# =====================================================
# Tests for projection_frame
# =====================================================
def test_projection_frame_columns_follow_header(lookup):
    projection = project([AssetRow("QQQ", 10), AssetRow("SPY", 20)], 2, lookup)
    df = projection_frame(projection)
    assert list(df.columns) == ["Year", "Total", "QQQ", "SPY"]
    assert len(df) == 3
    pd.testing.assert_series_equal(df["Year"], pd.Series([0, 1, 2], name="Year"))


def test_projection_frame_empty():
    df = projection_frame([])
    assert list(df.columns) == ["Year", "Total"]
    assert df.empty
