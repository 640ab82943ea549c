import logging
import math
import os
from datetime import date

import streamlit as st
import plotly.express as px

from calculators import projection_frame
from catalog import load_config
from export import export_filename
from models import MAX_HORIZON, MIN_HORIZON
from scenario import PortfolioState

LOG_LEVEL_ENV_VAR = "PORTFOLIO_FORECAST_LOG_LEVEL"

logger = logging.getLogger(__name__)

# --------------------------------------------------
# Helper Functions
# --------------------------------------------------

def configure_logging():
    level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def format_dollars(value):
    """
    Whole-dollar display, e.g. 1234.56 -> "$1,235".
    """
    if value is None or math.isnan(value):
        return "n/a"
    return f"${value:,.0f}"


def format_percent(value):
    """
    Percentage with at most two decimals and no trailing zeros, e.g. 10.5 -> "10.5%".
    """
    if value is None or math.isnan(value):
        return "n/a"
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return f"{text}%"


def projected_end_label(horizon, today=None):
    today = today or date.today()
    return f"Projected (End of Year {today.year + horizon})"


def build_projection_chart(projection):
    """
    Line chart of the portfolio Total against Year with dollar-formatted axis.
    """
    df = projection_frame(projection)
    fig = px.line(df, x="Year", y="Total", markers=False)
    fig.update_traces(line=dict(width=2), hovertemplate="Year %{x}<br>$%{y:,.0f}<extra>Total</extra>")
    fig.update_layout(
        margin=dict(l=8, r=16, t=16, b=8),
        showlegend=True,
        xaxis_title="Year",
        yaxis_title=None,
    )
    fig.data[0].update(name="Total", showlegend=True)
    fig.update_yaxes(tickprefix="$", tickformat=",.0f")
    return fig


def get_portfolio():
    """
    The session's PortfolioState, created from configuration on first use.
    """
    if "portfolio" not in st.session_state:
        catalog, lookup = load_config()
        logger.info("Starting new session with %d catalog entries", len(catalog))
        st.session_state["portfolio"] = PortfolioState.with_defaults(catalog, lookup)
    return st.session_state["portfolio"]


def _on_symbol_change(portfolio, asset_id):
    portfolio.set_asset_symbol(asset_id, st.session_state[f"symbol_{asset_id}"])


def _on_amount_change(portfolio, asset_id):
    portfolio.set_asset_amount(asset_id, st.session_state[f"amount_{asset_id}"])


def _on_horizon_change(portfolio):
    portfolio.set_horizon(st.session_state["horizon"])


def render_assets(portfolio):
    st.subheader("Assets")
    st.button("➕ Add", on_click=portfolio.add_asset, key="add_asset")

    st.number_input(
        "Years", MIN_HORIZON, MAX_HORIZON, portfolio.horizon, step=1,
        key="horizon", on_change=_on_horizon_change, args=(portfolio,)
    )

    labels = {entry.symbol: entry.display_name for entry in portfolio.catalog}
    for asset in portfolio.assets:
        options = list(labels)
        if asset.symbol not in labels:
            options.append(asset.symbol)
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            st.selectbox(
                "Ticker", options, index=options.index(asset.symbol),
                format_func=lambda s: labels.get(s, s),
                key=f"symbol_{asset.id}", on_change=_on_symbol_change, args=(portfolio, asset.id)
            )
        with col2:
            st.number_input(
                "Amount", value=float(asset.amount), step=1_000.0,
                key=f"amount_{asset.id}", on_change=_on_amount_change, args=(portfolio, asset.id)
            )
        with col3:
            st.button("🗑️", key=f"remove_{asset.id}", on_click=portfolio.remove_asset, args=(asset.id,))

    st.caption("Uses built-in average annual return per ticker. Adjust years with the control above.")


# --------------------------------------------------
# Streamlit App
# --------------------------------------------------

def main():
    configure_logging()
    st.set_page_config(page_title="Portfolio Forecast", layout="wide")
    st.title("📈 Portfolio Forecast (Minimal)")

    portfolio = get_portfolio()

    left, right = st.columns([1, 2])
    with left:
        render_assets(portfolio)

    projection = portfolio.get_projection()
    summary = portfolio.get_summary()

    with right:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Current Portfolio", format_dollars(summary.current_total))
        with col2:
            st.metric(projected_end_label(portfolio.horizon), format_dollars(summary.projected_end))
        with col3:
            st.metric("Approx CAGR", format_percent(summary.cagr))

        st.subheader(f"{portfolio.horizon}-Year Projection")
        st.plotly_chart(build_projection_chart(projection), use_container_width=True)

        st.download_button(
            "⬇️ CSV", data=portfolio.export_csv(), file_name=export_filename(),
            mime="text/csv", key="download_csv"
        )

        with st.expander("Projection table", expanded=False):
            frame = projection_frame(projection)
            st.dataframe(frame.style.format(
                {col: '${:,.0f}' for col in frame.columns if col != 'Year'}
            ))

    st.caption("Built for quick estimates. Not financial advice. Extend the catalog/returns for broader coverage.")


if __name__ == "__main__":
    main()
