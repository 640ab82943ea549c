"""
scenario.py

Encapsulates the editable portfolio and everything derived from it:
- adds, removes and edits asset rows
- holds the projection horizon (clamped to 1..50 years)
- recomputes the projection, totals and CAGR on every read
- exports the projection as CSV text
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import calculators
from calculators import ProjectionRow, ProjectionSummary
from catalog import (
    DEFAULT_HORIZON,
    DEFAULT_INITIAL_AMOUNT,
    DEFAULT_NEW_AMOUNT,
    DEFAULT_SYMBOL,
    ReturnLookup,
    load_config,
)
from export import to_delimited_text
from models import AssetRow, CatalogEntry, clamp_horizon

logger = logging.getLogger(__name__)


class PortfolioState:
    """
    Manages the portfolio's asset rows and horizon using the injected catalog
    and return lookup. Every mutation swaps in a new tuple of rows; nothing
    derived is cached.
    """

    def __init__(
        self,
        catalog: Optional[Sequence[CatalogEntry]] = None,
        lookup: Optional[ReturnLookup] = None,
        assets: Optional[Iterable[AssetRow]] = None,
        horizon=DEFAULT_HORIZON,
    ):
        if catalog is None or lookup is None:
            default_catalog, default_lookup = load_config()
            catalog = default_catalog if catalog is None else catalog
            lookup = default_lookup if lookup is None else lookup
        self.catalog: List[CatalogEntry] = list(catalog)
        self.lookup = lookup
        self._assets: Tuple[AssetRow, ...] = tuple(assets or ())
        self._horizon = clamp_horizon(horizon)

    @classmethod
    def with_defaults(cls, catalog=None, lookup=None) -> "PortfolioState":
        """
        The state a fresh session starts from: one default-symbol row and a 5-year horizon.
        """
        state = cls(catalog=catalog, lookup=lookup)
        state._assets = (AssetRow(state.default_symbol, float(DEFAULT_INITIAL_AMOUNT)),)
        return state

    @property
    def assets(self) -> Tuple[AssetRow, ...]:
        return self._assets

    @property
    def horizon(self) -> int:
        return self._horizon

    @property
    def default_symbol(self) -> str:
        return self.catalog[0].symbol if self.catalog else DEFAULT_SYMBOL

    def get_asset(self, asset_id: str) -> Optional[AssetRow]:
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    # ---------- Mutations ----------

    def add_asset(self) -> AssetRow:
        asset = AssetRow(self.default_symbol, float(DEFAULT_NEW_AMOUNT))
        self._assets = self._assets + (asset,)
        logger.debug("Added asset %s (%s, %s)", asset.id, asset.symbol, asset.amount)
        return asset

    def remove_asset(self, asset_id: str) -> None:
        remaining = tuple(a for a in self._assets if a.id != asset_id)
        if len(remaining) == len(self._assets):
            logger.debug("remove_asset: no asset with id %s", asset_id)
        self._assets = remaining

    def set_asset_symbol(self, asset_id: str, symbol: str) -> None:
        symbol = "" if symbol is None else str(symbol)
        self._replace(asset_id, lambda a: a.with_symbol(symbol))

    def set_asset_amount(self, asset_id: str, amount) -> None:
        self._replace(asset_id, lambda a: a.with_amount(amount))

    def set_horizon(self, value) -> int:
        self._horizon = clamp_horizon(value)
        logger.debug("Horizon set to %d (input %r)", self._horizon, value)
        return self._horizon

    def _replace(self, asset_id, update) -> None:
        updated = []
        found = False
        for asset in self._assets:
            if asset.id == asset_id:
                asset = update(asset)
                found = True
                logger.debug("Updated asset %s -> (%s, %s)", asset.id, asset.symbol, asset.amount)
            updated.append(asset)
        if not found:
            logger.debug("No asset with id %s; update ignored", asset_id)
        self._assets = tuple(updated)

    # ---------- Queries ----------

    def get_projection(self) -> List[ProjectionRow]:
        return calculators.project(self._assets, self._horizon, self.lookup)

    def get_current_total(self) -> float:
        return calculators.current_total(self.get_projection())

    def get_projected_end(self) -> float:
        return calculators.projected_end(self.get_projection())

    def get_cagr(self) -> float:
        return self.get_summary().cagr

    def get_summary(self) -> ProjectionSummary:
        return calculators.summarize(self.get_projection(), self._horizon)

    def export_csv(self) -> str:
        return to_delimited_text(self.get_projection())
