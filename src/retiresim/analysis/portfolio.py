"""Portfolio holdings as maintained by the portfolio builder."""

import logging
import math
import uuid
from dataclasses import dataclass, field

from retiresim.analysis.catalog import CATALOG_BY_SYMBOL, CatalogEntry
from retiresim.analysis.sim_models import InvalidParameters

logger = logging.getLogger(__name__)

FULL_ALLOCATION = 100.0
ALLOCATION_TOLERANCE = 0.1


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass
class Asset:
    """One holding. ``weight`` is a raw, percentage-like allocation."""

    symbol: str
    weight: float
    expected_return: float   # CAGR fraction
    volatility: float        # annual fraction
    is_custom: bool = False
    id: str = field(default_factory=_new_id)


class Portfolio:
    """Ordered list of holdings with the add/merge/remove rules of the builder."""

    def __init__(
        self,
        assets: list[Asset] | None = None,
        catalog: dict[str, CatalogEntry] = CATALOG_BY_SYMBOL,
    ):
        self.assets: list[Asset] = list(assets or [])
        self.catalog = catalog

    def __iter__(self):
        return iter(self.assets)

    def __len__(self) -> int:
        return len(self.assets)

    @property
    def total_weight(self) -> float:
        return sum(a.weight for a in self.assets)

    @property
    def is_fully_allocated(self) -> bool:
        return abs(self.total_weight - FULL_ALLOCATION) < ALLOCATION_TOLERANCE

    def add(
        self,
        symbol: str,
        weight: float,
        expected_return_pct: float | None = None,
        volatility_pct: float | None = None,
    ) -> Asset:
        """Catalog holding when no assumptions are given, custom holding otherwise."""
        if expected_return_pct is None and volatility_pct is None:
            return self.add_predefined(symbol, weight)
        if expected_return_pct is None or volatility_pct is None:
            raise InvalidParameters(
                f"Custom asset {symbol} needs both expected return and volatility"
            )
        return self.add_custom(symbol, weight, expected_return_pct, volatility_pct)

    def add_predefined(self, symbol: str, weight: float) -> Asset:
        """Add a catalog holding, merging into an existing non-custom entry."""
        _check_weight(weight)
        entry = self.catalog.get(symbol)
        if entry is None:
            raise InvalidParameters(f"Unknown asset symbol: {symbol}")

        for existing in self.assets:
            if existing.symbol == symbol and not existing.is_custom:
                existing.weight += weight
                logger.debug("Merged %.2f into %s (now %.2f)", weight, symbol, existing.weight)
                return existing

        asset = Asset(
            symbol=entry.symbol,
            weight=weight,
            expected_return=entry.expected_return,
            volatility=entry.volatility,
            is_custom=False,
        )
        self.assets.append(asset)
        return asset

    def add_custom(
        self,
        ticker: str,
        weight: float,
        expected_return_pct: float,
        volatility_pct: float,
    ) -> Asset:
        """Add a user-defined holding. Return and volatility are given in percent."""
        _check_weight(weight)
        symbol = ticker.strip().upper()
        if not symbol:
            raise InvalidParameters("Custom asset ticker must not be empty")
        if not (math.isfinite(expected_return_pct) and math.isfinite(volatility_pct)):
            raise InvalidParameters(f"Custom asset {symbol} needs finite return and volatility")

        asset = Asset(
            symbol=symbol,
            weight=weight,
            expected_return=expected_return_pct / 100,
            volatility=volatility_pct / 100,
            is_custom=True,
        )
        self.assets.append(asset)
        return asset

    def remove(self, asset_id: str) -> None:
        self.assets = [a for a in self.assets if a.id != asset_id]


def _check_weight(weight: float) -> None:
    if not math.isfinite(weight) or weight <= 0:
        raise InvalidParameters(f"Weight must be a positive number, got {weight}")
