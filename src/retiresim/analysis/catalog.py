"""Predefined asset catalog.

Long-run capital market assumptions for the standard holdings offered by the
portfolio builder. Values are annual fractions (0.10 = 10%).
"""

from dataclasses import dataclass
from enum import Enum


class AssetType(str, Enum):
    EQUITY = "equity"
    CRYPTO = "crypto"
    METAL = "metal"


@dataclass(frozen=True)
class CatalogEntry:
    symbol: str
    name: str
    expected_return: float
    volatility: float
    asset_type: AssetType


PREDEFINED_ASSETS: tuple[CatalogEntry, ...] = (
    # US large-cap
    CatalogEntry("SPY", "S&P 500 (SPY)", 0.10, 0.16, AssetType.EQUITY),
    CatalogEntry("QQQ", "Nasdaq 100 (QQQ)", 0.13, 0.22, AssetType.EQUITY),
    CatalogEntry("DIA", "Dow Jones (DIA)", 0.09, 0.15, AssetType.EQUITY),
    CatalogEntry("VOO", "Vanguard S&P 500 (VOO)", 0.10, 0.16, AssetType.EQUITY),
    CatalogEntry("VTI", "Total US Market (VTI)", 0.10, 0.17, AssetType.EQUITY),
    # International developed
    CatalogEntry("VEA", "Developed Markets (VEA)", 0.06, 0.17, AssetType.EQUITY),
    CatalogEntry("AVDV", "Intl Small Cap Value (AVDV)", 0.07, 0.19, AssetType.EQUITY),
    # Emerging
    CatalogEntry("VWO", "Emerging Markets (VWO)", 0.06, 0.22, AssetType.EQUITY),
    CatalogEntry("IDX", "Indonesia (IDX)", 0.05, 0.28, AssetType.EQUITY),
    # US small-cap
    CatalogEntry("AVUV", "US Small Cap Value (AVUV)", 0.11, 0.24, AssetType.EQUITY),
    # Crypto
    CatalogEntry("BTC", "Bitcoin (BTC)", 0.30, 0.65, AssetType.CRYPTO),
    CatalogEntry("ETH", "Ethereum (ETH)", 0.25, 0.80, AssetType.CRYPTO),
    CatalogEntry("SOL", "Solana (SOL)", 0.20, 0.95, AssetType.CRYPTO),
    # Precious metals
    CatalogEntry("GLD", "Gold (GLD)", 0.06, 0.15, AssetType.METAL),
    CatalogEntry("SLV", "Silver (SLV)", 0.04, 0.28, AssetType.METAL),
)

CATALOG_BY_SYMBOL: dict[str, CatalogEntry] = {a.symbol: a for a in PREDEFINED_ASSETS}


def find_asset(
    symbol: str, catalog: dict[str, CatalogEntry] = CATALOG_BY_SYMBOL
) -> CatalogEntry | None:
    return catalog.get(symbol)


def resolve_asset_type(
    symbol: str, catalog: dict[str, CatalogEntry] = CATALOG_BY_SYMBOL
) -> AssetType:
    """Catalog type for ``symbol``; custom assets behave like equity."""
    entry = catalog.get(symbol)
    return entry.asset_type if entry else AssetType.EQUITY
