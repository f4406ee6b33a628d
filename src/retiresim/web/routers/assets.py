"""Predefined asset catalog endpoints."""

from fastapi import APIRouter, HTTPException

from retiresim.analysis.catalog import PREDEFINED_ASSETS, CatalogEntry, find_asset
from retiresim.web.schemas import ApiResponse, AssetInfo

router = APIRouter(prefix="/assets", tags=["assets"])


def _to_info(entry: CatalogEntry) -> AssetInfo:
    return AssetInfo(
        symbol=entry.symbol,
        name=entry.name,
        expected_return=entry.expected_return,
        volatility=entry.volatility,
        asset_type=entry.asset_type.value,
    )


@router.get("", response_model=ApiResponse[list[AssetInfo]])
async def list_assets():
    """List the predefined holdings offered by the portfolio builder."""
    return ApiResponse(data=[_to_info(a) for a in PREDEFINED_ASSETS])


@router.get("/{symbol}", response_model=ApiResponse[AssetInfo])
async def get_asset(symbol: str):
    """Get one catalog entry."""
    entry = find_asset(symbol.upper())
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Asset {symbol} not found")
    return ApiResponse(data=_to_info(entry))
