"""Monte Carlo simulation API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from retiresim.analysis.portfolio import Portfolio
from retiresim.analysis.sim_models import InvalidParameters, SimulationParameters
from retiresim.analysis.simulation import run_monte_carlo
from retiresim.config import Settings
from retiresim.web.dependencies import get_settings
from retiresim.web.schemas import ApiResponse, SimulationRequest, SimulationResultSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulation", tags=["simulation"])


@router.post("", response_model=ApiResponse[SimulationResultSchema])
async def run_simulation(
    request: SimulationRequest,
    settings: Settings = Depends(get_settings),
):
    """Run a Monte Carlo retirement simulation for a portfolio."""
    try:
        portfolio = Portfolio()
        for h in request.holdings:
            portfolio.add(h.symbol, h.weight, h.expected_return_pct, h.volatility_pct)

        if request.params is None:
            params = settings.default_parameters()
        else:
            params = SimulationParameters(**request.params.model_dump())

        seed = request.seed if request.seed is not None else settings.simulation_seed

        result = await run_in_threadpool(
            run_monte_carlo,
            portfolio.assets,
            params,
            seed=seed,
            max_workers=settings.simulation_max_workers,
            chunk_size=settings.simulation_chunk_size,
        )
    except InvalidParameters as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception:
        logger.exception("Simulation failed")
        raise HTTPException(status_code=500, detail="Simulation failed.")

    return ApiResponse(data=SimulationResultSchema(**result))
