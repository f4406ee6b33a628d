from pydantic_settings import BaseSettings, SettingsConfigDict

from retiresim.analysis.sim_models import SimulationParameters


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RS_",
    )

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_dir: str = "logs"

    # Default simulation parameters
    simulation_initial_equity: float = 100000.0
    simulation_annual_withdrawal: float = 4000.0
    simulation_inflation_rate: float = 0.025
    simulation_time_horizon: int = 30
    simulation_iterations: int = 10000
    simulation_enable_fat_tails: bool = False
    simulation_enable_correlations: bool = False
    simulation_enable_mean_reversion: bool = False

    # Reproducibility (None = fresh OS entropy per run)
    simulation_seed: int | None = None

    # Parallelization
    simulation_max_workers: int = 1
    simulation_chunk_size: int = 2500

    def default_parameters(self) -> SimulationParameters:
        return SimulationParameters(
            initial_equity=self.simulation_initial_equity,
            annual_withdrawal=self.simulation_annual_withdrawal,
            inflation_rate=self.simulation_inflation_rate,
            time_horizon=self.simulation_time_horizon,
            iterations=self.simulation_iterations,
            enable_fat_tails=self.simulation_enable_fat_tails,
            enable_correlations=self.simulation_enable_correlations,
            enable_mean_reversion=self.simulation_enable_mean_reversion,
        )
