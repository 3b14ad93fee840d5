"""Configuration management for the portfolio analytics engine."""

from .models import (
    EngineConfig,
    ValuationConfig,
    RiskConfig,
    RebalancingConfig,
    DriftConfig,
    LoggingConfig,
    DEFAULT_SECTOR_VOLATILITIES,
)
from .loader import load_config

__all__ = [
    "EngineConfig",
    "ValuationConfig",
    "RiskConfig",
    "RebalancingConfig",
    "DriftConfig",
    "LoggingConfig",
    "DEFAULT_SECTOR_VOLATILITIES",
    "load_config",
]
