"""Pydantic models for engine configuration with validation."""

from typing import Dict, Literal, Optional
from pydantic import BaseModel, Field, field_validator


DEFAULT_SECTOR_VOLATILITIES: Dict[str, float] = {
    "Technology": 30.0,
    "Healthcare": 25.0,
    "Financial Services": 20.0,
    "Consumer Cyclical": 28.0,
    "Energy": 35.0,
    "Utilities": 15.0,
    "Real Estate": 18.0,
    "Consumer Defensive": 16.0,
    "Industrials": 22.0,
    "Communication Services": 27.0,
    "Unknown": 25.0,
}


class ValuationConfig(BaseModel):
    """Position valuation settings."""

    unknown_sector_label: str = Field(
        default="Unknown",
        min_length=1,
        description="Sector name used for holdings without a classification"
    )


class RiskConfig(BaseModel):
    """Risk statistics parameters."""

    trading_days_per_year: int = Field(
        default=252,
        ge=200,
        le=366,
        description="Trading days used to annualize daily volatility and returns"
    )
    var_z_score: float = Field(
        default=1.645,
        gt=0.0,
        le=5.0,
        description="Normal z-score for one-day parametric VaR (1.645 = 95%)"
    )
    default_beta: float = Field(
        default=1.0,
        ge=-5.0,
        le=5.0,
        description="Beta reported when no usable benchmark return series is supplied"
    )


class RebalancingConfig(BaseModel):
    """Rebalancing plan parameters."""

    hold_threshold_percent: float = Field(
        default=0.2,
        ge=0.0,
        le=5.0,
        description="Hold if value difference is within this percent of total value"
    )
    max_sector_percent: float = Field(
        default=25.0,
        gt=0.0,
        le=100.0,
        description="Default sector cap for the sector balanced strategy"
    )
    default_volatility_percent: float = Field(
        default=20.0,
        gt=0.0,
        le=500.0,
        description="Volatility assumed by risk parity when a symbol has none"
    )
    commission_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=0.1,
        description="Commission rate as decimal used for the plan cost estimate"
    )
    normalization_trigger_percent: float = Field(
        default=0.01,
        ge=0.0,
        le=5.0,
        description="Rescale custom targets when their total differs from 100 by more than this"
    )
    sector_volatilities: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SECTOR_VOLATILITIES),
        description="Annualized volatility heuristic (percent) per sector"
    )

    @field_validator("sector_volatilities")
    @classmethod
    def validate_sector_volatilities(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Every sector volatility must be strictly positive."""
        for sector, volatility in v.items():
            if volatility <= 0:
                raise ValueError(
                    f"Invalid volatility {volatility} for sector '{sector}'. Must be greater than 0"
                )
        return v


class DriftConfig(BaseModel):
    """Allocation drift settings."""

    threshold_percent: float = Field(
        default=5.0,
        ge=0.0,
        le=100.0,
        description="Drift in percentage points above which rebalancing is needed"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Log line format"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path, rotated daily and compressed"
    )
    backup_count: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Number of rotated log files to keep"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class EngineConfig(BaseModel):
    """Root engine configuration."""

    valuation: ValuationConfig = Field(
        default_factory=ValuationConfig,
        description="Position valuation settings"
    )
    risk: RiskConfig = Field(
        default_factory=RiskConfig,
        description="Risk statistics parameters"
    )
    rebalancing: RebalancingConfig = Field(
        default_factory=RebalancingConfig,
        description="Rebalancing plan parameters"
    )
    drift: DriftConfig = Field(
        default_factory=DriftConfig,
        description="Allocation drift settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration"
    )
