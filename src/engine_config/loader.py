"""Configuration loader with validation."""

import logging
import yaml
from pathlib import Path

from .models import EngineConfig

logger = logging.getLogger(__name__)


def load_config(config_path: str | Path) -> EngineConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to a YAML configuration file

    Returns:
        Validated EngineConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ValueError(f"Invalid configuration: top level of {config_path} must be a mapping")

    try:
        config = EngineConfig(**raw_config)
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail
    logger.info("Configuration loaded successfully:")
    logger.info(f"  Trading days per year: {config.risk.trading_days_per_year}")
    logger.info(f"  VaR z-score: {config.risk.var_z_score}")
    logger.info(f"  Hold threshold: {config.rebalancing.hold_threshold_percent}%")
    logger.info(f"  Max sector allocation: {config.rebalancing.max_sector_percent}%")
    logger.info(f"  Default volatility: {config.rebalancing.default_volatility_percent}%")
    logger.info(f"  Commission rate: {config.rebalancing.commission_rate * 100}%")
    logger.info(f"  Drift threshold: {config.drift.threshold_percent}pp")

    return config
