"""Allocation drift against target percentages"""

from typing import Dict, Iterable, Mapping, Optional, Union
import logging
from engine_config import EngineConfig
from .models import EnrichedPosition
from .sectors import ensure_enriched


class DriftDetector:
    """Measure how far holdings have drifted from their targets"""

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or EngineConfig()

    def calculate_drift(self, positions: Iterable[Union[EnrichedPosition, dict]],
                        targets: Mapping[str, float]) -> Dict[str, float]:
        """Actual minus target allocation in percentage points; missing targets count as 0%"""
        weights: Dict[str, float] = {}
        for position in ensure_enriched(positions):
            # Lots of one symbol share a single target
            weights[position.symbol] = weights.get(position.symbol, 0.0) + position.weight
        return {symbol: weight - targets.get(symbol, 0.0) for symbol, weight in weights.items()}

    def needs_rebalancing(self, positions: Iterable[Union[EnrichedPosition, dict]],
                          targets: Mapping[str, float],
                          threshold_percent: Optional[float] = None) -> bool:
        """True iff any holding drifts strictly more than the threshold"""
        if threshold_percent is None:
            threshold_percent = self.config.drift.threshold_percent

        drift = self.calculate_drift(positions, targets)
        breaches = {symbol: d for symbol, d in drift.items() if abs(d) > threshold_percent}

        if breaches:
            worst_symbol = max(breaches, key=lambda s: abs(breaches[s]))
            self.logger.info(
                f"Rebalancing needed: {len(breaches)} holdings beyond {threshold_percent:.2f}pp, "
                f"largest {worst_symbol} at {breaches[worst_symbol]:+.2f}pp"
            )
            return True

        self.logger.debug(f"All {len(drift)} holdings within {threshold_percent:.2f}pp of target")
        return False
