"""Target allocation strategies feeding the rebalancing planner.

Every strategy maps the current holdings to a ``{symbol: target percent}``
dictionary covering each held symbol. The planner turns that map into
trade actions, so strategies never build plans themselves.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type, Union
import logging
from engine_config import EngineConfig
from .exceptions import InvalidTargetError, UnknownStrategyError
from .models import EnrichedPosition, RebalancingStrategy, StrategyParameters
from .sectors import SectorAggregator
from .stats import safe_divide


def equal_targets(positions: List[EnrichedPosition]) -> Dict[str, float]:
    if not positions:
        return {}
    share = 100.0 / len(positions)
    return {p.symbol: share for p in positions}


def normalize_scores(positions: List[EnrichedPosition], scores: Dict[str, float]) -> Dict[str, float]:
    """Scale non-negative scores to percentages summing to 100"""
    total = sum(scores.get(p.symbol, 0.0) for p in positions)
    return {p.symbol: safe_divide(scores.get(p.symbol, 0.0), total) * 100 for p in positions}


class TargetAllocationStrategy(ABC):
    """Base class for strategies producing target allocation percentages"""

    key: RebalancingStrategy
    display_name: str
    description: str

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or EngineConfig()
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def compute_targets(self, positions: List[EnrichedPosition], total_value: float,
                        params: StrategyParameters) -> Dict[str, float]:
        """Return target allocation percent for every held symbol"""
        pass

    def describe(self, positions: List[EnrichedPosition], params: StrategyParameters) -> str:
        """Plan description for this call; strategies that adjust their inputs say so here"""
        return self.description


class EqualWeightStrategy(TargetAllocationStrategy):
    key = RebalancingStrategy.EQUAL_WEIGHT
    display_name = "Equal Weight"
    description = "Allocates the portfolio equally across all holdings, providing maximum diversification."

    def compute_targets(self, positions, total_value, params):
        return equal_targets(positions)


class MarketCapWeightStrategy(TargetAllocationStrategy):
    key = RebalancingStrategy.MARKET_CAP_WEIGHT
    display_name = "Market Cap Weight"
    description = "Allocates in proportion to each company's market capitalization."

    def compute_targets(self, positions, total_value, params):
        caps = {p.symbol: max(params.market_caps.get(p.symbol, 0.0), 0.0) for p in positions}
        missing = [p.symbol for p in positions if p.symbol not in params.market_caps]
        if missing:
            self.logger.debug(f"No market cap for {', '.join(missing)}, targeting 0%")

        if positions and sum(caps.values()) <= 0:
            self.logger.warning("No positive market caps supplied, falling back to equal weight")
            return equal_targets(positions)

        return normalize_scores(positions, caps)


class SectorBalancedStrategy(TargetAllocationStrategy):
    key = RebalancingStrategy.SECTOR_BALANCED
    display_name = "Sector Balanced"
    description = "Caps every sector's share of the portfolio, reducing sector concentration risk."

    def compute_targets(self, positions, total_value, params):
        if not positions:
            return {}

        aggregator = SectorAggregator(config=self.config, logger=self.logger)
        sector_members: Dict[str, List[EnrichedPosition]] = {}
        for position in positions:
            sector_members.setdefault(aggregator.sector_of(position), []).append(position)

        max_sector = params.max_sector_percent or self.config.rebalancing.max_sector_percent
        # A cap below 100 / sectors cannot be satisfied; split sectors evenly instead
        cap = max(max_sector, 100.0 / len(sector_members))
        if cap > max_sector:
            self.logger.info(
                f"Sector cap {max_sector:.1f}% unreachable with {len(sector_members)} sectors, using {cap:.2f}%"
            )

        sector_values = {s: sum(p.market_value for p in members) for s, members in sector_members.items()}
        sector_targets = self._cap_sector_weights(sector_values, cap)

        targets = {}
        for sector, members in sector_members.items():
            sector_value = sector_values[sector]
            for position in members:
                if sector_value > 0:
                    share = position.market_value / sector_value
                else:
                    share = 1.0 / len(members)
                targets[position.symbol] = sector_targets[sector] * share
        return targets

    @staticmethod
    def _cap_sector_weights(sector_values: Dict[str, float], cap: float) -> Dict[str, float]:
        """Water-fill sector weights: clamp to the cap, redistribute the excess pro rata"""
        total = sum(sector_values.values())
        if total > 0:
            base = {s: v / total * 100 for s, v in sector_values.items()}
        else:
            base = {s: 100.0 / len(sector_values) for s in sector_values}

        weights = dict(base)
        capped = set()
        while True:
            over = [s for s in weights if s not in capped and weights[s] > cap + 1e-9]
            if not over:
                break
            capped.update(over)

            free = [s for s in weights if s not in capped]
            remaining = 100.0 - cap * len(capped)
            free_base = sum(base[s] for s in free)
            for s in capped:
                weights[s] = cap
            for s in free:
                if free_base > 0:
                    weights[s] = remaining * base[s] / free_base
                else:
                    weights[s] = remaining / len(free)
        return weights


class RiskParityStrategy(TargetAllocationStrategy):
    key = RebalancingStrategy.RISK_PARITY
    display_name = "Risk Parity"
    description = "Allocates by inverse volatility, giving more weight to stable holdings and less to volatile ones."

    def compute_targets(self, positions, total_value, params):
        default_volatility = self.config.rebalancing.default_volatility_percent
        inverse_volatilities = {}
        for position in positions:
            volatility = params.volatilities.get(position.symbol)
            if volatility is None or volatility <= 0:
                self.logger.debug(
                    f"No usable volatility for {position.symbol}, assuming {default_volatility:.1f}%"
                )
                volatility = default_volatility
            inverse_volatilities[position.symbol] = 1.0 / volatility
        return normalize_scores(positions, inverse_volatilities)


class CustomTargetStrategy(TargetAllocationStrategy):
    key = RebalancingStrategy.CUSTOM
    display_name = "Custom Targets"
    description = "Uses caller-defined target allocations."

    def compute_targets(self, positions, total_value, params):
        held = {p.symbol for p in positions}
        unknown = sorted(set(params.custom_targets) - held)
        if unknown:
            raise InvalidTargetError(
                f"Custom targets reference symbols not in the portfolio: {', '.join(unknown)}"
            )

        negative = sorted(s for s, t in params.custom_targets.items() if t < 0)
        if negative:
            raise InvalidTargetError(f"Custom targets must not be negative: {', '.join(negative)}")

        targets = {p.symbol: params.custom_targets.get(p.symbol, 0.0) for p in positions}
        if not positions:
            return targets

        total = sum(targets.values())
        if total <= 0:
            raise InvalidTargetError("Custom targets must allocate a positive total percentage")

        trigger = self.config.rebalancing.normalization_trigger_percent
        if abs(total - 100.0) > trigger:
            self.logger.warning(f"Custom targets total {total:.3f}%, normalizing to 100%")
            targets = {symbol: target / total * 100 for symbol, target in targets.items()}
        return targets

    def describe(self, positions, params):
        total = sum(params.custom_targets.get(p.symbol, 0.0) for p in positions)
        if positions and total > 0 and abs(total - 100.0) > self.config.rebalancing.normalization_trigger_percent:
            return f"{self.description} Targets summed to {total:.2f}% and were rescaled to 100%."
        return self.description


STRATEGIES: Dict[RebalancingStrategy, Type[TargetAllocationStrategy]] = {
    cls.key: cls for cls in (
        EqualWeightStrategy,
        MarketCapWeightStrategy,
        SectorBalancedStrategy,
        RiskParityStrategy,
        CustomTargetStrategy,
    )
}


def resolve_strategy(strategy: Union[RebalancingStrategy, str]) -> Type[TargetAllocationStrategy]:
    """Find a strategy class by enum member, key or display name (case-insensitive)"""
    if isinstance(strategy, RebalancingStrategy):
        return STRATEGIES[strategy]

    if isinstance(strategy, str):
        wanted = strategy.strip().lower()
        for key, cls in STRATEGIES.items():
            if wanted in (key.value, cls.display_name.lower()):
                return cls

    raise UnknownStrategyError(
        f"Unknown rebalancing strategy: {strategy!r}. "
        f"Expected one of: {', '.join(k.value for k in STRATEGIES)}"
    )


def estimate_sector_volatilities(positions: List[EnrichedPosition],
                                 config: Optional[EngineConfig] = None) -> Dict[str, float]:
    """Per-symbol volatility heuristic from the configured sector table"""
    config = config or EngineConfig()
    aggregator = SectorAggregator(config=config)
    table = config.rebalancing.sector_volatilities
    fallback = table.get(config.valuation.unknown_sector_label, config.rebalancing.default_volatility_percent)
    return {p.symbol: table.get(aggregator.sector_of(p), fallback) for p in positions}
