"""Function-call entry points for the engine.

Each call builds its components from the supplied (or default) config, so
nothing is retained between calls.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union
from engine_config import EngineConfig
from .benchmark import BenchmarkComparator
from .drift import DriftDetector
from .models import (
    Benchmark, BenchmarkComparison, EnrichedPosition, PerformancePoint, PortfolioSummary, Position,
    RebalancingPlan, RebalancingStrategy, RiskMetrics, SectorAllocation, StrategyParameters,
)
from .planner import RebalancePlanner
from .risk import RiskCalculator
from .sectors import SectorAggregator
from .valuation import ClassificationInput, PositionValuator, QuoteInput

Positions = Iterable[Union[EnrichedPosition, dict]]
Series = Iterable[Union[PerformancePoint, dict]]


def valuate(holdings: Iterable[Union[Position, dict]], quotes: QuoteInput = None,
            classifications: ClassificationInput = None) -> PortfolioSummary:
    return PositionValuator().valuate(holdings, quotes, classifications)


def aggregate_sectors(positions: Positions, config: Optional[EngineConfig] = None) -> List[SectorAllocation]:
    return SectorAggregator(config=config).aggregate(positions)


def compute_risk(performance: Series, positions: Positions, benchmark_returns: Optional[Sequence[float]] = None,
                 config: Optional[EngineConfig] = None) -> RiskMetrics:
    return RiskCalculator(config=config).compute(performance, positions, benchmark_returns)


def compare_benchmark(portfolio_series: Series, benchmark_series: Series, benchmark_id: Union[Benchmark, str],
                      align_by_date: bool = False) -> BenchmarkComparison:
    return BenchmarkComparator().compare(portfolio_series, benchmark_series, benchmark_id, align_by_date)


def plan_rebalance(strategy: Union[RebalancingStrategy, str], positions: Positions, total_value: float,
                   strategy_params: Union[StrategyParameters, dict, None] = None,
                   config: Optional[EngineConfig] = None) -> RebalancingPlan:
    return RebalancePlanner(config=config).plan(strategy, positions, total_value, strategy_params)


def calculate_allocation_drift(positions: Positions, targets: Mapping[str, float]) -> Dict[str, float]:
    return DriftDetector().calculate_drift(positions, targets)


def needs_rebalancing(positions: Positions, targets: Mapping[str, float],
                      threshold_percent: Optional[float] = None, config: Optional[EngineConfig] = None) -> bool:
    """Drift check; threshold defaults to the configured 5 percentage points"""
    return DriftDetector(config=config).needs_rebalancing(positions, targets, threshold_percent)
