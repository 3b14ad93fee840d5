from .analytics import PortfolioAnalyzer
from .api import (
    valuate,
    aggregate_sectors,
    compute_risk,
    compare_benchmark,
    plan_rebalance,
    calculate_allocation_drift,
    needs_rebalancing,
)
from .benchmark import BENCHMARKS, BenchmarkComparator, resolve_benchmark
from .drift import DriftDetector
from .exceptions import PortfolioEngineError, UnknownStrategyError, InvalidTargetError, DuplicatePositionError
from .logger import configure_logging
from .models import (
    Position,
    Quote,
    Classification,
    PerformancePoint,
    EnrichedPosition,
    PortfolioSummary,
    SectorAllocation,
    RiskMetrics,
    Benchmark,
    BenchmarkComparison,
    RebalancingStrategy,
    StrategyParameters,
    RebalancingAction,
    RebalancingSummary,
    RebalancingPlan,
    PortfolioAnalytics,
)
from .planner import RebalancePlanner
from .risk import RiskCalculator
from .sectors import SectorAggregator, herfindahl_index
from .strategies import TargetAllocationStrategy, STRATEGIES, estimate_sector_volatilities
from .valuation import PositionValuator
from engine_config import EngineConfig, load_config

__version__ = "1.0.0"

__all__ = [
    "valuate",
    "aggregate_sectors",
    "compute_risk",
    "compare_benchmark",
    "plan_rebalance",
    "calculate_allocation_drift",
    "needs_rebalancing",
    "PortfolioAnalyzer",
    "PositionValuator",
    "SectorAggregator",
    "RiskCalculator",
    "BenchmarkComparator",
    "RebalancePlanner",
    "DriftDetector",
    "TargetAllocationStrategy",
    "STRATEGIES",
    "BENCHMARKS",
    "resolve_benchmark",
    "herfindahl_index",
    "estimate_sector_volatilities",
    "configure_logging",
    "EngineConfig",
    "load_config",
    "Position",
    "Quote",
    "Classification",
    "PerformancePoint",
    "EnrichedPosition",
    "PortfolioSummary",
    "SectorAllocation",
    "RiskMetrics",
    "Benchmark",
    "BenchmarkComparison",
    "RebalancingStrategy",
    "StrategyParameters",
    "RebalancingAction",
    "RebalancingSummary",
    "RebalancingPlan",
    "PortfolioAnalytics",
    "PortfolioEngineError",
    "UnknownStrategyError",
    "InvalidTargetError",
    "DuplicatePositionError",
    "__version__",
]
