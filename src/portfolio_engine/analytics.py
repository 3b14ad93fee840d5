"""Full portfolio analytics report"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union
import logging
from engine_config import EngineConfig
from .benchmark import BenchmarkComparator, resolve_benchmark
from .models import Benchmark, PerformancePoint, PortfolioAnalytics, Position
from .risk import RiskCalculator, ensure_series
from .sectors import SectorAggregator
from .stats import simple_returns
from .valuation import ClassificationInput, PositionValuator, QuoteInput

BenchmarkSeries = Tuple[Union[Benchmark, str], Sequence[Union[PerformancePoint, dict]]]


class PortfolioAnalyzer:
    """Chain valuation, sector rollup, risk and benchmark comparison"""

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or EngineConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.valuator = PositionValuator(logger=self.logger)
        self.sectors = SectorAggregator(config=self.config, logger=self.logger)
        self.risk = RiskCalculator(config=self.config, logger=self.logger)
        self.comparator = BenchmarkComparator(logger=self.logger)

    def analyze(self, holdings: Iterable[Union[Position, dict]], quotes: QuoteInput = None,
                classifications: ClassificationInput = None,
                performance: Iterable[Union[PerformancePoint, dict]] = (),
                benchmarks: Iterable[BenchmarkSeries] = ()) -> PortfolioAnalytics:
        """
        Produce a PortfolioAnalytics report.
        The first benchmark series also supplies the returns used for beta.
        """
        summary = self.valuator.valuate(holdings, quotes, classifications)
        series = ensure_series(performance)
        benchmark_inputs: List[Tuple[Benchmark, List[PerformancePoint]]] = [
            (resolve_benchmark(benchmark_id), ensure_series(points)) for benchmark_id, points in benchmarks
        ]

        benchmark_returns = None
        if benchmark_inputs:
            benchmark_returns = simple_returns([p.value for p in benchmark_inputs[0][1]])

        comparisons = [
            self.comparator.compare(series, points, benchmark)
            for benchmark, points in benchmark_inputs
        ]

        analytics = PortfolioAnalytics(
            summary=summary,
            performance=series,
            sector_allocation=self.sectors.aggregate(summary.positions),
            risk_metrics=self.risk.compute(series, summary.positions, benchmark_returns),
            benchmarks=comparisons,
        )

        self.logger.info(
            f"Analytics for {len(summary.positions)} positions over {len(series)} points "
            f"against {len(comparisons)} benchmarks"
        )
        return analytics
