"""Portfolio versus benchmark comparison"""

from typing import Dict, Iterable, List, Optional, Tuple, Union
import logging
import math
import numpy as np
from .models import Benchmark, BenchmarkComparison, PerformancePoint
from .risk import ensure_series
from .stats import paired_returns, pearson_correlation, safe_divide

BENCHMARKS: Dict[str, Benchmark] = {
    "SP500": Benchmark(symbol="^GSPC", name="S&P 500"),
    "NASDAQ": Benchmark(symbol="^IXIC", name="NASDAQ"),
    "DOW": Benchmark(symbol="^DJI", name="DOW"),
    "FTSE": Benchmark(symbol="^FTSE", name="FTSE 100"),
}


def resolve_benchmark(benchmark_id: Union[Benchmark, str]) -> Benchmark:
    """Look up a benchmark by registry key or symbol; unknown symbols name themselves"""
    if isinstance(benchmark_id, Benchmark):
        return benchmark_id

    key = benchmark_id.strip()
    if key.upper() in BENCHMARKS:
        return BENCHMARKS[key.upper()]
    for benchmark in BENCHMARKS.values():
        if benchmark.symbol.upper() == key.upper():
            return benchmark
    return Benchmark(symbol=key, name=key)


def total_return_percent(series: List[PerformancePoint]) -> float:
    start = series[0].value
    end = series[-1].value
    return safe_divide(end - start, start) * 100


class BenchmarkComparator:
    """Compare portfolio and benchmark value series"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def compare(self, portfolio_series: Iterable[Union[PerformancePoint, dict]],
                benchmark_series: Iterable[Union[PerformancePoint, dict]],
                benchmark_id: Union[Benchmark, str],
                align_by_date: bool = False) -> BenchmarkComparison:
        """
        Return, alpha and correlation of the portfolio against a benchmark.
        Returns are paired by position unless align_by_date is set, in which
        case only dates present in both series are used.
        """
        benchmark = resolve_benchmark(benchmark_id)
        portfolio = [p for p in ensure_series(portfolio_series) if math.isfinite(p.value)]
        bench = [p for p in ensure_series(benchmark_series) if math.isfinite(p.value)]

        if not portfolio or not bench:
            self.logger.debug(f"Empty series, zero comparison against {benchmark.symbol}")
            return BenchmarkComparison(benchmark_symbol=benchmark.symbol, benchmark_name=benchmark.name)

        portfolio_return = total_return_percent(portfolio)
        benchmark_return = total_return_percent(bench)

        if align_by_date:
            pairs = self._pair_by_date(portfolio, bench)
        else:
            pairs = [(p.value, b.value) for p, b in zip(portfolio, bench)]

        portfolio_returns, benchmark_returns = paired_returns(np.array(pairs, dtype=float))
        correlation = pearson_correlation(portfolio_returns, benchmark_returns)

        comparison = BenchmarkComparison(
            benchmark_symbol=benchmark.symbol,
            benchmark_name=benchmark.name,
            portfolio_return=portfolio_return,
            benchmark_return=benchmark_return,
            alpha=portfolio_return - benchmark_return,
            correlation=correlation,
        )

        self.logger.debug(
            f"Benchmark {benchmark.symbol}: portfolio {portfolio_return:.2f}% vs {benchmark_return:.2f}%, "
            f"alpha {comparison.alpha:.2f}, correlation {correlation:.3f} over {portfolio_returns.size} pairs"
        )
        return comparison

    @staticmethod
    def _pair_by_date(portfolio: List[PerformancePoint], bench: List[PerformancePoint]) -> List[Tuple[float, float]]:
        # Later points win when a date repeats
        portfolio_by_date = {point.date: point.value for point in portfolio}
        bench_by_date = {point.date: point.value for point in bench}
        common_dates = sorted(portfolio_by_date.keys() & bench_by_date.keys())
        return [(portfolio_by_date[d], bench_by_date[d]) for d in common_dates]

