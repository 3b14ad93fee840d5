"""Risk statistics for a portfolio value series"""

from typing import Iterable, List, Optional, Sequence, Union
import logging
import numpy as np
from engine_config import EngineConfig
from .models import EnrichedPosition, PerformancePoint, RiskMetrics
from .sectors import SectorAggregator, ensure_enriched, herfindahl_index
from .stats import drawdowns, mean, population_std, population_variance, population_covariance, simple_returns


def ensure_series(points: Iterable[Union[PerformancePoint, dict]]) -> List[PerformancePoint]:
    """Validate plain dicts into PerformancePoint instances"""
    return [p if isinstance(p, PerformancePoint) else PerformancePoint.model_validate(p) for p in points]


class RiskCalculator:
    """Compute volatility, beta, Sharpe ratio, drawdown, concentration and VaR"""

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or EngineConfig()
        self.sectors = SectorAggregator(config=self.config, logger=self.logger)

    def compute(self, performance: Iterable[Union[PerformancePoint, dict]],
                positions: Iterable[Union[EnrichedPosition, dict]],
                benchmark_returns: Optional[Sequence[float]] = None) -> RiskMetrics:
        """
        Compute risk metrics from an ordered value series.
        Fewer than two points yields an all-zero RiskMetrics.
        """
        series = ensure_series(performance)
        positions = ensure_enriched(positions)

        raw_values = np.array([point.value for point in series], dtype=float)
        values = raw_values[np.isfinite(raw_values)]
        if values.size != raw_values.size:
            self.logger.warning(f"Ignoring {raw_values.size - values.size} non-finite points in performance series")

        if values.size < 2:
            self.logger.debug(f"Insufficient history for risk metrics ({values.size} points)")
            return RiskMetrics()

        risk_config = self.config.risk
        returns = simple_returns(values)

        avg_return = mean(returns)
        daily_volatility = population_std(returns)
        annualized_volatility = daily_volatility * float(np.sqrt(risk_config.trading_days_per_year))

        beta = self._calculate_beta(returns, benchmark_returns)

        # Sharpe assumes a 0% risk-free rate
        annualized_return = avg_return * risk_config.trading_days_per_year
        sharpe_ratio = annualized_return / annualized_volatility if annualized_volatility > 0 else 0.0

        max_drawdown, current_drawdown = drawdowns(values)

        total_value = sum(p.market_value for p in positions)
        sector_concentration = herfindahl_index(self.sectors.sector_weight_fractions(positions).values())
        position_concentration = herfindahl_index(self.sectors.position_weight_fractions(positions).values())

        value_at_risk = max(total_value, 0.0) * risk_config.var_z_score * daily_volatility

        metrics = RiskMetrics(
            daily_volatility=daily_volatility,
            annualized_volatility=annualized_volatility,
            beta=beta,
            sharpe_ratio=sharpe_ratio,
            max_drawdown=max_drawdown,
            current_drawdown=current_drawdown,
            sector_concentration=sector_concentration,
            position_concentration=position_concentration,
            value_at_risk=value_at_risk,
        )

        self.logger.debug(
            f"Risk metrics over {returns.size} returns: vol={annualized_volatility:.4f}, "
            f"beta={beta:.3f}, sharpe={sharpe_ratio:.3f}, maxDD={max_drawdown:.4f}"
        )
        return metrics

    def _calculate_beta(self, returns: np.ndarray, benchmark_returns: Optional[Sequence[float]]) -> float:
        """cov(r, b) / var(b) when the series line up, otherwise the configured default"""
        default_beta = self.config.risk.default_beta

        if benchmark_returns is None:
            return default_beta

        benchmark = np.asarray(benchmark_returns, dtype=float)
        if benchmark.size != returns.size:
            self.logger.debug(
                f"Benchmark returns length {benchmark.size} != portfolio returns length {returns.size}, "
                f"using default beta {default_beta}"
            )
            return default_beta

        if not np.all(np.isfinite(benchmark)):
            self.logger.warning("Benchmark returns contain non-finite values, using default beta")
            return default_beta

        benchmark_variance = population_variance(benchmark)
        if benchmark_variance <= 0:
            return default_beta

        return population_covariance(returns, benchmark) / benchmark_variance
