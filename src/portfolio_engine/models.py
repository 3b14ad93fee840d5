import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

# Input models
class Position(BaseModel):
    """Raw holding as recorded by the portfolio owner"""
    symbol: str = Field(min_length=1)
    shares: float = Field(gt=0)
    avg_cost: float = Field(gt=0)
    company_name: Optional[str] = None
    sector: Optional[str] = None

    @property
    def cost_basis(self) -> float:
        return self.shares * self.avg_cost

class Quote(BaseModel):
    """Quote snapshot for one symbol"""
    symbol: str
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None

class Classification(BaseModel):
    """Company name and sector lookup result"""
    symbol: str
    name: Optional[str] = None
    sector: Optional[str] = None

class PerformancePoint(BaseModel):
    """Portfolio (or benchmark) value on one date"""
    date: datetime.date
    value: float
    pl: Optional[float] = None
    pl_percent: Optional[float] = None

# Valuation models
class EnrichedPosition(BaseModel):
    """Holding valued against the current quote"""
    symbol: str
    shares: float
    avg_cost: float
    company_name: Optional[str] = None
    sector: Optional[str] = None
    current_price: float
    market_value: float
    cost_basis: float
    unrealized_pl: float
    unrealized_pl_percent: float
    day_change: float
    day_change_percent: float
    weight: float  # Percentage of total portfolio value
    quote_missing: bool = False  # True when priced at avg_cost

class PortfolioSummary(BaseModel):
    """Valued holdings plus portfolio totals"""
    total_value: float
    total_cost: float
    total_pl: float
    total_pl_percent: float
    total_day_change: float
    day_change_percent: float
    positions: List[EnrichedPosition]
    missing_quotes: List[str] = Field(default_factory=list)

class SectorAllocation(BaseModel):
    """Aggregated holdings for one sector"""
    sector: str
    value: float
    weight: float
    pl: float
    pl_percent: float
    count: int

# Risk and benchmark models
class RiskMetrics(BaseModel):
    """Risk statistics derived from a value series and current holdings"""
    daily_volatility: float = 0.0
    annualized_volatility: float = 0.0
    beta: float = 0.0
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0
    current_drawdown: float = 0.0
    sector_concentration: float = 0.0  # HHI, 0-1
    position_concentration: float = 0.0  # HHI, 0-1
    value_at_risk: float = 0.0  # 95% one-day, currency units

class Benchmark(BaseModel):
    """Benchmark index identity"""
    symbol: str
    name: str

class BenchmarkComparison(BaseModel):
    """Portfolio return measured against a benchmark"""
    benchmark_symbol: str
    benchmark_name: str
    portfolio_return: float = 0.0
    benchmark_return: float = 0.0
    alpha: float = 0.0
    correlation: float = 0.0

# Rebalancing models
class RebalancingStrategy(str, Enum):
    """Supported target allocation strategies"""
    EQUAL_WEIGHT = "equal_weight"
    MARKET_CAP_WEIGHT = "market_cap_weight"
    SECTOR_BALANCED = "sector_balanced"
    RISK_PARITY = "risk_parity"
    CUSTOM = "custom"

class StrategyParameters(BaseModel):
    """Caller supplied inputs consumed by the allocation strategies"""
    market_caps: Dict[str, float] = Field(default_factory=dict)
    volatilities: Dict[str, float] = Field(default_factory=dict)
    max_sector_percent: Optional[float] = Field(default=None, gt=0, le=100)
    custom_targets: Dict[str, float] = Field(default_factory=dict)

class RebalancingAction(BaseModel):
    """Proposed trade (or hold) for one holding"""
    symbol: str
    company_name: Optional[str] = None
    action: Literal['buy', 'sell', 'hold']
    current_allocation: float
    target_allocation: float
    current_shares: float
    target_shares: float
    shares_to_trade: float
    current_value: float
    target_value: float
    value_difference: float  # target_value - current_value
    reason: str

class RebalancingSummary(BaseModel):
    """Action counts for a plan"""
    buy_orders: int
    sell_orders: int
    hold_positions: int
    total_trades: int

class RebalancingPlan(BaseModel):
    """Trade plan produced by one strategy"""
    strategy: str
    strategy_description: str = ""
    total_value: float
    actions: List[RebalancingAction]
    summary: RebalancingSummary
    estimated_cost: float = 0.0
    tax_implications: Optional[str] = None
    risk_reduction: float = 0.0

# Composite report
class PortfolioAnalytics(BaseModel):
    """Valuation, composition, risk and benchmark report"""
    summary: PortfolioSummary
    performance: List[PerformancePoint]
    sector_allocation: List[SectorAllocation]
    risk_metrics: RiskMetrics
    benchmarks: List[BenchmarkComparison] = Field(default_factory=list)
