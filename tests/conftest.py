"""
Pytest fixtures shared across the engine tests.
"""

import logging
from datetime import date, timedelta

import pytest

from portfolio_engine import Position, PerformancePoint, valuate


def make_enriched(symbol, market_value, weight, sector=None, shares=1.0, unrealized_pl=0.0):
    """Build a plain EnrichedPosition dict without going through valuation."""
    price = market_value / shares if shares else 0.0
    return {
        "symbol": symbol,
        "shares": shares,
        "avg_cost": price or 1.0,
        "sector": sector,
        "current_price": price,
        "market_value": market_value,
        "cost_basis": market_value - unrealized_pl,
        "unrealized_pl": unrealized_pl,
        "unrealized_pl_percent": 0.0,
        "day_change": 0.0,
        "day_change_percent": 0.0,
        "weight": weight,
    }


def make_series(values, start=date(2024, 1, 1)):
    return [PerformancePoint(date=start + timedelta(days=i), value=v) for i, v in enumerate(values)]


@pytest.fixture
def holdings():
    """Three holdings worth 7500 / 9000 / 3500 (37.5% / 45% / 17.5%)."""
    return [
        Position(symbol="AAPL", shares=50, avg_cost=120.0, company_name="Apple Inc.", sector="Technology"),
        Position(symbol="MSFT", shares=30, avg_cost=250.0, company_name="Microsoft Corporation", sector="Technology"),
        Position(symbol="JPM", shares=25, avg_cost=160.0, company_name="JPMorgan Chase", sector="Financial Services"),
    ]


@pytest.fixture
def quotes():
    return {
        "AAPL": {"price": 150.0, "change": 1.5, "change_percent": 1.01},
        "MSFT": {"price": 300.0, "change": -3.0, "change_percent": -0.99},
        "JPM": {"price": 140.0, "change": 0.7, "change_percent": 0.5},
    }


@pytest.fixture
def summary(holdings, quotes):
    return valuate(holdings, quotes)


@pytest.fixture
def positions(summary):
    return summary.positions


@pytest.fixture
def total_value(summary):
    return summary.total_value


@pytest.fixture
def restore_root_logger(monkeypatch):
    """Give the test its own root handler list and put the level back afterwards."""
    root_logger = logging.getLogger()
    level = root_logger.level
    monkeypatch.setattr(root_logger, "handlers", [])
    yield root_logger
    for handler in root_logger.handlers:
        handler.close()
    root_logger.setLevel(level)
