"""Tests for position valuation."""

import math

import pytest

from portfolio_engine import Classification, Position, Quote, PositionValuator, valuate


def test_totals_and_weights(summary):
    assert summary.total_value == pytest.approx(20000.0)
    assert summary.total_cost == pytest.approx(50 * 120 + 30 * 250 + 25 * 160)
    assert summary.total_pl == pytest.approx(summary.total_value - summary.total_cost)
    assert summary.total_day_change == pytest.approx(50 * 1.5 - 30 * 3.0 + 25 * 0.7)
    assert summary.missing_quotes == []

    weights = {p.symbol: p.weight for p in summary.positions}
    assert weights == pytest.approx({"AAPL": 37.5, "MSFT": 45.0, "JPM": 17.5})
    assert sum(weights.values()) == pytest.approx(100.0)


def test_position_fields(summary):
    aapl = next(p for p in summary.positions if p.symbol == "AAPL")
    assert aapl.current_price == 150.0
    assert aapl.market_value == pytest.approx(7500.0)
    assert aapl.cost_basis == pytest.approx(6000.0)
    assert aapl.unrealized_pl == pytest.approx(1500.0)
    assert aapl.unrealized_pl_percent == pytest.approx(25.0)
    assert aapl.day_change == pytest.approx(75.0)
    assert aapl.day_change_percent == pytest.approx(1.01)
    assert aapl.quote_missing is False


def test_missing_quote_falls_back_to_average_cost(holdings, quotes):
    del quotes["JPM"]
    summary = valuate(holdings, quotes)

    jpm = next(p for p in summary.positions if p.symbol == "JPM")
    assert len(summary.positions) == 3
    assert jpm.current_price == 160.0
    assert jpm.market_value == pytest.approx(4000.0)
    assert jpm.unrealized_pl == 0.0
    assert jpm.day_change == 0.0
    assert jpm.quote_missing is True
    assert summary.missing_quotes == ["JPM"]
    assert summary.total_value == pytest.approx(7500 + 9000 + 4000)
    assert sum(p.weight for p in summary.positions) == pytest.approx(100.0)


@pytest.mark.parametrize("bad_price", [0.0, -5.0, float("nan"), float("inf")])
def test_unusable_quote_price_treated_as_missing(bad_price):
    holdings = [Position(symbol="XYZ", shares=10, avg_cost=20.0)]
    summary = valuate(holdings, [Quote(symbol="XYZ", price=bad_price, change=1.0)])

    position = summary.positions[0]
    assert position.current_price == 20.0
    assert position.day_change == 0.0
    assert summary.missing_quotes == ["XYZ"]


def test_non_finite_change_does_not_leak(holdings):
    quotes = [Quote(symbol="AAPL", price=150.0, change=float("nan"), change_percent=float("inf"))]
    summary = valuate(holdings[:1], quotes)

    for value in summary.positions[0].model_dump().values():
        if isinstance(value, float):
            assert math.isfinite(value)
    assert math.isfinite(summary.day_change_percent)


def test_classifications_fill_missing_name_and_sector():
    holdings = [
        Position(symbol="NVDA", shares=5, avg_cost=400.0),
        Position(symbol="XOM", shares=10, avg_cost=100.0, sector="Energy"),
    ]
    classifications = [
        Classification(symbol="NVDA", name="NVIDIA Corporation", sector="Technology"),
        Classification(symbol="XOM", name="Exxon Mobil", sector="Oil & Gas"),
    ]
    summary = valuate(holdings, {}, classifications)

    nvda, xom = summary.positions
    assert nvda.company_name == "NVIDIA Corporation"
    assert nvda.sector == "Technology"
    assert xom.company_name == "Exxon Mobil"
    assert xom.sector == "Energy"


def test_empty_portfolio_is_all_zero():
    summary = valuate([], {})
    assert summary.positions == []
    assert summary.total_value == 0.0
    assert summary.total_pl_percent == 0.0
    assert summary.day_change_percent == 0.0


def test_invalid_holding_rejected():
    with pytest.raises(ValueError):
        valuate([{"symbol": "AAPL", "shares": 0, "avg_cost": 10.0}], {})


def test_inputs_not_mutated(holdings, quotes):
    before = [h.model_dump() for h in holdings]
    PositionValuator().valuate(holdings, quotes)
    assert [h.model_dump() for h in holdings] == before


def test_quote_with_null_fields_falls_back_to_average_cost():
    holdings = [Position(symbol="A", shares=2, avg_cost=10.0)]
    summary = valuate(holdings, {"A": {"price": None, "change": None}})

    position = summary.positions[0]
    assert position.current_price == 10.0
    assert position.market_value == pytest.approx(20.0)
    assert position.quote_missing is True
    assert summary.missing_quotes == ["A"]


def test_null_change_counts_as_no_day_move():
    holdings = [Position(symbol="A", shares=2, avg_cost=10.0)]
    summary = valuate(holdings, {"A": {"price": 12.0, "change": None, "change_percent": None}})

    position = summary.positions[0]
    assert position.current_price == 12.0
    assert position.day_change == 0.0
    assert position.day_change_percent == 0.0
    assert summary.missing_quotes == []


def test_lots_of_one_symbol_are_merged():
    holdings = [
        Position(symbol="A", shares=10, avg_cost=8.0, sector="Technology"),
        Position(symbol="B", shares=40, avg_cost=10.0),
        Position(symbol="A", shares=30, avg_cost=12.0, company_name="Alpha Corp"),
    ]
    summary = valuate(holdings, {"A": {"price": 10.0}, "B": {"price": 10.0}})

    assert [p.symbol for p in summary.positions] == ["A", "B"]
    lot = summary.positions[0]
    assert lot.shares == 40
    assert lot.avg_cost == pytest.approx((10 * 8.0 + 30 * 12.0) / 40)
    assert lot.cost_basis == pytest.approx(440.0)
    assert lot.sector == "Technology"
    assert lot.company_name == "Alpha Corp"
    assert lot.weight == pytest.approx(50.0)
    assert summary.total_value == pytest.approx(800.0)
