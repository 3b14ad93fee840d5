"""Tests for the target allocation strategies in isolation."""

import pytest

from conftest import make_enriched
from engine_config import EngineConfig, RebalancingConfig
from portfolio_engine import STRATEGIES, RebalancingStrategy, StrategyParameters, estimate_sector_volatilities
from portfolio_engine.sectors import ensure_enriched
from portfolio_engine.strategies import SectorBalancedStrategy, resolve_strategy


def sector_totals(targets, positions):
    totals = {}
    for position in positions:
        sector = position.sector or "Unknown"
        totals[sector] = totals.get(sector, 0.0) + targets[position.symbol]
    return totals


def test_registry_covers_every_strategy():
    assert set(STRATEGIES) == set(RebalancingStrategy)
    for key, cls in STRATEGIES.items():
        assert cls.key == key
        assert cls.display_name
        assert cls.description


def test_resolve_strategy_by_enum_key_and_display_name():
    cls = STRATEGIES[RebalancingStrategy.SECTOR_BALANCED]
    assert resolve_strategy(RebalancingStrategy.SECTOR_BALANCED) is cls
    assert resolve_strategy("sector_balanced") is cls
    assert resolve_strategy("  Sector Balanced ") is cls


def test_sector_balanced_with_few_sectors_splits_sectors_evenly(positions, total_value):
    targets = SectorBalancedStrategy().compute_targets(positions, total_value, StrategyParameters())

    assert sector_totals(targets, positions) == pytest.approx({"Technology": 50.0, "Financial Services": 50.0})
    # Within a sector the current proportions are preserved
    assert targets["AAPL"] / targets["MSFT"] == pytest.approx(7500 / 9000)


def test_sector_balanced_caps_every_sector():
    positions = ensure_enriched([
        make_enriched("T1", 3000.0, 30.0, sector="Technology"),
        make_enriched("T2", 2000.0, 20.0, sector="Technology"),
        make_enriched("F1", 2000.0, 20.0, sector="Financial Services"),
        make_enriched("H1", 1000.0, 10.0, sector="Healthcare"),
        make_enriched("E1", 1000.0, 10.0, sector="Energy"),
        make_enriched("U1", 1000.0, 10.0, sector="Utilities"),
    ])
    targets = SectorBalancedStrategy().compute_targets(positions, 10000.0, StrategyParameters())
    totals = sector_totals(targets, positions)

    assert sum(targets.values()) == pytest.approx(100.0)
    assert all(total <= 25.0 + 1e-9 for total in totals.values())
    assert totals["Technology"] == pytest.approx(25.0)
    assert totals["Financial Services"] == pytest.approx(25.0)
    assert totals["Healthcare"] == pytest.approx(50.0 / 3)
    assert targets["T1"] / targets["T2"] == pytest.approx(1.5)


def test_sector_balanced_custom_cap():
    positions = ensure_enriched([
        make_enriched("A", 6000.0, 60.0, sector="Technology"),
        make_enriched("B", 2000.0, 20.0, sector="Energy"),
        make_enriched("C", 1000.0, 10.0, sector="Utilities"),
        make_enriched("D", 1000.0, 10.0, sector="Healthcare"),
    ])
    params = StrategyParameters(max_sector_percent=40.0)
    targets = SectorBalancedStrategy().compute_targets(positions, 10000.0, params)

    assert targets["A"] == pytest.approx(40.0)
    assert targets["B"] == pytest.approx(30.0)
    assert targets["C"] == pytest.approx(15.0)


def test_sector_balanced_cap_from_config():
    positions = ensure_enriched([
        make_enriched("A", 6000.0, 60.0, sector="Technology"),
        make_enriched("B", 2000.0, 20.0, sector="Energy"),
        make_enriched("C", 1000.0, 10.0, sector="Utilities"),
        make_enriched("D", 1000.0, 10.0, sector="Healthcare"),
    ])
    config = EngineConfig(rebalancing=RebalancingConfig(max_sector_percent=30.0))
    targets = SectorBalancedStrategy(config=config).compute_targets(positions, 10000.0, StrategyParameters())

    assert targets["A"] == pytest.approx(30.0)
    assert sum(targets.values()) == pytest.approx(100.0)


def test_sector_balanced_zero_value_splits_equally():
    positions = ensure_enriched([
        make_enriched("A", 0.0, 0.0, sector="Technology"),
        make_enriched("B", 0.0, 0.0, sector="Technology"),
        make_enriched("C", 0.0, 0.0, sector="Energy"),
    ])
    targets = SectorBalancedStrategy().compute_targets(positions, 0.0, StrategyParameters())
    assert targets == pytest.approx({"A": 25.0, "B": 25.0, "C": 50.0})


def test_estimate_sector_volatilities(positions):
    volatilities = estimate_sector_volatilities(positions)
    assert volatilities == {"AAPL": 30.0, "MSFT": 30.0, "JPM": 20.0}


def test_estimate_sector_volatilities_unknown_sector():
    positions = ensure_enriched([make_enriched("X", 100.0, 100.0, sector="Crypto Mining"),
                                 make_enriched("Y", 100.0, 100.0)])
    assert estimate_sector_volatilities(positions) == {"X": 25.0, "Y": 25.0}
