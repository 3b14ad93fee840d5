"""Tests for allocation drift and rebalance-need detection."""

import pytest

from conftest import make_enriched
from engine_config import DriftConfig, EngineConfig
from portfolio_engine import DriftDetector, calculate_allocation_drift, needs_rebalancing

TARGETS = {"AAPL": 33.33, "MSFT": 33.33, "JPM": 33.34}


@pytest.fixture
def drifted():
    return [
        make_enriched("AAPL", 7500.0, 37.5, sector="Technology"),
        make_enriched("MSFT", 9000.0, 45.0, sector="Technology"),
        make_enriched("JPM", 3500.0, 17.5, sector="Financial Services"),
    ]


@pytest.fixture
def balanced():
    return [
        make_enriched("AAPL", 10000.0, 33.33),
        make_enriched("MSFT", 10000.0, 33.33),
        make_enriched("JPM", 10000.0, 33.34),
    ]


def test_drift_per_symbol(drifted):
    drift = calculate_allocation_drift(drifted, TARGETS)

    assert list(drift) == ["AAPL", "MSFT", "JPM"]
    assert drift["AAPL"] == pytest.approx(37.5 - 33.33)
    assert drift["MSFT"] == pytest.approx(45 - 33.33)
    assert drift["JPM"] == pytest.approx(17.5 - 33.34)


def test_missing_target_counts_as_zero(drifted):
    drift = calculate_allocation_drift(drifted, {"AAPL": 37.5})
    assert drift["AAPL"] == 0.0
    assert drift["MSFT"] == 45.0


def test_needs_rebalancing_when_drift_exceeds_threshold(drifted):
    assert needs_rebalancing(drifted, TARGETS, 5) is True


def test_no_rebalancing_when_on_target(balanced):
    assert needs_rebalancing(balanced, TARGETS, 5) is False


def test_threshold_equality_does_not_trigger():
    positions = [make_enriched("AAPL", 6000.0, 60.0), make_enriched("MSFT", 4000.0, 40.0)]
    assert needs_rebalancing(positions, {"AAPL": 55.0, "MSFT": 45.0}, 5.0) is False
    assert needs_rebalancing(positions, {"AAPL": 55.0, "MSFT": 45.0}, 4.999) is True


def test_threshold_defaults_to_config(drifted):
    lenient = EngineConfig(drift=DriftConfig(threshold_percent=20.0))

    assert needs_rebalancing(drifted, TARGETS) is True
    assert needs_rebalancing(drifted, TARGETS, config=lenient) is False
    assert DriftDetector(config=lenient).needs_rebalancing(drifted, TARGETS, threshold_percent=10.0) is True


def test_empty_portfolio_never_needs_rebalancing():
    assert calculate_allocation_drift([], TARGETS) == {}
    assert needs_rebalancing([], TARGETS) is False


def test_lots_of_one_symbol_share_a_target():
    positions = [
        make_enriched("AAPL", 2500.0, 25.0),
        make_enriched("MSFT", 5000.0, 50.0),
        make_enriched("AAPL", 2500.0, 25.0),
    ]
    drift = calculate_allocation_drift(positions, {"AAPL": 50.0, "MSFT": 50.0})

    assert drift == pytest.approx({"AAPL": 0.0, "MSFT": 0.0})
    assert needs_rebalancing(positions, {"AAPL": 50.0, "MSFT": 50.0}) is False
