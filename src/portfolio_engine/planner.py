"""Rebalancing plan construction shared by all allocation strategies"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Union
import logging
from engine_config import EngineConfig
from .models import (
    EnrichedPosition, RebalancingAction, RebalancingPlan, RebalancingStrategy,
    RebalancingSummary, StrategyParameters,
)
from .exceptions import DuplicatePositionError
from .sectors import ensure_enriched
from .strategies import TargetAllocationStrategy, resolve_strategy
from .stats import safe_divide

TAX_WARNING = "Review tax implications before selling positions. Consider tax-loss harvesting opportunities."


class RebalancePlanner:
    """Turn a target allocation strategy into a trade plan"""

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or EngineConfig()

    def plan(self, strategy: Union[RebalancingStrategy, str], positions: Iterable[Union[EnrichedPosition, dict]],
             total_value: float, params: Union[StrategyParameters, dict, None] = None) -> RebalancingPlan:
        """
        Build a rebalancing plan for the given strategy.
        Raises UnknownStrategyError for unrecognized strategies,
        InvalidTargetError for unusable custom targets and
        DuplicatePositionError when a symbol appears more than once.
        """
        strategy_cls = resolve_strategy(strategy)
        positions = ensure_enriched(positions)
        if params is None:
            params = StrategyParameters()
        elif not isinstance(params, StrategyParameters):
            params = StrategyParameters.model_validate(params)

        duplicates = sorted(s for s, count in Counter(p.symbol for p in positions).items() if count > 1)
        if duplicates:
            raise DuplicatePositionError(
                f"Positions must be one per symbol, merge lots before planning: {', '.join(duplicates)}"
            )

        allocator = strategy_cls(config=self.config, logger=self.logger)
        targets = allocator.compute_targets(positions, total_value, params)
        return self.build_plan(allocator, positions, total_value, targets,
                               description=allocator.describe(positions, params))

    def build_plan(self, allocator: TargetAllocationStrategy, positions: List[EnrichedPosition],
                   total_value: float, targets: Dict[str, float],
                   description: Optional[str] = None) -> RebalancingPlan:
        """Diff targets against current values, classify actions and summarize"""
        rebalancing_config = self.config.rebalancing
        hold_threshold = abs(total_value) * rebalancing_config.hold_threshold_percent / 100

        actions = [self._build_action(position, total_value, targets.get(position.symbol, 0.0), hold_threshold)
                   for position in positions]

        # sorted() is stable, so ties keep input order
        actions = sorted(actions, key=lambda a: abs(a.value_difference), reverse=True)

        buy_orders = sum(1 for a in actions if a.action == 'buy')
        sell_orders = sum(1 for a in actions if a.action == 'sell')
        hold_positions = sum(1 for a in actions if a.action == 'hold')

        estimated_cost = sum(abs(a.value_difference) for a in actions if a.action != 'hold') \
            * rebalancing_config.commission_rate

        plan = RebalancingPlan(
            strategy=allocator.display_name,
            strategy_description=description or allocator.description,
            total_value=total_value,
            actions=actions,
            summary=RebalancingSummary(
                buy_orders=buy_orders,
                sell_orders=sell_orders,
                hold_positions=hold_positions,
                total_trades=buy_orders + sell_orders,
            ),
            estimated_cost=estimated_cost,
            tax_implications=TAX_WARNING if sell_orders > 0 else None,
            risk_reduction=self._risk_reduction(positions, total_value, targets),
        )

        self.logger.info(
            f"{plan.strategy} plan for ${total_value:,.2f}: {buy_orders} buys, "
            f"{sell_orders} sells, {hold_positions} holds"
        )
        return plan

    def _build_action(self, position: EnrichedPosition, total_value: float,
                      target_allocation: float, hold_threshold: float) -> RebalancingAction:
        current_value = position.market_value
        current_allocation = safe_divide(current_value, total_value) * 100
        target_value = target_allocation / 100 * total_value
        value_difference = target_value - current_value

        target_shares = safe_divide(target_value, position.current_price)
        shares_to_trade = target_shares - position.shares

        if abs(value_difference) <= hold_threshold:
            action = 'hold'
            reason = (f"Current allocation ({current_allocation:.1f}%) is close to "
                      f"target ({target_allocation:.1f}%)")
        elif value_difference > 0:
            action = 'buy'
            reason = f"Increase allocation from {current_allocation:.1f}% to {target_allocation:.1f}%"
        else:
            action = 'sell'
            reason = f"Reduce allocation from {current_allocation:.1f}% to {target_allocation:.1f}%"

        self.logger.debug(
            f"{position.symbol}: ${current_value:,.2f} -> ${target_value:,.2f} ({action})"
        )

        return RebalancingAction(
            symbol=position.symbol,
            company_name=position.company_name,
            action=action,
            current_allocation=current_allocation,
            target_allocation=target_allocation,
            current_shares=position.shares,
            target_shares=round(target_shares, 2),
            shares_to_trade=round(shares_to_trade, 2),
            current_value=current_value,
            target_value=target_value,
            value_difference=value_difference,
            reason=reason,
        )

    @staticmethod
    def _risk_reduction(positions: List[EnrichedPosition], total_value: float,
                        targets: Dict[str, float]) -> float:
        """Percentage points removed from the largest current allocation"""
        if not positions:
            return 0.0

        # max() keeps the first position on ties
        largest = max(positions, key=lambda p: safe_divide(p.market_value, total_value))
        current_allocation = safe_divide(largest.market_value, total_value) * 100
        return max(0.0, current_allocation - targets.get(largest.symbol, 0.0))
