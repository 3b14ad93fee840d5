"""Position valuation against quote snapshots"""

from typing import Dict, Iterable, List, Mapping, Optional, Type, Union
import logging
import math
from pydantic import BaseModel
from .models import Position, Quote, Classification, EnrichedPosition, PortfolioSummary
from .stats import safe_divide

QuoteInput = Union[Mapping[str, Union[Quote, dict]], Iterable[Union[Quote, dict]]]
ClassificationInput = Union[Mapping[str, Union[Classification, dict]], Iterable[Union[Classification, dict]]]


def index_by_symbol(items, model: Type[BaseModel]) -> Dict[str, BaseModel]:
    """Build a symbol map from either a symbol-keyed mapping or a list of records"""
    if items is None:
        return {}
    if isinstance(items, Mapping):
        result = {}
        for symbol, item in items.items():
            record = item if isinstance(item, model) else model.model_validate({'symbol': symbol, **item})
            result[symbol] = record
        return result
    records = [item if isinstance(item, model) else model.model_validate(item) for item in items]
    return {record.symbol: record for record in records}


def _finite(value: Optional[float]) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return value


class PositionValuator:
    """Value raw holdings into enriched positions and portfolio totals"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def valuate(self, holdings: Iterable[Union[Position, dict]], quotes: QuoteInput = None,
                classifications: ClassificationInput = None) -> PortfolioSummary:
        """
        Value every holding and compute portfolio totals.
        Holdings without a usable quote are priced at their average cost.
        """
        positions = self.merge_lots([h if isinstance(h, Position) else Position.model_validate(h) for h in holdings])
        quote_map = index_by_symbol(quotes, Quote)
        profile_map = index_by_symbol(classifications, Classification)

        # First pass: per-holding values and totals
        valued = []
        missing_quotes = []
        total_value = 0.0
        total_cost = 0.0
        total_day_change = 0.0

        for position in positions:
            quote = quote_map.get(position.symbol)
            profile = profile_map.get(position.symbol)

            if self._has_usable_price(quote):
                current_price = quote.price
                change_per_share = _finite(quote.change)
                day_change_percent = _finite(quote.change_percent)
                quote_missing = False
            else:
                self.logger.warning(
                    f"No usable quote for {position.symbol}, valuing at average cost ${position.avg_cost:.2f}"
                )
                current_price = position.avg_cost
                change_per_share = 0.0
                day_change_percent = 0.0
                quote_missing = True
                missing_quotes.append(position.symbol)

            market_value = current_price * position.shares
            cost_basis = position.cost_basis
            unrealized_pl = market_value - cost_basis
            day_change = change_per_share * position.shares

            valued.append({
                'symbol': position.symbol,
                'shares': position.shares,
                'avg_cost': position.avg_cost,
                'company_name': position.company_name or (profile.name if profile else None),
                'sector': position.sector or (profile.sector if profile else None),
                'current_price': current_price,
                'market_value': market_value,
                'cost_basis': cost_basis,
                'unrealized_pl': unrealized_pl,
                'unrealized_pl_percent': safe_divide(unrealized_pl, cost_basis) * 100,
                'day_change': day_change,
                'day_change_percent': day_change_percent,
                'quote_missing': quote_missing,
            })

            total_value += market_value
            total_cost += cost_basis
            total_day_change += day_change

            self.logger.debug(
                f"Valued {position.symbol}: {position.shares:,.4f} @ ${current_price:.2f} = ${market_value:,.2f}"
            )

        # Second pass: weights against the final total
        enriched = [
            EnrichedPosition(weight=safe_divide(item['market_value'], total_value) * 100, **item)
            for item in valued
        ]

        total_pl = total_value - total_cost
        summary = PortfolioSummary(
            total_value=total_value,
            total_cost=total_cost,
            total_pl=total_pl,
            total_pl_percent=safe_divide(total_pl, total_cost) * 100,
            total_day_change=total_day_change,
            day_change_percent=safe_divide(total_day_change, total_value) * 100,
            positions=enriched,
            missing_quotes=missing_quotes,
        )

        self.logger.info(
            f"Valued {len(enriched)} positions: total ${total_value:,.2f}, cost ${total_cost:,.2f}"
            + (f", {len(missing_quotes)} at average cost" if missing_quotes else "")
        )
        return summary

    def merge_lots(self, positions: List[Position]) -> List[Position]:
        """Combine lots of the same symbol into one holding at their weighted average cost"""
        merged: Dict[str, Position] = {}
        for position in positions:
            existing = merged.get(position.symbol)
            if existing is None:
                merged[position.symbol] = position
                continue
            shares = existing.shares + position.shares
            merged[position.symbol] = Position(
                symbol=position.symbol,
                shares=shares,
                avg_cost=(existing.cost_basis + position.cost_basis) / shares,
                company_name=existing.company_name or position.company_name,
                sector=existing.sector or position.sector,
            )

        if len(merged) < len(positions):
            self.logger.info(f"Merged {len(positions)} lots into {len(merged)} holdings")
        return list(merged.values())

    @staticmethod
    def _has_usable_price(quote: Optional[Quote]) -> bool:
        return quote is not None and quote.price is not None and math.isfinite(quote.price) and quote.price > 0
