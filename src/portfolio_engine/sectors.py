"""Sector rollups and concentration indices"""

from typing import Dict, Iterable, List, Optional, Sequence, Union
import logging
from engine_config import EngineConfig
from .models import EnrichedPosition, SectorAllocation
from .stats import safe_divide


def ensure_enriched(positions: Iterable[Union[EnrichedPosition, dict]]) -> List[EnrichedPosition]:
    """Validate plain dicts into EnrichedPosition instances"""
    return [p if isinstance(p, EnrichedPosition) else EnrichedPosition.model_validate(p) for p in positions]


def herfindahl_index(fractions: Iterable[float]) -> float:
    """Sum of squared allocation fractions (0-1, higher = more concentrated)"""
    return sum(f * f for f in fractions)


class SectorAggregator:
    """Group enriched positions by sector"""

    def __init__(self, config: Optional[EngineConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or EngineConfig()

    def sector_of(self, position: EnrichedPosition) -> str:
        sector = (position.sector or '').strip()
        return sector or self.config.valuation.unknown_sector_label

    def aggregate(self, positions: Iterable[Union[EnrichedPosition, dict]]) -> List[SectorAllocation]:
        """Return per-sector allocations sorted by value descending"""
        positions = ensure_enriched(positions)
        groups: Dict[str, dict] = {}

        for position in positions:
            sector = self.sector_of(position)
            group = groups.setdefault(sector, {'value': 0.0, 'pl': 0.0, 'count': 0})
            group['value'] += position.market_value
            group['pl'] += position.unrealized_pl
            group['count'] += 1

        total_value = sum(p.market_value for p in positions)

        allocations = [
            SectorAllocation(
                sector=sector,
                value=group['value'],
                weight=safe_divide(group['value'], total_value) * 100,
                pl=group['pl'],
                pl_percent=safe_divide(group['pl'], group['value'] - group['pl']) * 100,
                count=group['count'],
            )
            for sector, group in groups.items()
        ]

        allocations.sort(key=lambda a: (-a.value, a.sector))
        self.logger.debug(f"Aggregated {len(positions)} positions into {len(allocations)} sectors")
        return allocations

    def sector_weight_fractions(self, positions: Sequence[EnrichedPosition]) -> Dict[str, float]:
        """Sector value / total value (fraction form, not x100)"""
        total_value = sum(p.market_value for p in positions)
        sector_values: Dict[str, float] = {}
        for position in positions:
            sector = self.sector_of(position)
            sector_values[sector] = sector_values.get(sector, 0.0) + position.market_value
        return {sector: safe_divide(value, total_value) for sector, value in sector_values.items()}

    @staticmethod
    def position_weight_fractions(positions: Sequence[EnrichedPosition]) -> Dict[str, float]:
        """Position value / total value (fraction form, not x100)"""
        total_value = sum(p.market_value for p in positions)
        fractions: Dict[str, float] = {}
        for position in positions:
            fractions[position.symbol] = fractions.get(position.symbol, 0.0) + safe_divide(position.market_value, total_value)
        return fractions
