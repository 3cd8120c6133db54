from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional

from .utils import to_decimal

logger = logging.getLogger(__name__)

_BP = Decimal("0.01")  # 1bp in percentage points


class RateType(str, Enum):
    """Indexing scheme that turns a position's stated rate into an annual yield."""
    FIXED = "FIXED"
    OVERNIGHT = "OVERNIGHT"   # rate_value is % of the overnight benchmark
    INFLATION = "INFLATION"   # rate_value is a real margin over inflation

    @classmethod
    def parse(cls, value) -> Optional["RateType"]:
        if isinstance(value, cls):
            return value
        if not value:
            return None
        key = str(value).strip().upper()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_ALIASES = {
    "PREFIXADO": "FIXED",
    "CDI": "OVERNIGHT",
    "IPCA": "INFLATION",
    "INDEXED_TO_OVERNIGHT_RATE": "OVERNIGHT",
    "INDEXED_TO_INFLATION": "INFLATION",
}


def _lenient_decimal(value) -> Optional[Decimal]:
    try:
        return to_decimal(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class MarketRates:
    """
    Snapshot of reference rates, annualised percentages (10 means 10% p.a.).

    Supplied by an external rate source and treated as valid for a whole
    valuation call. A None field means the rate is unavailable.
    """
    overnight_rate: Optional[Decimal] = None
    inflation_rate: Optional[Decimal] = None

    def __post_init__(self):
        object.__setattr__(self, "overnight_rate", _lenient_decimal(self.overnight_rate))
        object.__setattr__(self, "inflation_rate", _lenient_decimal(self.inflation_rate))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping]) -> "MarketRates":
        data = data or {}
        overnight = data.get("overnight_rate", data.get("cdi"))
        inflation = data.get("inflation_rate", data.get("ipca"))
        return cls(overnight_rate=overnight, inflation_rate=inflation)

    def shifted(self, overnight_bp: float = 0.0, inflation_bp: float = 0.0) -> "MarketRates":
        def bump(rate: Optional[Decimal], bp: float) -> Optional[Decimal]:
            if rate is None:
                return None
            return rate + to_decimal(bp) * _BP

        return replace(
            self,
            overnight_rate=bump(self.overnight_rate, overnight_bp),
            inflation_rate=bump(self.inflation_rate, inflation_bp),
        )


def annual_yield(rate_type, rate_value, market: Optional[MarketRates]) -> Decimal:
    """
    Annual yield (decimal, 0.10 = 10%) implied by a rate type and stated rate.

      FIXED:     r / 100
      OVERNIGHT: (overnight / 100) * (r / 100)          multiplier, not a spread
      INFLATION: (1 + inflation / 100) * (1 + r / 100) - 1
      other:     0

    An indexed type whose benchmark is missing from the snapshot yields 0.
    """
    kind = RateType.parse(rate_type)
    rate = _lenient_decimal(rate_value)
    if rate is None:
        return Decimal(0)

    if kind is RateType.FIXED:
        return rate / 100

    elif kind is RateType.OVERNIGHT:
        overnight = market.overnight_rate if market is not None else None
        if overnight is None:
            logger.warning("Overnight rate unavailable; OVERNIGHT yield set to 0")
            return Decimal(0)
        return (overnight / 100) * (rate / 100)

    elif kind is RateType.INFLATION:
        inflation = market.inflation_rate if market is not None else None
        if inflation is None:
            logger.warning("Inflation rate unavailable; INFLATION yield set to 0")
            return Decimal(0)
        return (1 + inflation / 100) * (1 + rate / 100) - 1

    else:
        logger.warning("Unrecognised rate type %r; annual yield set to 0", rate_type)
        return Decimal(0)
