from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

import pandas as pd

from . import config
from .rates import MarketRates, RateType, annual_yield
from .utils import elapsed_years, to_decimal, to_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    issuer: str
    intermediary: str = ""
    principal: Optional[Decimal] = None
    rate_type: Optional[RateType] = None
    rate_value: Optional[Decimal] = None    # semantics depend on rate_type
    tax_rate: Optional[Decimal] = None      # percent, applied to profit only
    start_date: Optional[pd.Timestamp] = None
    due_date: Optional[pd.Timestamp] = None
    future_value_gross: Optional[Decimal] = None
    future_value_net: Optional[Decimal] = None
    position_id: Optional[str] = None
    title: str = config.DEFAULT_TITLE
    quantity: int = 1
    created_at: Optional[pd.Timestamp] = None


@dataclass(frozen=True)
class CalculationResult:
    gross: Decimal
    net: Decimal

    @classmethod
    def zero(cls) -> "CalculationResult":
        return cls(gross=Decimal(0), net=Decimal(0))


def _lenient_decimal(value) -> Optional[Decimal]:
    try:
        return to_decimal(value)
    except ValueError:
        return None


def _lenient_timestamp(value) -> Optional[pd.Timestamp]:
    try:
        return to_timestamp(value)
    except ValueError:
        return None


def _growth_factor(base: Decimal, years: Decimal) -> Decimal:
    """
    base ** years without Decimal's InvalidOperation signals.

    A zero span gives 1 (also for a zero base); a negative base with a
    fractional exponent gives NaN.
    """
    if years == 0:
        return Decimal(1)
    if base < 0 and years != years.to_integral_value():
        return Decimal("NaN")
    return base ** years


def valuate(
    position: Position,
    market: Optional[MarketRates],
    as_of: Optional[pd.Timestamp] = None,
) -> CalculationResult:
    """
    Projected gross and net value of a position at its due date.

      gross = principal * (1 + annual_yield) ** elapsed_years
      net   = principal + profit * (1 - tax/100)   if profit > 0
              gross                                otherwise

    Incomplete input (missing or non-positive principal, missing rate value,
    due date or rate type) gives a zero result instead of an error, since
    the entry form calls this on every edit. `as_of` replaces "now" when
    the position has no start date. No rounding is applied.
    """
    principal = _lenient_decimal(position.principal)
    rate_value = _lenient_decimal(position.rate_value)
    due = _lenient_timestamp(position.due_date)

    if not principal or principal <= 0 or not rate_value or due is None or not position.rate_type:
        logger.debug("Incomplete position for %r; returning zero valuation", position.issuer)
        return CalculationResult.zero()

    start = _lenient_timestamp(position.start_date)
    if start is None:
        start = to_timestamp(as_of) if as_of is not None else pd.Timestamp.now()

    years = elapsed_years(start, due)
    growth = _growth_factor(1 + annual_yield(position.rate_type, rate_value, market), years)
    gross = principal * growth
    if gross.is_nan():
        logger.debug("Annual yield below -100%% for %r; valuation is NaN", position.issuer)
        return CalculationResult(gross=gross, net=gross)

    tax = _lenient_decimal(position.tax_rate) or Decimal(0)
    profit = gross - principal
    if profit > 0:
        net = principal + profit * (1 - tax / 100)
    else:
        net = gross

    return CalculationResult(gross=gross, net=net)


def commit_position(
    position: Position,
    market: Optional[MarketRates],
    as_of: Optional[pd.Timestamp] = None,
) -> Position:
    """Attach freshly computed gross/net values, as done on add or edit commit."""
    result = valuate(position, market, as_of)
    return replace(position, future_value_gross=result.gross, future_value_net=result.net)


def new_position_draft(as_of: Optional[pd.Timestamp] = None, **overrides) -> Position:
    """Blank entry-form state: overnight-indexed at 100%, 15% tax, due in one year."""
    today = (to_timestamp(as_of) if as_of is not None else pd.Timestamp.now()).normalize()
    draft = Position(
        issuer="",
        rate_type=RateType.parse(config.DEFAULT_RATE_TYPE),
        rate_value=config.DEFAULT_RATE_VALUE,
        tax_rate=config.DEFAULT_TAX_RATE,
        due_date=today + pd.Timedelta(days=config.DEFAULT_TERM_DAYS),
    )
    return replace(draft, **overrides)
