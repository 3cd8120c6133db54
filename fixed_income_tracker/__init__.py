"""
Fixed Income Position Tracker

Modules:
- rates: rate types, market-rate snapshot, annual yield resolution
- positions: position record + valuation engine (gross/net future value)
- exposure: per-issuer aggregation against the deposit guarantee ceiling
- portfolio: positions frame, vectorised valuation, dashboard summary
- scenarios: market-rate what-if runs
- records: data-store row <-> domain object mapping
- utils: parsing, day counting, display formatting
- config: business constants

Display and persistence layers should import from this package.
"""
from .exceptions import InvalidLimitError, PositionRecordError, TrackerError
from .exposure import GuaranteeStatus, IssuerExposure, aggregate_exposure, classify_exposure
from .positions import CalculationResult, Position, commit_position, new_position_draft, valuate
from .rates import MarketRates, RateType, annual_yield

__all__ = [
    "CalculationResult",
    "GuaranteeStatus",
    "InvalidLimitError",
    "IssuerExposure",
    "MarketRates",
    "Position",
    "PositionRecordError",
    "RateType",
    "TrackerError",
    "aggregate_exposure",
    "annual_yield",
    "classify_exposure",
    "commit_position",
    "new_position_draft",
    "valuate",
]
