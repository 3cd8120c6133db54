from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from . import config
from .exposure import GuaranteeStatus, aggregate_exposure
from .positions import Position
from .rates import MarketRates, RateType
from .utils import NS_PER_DAY, to_decimal, to_timestamp


FRAME_COLUMNS = [
    "position_id", "issuer", "intermediary", "title", "principal", "rate_type",
    "rate_value", "tax_rate", "start_date", "due_date",
    "future_value_gross", "future_value_net",
]


def _as_float(value) -> float:
    try:
        d = to_decimal(value)
    except ValueError:
        return np.nan
    return np.nan if d is None else float(d)


def _rate_type_label(value) -> Optional[str]:
    if not value:
        return None
    kind = RateType.parse(value)
    return kind.value if kind is not None else str(value)


def _as_timestamp(value):
    try:
        return to_timestamp(value)
    except ValueError:
        return None


def positions_frame(positions: Iterable[Position]) -> pd.DataFrame:
    """One row per position, numeric fields as float64 (NaN when missing)."""
    rows = []
    for p in list(positions):
        rows.append({
            "position_id": p.position_id,
            "issuer": p.issuer,
            "intermediary": p.intermediary,
            "title": p.title,
            "principal": _as_float(p.principal),
            "rate_type": _rate_type_label(p.rate_type),
            "rate_value": _as_float(p.rate_value),
            "tax_rate": _as_float(p.tax_rate),
            "start_date": _as_timestamp(p.start_date),
            "due_date": _as_timestamp(p.due_date),
            "future_value_gross": _as_float(p.future_value_gross),
            "future_value_net": _as_float(p.future_value_net),
        })

    out = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    out["start_date"] = pd.to_datetime(out["start_date"])
    out["due_date"] = pd.to_datetime(out["due_date"])
    return out


def value_positions_vectorized(
    frame: pd.DataFrame,
    market: Optional[MarketRates],
    as_of: Optional[pd.Timestamp] = None,
) -> pd.DataFrame:
    """
    Vectorised counterpart of positions.valuate over a positions frame.

    Adds 'annual_yield', 'elapsed_years', 'gross' and 'net' columns. Rows with
    incomplete input get gross = net = 0, same as the scalar engine.
    """
    now = to_timestamp(as_of) if as_of is not None else pd.Timestamp.now()
    out = frame.copy()

    principal = pd.to_numeric(out["principal"], errors="coerce").to_numpy(dtype=float)
    rate = pd.to_numeric(out["rate_value"], errors="coerce").to_numpy(dtype=float)
    tax = pd.to_numeric(out["tax_rate"], errors="coerce").fillna(0.0).to_numpy(dtype=float)

    labels = out["rate_type"]
    has_type = (labels.notna() & (labels.astype(str) != "")).to_numpy()
    parsed = [RateType.parse(v) if has else None for v, has in zip(labels, has_type)]
    kinds = np.array([k.value if k is not None else "" for k in parsed], dtype=object)

    start = pd.to_datetime(out["start_date"], errors="coerce").fillna(now)
    due = pd.to_datetime(out["due_date"], errors="coerce")
    has_due = due.notna().to_numpy()

    ns = (due - start).abs().fillna(pd.Timedelta(0)).to_numpy(dtype="timedelta64[ns]").astype(np.int64)
    days = -(-ns // NS_PER_DAY)
    years = days / float(config.DAYS_PER_YEAR)

    overnight = market.overnight_rate if market is not None else None
    inflation = market.inflation_rate if market is not None else None

    y_fixed = rate / 100.0
    y_ovn = (float(overnight) / 100.0) * (rate / 100.0) if overnight is not None else np.zeros_like(rate)
    y_inf = (1.0 + float(inflation) / 100.0) * (1.0 + rate / 100.0) - 1.0 if inflation is not None else np.zeros_like(rate)

    ann = np.select(
        [kinds == RateType.FIXED.value, kinds == RateType.OVERNIGHT.value, kinds == RateType.INFLATION.value],
        [y_fixed, y_ovn, y_inf],
        default=0.0,
    )

    valid = (principal > 0) & ~np.isnan(rate) & (rate != 0) & has_due & has_type

    # negative base with a fractional exponent -> NaN, same as the scalar engine
    with np.errstate(invalid="ignore"):
        gross = np.where(valid, principal * np.power(1.0 + ann, years), 0.0)
    profit = gross - principal
    net = np.where(valid & (profit > 0), principal + profit * (1.0 - tax / 100.0), gross)

    out["annual_yield"] = np.where(valid, ann, 0.0)
    out["elapsed_years"] = np.where(valid, years, 0.0)
    out["gross"] = gross
    out["net"] = net
    return out


def portfolio_summary(positions: Iterable[Position], limit=config.GUARANTEE_LIMIT) -> Dict[str, object]:
    """
    Headline figures for the dashboard cards.

    Uses stored future values; positions never committed contribute their
    principal to total_invested and nothing to the projected totals.
    """
    snapshot = list(positions)

    def total(attr: str) -> Decimal:
        return sum((to_decimal(getattr(p, attr)) or Decimal(0) for p in snapshot), Decimal(0))

    invested = total("principal")
    gross = total("future_value_gross")
    net = total("future_value_net")
    exposures = aggregate_exposure(snapshot, limit)

    return {
        "total_invested": invested,
        "total_gross": gross,
        "total_net": net,
        "projected_profit_net": net - invested,
        "position_count": len(snapshot),
        "issuer_count": len(exposures),
        "issuers_over_limit": [
            e.issuer for e in exposures.values() if e.status is GuaranteeStatus.OVER_LIMIT
        ],
    }


def make_sample_positions(
    n: int = 20,
    as_of: pd.Timestamp | None = None,
    seed: int = 7,
) -> List[Position]:
    """
    Synthetic book of uncommitted positions for demos and tests.

    - Issuers: first six of the major-issuer catalogue
    - Rate types: mix of FIXED (10-14% p.a.), OVERNIGHT (95-130% of benchmark)
      and INFLATION (4-7% real margin)
    - Principal: multiples of 5,000 up to 250,000
    - Terms: 1-5 years, started within the last year
    """
    if as_of is None:
        as_of = pd.Timestamp.today().normalize()
    as_of = pd.Timestamp(as_of)

    rng = np.random.default_rng(seed)
    issuers = config.MAJOR_ISSUERS[:6]
    ranges = {
        RateType.FIXED: (10.0, 14.0),
        RateType.OVERNIGHT: (95.0, 130.0),
        RateType.INFLATION: (4.0, 7.0),
    }
    kinds = list(ranges)

    out: List[Position] = []
    for i in range(n):
        kind = kinds[int(rng.integers(0, len(kinds)))]
        lo, hi = ranges[kind]
        start = as_of - pd.Timedelta(days=int(rng.integers(0, 365)))
        due = start + pd.DateOffset(years=int(rng.integers(1, 6)))
        out.append(Position(
            issuer=issuers[int(rng.integers(0, len(issuers)))],
            intermediary=config.MAJOR_INTERMEDIARIES[int(rng.integers(0, len(config.MAJOR_INTERMEDIARIES)))],
            principal=Decimal(int(rng.integers(1, 51)) * 5000),
            rate_type=kind,
            rate_value=Decimal(str(round(float(rng.uniform(lo, hi)), 2))),
            tax_rate=Decimal(str(float(rng.choice([15.0, 17.5, 20.0, 22.5])))),
            start_date=start,
            due_date=pd.Timestamp(due),
            position_id=f"POS_{i:03d}",
        ))
    return out
