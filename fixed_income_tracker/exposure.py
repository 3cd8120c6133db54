from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd

from . import config
from .exceptions import InvalidLimitError
from .positions import Position
from .utils import to_decimal

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


class GuaranteeStatus(str, Enum):
    """Issuer exposure relative to the guarantee ceiling."""
    SAFE = "SAFE"
    WARNING = "WARNING"
    OVER_LIMIT = "OVER_LIMIT"


@dataclass(frozen=True)
class IssuerExposure:
    issuer: str
    total_exposure: Decimal
    status: GuaranteeStatus
    percentage_of_limit: Decimal     # capped at 100
    excess: Optional[Decimal]        # set only when OVER_LIMIT
    position_count: int


def _checked_limit(limit) -> Decimal:
    value = to_decimal(limit)
    if value is None or value <= 0:
        raise InvalidLimitError(limit)
    return value


def classify_exposure(total, limit=config.GUARANTEE_LIMIT) -> GuaranteeStatus:
    """
    SAFE       total <= 0.8 * limit
    WARNING    0.8 * limit < total <= limit
    OVER_LIMIT total > limit

    A missing total (issuer with no valued positions) counts as 0.
    """
    total = to_decimal(total) or Decimal(0)
    limit = _checked_limit(limit)
    if total > limit:
        return GuaranteeStatus.OVER_LIMIT
    if total > limit * config.WARNING_RATIO:
        return GuaranteeStatus.WARNING
    return GuaranteeStatus.SAFE


def summarize_issuer(issuer: str, total, limit=config.GUARANTEE_LIMIT, position_count: int = 0) -> IssuerExposure:
    total = to_decimal(total) or Decimal(0)
    limit = _checked_limit(limit)
    status = classify_exposure(total, limit)
    return IssuerExposure(
        issuer=issuer,
        total_exposure=total,
        status=status,
        percentage_of_limit=min(total / limit * _HUNDRED, _HUNDRED),
        excess=total - limit if status is GuaranteeStatus.OVER_LIMIT else None,
        position_count=position_count,
    )


def aggregate_exposure(
    positions: Iterable[Position],
    limit=config.GUARANTEE_LIMIT,
) -> Dict[str, IssuerExposure]:
    """
    Sum stored gross future values per issuer and classify each total.

    Issuers are matched by exact string equality and reported in order of
    first appearance. Positions not yet valued count as zero.
    """
    limit = _checked_limit(limit)
    snapshot = list(positions)

    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    for p in snapshot:
        value = to_decimal(p.future_value_gross) or Decimal(0)
        totals[p.issuer] = totals.get(p.issuer, Decimal(0)) + value
        counts[p.issuer] = counts.get(p.issuer, 0) + 1

    out = {
        issuer: summarize_issuer(issuer, total, limit, counts[issuer])
        for issuer, total in totals.items()
    }

    for e in out.values():
        if e.status is GuaranteeStatus.OVER_LIMIT:
            logger.info("Issuer %r over guarantee limit by %s", e.issuer, e.excess)

    logger.debug("Aggregated %d positions into %d issuers", len(snapshot), len(out))
    return out


def exposure_frame(positions_df: pd.DataFrame, limit=config.GUARANTEE_LIMIT) -> pd.DataFrame:
    """
    Vectorised per-issuer exposure table from a positions frame
    (needs 'issuer' and 'future_value_gross' columns).

    Columns: issuer, total_exposure, position_count, status,
    percentage_of_limit, excess (NaN unless over limit).
    """
    lim = float(_checked_limit(limit))
    warn = lim * float(config.WARNING_RATIO)

    df = positions_df[["issuer", "future_value_gross"]].copy()
    df["future_value_gross"] = pd.to_numeric(df["future_value_gross"], errors="coerce").fillna(0.0).astype(float)

    out = (
        df.groupby("issuer", sort=False, dropna=False)
        .agg(total_exposure=("future_value_gross", "sum"), position_count=("future_value_gross", "size"))
        .reset_index()
    )

    total = out["total_exposure"].to_numpy(dtype=float)
    out["status"] = np.select(
        [total > lim, total > warn],
        [GuaranteeStatus.OVER_LIMIT.value, GuaranteeStatus.WARNING.value],
        default=GuaranteeStatus.SAFE.value,
    )
    out["percentage_of_limit"] = np.minimum(total / lim * 100.0, 100.0)
    out["excess"] = np.where(total > lim, total - lim, np.nan)

    return out.sort_values("total_exposure", ascending=False).reset_index(drop=True)
