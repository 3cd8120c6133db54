from __future__ import annotations

from typing import Dict, Optional, Tuple

import pandas as pd

from .portfolio import value_positions_vectorized
from .rates import MarketRates

# name -> (overnight shift bp, inflation shift bp)
DEFAULT_SCENARIOS: Dict[str, Tuple[float, float]] = {
    "OVN_-100bp": (-100, 0),
    "OVN_+100bp": (+100, 0),
    "INF_-50bp": (0, -50),
    "INF_+50bp": (0, +50),
    "BOTH_+100bp": (+100, +100),
}


def run_rate_scenarios(
    frame: pd.DataFrame,
    market: MarketRates,
    as_of: Optional[pd.Timestamp] = None,
    scenarios: Optional[Dict[str, Tuple[float, float]]] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Re-value a positions frame under shifted market snapshots.

    Returns (per_position, summary):
    - per_position: position_id, issuer, base gross, one gross column per
      scenario plus its '<name>_PnL' against base
    - summary: scenario, total_pnl (sum of gross PnL across the book)
    """
    scenarios = DEFAULT_SCENARIOS if scenarios is None else scenarios

    base = value_positions_vectorized(frame, market, as_of)
    per_position = base[["position_id", "issuer", "gross"]].rename(columns={"gross": "base"})

    for name, (ovn_bp, inf_bp) in scenarios.items():
        shocked = market.shifted(overnight_bp=ovn_bp, inflation_bp=inf_bp)
        valued = value_positions_vectorized(frame, shocked, as_of)
        per_position[name] = valued["gross"].to_numpy()
        per_position[name + "_PnL"] = per_position[name] - per_position["base"]

    pnl_cols = [c for c in per_position.columns if c.endswith("_PnL")]
    summary = pd.DataFrame({
        "scenario": [c[: -len("_PnL")] for c in pnl_cols],
        "total_pnl": [per_position[c].sum() for c in pnl_cols],
    })

    return per_position, summary
