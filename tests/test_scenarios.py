from decimal import Decimal

import numpy as np
import pandas as pd
import pytest

from fixed_income_tracker.portfolio import make_sample_positions, positions_frame
from fixed_income_tracker.rates import MarketRates, RateType
from fixed_income_tracker.scenarios import DEFAULT_SCENARIOS, run_rate_scenarios


@pytest.fixture(scope="module")
def frame(val_date):
    return positions_frame(make_sample_positions(n=30, as_of=val_date, seed=11))


@pytest.fixture(scope="module")
def scenario_run(frame, market, val_date):
    return run_rate_scenarios(frame, market, as_of=val_date)


def test_outputs_shape(scenario_run, frame):
    per_position, summary = scenario_run
    assert len(per_position) == len(frame)
    assert list(summary["scenario"]) == list(DEFAULT_SCENARIOS)
    for name in DEFAULT_SCENARIOS:
        assert {name, name + "_PnL"}.issubset(per_position.columns)


def test_fixed_positions_ignore_market_shifts(scenario_run, frame):
    per_position, _ = scenario_run
    fixed = (frame["rate_type"] == RateType.FIXED.value).to_numpy()
    assert fixed.any(), "Sample book should contain FIXED positions"
    for name in DEFAULT_SCENARIOS:
        assert np.allclose(per_position.loc[fixed, name + "_PnL"], 0.0)


def test_pnl_direction_follows_benchmark(scenario_run, frame):
    per_position, summary = scenario_run
    ovn = (frame["rate_type"] == RateType.OVERNIGHT.value).to_numpy()
    assert (per_position.loc[ovn, "OVN_+100bp_PnL"] > 0).all()
    assert (per_position.loc[ovn, "OVN_-100bp_PnL"] < 0).all()
    assert np.allclose(per_position.loc[ovn, "INF_+50bp_PnL"], 0.0)

    totals = summary.set_index("scenario")["total_pnl"]
    assert totals["OVN_+100bp"] > 0 > totals["OVN_-100bp"]
    assert totals["INF_+50bp"] > 0 > totals["INF_-50bp"]
    assert totals["BOTH_+100bp"] > totals["OVN_+100bp"]


def test_missing_benchmark_stays_missing_under_shift():
    shifted = MarketRates(overnight_rate=Decimal("10")).shifted(overnight_bp=25, inflation_bp=25)
    assert shifted.overnight_rate == Decimal("10.25")
    assert shifted.inflation_rate is None


def test_custom_scenarios(frame, market, val_date):
    per_position, summary = run_rate_scenarios(frame, market, as_of=val_date, scenarios={"FLAT": (0, 0)})
    assert list(summary["scenario"]) == ["FLAT"]
    assert summary["total_pnl"].iloc[0] == pytest.approx(0.0)
    assert isinstance(per_position, pd.DataFrame)
