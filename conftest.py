from decimal import Decimal

import pandas as pd
import pytest

from fixed_income_tracker.rates import MarketRates


@pytest.fixture(scope="module")
def val_date():
    return pd.Timestamp("2026-02-13")


@pytest.fixture(scope="module")
def market():
    # overnight 10% p.a., inflation 4% p.a.
    return MarketRates(overnight_rate=Decimal("10"), inflation_rate=Decimal("4"))
