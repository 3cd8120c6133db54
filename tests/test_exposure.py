from decimal import Decimal

import pandas as pd
import pytest

from fixed_income_tracker.exceptions import InvalidLimitError
from fixed_income_tracker.exposure import (
    GuaranteeStatus,
    aggregate_exposure,
    classify_exposure,
    exposure_frame,
)
from fixed_income_tracker.portfolio import positions_frame
from fixed_income_tracker.positions import Position

LIMIT = Decimal("250000")


def _pos(issuer, gross):
    return Position(issuer=issuer, principal=Decimal("1000"), future_value_gross=gross)


@pytest.fixture(scope="module")
def book():
    return [
        _pos("Banco Master", Decimal("150000")),
        _pos("Banco Pan", Decimal("120000")),
        _pos("Banco Master", Decimal("150000")),
        _pos("Banco Pan", Decimal("80000")),
        _pos("banco pan", Decimal("10000")),
        _pos("Banco Safra", None),
    ]


def test_over_limit_is_capped_and_reports_excess(book):
    out = aggregate_exposure(book, LIMIT)
    master = out["Banco Master"]
    assert master.total_exposure == Decimal("300000")
    assert master.status is GuaranteeStatus.OVER_LIMIT
    assert master.percentage_of_limit == Decimal("100"), "Indicator must never overflow 100%"
    assert master.excess == Decimal("50000")
    assert master.position_count == 2


def test_issuer_matching_is_exact(book):
    out = aggregate_exposure(book, LIMIT)
    assert out["Banco Pan"].total_exposure == Decimal("200000")
    assert out["banco pan"].total_exposure == Decimal("10000"), "No case folding between issuers"


def test_first_appearance_order_and_unvalued_positions(book):
    out = aggregate_exposure(book, LIMIT)
    assert list(out) == ["Banco Master", "Banco Pan", "banco pan", "Banco Safra"]
    safra = out["Banco Safra"]
    assert safra.total_exposure == Decimal("0")
    assert safra.status is GuaranteeStatus.SAFE
    assert safra.excess is None


@pytest.mark.parametrize(
    "total, expected",
    [
        (Decimal("0"), GuaranteeStatus.SAFE),
        (Decimal("200000"), GuaranteeStatus.SAFE),
        (Decimal("200000.01"), GuaranteeStatus.WARNING),
        (Decimal("250000"), GuaranteeStatus.WARNING),
        (Decimal("250000.01"), GuaranteeStatus.OVER_LIMIT),
    ],
)
def test_classification_boundaries(total, expected):
    assert classify_exposure(total, LIMIT) is expected


def test_percentage_below_limit(book):
    out = aggregate_exposure(book, LIMIT)
    pan = out["Banco Pan"]
    assert pan.percentage_of_limit == Decimal("80")
    assert pan.status is GuaranteeStatus.SAFE
    assert pan.excess is None


def test_accepts_any_iterable(book):
    out = aggregate_exposure((p for p in book), LIMIT)
    assert len(out) == 4


@pytest.mark.parametrize("limit", [0, -1, None])
def test_non_positive_limit_raises(book, limit):
    with pytest.raises(InvalidLimitError):
        aggregate_exposure(book, limit)
    with pytest.raises(ValueError):
        classify_exposure(Decimal("1"), limit)


def test_exposure_frame_matches_aggregate(book):
    frame = exposure_frame(positions_frame(book), LIMIT)
    agg = aggregate_exposure(book, LIMIT)

    assert list(frame["issuer"]) == ["Banco Master", "Banco Pan", "banco pan", "Banco Safra"]
    for _, r in frame.iterrows():
        e = agg[r["issuer"]]
        assert r["status"] == e.status.value
        assert r["total_exposure"] == pytest.approx(float(e.total_exposure))
        assert r["percentage_of_limit"] == pytest.approx(float(e.percentage_of_limit))
        assert r["position_count"] == e.position_count
        if e.excess is None:
            assert pd.isna(r["excess"])
        else:
            assert r["excess"] == pytest.approx(float(e.excess))


def test_exposure_frame_keeps_missing_issuer():
    book = [_pos(None, Decimal("260000")), _pos("A", Decimal("1"))]
    agg = aggregate_exposure(book, LIMIT)
    frame = exposure_frame(positions_frame(book), LIMIT)

    assert list(agg) == [None, "A"]
    assert len(frame) == 2, "Positions without an issuer must not vanish from the table"
    missing = frame[frame["issuer"].isna()]
    assert len(missing) == 1
    assert missing["status"].iloc[0] == GuaranteeStatus.OVER_LIMIT.value
    assert missing["status"].iloc[0] == agg[None].status.value


def test_missing_total_classifies_as_safe():
    assert classify_exposure(None, LIMIT) is GuaranteeStatus.SAFE
