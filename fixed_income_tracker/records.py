"""
Mapping between data-store rows and domain objects.

Rows use the store's snake_case columns. Numbers may arrive as text (with a
decimal comma); anything unparsable raises PositionRecordError. No I/O here:
the store client hands rows in and takes dicts out.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from . import config
from .exceptions import PositionRecordError
from .positions import Position
from .rates import RateType
from .utils import to_decimal, to_timestamp


@dataclass(frozen=True)
class Institution:
    """User-registered issuer, broker or title-type entry."""
    name: str
    is_broker: bool = False
    is_conglomerate: bool = False
    is_title: bool = False
    institution_id: Optional[str] = None
    created_at: Optional[pd.Timestamp] = None


def _decimal_field(row: Mapping, key: str) -> Optional[Decimal]:
    value = row.get(key)
    try:
        return to_decimal(value)
    except ValueError as exc:
        raise PositionRecordError(key, value) from exc


def _date_field(row: Mapping, key: str) -> Optional[pd.Timestamp]:
    value = row.get(key)
    try:
        return to_timestamp(value)
    except ValueError as exc:
        raise PositionRecordError(key, value) from exc


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def position_from_record(row: Mapping[str, Any]) -> Position:
    tax = _decimal_field(row, "income_tax")
    if tax is not None and not (config.MIN_TAX_RATE <= tax <= config.MAX_TAX_RATE):
        raise PositionRecordError(
            "income_tax", row.get("income_tax"),
            reason=f"outside [{config.MIN_TAX_RATE}, {config.MAX_TAX_RATE}]",
        )

    quantity = _decimal_field(row, "quantity")
    if quantity is not None and quantity != quantity.to_integral_value():
        raise PositionRecordError("quantity", row.get("quantity"), reason="not a whole number")

    raw_type = row.get("type")
    rate_type = RateType.parse(raw_type) or (_text(raw_type) or None)

    record_id = row.get("id")
    return Position(
        issuer=_text(row.get("bank")),
        intermediary=_text(row.get("broker")),
        principal=_decimal_field(row, "amount"),
        rate_type=rate_type,
        rate_value=_decimal_field(row, "interest_rate"),
        tax_rate=tax,
        start_date=_date_field(row, "start_date"),
        due_date=_date_field(row, "due_date"),
        future_value_gross=_decimal_field(row, "future_value"),
        future_value_net=_decimal_field(row, "net_future_value"),
        position_id=None if record_id is None else str(record_id),
        title=_text(row.get("title")) or config.DEFAULT_TITLE,
        quantity=int(quantity) if quantity is not None else 1,
        created_at=_date_field(row, "created_at"),
    )


def _iso_date(value) -> Optional[str]:
    ts = to_timestamp(value)
    return None if ts is None else ts.strftime(config.DATE_FORMAT_STORAGE)


def _str_or_none(value) -> Optional[str]:
    return None if value is None else str(value)


def position_to_record(position: Position) -> Dict[str, Any]:
    kind = RateType.parse(position.rate_type)
    created = to_timestamp(position.created_at)
    return {
        "id": position.position_id,
        "bank": position.issuer,
        "broker": position.intermediary,
        "title": position.title,
        "type": kind.value if kind is not None else _str_or_none(position.rate_type),
        "amount": _str_or_none(position.principal),
        "quantity": position.quantity,
        "interest_rate": _str_or_none(position.rate_value),
        "income_tax": _str_or_none(position.tax_rate),
        "start_date": _iso_date(position.start_date),
        "due_date": _iso_date(position.due_date),
        "future_value": _str_or_none(position.future_value_gross),
        "net_future_value": _str_or_none(position.future_value_net),
        "created_at": created.isoformat() if created is not None else None,
    }


def institution_from_record(row: Mapping[str, Any]) -> Institution:
    name = _text(row.get("name"))
    if not name:
        raise PositionRecordError("name", row.get("name"), reason="empty")
    record_id = row.get("id")
    return Institution(
        name=name,
        is_broker=bool(row.get("is_broker") or False),
        is_conglomerate=bool(row.get("is_conglomerate") or False),
        is_title=bool(row.get("is_title") or False),
        institution_id=None if record_id is None else str(record_id),
        created_at=_date_field(row, "created_at"),
    )


def institution_to_record(institution: Institution) -> Dict[str, Any]:
    return {
        "name": institution.name.strip(),
        "is_broker": institution.is_broker,
        "is_conglomerate": institution.is_conglomerate,
        "is_title": institution.is_title,
    }
