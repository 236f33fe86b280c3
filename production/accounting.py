"""
Production — Stock Accounting

Derives stock and remains for a ledger entry.

Create carries forward the remains of the closest earlier record:
    stock   = produced + previous.remains
    remains = max(stock - sales, 0)

Update only looks at the record's own (possibly overridden) quantities:
    stock   = purchased + produced - sales
    remains = max(produced - sales, 0)

Editing a record never ripples into earlier or later records.

@file production/accounting.py
"""

import datetime
from typing import Any, Mapping

from rest_framework.exceptions import ValidationError

from core.constants import MAX_QUANTITY, MIN_STOCK
from core.exceptions import DuplicateResourceError

from .models import ProductionData

QUANTITY_FIELDS = ('purchased', 'produced', 'sales')


def derive_stock_on_create(*, produced: int, sales: int, prior_remains: int = 0) -> tuple[int, int]:
    """Return (stock, remains) for a new entry following a record with `prior_remains`."""
    stock = produced + prior_remains
    return stock, max(stock - sales, 0)


def derive_stock_on_update(*, purchased: int, produced: int, sales: int) -> tuple[int, int]:
    """Return (stock, remains) for an edited entry."""
    return purchased + produced - sales, max(produced - sales, 0)


def _check_stock_range(stock: int) -> None:
    if not MIN_STOCK <= stock <= MAX_QUANTITY:
        raise ValidationError({'stock': ['Derived stock is outside the storable range.']})


def previous_record(before: datetime.date) -> ProductionData | None:
    """Most recent record strictly earlier than `before`, or None."""
    return (
        ProductionData.objects
        .filter(date__lt=before)
        .order_by('-date')
        .first()
    )


class StockAccountingService:
    """Builds fully-derived field payloads; never writes."""

    @staticmethod
    def prepare_create(
        *,
        date: datetime.date,
        purchased: int = 0,
        produced: int = 0,
        sales: int = 0,
    ) -> dict[str, Any]:
        if ProductionData.objects.filter(date=date).exists():
            raise DuplicateResourceError(detail=f'Data for {date.isoformat()} already exists.')

        prior = previous_record(date)
        stock, remains = derive_stock_on_create(
            produced=produced,
            sales=sales,
            prior_remains=prior.remains if prior else 0,
        )
        _check_stock_range(stock)
        return {
            'date': date,
            'purchased': purchased,
            'produced': produced,
            'sales': sales,
            'stock': stock,
            'remains': remains,
        }

    @staticmethod
    def prepare_update(record: ProductionData, changes: Mapping[str, Any]) -> dict[str, Any]:
        """
        Merge `changes` over the record's current quantities and recompute
        stock/remains. A `date` in `changes` is passed through unchecked; the
        unique constraint on date rejects collisions at write time.
        """
        values = {
            field: changes[field] if changes.get(field) is not None else getattr(record, field)
            for field in QUANTITY_FIELDS
        }
        stock, remains = derive_stock_on_update(**values)
        _check_stock_range(stock)
        payload = {**values, 'stock': stock, 'remains': remains}
        if changes.get('date') is not None:
            payload['date'] = changes['date']
        return payload
