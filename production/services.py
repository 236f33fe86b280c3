"""
Production — Service Layer

Ledger operations: create, get, list, update and delete production records
together with their expenditures. Every write runs in a single transaction
so a record is never observable without its expenditures (or vice versa).
Creates are serialised under a PostgreSQL advisory lock; the unique
constraint on date is the final guard against duplicate days.

@file production/services.py
"""

import datetime
import hashlib
import logging
from typing import Any, Mapping

from django.db import IntegrityError, connection, transaction
from rest_framework.exceptions import ValidationError

from core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, SORT_DESC, SORT_ORDERS
from core.exceptions import DuplicateResourceError, ResourceNotFoundError
from core.pagination import max_page_size, paginate_queryset

from .accounting import StockAccountingService
from .filters import ProductionDataFilter
from .models import Expenditure, ProductionData
from .reconciliation import ExpenditurePlan, reconcile_expenditures

logger = logging.getLogger('bananatrack')

SORTABLE_FIELDS = ('date', 'purchased', 'produced', 'stock', 'sales', 'remains')
DEFAULT_SORT_FIELD = 'date'


def _advisory_lock_key(name: str) -> int:
    """Stable bigint key for PostgreSQL advisory lock."""
    h = hashlib.sha256(name.encode()).digest()[:8]
    return int.from_bytes(h, 'big') % (2**63)


LEDGER_LOCK_KEY = _advisory_lock_key('production-ledger:create')


def _lock_ledger() -> None:
    if connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute('SELECT pg_advisory_xact_lock(%s)', [LEDGER_LOCK_KEY])


def _save_or_conflict(record: ProductionData) -> None:
    try:
        with transaction.atomic():
            record.save()
    except IntegrityError:
        raise DuplicateResourceError(detail=f'Data for {record.date.isoformat()} already exists.')


def _apply_expenditure_plan(record: ProductionData, plan: ExpenditurePlan) -> None:
    if plan.to_delete:
        Expenditure.objects.filter(production=record, pk__in=plan.to_delete).delete()

    if plan.to_update:
        rows = Expenditure.objects.in_bulk([item['id'] for item in plan.to_update])
        for item in plan.to_update:
            row = rows[item['id']]
            row.name = item['name']
            row.amount = item['amount']
            row.save(update_fields=['name', 'amount', 'updated_at'])

    if plan.to_create:
        Expenditure.objects.bulk_create([
            Expenditure(production=record, name=item['name'], amount=item['amount'])
            for item in plan.to_create
        ])


class ProductionLedgerService:
    """Transactional ledger operations over ProductionData + Expenditure."""

    @staticmethod
    @transaction.atomic
    def create_record(
        *,
        date: datetime.date,
        purchased: int = 0,
        produced: int = 0,
        sales: int = 0,
        expenditures: list[Mapping[str, Any]] | None = None,
    ) -> ProductionData:
        """
        Create the entry for `date`, carrying forward the remains of the
        closest earlier entry. Raises DuplicateResourceError if the date is
        already recorded.
        """
        _lock_ledger()
        payload = StockAccountingService.prepare_create(
            date=date, purchased=purchased, produced=produced, sales=sales,
        )
        record = ProductionData(**payload)
        _save_or_conflict(record)

        plan = reconcile_expenditures([], expenditures or [])
        _apply_expenditure_plan(record, plan)

        logger.info(
            'ProductionData %s created date=%s stock=%s remains=%s expenditures=%s',
            record.pk, record.date, record.stock, record.remains, len(plan.to_create),
        )
        return ProductionLedgerService.get_record(record.pk)

    @staticmethod
    def get_record(record_id) -> ProductionData:
        record = (
            ProductionData.objects
            .prefetch_related('expenditures')
            .filter(pk=record_id)
            .first()
        )
        if record is None:
            raise ResourceNotFoundError(detail=f'Production data with ID {record_id} not found.')
        return record

    @staticmethod
    def list_records(
        *,
        filters: Mapping[str, Any] | None = None,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort_by: str = DEFAULT_SORT_FIELD,
        sort_order: str = SORT_DESC,
    ) -> dict[str, Any]:
        """
        Filtered, sorted, paginated listing.

        Returns {'items': [ProductionData, ...], 'pagination': {...}}.
        """
        if sort_by not in SORTABLE_FIELDS:
            raise ValidationError({'sortBy': [f'Unsupported sort field: {sort_by}.']})
        if sort_order not in SORT_ORDERS:
            raise ValidationError({'sortOrder': [f'Unsupported sort order: {sort_order}.']})
        page_size = min(page_size, max_page_size())

        filterset = ProductionDataFilter(
            filters or {},
            queryset=ProductionData.objects.prefetch_related('expenditures'),
        )
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)

        prefix = '-' if sort_order == SORT_DESC else ''
        ordering = [f'{prefix}{sort_by}']
        if sort_by != 'date':
            ordering.append('-date')
        queryset = filterset.qs.order_by(*ordering)

        items, pagination = paginate_queryset(queryset, page, page_size)
        return {'items': items, 'pagination': pagination}

    @staticmethod
    @transaction.atomic
    def update_record(
        record_id,
        *,
        expenditures: list[Mapping[str, Any]] | None = None,
        **changes,
    ) -> ProductionData:
        """
        Apply a partial update. Omitted quantities keep their current value;
        stock and remains are recomputed from the record's own fields.
        `expenditures=None` leaves expenditures untouched, `[]` removes them all.
        """
        record = ProductionData.objects.select_for_update().filter(pk=record_id).first()
        if record is None:
            raise ResourceNotFoundError(detail=f'Production data with ID {record_id} not found.')

        payload = StockAccountingService.prepare_update(record, changes)
        for attr, value in payload.items():
            setattr(record, attr, value)
        _save_or_conflict(record)

        plan = reconcile_expenditures(record.expenditures.all(), expenditures)
        _apply_expenditure_plan(record, plan)

        logger.info(
            'ProductionData %s updated stock=%s remains=%s '
            'expenditures created=%s updated=%s deleted=%s',
            record.pk, record.stock, record.remains,
            len(plan.to_create), len(plan.to_update), len(plan.to_delete),
        )
        return ProductionLedgerService.get_record(record.pk)

    @staticmethod
    @transaction.atomic
    def delete_record(record_id) -> None:
        """Delete a record; its expenditures cascade in the same transaction."""
        record = ProductionData.objects.select_for_update().filter(pk=record_id).first()
        if record is None:
            raise ResourceNotFoundError(detail=f'Production data with ID {record_id} not found.')
        record_date = record.date
        record.delete()
        logger.info('ProductionData %s deleted date=%s', record_id, record_date)
