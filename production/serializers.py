"""
Production — Serializers

Read serializers for ledger entries and expenditures; write serializers
that validate request bodies and list query parameters before anything
reaches the service layer. Field names follow the public API (camelCase).

@file production/serializers.py
"""

import datetime

from django.utils.dateparse import parse_datetime
from rest_framework import serializers

from core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_QUANTITY,
    MIN_PAGE_SIZE,
    SORT_DESC,
    SORT_ORDERS,
)
from core.pagination import max_page_size

from .models import Expenditure, ProductionData
from .services import DEFAULT_SORT_FIELD, SORTABLE_FIELDS


class LedgerDateField(serializers.DateField):
    """
    Accepts a plain date or a full ISO-8601 timestamp. Timestamps are
    converted to UTC and truncated to the day.
    """

    def to_internal_value(self, value):
        if isinstance(value, datetime.datetime):
            return self._utc_day(value)
        # Anything longer than YYYY-MM-DD carries a time ('T' or space separated).
        if isinstance(value, str) and len(value.strip()) > 10:
            try:
                parsed = parse_datetime(value.strip())
            except ValueError:
                parsed = None
            if parsed is None:
                self.fail('invalid', format='YYYY-MM-DD')
            return self._utc_day(parsed)
        return super().to_internal_value(value)

    @staticmethod
    def _utc_day(value: datetime.datetime) -> datetime.date:
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc)
        return value.date()


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

class ExpenditureReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Expenditure
        fields = ['id', 'name', 'amount']
        read_only_fields = fields


class ProductionDataReadSerializer(serializers.ModelSerializer):
    expenditures = ExpenditureReadSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = ProductionData
        fields = [
            'id', 'date', 'purchased', 'produced', 'sales', 'stock', 'remains',
            'expenditures', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------

class ExpenditureWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    amount = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)


class ExpenditureUpdateSerializer(ExpenditureWriteSerializer):
    """Entries with an id update that expenditure; entries without one are created."""
    id = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class ProductionCreateSerializer(serializers.Serializer):
    date = LedgerDateField()
    purchased = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, default=0)
    produced = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, default=0)
    sales = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, default=0)
    expenditures = ExpenditureWriteSerializer(many=True, required=False)


class ProductionUpdateSerializer(serializers.Serializer):
    """Every field is optional; omitted fields keep their stored value."""
    date = LedgerDateField(required=False)
    purchased = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, required=False)
    produced = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, required=False)
    sales = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, required=False)
    expenditures = ExpenditureUpdateSerializer(many=True, required=False)

    def validate_expenditures(self, value):
        ids = [item['id'] for item in value if item.get('id') is not None]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError('Expenditure ids must be unique.')
        return value


class ProductionQuerySerializer(serializers.Serializer):
    """Paging and sorting parameters; filters are handled by ProductionDataFilter."""
    page = serializers.IntegerField(min_value=1, default=DEFAULT_PAGE)
    pageSize = serializers.IntegerField(
        source='page_size', min_value=MIN_PAGE_SIZE, default=DEFAULT_PAGE_SIZE,
    )
    sortBy = serializers.ChoiceField(
        source='sort_by', choices=SORTABLE_FIELDS, default=DEFAULT_SORT_FIELD,
    )
    sortOrder = serializers.ChoiceField(
        source='sort_order', choices=SORT_ORDERS, default=SORT_DESC,
    )

    def validate_pageSize(self, value):
        limit = max_page_size()
        if value > limit:
            raise serializers.ValidationError(f'Ensure this value is less than or equal to {limit}.')
        return value
