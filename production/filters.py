"""
Production — Filters

Date-range and exact-value filters for the production ledger listing.
Query parameter names follow the public API (camelCase).

@file production/filters.py
"""

from datetime import timedelta

import django_filters
from django import forms

from core.constants import MAX_QUANTITY, MIN_STOCK

from .models import ProductionData


class IntegerFilter(django_filters.NumberFilter):
    """Exact match on whole numbers; decimals are rejected."""
    field_class = forms.IntegerField


class ProductionDataFilter(django_filters.FilterSet):
    startDate = django_filters.DateFilter(field_name='date', lookup_expr='gte')
    endDate = django_filters.DateFilter(method='filter_end_date')
    purchased = IntegerFilter(field_name='purchased', min_value=0, max_value=MAX_QUANTITY)
    produced = IntegerFilter(field_name='produced', min_value=0, max_value=MAX_QUANTITY)
    sales = IntegerFilter(field_name='sales', min_value=0, max_value=MAX_QUANTITY)
    # Stock goes negative when sales exceed purchased + produced.
    stock = IntegerFilter(field_name='stock', min_value=MIN_STOCK, max_value=MAX_QUANTITY)
    remains = IntegerFilter(field_name='remains', min_value=0, max_value=MAX_QUANTITY)

    class Meta:
        model = ProductionData
        fields = []

    def filter_end_date(self, queryset, name, value):
        # Whole end day is included: date < endDate + 1 day.
        return queryset.filter(date__lt=value + timedelta(days=1))
