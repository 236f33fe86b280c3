"""
Production — Django Admin Configuration

Read-only admin for the production ledger. Records are written only through
ProductionLedgerService so derived stock/remains stay consistent.

@file production/admin.py
"""

from django.contrib import admin
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _

from .models import Expenditure, ProductionData


class ReadOnlyAdminMixin:

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ExpenditureInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = Expenditure
    extra = 0
    fields = ('name', 'amount', 'created_at')
    readonly_fields = fields


@admin.register(ProductionData)
class ProductionDataAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        'date', 'purchased', 'produced', 'sales', 'stock', 'remains',
        'expenditure_total',
    )
    readonly_fields = (
        'id', 'date', 'purchased', 'produced', 'sales', 'stock', 'remains',
        'created_at', 'updated_at',
    )
    date_hierarchy = 'date'
    list_per_page = 50
    ordering = ('-date',)
    inlines = [ExpenditureInline]

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_expenditure_total=Sum('expenditures__amount'))

    @admin.display(description=_('Expenditures'), ordering='_expenditure_total')
    def expenditure_total(self, obj):
        return obj._expenditure_total or 0


@admin.register(Expenditure)
class ExpenditureAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ('name', 'amount', 'production', 'created_at')
    list_filter = ('name',)
    search_fields = ('name',)
    readonly_fields = ('id', 'name', 'amount', 'production', 'created_at', 'updated_at')
    list_select_related = ('production',)
    list_per_page = 50
