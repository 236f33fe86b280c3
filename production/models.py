"""
Production — Models

Daily production ledger. One ProductionData row per calendar date with
user-supplied quantities (purchased, produced, sales) and derived
quantities (stock, remains) computed by the accounting layer. Expenditures
are owned by their production record and cascade on delete.

@file production/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimestampMixin


class ProductionData(TimestampMixin):
    """
    A single ledger entry for one business day.

    stock and remains are never supplied by clients; see
    production.accounting for how they are derived on create and update.
    """

    date = models.DateField(_('date'), unique=True)
    purchased = models.PositiveIntegerField(_('purchased'), default=0)
    produced = models.PositiveIntegerField(_('produced'), default=0)
    sales = models.PositiveIntegerField(_('sales'), default=0)
    # Update recomputes stock as purchased + produced - sales, which can go negative.
    stock = models.IntegerField(_('stock'), default=0)
    remains = models.PositiveIntegerField(_('remains'), default=0)

    class Meta:
        verbose_name = _('production data')
        verbose_name_plural = _('production data')
        ordering = ['-date']

    def __str__(self):
        return f'{self.date} produced={self.produced} sales={self.sales} remains={self.remains}'


class Expenditure(TimestampMixin):
    """A spending line attached to a production record."""

    name = models.CharField(_('name'), max_length=255)
    amount = models.PositiveIntegerField(_('amount'))
    production = models.ForeignKey(
        ProductionData,
        on_delete=models.CASCADE,
        related_name='expenditures',
        verbose_name=_('production record'),
    )

    class Meta:
        verbose_name = _('expenditure')
        verbose_name_plural = _('expenditures')
        ordering = ['id']
        indexes = [
            models.Index(fields=['production', 'name'], name='expenditure_prod_name_idx'),
        ]

    def __str__(self):
        return f'{self.name}: {self.amount}'
