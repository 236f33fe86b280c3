"""
Core — Pagination

Offset pagination for service-level listings. Produces the page slice
and the pagination block returned to clients:
  { total, pageCount, currentPage, pageSize, from, to }

@file core/pagination.py
"""

import math

from django.conf import settings

from core.constants import MAX_PAGE_SIZE


def max_page_size() -> int:
    return getattr(settings, 'LEDGER_MAX_PAGE_SIZE', MAX_PAGE_SIZE)


def build_pagination(total: int, page: int, page_size: int) -> dict:
    """
    Pagination arithmetic. `from`/`to` are the 1-based inclusive bounds of
    the current page; `from` is reported even when the page is past the end.
    """
    return {
        'total': total,
        'pageCount': math.ceil(total / page_size) if page_size else 0,
        'currentPage': page,
        'pageSize': page_size,
        'from': (page - 1) * page_size + 1,
        'to': min(page * page_size, total),
    }


def paginate_queryset(queryset, page: int, page_size: int) -> tuple[list, dict]:
    """Slice `queryset` for the requested page and return (items, pagination)."""
    if page < 1:
        raise ValueError('page must be >= 1')
    if page_size < 1:
        raise ValueError('page_size must be >= 1')
    total = queryset.count()
    offset = (page - 1) * page_size
    items = list(queryset[offset:offset + page_size])
    return items, build_pagination(total, page, page_size)
