"""
Core — Constants

Shared constants for pagination and ledger sorting.

@file core/constants.py
"""

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 10
# Upper bound used when settings.LEDGER_MAX_PAGE_SIZE is not configured.
MAX_PAGE_SIZE = 500

SORT_ASC = 'asc'
SORT_DESC = 'desc'
SORT_ORDERS = (SORT_ASC, SORT_DESC)

# Column limits for integer ledger quantities (32-bit signed storage).
MAX_QUANTITY = 2147483647
MIN_STOCK = -2147483648
