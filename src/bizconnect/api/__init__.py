"""
Quick sales API client module
"""

from .client import ApiError, admin_login, fetch_sale, list_sales, place_bid, finalize_sale

__all__ = ['ApiError', 'admin_login', 'fetch_sale', 'list_sales', 'place_bid', 'finalize_sale']
