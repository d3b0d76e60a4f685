"""
Request-scoped resources
"""
import uuid

from flask import current_app, g, request

from ..auction.bidding import ensure_object
from ..auction.errors import SaleNotFoundError


def get_store():
    """Open one store per request; closed on app context teardown"""
    if 'store' not in g:
        g.store = current_app.config['STORE_FACTORY']()
    return g.store


def close_store(exc=None):
    store = g.pop('store', None)
    if store is not None:
        store.close()


def parse_sale_id(sale_id: str) -> str:
    """Malformed IDs cannot exist, so they are reported as not found"""
    try:
        return str(uuid.UUID(sale_id))
    except (ValueError, AttributeError, TypeError):
        raise SaleNotFoundError(sale_id)


def json_body(default=None):
    """Parsed JSON body, or default when there is none; arrays and scalars are rejected"""
    body = request.get_json(silent=True)
    if body is None:
        return default
    return ensure_object(body)
