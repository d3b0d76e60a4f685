"""
Quick sale validation
Checks sale creation payloads and admin edits before they reach the database
"""
import json
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..config import settings
from ..database.models import SaleStatus
from .bidding import as_utc, ensure_object, parse_amount, required_text, utcnow
from .errors import ValidationError

EDITABLE_FIELDS = (
    'title', 'description', 'seller_name', 'seller_contact', 'seller_email',
    'reserve_price', 'ends_at', 'status',
)


def parse_datetime(raw, field: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC"""
    if isinstance(raw, datetime):
        return as_utc(raw)
    if not raw or not isinstance(raw, str):
        raise ValidationError(f"{field} is required", field=field)
    try:
        # fromisoformat() only accepts a trailing Z from Python 3.11 on
        value = datetime.fromisoformat(raw.strip().replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 date and time", field=field)
    return as_utc(value)


def _optional_text(data: Dict, field: str) -> Optional[str]:
    value = data.get(field)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _reserve_price(raw):
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    reserve = parse_amount(raw, 'reserve_price')
    if reserve < 0:
        raise ValidationError("reserve_price cannot be negative", field='reserve_price')
    return reserve


def validate_product(product: Dict, index: int) -> Dict:
    """Validate one product entry; 'name' is accepted as an alias for 'title'"""
    if not isinstance(product, dict):
        raise ValidationError(f"Product {index + 1} must be an object", field='products')

    title = product.get('title') or product.get('name')
    title = title.strip() if isinstance(title, str) else ''
    if not title:
        raise ValidationError(f"Product {index + 1} needs a title", field='products')

    condition = product.get('condition') or 'new'
    condition = condition.strip().lower() if isinstance(condition, str) else str(condition)
    if condition not in settings.PRODUCT_CONDITIONS:
        raise ValidationError(
            f"Product {index + 1} has unknown condition '{condition}'. "
            f"Use one of: {', '.join(settings.PRODUCT_CONDITIONS)}",
            field='products'
        )

    images = product.get('images') or []
    if not isinstance(images, list) or not all(isinstance(url, str) for url in images):
        raise ValidationError(f"Product {index + 1} images must be a list of URLs", field='products')

    return {
        'title': title,
        'description': _optional_text(product, 'description'),
        'condition': condition,
        'images': images,
    }


def parse_products(raw) -> List:
    """Products may arrive as a list or as a JSON string from a form post"""
    if raw is None or raw == '':
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise ValidationError("products must be valid JSON", field='products')
    if not isinstance(raw, list):
        raise ValidationError("products must be a list", field='products')
    return raw


def validate_new_sale(data: Dict, now: Optional[datetime] = None) -> Tuple[Dict, List[Dict]]:
    """
    Validate a sale creation payload

    Args:
        data: Request body with sale fields and a products list
        now: Current time (defaults to UTC now)

    Returns:
        Tuple of (cleaned sale dict, cleaned product dicts)
    """
    now = now or utcnow()
    ensure_object(data)

    products = parse_products(data.get('products'))
    if not products:
        raise ValidationError("At least one product is required", field='products')
    if len(products) > settings.MAX_PRODUCTS_PER_SALE:
        raise ValidationError(
            f"Maximum {settings.MAX_PRODUCTS_PER_SALE} products allowed per quick sale",
            field='products'
        )

    title = required_text(data, 'title', 'Title')
    if len(title) > settings.MAX_TITLE_LENGTH:
        raise ValidationError(
            f"Title too long (max {settings.MAX_TITLE_LENGTH} characters)", field='title'
        )

    ends_at = parse_datetime(data.get('ends_at'), 'ends_at')
    if ends_at <= as_utc(now):
        raise ValidationError("End time must be in the future", field='ends_at')

    sale = {
        'title': title,
        'description': _optional_text(data, 'description'),
        'seller_name': required_text(data, 'seller_name', 'Seller name'),
        'seller_contact': required_text(data, 'seller_contact', 'Seller contact'),
        'seller_email': _optional_text(data, 'seller_email'),
        'reserve_price': _reserve_price(data.get('reserve_price')),
        'starts_at': as_utc(now),
        'ends_at': ends_at,
        'status': SaleStatus.ACTIVE.value,
    }

    return sale, [validate_product(product, i) for i, product in enumerate(products)]


def validate_sale_changes(changes: Dict) -> Dict:
    """
    Validate an admin edit. Only EDITABLE_FIELDS may change; finalize
    bookkeeping (winner, outcome, finalized_at) is never editable here.
    """
    if not isinstance(changes, dict) or not changes:
        raise ValidationError("No fields to update")

    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}", field=unknown[0])

    cleaned = {}
    for field, value in changes.items():
        if field == 'status':
            if value not in SaleStatus.values():
                raise ValidationError(
                    f"Status must be one of: {', '.join(SaleStatus.values())}", field='status'
                )
            cleaned[field] = value
        elif field == 'ends_at':
            cleaned[field] = parse_datetime(value, 'ends_at')
        elif field == 'reserve_price':
            cleaned[field] = _reserve_price(value)
        elif field in ('title', 'seller_name', 'seller_contact'):
            cleaned[field] = required_text(changes, field, field.replace('_', ' ').capitalize())
        else:
            cleaned[field] = _optional_text(changes, field)

    return cleaned
