"""
JSON serialization helpers
Turns database rows into JSON-safe payloads and builds response envelopes
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from flask import jsonify

from ..auction.bidding import as_utc, is_biddable, reserve_met, utcnow
from ..auction.errors import BizConnectError


def to_json(value):
    """Recursively convert Decimal, datetime and UUID values"""
    if isinstance(value, dict):
        return {key: to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(item) for item in value]
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def success_response(data, status: int = 200):
    return jsonify({"success": True, "data": to_json(data)}), status


def error_response(error: BizConnectError):
    return jsonify({
        "success": False,
        "error": error.message,
        "code": error.code,
        "details": to_json(error.details),
    }), error.status_code


def mask_contact(contact: Optional[str]) -> Optional[str]:
    """Keep only the last 3 digits of a phone number"""
    if not contact:
        return contact
    return '*' * max(len(contact) - 3, 0) + contact[-3:]


def sale_detail(sale: Dict, now: Optional[datetime] = None, public: bool = True) -> Dict:
    """
    Add the live fields a client needs to render the countdown and bid form

    Args:
        sale: Output of QuickSaleStore.get_sale_detail
        now: Server time (defaults to UTC now)
        public: Mask bidder contact numbers when True
    """
    now = as_utc(now or utcnow())
    payload = dict(sale)

    if public:
        payload['bids'] = [
            {**bid, 'contact_number': mask_contact(bid.get('contact_number'))}
            for bid in sale.get('bids', [])
        ]
        if sale.get('highest_bid'):
            payload['highest_bid'] = payload['bids'][0]

    highest = sale.get('highest_bid')
    remaining = (as_utc(sale['ends_at']) - now).total_seconds()

    payload['server_time'] = now
    payload['seconds_remaining'] = max(int(remaining), 0)
    payload['is_biddable'] = is_biddable(sale, now)
    payload['reserve_met'] = reserve_met(
        highest['bid_amount'] if highest else None, sale.get('reserve_price')
    )
    return payload
