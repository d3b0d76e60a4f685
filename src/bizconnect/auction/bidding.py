"""
Bidding rules
Pure functions that decide whether a bid is acceptable and who wins a sale.
The database store calls these while holding the sale row lock.
"""
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from ..config import settings
from ..database.models import FinalizeOutcome, SaleStatus
from .errors import (
    BidConflictError,
    BidTooLowError,
    InvalidBidAmountError,
    SaleEndedError,
    SaleNotActiveError,
    ValidationError,
)

CENTS = Decimal('0.01')
# Largest value a NUMERIC(12,2) column holds
MAX_AMOUNT = Decimal('9999999999.99')


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_amount(raw, field: str = 'bid_amount') -> Decimal:
    """
    Parse a money amount sent as a decimal string or number

    Args:
        raw: Value from the request body
        field: Field name used in the error

    Returns:
        Decimal quantized to cents

    Raises:
        InvalidBidAmountError for bid amounts, ValidationError for other fields
    """
    def fail(message):
        if field == 'bid_amount':
            return InvalidBidAmountError(message)
        return ValidationError(message, field=field)

    if raw is None or isinstance(raw, bool) or (isinstance(raw, str) and not raw.strip()):
        raise fail(f"{field} is required")

    try:
        # Floats go through str() so 60.1 stays 60.1 and not 60.0999...
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise fail(f"{field} must be a number")

    if not amount.is_finite():
        raise fail(f"{field} must be a number")
    if amount.as_tuple().exponent < -2:
        raise fail(f"{field} can have at most 2 decimal places")
    if abs(amount) > MAX_AMOUNT:
        raise fail(f"{field} cannot exceed {MAX_AMOUNT}")

    try:
        return amount.quantize(CENTS)
    except InvalidOperation:
        raise fail(f"{field} must be a number")


def parse_bid_amount(raw) -> Decimal:
    """Parse a bid amount; must be strictly positive"""
    amount = parse_amount(raw, 'bid_amount')
    if amount <= 0:
        raise InvalidBidAmountError("Bid amount must be greater than zero")
    return amount


def ensure_object(body) -> Dict:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def required_text(data: Dict, field: str, label: str) -> str:
    """Stripped string value of a required field"""
    value = data.get(field)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{label} must be text", field=field)
    value = (value or '').strip()
    if not value:
        raise ValidationError(f"{label} is required", field=field)
    return value


def validate_bid_input(bid: Dict) -> Dict:
    """
    Validate a bid request body before any database work

    Returns:
        Cleaned dict with bidder_name, bid_amount (Decimal), contact_number
    """
    ensure_object(bid)
    bidder_name = required_text(bid, 'bidder_name', "Bidder name")
    contact_number = required_text(bid, 'contact_number', "Contact number")

    return {
        'bidder_name': bidder_name,
        'bid_amount': parse_bid_amount(bid.get('bid_amount')),
        'contact_number': contact_number,
    }


def is_biddable(sale: Dict, now: Optional[datetime] = None) -> bool:
    """True while the sale is active and its end time has not passed"""
    now = now or utcnow()
    return sale.get('status') == SaleStatus.ACTIVE.value and as_utc(now) < as_utc(sale['ends_at'])


def ensure_biddable(sale: Dict, now: Optional[datetime] = None) -> None:
    """Raise a Conflict error if the sale cannot accept bids right now"""
    now = now or utcnow()
    if sale.get('status') != SaleStatus.ACTIVE.value:
        raise SaleNotActiveError(sale['id'], sale.get('status'))
    if as_utc(now) >= as_utc(sale['ends_at']):
        raise SaleEndedError(sale['id'])


def ensure_bid_clears(amount: Decimal, highest: Optional[Decimal],
                      observed_highest: Optional[Decimal] = None) -> None:
    """
    Check a bid against the highest bid read under the sale lock

    Args:
        amount: The new bid amount
        highest: Highest bid amount read while holding the lock (None if no bids)
        observed_highest: Highest bid amount read before the lock was taken

    Raises:
        BidConflictError if the bid cleared what the bidder saw but a bid
        committed in between now beats it; BidTooLowError otherwise
    """
    if highest is None or amount > highest:
        return

    currency = settings.CURRENCY_SYMBOL
    if observed_highest is None or amount > observed_highest:
        raise BidConflictError(amount, highest, currency)
    raise BidTooLowError(amount, highest, currency)


def decide_outcome(highest_bid: Optional[Dict], reserve_price: Optional[Decimal]) -> FinalizeOutcome:
    """
    Winner-selection rule used by finalize

    Args:
        highest_bid: Highest bid row for the sale, or None
        reserve_price: Sale reserve, or None when there is no reserve

    Returns:
        FinalizeOutcome
    """
    if highest_bid is None:
        return FinalizeOutcome.NO_BIDS
    if reserve_price is not None and Decimal(highest_bid['bid_amount']) < Decimal(reserve_price):
        return FinalizeOutcome.RESERVE_NOT_MET
    return FinalizeOutcome.WINNER


def reserve_met(highest_amount: Optional[Decimal], reserve_price: Optional[Decimal]) -> Optional[bool]:
    """None when the sale has no reserve"""
    if reserve_price is None:
        return None
    if highest_amount is None:
        return False
    return Decimal(highest_amount) >= Decimal(reserve_price)
