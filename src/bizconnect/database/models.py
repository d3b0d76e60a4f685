"""
Data models for BizConnect
Defines data structures and type hints for database operations
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, TypedDict


class SaleStatus(str, Enum):
    """Quick sale lifecycle states"""
    ACTIVE = 'active'
    ENDED = 'ended'
    CANCELLED = 'cancelled'

    @classmethod
    def values(cls) -> List[str]:
        return [status.value for status in cls]


class FinalizeOutcome(str, Enum):
    """Result of the finalize winner-selection rule"""
    WINNER = 'winner'
    NO_BIDS = 'no_bids'
    RESERVE_NOT_MET = 'reserve_not_met'


class QuickSaleData(TypedDict, total=False):
    """Type definition for a quick sale row"""
    id: str
    title: str
    description: Optional[str]
    seller_name: str
    seller_contact: str
    seller_email: Optional[str]
    reserve_price: Optional[Decimal]
    starts_at: datetime
    ends_at: datetime
    status: str  # 'active', 'ended', 'cancelled'
    winning_bid_id: Optional[str]
    finalize_outcome: Optional[str]  # 'winner', 'no_bids', 'reserve_not_met'
    finalized_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class QuickSaleProductData(TypedDict, total=False):
    """Type definition for a product listed in a quick sale"""
    id: str
    sale_id: str
    title: str
    description: Optional[str]
    condition: str
    images: List[str]
    created_at: datetime


class QuickSaleBidData(TypedDict, total=False):
    """Type definition for a bid"""
    id: str
    sale_id: str
    bidder_name: str
    bid_amount: Decimal
    contact_number: str
    created_at: datetime


class FinalizeResult(TypedDict):
    """Type definition for the finalize action result"""
    sale: QuickSaleData
    outcome: str
    winning_bid: Optional[QuickSaleBidData]
    already_finalized: bool


class AdminUserData(TypedDict, total=False):
    """Type definition for an admin account"""
    id: str
    username: str
    password_hash: str
    full_name: Optional[str]
    email: Optional[str]
    is_active: bool
    created_at: datetime
