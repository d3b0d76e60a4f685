"""
Custom exceptions for BizConnect
================================

Each family maps to one HTTP status so the web layer can answer with a
distinct, user-facing message instead of a generic failure.

Usage:
    from bizconnect.auction.errors import SaleNotFoundError, BidTooLowError

    if sale is None:
        raise SaleNotFoundError(sale_id)
"""

from typing import Any, Dict, Optional


class BizConnectError(Exception):
    """Base exception for all BizConnect errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class InternalError(BizConnectError):
    """Unexpected server fault"""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")


# ============================================
# 400 - Validation
# ============================================

class ValidationError(BizConnectError):
    """Bad input, recoverable by correcting the request"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, code: str = "VALIDATION_ERROR"):
        details = {"field": field} if field else {}
        super().__init__(message, code=code, details=details)


class InvalidBidAmountError(ValidationError):
    """Bid amount is not a positive decimal"""

    def __init__(self, message: str = "Bid amount must be a positive number"):
        super().__init__(message, field="bid_amount", code="INVALID_BID_AMOUNT")


class BidTooLowError(ValidationError):
    """Bid does not exceed the current highest bid"""

    def __init__(self, amount, highest, currency: str = ""):
        super().__init__(
            f"Bid must be higher than current highest bid of {currency}{highest}",
            field="bid_amount",
            code="BID_TOO_LOW"
        )
        self.details.update({"bid_amount": str(amount), "highest_bid": str(highest)})


# ============================================
# 401 / 403 - Authentication & Authorization
# ============================================

class UnauthorizedError(BizConnectError):
    """Missing, invalid or expired credentials"""

    status_code = 401

    def __init__(self, message: str = "Admin access token required"):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(BizConnectError):
    """Authenticated, but not allowed"""

    status_code = 403

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# 404 - Not Found
# ============================================

class NotFoundError(BizConnectError):
    """Requested resource does not exist"""

    status_code = 404

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class SaleNotFoundError(NotFoundError):
    """Quick sale does not exist"""

    def __init__(self, sale_id: str):
        super().__init__("Quick sale not found", code="SALE_NOT_FOUND")
        self.details = {"sale_id": str(sale_id)}


# ============================================
# 409 - Conflict (stale state)
# ============================================

class ConflictError(BizConnectError):
    """Request is valid but the resource is in the wrong state"""

    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class SaleNotActiveError(ConflictError):
    def __init__(self, sale_id: str, status: str):
        super().__init__(
            "This quick sale is not active",
            code="SALE_NOT_ACTIVE",
            details={"sale_id": str(sale_id), "status": status}
        )


class SaleEndedError(ConflictError):
    def __init__(self, sale_id: str):
        super().__init__(
            "This quick sale has ended",
            code="SALE_ENDED",
            details={"sale_id": str(sale_id)}
        )


class SaleCancelledError(ConflictError):
    def __init__(self, sale_id: str):
        super().__init__(
            "Cancelled quick sales cannot be finalized",
            code="SALE_CANCELLED",
            details={"sale_id": str(sale_id)}
        )


class SaleAlreadyFinalizedError(ConflictError):
    def __init__(self, sale_id: str):
        super().__init__(
            "Quick sale already finalized and cannot be reactivated",
            code="SALE_ALREADY_FINALIZED",
            details={"sale_id": str(sale_id)}
        )


class BidConflictError(ConflictError):
    """Another bid was accepted while this one was waiting"""

    def __init__(self, amount, highest, currency: str = ""):
        super().__init__(
            f"You were outbid while placing your bid. Current highest bid is {currency}{highest}",
            code="BID_CONFLICT",
            details={"bid_amount": str(amount), "highest_bid": str(highest)}
        )
