"""
Quick sales API client
Handles HTTP communication with the BizConnect REST API.
Admin tokens are passed explicitly to each call rather than cached globally.
"""
import httpx
from typing import Dict, List, Optional

from ..config import settings


class ApiError(Exception):
    """Non-2xx response from the API"""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"HTTP {status_code}: {message}")

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409


def get_api_headers(token: Optional[str] = None) -> dict:
    """
    Get standard API headers

    Args:
        token: Admin bearer token, if the call needs one

    Returns:
        Dictionary of HTTP headers
    """
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _unwrap(response: httpx.Response):
    """Return the 'data' member of a success envelope or raise ApiError"""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    if response.status_code >= 400 or not body.get('success', False):
        raise ApiError(
            response.status_code,
            body.get('error') or f"Request failed (HTTP {response.status_code})",
            body.get('code'),
        )
    return body.get('data')


async def _request(method: str, path: str, base_url: Optional[str] = None,
                   token: Optional[str] = None, json: Optional[Dict] = None,
                   params: Optional[Dict] = None):
    async with httpx.AsyncClient() as client:
        response = await client.request(
            method,
            f"{base_url or settings.API_BASE_URL}{path}",
            headers=get_api_headers(token),
            json=json,
            params=params,
            timeout=settings.API_TIMEOUT_SECONDS
        )
    return _unwrap(response)


async def admin_login(username: str, password: str, base_url: Optional[str] = None) -> str:
    """
    Log in as admin

    Returns:
        Bearer token for admin endpoints
    """
    data = await _request('POST', '/api/admin/login', base_url,
                          json={"username": username, "password": password})
    return data['token']


async def list_sales(status: Optional[str] = None, base_url: Optional[str] = None) -> List[Dict]:
    params = {"status": status} if status else None
    return await _request('GET', '/api/quick-sales', base_url, params=params)


async def fetch_sale(sale_id: str, base_url: Optional[str] = None) -> Dict:
    """
    Fetch a sale detail, including server_time for countdown reconciliation

    Raises:
        ApiError (404 when the sale does not exist)
    """
    return await _request('GET', f'/api/quick-sales/{sale_id}', base_url)


async def place_bid(sale_id: str, bidder_name: str, bid_amount: str, contact_number: str,
                    base_url: Optional[str] = None) -> Dict:
    """
    Place a bid

    Args:
        bid_amount: Decimal string, e.g. "60.00"

    Raises:
        ApiError with status 400 (invalid / too low), 404, or 409 (ended, outbid)
    """
    return await _request('POST', f'/api/quick-sales/{sale_id}/bids', base_url, json={
        "bidder_name": bidder_name,
        "bid_amount": str(bid_amount),
        "contact_number": contact_number,
    })


async def finalize_sale(sale_id: str, token: str, base_url: Optional[str] = None) -> Dict:
    """Finalize a sale as admin; safe to call more than once"""
    return await _request('POST', f'/api/admin/quick-sales/{sale_id}/finalize', base_url, token=token)
