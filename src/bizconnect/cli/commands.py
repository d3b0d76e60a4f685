"""
CLI command implementations
"""
import asyncio
import getpass
from typing import Optional

import httpx

from ..api.client import ApiError, admin_login, fetch_sale, finalize_sale, place_bid
from ..auction.bidding import utcnow
from ..auction.countdown import Countdown
from ..auction.errors import BizConnectError
from ..config import settings
from ..database.store import QuickSaleStore
from ..web.auth import get_password_hash


def init_db() -> bool:
    """Create the database schema"""
    with QuickSaleStore() as store:
        store.init_schema()
    print(f"✓ Schema ready in database: {settings.DB_NAME}")
    return True


def create_admin(username: str, password: Optional[str] = None,
                 full_name: Optional[str] = None, email: Optional[str] = None) -> bool:
    """Create an admin account, prompting for the password if not given"""
    if not password:
        password = getpass.getpass(f"Password for {username}: ")
    if not password:
        print("ERROR: Password is required")
        return False

    try:
        with QuickSaleStore() as store:
            admin = store.create_admin(username, get_password_hash(password), full_name, email)
    except BizConnectError as e:
        print(f"ERROR: {e.message}")
        return False

    print(f"✓ Created admin '{admin['username']}' ({admin['id']})")
    return True


def _highest_label(detail: dict) -> str:
    highest = detail.get('highest_bid')
    if not highest:
        return "no bids yet"
    return f"highest {settings.format_amount(highest['bid_amount'])} by {highest['bidder_name']}"


async def watch_sale(sale_id: str, base_url: Optional[str] = None,
                     tick_seconds: Optional[float] = None,
                     reconcile_seconds: Optional[float] = None,
                     max_ticks: Optional[int] = None,
                     sleep=asyncio.sleep, clock=utcnow) -> Optional[Countdown]:
    """
    Show a live countdown for a sale

    The local timer only drives the display. The sale is re-fetched every
    reconcile_seconds, and once more when the timer runs out, so the
    server's ends_at and status always win.

    Args:
        sale_id: Quick sale ID
        base_url: API base URL (defaults to settings.API_BASE_URL)
        tick_seconds: Display refresh interval
        reconcile_seconds: Server re-fetch interval
        max_ticks: Stop after this many ticks (None = until the sale ends)
        sleep: Awaitable sleep function
        clock: Returns the current client time

    Returns:
        The final Countdown, or None if the sale could not be fetched
    """
    tick_seconds = tick_seconds or settings.COUNTDOWN_TICK_SECONDS
    reconcile_seconds = reconcile_seconds or settings.COUNTDOWN_RECONCILE_SECONDS

    try:
        detail = await fetch_sale(sale_id, base_url)
    except (ApiError, httpx.HTTPError) as e:
        print(f"ERROR: Could not fetch sale {sale_id}: {e}")
        return None

    countdown = Countdown.from_sale(detail, clock())
    last_sync = clock()
    print(f"[WATCH] {detail['title']} ({detail['status']})")

    ticks = 0
    while True:
        countdown.tick(clock())
        print(f"\r⏳ {countdown.format_remaining():>14}  {_highest_label(detail)}", end="", flush=True)

        if countdown.ended:
            # Local clock says it's over; ask the server before believing it
            try:
                detail = await fetch_sale(sale_id, base_url)
                countdown.reconcile(detail, clock())
                last_sync = clock()
            except (ApiError, httpx.HTTPError) as e:
                print(f"\nWARNING: Could not confirm final state: {e}")
                break
            if countdown.ended:
                break

        if max_ticks is not None and ticks >= max_ticks:
            break

        await sleep(tick_seconds)
        ticks += 1

        if (clock() - last_sync).total_seconds() >= reconcile_seconds:
            try:
                detail = await fetch_sale(sale_id, base_url)
                countdown.reconcile(detail, clock())
                last_sync = clock()
            except (ApiError, httpx.HTTPError) as e:
                print(f"\nWARNING: Sync failed, keeping local timer: {e}")

    print()
    if countdown.ended:
        print(f"✓ Bidding closed ({detail['status']}), {_highest_label(detail)}")
    return countdown


async def bid(sale_id: str, bidder_name: str, amount: str, contact_number: str,
              base_url: Optional[str] = None) -> bool:
    """Place a bid and report the server's verdict"""
    try:
        created = await place_bid(sale_id, bidder_name, amount, contact_number, base_url)
    except ApiError as e:
        if e.is_conflict:
            print(f"✗ Bid not accepted: {e.message}")
        else:
            print(f"ERROR: {e.message}")
        return False
    except httpx.HTTPError as e:
        print(f"ERROR: Could not reach the API: {e}")
        return False

    print(f"✓ Bid {created['id']} accepted: {settings.format_amount(created['bid_amount'])}")
    return True


async def finalize(sale_id: str, username: str, password: Optional[str] = None,
                   base_url: Optional[str] = None) -> bool:
    """Log in as admin and finalize a sale"""
    if not password:
        password = getpass.getpass(f"Admin password for {username}: ")

    try:
        token = await admin_login(username, password, base_url)
        result = await finalize_sale(sale_id, token, base_url)
    except ApiError as e:
        print(f"ERROR: {e.message}")
        return False
    except httpx.HTTPError as e:
        print(f"ERROR: Could not reach the API: {e}")
        return False

    prefix = "Already finalized" if result['already_finalized'] else "Finalized"
    outcome = result['outcome']
    if outcome == 'winner':
        winner = result['winning_bid']
        print(f"✓ {prefix}: {winner['bidder_name']} wins with {settings.format_amount(winner['bid_amount'])}")
    elif outcome == 'reserve_not_met':
        print(f"✓ {prefix}: reserve price not met, no winner")
    else:
        print(f"✓ {prefix}: no bids, no winner")
    return True
