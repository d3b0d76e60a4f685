"""
Countdown presenter
Client-side timer for a quick sale. It only drives what is displayed:
the server decides whether a bid is accepted, and every fetch of the sale
reconciles the timer with server state.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional

from ..database.models import SaleStatus
from .bidding import as_utc, utcnow
from .sales import parse_datetime


class CountdownState(str, Enum):
    RUNNING = 'running'
    ENDED = 'ended'


class Countdown:
    """Tracks time left on a sale, corrected for client/server clock skew"""

    def __init__(self, ends_at: datetime, status: str = SaleStatus.ACTIVE.value,
                 clock_offset: timedelta = timedelta(0), now: Optional[datetime] = None):
        self.ends_at = as_utc(ends_at)
        self.status = status
        # server_time - client_time at the last reconcile
        self.clock_offset = clock_offset
        self.remaining = timedelta(0)
        self.state = CountdownState.RUNNING
        self.tick(now)

    @classmethod
    def from_sale(cls, detail: Dict, now: Optional[datetime] = None) -> 'Countdown':
        """Build a countdown from a sale detail payload"""
        now = as_utc(now or utcnow())
        offset = timedelta(0)
        if detail.get('server_time'):
            offset = parse_datetime(detail['server_time'], 'server_time') - now
        return cls(
            parse_datetime(detail['ends_at'], 'ends_at'),
            detail.get('status', SaleStatus.ACTIVE.value),
            offset,
            now,
        )

    def reconcile(self, detail: Dict, now: Optional[datetime] = None) -> CountdownState:
        """
        Replace local state with the server's view of the sale

        Args:
            detail: Sale payload with ends_at, status and (optionally) server_time
            now: Client clock reading (defaults to UTC now)
        """
        now = as_utc(now or utcnow())
        self.ends_at = parse_datetime(detail['ends_at'], 'ends_at')
        self.status = detail.get('status', SaleStatus.ACTIVE.value)

        server_time = detail.get('server_time')
        if server_time:
            self.clock_offset = parse_datetime(server_time, 'server_time') - now

        # Server may extend ends_at, so ENDED is not sticky across reconciles
        self.state = CountdownState.RUNNING
        return self.tick(now)

    def tick(self, now: Optional[datetime] = None) -> CountdownState:
        """Recompute remaining time; called once per second by the presenter"""
        if self.state == CountdownState.ENDED:
            return self.state

        server_now = as_utc(now or utcnow()) + self.clock_offset
        remaining = self.ends_at - server_now
        self.remaining = max(remaining, timedelta(0))

        if self.remaining <= timedelta(0) or self.status != SaleStatus.ACTIVE.value:
            self.state = CountdownState.ENDED
        return self.state

    @property
    def ended(self) -> bool:
        return self.state == CountdownState.ENDED

    @property
    def bidding_enabled(self) -> bool:
        return self.state == CountdownState.RUNNING

    def format_remaining(self) -> str:
        """Render as 'Ended', 'HH:MM:SS' or 'Nd HH:MM:SS'"""
        if self.ended:
            return "Ended"
        total = int(self.remaining.total_seconds())
        days, rest = divmod(total, 86400)
        hours, rest = divmod(rest, 3600)
        minutes, seconds = divmod(rest, 60)
        clock = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
        return f"{days}d {clock}" if days else clock
