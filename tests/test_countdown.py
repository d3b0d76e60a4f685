"""
Unit tests for the countdown presenter
"""
import pytest
from datetime import timedelta

from bizconnect.auction.countdown import Countdown, CountdownState


def detail_for(ends_at, status='active', server_time=None):
    detail = {'ends_at': ends_at.isoformat(), 'status': status}
    if server_time is not None:
        detail['server_time'] = server_time.isoformat()
    return detail


@pytest.mark.unit
class TestCountdownTick:
    """Tests for Countdown.tick"""

    def test_running_before_end(self, now):
        countdown = Countdown(now + timedelta(seconds=90), now=now)
        assert countdown.state == CountdownState.RUNNING
        assert countdown.remaining == timedelta(seconds=90)
        assert countdown.bidding_enabled is True

    def test_ends_at_zero(self, now):
        """
        GIVEN a countdown with 2 seconds left
        WHEN it ticks each second
        THEN it should end on the tick that reaches zero and disable bidding
        """
        countdown = Countdown(now + timedelta(seconds=2), now=now)

        assert countdown.tick(now + timedelta(seconds=1)) == CountdownState.RUNNING
        assert countdown.tick(now + timedelta(seconds=2)) == CountdownState.ENDED
        assert countdown.remaining == timedelta(0)
        assert countdown.bidding_enabled is False

    def test_remaining_never_negative(self, now):
        countdown = Countdown(now - timedelta(minutes=5), now=now)
        assert countdown.ended
        assert countdown.remaining == timedelta(0)

    def test_ended_is_terminal_between_reconciles(self, now):
        countdown = Countdown(now + timedelta(seconds=1), now=now)
        countdown.tick(now + timedelta(seconds=5))
        # A client clock jumping backwards does not restart the timer
        assert countdown.tick(now) == CountdownState.ENDED

    def test_inactive_status_ends_immediately(self, now):
        countdown = Countdown(now + timedelta(hours=1), status='cancelled', now=now)
        assert countdown.ended


@pytest.mark.unit
class TestCountdownReconcile:
    """Tests for server reconciliation"""

    def test_clock_offset_from_server_time(self, now):
        """
        GIVEN a client clock 10 minutes behind the server
        WHEN the countdown is built from a sale detail
        THEN remaining time should follow the server clock
        """
        server_now = now + timedelta(minutes=10)
        countdown = Countdown.from_sale(
            detail_for(server_now + timedelta(seconds=30), server_time=server_now), now=now
        )

        assert countdown.clock_offset == timedelta(minutes=10)
        assert countdown.remaining == timedelta(seconds=30)

    def test_reconcile_extends_ended_sale(self, now):
        countdown = Countdown(now + timedelta(seconds=1), now=now)
        countdown.tick(now + timedelta(seconds=2))
        assert countdown.ended

        state = countdown.reconcile(
            detail_for(now + timedelta(minutes=5), server_time=now + timedelta(seconds=2)),
            now=now + timedelta(seconds=2),
        )

        assert state == CountdownState.RUNNING
        assert countdown.bidding_enabled

    def test_reconcile_server_ended(self, now):
        countdown = Countdown(now + timedelta(hours=1), now=now)
        countdown.reconcile(detail_for(now + timedelta(hours=1), status='ended'), now=now)
        assert countdown.ended

    def test_reconcile_without_server_time_keeps_offset(self, now):
        countdown = Countdown(now + timedelta(hours=1), clock_offset=timedelta(seconds=7), now=now)
        countdown.reconcile(detail_for(now + timedelta(hours=2)), now=now)
        assert countdown.clock_offset == timedelta(seconds=7)


@pytest.mark.unit
class TestFormatRemaining:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "Ended"),
        (59, "00:00:59"),
        (3723, "01:02:03"),
        (93784, "1d 02:03:04"),
    ])
    def test_format(self, now, seconds, expected):
        countdown = Countdown(now + timedelta(seconds=seconds), now=now)
        assert countdown.format_remaining() == expected
