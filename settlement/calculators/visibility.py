"""
Visibility Filter

Decides whether a booking participates in any settlement calculation.
"""

from datetime import date

from ..models import Booking, BookingLifecycleState


class VisibilityFilter:
    """Excludes deleted, cancelled, out-of-period and other-provider bookings."""

    def is_eligible(
        self,
        booking: Booking,
        period_start: date | None = None,
        period_end: date | None = None,
        provider_filter: str | None = None,
    ) -> bool:
        """
        Return True if the booking counts toward totals.

        The period is inclusive on both ends. A missing bound leaves that side
        open; a booking without a date is outside any bounded period.
        """
        if booking.lifecycle_state != BookingLifecycleState.ACTIVE:
            return False

        if not self._in_period(booking.event_date, period_start, period_end):
            return False

        if provider_filter is not None and booking.provider_id != provider_filter:
            return False

        return True

    def _in_period(self, event_date: date | None, start: date | None, end: date | None) -> bool:
        if start is None and end is None:
            return True
        if event_date is None:
            return False
        if start is not None and event_date < start:
            return False
        if end is not None and event_date > end:
            return False
        return True
