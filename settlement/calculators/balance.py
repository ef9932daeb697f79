"""
Balance Classifier

Maps a booking's payment status and actual recipient to the balance bucket
its settlement contributes to.

    | status          | recipient = agency     | recipient = provider  |
    |-----------------|------------------------|-----------------------|
    | paid            | owed to provider       | owed to agency        |
    | pending/partial | pending to provider    | pending to agency     |
    | overdue         | pending to provider    | pending to agency     |
    | cancelled       | excluded by visibility filter                  |
"""

from enum import Enum

from ..models import Booking, PaymentStatus, Recipient, SettlementResult, SettlementTotals


class BalanceBucket(str, Enum):
    OWED_TO_PROVIDER = "balance_owed_to_provider_by_agency"
    OWED_TO_AGENCY = "balance_owed_to_agency_by_provider"
    PENDING_TO_PROVIDER = "pending_provider_share_via_agency"
    PENDING_TO_AGENCY = "pending_agency_share_via_provider"


_OPEN_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PARTIAL, PaymentStatus.OVERDUE)


class BalanceClassifier:
    """Decides who owes whom for a settled booking."""

    def classify(self, booking: Booking) -> BalanceBucket | None:
        """Return the bucket for this booking, or None if it has none.

        Whoever holds the client's money owes the other party their share.
        """
        recipient = booking.recipient
        if recipient is None:
            return None

        if booking.payment_status == PaymentStatus.PAID:
            if recipient == Recipient.AGENCY:
                return BalanceBucket.OWED_TO_PROVIDER
            return BalanceBucket.OWED_TO_AGENCY

        if booking.payment_status in _OPEN_STATUSES:
            if recipient == Recipient.AGENCY:
                return BalanceBucket.PENDING_TO_PROVIDER
            return BalanceBucket.PENDING_TO_AGENCY

        return None

    def apply(self, totals: SettlementTotals, booking: Booking, result: SettlementResult) -> None:
        """Add the relevant share of ``result`` to the booking's bucket."""
        bucket = self.classify(booking)
        if bucket is None:
            return

        if bucket in (BalanceBucket.OWED_TO_PROVIDER, BalanceBucket.PENDING_TO_PROVIDER):
            amount = result.provider_net
        else:
            amount = result.agency_net

        setattr(totals, bucket.value, getattr(totals, bucket.value) + amount)
