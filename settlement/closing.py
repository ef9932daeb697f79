"""
Closing Statement Builder

Builds the period closing for one provider: the settled lines that back a
payout, the deposits already collected by each party, and what is still
pending to the provider.
"""

from collections.abc import Iterable
from datetime import date

from .aggregator import Aggregator, as_provider_lookup
from .config import AgencyConfig
from .models import Booking, ClosingStatement, Recipient, SettlementLine, parse_amount


class ClosingStatementBuilder:
    """Builds a ClosingStatement for one provider over a period."""

    def __init__(self, aggregator: Aggregator | None = None):
        self.aggregator = aggregator or Aggregator()

    def build(
        self,
        bookings: Iterable[Booking],
        provider_id: str,
        period_start: date | None = None,
        period_end: date | None = None,
        provider_lookup=None,
        config: AgencyConfig | None = None,
    ) -> ClosingStatement:
        config = config or AgencyConfig()
        lookup = as_provider_lookup(provider_lookup)
        provider = lookup(provider_id)

        visibility = self.aggregator.visibility_filter
        included = sorted(
            (b for b in bookings if visibility.is_eligible(b, period_start, period_end, provider_id)),
            key=lambda b: (b.event_date or date.min, b.id),
        )

        summary = self.aggregator.summarize(
            included,
            period_start=period_start,
            period_end=period_end,
            provider_filter=provider_id,
            provider_lookup=lookup,
            agency_default_percentage=config.agency_default_percentage,
        )
        totals = summary.providers[0] if summary.providers else None

        statement = ClosingStatement(
            provider_id=provider_id,
            display_name=provider.display_name if provider else provider_id,
            period_start=period_start,
            period_end=period_end,
        )
        if totals is not None:
            statement.totals = totals
        else:
            statement.totals.provider_id = provider_id
            statement.totals.display_name = statement.display_name

        for booking in included:
            percentage, source, result = self.aggregator.settle_booking(
                booking, provider, config.agency_default_percentage
            )
            statement.lines.append(
                SettlementLine(
                    booking_id=booking.id,
                    event_date=booking.event_date,
                    gross_amount=parse_amount(booking.gross_amount, "gross_amount"),
                    costs=parse_amount(booking.costs, "costs"),
                    percentage=percentage,
                    percentage_source=source,
                    provider_net=result.provider_net,
                    agency_net=result.agency_net,
                    payment_status=booking.payment_status,
                )
            )

            deposit = parse_amount(booking.deposit_amount, "deposit_amount")
            if booking.deposit_recipient == Recipient.PROVIDER:
                statement.deposits_held_by_provider += deposit
            elif booking.deposit_recipient == Recipient.AGENCY:
                statement.deposits_held_by_agency += deposit

        return statement
