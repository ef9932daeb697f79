"""
Aggregator

Folds many bookings into agency-wide and per-provider settlement summaries.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from decimal import Decimal

from .calculators import (
    BalanceClassifier,
    PercentageResolver,
    SettlementCalculator,
    VisibilityFilter,
)
from .config import DEFAULT_AGENCY_PERCENTAGE
from .models import (
    Booking,
    PercentageSource,
    Provider,
    ProviderSummary,
    SettlementResult,
    SettlementTotals,
    Summary,
    parse_amount,
)

logger = logging.getLogger(__name__)

ProviderLookup = Callable[[str], Provider | None]


def as_provider_lookup(providers) -> ProviderLookup:
    """Accept a mapping, an iterable of providers, a callable, or None."""
    if providers is None:
        return lambda provider_id: None
    if callable(providers):
        return providers
    if isinstance(providers, Mapping):
        return providers.get
    by_id = {provider.id: provider for provider in providers}
    return by_id.get


class Aggregator:
    """Runs the filter → resolve → settle → classify pipeline over bookings."""

    def __init__(
        self,
        visibility_filter: VisibilityFilter | None = None,
        resolver: PercentageResolver | None = None,
        calculator: SettlementCalculator | None = None,
        classifier: BalanceClassifier | None = None,
    ):
        self.visibility_filter = visibility_filter or VisibilityFilter()
        self.resolver = resolver or PercentageResolver()
        self.calculator = calculator or SettlementCalculator()
        self.classifier = classifier or BalanceClassifier()

    def settle_booking(
        self,
        booking: Booking,
        provider: Provider | None,
        agency_default_percentage: Decimal,
    ) -> tuple[Decimal, PercentageSource, SettlementResult]:
        """Resolve the percentage and compute the settlement for one booking."""
        percentage, source = self.resolver.resolve_with_source(booking, provider, agency_default_percentage)
        return percentage, source, self.calculator.compute(booking, percentage)

    def summarize(
        self,
        bookings: Iterable[Booking],
        period_start: date | None = None,
        period_end: date | None = None,
        provider_filter: str | None = None,
        provider_lookup=None,
        agency_default_percentage: Decimal = DEFAULT_AGENCY_PERCENTAGE,
        include_unassigned_in_agency_totals: bool = False,
    ) -> Summary:
        """
        Summarize eligible bookings.

        Each booking's percentage is resolved against its own provider, so an
        agency-wide summary may mix many providers. Bookings without a
        provider never get a per-provider entry; they count agency-wide only
        when ``include_unassigned_in_agency_totals`` is set.

        An empty or fully filtered input yields a zero-valued Summary.
        """
        lookup = as_provider_lookup(provider_lookup)
        summary = Summary(
            period_start=period_start,
            period_end=period_end,
            provider_filter=provider_filter,
        )
        per_provider: dict[str, ProviderSummary] = {}

        for booking in bookings:
            if not self.visibility_filter.is_eligible(booking, period_start, period_end, provider_filter):
                continue

            if booking.provider_id is None:
                if not include_unassigned_in_agency_totals:
                    logger.debug(f"Skipping unassigned booking {booking.id}")
                    continue
                provider = None
            else:
                provider = lookup(booking.provider_id)
                if provider is None:
                    logger.debug(
                        f"Provider {booking.provider_id} not found for booking {booking.id}, "
                        f"using agency fallback percentage"
                    )

            _, _, result = self.settle_booking(booking, provider, agency_default_percentage)
            self._accumulate(summary, booking, result)

            if booking.provider_id is not None:
                provider_summary = per_provider.get(booking.provider_id)
                if provider_summary is None:
                    provider_summary = ProviderSummary(
                        provider_id=booking.provider_id,
                        display_name=provider.display_name if provider else booking.provider_id,
                    )
                    per_provider[booking.provider_id] = provider_summary
                self._accumulate(provider_summary, booking, result)

        summary.providers = [per_provider[key] for key in sorted(per_provider)]
        for totals in (summary, *summary.providers):
            totals.booking_ids.sort()
        return summary

    def _accumulate(self, totals: SettlementTotals, booking: Booking, result: SettlementResult) -> None:
        totals.total_bookings += 1
        totals.total_gross += parse_amount(booking.gross_amount, "gross_amount")
        totals.total_costs += parse_amount(booking.costs, "costs")
        totals.total_provider_net += result.provider_net
        totals.total_agency_net += result.agency_net
        totals.total_deposits += parse_amount(booking.deposit_amount, "deposit_amount")
        totals.booking_ids.append(booking.id)
        self.classifier.apply(totals, booking, result)
