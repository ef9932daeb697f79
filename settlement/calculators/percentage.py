"""
Percentage Resolver

Single source of truth for the provider split percentage of a booking.
"""

from decimal import Decimal

from ..config import DEFAULT_AGENCY_PERCENTAGE
from ..models import HUNDRED, ZERO, Booking, PercentageSource, Provider, parse_decimal


def as_number(value) -> Decimal | None:
    """Finite int, float or Decimal as a Decimal; anything else is None."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    return parse_decimal(value)


def is_valid_percentage(value) -> bool:
    """True for a finite real number in [0, 100]."""
    number = as_number(value)
    return number is not None and ZERO <= number <= HUNDRED


class PercentageResolver:
    """Resolves the provider's share percentage for one booking."""

    def resolve(
        self,
        booking: Booking,
        provider: Provider | None,
        agency_default_percentage: Decimal,
    ) -> Decimal:
        percentage, _ = self.resolve_with_source(booking, provider, agency_default_percentage)
        return percentage

    def resolve_with_source(
        self,
        booking: Booking,
        provider: Provider | None,
        agency_default_percentage: Decimal,
    ) -> tuple[Decimal, PercentageSource]:
        """
        Resolve the percentage and report which rule produced it.

        Priority order:
        1. Booking percentage override
        2. Provider default split percentage
        3. 100 - agency default percentage

        Malformed or out-of-range stored values are skipped, never raised.
        """
        if is_valid_percentage(booking.percentage_override):
            return as_number(booking.percentage_override), PercentageSource.OVERRIDE

        if provider is not None and is_valid_percentage(provider.default_split_percentage):
            return as_number(provider.default_split_percentage), PercentageSource.PROVIDER_DEFAULT

        agency = as_number(agency_default_percentage)
        if agency is None:
            agency = DEFAULT_AGENCY_PERCENTAGE
        fallback = HUNDRED - agency
        return min(max(fallback, ZERO), HUNDRED), PercentageSource.AGENCY_FALLBACK
