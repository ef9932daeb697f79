"""
Settlement Calculator

Splits one booking's gross amount between the provider and the agency.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import HUNDRED, ZERO, Booking, SettlementResult, parse_amount, parse_decimal


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class SettlementCalculator:
    """Computes provider-net and agency-net for a single booking."""

    def compute(self, booking: Booking, percentage: Decimal) -> SettlementResult:
        """
        Provider Net = Costs + (Gross - Costs) * Percentage / 100
        Agency Net   = Gross - Provider Net

        The provider is reimbursed costs first, then receives their share of
        the remaining margin. Provider net is clamped to [0, Gross], so the
        two shares always add up to Gross exactly.
        """
        gross = parse_amount(booking.gross_amount, "gross_amount")
        costs = parse_amount(booking.costs, "costs")
        percentage = parse_decimal(percentage)
        if percentage is None:
            raise ValueError("percentage must be a finite number")
        percentage = min(max(percentage, ZERO), HUNDRED)
        base = max(gross - costs, ZERO)

        provider_net = quantize_money(costs + base * percentage / HUNDRED)
        provider_net = min(max(provider_net, ZERO), gross)

        return SettlementResult(
            provider_net=provider_net,
            agency_net=gross - provider_net,
        )
