"""
Output Builder

Constructs JSON-ready responses from settlement results.
"""

from datetime import date
from decimal import Decimal

from .models import (
    ClosingStatement,
    PercentageSource,
    ProviderSummary,
    SettlementLine,
    SettlementResult,
    SettlementTotals,
    Summary,
)
from .palette import color_for


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"${value:,.2f}"


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value else None


def _build_color(provider_id: str) -> dict:
    color = color_for(provider_id)
    return {"background": color.background, "border": color.border}


class OutputBuilder:
    """Builds response dictionaries for the API surfaces."""

    def build_summary(self, summary: Summary) -> dict:
        return {
            "period": {
                "start": _iso(summary.period_start),
                "end": _iso(summary.period_end),
            },
            "provider_filter": summary.provider_filter,
            **self._build_totals(summary),
            "balances": self._build_balances(summary),
            "providers": [self._build_provider(p) for p in summary.providers],
        }

    def build_settlement(
        self,
        booking_id: str,
        gross_amount: Decimal,
        percentage: Decimal,
        source: PercentageSource,
        settlement: SettlementResult,
    ) -> dict:
        return {
            "booking_id": booking_id,
            "gross_amount": to_money(gross_amount),
            "percentage": float(percentage),
            "percentage_source": source.value,
            "provider_net": to_money(settlement.provider_net),
            "agency_net": to_money(settlement.agency_net),
        }

    def build_closing(self, statement: ClosingStatement) -> dict:
        totals = statement.totals
        pending = statement.amount_pending_to_provider
        return {
            "provider_id": statement.provider_id,
            "display_name": statement.display_name,
            "period": {
                "start": _iso(statement.period_start),
                "end": _iso(statement.period_end),
            },
            "lines": [self._build_line(line) for line in statement.lines],
            "totals": self._build_provider(totals),
            "deposits_held_by_provider": to_money(statement.deposits_held_by_provider),
            "deposits_held_by_agency": to_money(statement.deposits_held_by_agency),
            "amount_pending_to_provider": {
                "value": to_money(pending),
                "description": (
                    f"provider_net ({_fmt(to_money(totals.total_provider_net))}) - "
                    f"deposits held by provider ({_fmt(to_money(statement.deposits_held_by_provider))}) = "
                    f"{_fmt(to_money(pending))}"
                ),
            },
        }

    def _build_totals(self, totals: SettlementTotals) -> dict:
        return {
            "total_bookings": totals.total_bookings,
            "total_gross": to_money(totals.total_gross),
            "total_costs": to_money(totals.total_costs),
            "total_provider_net": to_money(totals.total_provider_net),
            "total_agency_net": to_money(totals.total_agency_net),
            "total_deposits": to_money(totals.total_deposits),
            "booking_ids": list(totals.booking_ids),
        }

    def _build_balances(self, totals: SettlementTotals) -> dict:
        """Build the who-owes-whom section with a description per field."""
        owed_to_provider = to_money(totals.balance_owed_to_provider_by_agency)
        owed_to_agency = to_money(totals.balance_owed_to_agency_by_provider)
        net = to_money(totals.net_balance_to_provider)

        if net > 0:
            net_desc = f"Agency owes the provider {_fmt(net)}"
        elif net < 0:
            net_desc = f"Provider owes the agency {_fmt(-net)}"
        else:
            net_desc = "No balance due between agency and provider"

        return {
            "balance_owed_to_provider_by_agency": {
                "value": owed_to_provider,
                "description": "Provider share of paid bookings whose client payment the agency received",
            },
            "balance_owed_to_agency_by_provider": {
                "value": owed_to_agency,
                "description": "Agency share of paid bookings whose client payment the provider received",
            },
            "pending_provider_share_via_agency": {
                "value": to_money(totals.pending_provider_share_via_agency),
                "description": "Provider share of unpaid bookings payable to the agency (informational)",
            },
            "pending_agency_share_via_provider": {
                "value": to_money(totals.pending_agency_share_via_provider),
                "description": "Agency share of unpaid bookings payable to the provider (informational)",
            },
            "net_balance_to_provider": {
                "value": net,
                "description": f"{_fmt(owed_to_provider)} - {_fmt(owed_to_agency)}: {net_desc}",
            },
        }

    def _build_provider(self, provider: ProviderSummary) -> dict:
        return {
            "provider_id": provider.provider_id,
            "display_name": provider.display_name,
            "color": _build_color(provider.provider_id),
            "events_considered": provider.events_considered,
            **self._build_totals(provider),
            "balances": self._build_balances(provider),
        }

    def _build_line(self, line: SettlementLine) -> dict:
        return {
            "booking_id": line.booking_id,
            "event_date": _iso(line.event_date),
            "gross_amount": to_money(line.gross_amount),
            "costs": to_money(line.costs),
            "percentage": float(line.percentage),
            "percentage_source": line.percentage_source.value,
            "provider_net": to_money(line.provider_net),
            "agency_net": to_money(line.agency_net),
            "payment_status": line.payment_status.value,
        }
