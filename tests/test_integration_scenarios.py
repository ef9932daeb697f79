"""
Integration Test Scenarios for the Settlement Engine

End-to-end scenarios from raw payloads through the processor, covering the
business rules agency staff rely on for monthly closings.

Run with: python -m pytest tests/test_integration_scenarios.py -v
"""


import pytest

from settlement import SettlementProcessor


def payload(bookings, providers=None, agency_default_percentage=30, **extra):
    data = {
        "config": {"agency_default_percentage": agency_default_percentage},
        "providers": providers or [],
        "bookings": bookings,
    }
    data.update(extra)
    return data


class TestPercentagePrecedence:
    """Booking override > provider default > agency complement."""

    @pytest.fixture
    def processor(self):
        return SettlementProcessor()

    @pytest.mark.parametrize("override,provider_default,expected_pct", [
        (80, 60, 80.0),
        (None, 60, 60.0),
        (None, None, 70.0),
    ])
    def test_precedence_chain(self, processor, override, provider_default, expected_pct):
        booking = {"id": "b1", "gross_amount": 1000, "percentage_override": override}
        provider = {"id": "dj-1", "default_split_percentage": provider_default}
        result = processor.settle_from_dict({
            "booking": booking,
            "provider": provider,
            "config": {"agency_default_percentage": 30},
        })

        assert result["percentage"] == expected_pct
        assert result["provider_net"] == expected_pct * 10


class TestPaidBookingScenarios:
    """Who owes whom once the client has paid."""

    @pytest.fixture
    def processor(self):
        return SettlementProcessor()

    @pytest.fixture
    def providers(self):
        return [{"id": "dj-1", "display_name": "DJ One", "default_split_percentage": 70}]

    def test_client_paid_agency(self, processor, providers):
        """Agency holds the money: owes the provider 730."""
        result = processor.summarize_from_dict(payload(
            [{"id": "b1", "gross_amount": 1000, "costs": 100, "percentage_override": None,
              "payment_status": "paid", "payment_recipient": "agency", "provider_id": "dj-1"}],
            providers,
        ))

        assert result["total_provider_net"] == 730.0
        assert result["total_agency_net"] == 270.0
        assert result["balances"]["balance_owed_to_provider_by_agency"]["value"] == 730.0
        assert result["balances"]["balance_owed_to_agency_by_provider"]["value"] == 0.0

    def test_client_paid_provider(self, processor, providers):
        """Provider holds the money: owes the agency its 270 share."""
        result = processor.summarize_from_dict(payload(
            [{"id": "b1", "gross_amount": 1000, "costs": 100,
              "payment_status": "paid", "payment_recipient": "provider", "provider_id": "dj-1"}],
            providers,
        ))

        assert result["balances"]["balance_owed_to_agency_by_provider"]["value"] == 270.0
        assert result["balances"]["balance_owed_to_provider_by_agency"]["value"] == 0.0

    def test_deposit_recipient_stands_in_for_payment_recipient(self, processor, providers):
        """Legacy records only note where the deposit went."""
        result = processor.summarize_from_dict(payload(
            [{"id": "b1", "gross_amount": 1000, "costs": 100, "deposit_amount": 300,
              "deposit_recipient": "dj_account", "payment_status": "paid", "provider_id": "dj-1"}],
            providers,
        ))

        assert result["balances"]["balance_owed_to_agency_by_provider"]["value"] == 270.0

    def test_overdue_is_pending_not_owed(self, processor, providers):
        result = processor.summarize_from_dict(payload(
            [{"id": "b1", "gross_amount": 1000, "payment_status": "overdue",
              "payment_recipient": "agency", "provider_id": "dj-1"}],
            providers,
        ))

        assert result["balances"]["pending_provider_share_via_agency"]["value"] == 700.0
        assert result["balances"]["balance_owed_to_provider_by_agency"]["value"] == 0.0


class TestExclusionScenarios:
    """Deleted and cancelled bookings never reach a report."""

    @pytest.fixture
    def processor(self):
        return SettlementProcessor()

    @pytest.mark.parametrize("extra", [
        {"is_deleted": True},
        {"payment_status": "cancelled"},
        {"event_status": "cancelado", "payment_status": "paid"},
    ])
    def test_excluded_everywhere(self, processor, extra):
        booking = {"id": "gone", "gross_amount": 9999, "provider_id": "dj-1",
                   "event_date": "2025-01-10", "payment_recipient": "agency", **extra}
        for scope in ({}, {"provider_id": "dj-1"}, {"period": {"start": "2025-01-01", "end": "2025-01-31"}}):
            result = processor.summarize_from_dict(payload([booking], **scope))
            assert result["total_bookings"] == 0
            assert result["total_gross"] == 0.0


class TestPathologicalInputs:
    """Reports are produced even from bad data."""

    @pytest.fixture
    def processor(self):
        return SettlementProcessor()

    def test_costs_exceed_gross(self, processor):
        result = processor.settle_from_dict({
            "booking": {"id": "b1", "gross_amount": 100, "costs": 150},
            "config": {"agency_default_percentage": 30},
        })

        assert result["provider_net"] == 100.0
        assert result["agency_net"] == 0.0

    def test_string_percentages_and_amounts(self, processor):
        result = processor.summarize_from_dict(payload(
            [{"id": "b1", "gross_amount": "1500,00", "provider_id": "dj-1"}],
            [{"id": "dj-1", "default_split_percentage": "65"}],
        ))

        assert result["total_gross"] == 1500.0
        assert result["total_provider_net"] == 975.0


class TestUnassignedPolicy:
    """Unassigned bookings follow the configured policy."""

    @pytest.fixture
    def processor(self):
        return SettlementProcessor()

    def test_policy_toggle(self, processor):
        bookings = [
            {"id": "b1", "gross_amount": 1000, "provider_id": "dj-1"},
            {"id": "b2", "gross_amount": 500},
        ]
        off = processor.summarize_from_dict(payload(bookings))
        on = processor.summarize_from_dict({
            "config": {"agency_default_percentage": 30, "include_unassigned_in_agency_totals": True},
            "bookings": bookings,
        })

        assert off["total_gross"] == 1000.0
        assert on["total_gross"] == 1500.0
        assert [p["provider_id"] for p in on["providers"]] == ["dj-1"]
