"""
Unit Tests for Closing Statement Builder
"""

import pytest
from datetime import date
from decimal import Decimal
from settlement.closing import ClosingStatementBuilder
from settlement.config import AgencyConfig
from settlement.models import Booking, PaymentStatus, PercentageSource, Provider, Recipient


JAN_1 = date(2025, 1, 1)
JAN_31 = date(2025, 1, 31)


class TestClosingStatement:
    """Test the per-provider period closing."""

    @pytest.fixture
    def builder(self):
        return ClosingStatementBuilder()

    @pytest.fixture
    def providers(self):
        return [Provider(id="dj-1", display_name="DJ One", default_split_percentage=Decimal('70'))]

    @pytest.fixture
    def bookings(self):
        return [
            Booking(
                id="late", gross_amount=Decimal('2000'), provider_id="dj-1", event_date=date(2025, 1, 20),
                percentage_override=Decimal('80'), deposit_amount=Decimal('500'),
                deposit_recipient=Recipient.PROVIDER, payment_status=PaymentStatus.PARTIAL,
            ),
            Booking(
                id="early", gross_amount=Decimal('1000'), costs=Decimal('100'), provider_id="dj-1",
                event_date=date(2025, 1, 5), deposit_amount=Decimal('300'),
                deposit_recipient=Recipient.AGENCY, payment_status=PaymentStatus.PAID,
                payment_recipient=Recipient.AGENCY,
            ),
            Booking(id="other-dj", gross_amount=Decimal('900'), provider_id="dj-2", event_date=date(2025, 1, 10)),
            Booking(id="deleted", gross_amount=Decimal('900'), provider_id="dj-1", event_date=date(2025, 1, 10), is_deleted=True),
            Booking(id="february", gross_amount=Decimal('900'), provider_id="dj-1", event_date=date(2025, 2, 10)),
        ]

    def test_lines_sorted_by_date(self, builder, bookings, providers):
        statement = builder.build(bookings, "dj-1", JAN_1, JAN_31, providers)

        assert [line.booking_id for line in statement.lines] == ["early", "late"]
        assert statement.display_name == "DJ One"

    def test_line_values(self, builder, bookings, providers):
        statement = builder.build(bookings, "dj-1", JAN_1, JAN_31, providers)
        early, late = statement.lines

        assert early.percentage == Decimal('70')
        assert early.percentage_source == PercentageSource.PROVIDER_DEFAULT
        assert early.provider_net == Decimal('730')
        assert early.agency_net == Decimal('270')
        assert late.percentage == Decimal('80')
        assert late.percentage_source == PercentageSource.OVERRIDE
        assert late.provider_net == Decimal('1600')

    def test_totals_match_lines(self, builder, bookings, providers):
        statement = builder.build(bookings, "dj-1", JAN_1, JAN_31, providers)

        assert statement.totals.events_considered == 2
        assert statement.totals.total_gross == Decimal('3000')
        assert statement.totals.total_provider_net == sum(line.provider_net for line in statement.lines)
        assert statement.totals.booking_ids == ["early", "late"]
        assert statement.totals.balance_owed_to_provider_by_agency == Decimal('730')

    def test_deposits_and_pending(self, builder, bookings, providers):
        """Pending to provider = provider net - deposits the provider already holds."""
        statement = builder.build(bookings, "dj-1", JAN_1, JAN_31, providers)

        assert statement.deposits_held_by_provider == Decimal('500')
        assert statement.deposits_held_by_agency == Decimal('300')
        assert statement.amount_pending_to_provider == Decimal('2330') - Decimal('500')

    def test_empty_period(self, builder, bookings, providers):
        statement = builder.build(bookings, "dj-1", date(2024, 1, 1), date(2024, 1, 31), providers)

        assert statement.lines == []
        assert statement.totals.provider_id == "dj-1"
        assert statement.totals.events_considered == 0
        assert statement.amount_pending_to_provider == Decimal('0')

    def test_config_fallback_for_unknown_provider(self, builder, bookings):
        config = AgencyConfig(agency_default_percentage=Decimal('40'))
        statement = builder.build(bookings, "dj-2", JAN_1, JAN_31, None, config)

        assert statement.display_name == "dj-2"
        assert statement.lines[0].percentage == Decimal('60')
        assert statement.lines[0].percentage_source == PercentageSource.AGENCY_FALLBACK
        assert statement.lines[0].provider_net == Decimal('540')
