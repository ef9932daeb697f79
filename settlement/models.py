"""
Domain Models for the Settlement Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values and percentages use Decimal for precision.

Raw records coming from the Event Store and Provider Directory are loosely
typed (percentages as strings, missing amounts, legacy flags). The
``from_dict`` constructors are the single place where that input is
normalized; everything downstream only sees the strict records below.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# =============================================================================
# ENUMS
# =============================================================================


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Recipient(str, Enum):
    """Who received a client payment (deposit or full amount)."""

    AGENCY = "agency"
    PROVIDER = "provider"


class BookingLifecycleState(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    DELETED = "deleted"


class PercentageSource(str, Enum):
    """Which precedence level produced a resolved percentage."""

    OVERRIDE = "override"
    PROVIDER_DEFAULT = "provider_default"
    AGENCY_FALLBACK = "agency_fallback"


# =============================================================================
# RAW VALUE PARSING
# =============================================================================

_CANCELLED_EVENT_STATUSES = {"cancelled", "canceled", "cancelado"}
_PROVIDER_RECIPIENTS = {"provider", "dj", "dj_account"}


def _pick(data: dict, *keys, default=None):
    """Return the first present, non-None value among ``keys``."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def parse_decimal(value) -> Decimal | None:
    """Parse a number or numeric string into a finite Decimal, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_amount(value, field_name: str = "amount") -> Decimal:
    """Parse a currency amount. Missing or malformed → 0, negative → 0."""
    if value is None:
        return ZERO
    parsed = parse_decimal(value)
    if parsed is None:
        logger.warning(f"Malformed {field_name} {value!r}, treating as 0")
        return ZERO
    if parsed < 0:
        logger.warning(f"Negative {field_name} {parsed}, clamping to 0")
        return ZERO
    return parsed


def parse_percentage(value) -> Decimal | None:
    """Parse a stored percentage. Range is checked by the resolver."""
    return parse_decimal(value)


def parse_date(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def parse_recipient(value) -> Recipient | None:
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    if value == Recipient.AGENCY.value:
        return Recipient.AGENCY
    if value in _PROVIDER_RECIPIENTS:
        return Recipient.PROVIDER
    return None


def parse_payment_status(value) -> PaymentStatus:
    if isinstance(value, PaymentStatus):
        return value
    if value is None:
        return PaymentStatus.PENDING
    try:
        return PaymentStatus(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown payment status {value!r}, treating as pending")
        return PaymentStatus.PENDING


def parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class Provider:
    """A service provider (DJ) from the Provider Directory."""

    id: str
    display_name: str = ""
    default_split_percentage: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Provider":
        raw_id = _pick(data, "id", "provider_id", "providerId")
        if raw_id is None:
            raise ValueError(f"Provider record is missing 'id': {data}")
        provider_id = str(raw_id)
        return cls(
            id=provider_id,
            display_name=str(_pick(data, "display_name", "displayName", "name", default=provider_id)),
            default_split_percentage=parse_percentage(
                _pick(data, "default_split_percentage", "defaultSplitPercentage")
            ),
        )


@dataclass(frozen=True)
class Booking:
    """A scheduled client engagement (event) with an agreed gross price."""

    id: str
    gross_amount: Decimal = ZERO
    costs: Decimal = ZERO
    payment_status: PaymentStatus = PaymentStatus.PENDING
    provider_id: str | None = None
    event_date: date | None = None
    is_deleted: bool = False
    percentage_override: Decimal | None = None
    deposit_amount: Decimal = ZERO
    deposit_recipient: Recipient | None = None
    payment_recipient: Recipient | None = None

    @property
    def lifecycle_state(self) -> BookingLifecycleState:
        if self.is_deleted:
            return BookingLifecycleState.DELETED
        if self.payment_status == PaymentStatus.CANCELLED:
            return BookingLifecycleState.CANCELLED
        return BookingLifecycleState.ACTIVE

    @property
    def recipient(self) -> Recipient | None:
        """Actual recipient of the client's full payment.

        Falls back to the deposit recipient when the full-payment recipient
        was never recorded.
        """
        return self.payment_recipient or self.deposit_recipient

    @classmethod
    def from_dict(cls, data: dict) -> "Booking":
        status = parse_payment_status(_pick(data, "payment_status", "paymentStatus"))
        event_status = _pick(data, "event_status", "eventStatus")
        # Legacy records mark cancellation on the event rather than the payment
        if isinstance(event_status, str) and event_status.strip().lower() in _CANCELLED_EVENT_STATUSES:
            status = PaymentStatus.CANCELLED

        provider_id = _pick(data, "provider_id", "providerId")
        return cls(
            id=str(_pick(data, "id", "booking_id", "bookingId", default="")),
            gross_amount=parse_amount(_pick(data, "gross_amount", "grossAmount"), "gross_amount"),
            costs=parse_amount(_pick(data, "costs"), "costs"),
            payment_status=status,
            provider_id=str(provider_id) if provider_id not in (None, "") else None,
            event_date=parse_date(_pick(data, "event_date", "eventDate")),
            is_deleted=parse_bool(_pick(data, "is_deleted", "isDeleted", default=False)),
            percentage_override=parse_percentage(_pick(data, "percentage_override", "percentageOverride")),
            deposit_amount=parse_amount(_pick(data, "deposit_amount", "depositAmount"), "deposit_amount"),
            deposit_recipient=parse_recipient(_pick(data, "deposit_recipient", "depositRecipient")),
            payment_recipient=parse_recipient(_pick(data, "payment_recipient", "paymentRecipient")),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class SettlementResult:
    """Provider and agency shares of one booking's gross amount."""

    provider_net: Decimal = ZERO
    agency_net: Decimal = ZERO


@dataclass
class SettlementTotals:
    """Accumulated settlement figures over a set of bookings."""

    total_bookings: int = 0
    total_gross: Decimal = ZERO
    total_costs: Decimal = ZERO
    total_provider_net: Decimal = ZERO
    total_agency_net: Decimal = ZERO
    total_deposits: Decimal = ZERO
    balance_owed_to_provider_by_agency: Decimal = ZERO
    balance_owed_to_agency_by_provider: Decimal = ZERO
    # Informational only, not a due balance
    pending_provider_share_via_agency: Decimal = ZERO
    pending_agency_share_via_provider: Decimal = ZERO
    booking_ids: list[str] = field(default_factory=list)

    @property
    def net_balance_to_provider(self) -> Decimal:
        """Positive: the agency owes the provider. Negative: the reverse."""
        return self.balance_owed_to_provider_by_agency - self.balance_owed_to_agency_by_provider


@dataclass
class ProviderSummary(SettlementTotals):
    """Settlement totals scoped to one provider."""

    provider_id: str = ""
    display_name: str = ""

    @property
    def events_considered(self) -> int:
        return self.total_bookings


@dataclass
class Summary(SettlementTotals):
    """Agency-wide settlement totals with a per-provider breakdown."""

    period_start: date | None = None
    period_end: date | None = None
    provider_filter: str | None = None
    providers: list[ProviderSummary] = field(default_factory=list)


@dataclass(frozen=True)
class SettlementLine:
    """One booking's settlement as listed in a closing statement."""

    booking_id: str
    event_date: date | None
    gross_amount: Decimal
    costs: Decimal
    percentage: Decimal
    percentage_source: PercentageSource
    provider_net: Decimal
    agency_net: Decimal
    payment_status: PaymentStatus


@dataclass
class ClosingStatement:
    """Period closing for one provider."""

    provider_id: str
    display_name: str
    period_start: date | None
    period_end: date | None
    lines: list[SettlementLine] = field(default_factory=list)
    totals: ProviderSummary = field(default_factory=ProviderSummary)
    deposits_held_by_provider: Decimal = ZERO
    deposits_held_by_agency: Decimal = ZERO

    @property
    def amount_pending_to_provider(self) -> Decimal:
        """Provider net still to be paid after deposits the provider holds."""
        return self.totals.total_provider_net - self.deposits_held_by_provider
