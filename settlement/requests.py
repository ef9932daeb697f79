"""
Request model for the settlement processor.

Collects everything a caller must fetch up front (bookings, providers,
configuration) so the engine works on one consistent snapshot.
"""

from dataclasses import dataclass, field
from datetime import date

from .config import AgencyConfig
from .models import Booking, Provider, parse_date
from .periods import month_period


def _parse_period_bound(value, name: str) -> date | None:
    if value is None or value == "":
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got: {value!r}")
    return parsed


@dataclass
class SettlementRequest:
    """Complete input for a summary or closing computation."""

    bookings: list[Booking] = field(default_factory=list)
    providers: list[Provider] = field(default_factory=list)
    period_start: date | None = None
    period_end: date | None = None
    provider_id: str | None = None
    config: AgencyConfig = field(default_factory=AgencyConfig)

    @classmethod
    def from_dict(cls, data: dict, base_config: AgencyConfig | None = None) -> "SettlementRequest":
        period = data.get("period") or {}
        if "year" in period and "month" in period:
            period_start, period_end = month_period(int(period["year"]), int(period["month"]))
        else:
            period_start = _parse_period_bound(
                period.get("start", data.get("period_start")), "period start"
            )
            period_end = _parse_period_bound(
                period.get("end", data.get("period_end")), "period end"
            )

        provider_id = data.get("provider_id", data.get("providerId"))
        return cls(
            bookings=[Booking.from_dict(b) for b in data.get("bookings", [])],
            providers=[Provider.from_dict(p) for p in data.get("providers", [])],
            period_start=period_start,
            period_end=period_end,
            provider_id=str(provider_id) if provider_id not in (None, "") else None,
            config=AgencyConfig.from_dict(data.get("config"), base=base_config),
        )
