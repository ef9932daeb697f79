"""
Agency Configuration

The agency-wide default share and the policy for bookings without an assigned
provider. Values come from the request payload when present, otherwise from
environment variables.
"""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal

from .models import HUNDRED, ZERO, parse_bool, parse_percentage

logger = logging.getLogger(__name__)

DEFAULT_AGENCY_PERCENTAGE = Decimal("30")


@dataclass(frozen=True)
class AgencyConfig:
    """Configuration Provider values used by the engine."""

    agency_default_percentage: Decimal = DEFAULT_AGENCY_PERCENTAGE
    # Bookings without a provider never appear per provider. This decides
    # whether they still count toward agency-wide totals.
    include_unassigned_in_agency_totals: bool = False

    @classmethod
    def from_dict(cls, data: dict | None, base: "AgencyConfig | None" = None) -> "AgencyConfig":
        """Build config from a payload, falling back to ``base`` for missing keys."""
        base = base or cls()
        data = data or {}

        raw_pct = data.get("agency_default_percentage", data.get("agencyDefaultPercentage"))
        percentage = base.agency_default_percentage
        if raw_pct is not None:
            percentage = parse_percentage(raw_pct)
            if percentage is None or not (ZERO <= percentage <= HUNDRED):
                raise ValueError(
                    f"agency_default_percentage must be between 0 and 100, got: {raw_pct!r}"
                )

        raw_unassigned = data.get(
            "include_unassigned_in_agency_totals", data.get("includeUnassignedInAgencyTotals")
        )
        include_unassigned = base.include_unassigned_in_agency_totals
        if raw_unassigned is not None:
            include_unassigned = parse_bool(raw_unassigned)

        return cls(
            agency_default_percentage=percentage,
            include_unassigned_in_agency_totals=include_unassigned,
        )

    @classmethod
    def from_env(cls) -> "AgencyConfig":
        """Build config from environment variables.

        A malformed ``AGENCY_DEFAULT_PERCENTAGE`` falls back to the 30% default
        so reports can still be produced.
        """
        raw_pct = os.environ.get("AGENCY_DEFAULT_PERCENTAGE")
        percentage = DEFAULT_AGENCY_PERCENTAGE
        if raw_pct:
            parsed = parse_percentage(raw_pct)
            if parsed is not None and ZERO <= parsed <= HUNDRED:
                percentage = parsed
            else:
                logger.warning(
                    f"Invalid AGENCY_DEFAULT_PERCENTAGE {raw_pct!r}, "
                    f"using default {DEFAULT_AGENCY_PERCENTAGE}%"
                )

        include_unassigned = parse_bool(os.environ.get("INCLUDE_UNASSIGNED_IN_AGENCY_TOTALS", "false"))
        return cls(
            agency_default_percentage=percentage,
            include_unassigned_in_agency_totals=include_unassigned,
        )
