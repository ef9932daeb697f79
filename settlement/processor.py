"""
Settlement Processor - Main Orchestrator

Coordinates a settlement request through discrete, testable steps.
"""

import json
import logging
from typing import Any, Dict

from .aggregator import Aggregator, as_provider_lookup
from .closing import ClosingStatementBuilder
from .config import AgencyConfig
from .models import Booking, Provider, Summary
from .output import OutputBuilder
from .requests import SettlementRequest
from .validators import RequestValidator

logger = logging.getLogger(__name__)


class SettlementProcessor:
    """
    Main orchestrator for settlement requests.

    Implements a clear pipeline pattern:
    1. Validate payload shape
    2. Normalize raw records into a SettlementRequest
    3. Validate request constraints
    4. Filter, resolve, settle and fold bookings (Aggregator)
    5. Build output

    The processor holds no per-request state; one instance can be shared.
    """

    def __init__(self, config: AgencyConfig | None = None):
        self.config = config or AgencyConfig()
        self.validator = RequestValidator()
        self.aggregator = Aggregator()
        self.closing_builder = ClosingStatementBuilder(self.aggregator)
        self.output_builder = OutputBuilder()

    def summarize(self, request: SettlementRequest) -> Summary:
        """Summarize a parsed request."""
        self.validator.validate(request)
        return self.aggregator.summarize(
            request.bookings,
            period_start=request.period_start,
            period_end=request.period_end,
            provider_filter=request.provider_id,
            provider_lookup=request.providers,
            agency_default_percentage=request.config.agency_default_percentage,
            include_unassigned_in_agency_totals=request.config.include_unassigned_in_agency_totals,
        )

    def summarize_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Summarize from raw dictionary input.

        Convenience method for API usage.
        """
        request = self._parse(data)
        summary = self.summarize(request)
        logger.info(
            f"Summarized {summary.total_bookings} of {len(request.bookings)} bookings "
            f"across {len(summary.providers)} providers"
        )
        return self.output_builder.build_summary(summary)

    def closing_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Build a provider closing statement from raw dictionary input."""
        request = self._parse(data)
        self.validator.validate_closing(request)
        statement = self.closing_builder.build(
            request.bookings,
            request.provider_id,
            period_start=request.period_start,
            period_end=request.period_end,
            provider_lookup=request.providers,
            config=request.config,
        )
        logger.info(f"Closing for provider {request.provider_id}: {len(statement.lines)} bookings")
        return self.output_builder.build_closing(statement)

    def settle_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Settle a single booking: {"booking": {...}, "provider": {...}, "config": {...}}."""
        if not isinstance(data, dict) or not isinstance(data.get("booking"), dict):
            raise ValueError("booking object is required")
        provider_data = data.get("provider")
        if provider_data is not None and not isinstance(provider_data, dict):
            raise ValueError(f"provider must be an object, got: {type(provider_data).__name__}")

        booking = Booking.from_dict(data["booking"])
        provider = Provider.from_dict(provider_data) if provider_data else None
        config = AgencyConfig.from_dict(data.get("config"), base=self.config)

        percentage, source, result = self.aggregator.settle_booking(
            booking, provider, config.agency_default_percentage
        )
        return self.output_builder.build_settlement(
            booking.id, booking.gross_amount, percentage, source, result
        )

    def _parse(self, data: Dict[str, Any]) -> SettlementRequest:
        self.validator.validate_payload(data)
        return SettlementRequest.from_dict(data, base_config=self.config)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_default_aggregator = Aggregator()


def resolve(booking, provider, agency_default_percentage):
    """Resolve the provider split percentage for one booking."""
    return _default_aggregator.resolver.resolve(booking, provider, agency_default_percentage)


def compute_settlement(booking, percentage):
    """Split one booking's gross amount at the given provider percentage."""
    return _default_aggregator.calculator.compute(booking, percentage)


def summarize(
    bookings,
    period_start=None,
    period_end=None,
    provider_filter=None,
    provider_lookup=None,
    agency_default_percentage=None,
    include_unassigned_in_agency_totals=False,
) -> Summary:
    """Summarize bookings over a period, optionally for one provider."""
    if agency_default_percentage is None:
        agency_default_percentage = AgencyConfig().agency_default_percentage
    return _default_aggregator.summarize(
        bookings,
        period_start=period_start,
        period_end=period_end,
        provider_filter=provider_filter,
        provider_lookup=as_provider_lookup(provider_lookup),
        agency_default_percentage=agency_default_percentage,
        include_unassigned_in_agency_totals=include_unassigned_in_agency_totals,
    )


def summarize_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Summarize from a Python dict using environment configuration."""
    processor = SettlementProcessor(AgencyConfig.from_env())
    return processor.summarize_from_dict(input_data)


def summarize_from_json(json_input: str) -> str:
    """
    Summarize from JSON string input and return JSON string output.
    """
    try:
        input_data = json.loads(json_input)
        result = summarize_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        logger.error(f"Summary failed: {str(e)}", exc_info=True)
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
