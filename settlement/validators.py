"""
Request Validation for the Settlement Engine

Validates the shape of a request before processing begins.
Raises ValueError with clear messages for any constraint violations.

Booking and provider contents are never rejected here: malformed financial
values degrade to documented fallbacks during normalization.
"""

from .requests import SettlementRequest


class RequestValidator:
    """Validates settlement requests."""

    def validate_payload(self, data) -> None:
        """
        Check the raw payload structure. Raises ValueError if any check fails.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Request body must be a JSON object, got: {type(data).__name__}")

        for key in ("bookings", "providers"):
            value = data.get(key, [])
            if not isinstance(value, list):
                raise ValueError(f"{key} must be a list, got: {type(value).__name__}")
            for i, item in enumerate(value):
                if not isinstance(item, dict):
                    raise ValueError(f"{key}[{i}] must be an object, got: {type(item).__name__}")

        period = data.get("period")
        if period is not None and not isinstance(period, dict):
            raise ValueError(f"period must be an object, got: {type(period).__name__}")

        config = data.get("config")
        if config is not None and not isinstance(config, dict):
            raise ValueError(f"config must be an object, got: {type(config).__name__}")

    def validate(self, request: SettlementRequest) -> None:
        """Check request-level constraints after parsing."""
        if request.period_start and request.period_end and request.period_start > request.period_end:
            raise ValueError(
                f"period start ({request.period_start}) must not be after period end ({request.period_end})"
            )

    def validate_closing(self, request: SettlementRequest) -> None:
        self.validate(request)
        if request.provider_id is None:
            raise ValueError("provider_id is required for a closing statement")
