"""Tests for agency configuration loading."""

import pytest
from decimal import Decimal
from settlement.config import DEFAULT_AGENCY_PERCENTAGE, AgencyConfig


class TestFromEnv:
    """Configuration from environment variables."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("AGENCY_DEFAULT_PERCENTAGE", raising=False)
        monkeypatch.delenv("INCLUDE_UNASSIGNED_IN_AGENCY_TOTALS", raising=False)

        config = AgencyConfig.from_env()

        assert config.agency_default_percentage == DEFAULT_AGENCY_PERCENTAGE == Decimal('30')
        assert config.include_unassigned_in_agency_totals is False

    def test_values_from_env(self, monkeypatch):
        monkeypatch.setenv("AGENCY_DEFAULT_PERCENTAGE", "25")
        monkeypatch.setenv("INCLUDE_UNASSIGNED_IN_AGENCY_TOTALS", "true")

        config = AgencyConfig.from_env()

        assert config.agency_default_percentage == Decimal('25')
        assert config.include_unassigned_in_agency_totals is True

    @pytest.mark.parametrize("raw", ["abc", "150", "-1"])
    def test_invalid_percentage_falls_back(self, monkeypatch, raw):
        """Reports must still be produced with a bad environment value."""
        monkeypatch.setenv("AGENCY_DEFAULT_PERCENTAGE", raw)

        assert AgencyConfig.from_env().agency_default_percentage == Decimal('30')


class TestFromDict:
    """Configuration from request payloads."""

    def test_overrides_base(self):
        base = AgencyConfig(agency_default_percentage=Decimal('20'), include_unassigned_in_agency_totals=True)
        config = AgencyConfig.from_dict({"agency_default_percentage": "35"}, base=base)

        assert config.agency_default_percentage == Decimal('35')
        assert config.include_unassigned_in_agency_totals is True

    def test_empty_payload_keeps_base(self):
        base = AgencyConfig(agency_default_percentage=Decimal('20'))
        assert AgencyConfig.from_dict(None, base=base) == base

    def test_camel_case(self):
        config = AgencyConfig.from_dict({"agencyDefaultPercentage": 40, "includeUnassignedInAgencyTotals": True})

        assert config.agency_default_percentage == Decimal('40')
        assert config.include_unassigned_in_agency_totals is True

    @pytest.mark.parametrize("raw", ["abc", 101, -5])
    def test_invalid_percentage_rejected(self, raw):
        with pytest.raises(ValueError, match="agency_default_percentage"):
            AgencyConfig.from_dict({"agency_default_percentage": raw})
