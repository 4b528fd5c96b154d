"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    PlanetCalmError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
)


class TestPlanetCalmError:
    def test_message(self):
        """PlanetCalmError should store message."""
        error = PlanetCalmError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """PlanetCalmError should default code to class name."""
        error = PlanetCalmError("Test error")
        assert error.code == "PlanetCalmError"

    def test_custom_code(self):
        error = PlanetCalmError("Test error", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_default_details(self):
        error = PlanetCalmError("Test error")
        assert error.details == {}

    def test_to_dict(self):
        """PlanetCalmError should convert to dict."""
        error = PlanetCalmError("Test error", code="TEST_ERROR", details={"key": "value"})
        result = error.to_dict()

        assert result == {
            "error": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
        }


class TestSubclasses:
    @pytest.mark.parametrize("cls", [NotFoundError, ValidationError, AuthenticationError, ConflictError])
    def test_inherit_base(self, cls):
        error = cls("Something went wrong")
        assert isinstance(error, PlanetCalmError)
        assert error.code == cls.__name__

    def test_validation_error_with_details(self):
        """ValidationError should support field-level details."""
        error = ValidationError(
            "Validation failed",
            details={"fields": [{"field": "email", "message": "Invalid format"}]},
        )
        assert error.details["fields"][0]["field"] == "email"


class TestExternalServiceError:
    def test_stores_service(self):
        error = ExternalServiceError("Connection failed", service="mapbox")
        assert isinstance(error, PlanetCalmError)
        assert error.service == "mapbox"

    def test_includes_service_in_details(self):
        error = ExternalServiceError("Connection failed", service="mapbox", details={"status_code": 500})
        result = error.to_dict()

        assert result["details"]["service"] == "mapbox"
        assert result["details"]["status_code"] == 500
