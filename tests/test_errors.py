"""Tests for amphitheatre error classes.

Tests cover:
- Error hierarchy
- ValidationError doubling as ValueError
- Exceptions can be raised and caught
"""

import pytest
from amphitheatre.errors import AmphitheatreError, ConfigError, ManifestError, ValidationError


class TestAmphitheatreError:
    """Tests for base AmphitheatreError."""

    def test_is_exception(self):
        assert issubclass(AmphitheatreError, Exception)

    def test_has_message(self):
        error = AmphitheatreError("my message")
        assert str(error) == "my message"


class TestValidationError:
    """Tests for ValidationError."""

    def test_is_amphitheatre_error(self):
        assert issubclass(ValidationError, AmphitheatreError)

    def test_is_value_error(self):
        """Callers catching ValueError also catch schema failures."""
        assert issubclass(ValidationError, ValueError)

    def test_can_be_caught_as_amphitheatre_error(self):
        with pytest.raises(AmphitheatreError):
            raise ValidationError("missing commit")


class TestManifestAndConfigErrors:
    """Tests for ManifestError and ConfigError."""

    @pytest.mark.parametrize("error_class", [ManifestError, ConfigError])
    def test_is_amphitheatre_error(self, error_class):
        assert issubclass(error_class, AmphitheatreError)

    @pytest.mark.parametrize("error_class", [ManifestError, ConfigError])
    def test_is_not_validation_error(self, error_class):
        assert not issubclass(error_class, ValidationError)
