"""Tests for wren.errors: exception hierarchy and error messages."""

import pytest

from wren.errors import ConfigurationError, UnknownRuleError, WrenError
from wren.registry import RuleRegistry


class TestHierarchy:
    def test_configuration_error_is_wren_error(self) -> None:
        assert issubclass(ConfigurationError, WrenError)

    def test_unknown_rule_is_configuration_error(self) -> None:
        assert issubclass(UnknownRuleError, ConfigurationError)


class TestUnknownRuleError:
    def test_attributes(self) -> None:
        err = UnknownRuleError("postcode", "zip")
        assert err.rule == "postcode"
        assert err.field == "zip"

    def test_message_with_field(self) -> None:
        err = UnknownRuleError("postcode", "zip")
        assert str(err) == "Unknown validation rule: 'postcode' (field 'zip')"

    def test_message_without_field(self) -> None:
        err = UnknownRuleError("postcode")
        assert str(err) == "Unknown validation rule: 'postcode'"
        assert err.field is None

    def test_raised_by_registry(self) -> None:
        with pytest.raises(UnknownRuleError, match="postcode"):
            RuleRegistry().resolve("postcode")
