"""Tests for wren.options: normalizing declarative validation options."""

import pytest

from wren.deferred import Deferred, Fixed
from wren.errors import ConfigurationError
from wren.options import RuleCall, ValidationOptions, coerce_options


class TestFromDict:
    def test_mapping_rules_keep_order(self) -> None:
        options = ValidationOptions.from_dict(
            {"rules": {"name": {"required": True, "minlength": 2, "maxlength": 10}}}
        )
        assert [call.name for call in options.rules["name"]] == [
            "required",
            "minlength",
            "maxlength",
        ]
        assert options.rules["name"][1] == RuleCall("minlength", Fixed(2))

    def test_pair_list_rules(self) -> None:
        options = ValidationOptions.from_dict(
            {"rules": {"pin": [("digits", True), ("length", 4)]}}
        )
        assert options.rules["pin"] == (
            RuleCall("digits", Fixed(True)),
            RuleCall("length", Fixed(4)),
        )

    def test_bare_rule_names(self) -> None:
        options = ValidationOptions.from_dict({"rules": {"email": ["required", "email"]}})
        assert options.rules["email"] == (RuleCall("required"), RuleCall("email"))
        assert options.rules["email"][0].argument == Fixed(True)

    def test_deferred_argument_kept(self) -> None:
        producer = Deferred(lambda: 3)
        options = ValidationOptions.from_dict({"rules": {"x": {"minlength": producer}}})
        assert options.rules["x"][0].argument is producer

    def test_messages_wrapped(self) -> None:
        later = Deferred(lambda n, value, field: f"{field} needs {n}")
        options = ValidationOptions.from_dict(
            {
                "rules": {"x": {"required": True, "minlength": 3}},
                "messages": {"x": {"required": "Needed", "minlength": later}},
            }
        )
        assert options.messages["x"]["required"] == Fixed("Needed")
        assert options.messages["x"]["minlength"] is later
        assert "maxlength" not in options.messages["x"]
        assert "y" not in options.messages

    def test_empty(self) -> None:
        options = ValidationOptions.from_dict({})
        assert options.rules == {}
        assert options.messages == {}


class TestMalformed:
    def test_unknown_top_level_key(self) -> None:
        with pytest.raises(ConfigurationError, match="rulez"):
            ValidationOptions.from_dict({"rulez": {}})

    def test_rules_not_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match="rules must be a mapping"):
            ValidationOptions.from_dict({"rules": ["x"]})

    def test_field_rules_not_a_collection(self) -> None:
        with pytest.raises(ConfigurationError, match="'x'"):
            ValidationOptions.from_dict({"rules": {"x": "required"}})

    def test_bad_pair(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid rule entry"):
            ValidationOptions.from_dict({"rules": {"x": [("a", 1, 2)]}})

    def test_plain_callable_message_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Deferred"):
            ValidationOptions.from_dict(
                {"rules": {"x": ["required"]}, "messages": {"x": {"required": lambda *a: "x"}}}
            )


class TestCoerce:
    def test_passthrough(self) -> None:
        options = ValidationOptions()
        assert coerce_options(options) is options

    def test_from_plain_dict(self) -> None:
        assert isinstance(coerce_options({"rules": {}}), ValidationOptions)


class TestDeferred:
    def test_fixed_ignores_args(self) -> None:
        assert Fixed("msg").resolve(1, "v", "f") == "msg"

    def test_deferred_receives_args(self) -> None:
        assert Deferred(lambda *args: args).resolve(1, "v", "f") == (1, "v", "f")

    def test_deferred_evaluated_each_time(self) -> None:
        calls = []
        later = Deferred(lambda: calls.append(1) or len(calls))
        assert later.resolve() == 1
        assert later.resolve() == 2
