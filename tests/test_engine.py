"""Tests for wren.engine: ordered, short-circuiting rule evaluation."""

import logging

import pytest

from wren.config import ValidatorConfig
from wren.deferred import Deferred
from wren.engine import FieldOutcome, RuleEngine
from wren.errors import UnknownRuleError
from wren.options import ValidationOptions
from wren.registry import RuleRegistry


def _options(rules: dict, messages: dict | None = None) -> ValidationOptions:
    return ValidationOptions.from_dict({"rules": rules, "messages": messages or {}})


class TestApply:
    def test_first_failure_wins(self) -> None:
        engine = RuleEngine()
        options = _options(
            {"x": {"required": True, "minlength": 5}},
            {"x": {"required": "Required", "minlength": "Too short"}},
        )
        outcome = engine.run(options, {"x": ""})["x"]
        assert outcome == FieldOutcome(
            field="x", valid=False, value="", rule="required", message="Required"
        )

    def test_later_rules_not_evaluated(self) -> None:
        registry = RuleRegistry()
        seen: list[str] = []

        @registry.register("spy")
        def spy(argument, value, context) -> bool:
            seen.append(value)
            return True

        options = _options({"x": [("required", True), ("spy", None)]})
        RuleEngine(registry).run(options, {"x": ""})
        assert seen == []

    def test_all_rules_pass(self) -> None:
        outcome = RuleEngine().run(_options({"x": {"minlength": 3}}), {"x": "abc"})["x"]
        assert outcome.valid
        assert outcome.value == "abc"
        assert outcome.message is None

    def test_missing_field_is_empty_string(self) -> None:
        registry = RuleRegistry()
        seen: list[object] = []

        @registry.register("spy")
        def spy(argument, value, context) -> bool:
            seen.append(value)
            return True

        RuleEngine(registry).run(_options({"ghost": {"spy": None}}), {})
        assert seen == [""]

    def test_fields_driven_by_options(self) -> None:
        outcomes = RuleEngine().run(_options({"b": {"required": True}, "a": {}}), {"c": "x"})
        assert list(outcomes) == ["b", "a"]
        assert not outcomes["b"].valid
        assert outcomes["a"].valid

    def test_non_bool_result_is_failure(self) -> None:
        registry = RuleRegistry({"truthy": lambda argument, value, context: "yes"})
        outcome = RuleEngine(registry).run(_options({"x": ["truthy"]}), {"x": "v"})["x"]
        assert not outcome.valid


class TestArguments:
    def test_deferred_argument_resolved_at_validation(self) -> None:
        limit = {"n": 2}
        options = _options({"x": {"maxlength": Deferred(lambda: limit["n"])}})
        engine = RuleEngine()

        assert engine.run(options, {"x": "abc"})["x"].valid is False
        limit["n"] = 5
        assert engine.run(options, {"x": "abc"})["x"].valid is True

    def test_rule_sees_context(self) -> None:
        registry = RuleRegistry()
        contexts = []

        @registry.register("spy")
        def spy(argument, value, context) -> bool:
            contexts.append(context)
            return True

        data = {"x": "1", "y": "2"}
        RuleEngine(registry).run(_options({"x": {"spy": "arg"}}), data)
        assert contexts[0].field == "x"
        assert contexts[0].data is data


class TestMessages:
    def test_deferred_message_receives_argument_value_field(self) -> None:
        options = _options(
            {"name": {"minlength": 3}},
            {"name": {"minlength": Deferred(lambda n, value, field: f"{field}: {value!r} < {n}")}},
        )
        outcome = RuleEngine().run(options, {"name": "ab"})["name"]
        assert outcome.message == "name: 'ab' < 3"

    def test_deferred_message_gets_resolved_argument(self) -> None:
        options = _options(
            {"name": {"minlength": Deferred(lambda: 4)}},
            {"name": {"minlength": Deferred(lambda n, value, field: f"min {n}")}},
        )
        assert RuleEngine().run(options, {"name": "ab"})["name"].message == "min 4"

    def test_missing_message_uses_config_default(self) -> None:
        outcome = RuleEngine().run(_options({"x": {"required": True}}), {})["x"]
        assert outcome.message == "This field is required"

    def test_missing_message_for_custom_rule(self) -> None:
        registry = RuleRegistry({"never": lambda argument, value, context: False})
        config = ValidatorConfig(fallback_message="Nope")
        outcome = RuleEngine(registry, config).run(_options({"x": ["never"]}), {})["x"]
        assert outcome.message == "Nope"


class TestUnknownRule:
    def test_raised_before_any_rule_runs(self) -> None:
        registry = RuleRegistry()
        seen: list[str] = []

        @registry.register("spy")
        def spy(argument, value, context) -> bool:
            seen.append(context.field)
            return False

        options = _options({"a": {"spy": None}, "b": {"bogus": None}})
        with pytest.raises(UnknownRuleError) as exc_info:
            RuleEngine(registry).run(options, {})
        assert exc_info.value.rule == "bogus"
        assert exc_info.value.field == "b"
        assert seen == []

    def test_check(self) -> None:
        with pytest.raises(UnknownRuleError):
            RuleEngine().check(_options({"a": {"bogus": 1}}))


class TestLogging:
    def test_failures_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="wren.engine"):
            RuleEngine().run(_options({"x": {"required": True}}), {})
        assert "Field 'x' failed rule 'required'" in caplog.text
        assert "1 failed: x" in caplog.text
