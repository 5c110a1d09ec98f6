"""Validation options: the declarative contract for one form.

Options are usually written as a plain nested dict::

    {
        "rules": {
            "email": {"required": True, "email": True},
            "password": [("required", True), ("minlength", 8)],
        },
        "messages": {
            "email": {"required": "Enter your email", "email": "Not an email"},
        },
    }

``ValidationOptions.from_dict()`` normalizes that into frozen tuples of
``RuleCall`` with every argument and message wrapped in ``Fixed`` or
``Deferred``.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from wren.deferred import Deferred, Fixed, Resolvable, as_resolvable
from wren.errors import ConfigurationError

type MessageSpec = Fixed[str] | Deferred[str]


@dataclass(frozen=True, slots=True)
class RuleCall:
    """One ``(rule name, argument)`` pair in a field's rule list."""

    name: str
    argument: Resolvable[Any] = Fixed(True)


@dataclass(frozen=True, slots=True)
class ValidationOptions:
    """Rules per field, in execution order, plus messages per field and rule."""

    rules: Mapping[str, tuple[RuleCall, ...]] = field(default_factory=dict)
    messages: Mapping[str, Mapping[str, MessageSpec]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "ValidationOptions":
        """Build options from ``{"rules": ..., "messages": ...}``.

        Raises:
            ConfigurationError: If the structure is malformed.
        """
        unknown = set(options) - {"rules", "messages"}
        if unknown:
            msg = f"Unknown option keys: {', '.join(sorted(unknown))}"
            raise ConfigurationError(msg)

        rules = {
            field_name: _rule_calls(field_name, spec)
            for field_name, spec in _mapping(options.get("rules", {}), "rules").items()
        }
        messages = {
            field_name: {
                rule: _message(field_name, rule, message)
                for rule, message in _mapping(by_rule, f"messages[{field_name!r}]").items()
            }
            for field_name, by_rule in _mapping(options.get("messages", {}), "messages").items()
        }
        return cls(rules=rules, messages=messages)


def coerce_options(options: "ValidationOptions | Mapping[str, Any]") -> ValidationOptions:
    """Accept either built options or their plain-dict form."""
    if isinstance(options, ValidationOptions):
        return options
    return ValidationOptions.from_dict(options)


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        msg = f"{where} must be a mapping, got {type(value).__name__}"
        raise ConfigurationError(msg)
    return value


def _rule_calls(field_name: str, spec: Any) -> tuple[RuleCall, ...]:
    if isinstance(spec, Mapping):
        pairs: Sequence[Any] = list(spec.items())
    elif isinstance(spec, Sequence) and not isinstance(spec, str):
        pairs = spec
    else:
        msg = f"Rules for {field_name!r} must be a mapping or a list of pairs"
        raise ConfigurationError(msg)

    calls: list[RuleCall] = []
    for pair in pairs:
        if isinstance(pair, RuleCall):
            calls.append(pair)
            continue
        if isinstance(pair, str):
            # Bare rule name, e.g. ["required", "email"]
            calls.append(RuleCall(pair))
            continue
        try:
            name, argument = pair
        except (TypeError, ValueError):
            msg = f"Invalid rule entry for {field_name!r}: {pair!r}"
            raise ConfigurationError(msg) from None
        calls.append(RuleCall(name, as_resolvable(argument)))
    return tuple(calls)


def _message(field_name: str, rule: str, message: Any) -> MessageSpec:
    if isinstance(message, str):
        return Fixed(message)
    if isinstance(message, Fixed) and isinstance(message.value, str):
        return message
    if isinstance(message, Deferred):
        return message
    msg = (
        f"Message for {field_name!r}/{rule!r} must be a string or Deferred, "
        f"got {type(message).__name__}"
    )
    raise ConfigurationError(msg)
