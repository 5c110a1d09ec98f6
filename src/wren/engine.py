"""Rule engine: ordered, short-circuiting rule evaluation per field.

For each field named in the options the engine walks the field's rules
in declared order:

1. Resolve the rule name through the ``RuleRegistry``.
2. Resolve the argument (``Deferred`` arguments are produced now).
3. Call the rule with ``(argument, value, context)``.
4. On ``True`` move to the next rule.
5. On anything else resolve the message for ``(field, rule)`` and stop.

Fields are driven by the options, not by the payload: a field missing
from the payload is evaluated as ``""``.

Every rule name is resolved before the first field is evaluated, so a
typo in the options raises ``UnknownRuleError`` without leaving a
half-validated form behind.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from wren.config import ValidatorConfig
from wren.options import MessageSpec, RuleCall, ValidationOptions
from wren.registry import RuleRegistry
from wren.rules import RuleContext

logger = logging.getLogger("wren.engine")


@dataclass(frozen=True, slots=True)
class FieldOutcome:
    """The result of running one field's rules.

    ``rule`` and ``message`` are set only when the field failed.
    """

    field: str
    valid: bool
    value: Any = ""
    rule: str | None = None
    message: str | None = None


class RuleEngine:
    """Applies validation options to a raw payload."""

    __slots__ = ("_config", "_registry")

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        config: ValidatorConfig | None = None,
    ) -> None:
        self._registry = registry or RuleRegistry()
        self._config = config or ValidatorConfig()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def check(self, options: ValidationOptions) -> None:
        """Resolve every rule name in *options*.

        Raises:
            UnknownRuleError: On the first name that does not resolve.
        """
        for field_name, calls in options.rules.items():
            for call in calls:
                self._registry.resolve(call.name, field_name)

    def run(
        self,
        options: ValidationOptions,
        data: Mapping[str, Any],
    ) -> dict[str, FieldOutcome]:
        """Validate every field in *options* against *data*.

        Returns outcomes keyed by field name, in the order the options
        declare them.
        """
        self.check(options)
        outcomes = {
            field_name: self.apply(field_name, calls, data, options.messages.get(field_name, {}))
            for field_name, calls in options.rules.items()
        }
        failed = [name for name, outcome in outcomes.items() if not outcome.valid]
        logger.debug(
            "Validated %d field(s), %d failed%s",
            len(outcomes),
            len(failed),
            f": {', '.join(failed)}" if failed else "",
        )
        return outcomes

    def apply(
        self,
        field_name: str,
        calls: tuple[RuleCall, ...],
        data: Mapping[str, Any],
        messages: Mapping[str, MessageSpec] | None = None,
    ) -> FieldOutcome:
        """Run *calls* for one field, stopping at the first failure."""
        value = data.get(field_name, "")
        context = RuleContext(field=field_name, data=data)
        messages = messages or {}

        for call in calls:
            rule = self._registry.resolve(call.name, field_name)
            argument = call.argument.resolve()

            if rule.fn(argument, value, context) is True:
                continue

            spec = messages.get(call.name)
            message = self._message(call.name, spec, argument, value, field_name)
            logger.debug("Field %r failed rule %r", field_name, call.name)
            return FieldOutcome(
                field=field_name,
                valid=False,
                value=value,
                rule=call.name,
                message=message,
            )

        return FieldOutcome(field=field_name, valid=True, value=value)

    def _message(
        self,
        rule: str,
        spec: MessageSpec | None,
        argument: Any,
        value: Any,
        field_name: str,
    ) -> str:
        if spec is None:
            return self._config.message_for(rule)
        return spec.resolve(argument, value, field_name)
