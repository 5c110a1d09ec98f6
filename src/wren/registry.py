"""Rule registry: name to rule resolution.

Built-in rules form a closed set that is always consulted first.
Applications extend the registry with their own rules::

    registry = RuleRegistry()

    @registry.register("postcode")
    def postcode(argument, value, context):
        return bool(POSTCODE_RE.fullmatch(value))

Resolution failure is a typed ``UnknownRuleError``, never a bare
``KeyError``.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import overload

from wren.errors import ConfigurationError, UnknownRuleError
from wren.rules import BUILTIN_RULES, Rule

logger = logging.getLogger("wren.registry")


@dataclass(frozen=True, slots=True)
class RegisteredRule:
    """A resolved rule, tagged with where it came from."""

    name: str
    fn: Rule
    builtin: bool


class RuleRegistry:
    """Resolves rule names to callables.

    Populate custom rules at startup; resolution is read-only and safe
    to share across requests afterwards.
    """

    __slots__ = ("_custom",)

    def __init__(self, rules: dict[str, Rule] | None = None) -> None:
        self._custom: dict[str, RegisteredRule] = {}
        for name, fn in (rules or {}).items():
            self.register(name, fn)

    @overload
    def register(self, name: str) -> Callable[[Rule], Rule]: ...

    @overload
    def register(self, name: str, fn: Rule) -> Rule: ...

    def register(self, name: str, fn: Rule | None = None) -> Rule | Callable[[Rule], Rule]:
        """Register a custom rule under *name*.

        Called with a function, registers it directly. Called with only a
        name, returns a decorator.

        Raises:
            ConfigurationError: If *name* is a built-in, is already
                registered, or *fn* is not callable.
        """
        if fn is None:

            def decorator(func: Rule) -> Rule:
                return self.register(name, func)

            return decorator

        if name in BUILTIN_RULES:
            msg = f"Cannot register {name!r}: it is a built-in rule"
            raise ConfigurationError(msg)
        if name in self._custom:
            msg = f"Rule {name!r} is already registered"
            raise ConfigurationError(msg)
        if not callable(fn):
            msg = f"Rule {name!r} must be callable, got {type(fn).__name__}"
            raise ConfigurationError(msg)

        self._custom[name] = RegisteredRule(name=name, fn=fn, builtin=False)
        logger.debug("Registered custom rule %r", name)
        return fn

    def resolve(self, name: str, field: str | None = None) -> RegisteredRule:
        """Return the rule registered under *name*, built-ins first.

        Raises:
            UnknownRuleError: If no built-in or custom rule has that name.
        """
        builtin = BUILTIN_RULES.get(name)
        if builtin is not None:
            return RegisteredRule(name=name, fn=builtin, builtin=True)
        custom = self._custom.get(name)
        if custom is not None:
            return custom
        raise UnknownRuleError(name, field)

    def names(self) -> list[str]:
        """All resolvable rule names, built-ins first."""
        return [*BUILTIN_RULES, *self._custom]

    def __contains__(self, name: object) -> bool:
        return name in BUILTIN_RULES or name in self._custom

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(BUILTIN_RULES) + len(self._custom)
