"""Wren exception hierarchy.

Configuration mistakes are exceptions. Bad user input never is: a
failing rule is recorded on the session, not raised.
"""


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when validation options or rule registration are invalid.

    Indicates a programming mistake, not bad input. Surfaced to the
    caller immediately instead of being recorded against a field.
    """


class UnknownRuleError(ConfigurationError):
    """A rule name resolves to neither a built-in nor a registered rule."""

    def __init__(self, rule: str, field: str | None = None) -> None:
        self.rule = rule
        self.field = field
        msg = f"Unknown validation rule: {rule!r}"
        if field is not None:
            msg = f"{msg} (field {field!r})"
        super().__init__(msg)
