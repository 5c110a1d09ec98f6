"""Validator configuration.

ValidatorConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

_DEFAULT_MESSAGES: dict[str, str] = {
    "required": "This field is required",
    "minlength": "Too short",
    "maxlength": "Too long",
    "rangelength": "Wrong length",
    "length": "Wrong length",
    "equalto": "Values do not match",
    "email": "Must be a valid email address",
    "number": "Must be a number",
    "digits": "Must contain only digits",
    "mindigits": "Not enough digits",
}


@dataclass(frozen=True, slots=True)
class ValidatorConfig:
    """Validator configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ValidatorConfig(strip_slashes=True, error_class="is-invalid")
    """

    # Sanitization
    charset: str = "utf-8"
    strip_slashes: bool = False  # Legacy: unescape backslash-quoted input

    # Transport boundary
    submit_methods: frozenset[str] = frozenset({"POST"})

    # Rendering
    error_class: str = "error"  # Token added by error_class() for failing fields
    label_class: str = "error"  # class attribute of error_label() output

    # Messages used when the options carry none for a failing rule
    default_messages: MappingProxyType[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(_DEFAULT_MESSAGES))
    )
    fallback_message: str = "This field is invalid"

    def message_for(self, rule: str) -> str:
        """Return the default message for *rule*."""
        return self.default_messages.get(rule, self.fallback_message)

    def with_messages(self, **messages: Any) -> "ValidatorConfig":
        """Return a copy with *messages* merged over the default messages."""
        merged = {**self.default_messages, **messages}
        return replace(self, default_messages=MappingProxyType(merged))
