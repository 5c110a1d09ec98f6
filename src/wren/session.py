"""Validation session: per-request form state and read-side helpers.

A session is created once per incoming request from the submitted
payload and a flag saying whether a submission happened at all. It
owns the clean and escaped views and the error map::

    session = ValidationSession(form, submitted=request.method == "POST")
    session.validate({
        "rules": {"email": {"required": True, "email": True}},
        "messages": {"email": {"required": "Enter your email"}},
    })
    if session.is_valid():
        save(session.clean)

Templates then re-render the form from the same session::

    <input name="email" value="{{ form.escaped_value('email') }}"
           class="{{ form.error_class('email') }}">
    {{ form.error_label("email") }}
"""

import html
import logging
from collections.abc import Mapping
from typing import Any

from kida.template import Markup

from wren.config import ValidatorConfig
from wren.engine import RuleEngine
from wren.options import ValidationOptions, coerce_options
from wren.registry import RuleRegistry
from wren.sanitize import SanitizationPipeline, copy_payload

logger = logging.getLogger("wren.session")


class ValidationSession:
    """Holds one request's payload views and validation errors.

    ``clean`` holds sanitized values, overwritten with the raw value of
    each field that passes all of its rules. ``escaped`` holds the
    HTML-escaped values for re-display. ``errors`` maps each failing
    field to its message.
    """

    __slots__ = ("_config", "_data", "_engine", "clean", "errors", "escaped", "submitted")

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        submitted: bool,
        registry: RuleRegistry | None = None,
        config: ValidatorConfig | None = None,
    ) -> None:
        self._config = config or ValidatorConfig()
        self._engine = RuleEngine(registry, self._config)
        self._data: Mapping[str, Any] = data if data is not None else {}
        self.submitted = submitted
        self.clean: dict[str, Any] = {}
        self.escaped: dict[str, Any] = {}
        self.errors: dict[str, str] = {}

        if self.submitted:
            views = SanitizationPipeline(self._config).sanitize(self._data)
            self.clean = views.clean
            self.escaped = views.escaped

    @property
    def data(self) -> Mapping[str, Any]:
        """The raw submitted payload. Never mutated."""
        return self._data

    # -- Validation --

    def validate(self, options: ValidationOptions | Mapping[str, Any]) -> "ValidationSession":
        """Run *options* against the submitted payload.

        Does nothing when no submission occurred. Re-running with the same
        payload and options produces the same errors.

        Raises:
            ConfigurationError: If the options are malformed.
            UnknownRuleError: If a rule name does not resolve. Raised
                before any field is marked invalid.
        """
        options = coerce_options(options)
        if not self.submitted:
            return self

        for field_name, outcome in self._engine.run(options, self._data).items():
            if outcome.valid:
                self.clean[field_name] = copy_payload(outcome.value)
                self.errors.pop(field_name, None)
            else:
                self.errors[field_name] = outcome.message or ""

        if self.errors:
            logger.debug("Form has errors on: %s", ", ".join(self.errors))
        return self

    def is_valid(self) -> bool:
        """True when a submission occurred and no field has an error."""
        return self.submitted and not self.has_errors()

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    # -- Re-rendering helpers --

    def escaped_value(self, name: str) -> str:
        """The HTML-escaped submitted value for *name*, or ``""``."""
        value = self.escaped.get(name, "")
        return value if isinstance(value, str) else ""

    def is_checked(self, name: str, value: Any) -> bool:
        """True when the clean value for *name* matches *value*.

        Comparison is by string form, so ``1`` matches ``"1"``. For
        multi-valued fields (checkbox groups) any selected value matches.
        """
        if name not in self.clean:
            return False
        current = self.clean[name]
        if isinstance(current, (list, tuple)):
            return any(_loosely_equal(item, value) for item in current)
        return _loosely_equal(current, value)

    def checked(self, name: str, value: Any) -> Markup | str:
        """``checked="checked"`` when :meth:`is_checked`, else ``""``."""
        if self.is_checked(name, value):
            return Markup('checked="checked"')
        return ""

    def error(self, name: str) -> str | None:
        """The error message for *name*, or ``None`` when it is valid."""
        return self.errors.get(name)

    def error_label(self, name: str, element_id: str = "") -> Markup | str:
        """A ``<label>`` carrying the error for *name*, or ``""``.

        The label's ``for`` attribute points at *element_id*, defaulting
        to the field name. Both the id and the message are escaped.
        """
        message = self.errors.get(name)
        if message is None:
            return ""
        target = element_id or name
        return Markup(
            f'<label for="{html.escape(target, quote=True)}" '
            f'class="{html.escape(self._config.label_class, quote=True)}">'
            f"{html.escape(message, quote=True)}</label>"
        )

    def error_class(self, name: str, *extra: str) -> str:
        """Space-joined class tokens for *name*.

        Contains the configured error token when the field has an
        error, followed by any *extra* tokens.
        """
        classes: list[str] = []
        if name in self.errors:
            classes.append(self._config.error_class)
        classes.extend(token for token in extra if token)
        return " ".join(classes)

    def __repr__(self) -> str:
        return (
            f"ValidationSession(submitted={self.submitted!r}, "
            f"fields={len(self.clean)}, errors={sorted(self.errors)!r})"
        )


def _loosely_equal(current: Any, value: Any) -> bool:
    if current == value:
        return True
    if current is None or value is None:
        return False
    return str(current) == str(value)
