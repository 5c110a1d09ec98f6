"""Kida template filters over a ValidationSession.

Registered on a kida ``Environment`` with ``register_filters(env)``;
the session itself is passed in the template context::

    <input name="email" value="{{ form | escaped('email') }}"{{ form | class_attr('email') }}>
    {{ form | error_label('email') }}
    <input type="checkbox" name="terms" value="yes" {{ form | checked('terms', 'yes') }}>
"""

import html
from typing import Any

from kida.template import Markup

from wren.session import ValidationSession


def escaped(session: ValidationSession | None, name: str) -> Markup:
    """The submitted value for *name*, already escaped.

    Returned as Markup so autoescape does not double-escape it.
    """
    if session is None:
        return Markup("")
    return Markup(session.escaped_value(name))


def error_label(session: ValidationSession | None, name: str, element_id: str = "") -> Markup | str:
    """Error ``<label>`` for *name*, or ``""`` when the field is valid."""
    if session is None:
        return ""
    return session.error_label(name, element_id)


def error_class(session: ValidationSession | None, name: str, *extra: str) -> str:
    """Class tokens for *name*: the error token when failing, then *extra*."""
    if session is None:
        return " ".join(token for token in extra if token)
    return session.error_class(name, *extra)


def checked(session: ValidationSession | None, name: str, value: Any) -> Markup | str:
    """``checked="checked"`` when the clean value of *name* matches *value*."""
    if session is None:
        return ""
    return session.checked(name, value)


def class_attr(session: ValidationSession | None, name: str, *extra: str) -> Markup | str:
    """A leading `` class="..."`` for *name*, or ``""`` when there are no tokens.

    Keeps valid fields free of an empty ``class=""``::

        <input name="email"{{ form | class_attr('email', 'input') }}>
    """
    tokens = error_class(session, name, *extra)
    if not tokens:
        return ""
    return Markup(f' class="{html.escape(tokens)}"')


# All wren filters, registered by register_filters().
BUILTIN_FILTERS: dict[str, Any] = {
    "checked": checked,
    "class_attr": class_attr,
    "error_class": error_class,
    "error_label": error_label,
    "escaped": escaped,
}


def register_filters(env: Any) -> Any:
    """Register wren's filters on a kida ``Environment`` and return it."""
    env.update_filters(BUILTIN_FILTERS)
    return env
