"""Built-in validation rules.

Each rule is a plain predicate with the signature::

    def rule(argument: Any, value: Any, context: RuleContext) -> bool:
        '''Return True if the value passes.'''

``argument`` is the resolved value declared in the options (a length,
a field name, a flag). ``value`` is the raw submitted value, ``""``
when the field is missing. ``context`` carries the field name and the
whole raw payload, so rules that look at other fields stay pure.

Custom rules follow the same protocol and are added with
``RuleRegistry.register()``.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class RuleContext:
    """What a rule may read besides its argument and value."""

    field: str
    data: Mapping[str, Any]


# Type alias for a rule predicate
type Rule = Callable[[Any, Any, RuleContext], bool]


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(argument: Any, value: Any, context: RuleContext) -> bool:
    """Fails on an empty value, but only when *argument* is ``True``."""
    if argument is not True:
        return True
    if value is None:
        return False
    if isinstance(value, (list, tuple, Mapping)):
        return len(value) > 0
    return value != ""


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def minlength(argument: Any, value: Any, context: RuleContext) -> bool:
    """At least *argument* characters (or selected values)."""
    return len(value) >= argument


def maxlength(argument: Any, value: Any, context: RuleContext) -> bool:
    """At most *argument* characters (or selected values)."""
    return len(value) <= argument


def rangelength(argument: Any, value: Any, context: RuleContext) -> bool:
    """Between ``argument[0]`` and ``argument[1]`` characters, inclusive."""
    low, high = argument
    return minlength(low, value, context) and maxlength(high, value, context)


def length(argument: Any, value: Any, context: RuleContext) -> bool:
    """Exactly *argument* characters."""
    return len(value) == argument


# ---------------------------------------------------------------------------
# Cross-field
# ---------------------------------------------------------------------------


def equalto(argument: Any, value: Any, context: RuleContext) -> bool:
    """Equal to the raw submitted value of the field named *argument*."""
    return context.data.get(argument, "") == value


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Loose RFC pattern: restricted local-part charset, dotted hostname with a
# 2-6 letter TLD or a dotted quad, optional :port
_EMAIL_LOCAL = r"[-_a-z0-9'+*$^&%=~!?{}]"
_EMAIL_RE = re.compile(
    rf"{_EMAIL_LOCAL}+(?:\.{_EMAIL_LOCAL}+)*"
    r"@(?:(?![-.])[-a-z0-9.]+(?<![-.])\.[a-z]{2,6}|\d{1,3}(?:\.\d{1,3}){3})"
    r"(?::\d+)?",
    re.IGNORECASE | re.ASCII,
)

# Optionally signed, plain or comma-grouped, optional decimal part
_NUMBER_RE = re.compile(r"-?(?:\d+|\d{1,3}(?:,\d{3})+)(?:\.\d+)?", re.ASCII)

_DIGITS_RE = re.compile(r"\d+", re.ASCII)
_NON_DIGIT_RE = re.compile(r"\D", re.ASCII)


def email(argument: Any, value: Any, context: RuleContext) -> bool:
    """Value looks like an email address (structure only)."""
    return _EMAIL_RE.fullmatch(str(value)) is not None


def number(argument: Any, value: Any, context: RuleContext) -> bool:
    """Value is a decimal number, e.g. ``-1,234.5``."""
    return _NUMBER_RE.fullmatch(str(value)) is not None


def digits(argument: Any, value: Any, context: RuleContext) -> bool:
    """Value is one or more ASCII digits and nothing else."""
    return _DIGITS_RE.fullmatch(str(value)) is not None


def mindigits(argument: Any, value: Any, context: RuleContext) -> bool:
    """At least *argument* digits once every other character is removed."""
    return minlength(argument, _NON_DIGIT_RE.sub("", str(value)), context)


BUILTIN_RULES: MappingProxyType[str, Rule] = MappingProxyType(
    {
        "required": required,
        "minlength": minlength,
        "maxlength": maxlength,
        "rangelength": rangelength,
        "length": length,
        "equalto": equalto,
        "email": email,
        "number": number,
        "digits": digits,
        "mindigits": mindigits,
    }
)
