"""Sanitization pipeline: one raw payload, two parallel views.

``clean`` is used for logic and storage; ``escaped`` is HTML-safe and
used only for re-display. Both come from the same raw payload and keep
its exact shape: same keys, same order, same nesting.
"""

import html
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from wren.config import ValidatorConfig

type Payload = Mapping[str, Any]

_SLASHED_RE = re.compile(r"\\(.?)", re.DOTALL)


def map_leaves(payload: Any, fn: Callable[[Any], Any]) -> Any:
    """Apply *fn* to every scalar leaf of *payload*, preserving structure.

    Mappings come back as dicts with the same key order; lists and
    tuples keep their type. The input is never mutated.
    """
    if isinstance(payload, Mapping):
        return {key: map_leaves(item, fn) for key, item in payload.items()}
    if isinstance(payload, (list, tuple)):
        return type(payload)(map_leaves(item, fn) for item in payload)
    return fn(payload)


def _unslash(match: re.Match[str]) -> str:
    char = match.group(1)
    if char == "0":
        return "\0"
    return char


def strip_slashes(value: Any) -> Any:
    """Undo legacy backslash-quoting: ``\\'`` → ``'``, ``\\\\`` → ``\\``.

    ``\\0`` becomes a NUL byte and a trailing lone backslash is dropped.
    Non-string leaves pass through untouched.
    """
    if not isinstance(value, str):
        return value
    return _SLASHED_RE.sub(_unslash, value)


def html_escape(value: Any, charset: str = "utf-8") -> str:
    """HTML-encode a scalar, escaping quotes as well as ``<``, ``>``, ``&``.

    Bytes are decoded with *charset* (undecodable sequences replaced);
    ``None`` becomes the empty string; other scalars are stringified.
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode(charset, errors="replace")
    return html.escape(str(value), quote=True)


def _identity(value: Any) -> Any:
    return value


def copy_payload(payload: Any) -> Any:
    """Copy the containers of *payload*; scalar leaves are shared."""
    return map_leaves(payload, _identity)


@dataclass(frozen=True, slots=True)
class SanitizedViews:
    """The clean and escaped views of one payload."""

    clean: dict[str, Any]
    escaped: dict[str, Any]


class SanitizationPipeline:
    """Builds the clean and escaped views from a raw payload.

    Usage::

        views = SanitizationPipeline(config).sanitize(form)
        views.escaped["name"]  # safe to drop into HTML
    """

    __slots__ = ("_config",)

    def __init__(self, config: ValidatorConfig | None = None) -> None:
        self._config = config or ValidatorConfig()

    @property
    def clean_transform(self) -> Callable[[Any], Any]:
        """Leaf transform producing the clean view."""
        return strip_slashes if self._config.strip_slashes else _identity

    def escape_transform(self, value: Any) -> str:
        """Leaf transform producing the escaped view."""
        return html_escape(value, self._config.charset)

    def sanitize(self, raw: Payload) -> SanitizedViews:
        clean = map_leaves(raw, self.clean_transform)
        escaped = map_leaves(clean, self.escape_transform)
        return SanitizedViews(clean=dict(clean), escaped=dict(escaped))


def shape(payload: Any) -> Any:
    """Structural fingerprint of *payload*: keys and nesting, no values."""
    if isinstance(payload, Mapping):
        return tuple((key, shape(item)) for key, item in payload.items())
    if isinstance(payload, (list, tuple)):
        return (type(payload).__name__, tuple(shape(item) for item in payload))
    return None
