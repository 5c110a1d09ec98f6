"""Transport boundary: form payloads in, validation sessions out.

Wren does not own request handling. This module only adapts what a web
framework hands over into the payload and submission flag a
``ValidationSession`` needs:

- ``FormData``: multi-value mapping of parsed fields.
- ``parse_form_data()``: URL-encoded (stdlib) or multipart
  (``python-multipart``, ``pip install wren[forms]``) bodies.
- ``nest_fields()``: expands bracket keys (``user[name]``, ``tags[]``)
  into nested payloads and lists.
- ``session_from_request()``: builds a session from any request object
  with a ``method`` and an async ``form()``.
"""

import re
from collections.abc import Iterator, Mapping
from typing import Any

from wren.config import ValidatorConfig
from wren.errors import ConfigurationError
from wren.registry import RuleRegistry
from wren.session import ValidationSession


class FormData(Mapping[str, str]):
    """Parsed form fields: first value by key, every value by ``get_list``."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]]) -> None:
        self._data = data

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get_list(self, key: str) -> list[str]:
        """Every value submitted under *key*, in order."""
        return list(self._data.get(key, []))


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


async def parse_form_data(body: bytes, content_type: str, charset: str = "utf-8") -> FormData:
    """Parse a form body into FormData.

    Supports:
    - ``application/x-www-form-urlencoded`` (stdlib, no extra dependency)
    - ``multipart/form-data`` (requires ``python-multipart``); file
      parts are skipped, only text fields are returned

    Raises:
        ConfigurationError: If multipart parsing is needed but
            ``python-multipart`` is not installed.
        ValueError: If content type is not a supported form encoding.
    """
    ct_lower = content_type.lower().split(";")[0].strip()

    if ct_lower == "application/x-www-form-urlencoded":
        return _parse_urlencoded(body, charset)

    if ct_lower == "multipart/form-data":
        return _parse_multipart(body, content_type, charset)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_urlencoded(body: bytes, charset: str) -> FormData:
    """Parse URL-encoded form data using stdlib."""
    from urllib.parse import parse_qs

    parsed = parse_qs(body.decode(charset), keep_blank_values=True)
    return FormData(parsed)


def _parse_multipart(body: bytes, content_type: str, charset: str) -> FormData:
    """Parse the text fields of a multipart body with python-multipart."""
    try:
        from multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install wren[forms]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}
    state: dict[str, Any] = {}

    def on_part_begin() -> None:
        state.update(name=None, filename=None, header="", chunks=bytearray())

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        state["chunks"].extend(chunk[start:end])

    def on_part_end() -> None:
        if state["name"] is None or state["filename"] is not None:
            return
        value = bytes(state["chunks"]).decode(charset, errors="replace")
        data.setdefault(state["name"], []).append(value)

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        state["header"] = chunk[start:end].decode("latin-1").lower()

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        if state["header"] != "content-disposition":
            return
        _, params = parse_options_header(chunk[start:end])
        name = params.get(b"name")
        if name is not None:
            state["name"] = name.decode(charset)
        filename = params.get(b"filename")
        if filename is not None:
            state["filename"] = filename.decode(charset)

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_part_begin,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
        },
    )
    parser.write(body)
    parser.finalize()
    return FormData(data)


# ---------------------------------------------------------------------------
# Nested keys
# ---------------------------------------------------------------------------

_KEY_RE = re.compile(r"([^\[\]]+)((?:\[[^\[\]]*\])*)")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def split_key(key: str) -> list[str]:
    """Split ``"user[address][city]"`` into ``["user", "address", "city"]``.

    ``[]`` yields an empty segment (append to a list). Keys that are not
    well-formed bracket paths are returned whole.
    """
    match = _KEY_RE.fullmatch(key)
    if match is None:
        return [key]
    return [match.group(1), *_SEGMENT_RE.findall(match.group(2))]


def nest_fields(form: Mapping[str, Any]) -> dict[str, Any]:
    """Expand bracket keys of *form* into a nested payload.

    ``tags[]`` becomes a list, ``user[name]`` a nested mapping. For a
    plain key submitted more than once the first value wins, matching
    ``FormData.__getitem__``.

    Every value of a repeated key is collected from ``get_list`` (wren's
    ``FormData``) or ``getlist`` (Starlette / Werkzeug multi-dicts); plain
    mappings contribute their single value.
    """
    payload: dict[str, Any] = {}
    for key in form:
        for value in _values(form, key):
            _insert(payload, split_key(key), value)
    return payload


def _values(form: Mapping[str, Any], key: str) -> list[Any]:
    get_list = getattr(form, "get_list", None) or getattr(form, "getlist", None)
    if get_list is not None:
        return list(get_list(key))
    return [form[key]]


def _insert(node: dict[str, Any] | list[Any], path: list[str], value: Any) -> None:
    head, rest = path[0], path[1:]

    if isinstance(node, list):
        if not rest:
            node.append(value)
            return
        child: dict[str, Any] | list[Any] = [] if rest[0] == "" else {}
        node.append(child)
        _insert(child, rest, value)
        return

    if not rest:
        node.setdefault(head, value)
        return

    existing = node.get(head)
    if existing is None:
        existing = [] if rest[0] == "" else {}
        node[head] = existing
    elif not isinstance(existing, (dict, list)):
        # A scalar was submitted under the same name first
        return
    _insert(existing, rest, value)


# ---------------------------------------------------------------------------
# Request adapter
# ---------------------------------------------------------------------------


async def session_from_request(
    request: Any,
    *,
    registry: RuleRegistry | None = None,
    config: ValidatorConfig | None = None,
) -> ValidationSession:
    """Create a ``ValidationSession`` for an incoming request.

    The request counts as a submission when its method is one of
    ``config.submit_methods``; only then is the body read, through the
    request's async ``form()``.

    Args:
        request: Anything with a ``method`` string and an async ``form()``
            returning a mapping (a Starlette request works).
        registry: Rule registry holding the application's custom rules.
        config: Validator configuration.
    """
    config = config or ValidatorConfig()
    submitted = request.method.upper() in config.submit_methods
    payload: dict[str, Any] = {}
    if submitted:
        payload = nest_fields(await request.form())
    return ValidationSession(payload, submitted=submitted, registry=registry, config=config)
