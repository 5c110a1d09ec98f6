"""Transport boundary: form parsing and request adapters."""

from wren.http.forms import FormData, nest_fields, parse_form_data, session_from_request

__all__ = ["FormData", "nest_fields", "parse_form_data", "session_from_request"]
