"""Kida template integration for validation sessions."""

from wren.templating.filters import BUILTIN_FILTERS, register_filters

__all__ = ["BUILTIN_FILTERS", "register_filters"]
