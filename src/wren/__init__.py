"""Wren: request-bound form validation.

Sanitizes a submitted payload into clean and escaped views, applies
named rules per field in order, stops at each field's first failure,
and keeps one message per failing field for re-rendering the form.

Basic usage::

    from wren import ValidationSession

    form = ValidationSession(payload, submitted=request.method == "POST")
    form.validate({
        "rules": {
            "email": {"required": True, "email": True},
            "password": {"required": True, "minlength": 8},
            "confirm": {"equalto": "password"},
        },
        "messages": {
            "email": {"required": "Enter your email", "email": "Not an email"},
        },
    })
    if form.is_valid():
        save(form.clean)

Custom rules::

    from wren import RuleRegistry

    registry = RuleRegistry()

    @registry.register("even")
    def even(argument, value, context):
        return value.isdigit() and int(value) % 2 == 0
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigurationError",
    "Deferred",
    "Fixed",
    "RuleContext",
    "RuleEngine",
    "RuleRegistry",
    "SanitizationPipeline",
    "UnknownRuleError",
    "ValidationOptions",
    "ValidationSession",
    "ValidatorConfig",
    "WrenError",
    "session_from_request",
]

# Public name -> defining module. Keeps ``import wren`` fast.
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "wren.errors",
    "Deferred": "wren.deferred",
    "Fixed": "wren.deferred",
    "RuleContext": "wren.rules",
    "RuleEngine": "wren.engine",
    "RuleRegistry": "wren.registry",
    "SanitizationPipeline": "wren.sanitize",
    "UnknownRuleError": "wren.errors",
    "ValidationOptions": "wren.options",
    "ValidationSession": "wren.session",
    "ValidatorConfig": "wren.config",
    "WrenError": "wren.errors",
    "session_from_request": "wren.http.forms",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API."""
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
