"""Fixed and deferred values for rule arguments and messages.

Arguments and messages in validation options may be known up front or
depend on request-time state. Both cases are wrapped explicitly so the
engine never guesses whether a value is "callable enough" to invoke::

    from wren import Deferred

    options = {
        "rules": {
            "quantity": {"maxlength": Deferred(lambda: stock_digits())},
        },
        "messages": {
            "quantity": {
                "maxlength": Deferred(lambda n, value, field: f"At most {n} digits"),
            },
        },
    }

Plain values are wrapped in ``Fixed`` when options are built.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Fixed[T]:
    """A value known when the options are declared."""

    value: T

    def resolve(self, *args: Any) -> T:
        """Return the wrapped value; *args* are ignored."""
        return self.value


@dataclass(frozen=True, slots=True)
class Deferred[T]:
    """A value computed at validation time.

    Arguments are produced with no parameters. Messages are produced
    with ``(argument, value, field_name)``.
    """

    producer: Callable[..., T]

    def resolve(self, *args: Any) -> T:
        """Call the producer with *args* and return its result."""
        return self.producer(*args)


type Resolvable[T] = Fixed[T] | Deferred[T]


def as_resolvable(value: Any) -> Resolvable[Any]:
    """Wrap *value* in ``Fixed`` unless it is already fixed or deferred."""
    if isinstance(value, (Fixed, Deferred)):
        return value
    return Fixed(value)
