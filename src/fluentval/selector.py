"""Property selection: turn an accessor into a named value extractor.

An accessor is either an attribute name or a one-argument callable such as
``lambda user: user.age``. Callables are traced once against a recording
proxy; only a single, direct attribute access on the parameter is accepted.
"""

import keyword
import logging
import operator
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Accessor = str | Callable[[Any], Any]


@dataclass(frozen=True)
class PropertyDescriptor:
    """A named property of a subject type and the function that reads it."""
    name: str
    getter: Callable[[Any], Any]

    def extract(self, instance: Any) -> Any:
        """Read the property value from an instance."""
        return self.getter(instance)


class _AccessTrace:
    """Recording proxy handed to an accessor callable while it is traced.

    Every attribute read is appended to the shared ``accesses`` list and
    answered with a fresh proxy, so chained reads are recorded too. Reads are
    intercepted in ``__getattribute__``, so subject attributes that share a
    name with the proxy's own slots are recorded like any other. Anything
    else an expression might do with the value (calling it, testing its
    truth) raises.
    """

    __slots__ = ("_accesses", "_name")

    def __init__(self, accesses: list[str], name: str | None = None):
        object.__setattr__(self, "_accesses", accesses)
        object.__setattr__(self, "_name", name)

    def __getattribute__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            return object.__getattribute__(self, name)
        accesses = object.__getattribute__(self, "_accesses")
        accesses.append(name)
        return _AccessTrace(accesses, name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError("accessors must not assign attributes")

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        raise TypeError(f"accessors must not call {_traced_name(self) or 'the subject'}")

    def __bool__(self) -> bool:
        raise TypeError("accessors must not test truth values")


def _traced_name(trace: _AccessTrace) -> str | None:
    return object.__getattribute__(trace, "_name")


def resolve_property(accessor: Accessor) -> PropertyDescriptor:
    """Resolve an accessor into a property descriptor.

    Args:
        accessor: Attribute name, or a callable that reads exactly one
                  attribute of its argument

    Returns:
        PropertyDescriptor with the attribute name and a compiled getter

    Raises:
        ConfigurationError: If the accessor is not a direct attribute access
    """
    if isinstance(accessor, str):
        name = accessor
    elif callable(accessor):
        name = _trace_accessor(accessor)
    else:
        raise ConfigurationError(
            f"Accessor must be an attribute name or a callable, got {type(accessor).__name__}"
        )

    if not name.isidentifier() or keyword.iskeyword(name):
        raise ConfigurationError(f"Accessor {name!r} is not a valid attribute name")

    logger.debug(f"Resolved accessor to property '{name}'")
    return PropertyDescriptor(name=name, getter=operator.attrgetter(name))


def _trace_accessor(accessor: Callable[[Any], Any]) -> str:
    accesses: list[str] = []
    root = _AccessTrace(accesses)

    try:
        result = accessor(root)
    except Exception as e:
        raise ConfigurationError(
            f"Accessor must be a single member access on its parameter: {e}"
        ) from e

    if len(accesses) != 1:
        raise ConfigurationError(
            f"Accessor must access exactly one member, accessed {len(accesses)}"
            + (f" ({'.'.join(accesses)})" if accesses else "")
        )

    # The expression must hand back the member itself, not something derived from it
    if not isinstance(result, _AccessTrace) or _traced_name(result) != accesses[0]:
        raise ConfigurationError(
            f"Accessor must return the member '{accesses[0]}' unchanged"
        )

    return accesses[0]
