"""
Helmsman utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the descriptor, fault and orchestration layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables for clean tracebacks.

- freeze(object) / mirror("attr")
  • Shallow-freeze containers and expose private backing fields as read-only properties.

- pluralize(text)
  • Wording helper for user-facing messages.

Stability and contract
- Names not in __all__ are internal and may change without notice.
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or () are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> decorator

    Raises
    - TypeError: on wrong arity, a non-string name or a non-updatable callable.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def freeze(object, /):
    """
    Shallow-freeze a container so it can be shared without defensive copies.

    Freezing rules
    - Sequence (non-string) → tuple(seq)
    - Mapping → MappingProxyType(dict(mapping))
    - Set → frozenset(setlike)
    - Other types → returned as-is

    Notes
    - Freezing is shallow. Pre-freeze nested containers if deeper immutability is required.
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance. Backing fields are
    expected to be frozen at construction time (see freeze()), so the value is
    returned as-is.

    Example
    - Given self._parameters, declare parameters = mirror("parameters").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return getattr(self, "_" + name)

    return property(getter)


class IntrospectableType(type):
    """
    Metaclass that turns descriptor classes into introspectable, read-only records.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private backing field (see mirror()).
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printers.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return "%s(%s)" % (
                    type(self).__typename__,
                    ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
                )
            self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for labels and messages.

    Only the last word of a phrase is pluralized; casing of that word is kept
    (UPPER → UPPER, Title → Title).

    Examples
    - pluralize("error")           -> "errors"
    - pluralize("command")         -> "commands"
    - pluralize("Entry")           -> "Entries"
    - pluralize("unknown option")  -> "unknown options"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    match = re.search(r"(\S+)(\s*)$", text)
    if not match:
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    irregulars = {
        "child": "children",
        "person": "people",
        "index": "indices",
        "alias": "aliases",
        "criterion": "criteria",
        "analysis": "analyses",
    }
    if lower in {"information", "equipment", "series", "news"}:
        plural = lower
    elif lower in irregulars:
        plural = irregulars[lower]
    elif lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "freeze",
    "mirror",
    "IntrospectableType",
    "pluralize",
)
