r"""
Helmsman parameter descriptors.

Overview
- Specs
  • Option[_T]: named, value-bearing parameter (scalar, enumerated or ordered sequence).
  • Flag: named, presence-only switch (boolean), e.g. -v/--verbose.
  Both derive from Parameter, which also makes them Python data descriptors: declared
  as class attributes of a command, reading the attribute on a bound instance yields
  the converted value or the declared default.

- Shapes
  • Shape.FLAG, Shape.SCALAR, Shape.ENUMERATED, Shape.SEQUENCE are derived from the
    declaration (Flag; Option; Option with choices or an Enum type; Option(nargs="*")).

Metadata (sanitized on construction)
- names: at most one short alias ("-x", a single letter) and at most one long alias
  ("--name", two characters or more); at least one is required.
- dest: attribute name on the command instance. Taken from the class attribute name
  (__set_name__) or derived from the long/short alias.
- required: bool. descr: Unset | str (non-empty when provided).
- Option only: type (converter target), nargs (Unset | "*"), choices, metavar.

Validation highlights
- Names must match r"-[^\W\d_]" or r"--[^\W\d_](-?[^\W_]+)+" and be unique within a command.
- Choices reject duplicates. Enum types imply their members as choices.
- descr/metavar strings are trimmed; empty strings are rejected.
- An explicit dest must match the attribute name the parameter is bound to.

Quick example:
    >>> from helmsman.arguments import Option, Flag
    >>> inputs = Option("-i", "--inputs", nargs="*", required=True)
    >>> count = Option("-c", "--count", type=int, default=1)
    >>> verbose = Flag("-v", "--verbose")
"""
import builtins
import enum
import re
from collections.abc import Iterable
from enum import Enum

from .utils import *


class Shape(Enum):
    """
    Target shape of a parameter: how many raw values it takes and how they convert.
    """
    FLAG = "boolean-flag"
    SCALAR = "scalar"
    ENUMERATED = "enumerated-scalar"
    SEQUENCE = "ordered-sequence"


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every parameter.

    - names: each must be a string matching the short or long pattern. At most one
      short and one long alias; duplicates are rejected. Normalized to a tuple
      ordered short-first.
    - descr: Unset | str. If provided, must be non-empty after trimming; becomes None
      when Unset.
    - dest: Unset | str. If provided, must be a valid identifier.

    Raises
    - TypeError: wrong types or no names at all.
    - ValueError: malformed names, duplicates, empty strings.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    shorts = []
    longs = []
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"-[^\W\d_]", name):
            shorts.append(name)
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)+", name):
            longs.append(name)
        else:
            raise ValueError(
                f"{cls.__typename__} name {name!r} must be a single-letter short name (-x) "
                f"or a long name of two characters or more (--name)"
            )

    if len(shorts) > 1:
        raise ValueError(f"{cls.__typename__} cannot have more than one short name")
    if len(longs) > 1:
        raise ValueError(f"{cls.__typename__} cannot have more than one long name")

    metadata["names"] = tuple(shorts + longs)

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not isinstance(dest := metadata["dest"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'dest' must be a string")
    elif isinstance(dest, str) and not dest.isidentifier():
        raise ValueError(f"{cls.__typename__} 'dest' must be a valid identifier")

    # Default destination: long alias first ("--dry-run" -> "dry_run"), then short alias.
    metadata["dest"] = coalesce(dest, metadata["names"][-1].lstrip("-").replace("-", "_"))

    metadata["required"] = bool(metadata["required"])


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata for value-bearing parameters.

    - type: must be callable (converter target). Enum subclasses imply their members
      as choices when no explicit choices are given.
    - nargs: Unset (scalar) or "*" (ordered sequence).
    - choices: iterable without duplicates; normalized to a tuple.
    - metavar: Unset | non-empty string; becomes None when Unset.
    - default: Unset resolves to () for sequences and None for scalars.
    """
    if not callable(type := metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(nargs := metadata["nargs"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'nargs' must be a string")
    if isinstance(nargs, str) and nargs != "*":
        raise ValueError(f"{cls.__typename__} 'nargs' must be '*'")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be iterable")
    sanitized = []
    for choice in choices:
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    if not sanitized and isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        sanitized = list(type)
    metadata["choices"] = tuple(sanitized)

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)

    metadata["default"] = freeze(coalesce(metadata["default"], () if nargs == "*" else None))


class Parameter(metaclass=IntrospectableType):
    """
    Common base of Option and Flag.

    Besides carrying the sanitized metadata, a Parameter is a data descriptor: when
    declared as a class attribute of a command, reading it on an instance returns the
    bound value (or the declared default) and assigning stores the value on the
    instance.
    """

    __introspectable__ = ("names", "dest", "required", "default", "descr")

    def __init__(self, metadata, /, explicit=False):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._explicit = explicit
        self._attribute = Unset

    @property
    def short(self):
        """Short alias without the dash, or None."""
        for name in self._names:
            if not name.startswith("--"):
                return name[1:]
        return None

    @property
    def long(self):
        """Long alias without the dashes, or None."""
        for name in self._names:
            if name.startswith("--"):
                return name[2:]
        return None

    @property
    def aliases(self):
        """Option keys answering to this parameter as typed, short alias first."""
        return self._names

    @property
    def shape(self):
        raise NotImplementedError

    @property
    def symbols(self):
        return ()

    def __set_name__(self, owner, name):
        if self._attribute is not Unset:
            raise TypeError(f"{type(self).__typename__} {self} is already declared as {self._attribute!r}")
        if self._explicit and self._dest != name:
            raise TypeError(
                f"{type(self).__typename__} {self} declares dest {self._dest!r} "
                f"but is bound to attribute {name!r}"
            )
        self._attribute = name
        self._dest = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self._dest, self._default)

    def __set__(self, instance, value):
        instance.__dict__[self._dest] = value

    def __str__(self):
        return "|".join(self._names)


class Option[_T](Parameter):
    """
    Named, value-bearing parameter specification.

    Option[_T] declares how a named option (e.g., -o/--output) is converted, validated
    and rendered in help.

    Highlights
    - Generic over the payload type _T (converter target given via 'type').
    - Scalar by default; nargs="*" makes it an ordered sequence whose elements follow
      the scalar (or enumerated) rule.
    - Enumerated when 'choices' are given or 'type' is an Enum subclass; matching is
      case-insensitive.
    """

    __introspectable__ = (
        "names",
        "dest",
        "type",
        "nargs",
        "default",
        "choices",
        "required",
        "metavar",
        "descr",
    )

    def __init__(
            self,
            *names,
            type=str,
            nargs=Unset,
            default=Unset,
            choices=(),
            required=False,
            metavar=Unset,
            descr=Unset,
            dest=Unset
    ):
        metadata = {
            "names": names,
            "type": type,
            "nargs": nargs,
            "default": default,
            "choices": choices,
            "required": required,
            "metavar": metavar,
            "descr": descr,
            "dest": dest,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        super().__init__(metadata, explicit=dest is not Unset)

    @property
    def shape(self):
        if self._nargs == "*":
            return Shape.SEQUENCE
        if self._choices:
            return Shape.ENUMERATED
        return Shape.SCALAR

    @property
    def symbols(self):
        """Spellings accepted for each declared choice (Enum members by name)."""
        return tuple(choice.name if isinstance(choice, Enum) else str(choice) for choice in self._choices)


class Flag(Parameter):
    """
    Named, presence-only parameter specification.

    A Flag converts to True when specified without a value. An explicit boolean literal
    ("-f false") is accepted as well.
    """

    __introspectable__ = (
        "names",
        "dest",
        "required",
        "default",
        "descr",
    )

    type = bool
    choices = ()

    def __init__(self, *names, required=False, default=False, descr=Unset, dest=Unset):
        metadata = {
            "names": names,
            "required": required,
            "default": bool(default),
            "descr": descr,
            "dest": dest,
        }
        _sanitize_metadata(type(self), metadata)
        super().__init__(metadata, explicit=dest is not Unset)

    @property
    def shape(self):
        return Shape.FLAG


__all__ = (
    "Shape",
    "Parameter",
    "Option",
    "Flag",
)
