"""
Helmsman command descriptors.

Overview
- Command: abstract base of every command implementation. Subclasses declare their
  parameters as class attributes (Option/Flag) and implement execute(console), which
  may be a plain method or a coroutine.
- CommandDescriptor: immutable, validated shape of one command (name, description,
  ordered parameters) plus the factory creating fresh instances to bind onto.
- command: decorator turning a Command subclass into a registered-ready command by
  gathering its parameters into a descriptor stored on cls.__descriptor__.

Naming
- The default command has no name (None). Named commands form a hierarchy by word
  prefix: "remote add" is a child of "remote".

Validation (startup configuration errors, raised immediately)
- Short aliases, long aliases and destinations are unique within a descriptor.
- -h/--help are reserved on every command; --version is reserved on the default one.

Quick example:
    >>> from helmsman import Command, Option, command
    >>> @command("div")
    ... class DivideCommand(Command):
    ...     dividend = Option("-D", "--dividend", type=int, required=True)
    ...     divisor = Option("-d", "--divisor", type=int, required=True)
    ...
    ...     def execute(self, console):
    ...         console.writeline(self.dividend // self.divisor)
"""
import inspect
import types
from abc import ABC, abstractmethod

from .arguments import Parameter
from .utils import *

_RESERVED = frozenset({"-h", "--help"})
_RESERVED_DEFAULT = frozenset({"--version"})


class Command(ABC):
    """
    Abstract base of command implementations.

    The orchestrator holds only this capability: after binding it calls
    execute(console) and awaits the result when it is awaitable. Raise
    helmsman.CommandError to fail with a message and an explicit exit code.
    """
    __descriptor__ = None

    @abstractmethod
    def execute(self, console):
        """Perform the command's effect, writing through the given console."""
        raise NotImplementedError


def _sanitize_name(cls, metadata, /):
    if metadata["name"] is None:
        return
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string or None")
    if not (words := name.split()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty, use None for the default command")
    for word in words:
        if word.startswith("-"):
            raise ValueError(f"{cls.__typename__} name word {word!r} cannot start with '-'")
        if word.startswith("[") and word.endswith("]"):
            raise ValueError(f"{cls.__typename__} name word {word!r} cannot be a directive")
    metadata["name"] = " ".join(words)


def _sanitize_parameters(cls, metadata, /):
    parameters = tuple(metadata["parameters"])
    reserved = _RESERVED | (_RESERVED_DEFAULT if metadata["name"] is None else frozenset())

    seen = {}
    for parameter in parameters:
        if not isinstance(parameter, Parameter):
            raise TypeError(f"{cls.__typename__} parameters must be options or flags")
        for alias in parameter.aliases:
            if alias in reserved:
                raise ValueError(
                    f"{cls.__typename__} {metadata['name'] or '(default)'!r} cannot declare "
                    f"reserved option {alias}"
                )
            if alias in seen:
                raise ValueError(
                    f"{cls.__typename__} {metadata['name'] or '(default)'!r} declares "
                    f"{alias!r} twice ({seen[alias]} and {parameter})"
                )
            seen[alias] = parameter

    destinations = [parameter.dest for parameter in parameters]
    for index, dest in enumerate(destinations):
        if dest in destinations[:index]:
            raise ValueError(f"{cls.__typename__} destination {dest!r} is used by more than one parameter")

    metadata["parameters"] = parameters


def _sanitize_strings(cls, metadata, /):
    if not isinstance(descr := metadata["descr"], str | Unset | None):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = (descr.strip() or None) if isinstance(descr, str) else None

    if not callable(factory := metadata["factory"]) and factory is not Unset:
        raise TypeError(f"{cls.__typename__} 'factory' must be callable")
    metadata["factory"] = coalesce(factory, types.SimpleNamespace)


class CommandDescriptor(metaclass=IntrospectableType):
    """
    Immutable, validated metadata of a command.

    Parameters
    - name: None for the default command, otherwise one or more words. Whitespace
      runs are collapsed ("remote   add" -> "remote add").
    - parameters: ordered iterable of Option/Flag.
    - descr: optional description shown in help.
    - factory: zero-argument callable returning a fresh instance to bind onto.
      Defaults to types.SimpleNamespace for descriptors built by hand.

    Raises
    - TypeError/ValueError: on malformed names, clashing aliases or destinations,
      and reserved spellings.
    """

    __introspectable__ = ("name", "descr", "parameters", "factory")
    __displayable__ = ("name", "descr", "parameters")

    def __init__(self, name=None, /, parameters=(), descr=Unset, *, factory=Unset):
        metadata = {
            "name": name,
            "parameters": parameters,
            "descr": descr,
            "factory": factory,
        }
        _sanitize_name(type(self), metadata)
        _sanitize_parameters(type(self), metadata)
        _sanitize_strings(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def default(self):
        """True for the nameless (default) command."""
        return self._name is None

    @property
    def words(self):
        return tuple(self._name.split()) if self._name is not None else ()

    def find(self, key, /):
        """Return the parameter answering to the option key as typed ("-k", "--key"), or None."""
        for parameter in self._parameters:
            if key in parameter.aliases:
                return parameter
        return None

    def __str__(self):
        return self._name if self._name is not None else ""


def describe(object, /):
    """
    Return the CommandDescriptor of a descriptor or of a @command-decorated class.

    Raises
    - TypeError: when object is neither.
    """
    if isinstance(object, CommandDescriptor):
        return object
    if isinstance(object, type) and isinstance(object.__dict__.get("__descriptor__"), CommandDescriptor):
        return object.__descriptor__
    raise TypeError(f"{object!r} is not a command descriptor nor a @command-decorated class")


def command(source=Unset, /, *, descr=Unset):
    """
    Turn a Command subclass into a command, or return a decorator doing so.

    Invocation modes
    - @command: the default (nameless) command.
    - @command("name") / @command("parent child"): a named command.
    - @command(None, descr="...") / @command(descr="..."): the default command with an
      explicit description.

    Parameters are gathered from the class attributes across the MRO (base classes
    first, overrides keep their position). The description defaults to the class
    docstring.

    Returns
    - the class itself, with its CommandDescriptor stored on __descriptor__.
    """
    name = None

    @rename("command")
    def wrapper(cls, /):
        if not isinstance(cls, type) or not issubclass(cls, Command):
            raise TypeError("@command() must be applied to a Command subclass")

        parameters = {}
        for base in reversed(cls.__mro__):
            for attribute, object in vars(base).items():
                if isinstance(object, Parameter):
                    parameters[attribute] = object
                else:
                    parameters.pop(attribute, None)

        cls.__descriptor__ = CommandDescriptor(
            name,
            tuple(parameters.values()),
            coalesce(descr, inspect.cleandoc(cls.__doc__) if cls.__doc__ else Unset),
            factory=cls,
        )
        return cls

    if isinstance(source, type):
        return wrapper(source)
    if not isinstance(source, str | Unset | None):
        raise TypeError("@command() argument must be a string, None or a Command subclass")
    name = coalesce(source)
    return wrapper


__all__ = (
    "Command",
    "CommandDescriptor",
    "command",
    "describe",
)
