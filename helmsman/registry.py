"""
Helmsman descriptor registry and resolver.

CommandRegistry holds every CommandDescriptor of an application. It is immutable
after construction and validated there: duplicate names (including a second
default command) are startup configuration errors.

Hierarchy
- "a b" is a child of "a". The parent of a name is the registered descriptor with
  the longest strict word-prefix, or the default command when none matches.

resolve(registry, parsed) matches ParsedInput.name exactly. It never guesses: the
NotFound outcome is raised as UnknownCommandError/MissingCommandError carrying the
candidates the orchestrator lists to the user.
"""
import difflib
import logging

from .commands import describe
from .faults import FaultCode, MissingCommandError, UnknownCommandError

_log = logging.getLogger(__name__)


class CommandRegistry:
    """
    Immutable collection of command descriptors keyed by name.

    Accepts CommandDescriptor objects or @command-decorated classes; iteration
    follows registration order.

    Raises
    - TypeError: an item is not a descriptor.
    - ValueError: duplicate names, or more than one default command.
    """

    def __init__(self, commands=(), /):
        descriptors = {}
        for object in commands:
            descriptor = describe(object)
            if descriptor.name in descriptors:
                if descriptor.name is None:
                    raise ValueError("only one default command can be registered")
                raise ValueError(f"command {descriptor.name!r} is registered more than once")
            descriptors[descriptor.name] = descriptor
        self._descriptors = descriptors

    @property
    def default(self):
        """The default (nameless) descriptor, or None."""
        return self._descriptors.get(None)

    def find(self, name, /):
        """Return the descriptor registered under name, or None."""
        if isinstance(name, str):
            name = " ".join(name.split())
        return self._descriptors.get(name)

    def parent(self, target, /):
        """
        Return the parent descriptor of a descriptor or a (possibly unregistered) name.

        The default command and None have no parent.
        """
        name = target.name if hasattr(target, "name") else target
        if name is None:
            return None

        words = name.split()
        for index in range(len(words) - 1, 0, -1):
            if (descriptor := self._descriptors.get(" ".join(words[:index]))) is not None:
                return descriptor
        return self.default

    def children(self, target=None, /):
        """
        Return the descriptors whose parent is target, in registration order.

        target may be a descriptor, a name, or None for the root (the default command).
        """
        name = target.name if hasattr(target, "name") else target
        children = []
        for descriptor in self:
            if descriptor.name is None:
                continue
            parent = self.parent(descriptor)
            if (parent.name if parent is not None else None) == name:
                children.append(descriptor)
        return tuple(children)

    def relative(self, descriptor, /):
        """Name of a descriptor relative to its parent ("remote add" -> "add")."""
        if (parent := self.parent(descriptor)) is None or parent.name is None:
            return descriptor.name
        return descriptor.name[len(parent.name):].strip()

    def __iter__(self):
        return iter(self._descriptors.values())

    def __len__(self):
        return len(self._descriptors)

    def __contains__(self, object):
        if hasattr(object, "name"):
            return self._descriptors.get(object.name) is object
        return object in self._descriptors

    def __repr__(self):
        return "command-registry(%s)" % ", ".join(repr(descriptor.name) for descriptor in self)


def resolve(registry, parsed, /):
    """
    Return the descriptor matching parsed.name exactly.

    Raises
    - MissingCommandError: no name was given and no default command is registered.
    - UnknownCommandError: no descriptor carries the given name.
    """
    if (descriptor := registry.find(parsed.name)) is not None:
        _log.debug("resolved %r to %r", parsed.name, descriptor)
        return descriptor

    if parsed.name is None:
        raise MissingCommandError(
            "no command specified",
            title="missing command",
            code=FaultCode.MISSING_COMMAND,
            candidates=tuple(descriptor.name for descriptor in registry.children(None)),
            hint="specify one of the commands listed above" if len(registry) else "no commands are registered",
        )

    parent = registry.parent(parsed.name)
    candidates = tuple(descriptor.name for descriptor in registry.children(parent))
    if matches := difflib.get_close_matches(parsed.name, [descriptor.name for descriptor in registry if descriptor.name], n=1):
        hint = f"did you mean {matches[0]!r}?"
    elif candidates:
        hint = "specify one of the commands listed above"
    else:
        hint = "no commands are registered" if not len(registry) else None

    raise UnknownCommandError(
        f"unknown command {parsed.name!r}",
        title="unknown command",
        code=FaultCode.UNKNOWN_COMMAND,
        input=parsed.name,
        candidates=candidates,
        hint=hint,
    )


__all__ = (
    "CommandRegistry",
    "resolve",
)
