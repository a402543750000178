"""
Helmsman faults (user-facing errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by pipeline stage to keep copy consistent and make logs/searches
  predictable.
- CommandException: base type that carries message + options and knows how to render
  itself in a friendly, lowercased and actionable way (rich renderable).
- CommandExit: an ExceptionGroup bundling every fault collected while binding, so the
  user sees all problems in one pass.
- CommandError: the exception command implementations raise to fail with a message
  and an explicit exit code.

UX goals
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The orchestrator catches faults, replaces their runtime options (prog, colorful,
  fancy) with copy.replace() and prints them on the error stream.
- Startup configuration mistakes are not faults: they surface as TypeError/ValueError
  at construction time.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, pluralize

EXIT_FAILURE = 1


class FaultCode(IntEnum):
    """
    canonical fault codes used across the pipeline (stable identifiers).

    grouping (by stage)
    - resolution (1110x)
      • UNKNOWN_COMMAND, MISSING_COMMAND
    - binding (1111x)
      • MISSING_REQUIRED_OPTION, UNRECOGNIZED_OPTION, MISSING_VALUE
    - conversion (1112x)
      • INVALID_VALUE, INVALID_CHOICE
    - execution (1113x)
      • DELEGATED_ERROR

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- resolution errors ---
    UNKNOWN_COMMAND         = 11101
    MISSING_COMMAND         = 11102

    # --- binding errors ---
    MISSING_REQUIRED_OPTION = 11111
    UNRECOGNIZED_OPTION     = 11112
    MISSING_VALUE           = 11113

    # --- conversion errors ---
    INVALID_VALUE           = 11121
    INVALID_CHOICE          = 11122

    # --- execution errors ---
    DELEGATED_ERROR         = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class CommandException(Exception):
    """
    Base class of every user-facing fault raised by the pipeline.

    Options (all optional, merged with copy.replace)
    - title, code, hint: header and guidance lines.
    - prog: program name shown in the header.
    - colorful, fancy: rendering switches (styles / panel chrome).
    - any stage context (input, parameter, values, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    @property
    def code(self):
        return self.options.get("code")

    @property
    def exitcode(self):
        return EXIT_FAILURE

    def __rich__(self):
        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "candidate": "bold #00E5FF",  # neon cyan command candidates
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style)

        segments = ["[ ", text(self.options.get("prog", "helmsman"), styler("prog-name"))]
        if self.code is not None:
            segments += [" — ", text(self.code.normalize(), styler("code"))]
        segments += [" | ", text(self.options.get("title", "error").title(), styler("error-title")), " ]"]
        header = Text.assemble(*segments)

        renders = [text(str(self), styler("error-message"))]
        for candidate in self.options.get("candidates", ()):
            renders.append(Text.assemble("  • ", text(candidate, styler("candidate"))))
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class MissingCommandError(CommandException): ...
class MissingRequiredOptionError(CommandException): ...
class UnrecognizedOptionError(CommandException): ...
class MissingValueError(CommandException): ...
class ConversionError(CommandException): ...
class InvalidValueError(ConversionError): ...
class InvalidChoiceError(ConversionError): ...
class DelegatedCommandError(CommandException): ...


class CommandExit(ExceptionGroup[CommandException]):
    """
    All faults collected for one invocation, reported together.

    Binding raises this instead of the first fault found so that the user can
    fix every problem in a single pass.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    @property
    def exitcode(self):
        return EXIT_FAILURE

    def __rich__(self):
        styles = _palette({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title
        })
        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        title = "%d %s" % (len(self.exceptions), "error" if len(self.exceptions) == 1 else pluralize("error"))
        header = Text.assemble(
            "[ ",
            Text(str(self.options.get("prog", "helmsman")), styler("prog-name")),
            " — ",
            Text(title.title(), styler("title")),
            " ]",
        )

        renders = [copy.replace(exception, **self.options) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


class CommandError(Exception):
    """
    Raised by a command's execute() to fail with a message and an exit code.

    The message is written verbatim to the error stream and exitcode becomes the
    process exit code (1 when omitted).
    """

    def __init__(self, message="", /, exitcode=EXIT_FAILURE):
        if not isinstance(exitcode, int) or isinstance(exitcode, bool):
            raise TypeError("CommandError 'exitcode' must be an integer")
        if not exitcode:
            raise ValueError("CommandError 'exitcode' cannot be zero")
        super().__init__(message)
        self.message = message
        self.exitcode = exitcode


__all__ = (
    "EXIT_FAILURE",
    "FaultCode",
    "CommandException",
    "UnknownCommandError",
    "MissingCommandError",
    "MissingRequiredOptionError",
    "UnrecognizedOptionError",
    "MissingValueError",
    "ConversionError",
    "InvalidValueError",
    "InvalidChoiceError",
    "DelegatedCommandError",
    "CommandExit",
    "CommandError",
)
