"""
Helmsman application: the orchestrator of one invocation.

Pipeline (strictly forward, no stage is revisited)
    START -> TOKENIZED -> DIRECTIVES -> RESOLVED -> BOUND -> EXECUTED -> REPORTED
                                                                      \\-> FAILED

1. Tokenize the argument vector (never fails).
2. --version on the default path (no command name) prints the version, exit 0.
3. Resolve the command name. A resolution fault renders the root listing when
   help was requested (exit 0), otherwise the fault and its candidates (exit 1).
4. [preview] prints the resolved command and the parsed options without binding
   or executing (exit 0). Unknown directives are ignored.
5. -h/--help renders the help page of the resolved command (exit 0).
6. Bind. CommandExit prints every collected fault (exit 1).
7. Execute; awaitable results are awaited. CommandError writes its message and
   exits with its code; other exceptions are reported as a delegated error
   (exit 1). BaseExceptions such as KeyboardInterrupt propagate.

Every fault is handled here: nothing raised by tokenizing, resolving or binding
escapes run()/run_async(). Startup configuration errors (bad descriptors,
duplicate names) are raised by the constructor.
"""
import asyncio
import copy
import inspect
import logging
import os
import shlex
import sys
from collections import namedtuple
from collections.abc import Iterable
from enum import Enum

from .binder import bind
from .commands import CommandDescriptor
from .console import Console
from .converter import Converter
from .faults import (
    EXIT_FAILURE,
    CommandError,
    CommandException,
    CommandExit,
    DelegatedCommandError,
    FaultCode,
)
from .help import HelpRenderer
from .registry import CommandRegistry, resolve
from .tokenizer import tokenize
from .utils import Unset, coalesce

_log = logging.getLogger(__name__)

EXIT_SUCCESS = 0


class Stage(Enum):
    """Orchestration states, logged on every transition."""
    START = "start"
    TOKENIZED = "tokenized"
    DIRECTIVES = "directive-check"
    RESOLVED = "resolved"
    BOUND = "bound"
    EXECUTED = "executed"
    REPORTED = "reported"
    FAILED = "failed"


class Metadata(namedtuple("Metadata", ("title", "executable", "version", "descr"))):
    """Application information shown by help and --version."""
    __slots__ = ()


def _program():
    return getattr(__import__("__main__"), "__prog__", None) or os.path.basename(sys.argv[0]) or "helmsman"


def _arguments(args):
    if args is Unset:
        return sys.argv[1:]
    if isinstance(args, str):
        return shlex.split(args)
    if isinstance(args, Iterable):
        arguments = list(args)
        for argument in arguments:
            if not isinstance(argument, str):
                raise TypeError("run() argument must be a string or an iterable of strings")
        return arguments
    raise TypeError("run() argument must be a string or an iterable of strings")


class Application:
    """
    Command-line application built from registered commands.

    Parameters
    - commands: iterable of @command-decorated classes or CommandDescriptors.
    - title, executable: names shown in help (default: __main__.__prog__ or argv[0]).
    - version: version text printed by --version (default "1.0.0").
    - descr: application description shown in root help.
    - console: Console to write through (default: process streams).
    - converter: Converter used by binding (default: built-in parsers).
    - factory: optional callable(descriptor) -> instance for dependency injection.
    - colorful, fancy: fault rendering switches (styles, panel chrome).

    Raises
    - TypeError/ValueError: invalid descriptors or duplicate command names.
    """

    def __init__(
            self,
            commands=(),
            /,
            *,
            title=Unset,
            executable=Unset,
            version=Unset,
            descr=Unset,
            console=Unset,
            converter=Unset,
            factory=Unset,
            colorful=True,
            fancy=False
    ):
        for name, object in (("title", title), ("executable", executable), ("version", version)):
            if not isinstance(object, str | Unset) or (isinstance(object, str) and not object.strip()):
                raise TypeError(f"Application {name!r} must be a non-empty string")
        if not isinstance(descr, str | Unset | None):
            raise TypeError("Application 'descr' must be a string")
        if not callable(factory) and factory is not Unset:
            raise TypeError("Application 'factory' must be callable")

        self._registry = CommandRegistry(commands)
        self._metadata = Metadata(
            coalesce(title, _program()),
            coalesce(executable, _program()),
            coalesce(version, "1.0.0"),
            coalesce(descr),
        )
        self._console = console if console is not Unset else Console(colorful=colorful)
        self._converter = converter if converter is not Unset else Converter()
        self._factory = factory
        self._options = {"prog": self._metadata.executable, "colorful": bool(colorful), "fancy": bool(fancy)}

    @property
    def registry(self):
        return self._registry

    @property
    def metadata(self):
        return self._metadata

    @property
    def console(self):
        return self._console

    def run(self, args=Unset, /):
        """
        Run one invocation synchronously and return its exit code.

        args: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.
        """
        return asyncio.run(self.run_async(args))

    async def run_async(self, args=Unset, /):
        """Run one invocation, awaiting asynchronous commands, and return its exit code."""
        stage = Stage.START
        _log.debug("stage %s", stage.value)

        parsed = tokenize(_arguments(args))
        stage = self._advance(stage, Stage.TOKENIZED, parsed)

        # An empty registry fails every invocation, help and version included.
        if parsed.name is None and parsed.has("--version") and len(self._registry):
            self._console.writeline(self._metadata.version)
            return self._finish(stage, EXIT_SUCCESS, "version")

        stage = self._advance(stage, Stage.DIRECTIVES, parsed.directives)
        for directive in parsed.directives:
            if directive.casefold() != "preview":
                _log.debug("ignoring unknown directive [%s]", directive)

        try:
            descriptor = resolve(self._registry, parsed)
        except CommandException as fault:
            if parsed.has("-h", "--help") and len(self._registry):
                self._help(self._registry.default or CommandDescriptor(None))
                return self._finish(stage, EXIT_SUCCESS, "root help")
            self._report(fault)
            return self._finish(stage, fault.exitcode, "unresolved")
        stage = self._advance(stage, Stage.RESOLVED, descriptor.name)

        if parsed.directive("preview"):
            self._preview(descriptor, parsed)
            return self._finish(stage, EXIT_SUCCESS, "preview")

        if parsed.has("-h", "--help"):
            self._help(descriptor)
            return self._finish(stage, EXIT_SUCCESS, "help")

        try:
            instance = bind(descriptor, parsed, self._converter, factory=self._factory)
        except CommandExit as group:
            self._report(group)
            return self._finish(stage, group.exitcode, "%d binding fault(s)" % len(group.exceptions))
        stage = self._advance(stage, Stage.BOUND, instance)

        try:
            result = instance.execute(self._console)
            if inspect.isawaitable(result):
                await result
        except CommandError as error:
            if error.message:
                self._console.writeline(error.message, stderr=True)
            return self._finish(stage, error.exitcode, "command error")
        except (CommandException, CommandExit) as fault:
            self._report(fault)
            return self._finish(stage, fault.exitcode, "command fault")
        except Exception as exception:
            _log.debug("command %r raised", descriptor.name, exc_info=exception)
            self._report(DelegatedCommandError(
                str(exception) or type(exception).__name__,
                title="command failed",
                code=FaultCode.DELEGATED_ERROR,
                exception=exception,
            ))
            return self._finish(stage, EXIT_FAILURE, "delegated error")
        stage = self._advance(stage, Stage.EXECUTED, descriptor.name)

        return self._finish(stage, EXIT_SUCCESS, "success")

    def _advance(self, current, stage, detail):
        _log.debug("stage %s -> %s (%r)", current.value, stage.value, detail)
        return stage

    def _finish(self, current, exitcode, reason):
        stage = Stage.REPORTED if exitcode == EXIT_SUCCESS else Stage.FAILED
        _log.debug("stage %s -> %s (%s, exit code %d)", current.value, stage.value, reason, exitcode)
        return exitcode

    def _report(self, fault):
        self._console.render(copy.replace(fault, **self._options), stderr=True)

    def _help(self, descriptor):
        HelpRenderer(self._registry, self._metadata, self._console).render(descriptor)

    def _preview(self, descriptor, parsed):
        with self._console.foreground_color("cyan"):
            self._console.write(descriptor.name if descriptor.name is not None else "(default)")
        for option in parsed.options:
            self._console.write(" ")
            with self._console.foreground_color("bright_white"):
                self._console.write("[%s]" % option)
        self._console.writeline()


def invoke(commands, args=Unset, /, **options):
    """
    Build an Application from commands (or reuse one) and run it.

    Returns the exit code, suitable for sys.exit().
    """
    if isinstance(commands, type | CommandDescriptor):
        commands = (commands,)
    application = commands if isinstance(commands, Application) else Application(commands, **options)
    return application.run(args)


__all__ = (
    "EXIT_SUCCESS",
    "Stage",
    "Metadata",
    "Application",
    "invoke",
)
