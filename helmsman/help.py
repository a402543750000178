"""
Helmsman help renderer.

Renders the help page of one descriptor through the Console colour helpers:

    <title> <version>                      (default command only)
    <application description>

    Description
      <command description>

    Usage
      <executable> [name] [command] [options]

    Options
      * -i|--inputs      Input values. (required options first, marked "*")
        -h|--help        Shows help text.
        --version        Shows version information. (default command only)

    Commands
      <child>            <child description>

    You can run `<executable> [name] [command] --help` to show help on a specific command.

Colours come from a palette keyed by role, overridable with __styles__ in __main__.
"""
from collections import defaultdict
from enum import Enum

from .arguments import Shape

_HELP = ("-h|--help", "Shows help text.")
_VERSION = ("--version", "Shows version information.")


def _palette():
    return defaultdict(lambda: None, {
        "title": "yellow",
        "version": "bright_white",
        "header": "magenta",
        "command": "cyan",
        "required": "red",
        "option": "bright_white",
        "descr": None,
        "tip": "bright_black",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _describe(parameter):
    parts = [parameter.descr] if parameter.descr else []
    if parameter.shape is not Shape.FLAG and parameter.choices:
        parts.append("Choices: %s." % ", ".join(parameter.symbols))
    if not parameter.required and parameter.shape is not Shape.FLAG and parameter.default not in (None, (), ""):
        default = parameter.default
        if isinstance(default, tuple):
            default = ", ".join(item.name if isinstance(item, Enum) else str(item) for item in default)
        elif isinstance(default, Enum):
            default = default.name
        parts.append(f"Default: {default}.")
    return " ".join(parts)


class HelpRenderer:
    """
    Writes help pages for descriptors of a registry.

    Parameters
    - registry: the CommandRegistry (used to list child commands).
    - metadata: application Metadata (title, executable, version, descr).
    - console: the Console to write through (standard output).
    """

    def __init__(self, registry, metadata, console, /):
        self._registry = registry
        self._metadata = metadata
        self._console = console

    def render(self, descriptor, /):
        styles = _palette()
        console = self._console
        children = self._registry.children(None if descriptor.default else descriptor)

        def header(title):
            console.writeline()
            with console.foreground_color(styles["header"]):
                console.writeline(title)

        if descriptor.default:
            with console.foreground_color(styles["title"]):
                console.write(self._metadata.title)
            console.write(" ")
            with console.foreground_color(styles["version"]):
                console.writeline(self._metadata.version)
            if self._metadata.descr:
                console.writeline(self._metadata.descr)

        if descriptor.descr:
            header("Description")
            with console.foreground_color(styles["descr"]):
                console.write("  ")
                console.writeline(descriptor.descr)

        header("Usage")
        console.write("  ")
        console.write(self._metadata.executable)
        if descriptor.name is not None:
            console.write(" ")
            with console.foreground_color(styles["command"]):
                console.write(descriptor.name)
        if children:
            console.write(" [command]")
        console.writeline(" [options]")

        rows = [
            (parameter.required, "|".join(parameter.names), _describe(parameter))
            for parameter in sorted(descriptor.parameters, key=lambda parameter: not parameter.required)
        ]
        rows.append((False, *_HELP))
        if descriptor.default:
            rows.append((False, *_VERSION))
        width = max(len(label) for _, label, _ in rows) + 2

        header("Options")
        for required, label, text in rows:
            if required:
                with console.foreground_color(styles["required"]):
                    console.write("  * ")
            else:
                console.write("    ")
            with console.foreground_color(styles["option"]):
                console.write(label.ljust(width))
            with console.foreground_color(styles["descr"]):
                console.writeline(text.rstrip())

        if children:
            names = [self._registry.relative(child) for child in children]
            width = max(map(len, names)) + 2

            header("Commands")
            for name, child in zip(names, children):
                console.write("  ")
                with console.foreground_color(styles["command"]):
                    console.write(name.ljust(width))
                with console.foreground_color(styles["descr"]):
                    console.writeline(child.descr or "")

            console.writeline()
            with console.foreground_color(styles["tip"]):
                console.write("You can run `")
                console.write(self._metadata.executable)
                if descriptor.name is not None:
                    console.write(" ")
                    console.write(descriptor.name)
                console.writeline(" [command] --help` to show help on a specific command.")


__all__ = (
    "HelpRenderer",
)
