"""
Helmsman console: the output collaborator of the pipeline.

Console wraps two rich consoles, one for standard output and one for errors, and
keeps a current foreground/background colour applied to plain text writes. The
scoped helpers colors(), foreground_color() and background_color() capture the
prior colour state, apply a new one and restore it on every exit path.

Text is written literally: rich markup, emoji codes and syntax highlighting are
disabled so user data is never reinterpreted. Colour output follows rich's
terminal detection (and NO_COLOR); constructing with colorful=False disables it.
"""
from contextlib import contextmanager

import rich.console
from rich.style import Style
from rich.text import Text

from .utils import Unset, coalesce


class Console:
    """
    Pair of output streams with mutable colour state.

    Parameters
    - stdout, stderr: optional text streams (e.g., io.StringIO in tests). When
      omitted, the process streams are used.
    - colorful: False disables every colour.
    """

    def __init__(self, stdout=Unset, stderr=Unset, /, *, colorful=True):
        options = {
            "markup": False,
            "highlight": False,
            "emoji": False,
            "soft_wrap": True,
            "no_color": not colorful,
        }
        self._output = rich.console.Console(file=coalesce(stdout), **options)
        self._error = rich.console.Console(file=coalesce(stderr), stderr=True, **options)
        self._foreground = None
        self._background = None

    @property
    def output(self):
        """The rich console writing to standard output."""
        return self._output

    @property
    def error(self):
        """The rich console writing to the error stream."""
        return self._error

    @property
    def foreground(self):
        return self._foreground

    @foreground.setter
    def foreground(self, color):
        Style(color=color)
        self._foreground = color

    @property
    def background(self):
        return self._background

    @background.setter
    def background(self, color):
        Style(bgcolor=color)
        self._background = color

    def reset(self):
        """Drop the foreground and background colours."""
        self._foreground = None
        self._background = None

    def write(self, text="", /, *, stderr=False):
        """Write text without a trailing newline, in the current colours."""
        self._target(stderr).print(self._text(text), end="")

    def writeline(self, text="", /, *, stderr=False):
        """Write text followed by a newline, in the current colours."""
        self._target(stderr).print(self._text(text))

    def render(self, renderable, /, *, stderr=False):
        """Print a rich renderable (faults, panels, tables) as is."""
        self._target(stderr).print(renderable)

    @contextmanager
    def colors(self, foreground=Unset, background=Unset):
        """
        Apply foreground/background colours for the duration of the block.

        Unset leaves the corresponding colour unchanged; the prior state is
        restored even when the block raises.
        """
        state = self._foreground, self._background
        try:
            if foreground is not Unset:
                self.foreground = foreground
            if background is not Unset:
                self.background = background
            yield self
        finally:
            self._foreground, self._background = state

    def foreground_color(self, color, /):
        return self.colors(foreground=color)

    def background_color(self, color, /):
        return self.colors(background=color)

    def _target(self, stderr):
        return self._error if stderr else self._output

    def _text(self, text):
        return Text(str(text), style=Style(color=self._foreground, bgcolor=self._background))


__all__ = (
    "Console",
)
