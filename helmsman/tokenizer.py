"""
Helmsman tokenizer: raw argument vector -> ParsedInput.

Classification is purely syntactic and never consults a command descriptor:
- directive: a bracketed token without whitespace, e.g. "[preview]";
- long option key: "--" followed by at least one character ("--name");
- short option key: "-" followed by exactly one character ("-n");
- anything else: a command name word (before the first option key) or a value
  of the most recent option key.

Directives may appear anywhere; they are collected in encounter order and never
count as names or values. Malformed input is not an error here: resolution and
binding report precise faults later.
"""
import re
import shlex
from collections import namedtuple
from collections.abc import Iterable

_DIRECTIVE = re.compile(r"\[[^\s\[\]]+\]")


def _iskey(token):
    if token.startswith("--"):
        return len(token) > 2
    return token.startswith("-") and len(token) == 2


class OptionInput(namedtuple("OptionInput", ("key", "values"))):
    """
    One option occurrence: the key as typed ("-k" or "--key") and its raw values.

    Short and long spellings stay distinct: "--k" never answers to the alias "-k".
    """
    __slots__ = ()

    @property
    def long(self):
        return self.key.startswith("--")

    def __str__(self):
        return shlex.join((self.key, *self.values))


class ParsedInput(namedtuple("ParsedInput", ("name", "directives", "options"))):
    """
    Immutable tokenizer output.

    Fields
    - name: command name words joined by single spaces, or None.
    - directives: directive names without brackets, in encounter order.
    - options: OptionInput entries in encounter order; keys keep their dashes and may repeat.
    """
    __slots__ = ()

    def has(self, *keys):
        """True when any option entry uses one of keys."""
        return any(option.key in keys for option in self.options)

    def values(self, *keys):
        """Raw values of every entry matching keys, concatenated in encounter order."""
        return tuple(value for option in self.options if option.key in keys for value in option.values)

    def directive(self, name, /):
        """True when the directive was given (case-insensitive, brackets optional)."""
        name = name.removeprefix("[").removesuffix("]").casefold()
        return any(directive.casefold() == name for directive in self.directives)

    def tokens(self):
        """Re-serialize into an argument list that tokenizes back to an equal value."""
        tokens = ["[%s]" % directive for directive in self.directives]
        if self.name is not None:
            tokens.extend(self.name.split(" "))
        for option in self.options:
            tokens.append(option.key)
            tokens.extend(option.values)
        return tokens

    def __str__(self):
        return shlex.join(self.tokens())


def tokenize(args, /):
    """
    Split an argument vector into directives, command name and option entries.

    Never fails on string input; raises TypeError only when args is not an
    iterable of strings.
    """
    if isinstance(args, str) or not isinstance(args, Iterable):
        raise TypeError("tokenize() argument must be an iterable of strings")

    directives = []
    words = []
    options = []
    for token in args:
        if not isinstance(token, str):
            raise TypeError("tokenize() argument must be an iterable of strings")
        if _DIRECTIVE.fullmatch(token):
            directives.append(token[1:-1])
        elif _iskey(token):
            options.append((token, []))
        elif options:
            options[-1][1].append(token)
        else:
            words.extend(token.split())

    return ParsedInput(
        " ".join(words) or None,
        tuple(directives),
        tuple(OptionInput(key, tuple(values)) for key, values in options),
    )


__all__ = (
    "OptionInput",
    "ParsedInput",
    "tokenize",
)
