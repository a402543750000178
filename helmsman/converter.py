"""
Helmsman value converter: raw strings -> typed parameter values.

Rules per parameter shape
- FLAG: no values -> True. Supplied values must be boolean literals
  (true/false, yes/no, on/off, 1/0; case-insensitive); the last one wins.
- SCALAR: the last value wins and is parsed invariantly for the declared type.
  Zero values is a MissingValueError.
- ENUMERATED: case-insensitive match against the declared symbols (Enum member
  names or the string form of each choice); the declared object is returned.
- SEQUENCE: every value converted independently with the scalar/enumerated rule,
  order preserved; no values -> ().

Numbers are plain literals: digit separators ("1_000") are rejected for int,
float and Decimal alike. Whatever a parser raises becomes an InvalidValueError.

Parsers
- Built in: str, int, float, bool, Decimal, datetime, date, time, timedelta, Path.
- Any other callable type is called with the raw string.
- Converter({MyType: parse}) adds or overrides parsers.

Conversions are pure: a Converter holds no per-call state and can be shared.
"""
import datetime
import decimal
import pathlib
import re
from types import MappingProxyType

from .arguments import Shape
from .faults import FaultCode, InvalidChoiceError, InvalidValueError, MissingValueError
from .utils import Unset

_BOOLEANS = MappingProxyType({
    "true": True, "yes": True, "on": True, "1": True,
    "false": False, "no": False, "off": False, "0": False,
})

_TIMEDELTA = re.compile(
    r"(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d+):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2}(?:\.\d+)?))?"
)


def _parse_bool(value):
    try:
        return _BOOLEANS[value.strip().casefold()]
    except KeyError:
        raise ValueError(f"invalid boolean literal: {value!r}") from None


def _parse_int(value):
    # int() also accepts digit separators ("1_000"); keep plain decimal digits only.
    if not re.fullmatch(r"\s*[+-]?\d+\s*", value):
        raise ValueError(f"invalid integer literal: {value!r}")
    return int(value)


def _parse_float(value):
    if "_" in value:
        raise ValueError(f"invalid number literal: {value!r}")
    return float(value)


def _parse_decimal(value):
    if "_" in value:
        raise ValueError(f"invalid decimal literal: {value!r}")
    return decimal.Decimal(value)


def _parse_timedelta(value):
    """
    Accepts "[-][d.]hh:mm[:ss[.fff]]" or a number of seconds ("90", "1.5").
    """
    if match := _TIMEDELTA.fullmatch(value.strip()):
        delta = datetime.timedelta(
            days=int(match["days"] or 0),
            hours=int(match["hours"]),
            minutes=int(match["minutes"]),
            seconds=float(match["seconds"] or 0),
        )
        return -delta if match["sign"] else delta
    return datetime.timedelta(seconds=_parse_float(value))


PARSERS = MappingProxyType({
    str: str,
    int: _parse_int,
    float: _parse_float,
    bool: _parse_bool,
    decimal.Decimal: _parse_decimal,
    datetime.datetime: datetime.datetime.fromisoformat,
    datetime.date: datetime.date.fromisoformat,
    datetime.time: datetime.time.fromisoformat,
    datetime.timedelta: _parse_timedelta,
    pathlib.Path: pathlib.Path,
})


def _typename(type):
    return getattr(type, "__name__", None) or repr(type)


class Converter:
    """
    Stateless converter from raw strings to typed values.

    Parameters
    - parsers: optional mapping of type -> callable(str) extending or overriding
      the built-in PARSERS.
    """

    def __init__(self, parsers=Unset, /):
        merged = dict(PARSERS)
        if parsers is not Unset:
            for type, parser in dict(parsers).items():
                if not callable(parser):
                    raise TypeError(f"Converter parser for {_typename(type)} must be callable")
                merged[type] = parser
        self._parsers = MappingProxyType(merged)

    @property
    def parsers(self):
        return self._parsers

    def convert(self, values, parameter, /):
        """
        Convert the raw values supplied for parameter according to its shape.

        Raises
        - MissingValueError: a scalar received no value.
        - InvalidValueError: a value does not parse for the declared type.
        - InvalidChoiceError: a value matches none of the declared symbols.
        """
        values = tuple(values)
        match parameter.shape:
            case Shape.FLAG:
                result = True
                for value in values:
                    result = self._parse(value, bool, parameter)
                return result
            case Shape.SCALAR | Shape.ENUMERATED:
                if not values:
                    raise MissingValueError(
                        f"option {parameter} expects a value",
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        parameter=str(parameter),
                        hint=f"pass a value after {parameter.names[-1]}",
                    )
                return self._element(values[-1], parameter)
            case Shape.SEQUENCE:
                return tuple(self._element(value, parameter) for value in values)
        raise TypeError(f"unsupported parameter shape: {parameter.shape!r}")

    def _element(self, value, parameter):
        if parameter.choices:
            return self._choose(value, parameter)
        return self._parse(value, parameter.type, parameter)

    def _choose(self, value, parameter):
        folded = value.strip().casefold()
        for symbol, choice in zip(parameter.symbols, parameter.choices):
            if symbol.casefold() == folded:
                return choice
        raise InvalidChoiceError(
            f"option {parameter} does not accept {value!r}",
            title="invalid choice",
            code=FaultCode.INVALID_CHOICE,
            parameter=str(parameter),
            value=value,
            hint="valid values: %s" % ", ".join(parameter.symbols),
        )

    def _parse(self, value, type, parameter):
        parser = self._parsers.get(type, type)
        try:
            return parser(value)
        except Exception as exception:
            raise InvalidValueError(
                f"option {parameter} cannot convert {value!r} to {_typename(type)}",
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                parameter=str(parameter),
                value=value,
                type=_typename(type),
                hint=str(exception) or None,
            ) from exception


_default = Converter()


def convert(values, parameter, /):
    """Convert raw values for parameter with the built-in parsers."""
    return _default.convert(values, parameter)


__all__ = (
    "PARSERS",
    "Converter",
    "convert",
)
