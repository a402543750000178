"""
Helmsman binder: resolved descriptor + ParsedInput -> populated command instance.

Each parameter collects the values of every option entry typed as its short or
long alias, in encounter order, so both spellings feed the same parameter.
Sequences keep all values (an alias given alone yields an empty sequence);
scalars and flags keep the last one (see converter).

Every problem is collected before anything is instantiated:
- a required parameter with no entry -> one MissingRequiredOptionError;
- a key matching no parameter -> one UnrecognizedOptionError per distinct key;
- conversion faults of each parameter.
When any fault is found, CommandExit (an ExceptionGroup of all of them) is raised
and no instance is created.
"""
import logging

from .arguments import Shape
from .converter import Converter
from .faults import (
    CommandExit,
    FaultCode,
    MissingRequiredOptionError,
    MissingValueError,
    UnrecognizedOptionError,
    ConversionError,
)
from .utils import Unset, coalesce

_log = logging.getLogger(__name__)
_converter = Converter()


def bind(descriptor, parsed, converter=Unset, /, *, factory=Unset):
    """
    Convert and assign the parsed option values onto a fresh command instance.

    Parameters
    - descriptor: the resolved CommandDescriptor.
    - parsed: the ParsedInput of this invocation.
    - converter: Converter to use (a default one when Unset).
    - factory: optional callable(descriptor) -> instance replacing descriptor.factory.

    Returns
    - the instance, with supplied parameters set and the others at their defaults.

    Raises
    - CommandExit: grouping every validation fault found.
    """
    converter = coalesce(converter, _converter)
    faults = []
    bound = {}

    for parameter in descriptor.parameters:
        if not parsed.has(*parameter.aliases):
            if parameter.required:
                faults.append(MissingRequiredOptionError(
                    f"missing required option {parameter}",
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    parameter=str(parameter),
                    hint=f"pass {parameter.names[-1]}" + ("" if parameter.shape is Shape.FLAG else " with a value"),
                ))
            continue

        try:
            bound[parameter.dest] = converter.convert(parsed.values(*parameter.aliases), parameter)
        except (ConversionError, MissingValueError) as fault:
            faults.append(fault)

    unknown = []
    for option in parsed.options:
        if descriptor.find(option.key) is None and option.key not in unknown:
            unknown.append(option.key)
    for key in unknown:
        faults.append(UnrecognizedOptionError(
            f"unrecognized option {key}",
            title="unrecognized option",
            code=FaultCode.UNRECOGNIZED_OPTION,
            input=key,
            hint="run with --help to list the available options",
        ))

    if faults:
        _log.debug("binding %r failed with %d fault(s)", descriptor.name, len(faults))
        raise CommandExit(faults)

    instance = factory(descriptor) if factory is not Unset else descriptor.factory()
    for parameter in descriptor.parameters:
        if parameter.dest in bound:
            setattr(instance, parameter.dest, bound[parameter.dest])
        elif not hasattr(instance, parameter.dest):
            setattr(instance, parameter.dest, parameter.default)

    _log.debug("bound %r onto %r", descriptor.name, instance)
    return instance


__all__ = (
    "bind",
)
