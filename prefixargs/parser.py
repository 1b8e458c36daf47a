"""
prefixargs command parser: registration and the validation pipeline.

What this module provides
- Signature: the frozen registration of one command (name, usage text, options,
  exclusive groups, single-preamble flag). It is the only input besides the raw
  text that a parse depends on.
- CommandParser: chainable registration surface that keeps an up-to-date
  Signature and parses against it.
- parse(signature, arguments): the pipeline itself, a pure function.
- attempt(option, raw): the "try-parse, discard on failure" combinator used for
  optional single preambles.

Pipeline (fixed order, the first failing phase wins)
1. tokenize the raw text against the registered prefixes.
2. every required prefix option has at least one occurrence.
3. no unique prefix option occurs more than once.
4. parse every option's raw value(s) according to location and cardinality.
5. when requested, exactly one optional single preamble produced a value.
6. at most one member of each exclusive group produced a value.
7. assemble the ParseResult.

Phases 2, 3, 5 and 6 raise FormatError subclasses carrying the command's usage
text; phase 4 raises the converters' InvalidValueError. A ParseResult is only
returned when every phase passed.

Quick start
    from prefixargs import CommandParser, required, zero_or_more

    name = required("n/", "NAME")
    tags = zero_or_more("t/", "TAG")
    add = CommandParser("add").register_options(name, tags)

    result = add.parse("n/Alice t/vip t/exec")
    result[name]   # "Alice"
    result[tags]   # ("vip", "exec")
"""
import collections
import logging
import re

from .faults import *
from .options import Capability, Descriptor
from .results import ParseResult
from .tokenizer import tokenize
from .utils import *

logger = logging.getLogger(__name__)

Signature = collections.namedtuple("Signature", (
    "name",
    "usage",
    "options",
    "groups",
    "single_preamble",
))
Signature.__doc__ = """
Immutable registration of one command.

- name: command word.
- usage: text used verbatim in FormatError messages.
- options: tuple of registered descriptors, in registration order.
- groups: tuple of exclusive groups (tuples of descriptors).
- single_preamble: whether exactly one optional single preamble must be present.
"""


def _present(values):
    # a converter returning None leaves its option absent
    return any(value is not None for value in values)


def attempt(option, raw, /):
    """
    Try to parse `raw` with `option`; discard a failure.

    Returns
    - (value,) when the converter accepts `raw`.
    - () when it raises InvalidValueError, i.e. the option is treated as absent.
    """
    try:
        return (option.parse(raw),)
    except InvalidValueError as exception:
        logger.debug("discarded %s for preamble %r: %s", option.name, raw, exception)
        return ()


def _extract(option, multimap, fault):
    # Phase 4 for one descriptor: returns the tuple of parsed values.
    preamble = multimap.preamble

    if option.matches(Capability.PREFIXED):
        return tuple(option.parse(raw) for raw in multimap.get_all_values(option.prefix))

    match option.nargs:
        case "+":
            if not (words := preamble.split()):
                raise MissingRequiredOptionError(
                    title="missing preamble",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    hint="give at least one %s before any prefix" % option.name,
                    docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION),
                    **fault
                )
            return tuple(option.parse(word) for word in words)
        case None:
            return (option.parse(preamble),)
        case "?":
            return attempt(option, preamble) if preamble else ()

    raise RuntimeError("unexpected option cardinality")


def parse(signature, arguments, /):
    """
    Run the validation pipeline of `signature` over `arguments`.

    Parameters
    - signature: Signature
    - arguments: str, the argument portion of the user input.

    Returns
    - ParseResult on success.

    Raises
    - MissingRequiredOptionError, DuplicatedPrefixError, PreambleCountError,
      ConflictingOptionsError: all FormatError, carrying signature.usage.
    - InvalidValueError: a converter refused a value.
    """
    if not isinstance(signature, Signature):
        raise TypeError("parse() first argument must be a signature")
    if not isinstance(arguments, str):
        raise TypeError("parse() second argument must be a string")

    fault = {"command": signature.name, "usage": signature.usage}
    prefixed = [option for option in signature.options if option.matches(Capability.PREFIXED)]

    multimap = tokenize(arguments, [option.prefix for option in prefixed])
    logger.debug("%s: tokenized %r into %r", signature.name, arguments, multimap)

    if any(option.required and option.prefix not in multimap for option in prefixed):
        logger.debug("%s: required option missing", signature.name)
        raise MissingRequiredOptionError(
            title="missing required option",
            code=FaultCode.MISSING_REQUIRED_OPTION,
            hint="follow the usage of %r" % signature.name,
            docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION),
            **fault
        )

    if duplicates := multimap.duplicates(option.prefix for option in prefixed if option.matches(Capability.NO_DUPLICATE)):
        logger.debug("%s: duplicated %s", signature.name, duplicates)
        raise DuplicatedPrefixError(
            title="duplicated prefix",
            code=FaultCode.DUPLICATED_PREFIX,
            prefixes=duplicates,
            hint="keep a single %s" % ", ".join(map(str, duplicates)),
            docs=getdoc(FaultCode.DUPLICATED_PREFIX),
            **fault
        )

    values = {option: _extract(option, multimap, fault) for option in signature.options}

    if signature.single_preamble:
        identifiers = [
            option for option in signature.options
            if option.matches(Capability.PREAMBLE | Capability.OPTIONAL) and _present(values[option])
        ]
        if len(identifiers) != 1:
            logger.debug("%s: %d preamble identifier(s) present", signature.name, len(identifiers))
            raise PreambleCountError(
                title="wrong number of identifiers",
                code=FaultCode.PREAMBLE_IDENTIFIER_COUNT,
                found=tuple(identifiers),
                hint="give exactly one of %s" % " or ".join(
                    option.name for option in signature.options
                    if option.matches(Capability.PREAMBLE | Capability.OPTIONAL)
                ),
                docs=getdoc(FaultCode.PREAMBLE_IDENTIFIER_COUNT),
                **fault
            )

    for group in signature.groups:
        if len(present := tuple(option for option in group if _present(values[option]))) > 1:
            logger.debug("%s: conflicting %s", signature.name, ", ".join(option.name for option in present))
            raise ConflictingOptionsError(
                title="conflicting options",
                code=FaultCode.CONFLICTING_OPTIONS,
                conflicts=present,
                hint="use only one of %s" % ", ".join(option.usage for option in group),
                docs=getdoc(FaultCode.CONFLICTING_OPTIONS),
                **fault
            )

    logger.debug("%s: parsed %d option(s)", signature.name, sum(map(bool, values.values())))
    return ParseResult(signature.name, values)


class CommandParser:
    """
    Registration surface of one command.

    Every registration method validates its input immediately (registration
    mistakes are programming errors, so they raise TypeError/ValueError rather
    than parse faults) and returns self for chaining:

        CommandParser("mark", USAGE)
            .register_options(index, student, present, absent)
            .require_single_preamble()
            .register_exclusive_group(present, absent)

    When no usage text is given it is built from the options' usage fragments.
    """

    def __init__(self, name, usage=Unset, /):
        if not isinstance(name, str):
            raise TypeError("command name must be a string")
        elif not re.fullmatch(r"\S+", name):
            raise ValueError("command name must be a non-empty word without whitespace")
        if not isinstance(usage, str | Unset):
            raise TypeError("command usage must be a string")
        elif isinstance(usage, str) and not usage.strip():
            raise ValueError("command usage cannot be empty")

        self._usage = usage
        self._signature = Signature(name, coalesce(usage, name), (), (), False)

    @property
    def name(self):
        return self._signature.name

    @property
    def usage(self):
        return self._signature.usage

    @property
    def options(self):
        return self._signature.options

    @property
    def signature(self):
        """The current frozen registration; safe to share and reuse across parses."""
        return self._signature

    def register_options(self, *options):
        """
        Register descriptors in order.

        Raises
        - TypeError: an argument is not a descriptor.
        - ValueError: a descriptor is registered twice, or two prefix options
          share a prefix.
        """
        registered = list(self._signature.options)
        prefixes = {option.prefix: option for option in registered if option.prefix is not None}

        for option in options:
            if not isinstance(option, Descriptor):
                raise TypeError("register_options() arguments must be option descriptors")
            if option in registered:
                raise ValueError(f"{option!r} is already registered with command {self.name!r}")
            if option.prefix is not None:
                if option.prefix in prefixes:
                    raise ValueError(f"prefix {str(option.prefix)!r} is already used by {prefixes[option.prefix]!r}")
                prefixes[option.prefix] = option
            registered.append(option)

        self._signature = self._signature._replace(
            options=tuple(registered),
            usage=coalesce(self._usage, " ".join((self.name, *(option.usage for option in registered)))),
        )
        return self

    def require_single_preamble(self):
        """Require exactly one optional single preamble to produce a value on every parse."""
        self._signature = self._signature._replace(single_preamble=True)
        return self

    def register_exclusive_group(self, *options):
        """
        Declare that at most one of `options` may be present in a parse.

        Raises
        - ValueError: fewer than two members, duplicated members, or members
          not registered with this command.
        """
        if len(options) < 2:
            raise ValueError("exclusive groups must have at least two options")
        for position, option in enumerate(options):
            if not isinstance(option, Descriptor):
                raise TypeError("register_exclusive_group() arguments must be option descriptors")
            if option in options[:position]:
                raise ValueError("exclusive groups cannot contain duplicates")
            if option not in self._signature.options:
                raise ValueError(f"{option!r} is not registered with command {self.name!r}")

        self._signature = self._signature._replace(groups=(*self._signature.groups, tuple(options)))
        return self

    def parse(self, arguments, /):
        """Parse `arguments` against the current signature (see parse())."""
        return parse(self._signature, arguments)

    def __repr__(self):
        return f"CommandParser({self.name!r}, options={len(self.options)}, groups={len(self._signature.groups)})"

    def __rich_repr__(self):
        yield "name", self.name
        yield "usage", self.usage
        yield "options", self.options
        yield "groups", self._signature.groups
        yield "single_preamble", self._signature.single_preamble


__all__ = (
    "Signature",
    "CommandParser",
    "attempt",
    "parse",
)
