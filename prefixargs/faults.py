"""
prefixargs faults (parse errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing parse failure,
  grouped by the phase that raises them.
- ParseException: base type carrying a message plus read-only options, able to
  render itself with rich and to be re-issued with extra context via copy.replace().
- FormatError: the "invalid command format" family. Always carries the usage
  text of the command that rejected the input.
- InvalidValueError: a single raw value was refused by its converter.
- UnknownCommandError: the command word itself could not be resolved.
- trigger(): central entry point to surface a fault (raise, or print in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser raises faults directly; the registry decorates them with runtime
  options (shell/fancy/colorful) and calls trigger().
- In non-shell mode faults are raised; in shell mode they are printed to stderr
  through rich and the caller re-prompts.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - dispatch (2110x)
      • UNKNOWN_COMMAND, EMPTY_COMMAND
    - format validation (2111x)
      • MISSING_REQUIRED_OPTION, DUPLICATED_PREFIX,
        PREAMBLE_IDENTIFIER_COUNT, CONFLICTING_OPTIONS
    - values (2112x)
      • INVALID_VALUE, DELEGATED_ERROR

    normalize() lets the host remap codes to custom labels through a
    __codes__ mapping in __main__.
    """
    # --- dispatch errors ---
    UNKNOWN_COMMAND             = 21101
    EMPTY_COMMAND               = 21102

    # --- format errors ---
    MISSING_REQUIRED_OPTION     = 21111
    DUPLICATED_PREFIX           = 21112
    PREAMBLE_IDENTIFIER_COUNT   = 21113
    CONFLICTING_OPTIONS         = 21114

    # --- value errors ---
    INVALID_VALUE               = 21121
    DELEGATED_ERROR             = 21122

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ exposes no __codes__ mapping (or the code is not in it)
        the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseException(Exception):
    """
    base class of every fault raised while parsing a command.

    options
    - free-form, read-only context: code, title, hint, usage, command, prefixes,
      options, exception, plus the runtime flags shell/fancy/colorful.
    """
    code = property(lambda self: self.options.get("code"))
    hint = property(lambda self: self.options.get("hint"))

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("command") or "prefixargs"), styler("prog-name"))

        code = self.code
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(str(self.options.get("title", type(self).__name__)).title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class FormatError(ParseException):
    """
    the input does not obey the command's declared format.

    the message is always "invalid command format!" followed by the usage text
    of the issuing command, whatever the failing phase was.
    """
    usage = property(lambda self: self.options.get("usage"))

    def __init__(self, message=Unset, /, **options):
        if message is Unset:
            message = "invalid command format!\n%s" % options.get("usage", "")
        super().__init__(message, **options)


class MissingRequiredOptionError(FormatError): ...
class DuplicatedPrefixError(FormatError): ...
class PreambleCountError(FormatError): ...
class ConflictingOptionsError(FormatError): ...


class InvalidValueError(ParseException, ValueError):
    """
    a converter refused one raw value.

    converters raise this directly with a message describing the constraint;
    any other exception escaping a converter is wrapped into one, keeping the
    original under options["exception"].
    """


class UnknownCommandError(ParseException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see ParseException).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode the fault is printed; otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation for a fault code, from a host __docs__ mapping in __main__.

    returns None when the host has no entry for the code.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseException",
    "FormatError",
    "MissingRequiredOptionError",
    "DuplicatedPrefixError",
    "PreambleCountError",
    "ConflictingOptionsError",
    "InvalidValueError",
    "UnknownCommandError",
    "trigger",
    "getdoc",
)
