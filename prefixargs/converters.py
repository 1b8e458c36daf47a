"""
Stock value converters for option descriptors.

Each converter takes the raw string of one option occurrence and returns a typed
value, or raises InvalidValueError with a message describing the constraint.
Domain-specific converters (names, phone numbers, student IDs, ...) belong to
the application and follow the same contract.
"""
import re

from .faults import FaultCode, InvalidValueError, getdoc
from .utils import rename


def _invalid(message, raw, hint):
    return InvalidValueError(
        message,
        title="invalid value",
        code=FaultCode.INVALID_VALUE,
        input=raw,
        hint=hint,
        docs=getdoc(FaultCode.INVALID_VALUE),
    )


def index(raw, /):
    """One-based list index: a non-zero unsigned integer such as "1" or "42"."""
    if not re.fullmatch(r"\d+", raw := raw.strip()) or not int(raw):
        raise _invalid("index is not a non-zero unsigned integer", raw, "use a positive number such as 1")
    return int(raw)


def integer(raw, /):
    """Signed decimal integer."""
    if not re.fullmatch(r"[+-]?\d+", raw := raw.strip()):
        raise _invalid("%r is not an integer" % raw, raw, "use a whole number such as 3 or -1")
    return int(raw)


def text(raw, /):
    """Trimmed, non-blank string."""
    if not (raw := raw.strip()):
        raise _invalid("value cannot be blank", raw, "type a value after the prefix")
    return raw


def constant(value, /):
    """
    Converter that ignores its input and always yields `value`.

    Useful for flag-like prefix options whose presence is the information, e.g.
    optional("p/", "PRESENT", type=constant(Status.PRESENT)).
    """
    @rename("constant")
    def converter(raw, /):
        return value

    return converter


def matching(pattern, message, /):
    """
    Converter accepting strings (trimmed) that fully match `pattern`.

    Parameters
    - pattern: str | re.Pattern
    - message: str, used verbatim as the InvalidValueError message.
    """
    if not isinstance(message, str):
        raise TypeError("matching() second argument must be a string")
    compiled = re.compile(pattern)

    @rename("matching")
    def converter(raw, /):
        if not compiled.fullmatch(raw := raw.strip()):
            raise _invalid(message, raw, "expected a value matching %s" % compiled.pattern)
        return raw

    return converter


__all__ = (
    "index",
    "integer",
    "text",
    "constant",
    "matching",
)
