r"""
prefixargs option descriptors.

Overview
- Descriptors
  • Option[_T]: prefix-anchored slot, e.g. n/NAME or [t/TAG]...
  • Preamble[_T]: positional slot read from the text before the first prefix.
  Both are immutable value objects created once by a command and used as
  lookup keys (by identity) in the ParseResult.

- Cardinality ("nargs" vocabulary)
  • None: exactly one          • "?": zero or one
  • "*": zero or more          • "+": one or more
  Preambles accept None, "?" and "+".

- Capabilities
  • Capability is an enum.Flag describing location, cardinality and duplicate
    policy; descriptor.matches(Capability.REQUIRED | Capability.PREFIXED) is
    how the parser branches. Mutual exclusion is not a capability: it only
    exists as an exclusive group registered on the command parser.

- Shorthands
  • required, optional, zero_or_more, one_or_more (prefix options)
  • single_preamble, optional_preamble, variadic_preamble (positional)

Value parsing
- descriptor.parse(raw) delegates to the caller-supplied `type` converter. The
  descriptor performs no validation of its own. An InvalidValueError raised by
  the converter propagates unchanged; any other exception is wrapped into an
  InvalidValueError with the original chained.
"""
import enum
import functools
import operator
import re
from contextlib import contextmanager

from rich.text import Text

from .converters import text
from .faults import FaultCode, InvalidValueError, getdoc
from .prefixes import Prefix
from .utils import *


class Capability(enum.Flag):
    """
    capability tags of an option descriptor.

    location: PREFIXED | PREAMBLE
    presence: REQUIRED | OPTIONAL
    count:    SINGLE | MULTIPLE
    policy:   NO_DUPLICATE
    """
    PREFIXED = enum.auto()
    PREAMBLE = enum.auto()
    REQUIRED = enum.auto()
    OPTIONAL = enum.auto()
    SINGLE = enum.auto()
    MULTIPLE = enum.auto()
    NO_DUPLICATE = enum.auto()


class OptionType(type):
    """
    Metaclass for descriptor classes.

    - derives __typename__ from the class name ("Preamble" -> "preamble").
    - turns every name in __introspectable__ into a read-only property over
      the matching "_name" backing field (see mirror()).
    - provides stable __repr__/__rich_repr__ built from those fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Descriptor[_T](metaclass=OptionType):
    """
    Shared behavior of Option and Preamble.

    Instances are writable only inside the `with super().__new__(cls) as self:`
    block of the concrete constructor; afterwards any attribute assignment
    raises AttributeError.
    """
    __slots__ = ("__building", "__dict__", "__weakref__")

    @contextmanager
    def __new__(cls, *args, **kwargs):
        self = object.__new__(cls)
        object.__setattr__(self, "_Descriptor__building", True)
        try:
            yield self
        finally:
            object.__setattr__(self, "_Descriptor__building", False)

    def __setattr__(self, name, value, /):
        if not object.__getattribute__(self, "_Descriptor__building"):
            raise AttributeError(f"{type(self).__typename__} is immutable")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    @property
    def required(self):
        return self._nargs in (None, "+")

    @property
    def capabilities(self):
        capabilities = Capability.PREFIXED if self._prefix is not None else Capability.PREAMBLE
        capabilities |= Capability.REQUIRED if self.required else Capability.OPTIONAL
        capabilities |= Capability.MULTIPLE if self._nargs in ("*", "+") else Capability.SINGLE
        if self._unique:
            capabilities |= Capability.NO_DUPLICATE
        return capabilities

    def matches(self, capability, /):
        """True when every bit of `capability` is set on this descriptor."""
        if not isinstance(capability, Capability):
            raise TypeError("matches() argument must be a capability")
        return capability in self.capabilities

    def parse(self, raw, /):
        """
        Convert one raw string with this descriptor's converter.

        Raises
        - InvalidValueError: from the converter itself (unchanged), or wrapping
          any other exception the converter raised.
        """
        if not isinstance(raw, str):
            raise TypeError(f"{type(self).__typename__} parse() argument must be a string")
        try:
            return self._type(raw)
        except InvalidValueError:
            raise
        except Exception as exception:
            typename = getattr(self._type, "__name__", "value")
            raise InvalidValueError(
                "invalid value %r for %s: %s" % (raw, self._name, exception),
                title="invalid value",
                code=FaultCode.DELEGATED_ERROR,
                option=self,
                exception=exception,
                hint="check the value format; expected %s" % typename,
                docs=getdoc(FaultCode.DELEGATED_ERROR),
            ) from exception


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the fields shared by every descriptor (mutates `metadata`).

    - name: non-empty string after trimming.
    - type: callable converter.
    - nargs: one of the cardinalities the descriptor kind accepts.
    - descr: Unset or non-empty string; Unset becomes None.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(nargs := metadata["nargs"], str | None):
        raise TypeError(f"{cls.__typename__} 'nargs' must be a string or None")
    if nargs not in cls.__cardinalities__:
        raise ValueError(f"{cls.__typename__} 'nargs' must be one of %s" % ", ".join(map(repr, cls.__cardinalities__)))

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Option[_T](Descriptor[_T]):
    """
    Prefix-anchored option descriptor.

    Parameters
    - prefix: Prefix | str
      marker that opens this option's value in raw input (e.g. "n/").
    - name: Unset | str
      display name used in usage text; defaults to the prefix letters upper-cased.
    - type: Callable[[str], _T]
      converter for each raw value.
    - nargs: None | "?" | "*" | "+"
      cardinality (see module docs).
    - unique: Unset | bool
      whether more than one occurrence of the prefix is an error. Defaults to
      True for single-valued cardinalities and False for multi-valued ones.
    - descr: Unset | str
      short description.
    """
    __cardinalities__ = (None, "?", "*", "+")

    __introspectable__ = (
        "prefix",
        "name",
        "type",
        "nargs",
        "unique",
        "descr",
    )

    def __new__(cls, prefix, name=Unset, /, type=str, nargs=None, unique=Unset, descr=Unset):
        prefix = Prefix(prefix)
        metadata = {
            "prefix": prefix,
            "name": coalesce(name, re.sub(r"\W", "", prefix.token).upper() or prefix.token),
            "type": type,
            "nargs": nargs,
            "unique": unique,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        multiple = metadata["nargs"] in ("*", "+")
        if not isinstance(unique := metadata["unique"], bool | Unset):
            raise TypeError(f"{cls.__typename__} 'unique' must be a boolean")
        if unique is True and multiple:
            raise TypeError(f"multi-valued {cls.__typename__} cannot forbid duplicates")
        metadata["unique"] = coalesce(unique, not multiple)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "_" + name, object)
        return self

    @property
    def usage(self):
        fragment = f"{self._prefix}{self._name}"
        match self._nargs:
            case None:
                return fragment
            case "?":
                return f"[{fragment}]"
            case "*":
                return f"[{fragment}]..."
            case "+":
                return f"{fragment} [{fragment}]..."


class Preamble[_T](Descriptor[_T]):
    """
    Positional descriptor read from the preamble.

    Parameters
    - name: str
      display name (e.g. "INDEX").
    - type: Callable[[str], _T]
      converter for the preamble (or each preamble word for nargs="+");
      defaults to converters.text, so an empty required preamble is refused.
    - nargs: None | "?" | "+"
      • None: the whole preamble is one required value.
      • "?": the whole preamble, when it parses; a failed parse means "absent".
      • "+": the preamble split on whitespace, each word parsed.
    - descr: Unset | str
    """
    __cardinalities__ = (None, "?", "+")

    __introspectable__ = (
        "name",
        "type",
        "nargs",
        "descr",
    )

    def __new__(cls, name, /, type=text, nargs=None, descr=Unset):
        metadata = {
            "name": name,
            "type": type,
            "nargs": nargs,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "_" + name, object)
            self._prefix = None
            self._unique = False
        return self

    @property
    def prefix(self):
        return None

    @property
    def unique(self):
        return False

    @property
    def usage(self):
        match self._nargs:
            case None:
                return self._name
            case "?":
                return f"[{self._name}]"
            case "+":
                return f"{self._name}..."


def required(prefix, name=Unset, /, type=str, *, descr=Unset):
    """exactly one occurrence of `prefix` (duplicates rejected)."""
    return Option(prefix, name, type=type, descr=descr)


def optional(prefix, name=Unset, /, type=str, *, unique=True, descr=Unset):
    """at most one occurrence of `prefix` (duplicates rejected unless `unique` is False)."""
    return Option(prefix, name, type=type, nargs="?", unique=unique, descr=descr)


def zero_or_more(prefix, name=Unset, /, type=str, *, descr=Unset):
    """any number of occurrences of `prefix`."""
    return Option(prefix, name, type=type, nargs="*", descr=descr)


def one_or_more(prefix, name=Unset, /, type=str, *, descr=Unset):
    """at least one occurrence of `prefix`."""
    return Option(prefix, name, type=type, nargs="+", descr=descr)


def single_preamble(name, /, type=text, *, descr=Unset):
    """the whole preamble as one required value."""
    return Preamble(name, type=type, descr=descr)


def optional_preamble(name, /, type=text, *, descr=Unset):
    """the whole preamble, or absent when it is empty or does not parse."""
    return Preamble(name, type=type, nargs="?", descr=descr)


def variadic_preamble(name, /, type=text, *, descr=Unset):
    """every whitespace-separated preamble word, at least one."""
    return Preamble(name, type=type, nargs="+", descr=descr)


__all__ = (
    # Types
    "Capability",
    "Descriptor",
    "Option",
    "Preamble",

    # Shorthands
    "required",
    "optional",
    "zero_or_more",
    "one_or_more",
    "single_preamble",
    "optional_preamble",
    "variadic_preamble",
)

# Not part of the public API.
del OptionType
