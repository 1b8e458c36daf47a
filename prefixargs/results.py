"""
Parse results: the typed, read-only bag a command queries after a successful parse.
"""
from collections.abc import Mapping
from types import MappingProxyType

from .options import Descriptor


class ParseResult(Mapping):
    """
    Immutable mapping from descriptor to the tuple of its parsed values.

    - every registered descriptor is a key; an empty tuple means "absent".
    - result[option] is shaped by the descriptor's cardinality:
      exactly-one -> the value, zero-or-one -> the last value or None,
      multi-valued -> a tuple.
    - looking up a descriptor that was never registered on the command raises
      KeyError: descriptors are constants owned by the command, so this is a
      programming error rather than bad user input.
    """
    __slots__ = ("_command", "_values")

    def __init__(self, command, values, /):
        self._command = command
        self._values = MappingProxyType({option: tuple(parsed) for option, parsed in values.items()})

    @property
    def command(self):
        return self._command

    def _lookup(self, option):
        if not isinstance(option, Descriptor):
            raise TypeError("parse result keys must be option descriptors")
        try:
            return self._values[option]
        except KeyError:
            raise KeyError(f"{option!r} is not registered with command {self._command!r}") from None

    def __getitem__(self, option):
        values = self._lookup(option)
        if option.nargs in ("*", "+"):
            return values
        return values[-1] if values else None

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __contains__(self, option):
        return option in self._values

    def get_value(self, option, /):
        """The single value of `option`; LookupError unless exactly one is present."""
        values = self._lookup(option)
        if len(values) != 1:
            raise LookupError(f"{option!r} has {len(values)} values, expected exactly one")
        return values[0]

    def get_optional_value(self, option, /, default=None):
        """The (last) value of `option`, or `default` when it is absent."""
        values = self._lookup(option)
        return values[-1] if values else default

    def get_all_values(self, option, /):
        """Every parsed value of `option`, in input order."""
        return self._lookup(option)

    def present(self, option, /):
        """True when `option` produced at least one value."""
        return bool(self._lookup(option))

    def __repr__(self):
        return f"ParseResult(command={self._command!r}, values={dict(self._values)!r})"

    def __rich_repr__(self):
        yield "command", self._command
        for option, values in self._values.items():
            yield option.name, values


__all__ = ("ParseResult",)
