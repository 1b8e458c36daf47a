"""
prefixargs utilities (shared internal helpers)

Scope
- Small building blocks used by the option, parser and result layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "argument not given", distinct from None.
- coalesce(value, default=None)
  • Materialize Unset into a concrete default; None and other falsy values pass through.
- rename(callable, name) / @rename("name")
  • Give generated callables readable __name__/__qualname__ values.
- mirror("attr")
  • Read-only property over a private backing field (self._attr), returning
    immutable snapshots for containers.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Sentinel type for parameters that were not provided.

    - falsy, printable as "Unset", one instance per process.
    - sealed: subclassing raises TypeError.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, otherwise `object` unchanged.

    Examples
    - coalesce("n/", "x")  -> "n/"
    - coalesce(Unset, "x") -> "x"
    - coalesce(None, "x")  -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__ and __qualname__ on a callable.

    Forms
    - rename(callable, name) -> callable, renamed in place.
    - rename(name)           -> decorator applying that name.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def freeze(object, /):
    """
    Shallow read-only snapshot of a container.

    - Sequence (non-str) -> tuple
    - Mapping            -> MappingProxyType
    - Set                -> frozenset
    - anything else      -> unchanged
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set) and not isinstance(object, frozenset):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Build a read-only property exposing the backing field "_{name}".

    Containers are returned frozen (see freeze()) so the public surface of a
    descriptor cannot be used to mutate its construction-time state.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return freeze(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
The "not provided" sentinel. Use as a parameter default when None is a
meaningful value, then resolve it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "freeze",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
