"""
Prefix value object.

A prefix is the short marker (e.g. "n/", "p/") that opens the value region of
a prefix-anchored option in raw command text. Prefixes compare and hash by
their token, so two Prefix("n/") objects are interchangeable as keys.
"""
import re

from rich.text import Text


class Prefix:
    """
    Immutable token marking where an option's argument begins.

    - token: non-empty string without whitespace.
    - Prefix(Prefix("n/")) returns an equal prefix, so APIs can accept either
      a str or a Prefix and normalize through the constructor.
    """
    __slots__ = ("_token",)

    def __new__(cls, token, /):
        if isinstance(token, Prefix):
            return token
        if not isinstance(token, str):
            raise TypeError("prefix token must be a string")
        if not token:
            raise ValueError("prefix token cannot be empty")
        if re.search(r"\s", token):
            raise ValueError("prefix token cannot contain whitespace")
        self = super().__new__(cls)
        object.__setattr__(self, "_token", token)
        return self

    @property
    def token(self):
        return self._token

    def __setattr__(self, name, value, /):
        raise AttributeError("prefix is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("prefix is immutable")

    def __eq__(self, other):
        if isinstance(other, Prefix):
            return self._token == other._token
        return NotImplemented

    def __hash__(self):
        return hash((Prefix, self._token))

    def __len__(self):
        return len(self._token)

    def __str__(self):
        return self._token

    def __repr__(self):
        return f"Prefix({self._token!r})"

    def __rich__(self):
        return Text(self._token, style="bold cyan")

    def __reduce__(self):
        return Prefix, (self._token,)


__all__ = ("Prefix",)
