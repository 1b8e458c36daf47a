"""
Argument tokenizer: split raw command text into a preamble and per-prefix values.

Example
    >>> tokenize("1 n/Alice Tan t/vip t/exec", [Prefix("n/"), Prefix("t/")])
    ArgumentMultimap(preamble='1', values={Prefix('n/'): ('Alice Tan',), Prefix('t/'): ('vip', 'exec')})

Rules
- An occurrence is recognized only at a token boundary: the prefix must be at the
  start of the text or right after whitespace. "sp/" therefore never yields a
  "p/" occurrence, and "mail@x.com" never yields an "x." occurrence.
- At one position the longest registered token wins.
- Values run from just after the prefix to the next recognized occurrence of any
  prefix (or the end of the text) and are trimmed. Duplicates are kept in input
  order; rejecting them is the parser's job.
"""
import logging
import re
from collections.abc import Iterable

from .prefixes import Prefix

logger = logging.getLogger(__name__)


class ArgumentMultimap:
    """
    Raw argument map produced by one tokenize() call.

    Holds the trimmed preamble and, for every recognized prefix, the ordered tuple
    of raw (unparsed) values. Equality is by content, so re-tokenizing the same
    text always yields an equal map.
    """
    __slots__ = ("_preamble", "_values")

    def __init__(self, preamble="", values=(), /):
        self._preamble = preamble
        self._values = {}
        for prefix, value in values:
            self._values.setdefault(Prefix(prefix), []).append(value)

    @property
    def preamble(self):
        return self._preamble

    def get_all_values(self, prefix, /):
        """Every raw value recorded for `prefix`, in input order (empty when absent)."""
        return tuple(self._values.get(Prefix(prefix), ()))

    def get_value(self, prefix, /):
        """The last raw value recorded for `prefix`, or None."""
        values = self._values.get(Prefix(prefix))
        return values[-1] if values else None

    def duplicates(self, prefixes, /):
        """The given prefixes that occur more than once, in the order given."""
        return tuple(prefix for prefix in map(Prefix, prefixes) if len(self._values.get(prefix, ())) > 1)

    def __contains__(self, prefix):
        try:
            return bool(self._values.get(Prefix(prefix)))
        except (TypeError, ValueError):
            return False

    def __iter__(self):
        return iter(self._values)

    def __eq__(self, other):
        if isinstance(other, ArgumentMultimap):
            return self._preamble == other._preamble and self._values == other._values
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        values = {prefix: tuple(values) for prefix, values in self._values.items()}
        return f"ArgumentMultimap(preamble={self._preamble!r}, values={values!r})"


def _compile(prefixes):
    # longest-first alternation: re tries alternatives left to right
    tokens = sorted({prefix.token for prefix in prefixes}, key=lambda token: (-len(token), token))
    return re.compile(r"(?<!\S)(?:%s)" % "|".join(map(re.escape, tokens)))


def tokenize(arguments, prefixes, /):
    """
    Tokenize `arguments` against the registered `prefixes`.

    Parameters
    - arguments: str
      argument portion of the user input (command word already removed).
    - prefixes: Iterable[Prefix | str]
      prefixes registered by the command; may be empty.

    Returns
    - ArgumentMultimap. An empty preamble and empty value lists are valid results.
    """
    if not isinstance(arguments, str):
        raise TypeError("tokenize() first argument must be a string")
    if not isinstance(prefixes, Iterable) or isinstance(prefixes, str):
        raise TypeError("tokenize() second argument must be an iterable of prefixes")

    prefixes = tuple(map(Prefix, prefixes))
    if not prefixes:
        return ArgumentMultimap(arguments.strip())

    occurrences = [(match.start(), match.end(), Prefix(match.group())) for match in _compile(prefixes).finditer(arguments)]
    logger.debug("recognized %d prefix occurrence(s) in %r", len(occurrences), arguments)

    if not occurrences:
        return ArgumentMultimap(arguments.strip())

    values = []
    for position, (start, end, prefix) in enumerate(occurrences):
        stop = occurrences[position + 1][0] if position + 1 < len(occurrences) else len(arguments)
        values.append((prefix, arguments[end:stop].strip()))

    return ArgumentMultimap(arguments[:occurrences[0][0]].strip(), values)


__all__ = (
    "ArgumentMultimap",
    "tokenize",
)
