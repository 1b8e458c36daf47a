"""
prefixargs registry: dispatch a full input line to the right command parser.

The registry owns one CommandParser per command word. It is the layer that
knows about runtime presentation: in shell mode faults are printed through rich
and the call returns None so the caller can re-prompt, otherwise they are
raised to the caller.

    registry = Registry()
    registry.command("add", ADD_USAGE).register_options(name, phone, tags)
    command, result = registry.parse_line("add n/Alice p/999 t/vip")
"""
import difflib
import logging

from .faults import *
from .parser import CommandParser
from .utils import *

logger = logging.getLogger(__name__)


class Registry:
    """
    Collection of command parsers keyed by command word.

    Runtime flags
    - shell: print faults (rich, stderr) and return None instead of raising.
    - fancy: render faults inside a panel.
    - colorful: style fault output.
    """

    def __init__(self, *, shell=False, fancy=False, colorful=True):
        self._commands = {}
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    def command(self, name, usage=Unset, /):
        """
        Create, record and return the CommandParser for `name`.

        Raises
        - ValueError: `name` is already registered or is not a single word.
        """
        parser = CommandParser(name, usage)
        if self._commands.setdefault(name, parser) is not parser:
            raise ValueError(f"command name {name!r} is already in use")
        logger.debug("registered command %r", name)
        return parser

    def trigger(self, fault, /, **options):
        """Surface `fault` with this registry's runtime flags (see faults.trigger)."""
        trigger(fault, **options, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def _resolve(self, name):
        try:
            return self._commands[name]
        except KeyError:
            pass

        suggestions = difflib.get_close_matches(name, self._commands.keys(), 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "known commands: %s" % ", ".join(sorted(self._commands)) if self._commands else "no commands are registered"
        return self.trigger(UnknownCommandError(
            "unknown command %r" % name,
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            command=name,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_COMMAND),
        ))

    def parse(self, name, arguments, /):
        """
        Parse `arguments` with the parser registered under `name`.

        Returns
        - ParseResult, or None when a fault was printed in shell mode.
        """
        if (parser := self._resolve(name)) is None:
            return None
        try:
            return parser.parse(arguments)
        except ParseException as fault:
            logger.debug("%s: %s", name, type(fault).__name__)
            return self.trigger(fault)

    def parse_line(self, line, /):
        """
        Split the leading command word off `line` and parse the rest.

        Returns
        - (name, ParseResult), or None when a fault was printed in shell mode.
        """
        if not isinstance(line, str):
            raise TypeError("parse_line() argument must be a string")

        words = line.strip().split(maxsplit=1)
        if not words:
            return self.trigger(UnknownCommandError(
                "empty command",
                title="empty command",
                code=FaultCode.EMPTY_COMMAND,
                hint="type one of: %s" % ", ".join(sorted(self._commands)),
                docs=getdoc(FaultCode.EMPTY_COMMAND),
            ))

        name, arguments = words[0], words[1] if len(words) > 1 else ""
        if (result := self.parse(name, arguments)) is None:
            return None
        return name, result

    def __contains__(self, name):
        return name in self._commands

    def __getitem__(self, name):
        return self._commands[name]

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def __repr__(self):
        return f"Registry(commands={list(self._commands)!r}, shell={self.shell!r})"


__all__ = ("Registry",)
