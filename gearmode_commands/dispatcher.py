"""
Command Dispatcher
==================

The central routing table for gear-mode self-commands.

Role in the System
------------------
A command line arrives as plain text ("cycle offensemode") or as an
already-split token list. The dispatcher splits it on whitespace, gives
the job's pre_dispatch hook first refusal, then peels off the verb and
hands the remaining tokens to the matching handler.

    Caller sends: "set weaponskillmode Acc"
                  ↓
    Split → ["set", "weaponskillmode", "Acc"]
                  ↓
    pre_dispatch hook installed and returns True? → stop (handled)
                  ↓
    Verb.parse("set") → Verb.SET → SetCommand
                  ↓
    SetCommand.execute(["weaponskillmode", "Acc"]) → CommandResult

    Caller sends: "dance wildly"
                  ↓
    Verb.parse("dance") → None → dispatch() returns None (ignored)

Design Decisions
----------------
- Verbs are a closed enumeration (Verb). Anything else falls through
  as "unrecognized" and is silently ignored, not an error.
- Verbs are case-insensitive (Cycle, CYCLE, cycle all work). Handler
  parameters keep their case; each handler normalizes what it needs.
- Each command owns its own parameter validation. The dispatcher only
  routes.
- Results are structured (CommandResult). ``handled`` is the boolean
  return contract: True when the state changed / the action ran,
  False on a validation failure.

Classes
-------
Verb
    The built-in verbs.

CommandResult
    Structured output from any command execution.

Command (ABC)
    Base class for verb handlers. Subclasses implement ``run``; the
    base ``execute`` turns SelfCommandError into an error result.

SelfCommandDispatcher
    The registry and router, bound to one session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from gearmode_commands.errors import SelfCommandError, UnknownField
from gearmode_commands.session import SelfCommandSession


class Verb(str, Enum):
    TOGGLE = "toggle"
    ACTIVATE = "activate"
    CYCLE = "cycle"
    SET = "set"
    RESET = "reset"
    UPDATE = "update"
    SHOWSET = "showset"
    NAKED = "naked"
    TEST = "test"

    @classmethod
    def parse(cls, token: str) -> Optional["Verb"]:
        """Map a raw token to a Verb, or None if unrecognized."""
        try:
            return cls(token.lower())
        except ValueError:
            return None


@dataclass
class CommandResult:
    """Structured output from a command execution.

    Attributes
    ----------
    command : str
        The verb that produced this result (e.g., "cycle").

    summary : str
        Human-readable one-liner describing what changed.
        Examples:
            "Offense mode is now Acc."
            "Kiting is now on."

    details : dict
        Structured data for the web interface: the field touched, the
        new value, and anything else the handler wants to expose.

    error : str or None
        If set, the command was recognized but its parameters were
        rejected. State is unchanged.
    """
    command: str
    summary: str
    details: dict = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this result represents an error."""
        return self.error is not None

    @property
    def handled(self) -> bool:
        return not self.is_error

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "handled": self.handled,
            "summary": self.summary,
            "details": self.details,
            "error": self.error,
        }


class Command(ABC):
    """Base class for all verb handlers.

    Required
    --------
    verb : Verb
        The verb this handler answers to.

    help_text : str
        One-line usage string. Convention: "verb <args> — Description"

    run(params) -> CommandResult
        Do the work. Raise a SelfCommandError on bad parameters;
        execute() turns it into an error result and reports it.
    """

    verb: Verb
    help_text: str = ""

    def __init__(self, session: SelfCommandSession):
        self.session = session

    @property
    def name(self) -> str:
        return self.verb.value

    @abstractmethod
    def run(self, params: List[str]) -> CommandResult:
        ...

    def execute(self, params: List[str]) -> CommandResult:
        """Run the handler. Never raises for validation failures."""
        try:
            return self.run(params)
        except SelfCommandError as e:
            self.session.report_failure(e)
            return CommandResult(
                command=self.name,
                summary="",
                details={"reason": e.reason},
                error=str(e),
            )

    def declined(self, field_name: str) -> CommandResult:
        """Result for a mode write that no resolver would accept.

        The resolver has already reported it.
        """
        return CommandResult(
            command=self.name,
            summary="",
            details={"reason": UnknownField.reason, "field": field_name},
            error=f"Attempt to set unknown state field: {field_name}",
        )


class SelfCommandDispatcher:
    """Routes command lines to the handlers of one session.

    Usage
    -----
        session = SelfCommandSession()
        dispatcher = SelfCommandDispatcher(session)
        dispatcher.register(ToggleCommand(session))

        result = dispatcher.dispatch("toggle kiting")
        if result is None:
            pass                   # empty line or unknown verb
        elif result.handled:
            show(result.summary)
    """

    def __init__(self, session: SelfCommandSession):
        self.session = session
        self._commands: Dict[Verb, Command] = {}

    def register(self, command: Command) -> None:
        """Register a verb handler.

        Raises
        ------
        ValueError
            If the verb already has a handler.
        """
        if command.verb in self._commands:
            raise ValueError(
                f"Command name collision: '{command.verb.value}' is already registered"
            )
        self._commands[command.verb] = command

    def split(self, line: Union[str, Sequence[str]]) -> List[str]:
        if isinstance(line, str):
            return line.split()
        return list(line)

    def dispatch(self, line: Union[str, Sequence[str]]) -> Optional[CommandResult]:
        """Route one command line.

        Returns
        -------
        CommandResult or None
            None for an empty line or an unrecognized verb. A result
            with details["handled_by"] == "pre_dispatch" when the job
            hook took the command.
        """
        tokens = self.split(line)
        if not tokens:
            return None

        hook = self.session.hooks.pre_dispatch
        if hook is not None and hook(list(tokens)):
            return CommandResult(
                command=tokens[0].lower(),
                summary="",
                details={"handled_by": "pre_dispatch"},
            )

        verb = Verb.parse(tokens[0])
        command = self._commands.get(verb) if verb is not None else None
        if command is None:
            self.session.logger.debug(f"Ignoring unrecognized command: {tokens[0]}")
            return None

        return command.execute(tokens[1:])

    def list_commands(self) -> List[tuple]:
        """Return (name, help_text) for all registered commands, by name."""
        return sorted(
            ((cmd.name, cmd.help_text) for cmd in self._commands.values()),
            key=lambda x: x[0],
        )
