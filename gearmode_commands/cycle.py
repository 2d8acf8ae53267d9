"""
Cycle Command
=============

``cycle <field>mode`` advances a mode field to the next value in its
ordered list, wrapping from the last entry back to the first.

    registry Defense = ["Normal", "PhalanxPhysical", "Seigan"]

    current "Normal"           index 1 → 2   "PhalanxPhysical"
    current "PhalanxPhysical"  index 2 → 3   "Seigan"
    current "Seigan"           index 3 → 1   "Normal"    (wrap)
    current "Bogus"            index 0 → 1   "Normal"    (not in list)

Indices are 1-based to match how the lists are written in config. A
value that is not in the list counts as index 0, so one cycle from an
unset field always lands on the first entry. An empty list yields the
sentinel "Normal".

Field names: the parameter must end in "mode" (case-insensitive). The
prefix is lowercased, "ws" is an alias for "weaponskill", and the
result is capitalized: "WSMode" → "Weaponskill".
"""

from __future__ import annotations

from typing import List, Sequence

from gearmode_commands.dispatcher import Command, CommandResult, Verb
from gearmode_commands.errors import MissingParameter, UnknownField
from gearmode_commands.registry import SENTINEL_MODE, canonical_field
from gearmode_commands.update import update_gear

FIELD_ALIASES = {"ws": "weaponskill"}


def mode_field_from_param(param: str) -> str:
    """'wsmode' -> 'Weaponskill', 'OffenseMode' -> 'Offense'.

    The caller guarantees the parameter ends in "mode".
    """
    prefix = param.lower()[: -len("mode")]
    prefix = FIELD_ALIASES.get(prefix, prefix)
    return canonical_field(prefix)


def next_mode(values: Sequence[str], current: str) -> str:
    """Value after ``current`` in ``values``, wrapping to the first."""
    index = values.index(current) + 1 if current in values else 0
    index += 1
    if index > len(values):
        index = 1
    if index <= len(values):
        return values[index - 1]
    return SENTINEL_MODE


class CycleCommand(Command):
    verb = Verb.CYCLE
    help_text = "cycle <field>mode — Advance a mode to its next value (e.g., cycle offensemode)"

    def run(self, params: List[str]) -> CommandResult:
        if not params:
            raise MissingParameter("--cycle parameter failure: field not specified")

        param = params[0].lower()
        if not param.endswith("mode"):
            raise UnknownField(f'Invalid cycle field (does not end in "mode"): {param}')

        mode_field = mode_field_from_param(param)
        values, current = self.session.resolver.resolve(mode_field)
        new_value = next_mode(values, current)

        if not self.session.resolver.apply(mode_field, new_value):
            return self.declined(mode_field)

        self.session.state_changed(f"{mode_field}Mode", new_value)
        summary = f"{mode_field} mode is now {new_value}."
        self.session.info(summary)

        update_gear(self.session, ["auto"])
        return CommandResult(
            command=self.name,
            summary=summary,
            details={"field": mode_field, "value": new_value, "previous": current},
        )
