"""
Show-Set, Naked and Test
========================

Display and render helpers. None of these end with an update.

``showset [tp|precast|midcast|off]``
    No parameter or ``tp``: equip the current melee set for inspection.
    ``precast`` / ``midcast``: stop the gear pipeline after that stage.
    ``off``: clear the show-set stage.

``naked``
    Unlock every equipment slot, then equip the empty set.

``test [...]``
    Hand the parameters to the job's run_test hook.
"""

from __future__ import annotations

from typing import List

from gearmode_commands.collaborators import EQUIPMENT_SLOTS
from gearmode_commands.dispatcher import Command, CommandResult, Verb
from gearmode_commands.errors import MissingParameter, UnknownField
from gearmode_commands.state import ShowSetMode

MELEE_SET = "melee"
NAKED_SET = "naked"

SHOW_SET_MESSAGES = {
    ShowSetMode.PRECAST: "Gear will now only equip up to precast gear for spells/actions.",
    ShowSetMode.MIDCAST: "Gear will now only equip up to midcast gear for spells.",
    ShowSetMode.NONE: "Show Sets is turned off.",
}


class ShowSetCommand(Command):
    verb = Verb.SHOWSET
    help_text = "showset [tp|precast|midcast|off] — Inspect the current sets"

    def run(self, params: List[str]) -> CommandResult:
        option = params[0].lower() if params else "tp"
        state = self.session.state

        if option == "tp":
            groups = ""
            if state.custom_melee_groups:
                groups = " [" + "".join(state.custom_melee_groups) + "]"
            summary = f"Showing current TP set: [{state.offense_mode}/{state.defense_mode}]{groups}"
            self.session.info(summary)
            self.session.collaborators.apply_equipment_set(MELEE_SET)
            return CommandResult(
                command=self.name,
                summary=summary,
                details={"set": MELEE_SET, "groups": list(state.custom_melee_groups)},
            )

        if option == "off":
            mode = ShowSetMode.NONE
        elif option in (ShowSetMode.PRECAST.value, ShowSetMode.MIDCAST.value):
            mode = ShowSetMode(option)
        else:
            raise UnknownField(f"Unknown showset option: {option}")

        state.show_set = mode
        summary = SHOW_SET_MESSAGES[mode]
        self.session.info(summary)
        return CommandResult(
            command=self.name,
            summary=summary,
            details={"show_set": mode.value},
        )


class NakedCommand(Command):
    verb = Verb.NAKED
    help_text = "naked — Unlock all slots and remove all gear"

    def run(self, params: List[str]) -> CommandResult:
        collaborators = self.session.collaborators
        collaborators.set_slots_enabled(*EQUIPMENT_SLOTS)
        collaborators.apply_equipment_set(NAKED_SET)
        return CommandResult(
            command=self.name,
            summary="All slots enabled, gear removed.",
            details={"slots": list(EQUIPMENT_SLOTS), "set": NAKED_SET},
        )


class TestCommand(Command):
    verb = Verb.TEST
    help_text = "test [...] — Run the job's test hook"

    # Keep pytest from collecting this class.
    __test__ = False

    def run(self, params: List[str]) -> CommandResult:
        hook = self.session.hooks.run_test
        if hook is None:
            raise MissingParameter("--test: no test hook installed")
        hook(list(params))
        return CommandResult(command=self.name, summary="", details={"params": list(params)})
