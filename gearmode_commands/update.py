"""
Update and Display
==================

``update [user]``
    Refresh the equipped gear for the current player status. The job's
    pre_update hook may take over; when it reports handled, the default
    refresh is skipped. With ``user``, the current state summary is
    also shown. Every state-changing handler ends with update(["auto"]).

Display (the presentation adapter)
    One summary line built from current state, plus a second line when
    a show-set stage is active:

        Melee: Acc/Normal, WS: Normal, Defense: Physical PDT, Kiting: off, Target PC: stpc
        Show Sets is currently showing [precast] sets.  Use "showset off" to turn it off.

    The render_state_summary hook may replace the first line.
"""

from __future__ import annotations

from typing import List, Sequence

from gearmode_commands.dispatcher import Command, CommandResult, Verb
from gearmode_commands.session import SelfCommandSession
from gearmode_commands.state import DEFAULT_PC_TARGET_MODE, ON_OFF_NAMES, GearState, ShowSetMode


def format_state_summary(state: GearState) -> str:
    defense = ""
    if state.defense.active:
        defense = f"Defense: {state.defense.type.value} {state.defense.current_mode}, "

    targeting = ""
    if state.pc_target_mode != DEFAULT_PC_TARGET_MODE:
        targeting += f", Target PC: {state.pc_target_mode}"
    if state.select_npc_targets:
        targeting += ", Target NPCs"

    return (
        f"Melee: {state.offense_mode}/{state.defense_mode}, WS: {state.weaponskill_mode}, "
        f"{defense}Kiting: {ON_OFF_NAMES[state.kiting]}{targeting}"
    )


def format_show_set_notice(show_set: ShowSetMode) -> str:
    return (
        f"Show Sets is currently showing [{show_set.value}] sets.  "
        f'Use "showset off" to turn it off.'
    )


def display_current_state(session: SelfCommandSession) -> List[str]:
    """Send the state summary to chat. Returns the lines sent."""
    lines = []
    hook = session.hooks.render_state_summary
    if hook is None or not hook():
        lines.append(format_state_summary(session.state))

    if session.state.show_set != ShowSetMode.NONE:
        lines.append(format_show_set_notice(session.state.show_set))

    for line in lines:
        session.info(line)
    return lines


def update_gear(session: SelfCommandSession, params: Sequence[str] = ("auto",)) -> bool:
    """Refresh gear, then optionally display state. Never fails."""
    params = list(params)
    hook = session.hooks.pre_update
    if hook is None or not hook(params):
        session.collaborators.render_equipment(session.collaborators.query_player_status())

    if params and params[0] == "user":
        display_current_state(session)
    return True


class UpdateCommand(Command):
    verb = Verb.UPDATE
    help_text = "update [user] — Re-equip gear for current status; 'user' also shows state"

    def run(self, params: List[str]) -> CommandResult:
        update_gear(self.session, params)
        return CommandResult(
            command=self.name,
            summary=format_state_summary(self.session.state),
            details={"state": self.session.state.to_dict()},
        )
