"""
Toggle, Activate, Set and Reset
===============================

The handlers that flip, force, assign or clear state values.

    toggle   <field>          field ∈ defense, kite|kiting, target
    activate <field>          field ∈ physicaldefense, magicaldefense,
                                      kite|kiting, target
    set      <field> <value>  boolean / <field>mode / distance
    reset    <scope>          defense, kite|kiting, melee, casting,
                              distance, target, all

Every successful handler ends with update(["auto"]) so the equipped
gear follows the new state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List

from gearmode_commands.cycle import mode_field_from_param
from gearmode_commands.dispatcher import Command, CommandResult, Verb
from gearmode_commands.errors import (
    InvalidModeValue,
    InvalidNumber,
    MissingParameter,
    UnknownField,
)
from gearmode_commands.state import (
    DEFAULT_PC_TARGET_MODE,
    ON_OFF_NAMES,
    DefenseType,
    GearState,
)
from gearmode_commands.update import update_gear

BOOLEAN_VALUES = {"on": True, "true": True, "off": False, "false": False}


@dataclass(frozen=True)
class BooleanField:
    describe: Callable[[GearState], str]
    get: Callable[[GearState], bool]
    set: Callable[[GearState, bool], None]


def _set_defense(state: GearState, value: bool) -> None:
    state.defense.active = value


def _set_kiting(state: GearState, value: bool) -> None:
    state.kiting = value


def _set_npc_targets(state: GearState, value: bool) -> None:
    state.select_npc_targets = value


_KITING = BooleanField(
    describe=lambda state: "Kiting",
    get=lambda state: state.kiting,
    set=_set_kiting,
)

BOOLEAN_FIELDS: Dict[str, BooleanField] = {
    "defense": BooleanField(
        describe=lambda state: state.defense.describe(),
        get=lambda state: state.defense.active,
        set=_set_defense,
    ),
    "kite": _KITING,
    "kiting": _KITING,
    "target": BooleanField(
        describe=lambda state: "NPC targetting",
        get=lambda state: state.select_npc_targets,
        set=_set_npc_targets,
    ),
}


def _boolean_field(name: str, verb: str) -> BooleanField:
    bool_field = BOOLEAN_FIELDS.get(name.lower())
    if bool_field is None:
        raise UnknownField(f"Unknown {verb} field: {name}")
    return bool_field


def _require(params: List[str], count: int, verb: str) -> None:
    if len(params) < count:
        raise MissingParameter(f"--{verb} parameter failure: field not specified")


class ToggleCommand(Command):
    verb = Verb.TOGGLE
    help_text = "toggle <defense|kite|target> — Flip a boolean state"

    def run(self, params: List[str]) -> CommandResult:
        _require(params, 1, "toggle")
        name = params[0].lower()
        state = self.session.state
        bool_field = _boolean_field(name, "toggle")

        value = not bool_field.get(state)
        bool_field.set(state, value)
        description = bool_field.describe(state)

        self.session.state_changed(description, value)
        summary = f"{description} is now {ON_OFF_NAMES[value]}."
        self.session.info(summary)

        update_gear(self.session, ["auto"])
        return CommandResult(
            command=self.name,
            summary=summary,
            details={"field": name, "value": value},
        )


class ActivateCommand(Command):
    verb = Verb.ACTIVATE
    help_text = "activate <physicaldefense|magicaldefense|kite|target> — Force a state on"

    def run(self, params: List[str]) -> CommandResult:
        _require(params, 1, "activate")
        name = params[0].lower()
        state = self.session.state

        if name in ("physicaldefense", "magicaldefense"):
            state.defense.active = True
            state.defense.type = (
                DefenseType.PHYSICAL if name == "physicaldefense" else DefenseType.MAGICAL
            )
            description = state.defense.describe()
        elif name in ("kite", "kiting", "target"):
            bool_field = BOOLEAN_FIELDS[name]
            bool_field.set(state, True)
            description = bool_field.describe(state)
        else:
            raise UnknownField(f"--activate unknown state to activate: {name}")

        self.session.state_changed(description, True)
        summary = f"{description} is now on."
        self.session.info(summary)

        update_gear(self.session, ["auto"])
        return CommandResult(
            command=self.name,
            summary=summary,
            details={"field": name, "value": True},
        )


class SetCommand(Command):
    """``set <field> <value>``.

    Branches, tried in order:
      1. value is on/off/true/false   → boolean field (same as toggle)
      2. field ends in "mode"         → value must be in the mode list
      3. field is "distance"          → numeric weaponskill distance
    """

    verb = Verb.SET
    help_text = "set <field> <value> — Set a boolean, a <field>mode, or distance"

    def run(self, params: List[str]) -> CommandResult:
        if len(params) < 2:
            raise MissingParameter("--set parameter failure: insufficient fields")
        field_param, value = params[0], params[1]
        lower_field = field_param.lower()

        if value.lower() in BOOLEAN_VALUES:
            result = self._set_boolean(field_param, BOOLEAN_VALUES[value.lower()])
        elif lower_field.endswith("mode"):
            result = self._set_mode(lower_field, value)
        elif lower_field == "distance":
            result = self._set_distance(value)
        else:
            raise UnknownField(f"Unknown set handling: {field_param} : {value}")

        if result.handled:
            update_gear(self.session, ["auto"])
        return result

    def _set_boolean(self, field_param: str, value: bool) -> CommandResult:
        bool_field = _boolean_field(field_param, "set")
        state = self.session.state
        bool_field.set(state, value)
        description = bool_field.describe(state)

        self.session.state_changed(description, value)
        summary = f"{description} is now {ON_OFF_NAMES[value]}."
        self.session.info(summary)
        return CommandResult(
            command=self.name,
            summary=summary,
            details={"field": field_param.lower(), "value": value},
        )

    def _set_mode(self, lower_field: str, value: str) -> CommandResult:
        mode_field = mode_field_from_param(lower_field)
        values, current = self.session.resolver.resolve(mode_field)
        if value not in values:
            raise InvalidModeValue(f"Unknown mode value: {value} for {mode_field} mode.")

        if not self.session.resolver.apply(mode_field, value):
            return self.declined(mode_field)

        self.session.state_changed(f"{mode_field}Mode", value)
        summary = f"{mode_field} mode is now {value}."
        self.session.info(summary)
        return CommandResult(
            command=self.name,
            summary=summary,
            details={"field": mode_field, "value": value, "previous": current},
        )

    def _set_distance(self, value: str) -> CommandResult:
        try:
            distance = float(value)
        except ValueError:
            raise InvalidNumber(f"Invalid distance value: {value}") from None
        if not math.isfinite(distance) or distance < 0:
            raise InvalidNumber(f"Invalid distance value: {value}")
        if distance.is_integer():
            distance = int(distance)

        self.session.state.max_weaponskill_distance = distance
        return CommandResult(
            command=self.name,
            summary=f"Max weaponskill distance is now {distance}.",
            details={"field": "distance", "value": distance},
        )


def _reset_defense(session, defaults: GearState) -> str:
    session.state.defense.active = False
    return f"{session.state.defense.type.value} defense is now off."


def _reset_kiting(session, defaults: GearState) -> str:
    session.state.kiting = False
    return "Kiting is now off."


def _reset_melee(session, defaults: GearState) -> str:
    session.state.offense_mode = defaults.offense_mode
    session.state.defense_mode = defaults.defense_mode
    return "Melee has been reset to defaults."


def _reset_casting(session, defaults: GearState) -> str:
    session.state.casting_mode = defaults.casting_mode
    return "Casting has been reset to default."


def _reset_distance(session, defaults: GearState) -> str:
    session.state.max_weaponskill_distance = 0
    return "Max weaponskill distance limitations have been removed."


def _reset_target(session, defaults: GearState) -> str:
    session.state.select_npc_targets = False
    session.state.pc_target_mode = DEFAULT_PC_TARGET_MODE
    return "Adjusting target selection has been turned off."


def _reset_all(session, defaults: GearState) -> str:
    session.state.reset_to(defaults)
    return "Everything has been reset to defaults."


RESET_SCOPES: Dict[str, Callable] = {
    "defense": _reset_defense,
    "kite": _reset_kiting,
    "kiting": _reset_kiting,
    "melee": _reset_melee,
    "casting": _reset_casting,
    "distance": _reset_distance,
    "target": _reset_target,
    "all": _reset_all,
}


class ResetCommand(Command):
    verb = Verb.RESET
    help_text = "reset <defense|kite|melee|casting|distance|target|all> — Restore defaults"

    def run(self, params: List[str]) -> CommandResult:
        _require(params, 1, "reset")
        scope = params[0].lower()
        reset = RESET_SCOPES.get(scope)
        if reset is None:
            raise UnknownField(f"--reset unknown state to reset: {scope}")

        summary = reset(self.session, self.session.reset_defaults())
        self.session.info(summary)
        self.session.state_changed("Reset", scope)

        update_gear(self.session, ["auto"])
        return CommandResult(
            command=self.name,
            summary=summary,
            details={"scope": scope, "state": self.session.state.to_dict()},
        )
