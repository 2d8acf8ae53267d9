"""
Mode Resolver
=============

Reads and writes mode fields on the State Store by canonical field name.

The built-in fields are a data table: each canonical name maps to an
accessor pair over GearState. Anything not in the table goes to the
extension hooks (resolve_mode_table / set_mode). If neither knows the
field, resolve() raises UnknownField and apply() reports and returns
False.

    resolve("Weaponskill") -> (("Normal", "Acc"), "Normal")
    apply("Weaponskill", "Acc")  -> state.weaponskill_mode = "Acc"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from gearmode_commands.errors import UnknownField
from gearmode_commands.hooks import ExtensionHooks
from gearmode_commands.registry import ModeRegistry
from gearmode_commands.state import GearState


@dataclass(frozen=True)
class FieldAccessor:
    get: Callable[[GearState], str]
    set: Callable[[GearState, str], None]


def _attr(name: str) -> FieldAccessor:
    return FieldAccessor(
        get=lambda state: getattr(state, name),
        set=lambda state, value: setattr(state, name, value),
    )


def _defense_attr(name: str) -> FieldAccessor:
    return FieldAccessor(
        get=lambda state: getattr(state.defense, name),
        set=lambda state, value: setattr(state.defense, name, value),
    )


FIELD_ACCESSORS: Dict[str, FieldAccessor] = {
    "Offense": _attr("offense_mode"),
    "Defense": _attr("defense_mode"),
    "Casting": _attr("casting_mode"),
    "Weaponskill": _attr("weaponskill_mode"),
    "Idle": _attr("idle_mode"),
    "Resting": _attr("resting_mode"),
    "Physicaldefense": _defense_attr("physical_mode"),
    "Magicaldefense": _defense_attr("magical_mode"),
    "Target": _attr("pc_target_mode"),
}


class ModeResolver:
    """Field-name lookup over the state, with extension fallback."""

    def __init__(
        self,
        state: GearState,
        registry: ModeRegistry,
        hooks: ExtensionHooks,
        report: Optional[Callable[[str], None]] = None,
    ):
        self.state = state
        self.registry = registry
        self.hooks = hooks
        self.report = report
        self.logger = logging.getLogger(__name__)

    def resolve(self, field_name: str) -> Tuple[Sequence[str], str]:
        """Return (ordered values, current value) for a canonical field.

        Raises
        ------
        UnknownField
            Neither the built-in table nor the extension resolver
            knows the field.
        """
        accessor = FIELD_ACCESSORS.get(field_name)
        if accessor is not None:
            values = self.registry.get(field_name) or ()
            return values, accessor.get(self.state)

        if self.hooks.resolve_mode_table is not None:
            table = self.hooks.resolve_mode_table(field_name)
            if table is not None:
                values, current = table
                return tuple(values), current

        raise UnknownField(f"Attempt to query unknown state field: {field_name}")

    def apply(self, field_name: str, value: str) -> bool:
        """Write ``value`` into the state field for ``field_name``.

        Returns False (after a diagnostic) when no one owns the field.
        """
        accessor = FIELD_ACCESSORS.get(field_name)
        if accessor is not None:
            accessor.set(self.state, value)
            return True

        if self.hooks.set_mode is not None and self.hooks.set_mode(field_name, value):
            return True

        message = f"Attempt to set unknown state field: {field_name}"
        self.logger.debug(message)
        if self.report is not None:
            self.report(message)
        return False
