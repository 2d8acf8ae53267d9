"""
State Store
===========

The mutable record the commands operate on. One GearState per session;
it is constructed by the host and handed to every handler through the
session, never reached through a module global.

    GearState
    ├── defense: DefenseState
    │     active / type / physical_mode / magical_mode
    ├── kiting, select_npc_targets           (booleans)
    ├── offense_mode ... resting_mode        (registry-constrained strings)
    ├── pc_target_mode                        (registry-constrained string)
    ├── max_weaponskill_distance             (0 == no limit)
    ├── show_set                              (ShowSetMode)
    └── custom_melee_groups                  (annotation only, never reset)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from gearmode_commands.registry import ModeRegistry

ON_OFF_NAMES = {True: "on", False: "off"}

DEFAULT_PC_TARGET_MODE = "default"


class DefenseType(str, Enum):
    PHYSICAL = "Physical"
    MAGICAL = "Magical"


class ShowSetMode(str, Enum):
    NONE = "none"
    PRECAST = "precast"
    MIDCAST = "midcast"


@dataclass
class DefenseState:
    active: bool = False
    type: DefenseType = DefenseType.PHYSICAL
    physical_mode: str = "PDT"
    magical_mode: str = "MDT"

    @property
    def current_mode(self) -> str:
        """Mode value for whichever defense type is selected."""
        if self.type == DefenseType.PHYSICAL:
            return self.physical_mode
        return self.magical_mode

    def describe(self) -> str:
        """Human description, e.g. "Physical defense (PDT)"."""
        return f"{self.type.value} defense ({self.current_mode})"


@dataclass
class GearState:
    defense: DefenseState = field(default_factory=DefenseState)
    kiting: bool = False
    select_npc_targets: bool = False

    offense_mode: str = "Normal"
    defense_mode: str = "Normal"
    casting_mode: str = "Normal"
    weaponskill_mode: str = "Normal"
    idle_mode: str = "Normal"
    resting_mode: str = "Normal"

    pc_target_mode: str = DEFAULT_PC_TARGET_MODE
    max_weaponskill_distance: float = 0

    show_set: ShowSetMode = ShowSetMode.NONE
    custom_melee_groups: List[str] = field(default_factory=list)

    @classmethod
    def defaults(cls, registry: ModeRegistry) -> "GearState":
        """Documented default state for a registry.

        Every mode field takes the first entry of its list.
        """
        return cls(
            defense=DefenseState(
                physical_mode=registry.first("Physicaldefense"),
                magical_mode=registry.first("Magicaldefense"),
            ),
            offense_mode=registry.first("Offense"),
            defense_mode=registry.first("Defense"),
            casting_mode=registry.first("Casting"),
            weaponskill_mode=registry.first("Weaponskill"),
            idle_mode=registry.first("Idle"),
            resting_mode=registry.first("Resting"),
        )

    def reset_to(self, other: "GearState") -> None:
        """Copy every resettable field from ``other`` in place.

        custom_melee_groups is owned by the job setup, not by reset.
        """
        self.defense = DefenseState(
            active=other.defense.active,
            type=other.defense.type,
            physical_mode=other.defense.physical_mode,
            magical_mode=other.defense.magical_mode,
        )
        self.kiting = other.kiting
        self.select_npc_targets = other.select_npc_targets
        self.offense_mode = other.offense_mode
        self.defense_mode = other.defense_mode
        self.casting_mode = other.casting_mode
        self.weaponskill_mode = other.weaponskill_mode
        self.idle_mode = other.idle_mode
        self.resting_mode = other.resting_mode
        self.pc_target_mode = other.pc_target_mode
        self.max_weaponskill_distance = other.max_weaponskill_distance
        self.show_set = other.show_set

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot for display and JSON transport."""
        return {
            "defense": {
                "active": self.defense.active,
                "type": self.defense.type.value,
                "physical_mode": self.defense.physical_mode,
                "magical_mode": self.defense.magical_mode,
            },
            "kiting": self.kiting,
            "select_npc_targets": self.select_npc_targets,
            "offense_mode": self.offense_mode,
            "defense_mode": self.defense_mode,
            "casting_mode": self.casting_mode,
            "weaponskill_mode": self.weaponskill_mode,
            "idle_mode": self.idle_mode,
            "resting_mode": self.resting_mode,
            "pc_target_mode": self.pc_target_mode,
            "max_weaponskill_distance": self.max_weaponskill_distance,
            "show_set": self.show_set.value,
            "custom_melee_groups": list(self.custom_melee_groups),
        }
