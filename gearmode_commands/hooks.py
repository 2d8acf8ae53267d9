"""
Extension Hooks and Collaborator Interfaces
===========================================

Two seams separate the command core from the outside world.

Extension hooks (implemented by a job/caller, invoked by the core)
------------------------------------------------------------------
Every hook is optional. The core checks for presence and, when a hook
is installed, calls it synchronously before (or instead of) its own
default behavior. Hooks are supplied once, at session construction;
the core never installs or removes them.

    pre_dispatch(tokens) -> bool          True = handled, skip routing
    on_state_changed(description, value)  after every toggle/activate/
                                          cycle/set/reset change
    pre_update(tokens) -> bool            True = skip the gear refresh
    resolve_mode_table(field)             -> (values, current) or None
    set_mode(field, value) -> bool        False = declined
    render_state_summary() -> bool        True = skip default display
    run_test(tokens)                      target of the "test" verb

Hooks must not re-enter the dispatcher.

Collaborators (consumed by the core, implemented elsewhere)
-----------------------------------------------------------
    notify(priority, message)          chat/notification sink
    render_equipment(trigger_context)  recompute and equip the set for
                                       the current state
    set_slots_enabled(*slots)          unlock equipment slots
    apply_equipment_set(set_ref)       equip a named set
    query_player_status() -> str       "Idle", "Engaged", "Resting", ...

All collaborator calls are fire-and-forget from the core's point of view.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

ModeTable = Tuple[Sequence[str], str]


@dataclass
class ExtensionHooks:
    pre_dispatch: Optional[Callable[[List[str]], bool]] = None
    on_state_changed: Optional[Callable[[str, object], None]] = None
    pre_update: Optional[Callable[[List[str]], bool]] = None
    resolve_mode_table: Optional[Callable[[str], Optional[ModeTable]]] = None
    set_mode: Optional[Callable[[str, str], bool]] = None
    render_state_summary: Optional[Callable[[], bool]] = None
    run_test: Optional[Callable[[List[str]], None]] = None

    def installed(self) -> List[str]:
        """Names of the hooks that are present."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


class Collaborators(Protocol):
    def notify(self, priority: int, message: str) -> None: ...

    def render_equipment(self, trigger_context: str) -> None: ...

    def set_slots_enabled(self, *slots: str) -> None: ...

    def apply_equipment_set(self, set_ref: str) -> None: ...

    def query_player_status(self) -> str: ...
