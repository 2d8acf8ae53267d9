"""
Gear-Mode Command System
========================

A text-command interpreter for the small, well-known state that decides
which equipment profile is active: offense/defense/casting modes,
defense on/off, kiting, target selection and so on. A command line is
a verb plus parameters; the verb picks a handler, the handler validates
and applies a state change, reports it to chat, and asks for the gear
to be refreshed.

Architecture Overview
---------------------

    ┌──────────────┐     ┌──────────────┐     ┌──────────────────┐
    │ Command line │────►│  Dispatcher  │────►│  Verb handler    │
    │ (console/web)│     │  + pre_hook  │     │  toggle/cycle/...│
    └──────────────┘     └──────────────┘     └────────┬─────────┘
                                                       │
                        ┌──────────────────────────────┼──────────────┐
                        ▼                              ▼              ▼
                 ┌─────────────┐              ┌──────────────┐  ┌──────────┐
                 │ ModeResolver│─────────────►│  GearState   │  │  notify  │
                 │ + registry  │              │ (State Store)│  │  (chat)  │
                 └─────────────┘              └──────────────┘  └──────────┘
                                                       │
                                                       ▼
                                              update → render_equipment

Sessions, not globals
---------------------
All mutable state hangs off a SelfCommandSession built by the host.
build_session() wires a session with defaults; build_dispatcher()
registers every built-in verb against it:

    from gearmode_commands import build_dispatcher, build_session

    session = build_session(modes={"Offense": ["Normal", "Acc"]})
    dispatcher = build_dispatcher(session)

    result = dispatcher.dispatch("cycle offensemode")
    if result is not None and result.handled:
        print(result.summary)          # "Offense mode is now Acc."

Extending
---------
Jobs customize behavior through ExtensionHooks, not by subclassing:

    def job_get_mode_table(field):
        if field == "Hybrid":
            return ["Normal", "PDT"], hybrid_state["mode"]
        return None

    def job_set_mode(field, value):
        if field == "Hybrid":
            hybrid_state["mode"] = value
            return True
        return False

    hooks = ExtensionHooks(resolve_mode_table=job_get_mode_table,
                           set_mode=job_set_mode)
    session = build_session(hooks=hooks)
    build_dispatcher(session).dispatch("cycle hybridmode")

Module Structure
----------------
    gearmode_commands/
    ├── __init__.py       ← This file. build_session() / build_dispatcher().
    ├── dispatcher.py     ← Verb, Command ABC, CommandResult, SelfCommandDispatcher.
    ├── errors.py         ← MissingParameter, UnknownField, InvalidModeValue, InvalidNumber.
    ├── registry.py       ← ModeRegistry: field → ordered values.
    ├── state.py          ← GearState, DefenseState.
    ├── hooks.py          ← ExtensionHooks, Collaborators protocol.
    ├── collaborators.py  ← LocalCollaborators: chat history, equipment log.
    ├── session.py        ← SelfCommandSession.
    ├── resolver.py       ← ModeResolver.
    ├── toggles.py        ← toggle / activate / set / reset.
    ├── cycle.py          ← cycle, and the wraparound arithmetic.
    ├── update.py         ← update, state display.
    ├── showset.py        ← showset / naked / test.
    └── demo.py           ← Interactive console.
"""

from typing import Iterable, Mapping, Optional

from gearmode_commands.collaborators import LocalCollaborators
from gearmode_commands.cycle import CycleCommand
from gearmode_commands.dispatcher import CommandResult, SelfCommandDispatcher, Verb
from gearmode_commands.hooks import Collaborators, ExtensionHooks
from gearmode_commands.registry import ModeRegistry
from gearmode_commands.session import SelfCommandSession
from gearmode_commands.showset import NakedCommand, ShowSetCommand, TestCommand
from gearmode_commands.state import GearState
from gearmode_commands.toggles import ActivateCommand, ResetCommand, SetCommand, ToggleCommand
from gearmode_commands.update import UpdateCommand

BUILTIN_COMMANDS = (
    ToggleCommand,
    ActivateCommand,
    CycleCommand,
    SetCommand,
    ResetCommand,
    UpdateCommand,
    ShowSetCommand,
    NakedCommand,
    TestCommand,
)


def build_session(
    modes: Optional[Mapping[str, Iterable[str]]] = None,
    hooks: Optional[ExtensionHooks] = None,
    collaborators: Optional[Collaborators] = None,
    debug_mode: bool = False,
    custom_melee_groups: Iterable[str] = (),
) -> SelfCommandSession:
    """Create a session whose state starts at the registry defaults."""
    session = SelfCommandSession(
        registry=ModeRegistry(modes),
        hooks=hooks,
        collaborators=collaborators,
        debug_mode=debug_mode,
    )
    session.state.custom_melee_groups = list(custom_melee_groups)
    return session


def build_dispatcher(session: SelfCommandSession) -> SelfCommandDispatcher:
    """Dispatcher with every built-in verb registered."""
    dispatcher = SelfCommandDispatcher(session)
    for command_cls in BUILTIN_COMMANDS:
        dispatcher.register(command_cls(session))
    return dispatcher


__all__ = [
    'build_session',
    'build_dispatcher',
    'CommandResult',
    'ExtensionHooks',
    'GearState',
    'LocalCollaborators',
    'SelfCommandDispatcher',
    'SelfCommandSession',
    'Verb',
]
