"""
Self-Command Session
====================

Everything one command-handling session needs, wired together once by
the host and passed to every handler:

    SelfCommandSession
    ├── state          GearState (the State Store)
    ├── registry       ModeRegistry
    ├── hooks          ExtensionHooks
    ├── collaborators  notify / render / slots / player status
    ├── resolver       ModeResolver over state + registry + hooks
    └── debug_mode     gates diagnostic chat output

There is no module-level session. Two sessions never share state.
"""

from __future__ import annotations

import logging
from typing import Optional

from gearmode_commands.collaborators import CHAT_ERROR, CHAT_INFO, LocalCollaborators
from gearmode_commands.errors import SelfCommandError
from gearmode_commands.hooks import Collaborators, ExtensionHooks
from gearmode_commands.registry import ModeRegistry
from gearmode_commands.resolver import ModeResolver
from gearmode_commands.state import GearState


class SelfCommandSession:

    def __init__(
        self,
        state: Optional[GearState] = None,
        registry: Optional[ModeRegistry] = None,
        hooks: Optional[ExtensionHooks] = None,
        collaborators: Optional[Collaborators] = None,
        debug_mode: bool = False,
    ):
        self.registry = registry or ModeRegistry()
        self.state = state or GearState.defaults(self.registry)
        self.hooks = hooks or ExtensionHooks()
        self.collaborators = collaborators or LocalCollaborators()
        self.debug_mode = debug_mode
        self.resolver = ModeResolver(self.state, self.registry, self.hooks, report=self.diagnostic)
        self.logger = logging.getLogger(__name__)

    # ─── Chat output ────────────────────────────────────────────────

    def info(self, message: str) -> None:
        self.collaborators.notify(CHAT_INFO, message)

    def diagnostic(self, message: str) -> None:
        """Debug-only chat line; always logged."""
        self.logger.debug(message)
        if self.debug_mode:
            self.collaborators.notify(CHAT_ERROR, message)

    def report_failure(self, error: SelfCommandError) -> None:
        self.logger.debug(f"{type(error).__name__}: {error}")
        if self.debug_mode or error.always_notify:
            self.collaborators.notify(CHAT_ERROR, str(error))

    # ─── State change fan-out ───────────────────────────────────────

    def state_changed(self, description: str, value: object) -> None:
        """Tell the job hook about a change. Chat output is the caller's."""
        if self.hooks.on_state_changed is not None:
            self.hooks.on_state_changed(description, value)

    def reset_defaults(self) -> GearState:
        return GearState.defaults(self.registry)
