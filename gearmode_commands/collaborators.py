"""
In-process collaborators for the command core.

LocalCollaborators stands in for the game client when the commands run
in a terminal or behind the web interface: chat lines go into a bounded
history (and optionally to an echo callback), equipment operations are
recorded instead of applied to an avatar.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional, Set, Tuple

# Chat priorities used by the core.
CHAT_INFO = 122
CHAT_ERROR = 123

# All equipment slots, in display order.
EQUIPMENT_SLOTS = (
    "main", "sub", "range", "ammo",
    "head", "neck", "lear", "rear",
    "body", "hands", "lring", "rring",
    "back", "waist", "legs", "feet",
)


@dataclass(frozen=True)
class ChatMessage:
    priority: int
    text: str
    timestamp: str

    @property
    def is_error(self) -> bool:
        return self.priority == CHAT_ERROR

    def to_dict(self) -> Dict:
        return {"priority": self.priority, "text": self.text, "timestamp": self.timestamp}


class LocalCollaborators:
    """Records notifications and equipment calls for a single session."""

    def __init__(
        self,
        player_status: str = "Idle",
        echo: Optional[Callable[[ChatMessage], None]] = None,
        max_messages: int = 500,
    ):
        self.player_status = player_status
        self.echo = echo
        self.messages: Deque[ChatMessage] = deque(maxlen=max_messages)
        self.equipment_log: Deque[Tuple[str, str]] = deque(maxlen=max_messages)
        self.enabled_slots: Set[str] = set()
        self.logger = logging.getLogger(__name__)

    def notify(self, priority: int, message: str) -> None:
        chat = ChatMessage(priority=priority, text=message, timestamp=datetime.now().isoformat())
        self.messages.append(chat)
        if self.echo is not None:
            self.echo(chat)

    def render_equipment(self, trigger_context: str) -> None:
        self.logger.debug(f"Equipping gear for status: {trigger_context}")
        self.equipment_log.append(("render", trigger_context))

    def set_slots_enabled(self, *slots: str) -> None:
        self.enabled_slots.update(slots)
        self.equipment_log.append(("enable", ",".join(slots)))

    def apply_equipment_set(self, set_ref: str) -> None:
        self.logger.debug(f"Equipping set: {set_ref}")
        self.equipment_log.append(("equip", set_ref))

    def query_player_status(self) -> str:
        return self.player_status

    # ─── Convenience for tests and the web history ─────────────────

    def texts(self, priority: Optional[int] = None) -> List[str]:
        """Chat lines, optionally filtered by priority."""
        return [m.text for m in self.messages if priority is None or m.priority == priority]

    def clear(self) -> None:
        self.messages.clear()
        self.equipment_log.clear()
