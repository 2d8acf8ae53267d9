"""
Mode Registry
=============

Static mapping from a canonical mode-field name to the ordered list of
values that field may take. Order defines the cycle sequence.

Field names are canonical and capitalized: "Offense", "Weaponskill",
"Physicaldefense". Job-specific fields (e.g. "Hybrid") can live in the
same registry; the resolver only knows how to read and write the
built-in ones and defers anything else to the extension hooks.

The registry is owned by configuration. Handlers read it, they never
mutate it, so every list is stored as a tuple.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

# Value a mode field falls back to when it is not in its list.
SENTINEL_MODE = "Normal"

# Built-in mode fields, in lookup order.
BUILTIN_FIELDS = (
    "Offense",
    "Defense",
    "Casting",
    "Weaponskill",
    "Idle",
    "Resting",
    "Physicaldefense",
    "Magicaldefense",
    "Target",
)

DEFAULT_MODES: Dict[str, Tuple[str, ...]] = {
    "Offense": ("Normal",),
    "Defense": ("Normal",),
    "Casting": ("Normal",),
    "Weaponskill": ("Normal",),
    "Idle": ("Normal",),
    "Resting": ("Normal",),
    "Physicaldefense": ("PDT",),
    "Magicaldefense": ("MDT",),
    "Target": ("default", "stpc", "stpt", "stal"),
}


def canonical_field(name: str) -> str:
    """Case-normalize then capitalize a raw field name.

    "OFFENSE" -> "Offense", "physicaldefense" -> "Physicaldefense".
    """
    return name.strip().lower().capitalize()


class ModeRegistry:
    """Read-only field -> ordered values table."""

    def __init__(self, modes: Optional[Mapping[str, Iterable[str]]] = None):
        self._modes: Dict[str, Tuple[str, ...]] = dict(DEFAULT_MODES)
        for field_name, values in (modes or {}).items():
            values = tuple(values)
            if len(set(values)) != len(values):
                raise ValueError(f"Duplicate mode values for '{field_name}': {list(values)}")
            self._modes[canonical_field(field_name)] = values

    def get(self, field_name: str) -> Optional[Tuple[str, ...]]:
        return self._modes.get(canonical_field(field_name))

    def first(self, field_name: str) -> str:
        """Default value for a field: its first entry, or the sentinel."""
        values = self.get(field_name)
        return values[0] if values else SENTINEL_MODE

    def __contains__(self, field_name: str) -> bool:
        return canonical_field(field_name) in self._modes

    def __iter__(self) -> Iterator[str]:
        return iter(self._modes)

    def to_dict(self) -> Dict[str, list]:
        return {name: list(values) for name, values in self._modes.items()}
