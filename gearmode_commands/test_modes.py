"""
Tests for the mode registry, the resolver and mode cycling.

Run with:  python -m pytest gearmode_commands -v
"""

import pytest

from gearmode_commands import ExtensionHooks, build_dispatcher, build_session
from gearmode_commands.collaborators import CHAT_ERROR
from gearmode_commands.cycle import mode_field_from_param, next_mode
from gearmode_commands.errors import UnknownField
from gearmode_commands.registry import ModeRegistry, canonical_field


def make_dispatcher(modes=None, hooks=None, debug_mode=False):
    return build_dispatcher(build_session(modes=modes, hooks=hooks, debug_mode=debug_mode))


# ============================================================
# Registry
# ============================================================

class TestRegistry:

    def test_defaults(self):
        registry = ModeRegistry()
        assert registry.get("Offense") == ("Normal",)
        assert registry.get("Physicaldefense") == ("PDT",)
        assert registry.get("Target") == ("default", "stpc", "stpt", "stal")

    def test_override_is_canonicalized(self):
        registry = ModeRegistry({"offense": ["Normal", "Acc"]})
        assert registry.get("Offense") == ("Normal", "Acc")
        assert "OFFENSE" in registry

    def test_duplicates_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            ModeRegistry({"Offense": ["Normal", "Normal"]})

    def test_first_of_empty_list_is_sentinel(self):
        assert ModeRegistry({"Idle": []}).first("Idle") == "Normal"

    def test_canonical_field(self):
        assert canonical_field("PHYSICALDEFENSE") == "Physicaldefense"
        assert canonical_field("ws") == "Ws"


# ============================================================
# Cycle arithmetic
# ============================================================

class TestNextMode:

    def test_advances(self):
        assert next_mode(("Normal", "Acc", "Multi"), "Normal") == "Acc"
        assert next_mode(("Normal", "Acc", "Multi"), "Acc") == "Multi"

    def test_wraps_to_first(self):
        assert next_mode(("Normal", "Acc", "Multi"), "Multi") == "Normal"

    def test_unlisted_value_lands_on_first(self):
        assert next_mode(("PDT", "Reraise"), "Normal") == "PDT"

    def test_single_entry_stays(self):
        assert next_mode(("Normal",), "Normal") == "Normal"

    def test_empty_list_gives_sentinel(self):
        assert next_mode((), "Whatever") == "Normal"

    @pytest.mark.parametrize("values", [("A",), ("A", "B"), ("A", "B", "C", "D", "E")])
    def test_n_cycles_return_to_start(self, values):
        for start in values:
            current = start
            for _ in range(len(values)):
                current = next_mode(values, current)
            assert current == start


class TestModeFieldFromParam:

    def test_alias(self):
        assert mode_field_from_param("wsmode") == "Weaponskill"
        assert mode_field_from_param("WSMode") == "Weaponskill"

    def test_capitalizes(self):
        assert mode_field_from_param("offensemode") == "Offense"
        assert mode_field_from_param("PhysicalDefenseMode") == "Physicaldefense"


# ============================================================
# cycle command
# ============================================================

class TestCycleCommand:

    def test_defense_mode_scenario(self):
        d = make_dispatcher(modes={"Defense": ["Normal", "PhalanxPhysical", "Seigan"]})
        state = d.session.state
        assert state.defense.active is False and state.kiting is False
        assert state.defense_mode == "Normal"

        d.dispatch("toggle defense")
        assert state.defense.active is True

        assert d.dispatch("cycle defensemode").summary == "Defense mode is now PhalanxPhysical."
        assert state.defense_mode == "PhalanxPhysical"
        d.dispatch("cycle defensemode")
        assert state.defense_mode == "Seigan"
        d.dispatch("cycle defensemode")
        assert state.defense_mode == "Normal"

    def test_ws_alias_matches_full_name(self):
        modes = {"Weaponskill": ["Normal", "Acc", "Att"]}
        short = make_dispatcher(modes=modes)
        full = make_dispatcher(modes=modes)
        for _ in range(4):
            short.dispatch("cycle wsmode")
            full.dispatch("cycle weaponskillmode")
            assert short.session.state.weaponskill_mode == full.session.state.weaponskill_mode

    def test_cycle_from_unset_value_lands_on_first(self):
        d = make_dispatcher(modes={"Offense": ["Acc", "Multi"]})
        d.session.state.offense_mode = "Normal"
        d.dispatch("cycle offensemode")
        assert d.session.state.offense_mode == "Acc"

    def test_cycle_defense_sub_fields(self):
        d = make_dispatcher(modes={"Physicaldefense": ["PDT", "Reraise"], "Magicaldefense": ["MDT", "MDTReraise"]})
        d.dispatch("cycle physicaldefensemode")
        d.dispatch("cycle MagicalDefenseMode")
        assert d.session.state.defense.physical_mode == "Reraise"
        assert d.session.state.defense.magical_mode == "MDTReraise"

    def test_cycle_target_mode(self):
        d = make_dispatcher()
        d.dispatch("cycle targetmode")
        assert d.session.state.pc_target_mode == "stpc"

    def test_cycle_reports_field_mode_to_hook(self):
        changes = []
        d = make_dispatcher(
            modes={"Idle": ["Normal", "Refresh"]},
            hooks=ExtensionHooks(on_state_changed=lambda desc, val: changes.append((desc, val))),
        )
        d.dispatch("cycle idlemode")
        assert changes == [("IdleMode", "Refresh")]

    def test_requires_mode_suffix(self):
        d = make_dispatcher(debug_mode=True)
        result = d.dispatch("cycle offense")
        assert result.details["reason"] == "unknown_field"
        assert d.session.collaborators.texts(CHAT_ERROR) == [
            'Invalid cycle field (does not end in "mode"): offense'
        ]

    def test_unknown_field(self):
        d = make_dispatcher()
        result = d.dispatch("cycle hybridmode")
        assert result.details["reason"] == "unknown_field"
        assert list(d.session.collaborators.equipment_log) == []

    def test_missing_parameter(self):
        assert make_dispatcher().dispatch("cycle").details["reason"] == "missing_parameter"


# ============================================================
# Resolver and extension hooks
# ============================================================

class HybridJob:
    """A job that owns one extra mode field."""

    def __init__(self, accept_writes=True):
        self.mode = "Normal"
        self.accept_writes = accept_writes

    def get_mode_table(self, field):
        if field == "Hybrid":
            return ["Normal", "PDT", "MDT"], self.mode
        return None

    def set_mode(self, field, value):
        if field == "Hybrid" and self.accept_writes:
            self.mode = value
            return True
        return False

    def hooks(self):
        return ExtensionHooks(resolve_mode_table=self.get_mode_table, set_mode=self.set_mode)


class TestResolver:

    def test_builtin_resolution(self):
        session = build_session(modes={"Casting": ["Normal", "Resistant"]})
        assert session.resolver.resolve("Casting") == (("Normal", "Resistant"), "Normal")

    def test_unknown_without_hooks_raises(self):
        session = build_session()
        with pytest.raises(UnknownField):
            session.resolver.resolve("Hybrid")

    def test_apply_unknown_returns_false(self):
        session = build_session(debug_mode=True)
        assert session.resolver.apply("Hybrid", "PDT") is False
        assert session.collaborators.texts(CHAT_ERROR) == ["Attempt to set unknown state field: Hybrid"]

    def test_extension_field_cycles(self):
        job = HybridJob()
        d = make_dispatcher(hooks=job.hooks())
        d.dispatch("cycle hybridmode")
        assert job.mode == "PDT"
        d.dispatch("set hybridmode MDT")
        assert job.mode == "MDT"
        d.dispatch("cycle hybridmode")
        assert job.mode == "Normal"

    def test_extension_field_invalid_value(self):
        job = HybridJob()
        d = make_dispatcher(hooks=job.hooks())
        assert d.dispatch("set hybridmode Bogus").details["reason"] == "invalid_mode_value"
        assert job.mode == "Normal"

    def test_builtin_fields_win_over_extension(self):
        calls = []
        hooks = ExtensionHooks(resolve_mode_table=lambda field: calls.append(field))
        session = build_session(hooks=hooks)
        session.resolver.resolve("Offense")
        assert calls == []

    def test_declining_setter_leaves_state_alone(self):
        job = HybridJob(accept_writes=False)
        d = make_dispatcher(hooks=job.hooks())
        result = d.dispatch("cycle hybridmode")
        assert result.is_error
        assert job.mode == "Normal"
        assert list(d.session.collaborators.equipment_log) == []
