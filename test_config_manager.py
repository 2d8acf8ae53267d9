"""
Tests for the gear-mode configuration system.

Run with:  python -m pytest test_config_manager.py -v
"""

import logging

import pytest
import yaml

from config_manager import (
    ConfigurationManager,
    GearModeConfig,
    configure_logging,
    create_argument_parser,
    setup_configuration,
)
from gearmode import create_dispatcher, main


class TestConfigLoading:
    """PyTest-compatible tests for loading and saving configuration"""

    @pytest.fixture
    def test_env(self, tmp_path, monkeypatch):
        """Run each test inside an empty working directory"""
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def write_yaml(self, path, data):
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f)
        return str(path)

    def test_missing_config_file(self, test_env):
        config = ConfigurationManager().load_config("nonexistent.yaml")
        assert config is not None
        assert config.modes["Offense"] == ["Normal"]

    def test_empty_config_file(self, test_env):
        (test_env / "empty.yaml").write_text("")
        config = ConfigurationManager().load_config("empty.yaml")
        assert config.modes["Target"] == ["default", "stpc", "stpt", "stal"]

    def test_corrupted_yaml_falls_back_to_defaults(self, test_env):
        (test_env / "broken.yaml").write_text("modes: [unclosed\n  - : :")
        config = ConfigurationManager().load_config("broken.yaml")
        assert config.modes["Offense"] == ["Normal"]

    def test_non_mapping_top_level_falls_back(self, test_env):
        (test_env / "list.yaml").write_text("- one\n- two\n")
        config = ConfigurationManager().load_config("list.yaml")
        assert config.console.debug_mode is False

    def test_partial_config_completion(self, test_env):
        path = self.write_yaml(test_env / "partial.yaml", {
            "modes": {"offense": ["Normal", "Acc"], "Hybrid": ["Normal", "PDT"]},
            "console": {"debug_mode": True},
        })
        config = ConfigurationManager().load_config(path)
        assert config.modes["Offense"] == ["Normal", "Acc"]
        assert config.modes["Hybrid"] == ["Normal", "PDT"]
        assert config.modes["Physicaldefense"] == ["PDT"]
        assert config.console.debug_mode is True
        assert config.web.port == 8000

    def test_unknown_key_is_ignored(self, test_env, caplog):
        path = self.write_yaml(test_env / "extra.yaml", {"web": {"port": 9000, "colour": "red"}})
        with caplog.at_level(logging.WARNING):
            config = ConfigurationManager().load_config(path)
        assert config.web.port == 9000
        assert not hasattr(config.web, "colour")
        assert "Unknown config key 'colour'" in caplog.text

    def test_auto_discovery(self, test_env):
        self.write_yaml(test_env / "gearmode.yaml", {"player": {"status": "Engaged"}})
        manager = ConfigurationManager()
        config = manager.load_config()
        assert config.player.status == "Engaged"
        assert manager.config_file_path.name == "gearmode.yaml"

    def test_config_save_load_roundtrip(self, test_env):
        manager = ConfigurationManager()
        manager.config.modes["Offense"] = ["Normal", "Acc", "Multi"]
        manager.config.player.custom_melee_groups = ["AM3"]
        assert manager.save_config("roundtrip.yaml")

        loaded = ConfigurationManager().load_config("roundtrip.yaml")
        assert loaded.modes["Offense"] == ["Normal", "Acc", "Multi"]
        assert loaded.player.custom_melee_groups == ["AM3"]

    def test_sample_config_is_valid(self, test_env):
        manager = ConfigurationManager()
        assert manager.create_sample_config("sample.yaml")
        manager.load_config("sample.yaml")
        is_valid, errors = manager.validate_config()
        assert is_valid, errors
        assert manager.config.modes["Offense"] == ["Normal", "Acc", "Multi"]


class TestConfigValidation:

    def manager_with(self, config):
        manager = ConfigurationManager()
        manager.config = config
        return manager

    def test_defaults_are_valid(self):
        assert ConfigurationManager().validate_config() == (True, [])

    def test_empty_mode_list(self):
        config = GearModeConfig()
        config.modes["Idle"] = []
        is_valid, errors = self.manager_with(config).validate_config()
        assert not is_valid
        assert any("Idle" in error for error in errors)

    def test_duplicate_mode_values(self):
        config = GearModeConfig()
        config.modes["Offense"] = ["Normal", "Acc", "Acc"]
        is_valid, errors = self.manager_with(config).validate_config()
        assert not is_valid
        assert any("duplicate" in error.lower() for error in errors)

    def test_non_string_mode_values(self):
        config = GearModeConfig()
        config.modes["Offense"] = ["Normal", 3]
        assert not self.manager_with(config).validate_config()[0]

    def test_target_list_without_default_warns(self, caplog):
        config = GearModeConfig()
        config.modes["Target"] = ["stpc", "stpt"]
        with caplog.at_level(logging.WARNING):
            is_valid, errors = self.manager_with(config).validate_config()
        assert is_valid, errors
        assert "no 'default' entry" in caplog.text

    def test_default_target_list_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            ConfigurationManager().validate_config()
        assert "Target mode list" not in caplog.text

    def test_port_validation(self):
        config = GearModeConfig()
        config.web.port = 70000
        is_valid, errors = self.manager_with(config).validate_config()
        assert not is_valid
        assert any("port" in error.lower() for error in errors)

    def test_verbose_and_quiet(self):
        config = GearModeConfig()
        config.console.verbose = True
        config.console.quiet = True
        assert not self.manager_with(config).validate_config()[0]


class TestCommandLine:

    @pytest.fixture
    def test_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def test_cli_overrides_file(self, test_env):
        (test_env / "modes.yaml").write_text("web:\n  port: 9000\n")
        config, should_exit, manager = setup_configuration(
            ["-c", "modes.yaml", "--port", "9100", "--web", "--debug"]
        )
        assert not should_exit
        assert config.web.port == 9100
        assert config.web.enabled is True
        assert config.console.debug_mode is True

    def test_create_config_exits(self, test_env):
        config, should_exit, manager = setup_configuration(["--create-config", "sample.yaml"])
        assert should_exit
        assert config is None
        assert (test_env / "sample.yaml").exists()

    def test_invalid_config_exits(self, test_env):
        (test_env / "bad.yaml").write_text("modes:\n  Offense: []\n")
        config, should_exit, manager = setup_configuration(["-c", "bad.yaml"])
        assert should_exit
        assert config is not None

    def test_main_exit_codes(self, test_env):
        (test_env / "bad.yaml").write_text("modes:\n  Offense: []\n")
        assert main(["-c", "bad.yaml"]) == 1
        assert main(["--create-config", "sample.yaml"]) == 0

    def test_parser_flags(self):
        args = create_argument_parser().parse_args(["-v", "--host", "0.0.0.0"])
        assert args.verbose is True
        assert args.host == "0.0.0.0"

    def test_configure_logging_levels(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs["level"]))
        config = GearModeConfig()
        configure_logging(config)
        config.console.quiet = True
        configure_logging(config)
        config.console.quiet = False
        config.console.verbose = True
        configure_logging(config)
        assert calls == [logging.INFO, logging.WARNING, logging.DEBUG]


class TestDispatcherFromConfig:

    def test_config_drives_session(self):
        config = GearModeConfig()
        config.modes["Offense"] = ["Normal", "Acc"]
        config.player.status = "Engaged"
        config.player.custom_melee_groups = ["AM3"]
        config.console.debug_mode = True

        dispatcher = create_dispatcher(config)
        session = dispatcher.session
        assert session.debug_mode is True
        assert session.state.custom_melee_groups == ["AM3"]

        dispatcher.dispatch("cycle offensemode")
        assert session.state.offense_mode == "Acc"
        assert session.collaborators.equipment_log[-1] == ("render", "Engaged")
