#!/usr/bin/env python3
"""
Configuration system for the gear-mode command interpreter
Supports YAML files, CLI overrides, and programmatic access for the web interface
"""

import yaml
import argparse
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from copy import deepcopy

from gearmode_commands.registry import DEFAULT_MODES, canonical_field
from gearmode_commands.state import DEFAULT_PC_TARGET_MODE


def _default_modes() -> Dict[str, List[str]]:
	return {name: list(values) for name, values in DEFAULT_MODES.items()}


@dataclass
class ConsoleConfig:
	"""Console messages logging level configuration"""
	verbose: bool = False
	quiet: bool = False
	debug_mode: bool = False  # diagnostic chat lines for rejected commands

	def to_dict(self) -> Dict[str, Any]:
		return {
			'verbose': self.verbose,
			'quiet': self.quiet,
			'debug_mode': self.debug_mode
		}


@dataclass
class WebConfig:
	"""Web interface settings"""
	enabled: bool = False
	host: str = "localhost"
	port: int = 8000

	def to_dict(self) -> Dict[str, Any]:
		return {
			'enabled': self.enabled,
			'host': self.host,
			'port': self.port
		}


@dataclass
class PlayerConfig:
	"""Initial player-side values the core reads but never owns"""
	status: str = "Idle"
	custom_melee_groups: list = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			'status': self.status,
			'custom_melee_groups': list(self.custom_melee_groups)
		}


@dataclass
class GearModeConfig:
	"""Complete configuration for the gear-mode interpreter"""
	modes: Dict[str, List[str]] = field(default_factory=_default_modes)
	console: ConsoleConfig = field(default_factory=ConsoleConfig)
	web: WebConfig = field(default_factory=WebConfig)
	player: PlayerConfig = field(default_factory=PlayerConfig)

	# Metadata
	config_version: str = "1.0"
	description: str = "Gear mode configuration"

	def to_dict(self) -> Dict[str, Any]:
		"""Convert to dictionary for YAML serialization"""
		return {
			'config_version': self.config_version,
			'description': self.description,
			'modes': {name: list(values) for name, values in self.modes.items()},
			'console': self.console.to_dict(),
			'web': self.web.to_dict(),
			'player': self.player.to_dict(),
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'GearModeConfig':
		"""Create from dictionary (YAML loading)"""
		logger = logging.getLogger(__name__)
		config = cls()

		if 'config_version' in data:
			config.config_version = str(data['config_version'])
		if 'description' in data:
			config.description = data['description']

		# Mode lists merge over the built-in defaults, keyed by canonical name
		for name, values in (data.get('modes') or {}).items():
			if isinstance(values, str):
				values = [values]
			config.modes[canonical_field(str(name))] = list(values or [])

		for section, target in (('console', config.console), ('web', config.web), ('player', config.player)):
			for key, value in (data.get(section) or {}).items():
				if hasattr(target, key):
					setattr(target, key, value)
				else:
					logger.warning(f"Unknown config key '{key}' in {section}")

		return config


class ConfigurationManager:
	"""
	Manages configuration loading, merging, and validation
	"""

	def __init__(self, config_file: str = "gearmode.yaml"):
		self.config_file = config_file
		self.config = GearModeConfig()
		self.config_file_path: Optional[Path] = None

		self.logger = logging.getLogger(__name__)

		# Standard config file locations (in order of preference)
		self.config_search_paths = [
			Path.cwd() / "gearmode.yaml",  # Current directory
			Path.cwd() / "config" / "gearmode.yaml",  # Config subdirectory
			Path.home() / ".config" / "gearmode" / "config.yaml",  # User config
		]

	def load_config(self, config_file: Optional[str] = None) -> GearModeConfig:
		"""
		Load configuration from file with fallback chain

		Args:
			config_file: Specific config file path, or None for auto-discovery

		Returns:
			Loaded configuration object (defaults if nothing was found)
		"""
		if config_file:
			config_path = Path(config_file)
			if config_path.exists():
				self.config = self._load_yaml_file(config_path)
				self.config_file_path = config_path
				self.logger.info(f"Loaded config from: {config_path}")
			else:
				self.logger.warning(f"Config file not found: {config_path}")
				self.logger.info("Using default configuration")
		else:
			for path in self.config_search_paths:
				if path.exists():
					self.config = self._load_yaml_file(path)
					self.config_file_path = path
					self.logger.info(f"Auto-discovered config: {path}")
					break
			else:
				self.logger.info("No config file found, using defaults")

		return self.config

	def _load_yaml_file(self, file_path: Path) -> GearModeConfig:
		"""Load configuration from a YAML file, defaults on any parse error"""
		try:
			with open(file_path, 'r') as f:
				yaml_data = yaml.safe_load(f) or {}
			if not isinstance(yaml_data, dict):
				raise ValueError("top level must be a mapping")
			return GearModeConfig.from_dict(yaml_data)

		except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
			self.logger.error(f"Error loading config file {file_path}: {e}")
			return GearModeConfig()

	def save_config(self, file_path: Optional[str] = None) -> bool:
		"""
		Save current configuration to YAML file

		Args:
			file_path: Target file path, or None to use loaded file path

		Returns:
			True if saved successfully
		"""
		if file_path:
			target_path = Path(file_path)
		elif self.config_file_path:
			target_path = self.config_file_path
		else:
			target_path = Path(self.config_file)

		try:
			target_path.parent.mkdir(parents=True, exist_ok=True)

			with open(target_path, 'w') as f:
				f.write("# Gear mode configuration\n")
				f.write("# Generated configuration file\n")
				f.write(f"# Version: {self.config.config_version}\n\n")

				yaml.dump(self.config.to_dict(), f,
						 default_flow_style=False,
						 sort_keys=False,
						 indent=2)

			self.logger.info(f"Configuration saved to: {target_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error saving config to {target_path}: {e}")
			return False

	def create_sample_config(self, file_path: str = "gearmode_sample.yaml") -> bool:
		"""Create a sample configuration file with comments"""
		try:
			with open(file_path, 'w') as f:
				f.write(self._generate_sample_yaml())
			self.logger.info(f"Sample configuration created: {file_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error creating sample config: {e}")
			return False

	def _generate_sample_yaml(self) -> str:
		"""Generate sample YAML with comments"""
		return """# Gear mode configuration file

# =============================================================================
# MODE LISTS
# =============================================================================
# Order is the cycle order. The first entry is the default used by reset.
# Extra fields (e.g. Hybrid) are allowed; a job hook must own them.
modes:
  Offense: [Normal, Acc, Multi]
  Defense: [Normal, PDT, MDT]
  Casting: [Normal]
  Weaponskill: [Normal, Acc]
  Idle: [Normal, Refresh]
  Resting: [Normal]
  Physicaldefense: [PDT]
  Magicaldefense: [MDT]
  Target: [default, stpc, stpt, stal]

# =============================================================================
# CONSOLE MESSAGES LOGGING LEVEL
# =============================================================================
console:
  verbose: false                  # Verbose output (more detail)
  quiet: false                    # Quiet mode (minimal output)
  debug_mode: false               # Report rejected commands in chat

# =============================================================================
# WEB INTERFACE
# =============================================================================
web:
  enabled: false
  host: "localhost"
  port: 8000

# =============================================================================
# PLAYER
# =============================================================================
player:
  status: "Idle"                  # Initial status used by update
  custom_melee_groups: []         # Annotations shown by showset

# =============================================================================
# CONFIGURATION METADATA
# =============================================================================
config_version: "1.0"
description: "Gear mode configuration"
"""

	def validate_config(self) -> tuple[bool, list[str]]:
		"""
		Validate configuration for common issues

		Returns:
			(is_valid, list_of_errors)
		"""
		errors = []

		for name, values in self.config.modes.items():
			if not values:
				errors.append(f"Mode list for {name} is empty")
				continue
			if not all(isinstance(v, str) for v in values):
				errors.append(f"Mode list for {name} must contain only strings")
			elif len(set(values)) != len(values):
				errors.append(f"Mode list for {name} has duplicate values")

		target_modes = self.config.modes.get("Target", [])
		if target_modes and DEFAULT_PC_TARGET_MODE not in target_modes:
			self.logger.warning(
				f"Target mode list {target_modes} has no '{DEFAULT_PC_TARGET_MODE}' entry; "
				"reset leaves the PC target mode outside the list"
			)

		if not (1 <= self.config.web.port <= 65535):
			errors.append(f"Invalid web port: {self.config.web.port}")

		if self.config.console.verbose and self.config.console.quiet:
			errors.append("verbose and quiet cannot both be set")

		return len(errors) == 0, errors

	def get_config(self) -> GearModeConfig:
		"""Get a copy of the current configuration"""
		return deepcopy(self.config)

	def merge_cli_args(self, args: argparse.Namespace) -> GearModeConfig:
		"""Apply command line overrides (CLI beats config file)"""
		if getattr(args, 'verbose', False):
			self.config.console.verbose = True
		if getattr(args, 'quiet', False):
			self.config.console.quiet = True
		if getattr(args, 'debug', False):
			self.config.console.debug_mode = True
		if getattr(args, 'web', False):
			self.config.web.enabled = True
		if getattr(args, 'host', None):
			self.config.web.host = args.host
		if getattr(args, 'port', None):
			self.config.web.port = args.port
		return self.config


def configure_logging(config: GearModeConfig) -> None:
	"""Set the root log level from the console section"""
	if config.console.verbose:
		level = logging.DEBUG
	elif config.console.quiet:
		level = logging.WARNING
	else:
		level = logging.INFO
	logging.basicConfig(
		level=level,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s"
	)


def create_argument_parser():
	"""Argument parser for the console and web entry point"""
	parser = argparse.ArgumentParser(
		description='Gear mode command interpreter',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  %(prog)s                                 # Interactive console with defaults
  %(prog)s -c my_modes.yaml                # Use specific config file
  %(prog)s --web --port 8080               # Serve the HTTP/WebSocket API
  %(prog)s --create-config sample.yaml     # Create sample config file

Configuration:
  Configuration is loaded in this order (later overrides earlier):
  1. Built-in defaults
  2. Configuration file (YAML)
  3. Command line arguments

  Config file search order:
  - gearmode.yaml (current directory)
  - config/gearmode.yaml
  - ~/.config/gearmode/config.yaml
		"""
	)

	config_group = parser.add_argument_group('Configuration')
	config_group.add_argument(
		'-c', '--config',
		type=str,
		help='Configuration file path (YAML format)'
	)
	config_group.add_argument(
		'--create-config',
		type=str,
		metavar='FILE',
		help='Create sample configuration file and exit'
	)
	config_group.add_argument(
		'--save-config',
		type=str,
		metavar='FILE',
		help='Save current configuration to file'
	)

	web_group = parser.add_argument_group('Web Interface')
	web_group.add_argument(
		'--web',
		action='store_true',
		help='Serve the web API instead of the console'
	)
	web_group.add_argument(
		'--host',
		type=str,
		help='Web interface bind address'
	)
	web_group.add_argument(
		'--port',
		type=int,
		help='Web interface port'
	)

	console_group = parser.add_argument_group('Console')
	console_group.add_argument(
		'-v', '--verbose',
		action='store_true',
		help='Verbose logging'
	)
	console_group.add_argument(
		'-q', '--quiet',
		action='store_true',
		help='Only warnings and errors'
	)
	console_group.add_argument(
		'--debug',
		action='store_true',
		help='Report rejected commands in chat'
	)

	return parser


def setup_configuration(argv=None) -> tuple[Optional[GearModeConfig], bool, Optional[ConfigurationManager]]:
	"""
	Setup configuration system with CLI integration

	Args:
		argv: Command line arguments (None for sys.argv)

	Returns:
		(config_object, should_exit, config_manager)
	"""
	parser = create_argument_parser()
	args = parser.parse_args(argv)

	if args.create_config:
		manager = ConfigurationManager()
		if manager.create_sample_config(args.create_config):
			print(f"Sample configuration created: {args.create_config}")
			print(f"Edit the file and run again with: -c {args.create_config}")
		return None, True, None

	manager = ConfigurationManager()
	manager.load_config(args.config)
	config = manager.merge_cli_args(args)

	is_valid, errors = manager.validate_config()
	if not is_valid:
		print("Configuration errors:")
		for error in errors:
			print(f"  ✗ {error}")
		return config, True, manager

	if args.save_config:
		if manager.save_config(args.save_config):
			print(f"Configuration saved to: {args.save_config}")

	return config, False, manager
