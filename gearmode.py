#!/usr/bin/env python3
"""
Gear mode command interpreter

Console Input → SelfCommandDispatcher → verb handler → GearState → chat / gear refresh
Web Input     → FastAPI (/api/command, /ws) → same dispatcher, one command at a time

Configuration comes from config_manager (YAML + CLI), see --help.
"""

import sys
import logging

from config_manager import GearModeConfig, configure_logging, setup_configuration
from gearmode_commands import SelfCommandDispatcher, build_dispatcher, build_session
from gearmode_commands.collaborators import LocalCollaborators
from gearmode_commands.demo import print_chat, run_console


def create_dispatcher(config: GearModeConfig, echo=None) -> SelfCommandDispatcher:
	"""Session + dispatcher wired from configuration"""
	collaborators = LocalCollaborators(player_status=config.player.status, echo=echo)
	session = build_session(
		modes=config.modes,
		collaborators=collaborators,
		debug_mode=config.console.debug_mode,
		custom_melee_groups=config.player.custom_melee_groups,
	)
	return build_dispatcher(session)


def main(argv=None) -> int:
	"""Run the console or web interface; exit code 1 on an invalid config"""
	config, should_exit, config_manager = setup_configuration(argv)
	if should_exit:
		return 1 if config is not None else 0

	configure_logging(config)
	logger = logging.getLogger("gearmode")
	if config_manager.config_file_path:
		logger.info(f"Using config file: {config_manager.config_file_path}")

	if config.web.enabled:
		from web_interface import run_web_server
		try:
			run_web_server(create_dispatcher(config), config)
		except KeyboardInterrupt:
			print("\n🛑 Web interface shutting down...")
		return 0

	print("=" * 60)
	print("  Gear mode console — type help for commands, quit to exit")
	print("=" * 60)
	run_console(create_dispatcher(config, echo=print_chat))
	return 0


if __name__ == "__main__":
	sys.exit(main())
