#!/usr/bin/env python3
"""
Gear-Mode Command System — Interactive Console

Reads command lines and runs them through a dispatcher. Chat output is
printed as it is emitted. Try:

    cycle offensemode
    set wsmode Normal
    toggle kiting
    activate magicaldefense
    update user
    reset all
    help
    quit

"""

from gearmode_commands import build_dispatcher, build_session
from gearmode_commands.collaborators import ChatMessage, LocalCollaborators

SAMPLE_MODES = {
    "Offense": ["Normal", "Acc", "Multi"],
    "Defense": ["Normal", "PDT", "MDT"],
    "Weaponskill": ["Normal", "Acc"],
}


def print_chat(message: ChatMessage) -> None:
    marker = "!" if message.is_error else "»"
    print(f"  {marker} {message.text}")


def run_console(dispatcher, prompt: str = "gs c> ") -> None:
    """Read-dispatch loop until quit or EOF."""
    while True:
        try:
            line = input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not line:
            continue

        if line.lower() == "quit":
            break

        if line.lower() == "help":
            print("\nAvailable commands:")
            for name, help_text in dispatcher.list_commands():
                print(f"  {help_text}")
            print()
            continue

        if line.lower() == "state":
            for key, value in dispatcher.session.state.to_dict().items():
                print(f"  {key}: {value}")
            continue

        result = dispatcher.dispatch(line)

        if result is None:
            print(f"  [ignored] {line}")
        elif result.is_error and not dispatcher.session.debug_mode:
            print(f"  [error] {result.error}")


def main():
    print("=" * 60)
    print("  Gear-Mode Command System — Demo")
    print("  Type help for commands, quit to exit")
    print("=" * 60)
    print()

    session = build_session(
        modes=SAMPLE_MODES,
        collaborators=LocalCollaborators(echo=print_chat),
    )
    run_console(build_dispatcher(session))


if __name__ == "__main__":
    main()
