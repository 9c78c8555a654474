"""Command-line entry point: one-shot commands and an interactive shell."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from termcolor import colored

from .command import Prompts, Unknown, WrongArgs, handle_command, parse_command
from .constants import APP_DESCRIPTION, APP_NAME, APP_VERSION
from .crypto import CryptoError
from .manager import VaultError, VaultManager

_EXIT_WORDS = frozenset({"exit", "quit"})
_HELP_WORDS = frozenset({"-h", "help", "--help"})
_VERSION_WORDS = frozenset({"-v", "version", "--version"})

_OPTIONS = (
    ("-h, --help", "Display this help message"),
    ("-i, --interactive", "Start in interactive mode"),
    ("-v, --version", "Display version information"),
)

_COMMANDS = (
    ("init", "Initialize an empty vault"),
    ("add", "<service> <username> <password> - Add a new entry"),
    ("get", "[service] [username] - Retrieve entries"),
    ("delete", "<service> <username> - Delete an entry"),
    ("help", "Show this help information"),
    ("exit", "Exit interactive mode"),
)

_INDENT = " " * 12


def _bold(text: str, color: str | None = None) -> str:
    return colored(text, color, attrs=["bold"])


def _version_line() -> str:
    return f"{_bold(APP_NAME, 'light_green')} {colored(f'v{APP_VERSION}', 'light_green')}"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; help and version are handled by Cli itself."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME, description=APP_DESCRIPTION, add_help=False
    )
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-i", "--interactive", action="store_true")
    parser.add_argument("-v", "--version", action="store_true")
    parser.add_argument("raw_args", nargs="*")
    return parser


@dataclass
class Cli:
    """The parsed command line and the means to carry it out."""

    help: bool = False
    interactive: bool = False
    version: bool = False
    raw_args: list[str] = field(default_factory=list)
    manager_factory: Callable[[], VaultManager] = VaultManager
    prompts: Prompts = field(default_factory=Prompts)
    read_line: Callable[[str], str] = input

    @classmethod
    def from_args(cls, argv: Sequence[str] | None = None, **kwargs) -> Cli:
        """Parse argv (sys.argv[1:] when None) into a Cli."""
        namespace = build_parser().parse_args(argv)
        return cls(
            help=namespace.help,
            interactive=namespace.interactive,
            version=namespace.version,
            raw_args=list(namespace.raw_args),
            **kwargs,
        )

    def run(self) -> None:
        """Show help or version, start the shell, or run a single command."""
        if self.help:
            self.show_help()
            return
        if self.version:
            self.show_version()
            return
        if self.interactive:
            self.run_interactive()
            return

        command = " ".join(self.raw_args).strip()
        if not command:
            self.show_no_command()
            return

        manager = self.manager_factory()
        self.dispatch_command(command, manager)
        manager.update_vault_file()

    def run_interactive(self) -> None:
        """Read and run commands until exit, quit or end of input."""
        manager = self.manager_factory()
        self.show_welcome()
        while True:
            try:
                line = self.read_line(_bold("> ", "light_blue"))
            except EOFError:
                print()
                break
            command = line.strip()
            if not command:
                continue
            if command in _EXIT_WORDS:
                break
            if command in _HELP_WORDS:
                self.show_help()
            elif command in _VERSION_WORDS:
                self.show_version()
            else:
                self.dispatch_command(command, manager)
        manager.update_vault_file()
        print(_bold("Goodbye!", "light_blue"))

    def dispatch_command(self, command: str, manager: VaultManager) -> None:
        """Parse one command line and carry it out, reporting misuse."""
        result = parse_command(command, self.prompts)
        match result:
            case WrongArgs(name=name, usage=usage):
                print(
                    f"{_bold('Error:', 'red')} "
                    f"{colored(f'Incorrect usage of {name!r}', 'red')}"
                )
                print(f"{_bold('Usage:', 'yellow')} {usage}")
            case Unknown():
                print(
                    f"{_bold('Error:', 'red')} "
                    f"{colored(f'Unknown command {command!r}', 'red')}"
                )
                print(
                    f"{colored('Type', 'yellow')} "
                    f"{_bold(chr(39) + 'help' + chr(39) + ' for available commands', 'yellow')}"
                )
            case _:
                handle_command(result, manager, self.prompts)

    def show_welcome(self) -> None:
        border = "─" * 44
        name = _bold(APP_NAME, "light_blue")
        version = _bold(f"v{APP_VERSION}", "light_blue")
        bar = colored("│", "light_blue")
        print(colored(f"┌{border}┐", "light_blue"))
        print(
            f"{bar} {_bold(f'Welcome to {name} {version}')} "
            f"{colored('               │', 'light_blue')}"
        )
        print(
            f"{bar} "
            f"{colored(chr(84) + 'ype ' + repr('help') + ' for commands or ' + repr('exit') + ' to quit', attrs=['italic'])} "
            f"{bar}"
        )
        print(colored(f"└{border}┘", "light_blue"))

    def show_version(self) -> str:
        """Print the program name and version; return the printed line."""
        line = _version_line()
        print(line)
        return line

    def show_no_command(self) -> None:
        print(_bold("No command specified.", "light_yellow"))
        print(f"Use {_bold('-i', 'green')} for interactive mode or specify a command.")
        print()
        self.show_help()

    def show_help(self) -> None:
        print(_version_line())
        print(f"- {colored(APP_DESCRIPTION, attrs=['italic'])}")
        print()

        print(_bold("USAGE:"))
        print(f"    {colored(APP_NAME, 'green')} [OPTIONS] [COMMAND]")
        print()

        print(_bold("OPTIONS:"))
        for flag, description in _OPTIONS:
            print(f"{_INDENT}{_bold(f'{flag:<12}', 'light_blue')}  {description}")
        print()

        print(_bold("COMMANDS:"))
        width = max(len(name) for name, _ in _COMMANDS)
        for name, description in _COMMANDS:
            print(f"{_INDENT}{_bold(name.ljust(width), 'light_blue')}  {description}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    cli = Cli.from_args(argv)
    try:
        cli.run()
    except (VaultError, CryptoError, OSError, EOFError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())