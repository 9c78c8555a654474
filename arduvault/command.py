"""Parsing and handling of vault commands."""

from __future__ import annotations

import getpass
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from termcolor import colored

from .manager import VaultError, VaultManager

ADD_USAGE = "add <service> <username> <password>"
GET_USAGE = "get [service] [username]"
DELETE_USAGE = "delete <service> <username>"

_RULE = "─────────────────────────────"

_ADD_SERVICE_PROMPT = "Serivce"
_SERVICE_PROMPT = "Service"
_USERNAME_PROMPT = "Username"
_SECRET_PROMPT = "Password"
_UNLOCK_PROMPT = "Enter master password"
_CREATE_PROMPT = "Create master password"
_CONFIRM_PROMPT = "Confirm master password"
_CONFIRM_PROCEED_PROMPT = "Do you want to proceed? [yes/no]"


@dataclass(frozen=True)
class InitCommand:
    """Initialize an empty vault."""


@dataclass(frozen=True)
class AddCommand:
    service: str
    username: str
    password: str


@dataclass(frozen=True)
class GetCommand:
    service: str | None = None
    username: str | None = None


@dataclass(frozen=True)
class DeleteCommand:
    service: str
    username: str


@dataclass(frozen=True)
class ResetCommand:
    """Erase the stored vault."""


@dataclass(frozen=True)
class WrongArgs:
    """A known command given the wrong number of arguments."""

    name: str
    usage: str


@dataclass(frozen=True)
class Unknown:
    """A command that is not recognised."""


Command = Union[InitCommand, AddCommand, GetCommand, DeleteCommand, ResetCommand]
ParseResult = Union[Command, WrongArgs, Unknown]


class Prompts:
    """Interactive prompts; empty answers are asked again."""

    def __init__(
        self,
        read_text: Callable[[str], str] = input,
        read_password: Callable[[str], str] = getpass.getpass,
    ) -> None:
        self._read_text = read_text
        self._read_password = read_password

    def _ask(self, reader: Callable[[str], str], prompt: str) -> str:
        while True:
            try:
                value = reader(f"{prompt}: ")
            except EOFError as exc:
                raise EOFError(f"Failed to read {prompt.lower()}") from exc
            if value:
                return value

    def text(self, prompt: str) -> str:
        return self._ask(self._read_text, prompt)

    def password(self, prompt: str) -> str:
        return self._ask(self._read_password, prompt)

    def new_password(self) -> str:
        """Ask for a new master password twice until both answers match."""
        while True:
            first = self.password(_CREATE_PROMPT)
            second = self.password(_CONFIRM_PROMPT)
            if first == second:
                return first
            print(colored("Passwords don't match", "red"))


def parse_command(command_str: str, prompts: Prompts) -> ParseResult:
    """Parse a command line, prompting for arguments that add/delete omit."""
    match command_str.split():
        case ["init"]:
            return InitCommand()
        case ["add"]:
            service = prompts.text(_ADD_SERVICE_PROMPT)
            username = prompts.text(_USERNAME_PROMPT)
            secret = prompts.text(_SECRET_PROMPT)
            return AddCommand(service, username, secret)
        case ["add", service, username, secret]:
            return AddCommand(service, username, secret)
        case ["add", *_]:
            return WrongArgs("add", ADD_USAGE)
        case ["get"]:
            return GetCommand()
        case ["get", service]:
            return GetCommand(service)
        case ["get", service, username]:
            return GetCommand(service, username)
        case ["get", *_]:
            return WrongArgs("get", GET_USAGE)
        case ["delete"]:
            service = prompts.text(_SERVICE_PROMPT)
            username = prompts.text(_USERNAME_PROMPT)
            return DeleteCommand(service, username)
        case ["delete", service, username]:
            return DeleteCommand(service, username)
        case ["delete", *_]:
            return WrongArgs("delete", DELETE_USAGE)
        case ["reset"]:
            return ResetCommand()
        case _:
            return Unknown()


def _say(text: str, color: str | None = None, *attrs: str) -> None:
    print(colored(text, color, attrs=list(attrs) or None))


def _bold(text: str, color: str | None = None) -> str:
    return colored(text, color, attrs=["bold"])


def _ready(manager: VaultManager, prompts: Prompts) -> bool:
    """Make sure the vault exists and is unlocked; report why not otherwise."""
    manager.check_vault_file()
    if not manager.is_init():
        _say("Vault is not initialized!", "light_blue", "bold")
        return False
    if manager.is_locked():
        secret = prompts.password(_UNLOCK_PROMPT)
        try:
            manager.unlock(secret)
        except VaultError as exc:
            print(f"{_bold('Failed to unlock vault:', 'light_blue')} {exc}")
            return False
    return True


def _handle_init(manager: VaultManager, prompts: Prompts) -> None:
    manager.check_vault_file()
    if manager.is_init():
        _say("Vault is already initialized", "yellow", "bold")
        return
    manager.init(prompts.new_password())
    _say("Vault initialized successfully", "light_blue", "bold")


def _handle_add(command: AddCommand, manager: VaultManager, prompts: Prompts) -> None:
    if not _ready(manager, prompts):
        return
    if manager.add_entry(command.service, command.username, command.password):
        _say("Entry added successfully", "light_blue", "bold")
    else:
        _say("Entry already exists", "yellow", "bold")


def _handle_get(command: GetCommand, manager: VaultManager, prompts: Prompts) -> None:
    if not _ready(manager, prompts):
        return
    entries = manager.get_entries(command.service, command.username)
    if not entries:
        _say("No entries found", "yellow", "bold")
        return
    label = "entry" if len(entries) == 1 else "entries "
    print(f"{colored('Found', 'green')} {_bold(f'{len(entries)} {label}', 'green')}")
    for number, entry in enumerate(entries, 1):
        _say(_RULE, "dark_grey")
        print(f"{_bold('Entry #', 'light_blue')}{_bold(str(number), 'blue')}")
        print(f"{_bold('Service:')} {colored(entry.service, 'blue')}")
        print(f"{_bold('Username:')} {colored(entry.username, 'light_blue')}")
        print(f"{_bold('Password:')} {colored(entry.password, 'green')}")
    _say(_RULE, "dark_grey")


def _handle_delete(command: DeleteCommand, manager: VaultManager, prompts: Prompts) -> None:
    if not _ready(manager, prompts):
        return
    if manager.delete_entry(command.service, command.username):
        _say("Entry deleted successfully", "green", "bold")
    else:
        _say(
            f"No entry found for service '{command.service}' "
            f"and username '{command.username}'",
            "yellow",
            "bold",
        )


def _handle_reset(manager: VaultManager, prompts: Prompts) -> None:
    if not _ready(manager, prompts):
        return
    _say("This action will permanently erase all saved password.", "red", "bold")
    answer = prompts.text(_CONFIRM_PROCEED_PROMPT)
    if answer.strip().lower() != "yes":
        _say("Reset aborted. No changes were made.", "light_blue", "bold")
        return
    if manager.reset_vault():
        _say("Vault has been successfully reset!", "green", "bold")
    else:
        _say("Failed to reset the vault!", "yellow", "bold")


def handle_command(command: Command, manager: VaultManager, prompts: Prompts) -> None:
    """Carry out a parsed command against the vault, reporting on stdout."""
    match command:
        case InitCommand():
            _handle_init(manager, prompts)
        case AddCommand():
            _handle_add(command, manager, prompts)
        case GetCommand():
            _handle_get(command, manager, prompts)
        case DeleteCommand():
            _handle_delete(command, manager, prompts)
        case ResetCommand():
            _handle_reset(manager, prompts)
        case _:
            raise TypeError(f"not a command: {command!r}")