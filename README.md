# arduvault

A command-line client for a password vault kept on an Arduino board. The
vault is stored on the board as an encrypted blob. This tool talks to the
board over a USB serial port. It derives a master key from your master
password with Argon2id and uses AES-256-GCM to encrypt and decrypt the vault.
Entries are never sent to the board in plain text.

## Installation

```
pip install .
```

The tool uses the first serial port whose name contains `ttyACM` or `ttyUSB`
and talks to it at 115200 baud. Plug the board in before you run it.

## Usage

```
arduvault [OPTIONS] [COMMAND]
```

Options:

- `-h`, `--help`: show the help message
- `-i`, `--interactive`: start an interactive session
- `-v`, `--version`: show the name and version

Commands:

- `init`: create an empty vault protected by a new master password. You are
  asked for the password twice, until both answers match.
- `add <service> <username> <password>`: add an entry. Run `add` on its own
  to be prompted for each field. An existing service/username pair is never
  overwritten.
- `get [service] [username]`: with no arguments, list every entry. With a
  service and a username, show that single entry. With a single argument,
  list the entries whose stored key `service|username` is exactly that
  argument.
- `delete <service> <username>`: remove an entry. Run `delete` on its own to
  be prompted.
- `reset`: ask the board to erase the stored vault. You must type `yes` to
  confirm.

If you run the tool without a command, it prints a short notice and the help
text.

Every command except `init` first checks that a vault exists on the board. If
the vault is locked, the command asks for the master password. Changes are
sent back to the board when the command finishes. In interactive mode they
are sent when the session ends.

### Interactive mode

```
arduvault -i
```

This opens a `>` prompt that accepts the commands above. It also accepts:

- `help`, `-h` or `--help` to show the help text
- `version`, `-v` or `--version` to show the version
- `exit` or `quit` to leave

End of input also leaves the session. The vault is unlocked once and stays
unlocked until the session ends.

### Examples

```
arduvault init
arduvault add mail alice password
arduvault get
arduvault get mail alice
arduvault delete mail alice
arduvault reset
arduvault -i
```

Errors from the board, the serial port or decryption are printed to standard
error, and the command exits with status 1.

## Using it from Python

Each part of the tool can be imported and used on its own:

- `arduvault.vault`
  - `PasswordEntry` (`service`, `username`, `password`)
  - `PasswordVault`, with `add`, `get`, `delete`, `clear`, `to_json` and
    `from_json`
- `arduvault.crypto`
  - `derive_key(password, salt)`
  - `encrypt_data(key, plaintext)`, which returns `(nonce, ciphertext, auth_tag)`
  - `decrypt_data(key, nonce, ciphertext, auth_tag)`
  - `CryptoError`, raised when any of these fails
- `arduvault.transport`
  - `find_port(port_names)`
  - `SerialLink`, with `open()`, `write_str`, `write_bytes`, `read_line` and
    `read_exact`
- `arduvault.manager`
  - `VaultManager`, which speaks the board's line-based protocol
    (`CHECK_VAULT_FILE`, `GET_SALT`, `GET_VAULT`, `UPDATE_SALT`,
    `UPDATE_VAULT`, `RESET_VAULT`)
  - `VaultError`
- `arduvault.command`
  - `parse_command(command_str, prompts)`
  - `handle_command(command, manager, prompts)`
  - `Prompts`
- `arduvault.cli`
  - `Cli`
  - `build_parser()`
  - `main(argv=None)`

`VaultManager` takes an optional `link` argument. This can be any object with
`write_str`, `write_bytes`, `read_line` and `read_exact`. If you leave it out,
the first matching serial port is opened.

## What it does not do

This package is only the host side. It does not include the program that runs
on the board. It relies on the board answering the protocol above and storing
the salt and the encrypted vault. There is no way to choose a serial port or
baud rate, and there is no export, import or password generation.

## Running the tests

```
pip install .[test]
pytest
```