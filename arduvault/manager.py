"""Vault state held on the host, kept in sync with the device over serial."""

from __future__ import annotations

import os

from .constants import AUTH_TAG_LEN, NONCE_LEN, SALT_LEN
from .crypto import CryptoError, decrypt_data, derive_key, encrypt_data
from .transport import SerialLink
from .vault import PasswordEntry, PasswordVault

_VAULT_HEADER = "VAULT:"


class VaultError(Exception):
    """Raised when the device or the vault is not in a usable state."""


class VaultManager:
    """Talks to the vault device and holds the unlocked vault in memory.

    ``link`` is any object with ``write_str``, ``write_bytes``, ``read_line``
    and ``read_exact``; when omitted the first ACM/USB serial port is opened.
    """

    def __init__(self, link=None) -> None:
        self._link = link if link is not None else SerialLink.open()
        self._master_key: bytes | None = None
        self._vault: PasswordVault | None = None
        self._is_init = False
        self._is_locked = True
        self._needs_update = False

    def init(self, password: str) -> None:
        """Create an empty vault protected by password and store it on the device."""
        salt = os.urandom(SALT_LEN)
        master_key = derive_key(password, salt)
        vault = PasswordVault()

        self._link.write_str(f"UPDATE_SALT:{len(salt)}\n")
        self._link.write_bytes(salt)
        self._send_vault(master_key, vault)

        self._master_key = master_key
        self._vault = vault
        self._is_init = True
        self._is_locked = False
        self._needs_update = False

    def is_init(self) -> bool:
        return self._is_init

    def is_locked(self) -> bool:
        return self._is_locked

    def add_entry(self, service: str, username: str, password: str) -> bool:
        """Add an entry; return False if one already exists for the pair."""
        if self._require_vault().add(service, username, password) is None:
            return False
        self._needs_update = True
        return True

    def get_entries(
        self, service: str | None = None, username: str | None = None
    ) -> list[PasswordEntry]:
        return self._require_vault().get(service, username)

    def delete_entry(self, service: str, username: str) -> bool:
        """Delete an entry; return False if there was none for the pair."""
        if self._require_vault().delete(service, username) is None:
            return False
        self._needs_update = True
        return True

    def check_vault_file(self) -> None:
        """Ask the device whether a vault is stored and record the answer."""
        self._link.write_str("CHECK_VAULT_FILE\n")
        response = self._link.read_line()
        if not response:
            raise VaultError("No response from Arduino")
        answer = response.strip()
        if answer == "VAULT_EXISTS":
            self._is_init = True
        elif answer == "VAULT_NOT_EXISTS":
            self._is_init = False
        else:
            raise VaultError(f"Invalid arduino response: {answer!r}")

    def unlock(self, password: str) -> None:
        """Fetch salt and vault from the device and decrypt the vault."""
        self._link.write_str("GET_SALT\n")
        self._link.read_line()
        salt = self._link.read_exact(SALT_LEN)

        try:
            master_key = derive_key(password, salt)
        except CryptoError as exc:
            raise VaultError(str(exc)) from exc

        self._link.write_str("GET_VAULT\n")
        header = self._link.read_line()
        if not header.startswith(_VAULT_HEADER):
            raise VaultError(f"Bad header: {header}")
        digits = header[len(_VAULT_HEADER):]
        if not (digits.isascii() and digits.isdigit()):
            raise VaultError(f"Invalid vault payload length: {digits!r}")
        length = int(digits)
        if length < NONCE_LEN + AUTH_TAG_LEN:
            raise VaultError(f"Invalid vault payload length: {length}")

        payload = self._link.read_exact(length)
        nonce = payload[:NONCE_LEN]
        ciphertext = payload[NONCE_LEN:-AUTH_TAG_LEN]
        auth_tag = payload[-AUTH_TAG_LEN:]

        try:
            plaintext = decrypt_data(master_key, nonce, ciphertext, auth_tag)
        except CryptoError as exc:
            raise VaultError(str(exc)) from exc

        try:
            vault = PasswordVault.from_json(plaintext)
        except ValueError as exc:
            raise VaultError(f"Failed to parse vault data: {exc}") from exc

        self._master_key = master_key
        self._vault = vault
        self._is_locked = False

    def update_vault_file(self) -> None:
        """Re-encrypt the vault and send it to the device if it has changed."""
        if not self._needs_update:
            return
        vault = self._require_vault()
        if self._master_key is None:
            raise VaultError("Master key is not available!")
        self._send_vault(self._master_key, vault)
        self._needs_update = False

    def reset_vault(self) -> bool:
        """Ask the device to erase the stored vault; return whether it did."""
        self._link.write_str("RESET_VAULT\n")
        return self._link.read_line().strip() == "RESET_OK"

    def _send_vault(self, master_key: bytes, vault: PasswordVault) -> None:
        nonce, ciphertext, auth_tag = encrypt_data(master_key, vault.to_json().encode("utf-8"))
        payload = nonce + ciphertext + auth_tag
        self._link.write_str(f"UPDATE_VAULT:{len(payload)}\n")
        self._link.write_bytes(payload)

    def _require_vault(self) -> PasswordVault:
        if self._vault is None:
            raise VaultError("Vault is not available!")
        return self._vault