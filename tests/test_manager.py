import pytest

from arduvault.constants import AUTH_TAG_LEN, NONCE_LEN, SALT_LEN
from arduvault.crypto import decrypt_data, derive_key
from arduvault.manager import VaultError, VaultManager
from arduvault.vault import PasswordEntry, PasswordVault

MASTER_PASSWORD = "password"


class DeviceLink:
    """Simulates the device side of the serial protocol."""

    def __init__(self):
        self.salt = None
        self.vault = None
        self.outgoing = bytearray()
        self.pending = None
        self.written = []

    def write_str(self, data):
        self.written.append(data)
        command = data.rstrip("\n").partition(":")[0]
        if command in ("UPDATE_SALT", "UPDATE_VAULT"):
            self.pending = command
        elif command == "CHECK_VAULT_FILE":
            answer = "VAULT_EXISTS" if self.vault is not None else "VAULT_NOT_EXISTS"
            self.outgoing += f"{answer}\n".encode()
        elif command == "GET_SALT":
            self.outgoing += f"SALT:{len(self.salt)}\n".encode() + self.salt
        elif command == "GET_VAULT":
            self.outgoing += f"VAULT:{len(self.vault)}\n".encode() + self.vault
        elif command == "RESET_VAULT":
            self.salt = None
            self.vault = None
            self.outgoing += b"RESET_OK\n"

    def write_bytes(self, data):
        self.written.append(bytes(data))
        if self.pending == "UPDATE_SALT":
            self.salt = bytes(data)
        elif self.pending == "UPDATE_VAULT":
            self.vault = bytes(data)
        self.pending = None

    def read_line(self):
        end = self.outgoing.index(b"\n")
        line = bytes(self.outgoing[:end])
        del self.outgoing[: end + 1]
        return line.decode()

    def read_exact(self, size):
        assert len(self.outgoing) >= size
        data = bytes(self.outgoing[:size])
        del self.outgoing[:size]
        return data


class ScriptedLink:
    """Replays fixed device output and records what was written."""

    def __init__(self, incoming):
        self.incoming = bytearray(incoming)
        self.written = []

    def write_str(self, data):
        self.written.append(data)

    def write_bytes(self, data):
        self.written.append(bytes(data))

    def read_line(self):
        end = self.incoming.index(b"\n")
        line = bytes(self.incoming[:end])
        del self.incoming[: end + 1]
        return line.decode()

    def read_exact(self, size):
        data = bytes(self.incoming[:size])
        del self.incoming[:size]
        return data


@pytest.fixture
def device():
    return DeviceLink()


@pytest.fixture
def ready(device):
    manager = VaultManager(device)
    manager.init(MASTER_PASSWORD)
    return manager


def test_new_manager_starts_locked_and_uninitialized(device):
    manager = VaultManager(device)
    assert manager.is_locked() is True
    assert manager.is_init() is False


def test_check_vault_file_reports_missing_vault(device):
    manager = VaultManager(device)
    manager.check_vault_file()
    assert manager.is_init() is False
    assert device.written == ["CHECK_VAULT_FILE\n"]


def test_check_vault_file_reports_existing_vault(device):
    device.vault = bytes(NONCE_LEN + AUTH_TAG_LEN)
    manager = VaultManager(device)
    manager.check_vault_file()
    assert manager.is_init() is True


def test_check_vault_file_rejects_unknown_response():
    manager = VaultManager(ScriptedLink(b"WHAT\n"))
    with pytest.raises(VaultError, match="Invalid arduino response"):
        manager.check_vault_file()


def test_check_vault_file_rejects_empty_response():
    manager = VaultManager(ScriptedLink(b"\n"))
    with pytest.raises(VaultError, match="No response from Arduino"):
        manager.check_vault_file()


def test_init_sends_salt_then_vault(device, ready):
    assert device.written[0] == f"UPDATE_SALT:{SALT_LEN}\n"
    assert len(device.written[1]) == SALT_LEN
    assert device.written[2] == f"UPDATE_VAULT:{len(device.vault)}\n"
    assert ready.is_init() is True
    assert ready.is_locked() is False


def test_init_stores_empty_vault_encrypted_under_master_key(device, ready):
    key = derive_key(MASTER_PASSWORD, device.salt)
    payload = device.vault
    plaintext = decrypt_data(
        key, payload[:NONCE_LEN], payload[NONCE_LEN:-AUTH_TAG_LEN], payload[-AUTH_TAG_LEN:]
    )
    assert PasswordVault.from_json(plaintext) == PasswordVault()


def test_add_get_delete_entries(ready):
    assert ready.add_entry("mail", "alice", "secret") is True
    assert ready.add_entry("mail", "alice", "secret") is False
    assert ready.get_entries("mail", "alice") == [PasswordEntry("mail", "alice", "secret")]
    assert ready.delete_entry("mail", "alice") is True
    assert ready.delete_entry("mail", "alice") is False
    assert ready.get_entries() == []


def test_entry_operations_need_unlocked_vault(device):
    manager = VaultManager(device)
    with pytest.raises(VaultError, match="Vault is not available!"):
        manager.add_entry("mail", "alice", "secret")
    with pytest.raises(VaultError):
        manager.get_entries(None, None)


def test_update_without_changes_writes_nothing(device, ready):
    before = list(device.written)
    stored = device.vault
    ready.update_vault_file()
    assert device.written == before
    assert device.vault == stored

    other = VaultManager(device)
    other.check_vault_file()
    assert other.is_init() is True
    other.unlock(MASTER_PASSWORD)
    assert other.get_entries() == []


def test_update_then_unlock_round_trip(device, ready):
    ready.add_entry("mail", "alice", "secret")
    ready.update_vault_file()

    other = VaultManager(device)
    other.check_vault_file()
    other.unlock(MASTER_PASSWORD)
    assert other.is_locked() is False
    assert other.get_entries() == [PasswordEntry("mail", "alice", "secret")]


def test_unlock_with_wrong_password_fails(device, ready):
    other = VaultManager(device)
    with pytest.raises(VaultError, match="Failed to decrypt data"):
        other.unlock("token")
    assert other.is_locked() is True


def test_unlock_rejects_bad_header():
    link = ScriptedLink(b"SALT:16\n" + bytes(SALT_LEN) + b"NOPE\n")
    manager = VaultManager(link)
    with pytest.raises(VaultError, match="Bad header"):
        manager.unlock(MASTER_PASSWORD)


def test_unlock_rejects_short_payload():
    length = NONCE_LEN + AUTH_TAG_LEN - 1
    link = ScriptedLink(b"SALT:16\n" + bytes(SALT_LEN) + f"VAULT:{length}\n".encode())
    manager = VaultManager(link)
    with pytest.raises(VaultError, match="Invalid vault payload length"):
        manager.unlock(MASTER_PASSWORD)


def test_reset_vault_success(device, ready):
    assert ready.reset_vault() is True
    assert device.vault is None
    assert device.written[-1] == "RESET_VAULT\n"


def test_reset_vault_failure():
    manager = VaultManager(ScriptedLink(b"RESET_FAILED\n"))
    assert manager.reset_vault() is False