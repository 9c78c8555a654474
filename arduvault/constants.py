"""Application metadata and protocol constants."""

APP_NAME = "vault-cli"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "CLI application for an Arduino-based password vault"

BAUD_RATE = 115200
NONCE_LEN = 12
AUTH_TAG_LEN = 16
SALT_LEN = 16
MASTER_KEY_LEN = 32