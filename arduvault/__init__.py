"""Host-side client for a password vault kept encrypted on an Arduino board over serial."""

__version__ = "0.1.0"