"""SSH public key helpers."""

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization


def is_ssh_public_key(text: str) -> bool:
    """Return True if ``text`` parses as an OpenSSH public key line."""
    fields = text.split()
    if len(fields) < 2:
        return False
    try:
        serialization.load_ssh_public_key(f"{fields[0]} {fields[1]}".encode())
    except (ValueError, UnsupportedAlgorithm):
        return False
    return True


def with_comment(text: str, comment: str) -> str:
    """
    Return the key line with its comment field replaced by ``comment``.

    Only the key type and key material are kept from ``text``.
    """
    fields = text.split()
    return " ".join([*fields[:2], comment]) if comment else " ".join(fields[:2])


__all__ = ["is_ssh_public_key", "with_comment"]
