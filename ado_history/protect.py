"""Encryption at rest for stored personal access tokens.

The token store and credential builder only talk to a ``SecretProtector``.
The default implementation derives a Fernet key (AES-128-CBC + HMAC) with
PBKDF2-HMAC-SHA256 from the current OS user and machine identity, so a blob
written by one account on one machine cannot be opened anywhere else.

Blob layout: ``salt (16 bytes) || fernet token``.
"""
import base64
import getpass
import logging
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import DecryptError

logger = logging.getLogger(__name__)

SALT_LENGTH = 16
KDF_ITERATIONS = 480_000
MACHINE_ID_FILES = ("/etc/machine-id", "/var/lib/dbus/machine-id")


class SecretProtector(ABC):
    """
    Interface to the platform's user/machine-bound secret protection.

    Implementations must never write the plaintext anywhere.
    """

    @abstractmethod
    def protect(self, plaintext: str) -> bytes:
        """Encrypt ``plaintext`` into an opaque blob."""

    @abstractmethod
    def unprotect(self, blob: bytes) -> str:
        """
        Decrypt a blob produced by ``protect``.

        Raises:
            DecryptError: If the blob is corrupted or was protected under a
                different identity.
        """


def machine_identity() -> str:
    """Return a stable identifier for this machine."""
    for candidate in MACHINE_ID_FILES:
        try:
            value = Path(candidate).read_text(encoding="utf-8").strip()
        except OSError:
            continue
        if value:
            return value
    # MAC-address based fallback for hosts without a machine-id file
    return f"{uuid.getnode():012x}"


def user_machine_identity() -> str:
    return f"{getpass.getuser()}@{machine_identity()}"


class FernetSecretProtector(SecretProtector):
    """Fernet encryption keyed on ``<user>@<machine>``."""

    def __init__(self, identity: Optional[str] = None, iterations: int = KDF_ITERATIONS):
        self._identity = identity
        self._iterations = iterations

    def _fernet(self, salt: bytes) -> Fernet:
        identity = self._identity if self._identity is not None else user_machine_identity()
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=self._iterations,
        )
        key = base64.urlsafe_b64encode(kdf.derive(identity.encode("utf-8")))
        return Fernet(key)

    def protect(self, plaintext: str) -> bytes:
        salt = os.urandom(SALT_LENGTH)
        return salt + self._fernet(salt).encrypt(plaintext.encode("utf-8"))

    def unprotect(self, blob: bytes) -> str:
        if len(blob) <= SALT_LENGTH:
            raise DecryptError("Token file is empty or truncated")

        salt, token = blob[:SALT_LENGTH], blob[SALT_LENGTH:]
        try:
            plaintext = self._fernet(salt).decrypt(token)
        except InvalidToken as exc:
            logger.debug("Token file rejected by Fernet", exc_info=True)
            raise DecryptError(
                "Token file could not be decrypted; it was created by another user or "
                "machine, or its contents are corrupted"
            ) from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptError("Token file does not contain a UTF-8 token") from exc


def default_protector() -> SecretProtector:
    return FernetSecretProtector()
