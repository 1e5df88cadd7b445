"""Encryption for integration credentials.

Ad-platform access tokens are stored AES-256-GCM encrypted and base64
encoded in ``integrations.access_token``.

Usage:
    from campaignhub.core.encryption import get_encryptor

    encryptor = get_encryptor()
    stored = encryptor.encrypt_string(access_token)
    access_token = encryptor.decrypt_string(stored)
"""

import base64
import secrets

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from campaignhub.utils.exceptions import CampaignHubError


class EncryptionError(CampaignHubError):
    """Raised when encryption or decryption fails."""

    pass


class EncryptionKeyError(EncryptionError):
    """Raised when the encryption key is missing or invalid."""

    pass


class DecryptionError(EncryptionError):
    """Raised when decryption fails (wrong key, corrupted data, etc.)."""

    pass


NONCE_SIZE = 12  # 96 bits recommended for AES-GCM
KEY_SIZE = 32  # 256 bits for AES-256
TAG_SIZE = 16


class Encryptor:
    """AES-256-GCM encryptor.

    Output layout is ``nonce || ciphertext || tag``.
    """

    def __init__(self, key: bytes):
        """Initialize encryptor with a key.

        Args:
            key: 32-byte encryption key

        Raises:
            EncryptionKeyError: If key is not 32 bytes
        """
        if len(key) != KEY_SIZE:
            raise EncryptionKeyError(
                f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}"
            )
        self._aesgcm = AESGCM(key)

    def encrypt(self, plaintext: bytes, associated_data: bytes | None = None) -> bytes:
        """Encrypt bytes.

        Args:
            plaintext: Data to encrypt
            associated_data: Optional additional authenticated data

        Returns:
            nonce || ciphertext || tag

        Raises:
            EncryptionError: If encryption fails
        """
        try:
            nonce = secrets.token_bytes(NONCE_SIZE)
            return nonce + self._aesgcm.encrypt(nonce, plaintext, associated_data)
        except Exception as e:
            raise EncryptionError(f"Encryption failed: {e}") from e

    def decrypt(self, ciphertext: bytes, associated_data: bytes | None = None) -> bytes:
        """Decrypt bytes produced by ``encrypt``.

        Raises:
            DecryptionError: If the data is too short, tampered or the key is wrong
        """
        if len(ciphertext) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionError("Ciphertext too short")

        try:
            nonce = ciphertext[:NONCE_SIZE]
            return self._aesgcm.decrypt(nonce, ciphertext[NONCE_SIZE:], associated_data)
        except Exception as e:
            raise DecryptionError(f"Decryption failed: {e}") from e

    def encrypt_string(self, plaintext: str, associated_data: bytes | None = None) -> str:
        """Encrypt a string and return the base64-encoded result."""
        encrypted = self.encrypt(plaintext.encode("utf-8"), associated_data)
        return base64.b64encode(encrypted).decode("ascii")

    def decrypt_string(self, ciphertext: str, associated_data: bytes | None = None) -> str:
        """Decrypt a base64-encoded string produced by ``encrypt_string``."""
        try:
            encrypted = base64.b64decode(ciphertext, validate=True)
        except ValueError as e:
            raise DecryptionError(f"Ciphertext is not valid base64: {e}") from e
        return self.decrypt(encrypted, associated_data).decode("utf-8")


def generate_key() -> bytes:
    """Generate a new random 256-bit key."""
    return secrets.token_bytes(KEY_SIZE)


def key_to_string(key: bytes) -> str:
    """Encode a key as base64 for storage in ENCRYPTION_KEY."""
    return base64.b64encode(key).decode("ascii")


def key_from_string(key_string: str) -> bytes:
    """Decode a base64 key string.

    Raises:
        EncryptionKeyError: If the string is not base64 or not 32 bytes
    """
    try:
        key = base64.b64decode(key_string, validate=True)
    except ValueError as e:
        raise EncryptionKeyError(f"Invalid key string: {e}") from e
    if len(key) != KEY_SIZE:
        raise EncryptionKeyError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    return key


_encryptor: Encryptor | None = None


def get_encryptor() -> Encryptor:
    """Get the global encryptor, loading ENCRYPTION_KEY on first call.

    Raises:
        EncryptionKeyError: If ENCRYPTION_KEY is not configured
    """
    global _encryptor

    if _encryptor is None:
        from campaignhub.config.settings import get_settings

        settings = get_settings()
        if settings.ENCRYPTION_KEY is None:
            raise EncryptionKeyError(
                "ENCRYPTION_KEY is not configured. Set it in environment variables."
            )
        _encryptor = Encryptor(key_from_string(settings.ENCRYPTION_KEY.get_secret_value()))

    return _encryptor


def reset_encryptor() -> None:
    """Reset the global encryptor (for testing)."""
    global _encryptor
    _encryptor = None
