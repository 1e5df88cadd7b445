"""Unit tests for encryption utilities."""

from unittest.mock import patch

import pytest
from pydantic import SecretStr

from campaignhub.config.settings import Settings
from campaignhub.core.encryption import (
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    DecryptionError,
    EncryptionKeyError,
    Encryptor,
    generate_key,
    get_encryptor,
    key_from_string,
    key_to_string,
    reset_encryptor,
)


class TestEncryptor:
    """Tests for Encryptor class."""

    @pytest.fixture
    def key(self) -> bytes:
        """Generate a test encryption key."""
        return generate_key()

    @pytest.fixture
    def encryptor(self, key: bytes) -> Encryptor:
        return Encryptor(key)

    def test_init_with_invalid_key_length(self):
        """Test encryptor rejects invalid key lengths."""
        with pytest.raises(EncryptionKeyError, match="must be 32 bytes"):
            Encryptor(b"short_key")

    def test_encrypt_decrypt_bytes(self, encryptor: Encryptor):
        plaintext = b"EAAB-access-token"
        ciphertext = encryptor.encrypt(plaintext)

        assert ciphertext != plaintext
        assert len(ciphertext) == NONCE_SIZE + len(plaintext) + TAG_SIZE
        assert encryptor.decrypt(ciphertext) == plaintext

    def test_random_nonce(self, encryptor: Encryptor):
        """Test encrypting the same token twice yields different ciphertexts."""
        assert encryptor.encrypt(b"same") != encryptor.encrypt(b"same")

    def test_string_helpers(self, encryptor: Encryptor):
        stored = encryptor.encrypt_string("ya29.google-token")

        assert "ya29" not in stored
        assert encryptor.decrypt_string(stored) == "ya29.google-token"

    def test_wrong_key_fails(self, encryptor: Encryptor):
        stored = encryptor.encrypt_string("secret")

        with pytest.raises(DecryptionError):
            Encryptor(generate_key()).decrypt_string(stored)

    def test_tampered_data_fails(self, encryptor: Encryptor):
        ciphertext = bytearray(encryptor.encrypt(b"secret"))
        ciphertext[-1] ^= 0xFF

        with pytest.raises(DecryptionError, match="Decryption failed"):
            encryptor.decrypt(bytes(ciphertext))

    def test_short_data_fails(self, encryptor: Encryptor):
        with pytest.raises(DecryptionError, match="too short"):
            encryptor.decrypt(b"\x00" * (NONCE_SIZE + TAG_SIZE - 1))

    def test_invalid_base64_fails(self, encryptor: Encryptor):
        with pytest.raises(DecryptionError, match="base64"):
            encryptor.decrypt_string("not base64 !!")


class TestKeyHelpers:
    """Tests for key encoding helpers."""

    def test_generate_key_size(self):
        assert len(generate_key()) == KEY_SIZE

    def test_key_string_roundtrip(self):
        key = generate_key()
        assert key_from_string(key_to_string(key)) == key

    def test_key_from_string_rejects_wrong_size(self):
        with pytest.raises(EncryptionKeyError, match="32 bytes"):
            key_from_string(key_to_string(b"x" * 16))

    def test_key_from_string_rejects_garbage(self):
        with pytest.raises(EncryptionKeyError, match="Invalid key string"):
            key_from_string("***")


class TestGlobalEncryptor:
    """Tests for get_encryptor/reset_encryptor."""

    @pytest.fixture(autouse=True)
    def reset(self):
        reset_encryptor()
        yield
        reset_encryptor()

    def test_missing_key_raises(self):
        with patch(
            "campaignhub.config.settings.get_settings",
            return_value=Settings(ENCRYPTION_KEY=None),
        ):
            with pytest.raises(EncryptionKeyError, match="ENCRYPTION_KEY is not configured"):
                get_encryptor()

    def test_loads_key_from_settings(self):
        key = generate_key()
        settings = Settings(ENCRYPTION_KEY=SecretStr(key_to_string(key)))

        with patch("campaignhub.config.settings.get_settings", return_value=settings):
            encryptor = get_encryptor()

        assert get_encryptor() is encryptor
        assert Encryptor(key).decrypt_string(encryptor.encrypt_string("t")) == "t"
