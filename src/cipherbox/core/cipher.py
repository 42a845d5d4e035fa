"""
Optional symmetric encryption for string values.

A `CipherBox` starts unconfigured and passes values through untouched. Once
`configure` is called with an AES key (128, 192 or 256-bit), values are
encrypted with AES-CBC and PKCS7 padding under a random IV. The IV is
prepended to the ciphertext and the whole payload crosses the boundary as
lowercase hexadecimal text:

    hex( IV[16] || AES-CBC(key, IV, PKCS7(utf8(plaintext))) )

The class holds no key until configured, so middlewares can subclass it as a
mixin without calling its constructor.
"""

import binascii
import os
from dataclasses import dataclass
from typing import Self, TypeAlias

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from cipherbox.core.errors import ConfigurationError, CryptoError, DecodingError
from cipherbox.shared import Logger

logger = Logger(__name__).get_logger()

BLOCK_BYTES = algorithms.AES.block_size // 8


@dataclass(frozen=True)
class Unconfigured:
    """Pass-through mode: no key has been set."""


@dataclass(frozen=True)
class Configured:
    """A cipher handle bound to one key."""

    handle: algorithms.AES


CipherState: TypeAlias = Unconfigured | Configured

UNCONFIGURED = Unconfigured()


class CipherBox:
    _state: CipherState = UNCONFIGURED

    @property
    def state(self) -> CipherState:
        return self._state

    @property
    def is_configured(self) -> bool:
        return isinstance(self._state, Configured)

    def configure(self, key: bytes | str) -> Self:
        """
        Bind a new AES cipher handle to `key`, replacing any previous one.
        Raises ConfigurationError if the key is not 16, 24 or 32 bytes.
        """
        try:
            if isinstance(key, str):
                key = key.encode()

            handle = algorithms.AES(key)
        except (TypeError, ValueError) as e:
            # UnicodeEncodeError is a ValueError
            logger.warning("Rejected cipher key: %s", e)
            raise ConfigurationError(f"Invalid AES key: {e}") from e

        self._state = Configured(handle=handle)
        logger.debug("Cipher configured with a %d-bit key.", handle.key_size)

        return self

    def encrypt(self, plaintext: str) -> str:
        match self._state:
            case Unconfigured():
                return plaintext
            case Configured(handle=handle):
                return _encrypt(handle, plaintext)

    def decrypt(self, ciphertext_hex: str) -> str:
        match self._state:
            case Unconfigured():
                return ciphertext_hex
            case Configured(handle=handle):
                return _decrypt(handle, ciphertext_hex)


def _encrypt(handle: algorithms.AES, plaintext: str) -> str:
    iv = os.urandom(BLOCK_BYTES)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext.encode()) + padder.finalize()

    encryptor = Cipher(handle, modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    return (iv + ciphertext).hex()


def _decrypt(handle: algorithms.AES, ciphertext_hex: str) -> str:
    try:
        raw = binascii.unhexlify(ciphertext_hex)
    except ValueError as e:
        logger.warning("Ciphertext is not valid hexadecimal: %s", e)
        raise DecodingError(f"Invalid hexadecimal ciphertext: {e}") from e

    # IV plus at least one padded block
    if len(raw) < 2 * BLOCK_BYTES or len(raw) % BLOCK_BYTES:
        logger.warning("Ciphertext has an invalid length of %d bytes.", len(raw))
        raise CryptoError(f"Invalid ciphertext length: {len(raw)} bytes")

    iv, ciphertext = raw[:BLOCK_BYTES], raw[BLOCK_BYTES:]

    try:
        decryptor = Cipher(handle, modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()

        return plaintext.decode()
    except ValueError as e:
        logger.warning("Decryption failed: %s", e)
        raise CryptoError(f"Decryption failed: {e}") from e
