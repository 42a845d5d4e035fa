class CipherBoxError(Exception):
    """Base class for every failure raised by a configured CipherBox."""


class ConfigurationError(CipherBoxError):
    """The key handed to `configure` cannot build an AES cipher."""


class DecodingError(CipherBoxError):
    """The value handed to `decrypt` is not valid hexadecimal text."""


class CryptoError(CipherBoxError):
    """The cipher rejected the ciphertext (length, padding or encoding)."""
