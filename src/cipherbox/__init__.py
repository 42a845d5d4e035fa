from .core import (
    CipherBox,
    CipherBoxError,
    ConfigurationError,
    CryptoError,
    DecodingError,
)

__all__ = [
    "CipherBox",
    "CipherBoxError",
    "ConfigurationError",
    "CryptoError",
    "DecodingError",
]
