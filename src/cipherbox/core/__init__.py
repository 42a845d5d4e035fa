# Core logic not tied to HTTP request/response handling:
# - The CipherBox encrypt/decrypt helper
# - Its error hierarchy
from .cipher import CipherBox, CipherState, Configured, Unconfigured
from .errors import CipherBoxError, ConfigurationError, CryptoError, DecodingError

__all__ = [
    "CipherBox",
    "CipherBoxError",
    "CipherState",
    "ConfigurationError",
    "Configured",
    "CryptoError",
    "DecodingError",
    "Unconfigured",
]
