from .encrypted_cookies import EncryptedCookies

__all__ = ["EncryptedCookies"]
