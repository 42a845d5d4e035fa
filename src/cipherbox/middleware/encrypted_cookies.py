from collections.abc import Iterable
from http.cookies import SimpleCookie

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from cipherbox.core import CipherBox, CipherBoxError
from cipherbox.shared import Logger

logger = Logger(__name__).get_logger()


class EncryptedCookies(CipherBox, BaseHTTPMiddleware):
    """Encrypted cookie middleware for FastApi apps.
    Cookies set by endpoints leave as hex ciphertext and
    come back in decrypted before the endpoint sees them.
    Without a key every cookie passes through unchanged.
    """

    def __init__(
        self,
        app,
        dispatch=None,
        key: bytes | str | None = None,
        cookie_names: Iterable[str] = (),
    ):
        super().__init__(app, dispatch)

        # Empty means every cookie
        self.__cookie_names = frozenset(cookie_names)
        # Quotes rewritten values the way Set-Cookie does
        self.__quoter = SimpleCookie()

        if key is not None:
            self.configure(key)
        else:
            logger.info("No cookie key configured, cookies pass through.")

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if self.is_configured:
            self.__decrypt_request(request)

        response = await call_next(request)

        if self.is_configured:
            self.__encrypt_response(response)

        return response

    def __selected(self, name: str) -> bool:
        return not self.__cookie_names or name in self.__cookie_names

    def __decrypt_request(self, request: Request):
        # rewrite the raw Cookie header in the scope
        # so downstream Request objects parse plaintext
        header = request.headers.get("cookie")
        if not header:
            return

        pairs = []
        for chunk in header.split(";"):
            name, sep, value = chunk.partition("=")
            name, value = name.strip(), value.strip()

            # Unselected cookies keep their raw, possibly quoted, text
            if not sep or not self.__selected(name):
                pairs.append(chunk.strip())
                continue

            try:
                plaintext = self.decrypt(value)
            except CipherBoxError as e:
                logger.warning("Dropping cookie %r that failed to decrypt: %s", name, e)
                continue

            _, coded_value = self.__quoter.value_encode(plaintext)
            pairs.append(f"{name}={coded_value}")

        headers = [(k, v) for k, v in request.scope["headers"] if k != b"cookie"]
        pairs = [pair for pair in pairs if pair]
        if pairs:
            headers.append((b"cookie", "; ".join(pairs).encode("latin-1")))
        request.scope["headers"] = headers

    def __encrypt_response(self, response: Response):
        set_cookies = response.headers.getlist("set-cookie")
        if not set_cookies:
            return

        del response.headers["set-cookie"]
        for set_cookie in set_cookies:
            response.headers.append("set-cookie", self.__encrypt_set_cookie(set_cookie))

    def __encrypt_set_cookie(self, set_cookie: str) -> str:
        pair, sep, attributes = set_cookie.partition(";")
        name, _, value = pair.partition("=")
        name, value = name.strip(), value.strip()

        # Deleted cookies keep their empty value
        if value in ("", '""') or not self.__selected(name):
            return set_cookie

        logger.debug("Encrypting outgoing cookie %r.", name)
        return f"{name}={self.encrypt(value)}{sep}{attributes}"
