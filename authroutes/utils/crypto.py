import base64
import copy
import hashlib
import hmac
import math
import time
from typing import Callable, Optional
from urllib.parse import quote, unquote

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .urls import add_query_arg

NONCE_QUERY_ARG = "_wpnonce"


class TokenService:
    """
    Single-use verification tokens ("nonces") appended to action URLs.

    A token is valid for the tick it was issued in and the one after it,
    so the effective lifetime is between half and all of `lifetime`.
    """

    def __init__(
        self,
        secret_key: str,
        lifetime: int = 86400,
        clock: Callable[[], float] = time.time,
        session_token: str = "",
        user_id: int = 0,
    ):
        self.secret_key = secret_key
        self.lifetime = lifetime
        self.clock = clock
        self.session_token = session_token
        self.user_id = user_id
        self._key = self._derive_key(secret_key)

    def _derive_key(self, password: str, salt: Optional[bytes] = None) -> bytes:
        """Derive the signing key from the configured secret"""
        if salt is None:
            salt = b"authroutes_nonce_salt"

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=100000,
        )
        return base64.urlsafe_b64encode(kdf.derive(password.encode()))

    def tick(self) -> int:
        return int(math.ceil(self.clock() / (self.lifetime / 2)))

    def _sign(self, tick: int, action: str) -> str:
        data = f"{tick}|{action}|{self.user_id}|{self.session_token}"
        digest = hmac.new(self._key, data.encode(), hashlib.sha256).hexdigest()
        return digest[-12:-2]

    def create_nonce(self, action: str = "") -> str:
        return self._sign(self.tick(), action)

    def verify_nonce(self, nonce: str, action: str = "") -> int:
        """
        Returns 1 when issued in the current tick, 2 when issued in the
        previous one, 0 when invalid.
        """
        if not nonce:
            return 0
        tick = self.tick()
        if hmac.compare_digest(self._sign(tick, action), nonce):
            return 1
        if hmac.compare_digest(self._sign(tick - 1, action), nonce):
            return 2
        return 0

    def nonce_url(self, url: str, action: str = "", name: str = NONCE_QUERY_ARG) -> str:
        return add_query_arg({name: self.create_nonce(action)}, url)

    def for_user(self, user_id: int, session_token: str = "") -> "TokenService":
        scoped = copy.copy(self)
        scoped.user_id = user_id
        scoped.session_token = session_token
        return scoped

    # -------------------------
    # Logged-in cookie
    # -------------------------

    def _sign_auth(self, user_login: str, expiration: int) -> str:
        data = f"{user_login}|{expiration}|logged_in"
        return hmac.new(self._key, data.encode(), hashlib.sha256).hexdigest()

    def create_auth_cookie(self, user_login: str, lifetime: int = 172800) -> str:
        """`login|expiration|hmac`, the login percent-encoded."""
        expiration = int(self.clock()) + lifetime
        return f"{quote(user_login, safe='')}|{expiration}|{self._sign_auth(user_login, expiration)}"

    def validate_auth_cookie(self, cookie: Optional[str]) -> Optional[str]:
        """The user login a cookie was issued for, or None when invalid or expired."""
        if not cookie:
            return None
        parts = cookie.split("|")
        if len(parts) != 3:
            return None

        user_login, expiration, signature = unquote(parts[0]), parts[1], parts[2]
        try:
            expires_at = int(expiration)
        except ValueError:
            return None
        if expires_at < self.clock():
            return None
        if not hmac.compare_digest(self._sign_auth(user_login, expires_at), signature):
            return None
        return user_login
