"""Session tokens for the browser client.

Tokens are HS256 JWTs carrying ``iat``, ``exp`` and ``jti``. Verification is
stateless unless a denylist is plugged in.
"""
import threading, time, uuid
from enum import Enum
from typing import Callable, Optional, Protocol
import jwt

ALGORITHM = 'HS256'
BEARER_PREFIX = 'Bearer '
DEFAULT_LIFETIME_S = 3600


class AuthFailure(str, Enum):
    MISSING_TOKEN = 'missing_token'
    EXPIRED = 'expired'
    INVALID = 'invalid'


class AuthError(Exception):
    def __init__(self, failure: AuthFailure, reason: str = ''):
        super().__init__(reason or failure.value)
        self.failure = failure


class Denylist(Protocol):
    def is_revoked(self, claims: dict) -> bool: ...


class InMemoryDenylist:
    """Revoked token ids for a single process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._revoked = set()

    def revoke(self, jti: str) -> None:
        with self._lock:
            self._revoked.add(jti)

    def is_revoked(self, claims: dict) -> bool:
        with self._lock:
            return claims.get('jti') in self._revoked


class SessionTokenService:
    def __init__(self, secret: str, lifetime_s: int = DEFAULT_LIFETIME_S,
                 clock: Callable[[], float] = time.time, denylist: Optional[Denylist] = None):
        if not secret:
            raise ValueError('session secret must not be empty')
        self._secret = secret
        self.lifetime_s = lifetime_s
        self._clock = clock
        self._denylist = denylist

    def issue(self) -> str:
        now = int(self._clock())
        payload = {
            'iat': now,
            'exp': now + self.lifetime_s,
            'jti': uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: Optional[str]) -> dict:
        if not token:
            raise AuthError(AuthFailure.MISSING_TOKEN)
        try:
            # expiry is checked below against our own clock
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={'verify_exp': False, 'verify_iat': False, 'require': ['iat', 'exp']},
            )
        except jwt.InvalidTokenError as e:
            raise AuthError(AuthFailure.INVALID, str(e)) from e
        try:
            expires_at = float(claims['exp'])
        except (TypeError, ValueError) as e:
            raise AuthError(AuthFailure.INVALID, 'exp claim is not numeric') from e
        if self._clock() >= expires_at:
            raise AuthError(AuthFailure.EXPIRED)
        if self._denylist is not None and self._denylist.is_revoked(claims):
            raise AuthError(AuthFailure.INVALID, 'token revoked')
        return claims

    def verify_header(self, authorization: Optional[str]) -> dict:
        header = authorization or ''
        if not header.startswith(BEARER_PREFIX):
            raise AuthError(AuthFailure.MISSING_TOKEN)
        token = header[len(BEARER_PREFIX):]
        if not token:
            raise AuthError(AuthFailure.INVALID, 'empty bearer credential')
        return self.verify(token)
