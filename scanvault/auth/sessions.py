"""Session issuer: login and stateless bearer token verification.

Tokens are JWTs carrying the username in ``sub`` together with ``iat`` and
``exp``. Nothing is stored server side, so a token stays valid until it
expires; there is no revocation list.
"""

import binascii
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import jwt
from jwt.utils import base64url_decode, base64url_encode

from scanvault.errors import InvalidCredentials, InvalidToken, TokenExpired
from scanvault.storage.repositories import User
from scanvault.utils.logger import get_logger

from .credentials import CredentialStore

logger = get_logger(__name__)

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_canonical_segment(segment: str) -> bool:
    """Check that a base64url segment re-encodes to exactly the same text.

    Decoders ignore stray characters and the unused low bits of the last
    character, so two different strings can carry the same signature bytes.
    """
    try:
        return base64url_encode(base64url_decode(segment)).decode("ascii") == segment
    except (binascii.Error, ValueError):
        return False


class SessionIssuer:
    """Registers users, logs them in and validates their tokens.

    Args:
        credentials: Credential store used for registration and login.
        secret_key: HMAC key tokens are signed with.
        algorithm: JWT signing algorithm.
        ttl: Lifetime of an issued token.
        clock: Source of the current time, for issuing tokens.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.credentials = credentials
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self.clock = clock

    def register(self, username: str, password: str) -> User:
        """Create an account. Registration does not log the user in."""
        return self.credentials.register(username, password)

    def login(self, username: str, password: str) -> str:
        """Check credentials and return a signed token.

        Raises:
            InvalidCredentials: For an unknown username or a wrong password;
                the two cases are indistinguishable to the caller.
        """
        if not self.credentials.verify(username, password):
            logger.info("Rejected login attempt")
            raise InvalidCredentials()
        logger.info("User %s logged in", username)
        return self.issue(username)

    def issue(self, username: str) -> str:
        issued_at = self.clock()
        payload = {
            "sub": username,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Return the username embedded in a valid token.

        Raises:
            TokenExpired: If the token's ``exp`` has passed.
            InvalidToken: If the token is malformed, altered, or signed with
                a different key or algorithm.
        """
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken() from exc

        if not _is_canonical_segment(token.rpartition(".")[2]):
            raise InvalidToken()

        subject = claims["sub"]
        if not isinstance(subject, str) or not subject:
            raise InvalidToken()
        return subject
