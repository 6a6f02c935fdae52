"""Bearer token access control for protected endpoints."""

from typing import Annotated

from fastapi import Depends, Header, Request

from scanvault.errors import InvalidToken, TokenExpired, Unauthorized
from scanvault.services import Services
from scanvault.utils.logger import get_logger

from .deps import get_services

logger = get_logger(__name__)

BEARER_SCHEME = "bearer"


def require_identity(
    request: Request,
    services: Annotated[Services, Depends(get_services)],
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Verify the request's bearer token and bind the caller's identity.

    On success the username is stored as ``request.state.identity`` and
    returned; otherwise the request is rejected before the route runs.

    Raises:
        Unauthorized: No ``Authorization: Bearer <token>`` header.
        InvalidToken: The token is malformed or has been tampered with.
        TokenExpired: The token is past its expiry.
    """
    if not authorization:
        raise Unauthorized()
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        raise Unauthorized()

    try:
        identity = services.sessions.verify(token)
    except (InvalidToken, TokenExpired) as exc:
        logger.warning("Rejected bearer token on %s: %s", request.url.path, exc.code)
        raise

    request.state.identity = identity
    return identity


Identity = Annotated[str, Depends(require_identity)]
