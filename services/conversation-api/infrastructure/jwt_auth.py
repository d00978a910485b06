"""JWT bearer-token implementation of the AuthProvider interface."""

import jwt
from omi_common.logging import setup_logging

from exceptions import UnauthenticatedError

from .interfaces import AuthProvider

logger = setup_logging()

BEARER_PREFIX = "Bearer "


class JWTAuthProvider(AuthProvider):
    """Verifies HS256 tokens issued by the login service; ``sub`` is the user id."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self._secret = secret
        self._algorithm = algorithm

    def authenticate(self, authorization: str | None) -> str:
        if not authorization:
            raise UnauthenticatedError("missing authorization token")

        token = authorization.removeprefix(BEARER_PREFIX).strip()
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.PyJWTError as e:
            logger.info("Rejected bearer token", extra={"reason": type(e).__name__})
            raise UnauthenticatedError("invalid or expired token") from e

        user_id = claims.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise UnauthenticatedError("invalid user id in token")
        return user_id
