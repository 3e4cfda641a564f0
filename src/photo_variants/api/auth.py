"""Bearer credential checks for the processing endpoint."""

from typing import Any, Dict, Optional

import jwt

from ..core.exceptions import PhotoVariantsError


class AuthenticationError(PhotoVariantsError):
    """Caller did not present an acceptable bearer credential."""


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Return the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: If the header is missing or not a bearer credential.
    """
    if not authorization:
        raise AuthenticationError("Missing bearer token")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing bearer token")
    return token.strip()


class BearerAuthenticator:
    """
    Accepts any bearer token when no secret is configured; otherwise
    verifies it as an HS256-signed JWT.
    """

    def __init__(self, secret: Optional[str] = None, audience: Optional[str] = None):
        self.secret = secret
        self.audience = audience

    def authenticate(self, authorization: Optional[str]) -> Dict[str, Any]:
        """
        Check the header and return the verified claims (empty when unverified).

        Raises:
            AuthenticationError: If the token is missing, malformed, expired
                or signed with another key.
        """
        token = extract_bearer_token(authorization)
        if not self.secret:
            return {}

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=["HS256"],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.PyJWTError as exc:
            raise AuthenticationError(f"Invalid bearer token: {exc}") from exc
