# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

Access tokens are issued by the platform's identity service; this module
validates them with python-jose and exposes their claims. Token creation
is kept for service-to-service calls and tests.

Example:
    >>> from lxp.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token("user-123", user_type="SYSTEM_ADMIN")
    >>> claims = jwt_manager.decode_token(token)
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal
from uuid import UUID

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel, ValidationError

from lxp.core.config.settings import JWTSettings
from lxp.core.enums import UserType

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        type: Token type.
        user_type: Platform user type, e.g. SYSTEM_ADMIN.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    type: Literal["access"] = "access"
    user_type: UserType | None = None
    exp: int
    iat: int
    jti: str


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the JWT manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    def create_access_token(
        self,
        user_id: str | UUID,
        user_type: UserType | str | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an access token.

        Args:
            user_id: User identifier.
            user_type: Platform user type.
            expires_delta: Lifetime override; defaults to the configured one.

        Returns:
            JWT access token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + (
            expires_delta or timedelta(minutes=self._settings.access_token_expire_minutes)
        )

        payload = {
            "sub": str(user_id),
            "type": "access",
            "user_type": getattr(user_type, "value", user_type),
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT access token.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or carries bad claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JoseJWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}") from e

        try:
            return TokenPayload.model_validate(payload)
        except ValidationError as e:
            logger.warning("Token claims rejected: %s", str(e))
            raise InvalidTokenError("Invalid token claims") from e

    def verify_token(self, token: str) -> bool:
        """Check whether a token decodes and validates."""
        try:
            self.decode_token(token)
            return True
        except JWTError:
            return False
