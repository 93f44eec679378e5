# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions from the application's Database
- Get authenticated users
- Restrict endpoints to user types

Example:
    @router.get("/terms")
    async def list_terms(
        db: AsyncSession = Depends(get_db),
        current_user: CurrentUser = Depends(require_auth),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from lxp.api.middleware.auth import CurrentUser, get_current_user
from lxp.core.config import Settings
from lxp.core.enums import UserType

logger = logging.getLogger(__name__)

# =========================================================================
# User type groups
# =========================================================================

CYCLE_WRITERS = (UserType.SYSTEM_ADMIN, UserType.SYSTEM_MANAGER)
CYCLE_DELETERS = (UserType.SYSTEM_ADMIN,)

TERM_DELETERS = (
    UserType.SYSTEM_ADMIN,
    UserType.SYSTEM_MANAGER,
    UserType.CAMPUS_ADMIN,
)
TERM_WRITERS = (*TERM_DELETERS, UserType.CAMPUS_COORDINATOR)

GRADE_BOOK_DELETERS = TERM_WRITERS
GRADE_WRITERS = (*TERM_WRITERS, UserType.CAMPUS_TEACHER)

SCALE_DELETERS = (UserType.SYSTEM_ADMIN, UserType.SYSTEM_MANAGER)
SCALE_WRITERS = (*SCALE_DELETERS, UserType.CAMPUS_ADMIN)


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get a database session.

    Args:
        request: HTTP request whose application holds the Database.

    Yields:
        AsyncSession committed when the request succeeds.

    Raises:
        HTTPException: If the database has not been started.
    """
    database = getattr(request.app.state, "database", None)
    if database is None or not database.is_connected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not initialized",
        )

    async with database.session() as session:
        yield session


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user.

    Raises:
        HTTPException: If not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


class RequireUserType:
    """Dependency for requiring specific user types.

    Example:
        @router.delete("/{cycle_id}")
        async def delete_cycle(
            user: CurrentUser = Depends(RequireUserType(UserType.SYSTEM_ADMIN)),
        ):
            ...
    """

    def __init__(self, *user_types: UserType) -> None:
        """Initialize user type requirement.

        Args:
            user_types: Allowed user types (any of these).
        """
        self.user_types = user_types

    def __call__(self, request: Request) -> CurrentUser:
        """Check the user type and return user.

        Raises:
            HTTPException: If not authenticated or not an allowed type.
        """
        user = require_auth(request)

        if not user.has_user_type(*self.user_types):
            logger.info(
                "User %s (%s) denied, requires one of %s",
                user.id,
                user.user_type,
                [t.value for t in self.user_types],
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You don't have permission to perform this action",
            )

        return user
