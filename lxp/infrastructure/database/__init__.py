# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PostgreSQL connections.

Example:
    from lxp.infrastructure.database import Database

    database = Database(settings.database)
    await database.connect()
    async with database.session() as session:
        result = await session.execute(select(AcademicCycle))
"""

from lxp.infrastructure.database.connection import Database, DatabaseError

__all__ = [
    "Database",
    "DatabaseError",
]
