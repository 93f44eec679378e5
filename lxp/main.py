# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Server entry point."""

import uvicorn

from lxp.core.config import get_settings


def main() -> None:
    """Run the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "lxp.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=1 if settings.debug else settings.api.workers,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
