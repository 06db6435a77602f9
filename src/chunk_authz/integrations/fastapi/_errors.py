"""Exception handlers for FastAPI integration."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from chunk_authz.exceptions import AuthorizationDenied, InvalidInput

__all__ = ["install_error_handlers"]

logger = logging.getLogger("chunk_authz")


def install_error_handlers(app: FastAPI) -> None:
    """Install exception handlers for chunk-authz errors on a FastAPI app.

    - ``AuthorizationDenied`` -> 403 Forbidden
    - ``InvalidInput`` -> 403 Forbidden with a generic body; the detail is
      logged rather than shown, so internal errors read as a denial.

    Example::

        app = FastAPI()
        install_error_handlers(app)
    """

    @app.exception_handler(AuthorizationDenied)
    async def authz_denied_handler(  # pyright: ignore[reportUnusedFunction]
        request: object, exc: AuthorizationDenied
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={"detail": str(exc)},
        )

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(  # pyright: ignore[reportUnusedFunction]
        request: object, exc: InvalidInput
    ) -> JSONResponse:
        logger.warning("Chunk authorization failed closed: %s", exc)
        return JSONResponse(
            status_code=403,
            content={"detail": "Access denied"},
        )
