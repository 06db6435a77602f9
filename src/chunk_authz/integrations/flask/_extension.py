"""Flask extension for chunk authorization."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from flask import Flask, current_app, jsonify

from chunk_authz._filter import filter_authorized as _filter_authorized
from chunk_authz._permissions import PermissionSet
from chunk_authz._types import AuthorizerLike
from chunk_authz.config._config import AuthzConfig
from chunk_authz.exceptions import AuthorizationDenied, InvalidInput

__all__ = ["AuthzExtension"]

logger = logging.getLogger("chunk_authz")


class AuthzExtension:
    """Flask extension that filters retrieved chunks for the current user.

    Registers error handlers and provides a ``filter_authorized()`` method
    that resolves the permission set of the current request.

    Supports the Flask app-factory pattern via ``init_app()``.

    Args:
        app: Optional Flask application. If provided, calls ``init_app()``
            immediately.
        permissions_provider: A callable ``() -> PermissionSet`` returning
            the permission set of the current request. Called within
            request context.
        authorizer: Optional replacement for ``DefaultAuthorizer``.
        config: Optional authorization config. Defaults to the global config.

    Example::

        app = Flask(__name__)
        authz = AuthzExtension(app, permissions_provider=lambda: g.permissions)

        @app.get("/context")
        def context():
            chunks = authz.filter_authorized(index.search(request.args["q"]))
            return [c.id for c in chunks]
    """

    def __init__(
        self,
        app: Flask | None = None,
        *,
        permissions_provider: Callable[[], PermissionSet],
        authorizer: AuthorizerLike | None = None,
        config: AuthzConfig | None = None,
    ) -> None:
        self._permissions_provider = permissions_provider
        self._authorizer = authorizer
        self._config = config

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Initialize the extension with a Flask application.

        Stores configuration on ``app.extensions["chunk_authz"]`` and
        registers error handlers for authorization exceptions.
        """
        app.extensions["chunk_authz"] = {
            "permissions_provider": self._permissions_provider,
            "authorizer": self._authorizer,
            "config": self._config,
        }

        @app.errorhandler(AuthorizationDenied)
        def handle_authz_denied(exc: AuthorizationDenied):  # pyright: ignore[reportUnusedFunction]
            return jsonify({"detail": str(exc)}), 403

        @app.errorhandler(InvalidInput)
        def handle_invalid_input(exc: InvalidInput):  # pyright: ignore[reportUnusedFunction]
            logger.warning("Chunk authorization failed closed: %s", exc)
            return jsonify({"detail": "Access denied"}), 403

    def filter_authorized(self, chunks: Iterable[Any]) -> list[Any]:
        """Return the chunks the current request's user may see.

        Must be called within a Flask request context.
        """
        ext_state: dict[str, Any] = current_app.extensions["chunk_authz"]

        provider: Callable[[], PermissionSet] = ext_state["permissions_provider"]
        return _filter_authorized(
            provider(),
            chunks,
            authorizer=ext_state["authorizer"],
            config=ext_state["config"],
        )
