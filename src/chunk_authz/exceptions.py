"""Exception hierarchy for chunk-authz."""

from __future__ import annotations

__all__ = [
    "AuthorizationDenied",
    "AuthzError",
    "InvalidInput",
    "MalformedRecord",
    "UnregisteredChunkSourceError",
]


class AuthzError(Exception):
    """Base exception for all chunk-authz errors."""


class InvalidInput(AuthzError, ValueError):  # noqa: N818
    """Authorization was attempted with absent or malformed input.

    Raised when the permission set or the chunk is missing, and when a
    ``PermissionSet`` or ``ChunkDescriptor`` is constructed from values
    that cannot be interpreted. Empty label or tag collections are valid
    and never raise.

    Example::

        is_authorized(None, chunk)  # raises InvalidInput
    """


class MalformedRecord(AuthzError):  # noqa: N818
    """A single chunk in a batch could not be evaluated and was dropped.

    The filter operation never propagates this error. It is built for
    reporting (logging or warnings) and exposed so explain output and
    custom handlers can describe the dropped element.

    Attributes:
        index: Position of the element in the input sequence.
        record: The offending element as it was received.
        reason: Why the element could not be evaluated.
    """

    def __init__(self, *, index: int, record: object, reason: str) -> None:
        self.index = index
        self.record = record
        self.reason = reason
        super().__init__(f"Malformed chunk at index {index} dropped: {reason}")


class AuthorizationDenied(AuthzError):  # noqa: N818
    """The permission set does not grant access to the chunk.

    Attributes:
        user_id: The user whose permission set was evaluated.
        chunk_id: The identifier of the denied chunk.

    Example::

        try:
            authorize(permissions, chunk)
        except AuthorizationDenied as exc:
            print(f"{exc.user_id} cannot see {exc.chunk_id}")
    """

    def __init__(
        self,
        *,
        user_id: str,
        chunk_id: object,
        message: str | None = None,
    ) -> None:
        self.user_id = user_id
        self.chunk_id = chunk_id
        if message is None:
            message = f"User {user_id!r} is not authorized to see chunk {chunk_id!r}"
        super().__init__(message)


class UnregisteredChunkSourceError(AuthzError):
    """No chunk-source mapping is registered for a model in a query.

    Raised by the SQL pushdown when ``on_unregistered_source`` is set to
    ``"raise"`` instead of the default deny (WHERE FALSE) behavior.

    Attributes:
        model: Name of the model class with no mapping.
    """

    def __init__(self, *, model: str) -> None:
        self.model = model
        super().__init__(f"No chunk source registered for {model}")
