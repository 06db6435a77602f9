"""chunk-authz testing utilities — factories, assertions, and fixtures.

Provides test helpers for verifying chunk authorization:

- **Factories**: ``make_permissions``, ``make_anonymous``, ``make_chunk``.
- **Assertion helpers**: ``assert_authorized``, ``assert_denied``,
  ``assert_filtered``.
- **Fixtures**: ``authz_config``, ``chunk_source_registry``,
  ``isolated_authz_state``.

Example::

    from chunk_authz.testing import assert_denied, make_chunk, make_anonymous

    def test_secret_is_hidden():
        assert_denied(make_anonymous(), make_chunk(label="secret"))
"""

from chunk_authz.testing._assertions import assert_authorized, assert_denied, assert_filtered
from chunk_authz.testing._factories import make_anonymous, make_chunk, make_permissions
from chunk_authz.testing._fixtures import (
    authz_config,
    chunk_source_registry,
    isolated_authz_state,
)
from chunk_authz.testing._isolation import isolated_authz

__all__ = [
    "assert_authorized",
    "assert_denied",
    "assert_filtered",
    "authz_config",
    "chunk_source_registry",
    "isolated_authz",
    "isolated_authz_state",
    "make_anonymous",
    "make_chunk",
    "make_permissions",
]
