"""Error types raised by the repositories and the content store bridge.

Every error carries the HTTP status code the API responds with. The API
registers a single exception handler for ``InventoryError`` and returns the
message as plain text.

Copyright (c) Bryn Gwalad 2025
"""


class InventoryError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500


class NotFound(InventoryError):
    """The requested row, or the blob behind it, does not exist."""

    status_code = 404


class StorageUnavailable(InventoryError):
    """The relational store rejected a query or could not be reached."""


class ObjectStoreFailure(InventoryError):
    """The object store could not read, write or create a bucket."""
