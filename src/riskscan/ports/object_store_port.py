from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStorePort(Protocol):
    def download_bytes(self, path: str) -> bytes:
        """Return the object's bytes; raises TransientFetchError on failure."""

    def delete_object(self, path: str) -> bool:
        """Delete an object. Returns False if it was already absent.

        Raises PurgeError for any other failure.
        """
