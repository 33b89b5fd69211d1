from __future__ import annotations

from urllib.parse import quote

import requests

from riskscan.domain.errors import PurgeError, TransientFetchError
from riskscan.ports.object_store_port import ObjectStorePort


class GCSObjectStore(ObjectStorePort):
    """Upload bucket access over the Cloud Storage JSON API."""

    _BASE_URL = "https://storage.googleapis.com/storage/v1"

    def __init__(self, bucket: str, access_token: str, timeout_seconds: float = 20.0) -> None:
        self._bucket = bucket
        self._access_token = access_token
        self._timeout_seconds = timeout_seconds

    def download_bytes(self, path: str) -> bytes:
        try:
            response = requests.get(
                self._object_url(path),
                headers=self._auth_header(),
                params={"alt": "media"},
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransientFetchError(f"Failed to download {path}: {exc}") from exc
        if response.status_code == 404:
            raise TransientFetchError(f"Object not found: {path}")
        if response.status_code >= 400:
            raise TransientFetchError(
                f"Storage API error {response.status_code} while downloading {path}."
            )
        return response.content

    def delete_object(self, path: str) -> bool:
        try:
            response = requests.delete(
                self._object_url(path),
                headers=self._auth_header(),
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise PurgeError(f"Failed to delete {path}: {exc}") from exc
        if response.status_code == 404:
            return False
        if response.status_code >= 400:
            raise PurgeError(
                f"Storage API error {response.status_code} while deleting {path}."
            )
        return True

    def _object_url(self, path: str) -> str:
        return f"{self._BASE_URL}/b/{quote(self._bucket, safe='')}/o/{quote(path, safe='')}"

    def _auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}
