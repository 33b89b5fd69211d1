from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from riskscan.domain.models import FileRef
from riskscan.ports.object_store_port import ObjectStorePort
from riskscan.settings import PURGE_WORKERS

logger = logging.getLogger(__name__)


@dataclass
class PurgeResult:
    ok: bool
    deleted: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class PurgeService:
    def __init__(self, object_store: ObjectStorePort, workers: int | None = None) -> None:
        self._object_store = object_store
        self._workers = workers or PURGE_WORKERS

    def purge(self, files: list[FileRef]) -> PurgeResult:
        """Delete every file concurrently; not-found counts as deleted."""

        paths = [file_ref.path for file_ref in files]
        if not paths:
            return PurgeResult(ok=True)
        with ThreadPoolExecutor(max_workers=max(1, min(self._workers, len(paths)))) as executor:
            outcomes = list(executor.map(self._delete_one, paths))

        result = PurgeResult(ok=True)
        for path, outcome in zip(paths, outcomes):
            if outcome == "deleted":
                result.deleted.append(path)
            elif outcome == "missing":
                result.missing.append(path)
            else:
                result.failed.append(path)
        result.ok = not result.failed
        if not result.ok:
            logger.warning("purge incomplete: %d of %d deletions failed", len(result.failed), len(paths))
        return result

    def _delete_one(self, path: str) -> str:
        try:
            found = self._object_store.delete_object(path)
        except Exception as exc:
            logger.warning("failed to delete %s: %s", path, exc)
            return "failed"
        return "deleted" if found else "missing"
