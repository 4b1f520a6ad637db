"""
Transient staging pool for packages built on behalf of HTTP callers.

Each run gets its own ``<base>/<uuid4 hex>`` directory. Removal is best
effort: failures are logged and counted but never raised.
"""

from __future__ import annotations

import logging
import shutil
import time
import uuid
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

from .errors import EctdErrorCode, create_filesystem_error
from .metrics import metrics

logger = logging.getLogger(__name__)


class StagingArea:
    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)

    def create(self) -> Path:
        """Allocate a fresh, collision-free directory."""
        path = self.base_dir / uuid.uuid4().hex
        try:
            path.mkdir(parents=True, exist_ok=False)
        except OSError as exc:
            raise create_filesystem_error(
                EctdErrorCode.FS_DIRECTORY_CREATE_FAILED, "create staging directory", str(path), exc
            ) from exc
        return path

    def cleanup(self, path: Union[str, Path]) -> bool:
        """
        Remove a staging directory.

        Returns True when the directory is gone afterwards (including when it
        never existed), False when removal failed.
        """
        target = Path(path)
        if not target.exists():
            return True
        try:
            shutil.rmtree(target)
        except OSError as exc:
            metrics.record_cleanup_failure()
            logger.error(
                "Failed to clean up staging directory",
                extra={"path": str(target), "error_code": EctdErrorCode.FS_CLEANUP_FAILED.value, "reason": str(exc)},
            )
            return False
        logger.debug("Staging directory removed", extra={"path": str(target)})
        return True

    @contextmanager
    def staged(self) -> Generator[Path, None, None]:
        path = self.create()
        try:
            yield path
        finally:
            self.cleanup(path)

    def cleanup_older_than(self, hours: float) -> int:
        """Remove staging directories last modified more than ``hours`` ago."""
        if not self.base_dir.is_dir():
            return 0
        cutoff = time.time() - hours * 3600
        removed = 0
        for entry in self.base_dir.iterdir():
            try:
                stale = entry.stat().st_mtime < cutoff
            except OSError:
                # Removed concurrently by another run
                continue
            if stale and self.cleanup(entry):
                removed += 1
        if removed:
            logger.info("Purged stale staging directories", extra={"removed": removed, "max_age_hours": hours})
        return removed

    def cleanup_all(self) -> int:
        if not self.base_dir.is_dir():
            return 0
        return sum(1 for entry in list(self.base_dir.iterdir()) if self.cleanup(entry))


def package_zip(source_dir: Union[str, Path], zip_path: Union[str, Path]) -> Path:
    """
    Write the contents of ``source_dir`` into a deflated ZIP archive.

    Entry names are relative to ``source_dir``, so the archive unpacks to
    the module directories, the manifest and the digest manifest.
    """
    source = Path(source_dir)
    target = Path(zip_path)
    try:
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
            for path in sorted(source.rglob("*")):
                if path == target:
                    continue
                archive.write(path, path.relative_to(source).as_posix())
    except OSError as exc:
        raise create_filesystem_error(EctdErrorCode.FS_WRITE_FAILED, "write archive", str(target), exc) from exc
    logger.debug("Archive written", extra={"path": str(target), "bytes": target.stat().st_size})
    return target
