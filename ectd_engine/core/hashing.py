"""
SHA-256 utilities for submission packages.

Digests feed both the ``integrityCheck`` of each document in
submissionunit.xml and the package-level sha256.txt.
"""

from __future__ import annotations

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from .errors import EctdErrorCode, create_filesystem_error

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "submissionunit.xml"
DIGEST_MANIFEST_FILENAME = "sha256.txt"
EXCLUDED_FILENAMES = (MANIFEST_FILENAME, DIGEST_MANIFEST_FILENAME)

DEFAULT_CHUNK_SIZE = 65536


@dataclass(frozen=True)
class FileDigest:
    path: str  # forward-slash path relative to the hashed root
    sha256: str


def file_sha256(path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Stream a file through SHA-256 and return the lowercase hex digest."""
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                digest.update(chunk)
    except OSError as exc:
        raise create_filesystem_error(EctdErrorCode.FS_READ_FAILED, "hash file", str(path), exc) from exc
    return digest.hexdigest()


def bytes_sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _content_files(root: Path, exclude: Sequence[str]) -> List[Path]:
    files = []
    for p in root.rglob("*"):
        if not p.is_file():
            continue
        if p.relative_to(root).as_posix() in exclude:
            continue
        files.append(p)
    return files


def directory_hashes(
    root: Union[str, Path],
    exclude: Sequence[str] = EXCLUDED_FILENAMES,
    max_workers: int = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> List[FileDigest]:
    """
    Digest every file below ``root``.

    ``exclude`` lists root-relative paths to skip; by default the manifest
    and the digest manifest themselves. With ``max_workers > 1`` files are
    hashed concurrently. The result is sorted by relative path either way.
    """
    base = Path(root)
    files = _content_files(base, exclude)

    def _digest(p: Path) -> FileDigest:
        return FileDigest(path=p.relative_to(base).as_posix(), sha256=file_sha256(p, chunk_size))

    if max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            digests = list(pool.map(_digest, files))
    else:
        digests = [_digest(p) for p in files]

    digests.sort(key=lambda d: d.path)
    logger.debug("Hashed directory", extra={"root": str(base), "files": len(digests)})
    return digests


def render_digest_manifest(digests: Iterable[FileDigest]) -> str:
    """
    Render sha256.txt content: ``<digest> *<path>`` per line, sorted by path,
    newline-terminated (GNU coreutils binary-mode format).
    """
    lines = [f"{d.sha256} *{d.path}" for d in sorted(digests, key=lambda d: d.path)]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def write_digest_manifest(directory: Union[str, Path], digests: Iterable[FileDigest]) -> Path:
    target = Path(directory) / DIGEST_MANIFEST_FILENAME
    try:
        # newline="" keeps "\n" line endings on every platform
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(render_digest_manifest(digests))
    except OSError as exc:
        raise create_filesystem_error(EctdErrorCode.FS_WRITE_FAILED, "write digest manifest", str(target), exc) from exc
    return target
