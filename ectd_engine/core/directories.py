from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Set, Union

from .errors import EctdErrorCode, create_filesystem_error
from .schemas import MODULES, Application, Document

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


@dataclass
class SubmissionPaths:
    """Directories of one submission: ``<base>/<type><number>/<sequence>/m1..m5``."""
    base: Path
    application: Path
    sequence: Path
    modules: Dict[str, Path]
    used_names: Set[str] = field(default_factory=set, repr=False)

    def module_dir(self, module: str) -> Path:
        return self.modules[module]


def create_submission_structure(
    output_dir: Union[str, Path],
    application: Application,
    sequence_number: int,
) -> SubmissionPaths:
    """Create the sequence directory and every module directory, used or not."""
    base = Path(output_dir)
    app_dir = base / f"{application.type}{application.number}"
    seq_dir = app_dir / str(sequence_number)
    modules = {name: seq_dir / name for name in MODULES}

    for directory in modules.values():
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise create_filesystem_error(
                EctdErrorCode.FS_DIRECTORY_CREATE_FAILED, "create directory", str(directory), exc
            ) from exc

    logger.debug("Created submission structure", extra={"sequence_dir": str(seq_dir)})
    return SubmissionPaths(base=base, application=app_dir, sequence=seq_dir, modules=modules)


def document_filename(document: Document, application: Application, sequence_number: int) -> str:
    """
    Conventional file name for a document.

    Regional forms and the cover letter have fixed names; anything else is
    named after its title.
    """
    number = application.number
    if document.type == "356h":
        return f"356h_{number}_{sequence_number}.pdf"
    if document.type == "cover":
        return f"cover-{number}_{sequence_number}.pdf"
    if document.type == "2253":
        return f"2253-{application.type.lower()}{number}_{sequence_number}.pdf"
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', document.title).lower()}.pdf"


def unique_path(paths: SubmissionPaths, module: str, filename: str) -> Path:
    """Reserve ``filename`` in a module directory, suffixing ``-2``, ``-3``... on collision."""
    directory = paths.module_dir(module)
    stem, dot, suffix = filename.rpartition(".")
    if not dot:
        stem, suffix = filename, ""
    candidate = filename
    n = 1
    while relative_posix_path(directory / candidate, paths.sequence) in paths.used_names:
        n += 1
        candidate = f"{stem}-{n}.{suffix}" if suffix else f"{stem}-{n}"
    target = directory / candidate
    paths.used_names.add(relative_posix_path(target, paths.sequence))
    return target


def document_path(
    paths: SubmissionPaths,
    document: Document,
    application: Application,
    sequence_number: int,
) -> Path:
    return unique_path(paths, document.module, document_filename(document, application, sequence_number))


def relative_posix_path(path: Union[str, Path], root: Union[str, Path]) -> str:
    return Path(path).relative_to(Path(root)).as_posix()
