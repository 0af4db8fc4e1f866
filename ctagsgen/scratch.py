"""Scratch directory handling for unpacked dependency sources.

WARNING: the scratch directory is wiped on every generation run. Never point
``dependency_src_dir`` at a directory that holds anything you want to keep.
"""

from __future__ import annotations

import posixpath
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import Iterable, List

from .errors import ArchiveExtractionError, ScratchClearError
from .filters import NameFilter
from .logging import get_logger

_LOGGER = get_logger("scratch")


class ScratchDirectory:
    """Owns a disposable extraction target that is emptied on every run."""

    def __init__(self, path: Path, *, protected: Iterable[Path] = ()) -> None:
        self.path = Path(path).absolute()
        self._protected = [Path(item).absolute() for item in protected]

    def clear(self) -> None:
        """Delete everything below the scratch directory, leaving it empty.

        Does nothing when the directory does not exist.
        """
        self._check_not_protected()
        clear_directory(self.path)

    def materialize(self, archive: Path, predicate: NameFilter) -> List[Path]:
        """Unpack the entries of ``archive`` accepted by ``predicate``."""
        return materialize(archive, self.path, predicate)

    def exists(self) -> bool:
        return self.path.is_dir()

    def _check_not_protected(self) -> None:
        for protected in self._protected:
            if protected == self.path or self.path in protected.parents:
                raise ScratchClearError(
                    f"Refusing to clear {self.path}: it contains {protected}",
                    path=self.path,
                )


def clear_directory(path: Path) -> None:
    """Recursively remove the contents of ``path``; a missing path is a no-op."""
    path = Path(path)
    if not path.exists() and not path.is_symlink():
        return
    if not path.is_dir() or path.is_symlink():
        raise ScratchClearError(f"{path} is not a directory", path=path)
    try:
        for child in path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    except OSError as exc:
        raise ScratchClearError(f"Failed to clear {path}: {exc}", path=path) from exc


def materialize(archive: Path, dest: Path, predicate: NameFilter) -> List[Path]:
    """Extract matching entries of a zip archive into ``dest``.

    Relative paths inside the archive are preserved. Entries rejected by the
    predicate are never read. Extraction is best effort: files written before a
    failure are left in place.
    """
    archive = Path(archive)
    dest = Path(dest)
    written: List[Path] = []
    try:
        with zipfile.ZipFile(archive) as bundle:
            for info in bundle.infolist():
                if info.is_dir() or not predicate(info.filename):
                    continue
                relative = _safe_member_path(info.filename)
                if relative is None:
                    _LOGGER.warning("Skipping unsafe entry %s in %s", info.filename, archive)
                    continue
                target = dest.joinpath(*relative.split("/"))
                target.parent.mkdir(parents=True, exist_ok=True)
                with bundle.open(info) as source, target.open("wb") as sink:
                    shutil.copyfileobj(source, sink)
                written.append(target)
    except (
        OSError,
        EOFError,
        NotImplementedError,
        RuntimeError,
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
    ) as exc:
        raise ArchiveExtractionError(
            f"Failed to extract {archive}: {exc}", archive=archive
        ) from exc
    return written


def _safe_member_path(name: str) -> str | None:
    normalized = posixpath.normpath(name.replace("\\", "/"))
    if normalized.startswith("/") or normalized == ".." or normalized.startswith("../"):
        return None
    if ":" in normalized.split("/", 1)[0]:
        return None
    return normalized


__all__ = ["ScratchDirectory", "clear_directory", "materialize"]
