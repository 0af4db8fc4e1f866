"""Error taxonomy for tag generation runs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CtagsGenError(RuntimeError):
    """Base class for failures raised while generating a tag file."""

    stage = "generate"


class ResolutionError(CtagsGenError):
    """Raised when dependency sources cannot be resolved."""

    stage = "resolve"


class ScratchClearError(CtagsGenError):
    """Raised when the scratch directory cannot be cleared."""

    stage = "clear"

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class ArchiveExtractionError(CtagsGenError):
    """Raised when a single source archive cannot be opened or unpacked."""

    stage = "extract"

    def __init__(self, message: str, *, archive: Path) -> None:
        super().__init__(message)
        self.archive = archive


class SubprocessError(CtagsGenError):
    """Raised when the tag indexer is missing or exits with a non-zero status."""

    stage = "run"

    def __init__(self, message: str, *, returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.returncode = returncode


__all__ = [
    "ArchiveExtractionError",
    "CtagsGenError",
    "ResolutionError",
    "ScratchClearError",
    "SubprocessError",
]
