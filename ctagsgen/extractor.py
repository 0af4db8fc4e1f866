"""Unpacks dependency source archives into the scratch directory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Union

from .errors import ArchiveExtractionError
from .filters import NameFilter
from .logging import get_logger, stage
from .models import DependencyReport, ExtractionFailure, ExtractionSummary, ResolvedArtifact
from .scratch import materialize

Materializer = Callable[[Path, Path, NameFilter], List[Path]]


class DependencyExtractor:
    """Extracts every source artifact of a report, tolerating broken archives."""

    def __init__(self, materializer: Materializer | None = None) -> None:
        self._materialize = materializer or materialize
        self.logger = get_logger("extractor")

    def extract(
        self,
        report: Union[DependencyReport, Iterable[ResolvedArtifact]],
        dest: Path,
        predicate: NameFilter,
    ) -> ExtractionSummary:
        artifacts = report.artifacts() if isinstance(report, DependencyReport) else report
        summary = ExtractionSummary()
        for artifact in artifacts:
            if not artifact.is_source:
                continue
            summary.attempted += 1
            self.logger.debug("Unzipping %s", artifact.file)
            try:
                written = self._materialize(artifact.file, dest, predicate)
            except ArchiveExtractionError as exc:
                self.logger.error(
                    "Could not extract source archive %s%s: %s",
                    artifact.file,
                    f" ({artifact.name})" if artifact.name else "",
                    exc,
                    extra=stage(exc.stage),
                )
                summary.failures.append(ExtractionFailure(artifact=artifact, message=str(exc)))
                continue
            summary.extracted_files += len(written)

        if summary.failures:
            self.logger.info(
                "Extracted %d of %d source archives (%d failed)",
                summary.attempted - summary.failed,
                summary.attempted,
                summary.failed,
            )
        else:
            self.logger.debug(
                "Extracted %d files from %d source archives",
                summary.extracted_files,
                summary.attempted,
            )
        return summary


__all__ = ["DependencyExtractor", "Materializer"]
