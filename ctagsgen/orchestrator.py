"""Pipeline orchestration for tag generation runs."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

from .command import CommandLine, CtagsGenerator, compose
from .config import GenerationSettings
from .errors import CtagsGenError, ResolutionError, ScratchClearError
from .extractor import DependencyExtractor
from .filters import NameFilter, build_filter
from .logging import get_logger, stage
from .models import DependencyReport, GenerationContext, GenerationOutcome
from .resolvers import Resolver, build_resolver
from .scratch import ScratchDirectory

Generation = Callable[[GenerationContext], Optional[CommandLine]]


class GenerationOrchestrator:
    """Resolves dependency sources, unpacks them and runs the tag generator.

    Runs are strictly sequential. Nothing guards the scratch directory against
    a concurrent run, so callers must not start two runs for the same project
    at once.
    """

    def __init__(
        self,
        resolver: Resolver | None = None,
        extractor: DependencyExtractor | None = None,
        generation: Generation | None = None,
        src_filter: NameFilter | None = None,
    ) -> None:
        self._resolver = resolver
        self.extractor = extractor or DependencyExtractor()
        self.generation: Generation = generation or CtagsGenerator()
        self._src_filter = src_filter
        self.logger = get_logger("orchestrator")

    def run(self, settings: GenerationSettings) -> GenerationOutcome:
        """Generate the tag file described by ``settings``."""
        root = settings.root
        report = self._resolve(settings)

        scratch = ScratchDirectory(settings.scratch_dir, protected=[root])
        self.logger.info("Clearing %s", scratch.path, extra=stage("clear"))
        try:
            scratch.clear()
        except ScratchClearError as exc:
            self.logger.error(
                "Cannot clear dependency source directory: %s", exc, extra=stage(exc.stage)
            )
            raise

        self.logger.info(
            "Unzipping dependency source jars into %s", scratch.path, extra=stage("extract")
        )
        predicate = self._src_filter or build_filter(settings.params.languages)
        summary = self.extractor.extract(report, scratch.path, predicate)

        src_dirs = existing_dirs(settings.tag_dirs)
        self.logger.debug("existing ctags src dirs: %s", [str(path) for path in src_dirs])

        self.logger.info("Generating tag file", extra=stage("run"))
        context = GenerationContext(
            params=settings.params,
            src_dirs=src_dirs,
            base_dir=root,
            log=get_logger("ctags"),
        )
        try:
            command = self.generation(context)
        except CtagsGenError as exc:
            self.logger.error("Tag generation failed: %s", exc, extra=stage(exc.stage))
            raise

        return GenerationOutcome(
            tag_file=settings.tag_file,
            src_dirs=src_dirs,
            extraction=summary,
            command=command.render() if command is not None else None,
        )

    def preview(self, settings: GenerationSettings) -> CommandLine:
        """Return the command a run would execute, without touching anything."""
        return compose(settings.params, existing_dirs(settings.tag_dirs), settings.root)

    def _resolve(self, settings: GenerationSettings) -> DependencyReport:
        resolver = self._resolver or build_resolver(settings.dependencies)
        self.logger.info(
            "Grabbing all dependency source jars. "
            "This may take a while if they are not in your local cache",
            extra=stage("resolve"),
        )
        try:
            report = resolver.resolve(settings.root)
        except ResolutionError as exc:
            self.logger.error(
                "error trying to resolve dependency source jars: %s", exc, extra=stage(exc.stage)
            )
            raise
        self.logger.debug("Resolved %d source artifacts", len(report.source_artifacts()))
        return report


def existing_dirs(directories: List[Path]) -> List[Path]:
    """Drop directories that do not exist, keeping the original order."""
    return [directory for directory in directories if directory.is_dir()]


__all__ = ["Generation", "GenerationOrchestrator", "existing_dirs"]
