"""Core data models shared across ctagsgen components."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

# Ivy, sbt and coursier reports tag source jars as "src"; Maven tooling says "source".
SOURCE_ARTIFACT_TYPES: Tuple[str, ...] = ("src", "source")


@dataclass(frozen=True)
class CtagsParams:
    """Parameters for a single ctags invocation."""

    executable: str = "ctags"
    excludes: Tuple[str, ...] = ("log",)
    languages: Tuple[str, ...] = ("scala", "java")
    tag_file_name: str = ".tags"
    use_relative_paths: bool = False
    extra_args: Tuple[str, ...] = ()


@dataclass
class GenerationContext:
    """Everything a tag generation strategy needs for one run."""

    params: CtagsParams
    src_dirs: List[Path]
    base_dir: Path
    log: logging.Logger


@dataclass(frozen=True)
class ResolvedArtifact:
    """An artifact handed over by a dependency resolver."""

    type: str
    file: Path
    name: Optional[str] = None
    classifier: Optional[str] = None

    @property
    def is_source(self) -> bool:
        return self.type in SOURCE_ARTIFACT_TYPES


@dataclass
class ModuleReport:
    """Artifacts resolved for a single module."""

    module: str
    artifacts: List[ResolvedArtifact] = field(default_factory=list)


@dataclass
class ConfigurationReport:
    """Modules resolved for one build configuration (compile, test, ...)."""

    name: str
    modules: List[ModuleReport] = field(default_factory=list)


@dataclass
class DependencyReport:
    """Finished resolution report consumed by the extractor."""

    configurations: List[ConfigurationReport] = field(default_factory=list)

    def artifacts(self) -> Iterator[ResolvedArtifact]:
        for configuration in self.configurations:
            for module in configuration.modules:
                yield from module.artifacts

    def source_artifacts(self) -> List[ResolvedArtifact]:
        return [artifact for artifact in self.artifacts() if artifact.is_source]


@dataclass(frozen=True)
class ExtractionFailure:
    """An archive that could not be unpacked, with the reason."""

    artifact: ResolvedArtifact
    message: str


@dataclass
class ExtractionSummary:
    """Outcome of unpacking every source artifact of a report."""

    attempted: int = 0
    extracted_files: int = 0
    failures: List[ExtractionFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass
class GenerationOutcome:
    """Result of a completed generation run."""

    tag_file: Path
    src_dirs: Sequence[Path]
    extraction: ExtractionSummary
    command: Optional[str] = None
    returncode: int = 0
