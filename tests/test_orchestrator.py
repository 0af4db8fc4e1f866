"""Tests for ctagsgen.orchestrator."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pytest

from ctagsgen.command import CommandLine, CtagsGenerator
from ctagsgen.config import GenerationSettings
from ctagsgen.errors import ResolutionError, ScratchClearError, SubprocessError
from ctagsgen.models import (
    ConfigurationReport,
    CtagsParams,
    DependencyReport,
    GenerationContext,
    ModuleReport,
    ResolvedArtifact,
)
from ctagsgen.orchestrator import GenerationOrchestrator, existing_dirs
from ctagsgen.resolvers import Resolver, StaticResolver
from tests._fixtures.archive_builder import ProjectBuilder


class RecordingGeneration:
    """Tag generation strategy that records its context instead of running ctags."""

    def __init__(self) -> None:
        self.contexts: List[GenerationContext] = []

    def __call__(self, context: GenerationContext) -> Optional[CommandLine]:
        self.contexts.append(context)
        return None


class FailingResolver(Resolver):
    def resolve(self, project_root: Path) -> DependencyReport:
        raise ResolutionError("repository unreachable")


def _report(*artifacts: ResolvedArtifact) -> DependencyReport:
    return DependencyReport(
        configurations=[
            ConfigurationReport(
                name="compile",
                modules=[ModuleReport(module="org.demo:demo:1.0", artifacts=list(artifacts))],
            )
        ]
    )


def test_run_extracts_sources_and_indexes_existing_dirs(project: ProjectBuilder) -> None:
    project.dirs(["src/main/scala"])
    jar = project.jar(
        "demo-1.0-sources.jar",
        {"demo/Demo.scala": "object Demo", "demo/Demo.java": "class Demo {}", "demo/notes.txt": "x"},
    )
    pom = project.jar("demo-1.0.pom", {"demo/Ignored.scala": "object Ignored"})
    settings = GenerationSettings(root=project.root, params=CtagsParams(languages=("scala",)))
    generation = RecordingGeneration()

    outcome = GenerationOrchestrator(
        resolver=StaticResolver(
            _report(
                ResolvedArtifact(type="pom", file=pom),
                ResolvedArtifact(type="src", file=jar),
            )
        ),
        generation=generation,
    ).run(settings)

    scratch = settings.scratch_dir
    assert outcome.extraction.attempted == 1
    assert outcome.extraction.failed == 0
    assert sorted(p.name for p in scratch.rglob("*") if p.is_file()) == ["Demo.scala"]
    assert not (scratch / "demo" / "Ignored.scala").exists()

    context = generation.contexts[0]
    assert context.src_dirs == [project.root / "src" / "main" / "scala", scratch]
    assert context.base_dir == project.root
    assert outcome.src_dirs == context.src_dirs
    assert outcome.tag_file == project.root / ".tags"


def test_run_clears_previous_scratch_contents(project: ProjectBuilder) -> None:
    settings = GenerationSettings(root=project.root)
    stale = settings.scratch_dir / "old" / "Stale.scala"
    stale.parent.mkdir(parents=True)
    stale.write_text("object Stale", encoding="utf-8")

    GenerationOrchestrator(resolver=StaticResolver(), generation=RecordingGeneration()).run(settings)

    assert not stale.exists()
    assert settings.scratch_dir.is_dir()


def test_run_drops_missing_source_dirs(project: ProjectBuilder) -> None:
    project.dirs(["src/main/scala"])
    settings = GenerationSettings(
        root=project.root,
        src_dirs=[project.root / "src" / "main" / "scala", project.root / "src" / "test" / "scala"],
    )
    generation = RecordingGeneration()

    GenerationOrchestrator(resolver=StaticResolver(), generation=generation).run(settings)

    # No source jars were unpacked, so the scratch dir was never created.
    assert generation.contexts[0].src_dirs == [project.root / "src" / "main" / "scala"]


def test_resolution_failure_leaves_scratch_untouched(project: ProjectBuilder) -> None:
    settings = GenerationSettings(root=project.root)
    keep = settings.scratch_dir / "Keep.scala"
    keep.parent.mkdir(parents=True)
    keep.write_text("object Keep", encoding="utf-8")
    generation = RecordingGeneration()

    with pytest.raises(ResolutionError):
        GenerationOrchestrator(resolver=FailingResolver(), generation=generation).run(settings)

    assert keep.exists()
    assert generation.contexts == []


def test_clear_failure_aborts_before_extraction(project: ProjectBuilder) -> None:
    settings = GenerationSettings(root=project.root, dependency_src_dir=project.root)
    generation = RecordingGeneration()
    calls: list[object] = []

    class RecordingExtractor:
        def extract(self, report, dest, predicate):  # type: ignore[no-untyped-def]
            calls.append(report)

    with pytest.raises(ScratchClearError):
        GenerationOrchestrator(
            resolver=StaticResolver(),
            extractor=RecordingExtractor(),  # type: ignore[arg-type]
            generation=generation,
        ).run(settings)

    assert calls == []
    assert generation.contexts == []


def test_broken_archive_does_not_stop_generation(project: ProjectBuilder, tmp_path: Path) -> None:
    broken = tmp_path / "broken-sources.jar"
    broken.write_bytes(b"not a zip")
    generation = RecordingGeneration()
    settings = GenerationSettings(root=project.root)

    outcome = GenerationOrchestrator(
        resolver=StaticResolver(_report(ResolvedArtifact(type="src", file=broken))),
        generation=generation,
    ).run(settings)

    assert outcome.extraction.failed == 1
    assert len(generation.contexts) == 1


def test_subprocess_failure_propagates(project: ProjectBuilder) -> None:
    project.dirs(["src/main/scala"])

    def runner(args, cwd):  # type: ignore[no-untyped-def]
        return 1

    with pytest.raises(SubprocessError) as excinfo:
        GenerationOrchestrator(
            resolver=StaticResolver(), generation=CtagsGenerator(runner=runner)
        ).run(GenerationSettings(root=project.root))

    assert excinfo.value.returncode == 1


def test_default_generation_reports_command(project: ProjectBuilder) -> None:
    project.dirs(["src/main/scala"])
    seen: list[list[str]] = []

    def runner(args, cwd):  # type: ignore[no-untyped-def]
        seen.append(list(args))
        return 0

    settings = GenerationSettings(
        root=project.root, params=CtagsParams(use_relative_paths=True)
    )
    outcome = GenerationOrchestrator(
        resolver=StaticResolver(), generation=CtagsGenerator(runner=runner)
    ).run(settings)

    assert outcome.command == (
        "ctags --exclude=log --languages=scala,java -f .tags --tag-relative=yes -R src/main/scala"
    )
    assert seen[0][-1] == "src/main/scala"


def test_custom_src_filter_is_used(project: ProjectBuilder) -> None:
    jar = project.jar("demo-sources.jar", {"demo/A.scala": "a", "demo/B.kt": "b"})
    settings = GenerationSettings(root=project.root)

    GenerationOrchestrator(
        resolver=StaticResolver(_report(ResolvedArtifact(type="src", file=jar))),
        generation=RecordingGeneration(),
        src_filter=lambda name: name.endswith(".kt"),
    ).run(settings)

    files = sorted(p.name for p in settings.scratch_dir.rglob("*") if p.is_file())
    assert files == ["B.kt"]


def test_preview_does_not_touch_scratch(project: ProjectBuilder) -> None:
    project.dirs(["src/main/java"])
    settings = GenerationSettings(root=project.root)
    stale = settings.scratch_dir / "Stale.java"
    stale.parent.mkdir(parents=True)
    stale.write_text("class Stale {}", encoding="utf-8")

    command = GenerationOrchestrator(resolver=FailingResolver()).preview(settings)

    assert stale.exists()
    assert command.dirs == (str(project.root / "src" / "main" / "java"), str(settings.scratch_dir))


def test_existing_dirs_keeps_order(tmp_path: Path) -> None:
    first = tmp_path / "b"
    second = tmp_path / "a"
    first.mkdir()
    second.mkdir()
    (tmp_path / "file").write_text("", encoding="utf-8")

    assert existing_dirs([first, tmp_path / "missing", second, tmp_path / "file"]) == [first, second]
