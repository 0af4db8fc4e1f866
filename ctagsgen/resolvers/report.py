"""Resolver backed by a dependency report written by the build tool."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml

from ..errors import ResolutionError
from ..logging import get_logger
from ..models import ConfigurationReport, DependencyReport, ModuleReport, ResolvedArtifact
from .base import Resolver


class ReportFileResolver(Resolver):
    """Reads a JSON or YAML report of resolved artifacts.

    Expected layout::

        configurations:
          - name: compile
            modules:
              - module: org.typelevel:cats-core_2.13:2.10.0
                artifacts:
                  - {type: jar, file: cats-core_2.13-2.10.0.jar}
                  - {type: src, file: cats-core_2.13-2.10.0-sources.jar}

    Relative artifact paths are resolved against the report's directory.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.logger = get_logger("resolvers.report")

    def resolve(self, project_root: Path) -> DependencyReport:
        path = self.path if self.path.is_absolute() else Path(project_root) / self.path
        self.logger.debug("Reading dependency report %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ResolutionError(f"Cannot read dependency report {path}: {exc}") from exc
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ResolutionError(f"Failed to parse dependency report {path}: {exc}") from exc
        return parse_report(data, base=path.parent)


def parse_report(data: Any, *, base: Path) -> DependencyReport:
    """Build a DependencyReport from decoded report data."""
    if not isinstance(data, dict):
        raise ResolutionError("Dependency report must contain a mapping at the root")
    configurations: List[ConfigurationReport] = []
    for index, entry in enumerate(_as_list(data.get("configurations"), "configurations")):
        if not isinstance(entry, dict):
            raise ResolutionError(f"configurations[{index}] must be a mapping")
        configuration = ConfigurationReport(name=str(entry.get("name") or f"#{index}"))
        for module_entry in _as_list(entry.get("modules"), f"{configuration.name}.modules"):
            configuration.modules.append(_parse_module(module_entry, base, configuration.name))
        configurations.append(configuration)
    return DependencyReport(configurations=configurations)


def _parse_module(entry: Any, base: Path, configuration: str) -> ModuleReport:
    if not isinstance(entry, dict):
        raise ResolutionError(f"Module entries in {configuration} must be mappings")
    module = ModuleReport(module=str(entry.get("module") or "unknown"))
    for artifact in _as_list(entry.get("artifacts"), f"{module.module}.artifacts"):
        if not isinstance(artifact, dict) or "type" not in artifact or "file" not in artifact:
            raise ResolutionError(f"Artifacts of {module.module} need 'type' and 'file'")
        file = Path(str(artifact["file"])).expanduser()
        module.artifacts.append(
            ResolvedArtifact(
                type=str(artifact["type"]),
                file=file if file.is_absolute() else base / file,
                name=str(artifact["name"]) if artifact.get("name") else module.module,
                classifier=str(artifact["classifier"]) if artifact.get("classifier") else None,
            )
        )
    return module


def _as_list(value: Any, label: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ResolutionError(f"'{label}' must be a list")
    return value


__all__ = ["ReportFileResolver", "parse_report"]
