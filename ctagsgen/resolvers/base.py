"""Base classes for dependency resolvers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..models import DependencyReport


class Resolver(ABC):
    """Contract for collaborators that hand over resolved dependency artifacts."""

    @abstractmethod
    def resolve(self, project_root: Path) -> DependencyReport:
        """Return the resolution report, raising ResolutionError on failure."""


class StaticResolver(Resolver):
    """Returns a report fixed at construction time."""

    def __init__(self, report: DependencyReport | None = None) -> None:
        self.report = report or DependencyReport()

    def resolve(self, project_root: Path) -> DependencyReport:
        return self.report
