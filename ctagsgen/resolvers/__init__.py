"""Dependency resolver implementations and selection."""

from __future__ import annotations

from .base import Resolver, StaticResolver
from .maven import Coordinate, MavenResolver
from .report import ReportFileResolver, parse_report
from ..config import DependencyConfig


def build_resolver(config: DependencyConfig) -> Resolver:
    """Pick the resolver matching the dependency configuration.

    A report file wins over coordinates; with neither, the project has no
    dependency sources to index.
    """
    if config.report is not None:
        return ReportFileResolver(config.report)
    if config.coordinates:
        return MavenResolver(
            config.coordinates,
            repositories=config.repositories,
            local_repository=config.local_repository,
            timeout=config.timeout,
        )
    return StaticResolver()


__all__ = [
    "Coordinate",
    "MavenResolver",
    "ReportFileResolver",
    "Resolver",
    "StaticResolver",
    "build_resolver",
    "parse_report",
]
