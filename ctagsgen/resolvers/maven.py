"""Resolver that fetches ``-sources.jar`` artifacts for pinned Maven coordinates."""

from __future__ import annotations

import http.client
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import ResolutionError
from ..logging import get_logger
from ..models import ConfigurationReport, DependencyReport, ModuleReport, ResolvedArtifact
from .base import Resolver

Fetcher = Callable[[str, float], Optional[bytes]]


@dataclass(frozen=True)
class Coordinate:
    """A pinned ``group:artifact:version`` coordinate."""

    group: str
    artifact: str
    version: str

    @classmethod
    def parse(cls, value: str) -> "Coordinate":
        parts = [part.strip() for part in value.split(":")]
        if len(parts) != 3 or not all(parts):
            raise ResolutionError(
                f"Invalid coordinate '{value}': expected group:artifact:version"
            )
        return cls(*parts)

    def relative_dir(self) -> str:
        return "/".join([*self.group.split("."), self.artifact, self.version])

    def filename(self, classifier: str | None = None, extension: str = "jar") -> str:
        suffix = f"-{classifier}" if classifier else ""
        return f"{self.artifact}-{self.version}{suffix}.{extension}"

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"


class MavenResolver(Resolver):
    """Locates source jars in a Maven-layout local repository, downloading missing ones."""

    def __init__(
        self,
        coordinates: Sequence[str],
        *,
        repositories: Sequence[str],
        local_repository: Path,
        timeout: float = 30.0,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.coordinates = list(coordinates)
        self.repositories = [url.rstrip("/") for url in repositories]
        self.local_repository = Path(local_repository).expanduser()
        self.timeout = timeout
        self._fetch = fetcher or self._http_fetcher
        self.logger = get_logger("resolvers.maven")

    def resolve(self, project_root: Path) -> DependencyReport:
        configuration = ConfigurationReport(name="compile")
        for value in self.coordinates:
            coordinate = Coordinate.parse(value)
            module = ModuleReport(module=str(coordinate))
            module_dir = self.local_repository.joinpath(*coordinate.relative_dir().split("/"))

            binary = module_dir / coordinate.filename()
            if binary.is_file():
                module.artifacts.append(
                    ResolvedArtifact(type="jar", file=binary, name=coordinate.artifact)
                )

            sources = module_dir / coordinate.filename("sources")
            if not sources.is_file() and not self._download(coordinate, sources):
                self.logger.warning("No sources jar published for %s", coordinate)
            if sources.is_file():
                module.artifacts.append(
                    ResolvedArtifact(
                        type="src",
                        file=sources,
                        name=coordinate.artifact,
                        classifier="sources",
                    )
                )
            configuration.modules.append(module)
        return DependencyReport(configurations=[configuration])

    def _download(self, coordinate: Coordinate, target: Path) -> bool:
        relative = f"{coordinate.relative_dir()}/{target.name}"
        for repository in self.repositories:
            url = f"{repository}/{relative}"
            self.logger.debug("Fetching %s", url)
            payload = self._fetch(url, self.timeout)
            if payload is None:
                continue
            _write_atomic(target, payload)
            self.logger.info("Downloaded %s", target.name)
            return True
        return False

    @staticmethod
    def _http_fetcher(url: str, timeout: float) -> Optional[bytes]:
        request = Request(url, headers={"User-Agent": "ctagsgen"})
        try:
            with urlopen(request, timeout=timeout) as response:  # type: ignore[arg-type]
                return response.read()
        except HTTPError as exc:
            if exc.code == 404:
                return None
            raise ResolutionError(
                f"Fetching {url} failed with status {exc.code}: {exc.reason}"
            ) from exc
        except URLError as exc:
            raise ResolutionError(f"Fetching {url} failed: {exc.reason}") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise ResolutionError(f"Fetching {url} failed: {exc!r}") from exc


def _write_atomic(target: Path, payload: bytes) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
    except OSError as exc:
        raise ResolutionError(f"Cannot store {target}: {exc}") from exc
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.replace(tmp_name, target)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise ResolutionError(f"Cannot store {target}: {exc}") from exc


__all__ = ["Coordinate", "Fetcher", "MavenResolver"]
