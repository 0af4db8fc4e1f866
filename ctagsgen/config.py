"""Configuration loading for ctagsgen (.ctagsgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, cast

import yaml

from .models import CtagsParams

CONFIG_FILENAME = ".ctagsgen.yml"

DEFAULT_SRC_DIRS: Sequence[str] = (
    "src/main/scala",
    "src/test/scala",
    "src/main/java",
    "src/test/java",
)

# Deleted on every run. Do not point this at a directory you care about.
DEFAULT_DEPENDENCY_SRC_DIR = "target/sbt-ctags-dep-srcs"

DEFAULT_REPOSITORIES: Sequence[str] = ("https://repo1.maven.org/maven2",)
DEFAULT_LOCAL_REPOSITORY = "~/.m2/repository"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DependencyConfig:
    """Where dependency source artifacts come from."""

    report: Optional[Path] = None
    coordinates: List[str] = field(default_factory=list)
    repositories: List[str] = field(default_factory=lambda: list(DEFAULT_REPOSITORIES))
    local_repository: Path = field(
        default_factory=lambda: Path(DEFAULT_LOCAL_REPOSITORY).expanduser()
    )
    timeout: float = 30.0


@dataclass
class GenerationSettings:
    """Effective settings for one generation run."""

    root: Path
    params: CtagsParams = field(default_factory=CtagsParams)
    src_dirs: List[Path] = field(default_factory=list)
    dependency_src_dir: Optional[Path] = None
    dependencies: DependencyConfig = field(default_factory=DependencyConfig)

    def __post_init__(self) -> None:
        if not self.src_dirs:
            self.src_dirs = [self.root / item for item in DEFAULT_SRC_DIRS]
        if self.dependency_src_dir is None:
            self.dependency_src_dir = self.root / DEFAULT_DEPENDENCY_SRC_DIR

    @property
    def scratch_dir(self) -> Path:
        """Dependency source directory; filled in by ``__post_init__`` when unset."""
        return cast(Path, self.dependency_src_dir)

    @property
    def tag_dirs(self) -> List[Path]:
        """Project source directories followed by the scratch directory."""
        return [*self.src_dirs, self.scratch_dir]

    @property
    def tag_file(self) -> Path:
        return self.root / self.params.tag_file_name

    def with_params(self, **changes: Any) -> "GenerationSettings":
        return replace(self, params=replace(self.params, **changes))


def load_config(config_path: Path, *, root: Path | None = None) -> GenerationSettings:
    """Load settings from ``.ctagsgen.yml`` (or the given file).

    Relative paths are resolved against ``root``, which defaults to the
    directory holding the configuration file.
    """
    config_file = _resolve_config_path(config_path)
    root = Path(root).resolve() if root is not None else config_file.parent

    if not config_file.exists():
        return GenerationSettings(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    defaults = CtagsParams()
    ctags_data = _as_dict(data.get("ctags"))
    params = CtagsParams(
        executable=_as_str(ctags_data.get("executable")) or defaults.executable,
        excludes=_as_str_tuple(ctags_data.get("excludes"), defaults.excludes),
        languages=_as_str_tuple(ctags_data.get("languages"), defaults.languages),
        tag_file_name=_as_str(ctags_data.get("tag_file")) or defaults.tag_file_name,
        use_relative_paths=_as_bool(ctags_data.get("relative_paths")) or False,
        extra_args=_as_str_tuple(ctags_data.get("extra_args"), defaults.extra_args),
    )

    src_dirs = [root / item for item in _as_str_list(data.get("src_dirs"))]
    scratch = _as_str(data.get("dependency_src_dir"))

    deps_data = _as_dict(data.get("dependencies"))
    dependencies = DependencyConfig()
    report = _as_str(deps_data.get("report"))
    if report:
        dependencies.report = root / Path(report).expanduser()
    dependencies.coordinates = _as_str_list(deps_data.get("coordinates"))
    if "repositories" in deps_data:
        dependencies.repositories = _as_str_list(deps_data.get("repositories"))
    local_repository = _as_str(deps_data.get("local_repository"))
    if local_repository:
        dependencies.local_repository = root / Path(local_repository).expanduser()
    timeout = _as_float(deps_data.get("timeout"))
    if timeout is not None:
        dependencies.timeout = timeout

    return GenerationSettings(
        root=root,
        params=params,
        src_dirs=src_dirs,
        dependency_src_dir=root / scratch if scratch else None,
        dependencies=dependencies,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_str_tuple(value: Any, default: Sequence[str]) -> tuple[str, ...]:
    if value is None:
        return tuple(default)
    return tuple(_as_str_list(value))


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_DEPENDENCY_SRC_DIR",
    "DEFAULT_SRC_DIRS",
    "DependencyConfig",
    "GenerationSettings",
    "load_config",
]
