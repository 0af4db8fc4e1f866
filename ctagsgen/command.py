"""Composition and execution of the ctags command line."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Tuple

from .errors import SubprocessError
from .logging import stage
from .models import CtagsParams, GenerationContext

TAG_RELATIVE_FLAG = "--tag-relative=yes"


@dataclass(frozen=True)
class CommandLine:
    """A composed ctags invocation.

    ``argv`` is what gets executed. ``render()`` reproduces the historical
    space-joined form, empty segments included, and is only used for display.
    """

    executable: str
    excludes: Tuple[str, ...]
    languages: str
    tag_file: str
    extra: Tuple[str, ...]
    dirs: Tuple[str, ...]

    @property
    def argv(self) -> List[str]:
        args = [self.executable, *self.excludes]
        if self.languages:
            args.append(self.languages)
        args.extend(["-f", self.tag_file])
        args.extend(arg for arg in self.extra if arg)
        args.append("-R")
        args.extend(self.dirs)
        return args

    def render(self) -> str:
        return (
            f"{self.executable} {' '.join(self.excludes)} {self.languages} "
            f"-f {self.tag_file} {' '.join(self.extra)} -R {' '.join(self.dirs)}"
        )

    def __str__(self) -> str:
        return self.render()


def compose(params: CtagsParams, src_dirs: Sequence[Path], base_dir: Path) -> CommandLine:
    """Build the ctags command for ``src_dirs``.

    With ``use_relative_paths`` directories below ``base_dir`` are passed
    relative to it and ctags is asked to write relative paths into the tag file.
    """
    base = Path(base_dir).absolute()
    dirs = tuple(
        _directory_arg(Path(directory), base, params.use_relative_paths)
        for directory in src_dirs
    )
    excludes = tuple(f"--exclude={pattern}" for pattern in params.excludes)
    languages = f"--languages={','.join(params.languages)}" if params.languages else ""
    extra: Tuple[str, ...] = tuple(params.extra_args)
    if params.use_relative_paths:
        extra = (TAG_RELATIVE_FLAG,) + extra
    return CommandLine(
        executable=params.executable,
        excludes=excludes,
        languages=languages,
        tag_file=params.tag_file_name,
        extra=extra,
        dirs=dirs,
    )


def _directory_arg(directory: Path, base: Path, relative: bool) -> str:
    absolute = directory if directory.is_absolute() else base / directory
    if relative:
        try:
            return str(absolute.relative_to(base))
        except ValueError:
            return str(absolute)
    return str(absolute)


class CtagsGenerator:
    """Default tag generation strategy: shells out to ctags in the project root."""

    def __init__(self, runner: Callable[..., int] | None = None) -> None:
        self._runner = runner or self._default_runner

    def __call__(self, context: GenerationContext) -> CommandLine:
        command = compose(context.params, context.src_dirs, context.base_dir)
        context.log.info(
            "running this command to generate ctags: %s", command.render(), extra=stage("run")
        )
        try:
            returncode = self._runner(command.argv, cwd=context.base_dir)
        except FileNotFoundError as exc:
            raise SubprocessError(
                f"Unable to locate '{command.executable}'. Install ctags or set ctags.executable.",
            ) from exc
        if returncode != 0:
            raise SubprocessError(
                f"{command.executable} exited with status {returncode}",
                returncode=returncode,
            )
        return command

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> int:
        completed = subprocess.run(list(args), cwd=str(cwd), check=False)
        return completed.returncode


__all__ = ["CommandLine", "CtagsGenerator", "TAG_RELATIVE_FLAG", "compose"]
