"""File name filters used when unpacking dependency source archives."""

from __future__ import annotations

import posixpath
from fnmatch import fnmatchcase
from typing import Callable, Sequence

NameFilter = Callable[[str], bool]


def _nothing(name: str) -> bool:
    return False


def _glob(pattern: str) -> NameFilter:
    def matches(name: str) -> bool:
        if not name or name.endswith("/"):
            return False
        return fnmatchcase(posixpath.basename(name.replace("\\", "/")), pattern)

    return matches


def _either(left: NameFilter, right: NameFilter) -> NameFilter:
    return lambda name: left(name) or right(name)


def build_filter(languages: Sequence[str]) -> NameFilter:
    """Return a predicate accepting file names with one of the language extensions.

    Matching is case-sensitive and only looks at the basename, so ``"scala"``
    accepts ``cats/Monad.scala`` but not ``Monad.Scala`` or ``scala/README``.
    An empty language list accepts nothing.
    """
    name_filter: NameFilter = _nothing
    for language in languages:
        name_filter = _either(name_filter, _glob(f"*.{language}"))
    return name_filter


__all__ = ["NameFilter", "build_filter"]
