"""Include/exclude filtering of candidate file paths."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from migration_converter.application.options import RunConfiguration
from migration_converter.application.ports import PatternMatcher


def _as_posix(path: str) -> str:
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class FileFilter:
    """Decide whether a path is in scope for a run.

    Exclude patterns are checked first and always win. A path that matches
    no include pattern is rejected.
    """

    def __init__(
        self,
        include: Iterable[str],
        exclude: Iterable[str],
        matcher: PatternMatcher | None = None,
    ) -> None:
        self.include = tuple(include)
        self.exclude = tuple(exclude)
        if matcher is None:
            from migration_converter.infrastructure.glob_matcher import GlobMatcher

            matcher = GlobMatcher()
        self._matcher = matcher

    @classmethod
    def from_options(
        cls,
        options: RunConfiguration,
        matcher: PatternMatcher | None = None,
    ) -> FileFilter:
        return cls(options.include, options.exclude, matcher=matcher)

    def should_process(self, path: str) -> bool:
        """Return ``True`` when ``path`` is included and not excluded."""
        candidate = _as_posix(path)
        for pattern in self.exclude:
            if self._matcher.matches(candidate, pattern):
                return False
        for pattern in self.include:
            if self._matcher.matches(candidate, pattern):
                return True
        return False

    def select(self, paths: Iterable[str]) -> Iterator[str]:
        """Yield accepted ``paths`` in input order."""
        return (path for path in paths if self.should_process(path))
