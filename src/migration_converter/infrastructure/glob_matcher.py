"""Glob pattern matching for file selection."""

from __future__ import annotations

import glob
import re
from functools import lru_cache


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a ``/``-separated glob into a regular expression.

    ``**`` spans any number of path segments (including none). ``*``, ``?``
    and ``**`` do not match segments starting with ``.``; a literal dot
    segment such as ``.git`` does.
    """
    return re.compile(
        glob.translate(pattern, recursive=True, include_hidden=False, seps="/")
    )


def _variants(pattern: str) -> tuple[str, ...]:
    # A trailing ``/**`` also matches the directory itself.
    if pattern.endswith("/**") and len(pattern) > 3:
        return (pattern, pattern[:-3])
    return (pattern,)


class GlobMatcher:
    """Default ``PatternMatcher`` backed by ``glob.translate``.

    Absolute paths keep their empty root segment: only a relative pattern
    starting with ``**`` can match them, as ``/abs/a.js`` matches ``**/*.js``
    but not ``*.js`` or ``abs/*.js``.
    """

    def matches(self, path: str, pattern: str) -> bool:
        """Return ``True`` when the whole of ``path`` matches ``pattern``."""
        if path.startswith("/") and not pattern.startswith("/"):
            if pattern != "**" and not pattern.startswith("**/"):
                return False
            path = path.lstrip("/")
        return any(
            compile_glob(variant).match(path) is not None
            for variant in _variants(pattern)
        )
