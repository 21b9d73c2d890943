"""
Glob matching for the ``exclude`` config list.

Patterns are compiled with pathspec's gitignore matcher, adjusted so each
entry behaves as a plain glob:
- ``*``, ``?`` and ``[...]`` match within a path segment
- ``**`` matches across directories
- patterns without a slash match at any depth
- in patterns with a slash, ``*`` also matches across directories
  (``docs/*.md`` excludes ``docs/sub/x.md``)
- a leading ``!`` or ``#`` is a literal character, not a negation or comment
- dot-files are matched like any other name

Brace alternatives (``*.{tmp,bak}``) are expanded into one pattern per
alternative before compiling.
"""

import logging
import sys
from typing import Iterable

import pathspec

logger = logging.getLogger(__name__)


def expand_braces(pattern: str) -> list[str]:
    """
    Expand brace alternatives in a glob pattern.

    Nested braces are supported. A brace group without a top-level comma,
    or without a closing brace, is kept literally.

    Examples:
        "*.{tmp,bak}" -> ["*.tmp", "*.bak"]
        "{a,b{1,2}}/x" -> ["a/x", "b1/x", "b2/x"]
    """
    depth = 0
    start = -1
    commas: list[int] = []

    for i, ch in enumerate(pattern):
        if ch == "{":
            if depth == 0:
                start = i
                commas = []
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                if not commas:
                    # Literal group; keep scanning after it
                    rest = expand_braces(pattern[i + 1:])
                    return [pattern[: i + 1] + r for r in rest]
                prefix = pattern[:start]
                suffix = pattern[i + 1:]
                bounds = [start, *commas, i]
                expanded: list[str] = []
                for lo, hi in zip(bounds, bounds[1:]):
                    alternative = pattern[lo + 1:hi]
                    expanded.extend(expand_braces(prefix + alternative + suffix))
                return expanded
        elif ch == "," and depth == 1:
            commas.append(i)

    return [pattern]


def _single_star_positions(pattern: str) -> list[int]:
    """Indexes of ``*`` that are not part of ``**``, escaped, or inside ``[...]``."""
    positions: list[int] = []
    in_class = False
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "*":
            if pattern[i + 1:i + 2] == "*":
                while i < len(pattern) and pattern[i] == "*":
                    i += 1
                continue
            positions.append(i)
        i += 1
    return positions


def cross_directory_variants(pattern: str) -> list[str]:
    """
    Let ``*`` match across ``/`` in patterns that contain a slash.

    gitignore rules stop ``*`` at a slash. Each single ``*`` is expanded into
    two alternatives: ``*`` itself, and ``*/**/*`` which spans one or more
    directory levels. Together they match any run of characters.

    Examples:
        "docs/*.md" -> ["docs/*.md", "docs/*/**/*.md"]
        "*.tmp" -> ["*.tmp"]
    """
    if "/" not in pattern.strip("/"):
        return [pattern]

    variants = [""]
    last = 0
    for pos in _single_star_positions(pattern):
        literal = pattern[last:pos]
        variants = [v + literal + alt for v in variants for alt in ("*", "*/**/*")]
        last = pos + 1
    return [v + pattern[last:] for v in variants]


def _escape_leading(pattern: str) -> str:
    # gitignore reads a leading "!" as negation and "#" as a comment
    if pattern.startswith(("!", "#")):
        return "\\" + pattern
    return pattern


class ExcludeMatcher:
    """
    Matches repository-relative paths against exclude globs.

    Paths are expected with POSIX separators, relative to the repository
    root, as git reports them.
    """

    def __init__(self, patterns: Iterable[str], case_sensitive: bool | None = None):
        """
        Initialize the matcher.

        Args:
            patterns: Glob patterns from the config ``exclude`` list
            case_sensitive: Override case sensitivity (None = auto-detect from platform)
        """
        self._patterns: list[str] = [p for p in patterns if p and p.strip()]

        if case_sensitive is None:
            self._case_sensitive = sys.platform != "win32"
        else:
            self._case_sensitive = case_sensitive

        expanded: list[str] = []
        for raw in self._patterns:
            for alternative in expand_braces(raw.strip()):
                for pattern in cross_directory_variants(alternative):
                    pattern = _escape_leading(pattern)
                    expanded.append(pattern if self._case_sensitive else pattern.lower())

        self._pathspec: pathspec.GitIgnoreSpec | None = None
        if expanded:
            self._pathspec = pathspec.GitIgnoreSpec.from_lines(expanded)
            logger.debug(f"Compiled {len(expanded)} exclude patterns from {len(self._patterns)} globs")

    @property
    def patterns(self) -> list[str]:
        """The configured patterns, before brace expansion."""
        return list(self._patterns)

    def matches(self, path: str) -> bool:
        """Return True if any exclude pattern matches the path."""
        if self._pathspec is None:
            return False
        candidate = path if self._case_sensitive else path.lower()
        return self._pathspec.match_file(candidate)
