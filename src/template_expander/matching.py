"""Glob matching and discovery of files under a template's assets directory.

Patterns are POSIX-style and relative to the assets directory:

- ``*``, ``?`` and ``[...]`` match within one path segment
- ``**`` matches zero or more whole segments
- ``{a,b}`` expands to alternatives (may nest)
- a leading ``!`` turns a pattern into an exclusion

Wildcards never match a segment starting with ``.`` unless the pattern
segment starts with ``.`` as well, so ``**/*`` skips dotfiles.
"""

import logging
import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path

from . import _io
from .config import TemplateConfig

logger = logging.getLogger(__name__)

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, innermost first.

    >>> expand_braces("src/*.{js,ts}")
    ['src/*.js', 'src/*.ts']
    """
    match = _BRACE_RE.search(pattern)
    if match is None or "," not in match.group(1):
        return [pattern]

    head, tail = pattern[: match.start()], pattern[match.end() :]
    results: list[str] = []
    for option in match.group(1).split(","):
        for expanded in expand_braces(head + option + tail):
            if expanded not in results:
                results.append(expanded)
    return results


def _is_hidden(segment: str) -> bool:
    return segment.startswith(".")


def _match_segments(pattern: Sequence[str], parts: Sequence[str]) -> bool:
    if not pattern:
        return not parts

    head = pattern[0]
    if head == "**":
        if _match_segments(pattern[1:], parts):
            return True
        return (
            bool(parts)
            and not _is_hidden(parts[0])
            and _match_segments(pattern, parts[1:])
        )

    if not parts:
        return False
    if _is_hidden(parts[0]) and not _is_hidden(head):
        return False
    return fnmatchcase(parts[0], head) and _match_segments(pattern[1:], parts[1:])


def _split(path: str) -> list[str]:
    return [part for part in path.split("/") if part and part != "."]


@dataclass(frozen=True)
class GlobPattern:
    """A single compiled glob pattern."""

    source: str
    negated: bool
    alternatives: tuple[tuple[str, ...], ...]

    @classmethod
    def parse(cls, pattern: str) -> "GlobPattern":
        negated = pattern.startswith("!")
        body = pattern[1:] if negated else pattern
        body = body.replace("\\", "/")
        alternatives = tuple(tuple(_split(option)) for option in expand_braces(body))
        return cls(source=pattern, negated=negated, alternatives=alternatives)

    def matches(self, relative_posix_path: str) -> bool:
        parts = _split(relative_posix_path)
        return any(_match_segments(option, parts) for option in self.alternatives)


@dataclass(frozen=True)
class PatternSet:
    """Inclusion and exclusion patterns evaluated together.

    A path matches when it matches any inclusion and no exclusion.
    """

    include: tuple[GlobPattern, ...] = ()
    exclude: tuple[GlobPattern, ...] = ()

    @classmethod
    def from_patterns(cls, patterns: str | Iterable[str]) -> "PatternSet":
        if isinstance(patterns, str):
            patterns = [patterns]
        compiled = [GlobPattern.parse(p) for p in patterns if p and p != "!"]
        return cls(
            include=tuple(p for p in compiled if not p.negated),
            exclude=tuple(p for p in compiled if p.negated),
        )

    def matches(self, relative_posix_path: str) -> bool:
        if not any(p.matches(relative_posix_path) for p in self.include):
            return False
        return not any(p.matches(relative_posix_path) for p in self.exclude)


@dataclass
class Discovery:
    """Classified files under an assets directory, as absolute paths."""

    expand_set: list[Path] = field(default_factory=list)
    pass_through_set: list[Path] = field(default_factory=list)


class PathMatcher:
    """Classifies files under an assets directory as expandable or pass-through."""

    def __init__(self, assets_root: str | os.PathLike[str]):
        self.assets_root = Path(assets_root).absolute()

    def _walk(self) -> list[str]:
        found: list[str] = []
        for directory, dirnames, filenames in os.walk(self.assets_root):
            dirnames.sort()
            rel_dir = Path(directory).relative_to(self.assets_root).as_posix()
            for name in sorted(filenames):
                if not os.path.isfile(os.path.join(directory, name)):
                    continue
                found.append(name if rel_dir == "." else f"{rel_dir}/{name}")
        return sorted(found)

    def _absolute(self, relative_posix_path: str) -> Path:
        return self.assets_root.joinpath(*relative_posix_path.split("/"))

    def glob_sync(self, patterns: str | Iterable[str]) -> list[Path]:
        pattern_set = PatternSet.from_patterns(patterns)
        if not pattern_set.include:
            return []
        return [self._absolute(rel) for rel in self._walk() if pattern_set.matches(rel)]

    def discover_sync(self, config: TemplateConfig) -> Discovery:
        expand = PatternSet.from_patterns(config.expand)
        no_expand = PatternSet.from_patterns(config.no_expand)
        discovery = Discovery()
        for rel in self._walk():
            if no_expand.matches(rel):
                discovery.pass_through_set.append(self._absolute(rel))
            elif expand.matches(rel):
                discovery.expand_set.append(self._absolute(rel))
        return discovery

    async def glob(self, patterns: str | Iterable[str]) -> list[Path]:
        """Return absolute paths of regular files matching ``patterns``, sorted."""
        return await _io.run_sync(self.glob_sync, patterns)

    async def discover(self, config: TemplateConfig) -> Discovery:
        """Split the assets into expand and pass-through sets.

        A file matched by ``no_expand`` (inclusions minus its own exclusions) is
        pass-through; otherwise it is expanded when ``expand`` matches it.
        """
        discovery = await _io.run_sync(self.discover_sync, config)
        logger.debug(
            f"Discovered {len(discovery.expand_set)} expandable and "
            f"{len(discovery.pass_through_set)} pass-through files in {self.assets_root}"
        )
        return discovery

    def relative_path(self, full_path: Path) -> str:
        """Relative path of a discovered file, with platform-native separators."""
        return str(full_path.relative_to(self.assets_root))
