from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pathspec

GITIGNORE_FILENAME = ".gitignore"
TOOL_IGNORE_FILENAME = ".codecontextorignore"

# Built-in custom ignore list; user patterns are appended to it.
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    # Language-specific ignores
    "package-lock.json",
    "yarn.lock",
    "npm-debug.log",
    "*.tsbuildinfo",
    "Pipfile.lock",
    "*.pyc",
    "__pycache__",
    "*.class",
    "*.jar",
    "target/",
    "bin/",
    "obj/",
    "*.o",
    "*.obj",
    "*.exe",
    "*.dll",
    "*.so",
    "*.dylib",
    "vendor/",
    "composer.lock",
    "Gemfile.lock",
    "*.gem",
    "go.sum",
    "Cargo.lock",
    "*.swiftmodule",
    "*.swiftdoc",
    "*.kotlin_module",
    "build/",
    ".zig-cache",
    "node_modules",
    # Build files
    "Makefile",
    "CMakeLists.txt",
)


@dataclass(frozen=True)
class IgnorePattern:
    pattern: str
    negated: bool = False
    directory_only: bool = False
    anchored: bool = False


@dataclass(frozen=True)
class IgnoreContext:
    """Patterns of one ignore file, scoped to the directory holding it."""

    base: Path
    patterns: tuple[IgnorePattern, ...] = ()


def parse_ignore_line(line: str) -> IgnorePattern | None:
    text = line.strip(" \t\r")
    if not text or text.startswith("#"):
        return None

    negated = text.startswith("!")
    if negated:
        text = text[1:]
    directory_only = text.endswith("/")
    if directory_only:
        text = text[:-1]
    anchored = text.startswith("/")
    if anchored:
        text = text[1:]

    if not text:
        return None
    return IgnorePattern(
        pattern=text,
        negated=negated,
        directory_only=directory_only,
        anchored=anchored,
    )


def parse_ignore_text(text: str) -> list[IgnorePattern]:
    out: list[IgnorePattern] = []
    for line in text.split("\n"):
        parsed = parse_ignore_line(line)
        if parsed is not None:
            out.append(parsed)
    return out


def _read_ignore_text(path: Path) -> str:
    if not path.is_file():
        return ""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        print(f"Warning: could not read {path}: {e}", file=sys.stderr)
        return ""


def load_ignore_context(
    directory: Path, filename: str = GITIGNORE_FILENAME
) -> IgnoreContext:
    """Load ``<directory>/<filename>``; a missing file yields no patterns."""
    text = _read_ignore_text(directory / filename)
    return IgnoreContext(base=directory, patterns=tuple(parse_ignore_text(text)))


def matches_pattern(rel_path: str, pattern: IgnorePattern) -> bool:
    """Match one gitignore-file pattern against a '/'-separated relative path.

    Anchored patterns are prefix matches from the context root. Unanchored
    patterns are tested per path component: exact equality for directory-only
    patterns, a component prefix otherwise.
    """
    text = pattern.pattern
    if pattern.anchored:
        if not rel_path.startswith(text):
            return False
        if pattern.directory_only:
            return len(rel_path) == len(text) or rel_path[len(text)] == "/"
        return True

    for component in rel_path.split("/"):
        if pattern.directory_only:
            if component == text:
                return True
        elif component.startswith(text):
            return True
    return False


def _matches_wildcard(component: str, pattern: str) -> bool:
    if pattern == "*":
        return True
    if len(pattern) > 1 and pattern.startswith("*") and pattern.endswith("*"):
        return pattern[1:-1] in component
    if pattern.startswith("*"):
        return component.endswith(pattern[1:])
    if pattern.endswith("*"):
        return component.startswith(pattern[:-1])
    return component == pattern


def matches_custom_pattern(rel_path: str, pattern: str) -> bool:
    """Match a user/default ignore pattern against a relative path.

    Each '/'-separated pattern part is a simple wildcard (``*``, ``*x*``,
    ``*x``, ``x*`` or literal) matched against one path component; the parts
    must match a contiguous run of components. A leading '/' pins the run to
    the first component, a trailing '/' requires the run to name a directory.
    """
    anchored = pattern.startswith("/")
    requires_dir = pattern.endswith("/")
    parts = pattern.strip("/").split("/")
    if parts == [""]:
        return False

    components = rel_path.split("/")
    last_start = len(components) - len(parts)
    starts = [0] if anchored else range(last_start + 1)
    for start in starts:
        end = start + len(parts)
        if end > len(components):
            break
        if requires_dir and end == len(components):
            continue
        if all(
            _matches_wildcard(components[start + i], part)
            for i, part in enumerate(parts)
        ):
            return True
    return False


def first_custom_match(rel_path: str, patterns: Sequence[str]) -> str | None:
    for pattern in patterns:
        if matches_custom_pattern(rel_path, pattern):
            return pattern
    return None


class IgnoreContextStack:
    """Active .gitignore contexts of a depth-first walk, root-most first."""

    def __init__(self, root: IgnoreContext) -> None:
        self._contexts: list[IgnoreContext] = [root]

    def __len__(self) -> int:
        return len(self._contexts)

    @property
    def contexts(self) -> tuple[IgnoreContext, ...]:
        return tuple(self._contexts)

    def push(self, context: IgnoreContext) -> None:
        self._contexts.append(context)

    def pop_to(self, directory: Path) -> None:
        """Pop contexts whose base is no longer an ancestor of ``directory``."""
        while len(self._contexts) > 1:
            try:
                directory.relative_to(self._contexts[-1].base)
            except ValueError:
                self._contexts.pop()
                continue
            break

    def last_match(self, path: Path) -> IgnorePattern | None:
        """Return the deciding pattern for ``path``: the last one that matches."""
        last: IgnorePattern | None = None
        for context in self._contexts:
            try:
                rel = path.relative_to(context.base).as_posix()
            except ValueError:
                continue
            for pattern in context.patterns:
                if matches_pattern(rel, pattern):
                    last = pattern
        return last

    def is_ignored(self, path: Path) -> bool:
        match = self.last_match(path)
        return match is not None and not match.negated


class ToolIgnore:
    """``.codecontextorignore`` patterns with full gitwildmatch semantics."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = [
            ln.strip() for ln in lines if ln.strip() and not ln.strip().startswith("#")
        ]
        # Order matters: patterns later in the list take precedence (e.g. negations).
        self.spec = pathspec.PathSpec.from_lines("gitwildmatch", self.lines)
        # Non-negated lines, last first, for naming the line that decided a match.
        self._deciding = [
            (line, pathspec.PathSpec.from_lines("gitwildmatch", [line]))
            for line in reversed(self.lines)
            if not line.startswith("!")
        ]

    @classmethod
    def load(cls, root: Path) -> ToolIgnore:
        return cls(_read_ignore_text(root / TOOL_IGNORE_FILENAME).splitlines())

    def __bool__(self) -> bool:
        return bool(self.lines)

    def match(self, rel_path: str) -> str | None:
        """Return the line that ignores ``rel_path``, or None if it is kept."""
        if not self.spec.match_file(rel_path):
            return None
        for line, single in self._deciding:
            if single.match_file(rel_path):
                return line
        return TOOL_IGNORE_FILENAME
