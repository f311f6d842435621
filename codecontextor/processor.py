from __future__ import annotations

import os
import sys
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath

from .binary import is_binary
from .errors import TargetError
from .filetypes import category_of, classify, extension_of, is_text_category
from .ignore import (
    DEFAULT_IGNORE_PATTERNS,
    GITIGNORE_FILENAME,
    IgnoreContextStack,
    ToolIgnore,
    first_custom_match,
    load_ignore_context,
)
from .model import (
    AdditionalFileType,
    Binary,
    Category,
    Configuration,
    ExcludedFile,
    ExclusionReason,
    FileRecord,
    FileType,
    Ignored,
    Language,
    ProcessResult,
    UnknownType,
)
from .tokens import estimate_tokens

# Always pruned from directory walks, dot-file opt-ins notwithstanding.
VCS_DIRECTORIES = frozenset({".git", ".svn", ".hg", ".bzr", "CVS"})

EXTENSION_NOT_ALLOWED = "extension not allowed"


@dataclass(frozen=True)
class ProcessOptions:
    # User patterns; the built-in defaults are always applied first.
    ignore_patterns: tuple[str, ...] = ()
    extensions: tuple[str, ...] | None = None
    include_dot_files: tuple[str, ...] | None = None
    # Config files are kept unless this is switched off.
    disable_config_filter: bool = True
    disable_token_filter: bool = False
    disable_language_filter: bool = False
    max_tokens: int | None = None

    @property
    def effective_ignore_patterns(self) -> tuple[str, ...]:
        return DEFAULT_IGNORE_PATTERNS + tuple(self.ignore_patterns)

    @property
    def normalized_extensions(self) -> frozenset[str] | None:
        if self.extensions is None:
            return None
        return frozenset(normalize_extension(e) for e in self.extensions)

    def allows_dot_file(self, name: str) -> bool:
        return bool(self.include_dot_files) and name in self.include_dot_files


def normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if not ext or ext.startswith("."):
        return ext
    return f".{ext}"


def display_path(target: str | PurePath) -> str:
    return PurePath(os.path.normpath(target)).as_posix()


def count_lines(content: bytes) -> int:
    return content.count(b"\n") + 1


def detected_types(
    records: Iterable[FileRecord],
) -> tuple[set[Language], set[AdditionalFileType]]:
    languages: set[Language] = set()
    file_types: set[AdditionalFileType] = set()
    for record in records:
        if isinstance(record.file_type, Language):
            languages.add(record.file_type)
        elif isinstance(record.file_type, AdditionalFileType):
            file_types.add(record.file_type)
    return languages, file_types


def _read_bytes(path: Path, rel: str) -> bytes | None:
    try:
        return path.read_bytes()
    except OSError as e:
        print(f"Warning: could not read {rel}: {e}", file=sys.stderr)
        return None


def _make_record(rel: str, content: bytes, file_type: FileType) -> FileRecord:
    return FileRecord(
        path=rel,
        content=content,
        token_count=estimate_tokens(content, file_type),
        line_count=count_lines(content),
        file_type=file_type,
    )


class _Batch:
    """Included/excluded accumulation for one target, with the token budget."""

    def __init__(self, budget: int | None) -> None:
        self.budget = budget
        self.result = ProcessResult()
        self._total = 0

    def exclude(self, rel: str, file_type: FileType, reason: ExclusionReason) -> None:
        self.result.excluded.append(
            ExcludedFile(path=rel, file_type=file_type, reason=reason)
        )

    def include(self, record: FileRecord) -> bool:
        """Add ``record`` unless it would overrun the budget; False means stop."""
        if self.budget is not None and self._total + record.token_count > self.budget:
            self.result.truncated = True
            return False
        self.result.included.append(record)
        self._total += record.token_count
        return True

    def finish(self) -> ProcessResult:
        languages, file_types = detected_types(self.result.included)
        self.result.languages = languages
        self.result.file_types = file_types
        return self.result


def _process_explicit_file(
    path: Path, budget: int | None, skip_paths: Collection[str]
) -> ProcessResult:
    # Named files skip the unknown-type, ignore, extension and config filters.
    batch = _Batch(budget)
    rel = display_path(path)
    if rel in skip_paths:
        return batch.finish()
    file_type = classify(path)

    content = _read_bytes(path, rel)
    if content is None:
        return batch.finish()
    if is_binary(content):
        batch.exclude(rel, file_type, Binary())
        return batch.finish()

    batch.include(_make_record(rel, content, file_type))
    return batch.finish()


def _walk_filter_reason(
    rel: str,
    path: Path,
    file_type: FileType,
    options: ProcessOptions,
    stack: IgnoreContextStack,
    tool_ignore: ToolIgnore,
) -> ExclusionReason | None:
    if file_type is None and not options.disable_language_filter:
        return UnknownType()

    match = stack.last_match(path)
    if match is not None and not match.negated:
        return Ignored(match.pattern)
    if tool_ignore:
        line = tool_ignore.match(rel)
        if line is not None:
            return Ignored(line)
    pattern = first_custom_match(rel, options.effective_ignore_patterns)
    if pattern is not None:
        return Ignored(pattern)

    allowed = options.normalized_extensions
    if allowed is not None and extension_of(rel) not in allowed:
        return Ignored(EXTENSION_NOT_ALLOWED)

    if not options.disable_config_filter and category_of(file_type) is Category.CONFIG:
        return Configuration()
    return None


def _process_directory(
    root: Path,
    options: ProcessOptions,
    budget: int | None,
    prefix: str | None,
    skip_paths: Collection[str],
) -> ProcessResult:
    batch = _Batch(budget)
    stack = IgnoreContextStack(load_ignore_context(root))
    tool_ignore = ToolIgnore.load(root)

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        stack.pop_to(current)
        if current != root and GITIGNORE_FILENAME in filenames:
            stack.push(load_ignore_context(current))

        # Sorted in place so os.walk descends depth-first in name order.
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in VCS_DIRECTORIES
            and (not d.startswith(".") or options.allows_dot_file(d))
        )

        for name in sorted(filenames):
            if name.startswith(".") and not options.allows_dot_file(name):
                continue
            path = current / name
            rel = path.relative_to(root).as_posix()
            if prefix:
                rel = f"{prefix}/{rel}"
            if rel in skip_paths:
                continue
            file_type = classify(name)

            if not is_text_category(file_type):
                batch.exclude(rel, file_type, Binary())
                continue
            content = _read_bytes(path, rel)
            if content is None:
                continue
            if is_binary(content):
                batch.exclude(rel, file_type, Binary())
                continue

            reason = _walk_filter_reason(
                path.relative_to(root).as_posix(),
                path,
                file_type,
                options,
                stack,
                tool_ignore,
            )
            if reason is not None:
                batch.exclude(rel, file_type, reason)
                continue

            if not batch.include(_make_record(rel, content, file_type)):
                return batch.finish()

    return batch.finish()


def process_target(
    target: str | Path,
    options: ProcessOptions | None = None,
    *,
    token_budget: int | None = None,
    prefix: str | None = None,
    skip_paths: Collection[str] = frozenset(),
) -> ProcessResult:
    """Scan one file or directory target and classify everything under it.

    ``token_budget`` overrides ``options.max_tokens`` (the aggregator passes
    what is left of the global budget). ``prefix`` is prepended to the
    relative paths of a directory target's files. Files whose reported path is
    in ``skip_paths`` are passed over without being read.
    """
    options = options or ProcessOptions()
    budget = options.max_tokens if token_budget is None else token_budget
    path = Path(target)

    if not path.exists():
        raise TargetError(f"target does not exist: {target}")
    if path.is_file():
        return _process_explicit_file(path, budget, skip_paths)
    if path.is_dir():
        return _process_directory(path.resolve(), options, budget, prefix, skip_paths)
    raise TargetError(f"target is neither a file nor a directory: {target}")
