from __future__ import annotations

from pathlib import PurePath

from .model import (
    NON_TEXT_CATEGORIES,
    AdditionalFileType,
    Category,
    FileType,
    Language,
)

LANGUAGE_EXTENSIONS: dict[str, Language] = {
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".html": Language.HTML,
    ".py": Language.PYTHON,
    ".pyw": Language.PYTHON,
    ".java": Language.JAVA,
    ".cs": Language.CSHARP,
    ".cpp": Language.CPP,
    ".cxx": Language.CPP,
    ".cc": Language.CPP,
    ".hpp": Language.CPP,
    ".c": Language.C,
    ".h": Language.C,
    ".php": Language.PHP,
    ".rb": Language.RUBY,
    ".go": Language.GO,
    ".rs": Language.RUST,
    ".swift": Language.SWIFT,
    ".kt": Language.KOTLIN,
    ".kts": Language.KOTLIN,
    ".scala": Language.SCALA,
    ".zig": Language.ZIG,
    ".sh": Language.SHELL,
    ".bash": Language.SHELL,
    ".css": Language.CSS,
    ".scss": Language.SCSS,
    ".sql": Language.SQL,
    ".r": Language.R,
    ".lua": Language.LUA,
    ".pl": Language.PERL,
    ".pm": Language.PERL,
    ".t": Language.PERL,
    ".hs": Language.HASKELL,
    ".ex": Language.ELIXIR,
    ".exs": Language.ELIXIR,
    ".dart": Language.DART,
    ".xml": Language.XML,
}

ADDITIONAL_EXTENSIONS: dict[str, AdditionalFileType] = {
    f".{t.value}": t for t in AdditionalFileType
}

# Matched case-sensitively against the basename.
WELL_KNOWN_FILENAMES: dict[str, FileType] = {
    "Makefile": Language.SHELL,
    "makefile": Language.SHELL,
    "Dockerfile": Language.SHELL,
    "Jenkinsfile": Language.SHELL,
    "LICENSE": AdditionalFileType.TXT,
    "README": AdditionalFileType.TXT,
    "CHANGELOG": AdditionalFileType.TXT,
    "CONTRIBUTING": AdditionalFileType.TXT,
    "AUTHORS": AdditionalFileType.TXT,
    "CODEOWNERS": AdditionalFileType.TXT,
    ".gitignore": AdditionalFileType.CONF,
    ".gitattributes": AdditionalFileType.CONF,
    ".editorconfig": AdditionalFileType.CONF,
    ".env": AdditionalFileType.CONF,
}


def extension_of(path: str | PurePath) -> str:
    """Return the lowercased final suffix, '' for dot-files like '.env'."""
    return PurePath(path).suffix.lower()


def classify(path: str | PurePath) -> FileType:
    """Map a path to its language, additional type, or None when unknown.

    >>> classify("src/main.PY")
    <Language.PYTHON: 'python'>
    >>> classify("Dockerfile")
    <Language.SHELL: 'shell'>
    """
    p = PurePath(path)
    ext = p.suffix.lower()
    if ext:
        lang = LANGUAGE_EXTENSIONS.get(ext)
        if lang is not None:
            return lang
        additional = ADDITIONAL_EXTENSIONS.get(ext)
        if additional is not None:
            return additional
    return WELL_KNOWN_FILENAMES.get(p.name)


def category_of(file_type: FileType) -> Category | None:
    if isinstance(file_type, AdditionalFileType):
        return file_type.category
    return None


def is_text_category(file_type: FileType) -> bool:
    return category_of(file_type) not in NON_TEXT_CATEGORIES
