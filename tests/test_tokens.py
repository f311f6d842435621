from __future__ import annotations

from codecontextor.model import AdditionalFileType, FileRecord, Language
from codecontextor.tokens import (
    DEFAULT_MULTIPLIER,
    estimate_tokens,
    format_token_count_tree,
    format_top_files,
    multiplier_for,
)


def test_estimate_tokens_uses_language_multiplier() -> None:
    content = b"x" * 100
    assert estimate_tokens(content, Language.JAVASCRIPT) == 35
    assert estimate_tokens(content, Language.PYTHON) == 30
    assert estimate_tokens(content, Language.JAVA) == 28
    assert estimate_tokens(content, Language.ZIG) == 24
    assert estimate_tokens(content, AdditionalFileType.YAML) == 27
    assert estimate_tokens(content, AdditionalFileType.MD) == 25
    assert estimate_tokens(content, None) == 25


def test_estimate_tokens_empty_is_zero() -> None:
    assert estimate_tokens(b"", Language.PYTHON) == 0


def test_multiplier_defaults() -> None:
    assert multiplier_for(None) == DEFAULT_MULTIPLIER
    assert multiplier_for(Language.HASKELL) == DEFAULT_MULTIPLIER
    assert multiplier_for(Language.TYPESCRIPT) == 0.35


def test_estimate_tokens_is_monotonic_in_length() -> None:
    for ft in (Language.JAVASCRIPT, Language.PYTHON, Language.ZIG, None):
        previous = 0
        for n in range(0, 2000, 13):
            current = estimate_tokens(b"a" * n, ft)
            assert current >= previous
            previous = current


def _records(file_tokens: dict[str, int]) -> list[FileRecord]:
    return [
        FileRecord(
            path=path, content=b"", token_count=n, line_count=1, file_type=None
        )
        for path, n in file_tokens.items()
    ]


def test_format_top_files_orders_descending() -> None:
    file_tokens = {
        "a.py": 20,
        "b.py": 50,
        "sub/c.py": 30,
    }

    out = format_top_files(_records(file_tokens), top_n=2)

    assert out.splitlines() == [
        "Top files by tokens:",
        " 1. b.py (50 tokens)",
        " 2. sub/c.py (30 tokens)",
    ]


def test_format_top_files_non_positive_returns_empty() -> None:
    assert format_top_files(_records({"a.py": 1}), top_n=0) == ""
    assert format_top_files(_records({"a.py": 1}), top_n=-1) == ""


def test_format_token_count_tree_applies_threshold() -> None:
    file_tokens = {
        "src/a.py": 100,
        "src/b.py": 5,
        "docs/readme.rst": 20,
    }

    out = format_token_count_tree(_records(file_tokens), threshold=10)

    assert "Token Count Tree (threshold=10)" in out
    assert "└── . (125 tokens)" in out
    assert "src (105 tokens)" in out
    assert "a.py (100 tokens)" in out
    assert "b.py (5 tokens)" not in out
    assert "docs (20 tokens)" in out


def test_format_token_count_tree_lists_directories_first() -> None:
    out = format_token_count_tree(_records({"z.py": 1, "a/b.py": 1}))
    lines = out.splitlines()
    assert lines.index("    ├── a (1 tokens)") < lines.index("    └── z.py (1 tokens)")


def test_format_top_files_breaks_ties_by_path() -> None:
    out = format_top_files(_records({"b.py": 5, "a.py": 5, "c.py": 1}), top_n=3)

    assert out.splitlines()[1:] == [
        " 1. a.py (5 tokens)",
        " 2. b.py (5 tokens)",
        " 3. c.py (1 tokens)",
    ]


def test_format_token_count_tree_nests_directories() -> None:
    out = format_token_count_tree(
        _records({"src/pkg/a.py": 7, "src/pkg/b.py": 3, "src/main.py": 2})
    )

    assert out.splitlines()[2:] == [
        "└── . (12 tokens)",
        "    └── src (12 tokens)",
        "        ├── pkg (10 tokens)",
        "        │   ├── a.py (7 tokens)",
        "        │   └── b.py (3 tokens)",
        "        └── main.py (2 tokens)",
    ]


def test_format_token_count_tree_empty() -> None:
    assert format_token_count_tree([]).splitlines()[-1] == "└── . (0 tokens)"
