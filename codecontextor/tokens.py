"""Heuristic token estimates.

Counts are ``round(bytes * multiplier)`` with a fixed multiplier per language
family. This approximates what an LLM tokenizer would produce; it is not a
tokenizer and never loads one.
"""

from __future__ import annotations

from collections.abc import Iterable

from .model import AdditionalFileType, FileRecord, FileType, Language

DEFAULT_MULTIPLIER = 0.25

TOKEN_MULTIPLIERS: dict[Language | AdditionalFileType, float] = {
    Language.JAVASCRIPT: 0.35,
    Language.TYPESCRIPT: 0.35,
    Language.PYTHON: 0.30,
    Language.JAVA: 0.28,
    Language.CSHARP: 0.28,
    Language.CPP: 0.25,
    Language.C: 0.25,
    Language.RUST: 0.25,
    Language.GO: 0.25,
    Language.ZIG: 0.24,
    AdditionalFileType.YAML: 0.27,
    AdditionalFileType.YML: 0.27,
}


def multiplier_for(file_type: FileType) -> float:
    if file_type is None:
        return DEFAULT_MULTIPLIER
    return TOKEN_MULTIPLIERS.get(file_type, DEFAULT_MULTIPLIER)


def estimate_tokens(content: bytes, file_type: FileType) -> int:
    return round(len(content) * multiplier_for(file_type))


Subtree = tuple[str, ...]


def _subtree_totals(records: Iterable[FileRecord]) -> dict[Subtree, int]:
    # Every file adds its tokens to itself and to each enclosing directory;
    # the empty tuple is the root.
    totals: dict[Subtree, int] = {(): 0}
    for record in records:
        parts = tuple(p for p in record.path.split("/") if p)
        for depth in range(len(parts) + 1):
            totals[parts[:depth]] = totals.get(parts[:depth], 0) + record.token_count
    return totals


def format_token_count_tree(records: Iterable[FileRecord], threshold: int = 0) -> str:
    """Render per-directory token totals, hiding subtrees below ``threshold``."""
    totals = _subtree_totals(records)
    children: dict[Subtree, list[Subtree]] = {}
    for node in totals:
        if node:
            children.setdefault(node[:-1], []).append(node)

    lines = [
        f"Token Count Tree (threshold={threshold}):",
        "────────────────────",
        f"└── . ({totals[()]} tokens)",
    ]

    def emit(node: Subtree, indent: str) -> None:
        shown = sorted(
            (c for c in children.get(node, []) if totals[c] >= threshold),
            # Directories before files.
            key=lambda c: (c not in children, c[-1]),
        )
        for i, child in enumerate(shown):
            last = i == len(shown) - 1
            branch = "└── " if last else "├── "
            lines.append(f"{indent}{branch}{child[-1]} ({totals[child]} tokens)")
            emit(child, indent + ("    " if last else "│   "))

    emit((), "    ")
    return "\n".join(lines)


def format_top_files(records: Iterable[FileRecord], top_n: int) -> str:
    if top_n <= 0:
        return ""
    ranked = sorted(records, key=lambda r: (-r.token_count, r.path))[:top_n]
    lines = ["Top files by tokens:"]
    lines.extend(
        f"{rank:>2}. {r.path} ({r.token_count} tokens)"
        for rank, r in enumerate(ranked, 1)
    )
    return "\n".join(lines)
