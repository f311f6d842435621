from __future__ import annotations

import json
from typing import Any, Literal
from xml.sax.saxutils import escape, quoteattr

from .model import ExcludedFile, FileRecord, ProcessResult, file_type_name
from .ordering import sort_by_value

OutputFormat = Literal["overview", "xml", "json", "codeblocks", "ctx"]
OUTPUT_FORMATS: tuple[str, ...] = ("overview", "xml", "json", "codeblocks", "ctx")
DEFAULT_FORMAT: OutputFormat = "overview"

CTX_FILE_RULE = "────────────────<< FILE >>────────────────"
CTX_START_RULE = "────────────────<< START >>────────────────"
CTX_END_RULE = "────────────────<< END >>────────────────"


def _language_names(result: ProcessResult) -> list[str]:
    return [lang.value for lang in sort_by_value(result.languages)]


def _file_type_names(result: ProcessResult) -> list[str]:
    return [ft.value for ft in sort_by_value(result.file_types)]


def _cdata(text: str) -> str:
    # "]]>" cannot appear inside CDATA; split it across two sections.
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _xml_file_open(path: str, tokens: int, lines: int, type_name: str) -> str:
    return (
        f"    <file path={quoteattr(path)} tokens=\"{tokens}\" "
        f"lines=\"{lines}\" type={quoteattr(type_name)}>"
    )


def render_xml(result: ProcessResult) -> str:
    out: list[str] = ['<?xml version="1.0" encoding="UTF-8"?>', "<code-context>"]
    out.append("  <metadata>")
    out.append(f"    <total-files>{len(result.included)}</total-files>")
    out.append(f"    <total-tokens>{result.total_tokens}</total-tokens>")
    out.append("    <languages>")
    for name in _language_names(result):
        out.append(f"      <language>{escape(name)}</language>")
    out.append("    </languages>")
    out.append("    <file-types>")
    for name in _file_type_names(result):
        out.append(f"      <file-type>{escape(name)}</file-type>")
    out.append("    </file-types>")
    out.append("  </metadata>")

    out.append("  <excluded-files>")
    for ex in result.excluded:
        out.append(
            _xml_file_open(
                ex.path, ex.token_count, ex.line_count, file_type_name(ex.file_type)
            )
        )
        out.append(f"      <reason>{escape(ex.reason.describe())}</reason>")
        out.append("    </file>")
    out.append("  </excluded-files>")

    out.append("  <included-files>")
    for f in result.included:
        out.append(
            _xml_file_open(
                f.path, f.token_count, f.line_count, file_type_name(f.file_type)
            )
        )
        out.append("      " + _cdata(f.text))
        out.append("    </file>")
    out.append("  </included-files>")
    out.append("</code-context>")
    return "\n".join(out) + "\n"


def _json_excluded(ex: ExcludedFile) -> dict[str, Any]:
    return {
        "path": ex.path,
        "tokens": ex.token_count,
        "lines": ex.line_count,
        "type": file_type_name(ex.file_type),
        "reason": ex.reason.describe(),
    }


def _json_included(f: FileRecord) -> dict[str, Any]:
    return {
        "path": f.path,
        "tokens": f.token_count,
        "lines": f.line_count,
        "type": file_type_name(f.file_type),
        "content": f.text,
    }


def render_json(result: ProcessResult) -> str:
    payload = {
        "metadata": {
            "totalFiles": len(result.included),
            "totalTokens": result.total_tokens,
            "languages": _language_names(result),
            "fileTypes": _file_type_names(result),
        },
        "excludedFiles": [_json_excluded(ex) for ex in result.excluded],
        "includedFiles": [_json_included(f) for f in result.included],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def _fence_for(text: str) -> str:
    longest = 0
    run = 0
    for ch in text:
        run = run + 1 if ch == "`" else 0
        longest = max(longest, run)
    return "`" * max(3, longest + 1)


def render_codeblocks(result: ProcessResult) -> str:
    out: list[str] = ["---"]
    out.append(f"total_files: {len(result.included)}")
    out.append(f"total_tokens: {result.total_tokens}")
    out.append("languages:")
    out.extend(f"  - {name}" for name in _language_names(result))
    out.append("file_types:")
    out.extend(f"  - {name}" for name in _file_type_names(result))
    out.append("")
    out.append("excluded_files:")
    for ex in result.excluded:
        out.append(f"  - path: {json.dumps(ex.path)}")
        out.append(f"    tokens: {ex.token_count}")
        out.append(f"    lines: {ex.line_count}")
        out.append(f"    type: {file_type_name(ex.file_type)}")
        out.append(f"    reason: {json.dumps(ex.reason.describe())}")
    out.append("---")
    out.append("")

    for f in result.included:
        text = f.text
        lang = "" if f.file_type is None else f.file_type.value
        fence = _fence_for(text)
        out.append(f"## {f.path}")
        out.append(f"{fence}{lang}")
        out.append(text[:-1] if text.endswith("\n") else text)
        out.append(fence)
        out.append("")
    return "\n".join(out) + "\n"


def render_ctx(result: ProcessResult, project: str | None = None) -> str:
    out: list[str] = ["/// code context ///", "|| METADATA"]
    if project:
        out.append(f"project::{project}")
    out.append(f"files::{len(result.included)}")
    out.append(f"tokens::{result.total_tokens}")
    languages = _language_names(result)
    if languages:
        out.append("languages::" + ",".join(languages))
    file_types = _file_type_names(result)
    if file_types:
        out.append("file_types::" + ",".join(file_types))
    out.append("||")
    out.append("")

    for f in result.included:
        out.append(CTX_FILE_RULE)
        out.append(f"path::{f.path}")
        out.append(f"tokens::{f.token_count}")
        out.append(f"lines::{f.line_count}")
        out.append(CTX_START_RULE)
        out.append(f.text)
        out.append(CTX_END_RULE)
        out.append("")
    return "\n".join(out) + "\n"


def render_overview(result: ProcessResult) -> str:
    out: list[str] = ["Code context overview", "─────────────────────"]
    out.append(f"Included files: {len(result.included)}")
    out.append(f"Excluded files: {len(result.excluded)}")
    out.append(f"Total tokens:   {result.total_tokens}")
    languages = _language_names(result)
    out.append("Languages:      " + (", ".join(languages) if languages else "(none)"))
    file_types = _file_type_names(result)
    out.append("File types:     " + (", ".join(file_types) if file_types else "(none)"))
    if result.truncated:
        out.append("Note: the token budget stopped processing early.")

    out.append("")
    out.append("Included:")
    for f in result.included:
        out.append(
            f"  {f.path} [{file_type_name(f.file_type)}] "
            f"{f.line_count} lines, {f.token_count} tokens"
        )
    out.append("")
    out.append("Excluded:")
    for ex in result.excluded:
        out.append(f"  {ex.path} ({ex.reason.describe()})")
    return "\n".join(out) + "\n"


def render(
    result: ProcessResult, fmt: str = DEFAULT_FORMAT, *, project: str | None = None
) -> str:
    """Render ``result`` in one of ``OUTPUT_FORMATS``; never mutates it."""
    if fmt == "overview":
        return render_overview(result)
    if fmt == "xml":
        return render_xml(result)
    if fmt == "json":
        return render_json(result)
    if fmt == "codeblocks":
        return render_codeblocks(result)
    if fmt == "ctx":
        return render_ctx(result, project)
    raise ValueError(f"Unknown output format: {fmt!r}")
