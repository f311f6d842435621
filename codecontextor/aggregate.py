from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

from .anomaly import filter_token_anomalies
from .model import ProcessResult
from .ordering import sort_by_path
from .processor import ProcessOptions, detected_types, display_path, process_target

DEFAULT_TARGETS: tuple[str, ...] = (".",)


def _target_prefix(target: str | Path, multiple: bool) -> str | None:
    if not multiple:
        return None
    shown = display_path(target)
    return None if shown == "." else shown


def _absorb(merged: ProcessResult, result: ProcessResult) -> int:
    """Move ``result``'s records into ``merged``; return the newly included tokens.

    The first inclusion of a path wins. An inclusion from any target replaces
    an exclusion of the same path reported by another target.
    """
    included = {f.path for f in merged.included}
    added = 0
    for record in result.included:
        if record.path in included:
            continue
        included.add(record.path)
        merged.included.append(record)
        added += record.token_count

    merged.excluded = [ex for ex in merged.excluded if ex.path not in included]
    excluded = {ex.path for ex in merged.excluded}
    for ex in result.excluded:
        if ex.path not in included and ex.path not in excluded:
            excluded.add(ex.path)
            merged.excluded.append(ex)

    merged.truncated = merged.truncated or result.truncated
    # Drop the per-target references so each record has one owner.
    result.included = []
    result.excluded = []
    return added


def merge_results(results: Sequence[ProcessResult]) -> ProcessResult:
    """Move every target's records into one result without duplicate paths."""
    merged = ProcessResult()
    for result in results:
        _absorb(merged, result)
    merged.languages, merged.file_types = detected_types(merged.included)
    return merged


def finalize(result: ProcessResult, options: ProcessOptions) -> ProcessResult:
    """Apply the anomaly filter once over the merged set and sort by path."""
    if not options.disable_token_filter:
        kept, anomalies = filter_token_anomalies(result.included)
        result.included = kept
        result.excluded.extend(anomalies)
    result.included = sort_by_path(result.included)
    result.excluded = sort_by_path(result.excluded)
    result.languages, result.file_types = detected_types(result.included)
    return result


def process_targets(
    targets: Sequence[str | Path] | None = None,
    options: ProcessOptions | None = None,
) -> ProcessResult:
    """Process each target in order and merge them into one result.

    ``options.max_tokens`` is a budget shared by all targets: each target gets
    what the files already included left over. A target that runs out stops
    on its own; later targets still get the remainder. Files already included
    by an earlier target are skipped and cost nothing.
    """
    options = options or ProcessOptions()
    targets = list(targets or DEFAULT_TARGETS)
    multiple = len(targets) > 1

    merged = ProcessResult()
    used = 0
    for target in targets:
        budget = None
        if options.max_tokens is not None:
            budget = max(0, options.max_tokens - used)
        result = process_target(
            target,
            options,
            token_budget=budget,
            prefix=_target_prefix(target, multiple),
            skip_paths=frozenset(f.path for f in merged.included),
        )
        truncated = result.truncated
        used += _absorb(merged, result)
        if truncated:
            print(
                f"Warning: token budget of {options.max_tokens} reached while "
                f"processing {display_path(target)}; remaining files were skipped",
                file=sys.stderr,
            )

    return finalize(merged, options)
