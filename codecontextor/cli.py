from __future__ import annotations

import argparse
import importlib.metadata as importlib_metadata
import sys
from dataclasses import replace
from pathlib import Path

from .aggregate import DEFAULT_TARGETS, process_targets
from .config import (
    Config,
    load_config,
    split_list,
    validate_extensions,
    validate_format,
    validate_patterns,
)
from .errors import ConfigError, TargetError
from .model import ProcessResult
from .output import OUTPUT_FORMATS, render
from .repositories import project_name
from .tokens import format_token_count_tree, format_top_files


def _codecontextor_version() -> str:
    try:
        return importlib_metadata.version("codecontextor")
    except importlib_metadata.PackageNotFoundError:
        from . import __version__ as fallback

        return str(fallback)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="codecontextor",
        description=(
            "Collect relevant source files from files and directories and emit "
            "them as LLM context."
        ),
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"codecontextor {_codecontextor_version()}",
    )
    p.add_argument(
        "targets",
        nargs="*",
        help="Files or directories to process (default: current directory)",
    )
    p.add_argument(
        "-f",
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: overview via config)",
    )
    p.add_argument(
        "-e",
        "--extensions",
        default=None,
        help="Comma-separated list of file extensions to include",
    )
    p.add_argument(
        "-i",
        "--ignore",
        default=None,
        help="Comma-separated list of patterns to ignore (added to the defaults)",
    )
    p.add_argument(
        "-m",
        "--max-tokens",
        type=int,
        default=None,
        help="Stop adding files once this many estimated tokens are collected",
    )
    p.add_argument(
        "--include-dot-files",
        default=None,
        help="Comma-separated list of dot-file names to include in directory walks",
    )
    p.add_argument(
        "--disable-language-filter",
        action="store_true",
        default=None,
        help="Keep files whose type is unknown",
    )
    config_group = p.add_mutually_exclusive_group()
    config_group.add_argument(
        "--disable-config-filter",
        dest="disable_config_filter",
        action="store_const",
        const=True,
        default=None,
        help="Keep configuration files (the default)",
    )
    config_group.add_argument(
        "--enable-config-filter",
        dest="disable_config_filter",
        action="store_const",
        const=False,
        help="Exclude configuration files (yaml, toml, json, ini, ...)",
    )
    p.add_argument(
        "--disable-token-filter",
        action="store_true",
        default=None,
        help="Disable token count anomaly filtering",
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the rendered output to this path instead of stdout",
    )
    p.add_argument(
        "--stdout",
        action="store_true",
        help="Only output the formatted content (no summary on stderr)",
    )
    p.add_argument(
        "--top-files",
        type=int,
        default=None,
        metavar="N",
        help="Print the N largest files by estimated tokens to stderr",
    )
    p.add_argument(
        "--token-count-tree",
        nargs="?",
        const=0,
        type=int,
        default=None,
        metavar="THRESHOLD",
        help="Print a token count tree to stderr (optionally hiding small nodes)",
    )
    return p


def _apply_cli_overrides(cfg: Config, args: argparse.Namespace) -> Config:
    if args.format is not None:
        cfg = replace(cfg, format=validate_format(args.format))
    if args.output is not None:
        cfg = replace(cfg, output=str(args.output))
    if args.ignore is not None:
        patterns = validate_patterns("--ignore", split_list(args.ignore))
        cfg = replace(cfg, ignore=patterns)
    if args.extensions is not None:
        extensions = validate_extensions("--extensions", split_list(args.extensions))
        cfg = replace(cfg, extensions=extensions)
    if args.include_dot_files is not None:
        cfg = replace(cfg, include_dot_files=split_list(args.include_dot_files))
    if args.max_tokens is not None:
        if args.max_tokens < 0:
            raise ConfigError(
                f"--max-tokens: must not be negative, got {args.max_tokens}"
            )
        cfg = replace(cfg, max_tokens=args.max_tokens)
    for key in (
        "disable_config_filter",
        "disable_token_filter",
        "disable_language_filter",
    ):
        value = getattr(args, key)
        if value is not None:
            cfg = replace(cfg, **{key: value})
    if args.top_files is not None:
        cfg = replace(cfg, top_files_len=args.top_files)
    if args.token_count_tree is not None:
        cfg = replace(
            cfg, token_count_tree=True, token_count_tree_threshold=args.token_count_tree
        )
    return cfg


def _print_summary(*, result: ProcessResult, cfg: Config, destination: str) -> None:
    languages = ", ".join(sorted(lang.value for lang in result.languages)) or "-"
    print("", file=sys.stderr)
    print("Context Summary:", file=sys.stderr)
    print("────────────────", file=sys.stderr)
    print(f"{'Files':>14}: {len(result.included):,} files", file=sys.stderr)
    print(f"{'Tokens':>14}: {result.total_tokens:,} tokens", file=sys.stderr)
    print(f"{'Excluded':>14}: {len(result.excluded):,} files", file=sys.stderr)
    print(f"{'Languages':>14}: {languages}", file=sys.stderr)
    print(f"{'Output':>14}: {destination}", file=sys.stderr)

    top = format_top_files(result.included, cfg.top_files_len)
    if top:
        print("", file=sys.stderr)
        print(top, file=sys.stderr)
    if cfg.token_count_tree:
        print("", file=sys.stderr)
        print(
            format_token_count_tree(result.included, cfg.token_count_tree_threshold),
            file=sys.stderr,
        )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = _apply_cli_overrides(load_config(Path.cwd()), args)
    except ConfigError as e:
        parser.error(str(e))

    targets = list(args.targets) or list(DEFAULT_TARGETS)
    try:
        result = process_targets(targets, cfg.to_process_options())
    except TargetError as e:
        raise SystemExit(f"codecontextor: {e}") from e

    project = project_name(targets) if cfg.format == "ctx" else None
    text = render(result, cfg.format, project=project)

    if cfg.output and not args.stdout:
        out_path = Path(cfg.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        destination = out_path.as_posix()
    else:
        sys.stdout.write(text)
        destination = "stdout"

    if not args.stdout:
        _print_summary(result=result, cfg=cfg, destination=destination)


if __name__ == "__main__":
    main()
