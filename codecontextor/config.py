from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .output import DEFAULT_FORMAT, OUTPUT_FORMATS
from .processor import ProcessOptions

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # pyright: ignore[reportMissingImports]

CONFIG_FILENAMES: tuple[str, ...] = (".codecontextor.toml", "codecontextor.toml")
PYPROJECT_FILENAME = "pyproject.toml"
SECTION_NAME = "codecontextor"


@dataclass
class Config:
    format: str = DEFAULT_FORMAT
    # Write rendered output here instead of stdout.
    output: str | None = None
    ignore: list[str] = field(default_factory=list)
    extensions: list[str] | None = None
    include_dot_files: list[str] | None = None
    # Config files are kept by default; the other filters are on by default.
    disable_config_filter: bool = True
    disable_token_filter: bool = False
    disable_language_filter: bool = False
    max_tokens: int | None = None
    # Token diagnostics printed to stderr.
    top_files_len: int = 0
    token_count_tree: bool = False
    token_count_tree_threshold: int = 0

    def to_process_options(self) -> ProcessOptions:
        return ProcessOptions(
            ignore_patterns=tuple(self.ignore),
            extensions=None if self.extensions is None else tuple(self.extensions),
            include_dot_files=(
                None
                if self.include_dot_files is None
                else tuple(self.include_dot_files)
            ),
            disable_config_filter=self.disable_config_filter,
            disable_token_filter=self.disable_token_filter,
            disable_language_filter=self.disable_language_filter,
            max_tokens=self.max_tokens,
        )


def _find_config_path(root: Path) -> Path | None:
    root = root.resolve()
    for name in CONFIG_FILENAMES:
        p = root / name
        if p.exists():
            return p
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.exists():
        return pyproject
    return None


def _extract_section(data: Any, *, from_pyproject: bool) -> dict[str, Any]:
    section: dict[str, Any] = {}
    if not isinstance(data, dict):
        return section

    if not from_pyproject:
        # Preferred for dedicated config files: [codecontextor]
        cc = data.get(SECTION_NAME)
        if isinstance(cc, dict):
            return cc

    # Supported in all files; required for pyproject.toml.
    tool = data.get("tool")
    if isinstance(tool, dict):
        cc2 = tool.get(SECTION_NAME)
        if isinstance(cc2, dict):
            return cc2

    return section


def _as_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key}: expected true/false, got {value!r}")
    return value


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key}: expected an integer, got {value!r}")
    if value < 0:
        raise ConfigError(f"{key}: must not be negative, got {value}")
    return value


def _as_str_list(key: str, value: Any) -> list[str]:
    if isinstance(value, str):
        value = split_list(value)
    if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
        raise ConfigError(f"{key}: expected a list of strings, got {value!r}")
    return [x.strip() for x in value]


def split_list(raw: str) -> list[str]:
    """Split a comma-separated option value, dropping empty items."""
    return [item.strip() for item in raw.split(",") if item.strip()]


def validate_patterns(key: str, patterns: list[str]) -> list[str]:
    for pattern in patterns:
        if not pattern.lstrip("!").strip("/"):
            raise ConfigError(f"{key}: empty pattern {pattern!r}")
    return patterns


def validate_extensions(key: str, extensions: list[str]) -> list[str]:
    if any(not e.strip().lstrip(".") for e in extensions):
        raise ConfigError(f"{key}: empty extension in {extensions!r}")
    return extensions


def validate_format(fmt: str) -> str:
    if fmt not in OUTPUT_FORMATS:
        raise ConfigError(
            f"format: unknown output format {fmt!r} "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
        )
    return fmt


def config_from_section(section: dict[str, Any]) -> Config:  # noqa: C901
    cfg = Config()

    if "format" in section:
        fmt = section["format"]
        if not isinstance(fmt, str):
            raise ConfigError(f"format: expected a string, got {fmt!r}")
        cfg.format = validate_format(fmt.strip().lower())

    if "output" in section:
        out = section["output"]
        if not isinstance(out, str) or not out.strip():
            raise ConfigError(f"output: expected a non-empty path, got {out!r}")
        cfg.output = out.strip()

    if "ignore" in section:
        patterns = _as_str_list("ignore", section["ignore"])
        cfg.ignore = validate_patterns("ignore", patterns)

    if "extensions" in section:
        exts = _as_str_list("extensions", section["extensions"])
        cfg.extensions = validate_extensions("extensions", exts)

    if "include_dot_files" in section:
        cfg.include_dot_files = _as_str_list(
            "include_dot_files", section["include_dot_files"]
        )

    for key in (
        "disable_config_filter",
        "disable_token_filter",
        "disable_language_filter",
        "token_count_tree",
    ):
        if key in section:
            setattr(cfg, key, _as_bool(key, section[key]))

    if "max_tokens" in section:
        cfg.max_tokens = _as_int("max_tokens", section["max_tokens"])

    for key in ("top_files_len", "token_count_tree_threshold"):
        if key in section:
            setattr(cfg, key, _as_int(key, section[key]))

    return cfg


def load_config(root: Path) -> Config:
    """Load the ``codecontextor`` table from ``root``; defaults if none exists.

    Raises ``ConfigError`` on unparsable TOML or malformed values.
    """
    cfg_path = _find_config_path(root)
    if cfg_path is None:
        return Config()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{cfg_path.name}: invalid TOML: {e}") from e
    section = _extract_section(data, from_pyproject=cfg_path.name == PYPROJECT_FILENAME)
    try:
        return config_from_section(section)
    except ConfigError as e:
        raise ConfigError(f"{cfg_path.name}: {e}") from e
