from __future__ import annotations

from pathlib import Path

import pytest

from codecontextor.config import Config, load_config, split_list
from codecontextor.errors import ConfigError
from codecontextor.processor import ProcessOptions


def test_config_defaults() -> None:
    """Test that Config has correct default values."""
    cfg = Config()
    assert cfg.format == "overview"
    assert cfg.output is None
    assert cfg.ignore == []
    assert cfg.extensions is None
    assert cfg.include_dot_files is None
    assert cfg.disable_config_filter is True
    assert cfg.disable_token_filter is False
    assert cfg.disable_language_filter is False
    assert cfg.max_tokens is None
    assert cfg.top_files_len == 0
    assert cfg.token_count_tree is False
    assert cfg.token_count_tree_threshold == 0


def test_load_config_missing_file(tmp_path: Path) -> None:
    """Test loading config when file doesn't exist."""
    assert load_config(tmp_path) == Config()


def test_load_config_empty_file(tmp_path: Path) -> None:
    """Test loading config from empty file."""
    (tmp_path / "codecontextor.toml").write_text("", encoding="utf-8")
    assert load_config(tmp_path) == Config()


def test_load_config_custom_values(tmp_path: Path) -> None:
    """Test loading config with custom values."""
    (tmp_path / "codecontextor.toml").write_text(
        """[codecontextor]
format = "JSON"
output = "context.json"
ignore = ["*.snap", "fixtures/"]
extensions = ["py", ".md"]
include_dot_files = [".env"]
disable_config_filter = false
disable_token_filter = true
disable_language_filter = true
max_tokens = 5000
top_files_len = 3
token_count_tree = true
token_count_tree_threshold = 50
""",
        encoding="utf-8",
    )

    cfg = load_config(tmp_path)
    assert cfg.format == "json"
    assert cfg.output == "context.json"
    assert cfg.ignore == ["*.snap", "fixtures/"]
    assert cfg.extensions == ["py", ".md"]
    assert cfg.include_dot_files == [".env"]
    assert cfg.disable_config_filter is False
    assert cfg.disable_token_filter is True
    assert cfg.disable_language_filter is True
    assert cfg.max_tokens == 5000
    assert cfg.top_files_len == 3
    assert cfg.token_count_tree is True
    assert cfg.token_count_tree_threshold == 50


def test_load_config_comma_separated_string_lists(tmp_path: Path) -> None:
    (tmp_path / "codecontextor.toml").write_text(
        '[codecontextor]\nignore = "dist, *.min.js,,"\n', encoding="utf-8"
    )
    assert load_config(tmp_path).ignore == ["dist", "*.min.js"]


def test_dot_config_file_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / ".codecontextor.toml").write_text(
        '[codecontextor]\nformat = "xml"\n', encoding="utf-8"
    )
    (tmp_path / "codecontextor.toml").write_text(
        '[codecontextor]\nformat = "ctx"\n', encoding="utf-8"
    )
    assert load_config(tmp_path).format == "xml"


def test_load_config_tool_section_in_dedicated_file(tmp_path: Path) -> None:
    (tmp_path / "codecontextor.toml").write_text(
        "[tool.codecontextor]\nmax_tokens = 10\n", encoding="utf-8"
    )
    assert load_config(tmp_path).max_tokens == 10


def test_load_config_from_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """[project]
name = "demo"

[tool.codecontextor]
format = "codeblocks"
extensions = ["py"]
""",
        encoding="utf-8",
    )
    cfg = load_config(tmp_path)
    assert cfg.format == "codeblocks"
    assert cfg.extensions == ["py"]


def test_pyproject_ignores_top_level_section(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[codecontextor]\nformat = "json"\n', encoding="utf-8"
    )
    assert load_config(tmp_path) == Config()


def test_invalid_toml_raises(tmp_path: Path) -> None:
    (tmp_path / "codecontextor.toml").write_text("[codecontextor\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="codecontextor.toml: invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("max_tokens = -1", "max_tokens: must not be negative"),
        ("max_tokens = true", "max_tokens: expected an integer"),
        ('disable_token_filter = "yes"', "disable_token_filter: expected true/false"),
        ('format = "html"', "format: unknown output format"),
        ('ignore = ["!"]', "ignore: empty pattern"),
        ("ignore = [1, 2]", "ignore: expected a list of strings"),
        ('extensions = ["."]', "extensions: empty extension"),
        ('output = ""', "output: expected a non-empty path"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str, message: str) -> None:
    (tmp_path / "codecontextor.toml").write_text(
        f"[codecontextor]\n{body}\n", encoding="utf-8"
    )
    with pytest.raises(ConfigError, match=message) as excinfo:
        load_config(tmp_path)
    assert str(excinfo.value).startswith("codecontextor.toml: ")


def test_to_process_options() -> None:
    cfg = Config(
        ignore=["*.log"],
        extensions=["py"],
        include_dot_files=[".env"],
        disable_config_filter=False,
        max_tokens=100,
    )
    assert cfg.to_process_options() == ProcessOptions(
        ignore_patterns=("*.log",),
        extensions=("py",),
        include_dot_files=(".env",),
        disable_config_filter=False,
        disable_token_filter=False,
        disable_language_filter=False,
        max_tokens=100,
    )


def test_split_list() -> None:
    assert split_list("a, b ,,c") == ["a", "b", "c"]
    assert split_list("") == []
