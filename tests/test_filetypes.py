from __future__ import annotations

from codecontextor.filetypes import (
    category_of,
    classify,
    extension_of,
    is_text_category,
)
from codecontextor.model import AdditionalFileType, Category, Language


def test_classify_languages_case_insensitive() -> None:
    assert classify("src/app.PY") is Language.PYTHON
    assert classify("web/index.tsx") is Language.TYPESCRIPT
    assert classify("lib/main.zig") is Language.ZIG
    assert classify("include/x.h") is Language.C


def test_classify_additional_types() -> None:
    assert classify("config.yml") is AdditionalFileType.YML
    assert classify("docs/guide.md") is AdditionalFileType.MD
    assert classify("logo.png") is AdditionalFileType.PNG
    assert classify("dist/x.tar.gz") is AdditionalFileType.GZ


def test_classify_well_known_filenames() -> None:
    assert classify("Makefile") is Language.SHELL
    assert classify("sub/Dockerfile") is Language.SHELL
    assert classify("LICENSE") is AdditionalFileType.TXT
    assert classify(".gitignore") is AdditionalFileType.CONF
    assert classify(".env") is AdditionalFileType.CONF


def test_classify_unknown() -> None:
    assert classify("notes.unknownext") is None
    assert classify("noext") is None
    assert classify("license") is None


def test_extension_of() -> None:
    assert extension_of("a/b/C.JS") == ".js"
    assert extension_of(".env") == ""
    assert extension_of("archive.tar.gz") == ".gz"


def test_categories() -> None:
    assert category_of(AdditionalFileType.TOML) is Category.CONFIG
    assert category_of(AdditionalFileType.CSV) is Category.DATA
    assert category_of(Language.PYTHON) is None
    assert category_of(None) is None


def test_text_categories() -> None:
    assert is_text_category(Language.RUST)
    assert is_text_category(AdditionalFileType.MD)
    assert is_text_category(None)
    assert not is_text_category(AdditionalFileType.SVG)
    assert not is_text_category(AdditionalFileType.WOFF2)
    assert not is_text_category(AdditionalFileType.ZIP)
    assert not is_text_category(AdditionalFileType.DLL)


def test_every_additional_type_has_a_category() -> None:
    for ft in AdditionalFileType:
        assert isinstance(ft.category, Category)
