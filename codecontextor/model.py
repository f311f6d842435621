from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    HTML = "html"
    PYTHON = "python"
    JAVA = "java"
    CSHARP = "csharp"
    CPP = "cpp"
    C = "c"
    PHP = "php"
    RUBY = "ruby"
    GO = "go"
    RUST = "rust"
    SWIFT = "swift"
    KOTLIN = "kotlin"
    SCALA = "scala"
    ZIG = "zig"
    SHELL = "shell"
    CSS = "css"
    SCSS = "scss"
    SQL = "sql"
    R = "r"
    LUA = "lua"
    PERL = "perl"
    HASKELL = "haskell"
    ELIXIR = "elixir"
    DART = "dart"
    XML = "xml"


class Category(str, Enum):
    CONFIG = "config"
    DOCUMENTATION = "documentation"
    DATA = "data"
    IMAGE = "image"
    AUDIO = "audio"
    FONT = "font"
    ARCHIVE = "archive"
    BINARY = "binary"


# Categories whose files are never read as text during a directory walk.
NON_TEXT_CATEGORIES = frozenset(
    {Category.IMAGE, Category.AUDIO, Category.FONT, Category.ARCHIVE, Category.BINARY}
)


class AdditionalFileType(str, Enum):
    """Non-language file kinds; the value doubles as the file extension."""

    YAML = "yaml"
    YML = "yml"
    TOML = "toml"
    INI = "ini"
    CONF = "conf"
    JSON = "json"
    ZON = "zon"
    CFG = "cfg"
    MD = "md"
    RST = "rst"
    TXT = "txt"
    CSV = "csv"
    TSV = "tsv"
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"
    XLS = "xls"
    XLSX = "xlsx"
    PPT = "ppt"
    PPTX = "pptx"
    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"
    GIF = "gif"
    SVG = "svg"
    ICO = "ico"
    WEBP = "webp"
    MP3 = "mp3"
    WAV = "wav"
    OGG = "ogg"
    TTF = "ttf"
    OTF = "otf"
    WOFF = "woff"
    WOFF2 = "woff2"
    ZIP = "zip"
    TAR = "tar"
    GZ = "gz"
    BZ2 = "bz2"
    EXE = "exe"
    DLL = "dll"
    SO = "so"
    DYLIB = "dylib"

    @property
    def category(self) -> Category:
        return _ADDITIONAL_CATEGORIES[self]


_ADDITIONAL_CATEGORIES: dict[AdditionalFileType, Category] = {}
for _names, _category in (
    ("yaml yml toml ini conf json zon cfg", Category.CONFIG),
    ("md rst txt pdf doc docx xls xlsx ppt pptx", Category.DOCUMENTATION),
    ("csv tsv", Category.DATA),
    ("png jpg jpeg gif svg ico webp", Category.IMAGE),
    ("mp3 wav ogg", Category.AUDIO),
    ("ttf otf woff woff2", Category.FONT),
    ("zip tar gz bz2", Category.ARCHIVE),
    ("exe dll so dylib", Category.BINARY),
):
    for _name in _names.split():
        _ADDITIONAL_CATEGORIES[AdditionalFileType(_name)] = _category
del _names, _category, _name


# None stands for an unknown file type.
FileType = Union[Language, AdditionalFileType, None]


def file_type_name(file_type: FileType) -> str:
    return "unknown" if file_type is None else file_type.value


@dataclass(frozen=True)
class FileRecord:
    """A file that passed every filter, with its content read."""

    path: str  # posix path relative to the target
    content: bytes
    token_count: int
    line_count: int  # newline count + 1
    file_type: FileType

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Ignored:
    pattern: str

    def describe(self) -> str:
        return f"ignored by pattern: {self.pattern}"


@dataclass(frozen=True)
class Configuration:
    def describe(self) -> str:
        return "configuration file"


@dataclass(frozen=True)
class TokenAnomaly:
    count: int
    threshold: int
    mean: float
    stddev: float

    def describe(self) -> str:
        return (
            f"token count {self.count} exceeds threshold {self.threshold} "
            f"(avg: {self.mean:.2f}, std_dev: {self.stddev:.2f})"
        )


@dataclass(frozen=True)
class Binary:
    def describe(self) -> str:
        return "binary file"


@dataclass(frozen=True)
class UnknownType:
    def describe(self) -> str:
        return "unknown file type"


ExclusionReason = Union[Ignored, Configuration, TokenAnomaly, Binary, UnknownType]


@dataclass(frozen=True)
class ExcludedFile:
    path: str
    file_type: FileType
    reason: ExclusionReason
    # Only non-zero when the file had been read before it was excluded.
    token_count: int = 0
    line_count: int = 0


@dataclass
class ProcessResult:
    included: list[FileRecord] = field(default_factory=list)
    excluded: list[ExcludedFile] = field(default_factory=list)
    languages: set[Language] = field(default_factory=set)
    file_types: set[AdditionalFileType] = field(default_factory=set)
    # True when the max-token budget stopped processing early.
    truncated: bool = False

    @property
    def total_tokens(self) -> int:
        return sum(f.token_count for f in self.included)

    def paths(self) -> set[str]:
        return {f.path for f in self.included} | {f.path for f in self.excluded}
