"""Collect relevant source files from disk and emit them as LLM context."""

from .aggregate import process_targets
from .model import ExcludedFile, FileRecord, ProcessResult
from .processor import ProcessOptions, process_target

__version__ = "0.1.0"
__all__ = [
    "ExcludedFile",
    "FileRecord",
    "ProcessOptions",
    "ProcessResult",
    "process_target",
    "process_targets",
]
