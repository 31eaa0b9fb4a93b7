"""Utility helpers for the scanner."""

from .fileio import FileReadFailure, read_yaml_file, read_text_file
from .code import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXTENSIONS,
    PathNotFound,
    iter_code_files,
    iter_source_lines,
    line_of,
    relative_path,
)

__all__ = [
    "DEFAULT_EXCLUDE_DIRS",
    "DEFAULT_EXTENSIONS",
    "FileReadFailure",
    "PathNotFound",
    "read_yaml_file",
    "read_text_file",
    "iter_code_files",
    "iter_source_lines",
    "line_of",
    "relative_path",
]
