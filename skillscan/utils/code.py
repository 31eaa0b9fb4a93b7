"""Source code helper utilities."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Collection, Generator, Iterable, Iterator, Tuple

DEFAULT_EXTENSIONS = (".cs",)
DEFAULT_EXCLUDE_DIRS = frozenset({"bin", "obj", "packages", "node_modules", ".git", ".vs"})


class PathNotFound(FileNotFoundError):
    """Raised when the scan root does not exist or is not a directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Path not found: {path}")
        self.path = path


def resolve_root(root: str | Path) -> Path:
    path = Path(root).expanduser().resolve()
    if not path.is_dir():
        raise PathNotFound(path)
    return path


def iter_code_files(
    root: str | Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Collection[str] = DEFAULT_EXCLUDE_DIRS,
) -> Iterator[Path]:
    """Yield code files beneath ``root``, pruning excluded directory names.

    Directory names match case-insensitively anywhere in the resolved path,
    so a root that itself sits inside ``bin`` or ``obj`` yields nothing. The
    root is validated eagerly so a missing path fails before the caller starts
    consuming the generator.
    """

    base = resolve_root(root)
    suffixes = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}
    excluded = {name.lower() for name in exclude_dirs}
    if any(part.lower() in excluded for part in base.parts[1:]):
        return iter(())
    return _walk(base, suffixes, excluded)


def _walk(base: Path, suffixes: set[str], excluded: set[str]) -> Generator[Path, None, None]:
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = [name for name in dirnames if name.lower() not in excluded]
        for filename in filenames:
            path = Path(dirpath, filename)
            if path.suffix.lower() in suffixes:
                yield path


def iter_source_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs, skipping ``//`` comment-only lines."""

    for number, line in enumerate(text.splitlines(), start=1):
        if line.lstrip().startswith("//"):
            continue
        yield number, line


def line_of(text: str, offset: int) -> int:
    """Return the 1-based line number containing character ``offset``."""

    return text.count("\n", 0, offset) + 1


def relative_path(path: Path, root: Path) -> str:
    """Render ``path`` relative to ``root`` with forward slashes for reporting."""

    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
