"""
Source texts — Read-only access to the texts being searched

Texts are owned by someone else (an editor, the filesystem). navi only
asks whether a text is still live and reads its lines; it never writes.

Providers:
- InMemorySourceProvider: named strings, can be updated and disposed
- FileSourceProvider: files on disk, a deleted file is simply not live
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import SourceUnavailableError

logger = logging.getLogger(__name__)

TextLike = Union[str, List[str]]


class SourceTextProvider(ABC):
    """
    Abstract base for source-text providers.

    Line numbers are 1-based.
    """

    @abstractmethod
    def source_ids(self) -> List[str]:
        """Ids of all sources this provider knows about, in order."""

    @abstractmethod
    def is_live(self, source_id: str) -> bool:
        """Whether the source still exists and can be read."""

    @abstractmethod
    def line_count(self, source_id: str) -> int:
        """Number of lines in the source."""

    @abstractmethod
    def read_line(self, source_id: str, line_number: int) -> str:
        """Text of a line, without its line terminator."""

    def snapshot(self, source_id: str) -> List[str]:
        """
        All lines of a source as they are right now.

        Raises:
            SourceUnavailableError: If the source disappears while reading
        """
        return [self.read_line(source_id, n) for n in range(1, self.line_count(source_id) + 1)]


def split_lines(text: TextLike) -> List[str]:
    """Split text into lines, the way an editor counts them."""
    if isinstance(text, list):
        return [str(line) for line in text]
    return text.splitlines()


class InMemorySourceProvider(SourceTextProvider):
    """Source texts held in memory, keyed by id."""

    def __init__(self, texts: Optional[Mapping[str, TextLike]] = None):
        self._texts: Dict[str, List[str]] = {}
        for source_id, text in (texts or {}).items():
            self.add(source_id, text)

    def add(self, source_id: str, text: TextLike) -> None:
        """Add or replace a source."""
        self._texts[source_id] = split_lines(text)

    def update(self, source_id: str, text: TextLike) -> None:
        """
        Replace a live source's content.

        Raises:
            SourceUnavailableError: If the source was disposed
        """
        if source_id not in self._texts:
            raise SourceUnavailableError(source_id)
        self._texts[source_id] = split_lines(text)

    def dispose(self, source_id: str) -> bool:
        """Drop a source. Returns False if it wasn't there."""
        return self._texts.pop(source_id, None) is not None

    def source_ids(self) -> List[str]:
        return list(self._texts)

    def is_live(self, source_id: str) -> bool:
        return source_id in self._texts

    def line_count(self, source_id: str) -> int:
        return len(self._lines(source_id))

    def read_line(self, source_id: str, line_number: int) -> str:
        lines = self._lines(source_id)
        if not 1 <= line_number <= len(lines):
            raise IndexError(f"{source_id} has no line {line_number}")
        return lines[line_number - 1]

    def snapshot(self, source_id: str) -> List[str]:
        return list(self._lines(source_id))

    def _lines(self, source_id: str) -> List[str]:
        try:
            return self._texts[source_id]
        except KeyError:
            raise SourceUnavailableError(source_id) from None


class FileSourceProvider(SourceTextProvider):
    """
    Files on disk as source texts.

    The source id is the path as given. Files are decoded as UTF-8 with
    undecodable bytes replaced, so binary junk never aborts a search.

    Decoded lines are cached per file and re-read when the file's size or
    modification time changes, so looping over read_line costs one read.
    """

    def __init__(self, paths: Iterable[Union[str, Path]] = (), encoding: str = "utf-8"):
        self._paths: Dict[str, Path] = {}
        self._cache: Dict[str, Tuple[Tuple[int, int], List[str]]] = {}  # id -> (stamp, lines)
        self.encoding = encoding
        for path in paths:
            self.add(path)

    def add(self, path: Union[str, Path]) -> str:
        """Track a file. Returns its source id."""
        source_id = str(path)
        self._paths[source_id] = Path(path)
        self._cache.pop(source_id, None)
        return source_id

    def source_ids(self) -> List[str]:
        return list(self._paths)

    def is_live(self, source_id: str) -> bool:
        path = self._paths.get(source_id)
        return path is not None and path.is_file()

    def line_count(self, source_id: str) -> int:
        return len(self._lines(source_id))

    def read_line(self, source_id: str, line_number: int) -> str:
        lines = self._lines(source_id)
        if not 1 <= line_number <= len(lines):
            raise IndexError(f"{source_id} has no line {line_number}")
        return lines[line_number - 1]

    def snapshot(self, source_id: str) -> List[str]:
        return list(self._lines(source_id))

    def _lines(self, source_id: str) -> List[str]:
        path = self._paths.get(source_id)
        if path is None:
            raise SourceUnavailableError(source_id, "unknown source")
        try:
            stat = path.stat()
            stamp = (stat.st_mtime_ns, stat.st_size)
            cached = self._cache.get(source_id)
            if cached is not None and cached[0] == stamp:
                return cached[1]
            text = path.read_text(encoding=self.encoding, errors="replace")
        except OSError as e:
            self._cache.pop(source_id, None)
            raise SourceUnavailableError(source_id, e.strerror or str(e)) from e

        lines = text.splitlines()
        self._cache[source_id] = (stamp, lines)
        return lines
