"""
Line-level access to flat-text dump files.

``LineSource`` opens a file in binary mode and decodes one physical line at a
time, so that every ``Line`` carries the exact byte offset of its first byte
in the (decompressed) stream plus its 1-based line number. Records built
from those lines inherit this provenance.

Only ASCII-compatible encodings are accepted (UTF-8, Latin-1, CP1252, ...):
lines are split on the ``\\n`` byte before decoding, which is not valid for
UTF-16/UTF-32.

Files ending in ``.gz`` are decompressed transparently; NCBI distributes
most of its tables that way.
"""

from __future__ import annotations

import codecs
import gzip
import logging
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from datasource_ingest.exceptions import SourceReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Line:
    """One physical line of a source file, without its terminator."""
    text: str
    byte_offset: int
    line_number: int


def _check_encoding(encoding: str) -> str:
    """Resolve *encoding* to its canonical codec name.

    Raises:
        SourceReadError: If the codec is unknown or not ASCII-compatible.
    """
    try:
        info = codecs.lookup(encoding)
    except LookupError as e:
        raise SourceReadError(f"Unsupported character encoding: '{encoding}'") from e
    try:
        ascii_compatible = b"\n".decode(info.name) == "\n"
    except UnicodeDecodeError:
        ascii_compatible = False
    if not ascii_compatible:
        raise SourceReadError(
            f"Unsupported character encoding: '{encoding}'. "
            "Only ASCII-compatible encodings can be read line by line."
        )
    return info.name


class LineSource:
    """Sequential reader yielding ``Line`` objects with byte offsets.

    Not safe for concurrent callers on the same instance.

    Args:
        path: File to read. ``.gz`` files are decompressed on the fly.
        encoding: Character encoding of the file.

    Raises:
        SourceReadError: If the file cannot be opened or the encoding is
            unsupported.
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = _check_encoding(encoding)
        self._handle: BinaryIO | None = self._open(self.path)
        self._byte_offset = 0
        self._line_number = 0
        logger.debug("Opened %s (encoding=%s)", self.path, self.encoding)

    @staticmethod
    def _open(path: Path) -> BinaryIO:
        if not path.is_file():
            raise SourceReadError(f"Source file not found: {path}")
        try:
            if path.suffix.lower() == ".gz":
                return gzip.open(path, "rb")  # type: ignore[return-value]
            return open(path, "rb")
        except OSError as e:
            raise SourceReadError(f"Cannot open source file {path}: {e}") from e

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def byte_offset(self) -> int:
        """Offset of the next unread byte."""
        return self._byte_offset

    @property
    def line_number(self) -> int:
        """Number of lines consumed so far."""
        return self._line_number

    def next_line(self) -> Line | None:
        """Return the next line, or ``None`` at end of stream.

        Raises:
            SourceReadError: If the stream cannot be read or decoded, or if
                the source has been closed.
        """
        if self._handle is None:
            raise SourceReadError(f"Source already closed: {self.path}")
        try:
            raw = self._handle.readline()
        except (OSError, EOFError, zlib.error) as e:
            raise SourceReadError(f"Failed reading {self.path}: {e}") from e
        if not raw:
            return None

        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise SourceReadError(
                f"Cannot decode line {self._line_number + 1} of {self.path} "
                f"as {self.encoding}: {e}"
            ) from e

        self._line_number += 1
        line = Line(
            text=text.rstrip("\r\n"),
            byte_offset=self._byte_offset,
            line_number=self._line_number,
        )
        self._byte_offset += len(raw)
        return line

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logger.debug("Closed %s after %d lines", self.path, self._line_number)

    def __iter__(self) -> Iterator[Line]:
        while (line := self.next_line()) is not None:
            yield line

    def __enter__(self) -> LineSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
