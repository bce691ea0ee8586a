"""
Output destinations for rendered rule files.

A sink is anything with a ``write(data: bytes)`` method. Failures are
reported as ``OSError`` (or ``ValueError`` for a closed stream) and surfaced
by the repository as SinkWriteError.
"""

from __future__ import annotations

import io
import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import IO, Any, Protocol, runtime_checkable


@runtime_checkable
class RuleSink(Protocol):
    """Byte destination for a rendered rule file."""

    def write(self, data: bytes) -> Any: ...


class StreamSink:
    """Writes to an already open binary or text stream."""

    def __init__(self, stream: IO[Any], *, encoding: str = "utf-8") -> None:
        self._stream = stream
        self._encoding = encoding

    @classmethod
    def stdout(cls) -> "StreamSink":
        return cls(getattr(sys.stdout, "buffer", sys.stdout))

    def write(self, data: bytes) -> None:
        if isinstance(self._stream, io.TextIOBase):
            self._stream.write(data.decode(self._encoding))
        else:
            self._stream.write(data)
        self._stream.flush()

    def __repr__(self) -> str:
        return f"StreamSink({getattr(self._stream, 'name', self._stream)!r})"


class FileSink:
    """Replaces a file with the rendered document.

    The data goes to a temporary file next to the target which is then
    renamed over it, so readers never see a half written rule file. The
    result keeps the mode of the file it replaces, or gets the default mode
    for new files (0666 minus the umask).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def write(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_name, self._target_mode())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _target_mode(self) -> int:
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def __repr__(self) -> str:
        return f"FileSink({str(self.path)!r})"
