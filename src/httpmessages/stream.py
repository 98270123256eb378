import io
import logging
import os
from typing import IO, Any, List, Optional, Union

from .exceptions import (
    DetachedStreamError,
    StreamError,
    UnreadableStreamError,
    UnseekableStreamError,
    UnwritableStreamError,
)
from .util.typing import _TYPE_METADATA

log = logging.getLogger(__name__)


class Stream(io.IOBase):
    """
    Message body backed by a binary file object.

    Compatible with the Python standard library's :mod:`io` module, so it
    can be handed to anything that expects a readable or writable file.

    :param fp:
        A binary file object: the result of ``open(path, "rb")``, an
        :class:`io.BytesIO`, a socket file, etc. The stream takes ownership
        of it until :meth:`detach` hands it back.

    Whether the stream is readable or writable is derived from the ``mode``
    of ``fp`` (``"r"``/``"+"`` reads, ``"w"``/``"a"``/``"x"``/``"+"``
    writes). Objects without a ``mode`` are asked directly.
    """

    #: Size of a single read against the underlying file object.
    CHUNK_SIZE = 8192

    def __init__(self, fp: IO[bytes]) -> None:
        self._fp: Optional[IO[bytes]] = fp
        self._eof = False

    @classmethod
    def from_bytes(cls, data: Union[bytes, str] = b"") -> "Stream":
        """An in-memory, readable and writable stream holding ``data``."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(io.BytesIO(data))

    def _require_fp(self) -> IO[bytes]:
        if self._fp is None:
            raise DetachedStreamError("Stream has been detached")
        return self._fp

    def _mode(self) -> Optional[str]:
        mode = getattr(self._fp, "mode", None)
        if isinstance(mode, str):
            return mode
        return None

    def _is_open(self) -> bool:
        return self._fp is not None and not getattr(self._fp, "closed", False)

    def readable(self) -> bool:
        if not self._is_open():
            return False
        mode = self._mode()
        if mode is None:
            return bool(self._fp.readable())  # type: ignore[union-attr]
        return "r" in mode or "+" in mode

    def writable(self) -> bool:
        if not self._is_open():
            return False
        mode = self._mode()
        if mode is None:
            return bool(self._fp.writable())  # type: ignore[union-attr]
        return "+" in mode or any(flag in mode for flag in "wax")

    def seekable(self) -> bool:
        if not self._is_open():
            return False
        seekable = getattr(self._fp, "seekable", None)
        return bool(seekable()) if seekable is not None else False

    def read(self, size: Optional[int] = -1) -> bytes:
        """
        Read up to ``size`` bytes. Fewer bytes are returned only when the
        end of the stream is reached. ``None`` or a negative ``size`` reads
        everything that is left.
        """
        fp = self._require_fp()
        if not self.readable():
            raise UnreadableStreamError("Stream is not readable")

        if size is None or size < 0:
            return self.get_contents()

        chunks: List[bytes] = []
        bytes_read = 0
        while bytes_read < size:
            chunk = fp.read(min(self.CHUNK_SIZE, size - bytes_read))
            if not chunk:
                self._eof = True
                break
            chunks.append(chunk)
            bytes_read += len(chunk)

        return b"".join(chunks)

    def readinto(self, b: bytearray) -> int:
        temp = self.read(len(b))
        b[: len(temp)] = temp
        return len(temp)

    def get_contents(self) -> bytes:
        """Read from the current position to the end of the stream."""
        fp = self._require_fp()
        if not self.readable():
            raise UnreadableStreamError("Stream is not readable")

        chunks = []
        while True:
            chunk = fp.read(self.CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        self._eof = True
        return b"".join(chunks)

    def write(self, data: Union[bytes, str]) -> int:  # type: ignore[override]
        """Write ``data`` and return the number of bytes written."""
        fp = self._require_fp()
        if not self.writable():
            raise UnwritableStreamError("Stream is not writable")

        if isinstance(data, str):
            data = data.encode("utf-8")
        written = fp.write(data)
        return len(data) if written is None else written

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        fp = self._require_fp()
        if not self.seekable():
            raise UnseekableStreamError("Stream is not seekable")

        self._eof = False
        return fp.seek(offset, whence)

    def rewind(self) -> None:
        self.seek(0)

    def tell(self) -> int:
        if self._fp is None:
            raise DetachedStreamError("Could not retrieve the pointer's position")
        try:
            return self._fp.tell()
        except (OSError, ValueError) as e:
            raise StreamError("Could not retrieve the pointer's position") from e

    def eof(self) -> bool:
        """Whether the position is at the end of the stream."""
        if not self._is_open():
            return True
        if self._eof:
            return True
        if self.seekable() and self.readable():
            fp = self._fp
            position = fp.tell()  # type: ignore[union-attr]
            at_end = not fp.read(1)  # type: ignore[union-attr]
            fp.seek(position)  # type: ignore[union-attr]
            return at_end
        return False

    def get_size(self) -> Optional[int]:
        """
        The size of the stream in bytes, or ``None`` when it can't be known.

        Objects backed by a file descriptor report what ``fstat`` says.
        Others are drained from the start, then put back where they were.
        """
        if not self._is_open():
            return None
        fp = self._fp

        try:
            if self.writable():
                fp.flush()  # type: ignore[union-attr]
            return os.fstat(fp.fileno()).st_size  # type: ignore[union-attr]
        except (AttributeError, OSError, ValueError):
            pass

        if not (self.seekable() and self.readable()):
            return None

        position = fp.tell()  # type: ignore[union-attr]
        fp.seek(0)  # type: ignore[union-attr]
        size = 0
        while True:
            chunk = fp.read(self.CHUNK_SIZE)  # type: ignore[union-attr]
            if not chunk:
                break
            size += len(chunk)
        fp.seek(position)  # type: ignore[union-attr]
        log.debug("Computed stream size by draining: %d bytes", size)
        return size

    def get_metadata(self, key: Optional[str] = None) -> Any:
        """
        Metadata about the underlying file object: ``mode``, ``seekable``,
        ``uri`` (the file name, if any) and ``closed``. With ``key``, only
        that entry is returned, or ``None`` if there is no such entry.
        """
        if self._fp is None:
            return None if key else {}

        name = getattr(self._fp, "name", None)
        metadata: _TYPE_METADATA = {
            "mode": self._mode(),
            "seekable": self.seekable(),
            "uri": name if isinstance(name, str) else None,
            "closed": not self._is_open(),
        }
        if key:
            return metadata.get(key)
        return metadata

    def flush(self) -> None:
        if self._is_open() and self.writable():
            self._fp.flush()  # type: ignore[union-attr]

    def close(self) -> None:
        if self._fp is not None:
            self._fp.close()
        super().close()

    def detach(self) -> Optional[IO[bytes]]:
        """
        Separate the underlying file object from the stream and return it.
        The stream is unusable afterwards.
        """
        fp, self._fp = self._fp, None
        return fp

    def fileno(self) -> int:
        return self._require_fp().fileno()

    def __bytes__(self) -> bytes:
        if self.seekable():
            self.rewind()
        return self.get_contents()

    def __str__(self) -> str:
        return bytes(self).decode("utf-8", "replace")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} fp={self._fp!r}>"

    def __reduce__(self) -> Any:
        # For pickling purposes: an in-memory copy of the contents.
        return self.from_bytes, (bytes(self),)
