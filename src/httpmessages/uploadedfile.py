import io
import logging
import os
import shutil
import tempfile
from typing import Any, Optional, Union

from .exceptions import (
    FileAlreadyMovedError,
    InvalidUploadedFile,
    MoveTargetError,
    UnreadableStreamError,
    UploadedFileError,
)
from .stream import Stream
from .util.typing import StreamInterface

log = logging.getLogger(__name__)

_TYPE_SUBJECT = Union[str, "os.PathLike[str]", StreamInterface, io.IOBase]


def _is_inside_temp_dir(path: str) -> bool:
    temp_dir = os.path.abspath(tempfile.gettempdir())
    try:
        return os.path.commonpath([temp_dir, path]) == temp_dir
    except ValueError:
        # Paths on different drives.
        return False


class UploadedFile:
    """
    A file received through a form upload.

    :param subject:
        Where the contents come from: the path of an existing file, an
        object implementing :class:`~httpmessages.util.typing.StreamInterface`
        or a binary file object, which gets wrapped in a
        :class:`~httpmessages.stream.Stream`.
    :param client_filename:
        The file name sent by the client. Not to be trusted.
    :param client_media_type:
        The media type sent by the client. Not to be trusted.
    :param error:
        The upload error reported by the server, if any.
    :param size:
        The size reported by the server, if known.

    Once :meth:`move_to` succeeds the upload is spent: further calls to
    :meth:`move_to` or :meth:`get_stream` raise
    :class:`~httpmessages.exceptions.FileAlreadyMovedError`.
    """

    #: Number of bytes copied at a time when the contents are streamed.
    COPY_CHUNK_SIZE = 1048576

    def __init__(
        self,
        subject: _TYPE_SUBJECT,
        client_filename: Optional[str] = None,
        client_media_type: Optional[str] = None,
        error: Optional[Any] = None,
        size: Optional[int] = None,
    ) -> None:
        self._file: Optional[str] = None
        self._stream: Optional[StreamInterface] = None

        if isinstance(subject, (str, os.PathLike)):
            path = os.fspath(subject)
            if not isinstance(path, str) or not os.path.isfile(path):
                raise InvalidUploadedFile(f"{subject!r} is not an existing file")
            self._file = os.path.abspath(path)
        elif isinstance(subject, StreamInterface):
            self._stream = subject
        elif isinstance(subject, io.IOBase):
            self._stream = Stream(subject)  # type: ignore[arg-type]
        else:
            raise InvalidUploadedFile(
                "The subject must be a file path, a file object or a stream, "
                f"got {type(subject).__name__}"
            )

        self._client_filename = client_filename
        self._client_media_type = client_media_type
        self._error = error
        self._size = size
        self._moved_to: Optional[str] = None

    def __repr__(self) -> str:
        source = self._file if self._file is not None else self._stream
        return f"<{type(self).__name__} {source!r}>"

    @property
    def size(self) -> Optional[int]:
        return self._size

    @property
    def error(self) -> Optional[Any]:
        return self._error

    @property
    def client_filename(self) -> Optional[str]:
        return self._client_filename

    @property
    def client_media_type(self) -> Optional[str]:
        return self._client_media_type

    @property
    def moved(self) -> bool:
        return self._moved_to is not None

    @property
    def moved_to(self) -> Optional[str]:
        """The absolute path the file was moved to, or ``None``."""
        return self._moved_to

    def _check_not_moved(self) -> None:
        if self._moved_to is not None:
            raise FileAlreadyMovedError(self._moved_to)

    def get_stream(self) -> StreamInterface:
        """
        The contents of the upload as a stream. A file path is opened for
        reading on first use.
        """
        self._check_not_moved()
        if self._stream is None:
            self._stream = Stream(open(self._file, "rb"))  # type: ignore[arg-type]
        return self._stream

    def move_to(self, target_path: Union[str, "os.PathLike[str]"]) -> None:
        """
        Move the upload to ``target_path``, resolved against the working
        directory when relative.

        A file outside of the temporary directory is renamed. Anything else
        is copied to the target in chunks of :attr:`COPY_CHUNK_SIZE` bytes,
        after which the source is closed and deleted from disk when it has
        a file name.

        :raises FileAlreadyMovedError: if the upload was already moved.
        :raises MoveTargetError: if ``target_path`` exists or its directory
            is not writable.
        :raises UploadedFileError: if the source file no longer exists, or
            reading, writing or renaming fails.
        :raises UnreadableStreamError: if the source stream can't be read.
        """
        self._check_not_moved()

        target = os.path.abspath(os.fspath(target_path))
        directory = os.path.dirname(target)

        if os.path.exists(target):
            raise MoveTargetError(f"Target path {target} already exists")
        if not os.path.isdir(directory) or not os.access(directory, os.W_OK):
            raise MoveTargetError(f"Directory {directory} is not writable")

        if self._stream is None:
            self._move_file(target)
        else:
            self._move_stream(target)

        self._moved_to = target
        log.debug("Moved uploaded file to %s", target)

    def _move_file(self, target: str) -> None:
        source = self._file
        if source is None or not os.path.isfile(source):
            raise UploadedFileError(f"File {source} does not exist")

        try:
            if _is_inside_temp_dir(source):
                with Stream(open(source, "rb")) as src:  # type: ignore[arg-type]
                    self._copy(src, target)
                os.unlink(source)
            else:
                shutil.move(source, target)
        except OSError as e:
            raise UploadedFileError(f"Failed to move {source} to {target}: {e}") from e

    def _move_stream(self, target: str) -> None:
        source = self._stream
        if source is None:
            raise UploadedFileError("Upload has no stream to move")
        if not source.readable():
            raise UnreadableStreamError("Stream is not readable")

        try:
            self._copy(source, target)
            original = source.get_metadata("uri")
            source.close()
            if isinstance(original, str) and os.path.isfile(original):
                os.unlink(original)
        except OSError as e:
            raise UploadedFileError(f"Failed to copy upload to {target}: {e}") from e

    def _copy(self, source: StreamInterface, target: str) -> None:
        with Stream(open(target, "wb")) as dest:  # type: ignore[arg-type]
            if source.seekable():
                source.rewind()
            while not source.eof():
                if not dest.write(source.read(self.COPY_CHUNK_SIZE)):
                    break
