from typing import IO, Any, Dict, Optional, Protocol, Union, runtime_checkable

_TYPE_METADATA = Dict[str, Any]


@runtime_checkable
class StreamInterface(Protocol):
    """
    The capabilities a message body must provide.

    :class:`~httpmessages.stream.Stream` is the bundled implementation; any
    object with these methods is accepted as a body.
    """

    def read(self, size: int = -1) -> bytes:
        ...

    def write(self, data: Union[bytes, str]) -> int:
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        ...

    def rewind(self) -> None:
        ...

    def eof(self) -> bool:
        ...

    def tell(self) -> int:
        ...

    def close(self) -> None:
        ...

    def detach(self) -> Optional[IO[bytes]]:
        ...

    def get_size(self) -> Optional[int]:
        ...

    def readable(self) -> bool:
        ...

    def writable(self) -> bool:
        ...

    def seekable(self) -> bool:
        ...

    def get_contents(self) -> bytes:
        ...

    def get_metadata(self, key: Optional[str] = None) -> Any:
        ...
