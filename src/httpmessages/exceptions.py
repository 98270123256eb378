from typing import Callable, Tuple

# Base Exceptions


class HTTPMessageError(Exception):
    """Base exception used by this module."""

    pass


_TYPE_REDUCE_RESULT = Tuple[Callable[..., object], Tuple[object, ...]]


class InvalidArgumentError(ValueError, HTTPMessageError):
    """Raised when a value fails the validation rule of the field it targets."""

    pass


class RuntimeFailureError(RuntimeError, HTTPMessageError):
    """Raised when an operation is attempted in an invalid state or against
    an unusable resource."""

    pass


# Leaf Exceptions


class InvalidHeader(InvalidArgumentError):
    """The header provided was somehow invalid."""

    pass


class InvalidMethod(InvalidArgumentError):
    """Raised when a request method is not one of the recognized methods."""

    def __init__(self, method: object) -> None:
        super().__init__(f"Unrecognized {method!r} method")
        self.method = method

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.method,)


class InvalidStatusCode(InvalidArgumentError):
    """Raised when a status code is not an integer in the 100-599 range."""

    def __init__(self, status_code: object) -> None:
        super().__init__(f"Invalid status code {status_code!r}")
        self.status_code = status_code

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.status_code,)


class InvalidBody(InvalidArgumentError):
    """Raised when a parsed body is neither a mapping, an object nor None."""

    pass


class InvalidCookie(InvalidArgumentError):
    """Raised when a cookie field fails validation."""

    pass


class InvalidUploadedFile(InvalidArgumentError):
    """Raised when an uploaded file is given an unusable data source."""

    pass


class LocationValueError(InvalidArgumentError):
    """Raised when there is something wrong with a given URI component."""

    pass


class LocationParseError(LocationValueError):
    """Raised when a URI string cannot be decomposed into its components."""

    def __init__(self, location: str) -> None:
        message = f"Failed to parse: {location}"
        super().__init__(message)

        self.location = location

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.location,)


class URLSchemeUnknown(LocationValueError):
    """Raised when a URI has a scheme without a registered standard port."""

    def __init__(self, scheme: str):
        message = f"Not supported URL scheme {scheme}"
        super().__init__(message)

        self.scheme = scheme

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.scheme,)


class StreamError(RuntimeFailureError):
    """Base exception for errors raised by a stream."""

    pass


class DetachedStreamError(StreamError):
    """Raised when a stream is used after its resource was detached."""

    pass


class UnreadableStreamError(StreamError):
    """Raised when reading from a stream that was not opened for reading."""

    pass


class UnwritableStreamError(StreamError):
    """Raised when writing to a stream that was not opened for writing."""

    pass


class UnseekableStreamError(StreamError):
    """Raised when seeking a stream that does not support random access."""

    pass


class UploadedFileError(RuntimeFailureError):
    """Base exception for errors raised while handling an uploaded file."""

    pass


class FileAlreadyMovedError(UploadedFileError):
    """Raised when an uploaded file is used after it has been moved."""

    def __init__(self, moved_to: str) -> None:
        super().__init__(f"File has previously been moved to {moved_to}")
        self.moved_to = moved_to

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.moved_to,)


class MoveTargetError(UploadedFileError):
    """Raised when an uploaded file cannot be moved to the requested path."""

    pass
