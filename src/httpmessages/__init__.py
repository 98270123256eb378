"""
Immutable HTTP message objects: requests, responses, URIs, cookies, streams and uploaded files
"""

# Set default logging handler to avoid "No handler found" warnings.
import logging
from logging import NullHandler
from typing import TextIO

from . import exceptions
from ._collections import HTTPHeaderDict
from ._version import __version__
from .cookie import Cookie
from .message import Message
from .request import Request
from .response import Response
from .serverrequest import ServerRequest
from .stream import Stream
from .uploadedfile import UploadedFile
from .util.typing import StreamInterface
from .util.url import Uri, parse_uri

__license__ = "MIT"
__version__ = __version__

__all__ = (
    "Cookie",
    "HTTPHeaderDict",
    "Message",
    "Request",
    "Response",
    "ServerRequest",
    "Stream",
    "StreamInterface",
    "UploadedFile",
    "Uri",
    "add_stderr_logger",
    "exceptions",
    "parse_uri",
)

logging.getLogger(__name__).addHandler(NullHandler())


def add_stderr_logger(level: int = logging.DEBUG) -> "logging.StreamHandler[TextIO]":
    """
    Helper for quickly adding a StreamHandler to the logger. Useful for
    debugging.

    Returns the handler after adding it.
    """
    # This method needs to be in this __init__.py to get the __name__ correct
    # even if httpmessages is vendored within another package.
    logger = logging.getLogger(__name__)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug("Added a stderr logging handler to logger: %s", __name__)
    return handler


# ... Clean up.
del NullHandler
