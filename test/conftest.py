from __future__ import annotations

import io
import typing
from pathlib import Path

import pytest

from httpmessages.stream import Stream


@pytest.fixture
def upload_file(tmp_path: Path) -> Path:
    """A file with known contents, as a server would store an upload."""
    path = tmp_path / "upload.txt"
    path.write_bytes(b"uploaded contents")
    return path


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    path = tmp_path / "target"
    path.mkdir()
    return path


@pytest.fixture
def memory_stream() -> typing.Iterator[Stream]:
    stream = Stream(io.BytesIO(b"hello world"))
    yield stream
    stream.close()
