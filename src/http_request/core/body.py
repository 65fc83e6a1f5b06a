"""
Request body sources.
"""

import io
import os
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Union

from .config import DEFAULT_CHUNK_SIZE
from .exceptions import InvalidBodyFileError
from .progress import ProgressListener
from ..utils.encoding import ENCODING

BodyData = Union[bytes, bytearray, str, os.PathLike, BinaryIO]


@dataclass(frozen=True)
class RequestBody:
    """
    Explicit request body: raw bytes or a readable binary stream.

    Exactly one of ``data`` and ``stream`` is set.

    Args:
        data: Raw body
        stream: Readable binary stream
        close_when_read: Close ``stream`` once the request has been sent
        length: Known size of the stream in bytes, -1 if unknown
    """
    data: Optional[bytes] = None
    stream: Optional[BinaryIO] = None
    close_when_read: bool = False
    length: int = -1

    def __post_init__(self):
        if (self.data is None) == (self.stream is None):
            raise ValueError("exactly one of data and stream must be set")
        if self.data is not None:
            object.__setattr__(self, 'length', len(self.data))

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, str]) -> 'RequestBody':
        if isinstance(data, str):
            data = data.encode(ENCODING)
        return cls(data=bytes(data))

    @classmethod
    def from_stream(cls, stream: BinaryIO, close_when_read: bool = False, length: int = -1) -> 'RequestBody':
        if not hasattr(stream, "read"):
            raise TypeError(f"stream must be a readable binary file object, got {type(stream).__name__}")
        return cls(stream=stream, close_when_read=close_when_read, length=length)

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike]) -> 'RequestBody':
        """
        Open a regular file as a stream body closed after sending.

        Raises:
            InvalidBodyFileError: The path does not exist or is not a regular file
        """
        path = os.fspath(path)
        if not os.path.isfile(path):
            raise InvalidBodyFileError(path)
        try:
            stream = open(path, "rb")
        except OSError as exc:
            raise InvalidBodyFileError(path, f"Cannot open file ({exc.strerror})") from exc
        return cls(stream=stream, close_when_read=True, length=os.fstat(stream.fileno()).st_size)

    @property
    def is_stream(self) -> bool:
        return self.stream is not None

    def release(self) -> None:
        """Close the stream if this body owns it."""
        if self.stream is not None and self.close_when_read:
            try:
                self.stream.close()
            except OSError:
                pass


class UploadReader:
    """
    File-like wrapper that reports upload progress as the body is read.

    requests treats it as a streaming body; ``__len__`` gives the
    Content-Length when the total is known, otherwise the body is sent with
    chunked transfer encoding.
    """

    def __init__(
        self,
        source: Union[BinaryIO, bytes],
        total: int = -1,
        listener: Optional[ProgressListener] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        if isinstance(source, (bytes, bytearray)):
            total = len(source)
            source = io.BytesIO(source)
        self._source = source
        self.total = total
        self._listener = listener
        self._chunk_size = chunk_size
        self.sent = 0
        self._started = False

    def _report(self) -> None:
        if self._listener is not None:
            self._listener(self.sent, self.total)

    def read(self, size: int = -1) -> bytes:
        if not self._started:
            self._started = True
            self._report()

        if size is not None and size >= 0:
            chunk = self._source.read(size)
            if chunk:
                self.sent += len(chunk)
                self._report()
            return chunk

        parts = []
        while True:
            chunk = self._source.read(self._chunk_size)
            if not chunk:
                break
            parts.append(chunk)
            self.sent += len(chunk)
            self._report()
        return b"".join(parts)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.read(self._chunk_size)
            if not chunk:
                return
            yield chunk

    def __len__(self) -> int:
        return max(self.total, 0)
