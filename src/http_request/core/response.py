# src/http_request/core/response.py
"""
Response of a single round trip.

Status line and headers are read eagerly by Request.send(); the body stays
on the wire until one of the draining accessors (or the caller, through
``stream``) reads it.
"""
import threading
from typing import BinaryIO, Dict, Iterator, List, Mapping, Optional

import requests
import urllib3

from .config import DEFAULT_CHUNK_SIZE
from .exceptions import StateError, classify_requests_exception
from ..utils.encoding import parse_content_length


class ResponseHeaders(Mapping[str, List[str]]):
    """
    Response headers keyed by lower-cased name.

    Every name maps to all of its values in the order they were received.

    Example:
        >>> headers = ResponseHeaders([("Set-Cookie", "a=1"), ("set-cookie", "b=2")])
        >>> headers["SET-COOKIE"]
        ['a=1', 'b=2']
        >>> headers.first("Content-Type") is None
        True
    """

    def __init__(self, items=()):
        self._index: Dict[str, List[str]] = {}
        for name, value in items:
            if name is None:
                continue
            self._index.setdefault(name.lower(), []).append(value)

    @classmethod
    def from_response(cls, response: requests.Response) -> 'ResponseHeaders':
        """
        Index headers of a requests response without merging repeated fields.

        requests folds repeated headers into one comma-joined value, so the
        underlying urllib3 header dict is preferred when available.
        """
        raw_headers = getattr(getattr(response, "raw", None), "headers", None)
        if raw_headers is not None and hasattr(raw_headers, "getlist"):
            return cls((name, value) for name in raw_headers for value in raw_headers.getlist(name))
        return cls(response.headers.items())

    def __getitem__(self, name: str) -> List[str]:
        return self._index[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def first(self, name: str) -> Optional[str]:
        """First value of ``name``, or None."""
        values = self._index.get(name.lower())
        return values[0] if values else None

    def get_all(self, name: str) -> List[str]:
        """All values of ``name`` (a copy), empty if absent."""
        return list(self._index.get(name.lower(), []))

    def __repr__(self) -> str:
        return f"ResponseHeaders({self._index!r})"


class Response:
    """
    Status, headers and the live body of one HTTP exchange.

    The response owns the session it was received on and releases it in
    close(), which is safe to call any number of times.
    """

    def __init__(
        self,
        response: requests.Response,
        session: Optional[requests.Session] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self._response = response
        self._session = session
        self.chunk_size = chunk_size
        self.status_code: int = response.status_code
        self.reason: str = response.reason or ""
        self.url: str = response.url
        self.headers = ResponseHeaders.from_response(response)
        self._closed = False
        self._close_lock = threading.Lock()

        raw = response.raw
        if raw is not None and hasattr(raw, "decode_content"):
            # gzip/deflate are decoded transparently, as on the rest of requests
            raw.decode_content = True

    @property
    def content_length(self) -> int:
        """
        Number of bytes the body stream will yield, -1 when unknown.

        Content-Length counts encoded bytes, so an encoded body (gzip,
        deflate, ...) reports -1 since the stream yields the decoded data.
        """
        encoding = (self.headers.first("Content-Encoding") or "identity").strip().lower()
        if encoding != "identity":
            return -1
        return parse_content_length(self.headers.first("Content-Length"))

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def stream(self) -> BinaryIO:
        """
        Live body stream.

        Raises:
            StateError: The response was already closed
        """
        if self._closed or self._response.raw is None:
            raise StateError("The connection was already closed.")
        return self._response.raw

    def read(self, size: int = -1) -> bytes:
        """
        Read from the body, translating transport failures.

        Args:
            size: Maximum number of bytes, -1 reads to the end

        Raises:
            StateError: The response was already closed
            TransportError: Reading from the connection failed
        """
        stream = self.stream
        try:
            return stream.read(size if size >= 0 else None)
        except (urllib3.exceptions.HTTPError, requests.exceptions.RequestException, OSError) as exc:
            raise classify_requests_exception(exc, self.url) from exc

    def close(self) -> None:
        """Release the connection and the owned session."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        try:
            self._response.close()
        finally:
            if self._session is not None:
                self._session.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Response [{self.status_code} {self.reason}] {state}>"
