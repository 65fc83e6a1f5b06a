"""
Progress reporting for uploads and downloads.

A progress listener is any callable ``listener(transferred, total)``.
``total`` is -1 when the size is not known up front.
"""

from typing import BinaryIO, Optional, Protocol

from .config import DEFAULT_CHUNK_SIZE
from .exceptions import ConfigurationError


class ProgressListener(Protocol):
    """Receives the number of bytes transferred so far and the expected total."""

    def __call__(self, transferred: int, total: int) -> None: ...


def copy_stream(
    source: BinaryIO,
    sink: BinaryIO,
    listener: Optional[ProgressListener] = None,
    total: int = -1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Copy ``source`` into ``sink`` block by block.

    The listener is called once with 0 before the first block and then
    after every block written.

    Returns:
        Number of bytes copied
    """
    copied = 0
    if listener is not None:
        listener(copied, total)
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        sink.write(chunk)
        copied += len(chunk)
        if listener is not None:
            listener(copied, total)
    return copied


class TqdmProgressListener:
    """
    Progress listener that drives a tqdm progress bar.

    The bar is created on the first call, when the total is known.

    Example:
        >>> listener = TqdmProgressListener(desc="download")
        >>> request.set_download_progress_listener(listener)
    """

    def __init__(self, desc: Optional[str] = None, **tqdm_kwargs):
        try:
            from tqdm import tqdm
        except ImportError as exc:
            raise ConfigurationError(
                "Progress bars require tqdm: pip install http-request-core[progress]"
            ) from exc
        self._tqdm = tqdm
        self._desc = desc
        self._kwargs = tqdm_kwargs
        self._bar = None
        self._last = 0

    def __call__(self, transferred: int, total: int) -> None:
        if self._bar is None:
            self._bar = self._tqdm(
                total=total if total >= 0 else None,
                unit='B',
                unit_scale=True,
                desc=self._desc,
                **self._kwargs
            )
        self._bar.update(transferred - self._last)
        self._last = transferred

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
