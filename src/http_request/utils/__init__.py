"""Utility modules for http-request."""

from .encoding import (
    url_encode,
    url_decode,
    encode_params,
    append_query,
    parse_content_length,
)
from .sanitizer import (
    mask_sensitive_data,
    mask_url,
    mask_headers,
    is_sensitive_key,
)

__all__ = [
    'url_encode',
    'url_decode',
    'encode_params',
    'append_query',
    'parse_content_length',
    'mask_sensitive_data',
    'mask_url',
    'mask_headers',
    'is_sensitive_key',
]
