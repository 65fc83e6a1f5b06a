"""
Certificate pinning.

A TrustedRoot replaces the system trust store for a single request: only
the given certificate(s) are accepted as trust anchors.
"""

import os
import ssl
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Union

from .exceptions import ConfigurationError

_PEM_MARKER = "-----BEGIN CERTIFICATE-----"

CertificateSource = Union[str, bytes, os.PathLike]


@dataclass(frozen=True)
class TrustedRoot:
    """
    Pinned certificate material in PEM form.

    Examples:
        >>> root = TrustedRoot.load(Path("ca.pem"))
        >>> root = TrustedRoot.load(pem_text)
        >>> root = TrustedRoot.load(der_bytes)
    """
    pem: str

    @classmethod
    def load(cls, certificate: CertificateSource) -> 'TrustedRoot':
        """
        Load a certificate and check that it forms a usable trust context.

        Args:
            certificate: PEM text (str or bytes), DER bytes, or a path to a PEM/DER file

        Raises:
            ConfigurationError: The material cannot be read or loaded into an SSL context
        """
        if isinstance(certificate, os.PathLike) or (
            isinstance(certificate, str) and _PEM_MARKER not in certificate
        ):
            path = os.fspath(certificate)
            try:
                with open(path, "rb") as f:
                    certificate = f.read()
            except OSError as exc:
                raise ConfigurationError(f"Cannot read certificate file {path}: {exc}") from exc

        if isinstance(certificate, bytes):
            if _PEM_MARKER.encode("ascii") in certificate:
                pem = certificate.decode("ascii", errors="replace")
            else:
                try:
                    pem = ssl.DER_cert_to_PEM_cert(certificate)
                except (ValueError, TypeError) as exc:
                    raise ConfigurationError(f"Invalid DER certificate: {exc}") from exc
        elif isinstance(certificate, str):
            pem = certificate
        else:
            raise ConfigurationError(f"Unsupported certificate type: {type(certificate).__name__}")

        root = cls(pem=pem)
        root.ssl_context()
        return root

    def ssl_context(self) -> ssl.SSLContext:
        """
        Build a client SSL context trusting only this certificate.

        Raises:
            ConfigurationError: The PEM data is not a valid certificate
        """
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        try:
            context.load_verify_locations(cadata=self.pem)
        except (ssl.SSLError, ValueError) as exc:
            raise ConfigurationError(f"Invalid trusted root certificate: {exc}") from exc
        return context

    @contextmanager
    def as_ca_bundle(self) -> Iterator[str]:
        """
        Write the certificate to a temporary CA bundle for the request's lifetime.

        requests only accepts a file path as its ``verify`` CA bundle.
        """
        fd, path = tempfile.mkstemp(prefix="http-request-ca-", suffix=".pem")
        try:
            with os.fdopen(fd, "w", encoding="ascii") as f:
                f.write(self.pem)
            yield path
        finally:
            try:
                os.remove(path)
            except OSError:
                pass
