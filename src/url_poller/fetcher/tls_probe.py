"""
Certificate probing for HTTPS fetches.

The poller has to reach endpoints that run self-signed or otherwise untrusted
certificates, so the TLS layer itself never rejects a server certificate.
Instead, once a handshake completes, the leaf certificate the server presented
is verified against a TrustStore and the failure, if any, is recorded on the
SSL context used for that attempt.

Only the leaf is verified, never intermediates sent by the server, so the
verdict does not depend on which interpreter exposes the presented chain.
A leaf that is itself one of the trusted roots, such as a self-signed
certificate given with --cert, is trusted as long as it names the host.
"""

import ipaddress
import logging
import ssl
from typing import List, Optional, Sequence, Set, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.x509.verification import PolicyBuilder, Store, VerificationError

# Module logger
logger = logging.getLogger(__name__)

_SHA256 = hashes.SHA256()


def _subject_for(server_hostname: str) -> Union[x509.DNSName, x509.IPAddress]:
    try:
        return x509.IPAddress(ipaddress.ip_address(server_hostname))
    except ValueError:
        return x509.DNSName(server_hostname)


def _matches_host(certificate: x509.Certificate, server_hostname: str) -> bool:
    """Whether the subject alternative names of a certificate cover the host."""
    try:
        san = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return False

    subject = _subject_for(server_hostname)
    if isinstance(subject, x509.IPAddress):
        return subject.value in san.get_values_for_type(x509.IPAddress)

    host = server_hostname.rstrip(".").lower()
    for name in san.get_values_for_type(x509.DNSName):
        pattern = name.rstrip(".").lower()
        if pattern == host:
            return True
        # A wildcard only stands for the leftmost label
        if pattern.startswith("*.") and "." in host and host.split(".", 1)[1] == pattern[2:]:
            return True
    return False


def _reason(err: Exception) -> str:
    # Drop the "(encountered processing <Certificate(...)>)" tail
    return str(err).split(" (encountered processing", 1)[0]


class TrustStore:
    """
    The set of root certificates a server certificate is verified against.
    """

    def __init__(self, roots: Sequence[x509.Certificate], bundle_size: int = 0) -> None:
        """
        Args:
            roots: Trusted root certificates.
            bundle_size: How many of the roots came from the user supplied bundle.
        """
        self._roots: List[x509.Certificate] = list(roots)
        self._fingerprints: Set[bytes] = {root.fingerprint(_SHA256) for root in self._roots}
        self._store: Optional[Store] = Store(self._roots) if self._roots else None
        self.bundle_size: int = bundle_size

    def __len__(self) -> int:
        return len(self._roots)

    def verify(self, certificate: bytes, server_hostname: Optional[str]) -> Optional[str]:
        """
        Verifies the leaf certificate presented by a server.

        Args:
            certificate: The DER encoded leaf certificate.
            server_hostname: The name the client connected to.

        Returns:
            Optional[str]: None if the certificate is trusted for the host name,
                otherwise a description of why it is not.
        """
        if not certificate:
            return "no certificate presented by the server"
        if self._store is None:
            return "no trusted root certificates available"
        if not server_hostname:
            return "server name unknown, cannot verify the certificate"

        try:
            leaf = x509.load_der_x509_certificate(certificate)
            if leaf.fingerprint(_SHA256) in self._fingerprints:
                if _matches_host(leaf, server_hostname):
                    return None
                return f"certificate is not valid for {server_hostname}"

            verifier = (
                PolicyBuilder()
                .store(self._store)
                .build_server_verifier(_subject_for(server_hostname))
            )
            verifier.verify(leaf, [])
        except (VerificationError, ValueError) as err:
            logger.debug(f"Certificate for {server_hostname} failed verification: {err}")
            return _reason(err)

        return None

    def new_context(self) -> "ProbingSSLContext":
        """Creates a fresh SSL context for a single fetch attempt."""
        return ProbingSSLContext(self)


class _ProbingSSLObject(ssl.SSLObject):
    """SSLObject that hands itself to its context after the handshake."""

    def do_handshake(self) -> None:
        # Raises SSLWantReadError until the handshake is complete
        super().do_handshake()
        context = self.context
        if isinstance(context, ProbingSSLContext):
            context.inspect_peer(self)


class ProbingSSLContext(ssl.SSLContext):
    """
    A client SSLContext that accepts every server certificate and records
    whether the certificate would have been trusted.

    Every connection established with this context is inspected once, right
    after its handshake. The latest verification failure is kept in
    `untrusted_certificate`; a later successful verification does not clear it.
    """

    sslobject_class = _ProbingSSLObject

    def __new__(cls, trust_store: TrustStore) -> "ProbingSSLContext":
        return super().__new__(cls, ssl.PROTOCOL_TLS_CLIENT)

    def __init__(self, trust_store: TrustStore) -> None:
        # check_hostname has to be disabled before verify_mode can be lowered
        self.check_hostname = False
        self.verify_mode = ssl.CERT_NONE
        self._trust_store: TrustStore = trust_store
        self.untrusted_certificate: Optional[str] = None

    def inspect_peer(self, ssl_object: ssl.SSLObject) -> None:
        """
        Verifies the leaf certificate presented on an established connection.

        Args:
            ssl_object: The SSL object of the connection whose handshake just completed.
        """
        problem = self._trust_store.verify(
            ssl_object.getpeercert(binary_form=True) or b"", ssl_object.server_hostname
        )
        if problem is not None:
            self.untrusted_certificate = problem
