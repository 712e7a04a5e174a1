"""
TLS trust configuration for the URL poller.

This module builds the TrustStore used to judge server certificates: the
system trust roots, optionally extended with a PEM bundle given on the
command line.
"""

import logging
import os
import re
import ssl
import warnings
from typing import Dict, Iterable, List

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.utils import CryptographyDeprecationWarning

from url_poller.config.polling_context import PollingContext
from url_poller.exceptions import CertificateBundleError
from url_poller.fetcher.tls_probe import TrustStore

# Module logger
logger = logging.getLogger(__name__)

_PEM_CERTIFICATE = re.compile(
    rb"-----BEGIN CERTIFICATE-----\s.*?-----END CERTIFICATE-----", re.DOTALL
)
_SHA256 = hashes.SHA256()


def load_trust_store(context: PollingContext) -> TrustStore:
    """
    Create the TrustStore for the configured run.

    Args:
        context: Configuration context containing the optional certificate bundle path.

    Returns:
        TrustStore: System roots plus the certificates of the bundle, if any.
            `bundle_size` tells how many certificates the bundle contributed.

    Raises:
        CertificateBundleError: If a bundle is configured but cannot be read.
    """
    roots = load_system_roots()
    logger.debug(f"Loaded {len(roots)} system root certificates.")

    bundle: List[x509.Certificate] = []
    if context.cert_file:
        bundle = load_certificate_bundle(context.cert_file)
        if not bundle:
            logger.warning(
                f"No certificates found in {context.cert_file}, using system certificates only."
            )
        else:
            logger.info(f"Loaded {len(bundle)} certificates from {context.cert_file}.")

    return TrustStore(_unique(roots + bundle), bundle_size=len(bundle))


def load_certificate_bundle(path: str) -> List[x509.Certificate]:
    """
    Read every parseable certificate of a PEM bundle.

    Blocks that are not certificates, or that fail to parse, are skipped.

    Args:
        path: Path of the PEM file.

    Returns:
        List[x509.Certificate]: The certificates found, possibly none.

    Raises:
        CertificateBundleError: If the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            pem_data: bytes = f.read()
    except OSError as err:
        raise CertificateBundleError(path, err.strerror or str(err)) from err

    return _parse_pem_certificates(pem_data)


def load_system_roots() -> List[x509.Certificate]:
    """
    Collect the root certificates the platform's OpenSSL trusts by default.

    Both the default CA file and the default CA directory are read; the
    directory is loaded lazily by OpenSSL, so it is never listed by
    `SSLContext.get_ca_certs()`.

    Returns:
        List[x509.Certificate]: The system roots, possibly none.
    """
    default_context = ssl.create_default_context()
    roots = _parse_der_certificates(default_context.get_ca_certs(binary_form=True))

    capath = ssl.get_default_verify_paths().capath
    if capath and os.path.isdir(capath):
        for name in sorted(os.listdir(capath)):
            file_path = os.path.join(capath, name)
            if not os.path.isfile(file_path):
                continue
            try:
                with open(file_path, "rb") as f:
                    roots.extend(_parse_pem_certificates(f.read()))
            except OSError as err:
                logger.debug(f"Skipping unreadable CA file {file_path}: {err}")

    return _unique(roots)


def _parse_pem_certificates(pem_data: bytes) -> List[x509.Certificate]:
    certificates: List[x509.Certificate] = []
    with warnings.catch_warnings():
        # Some platform roots carry non-positive serial numbers
        warnings.simplefilter("ignore", CryptographyDeprecationWarning)
        for block in _PEM_CERTIFICATE.findall(pem_data):
            try:
                certificates.append(x509.load_pem_x509_certificate(block))
            except ValueError as err:
                logger.debug(f"Skipping unparseable certificate: {err}")
    return certificates


def _parse_der_certificates(der_certificates: Iterable[bytes]) -> List[x509.Certificate]:
    certificates: List[x509.Certificate] = []
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", CryptographyDeprecationWarning)
        for der in der_certificates:
            try:
                certificates.append(x509.load_der_x509_certificate(der))
            except ValueError as err:
                logger.debug(f"Skipping unparseable certificate: {err}")
    return certificates


def _unique(certificates: Iterable[x509.Certificate]) -> List[x509.Certificate]:
    seen: Dict[bytes, x509.Certificate] = {}
    for certificate in certificates:
        seen.setdefault(certificate.fingerprint(_SHA256), certificate)
    return list(seen.values())
