"""
Shared fixtures for the URL poller tests.

Certificates are minted on the fly with the cryptography library: a
throwaway certificate authority and server certificates signed by it,
valid for "localhost" and 127.0.0.1.
"""

import ipaddress
import ssl
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import NamedTuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID


class CertificateAuthority(NamedTuple):
    certificate: x509.Certificate
    key: ec.EllipticCurvePrivateKey


class ServerCertificate(NamedTuple):
    certificate: x509.Certificate
    key: ec.EllipticCurvePrivateKey
    cert_file: Path
    key_file: Path

    @property
    def der(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.DER)

    def ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
        context.load_cert_chain(str(self.cert_file), str(self.key_file))
        return context


def _key_usage(key_cert_sign: bool) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=key_cert_sign,
        crl_sign=key_cert_sign,
        encipher_only=False,
        decipher_only=False,
    )


def make_certificate_authority(common_name: str) -> CertificateAuthority:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(_key_usage(key_cert_sign=True), critical=True)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .sign(key, hashes.SHA256())
    )
    return CertificateAuthority(certificate=certificate, key=key)


def _write_key_pair(
    certificate: x509.Certificate, key: ec.EllipticCurvePrivateKey, directory: Path, name: str
) -> ServerCertificate:
    cert_file = directory / f"{name}.pem"
    key_file = directory / f"{name}.key"
    cert_file.write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    key_file.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return ServerCertificate(
        certificate=certificate, key=key, cert_file=cert_file, key_file=key_file
    )


def make_server_certificate(
    authority: CertificateAuthority, directory: Path, name: str = "server"
) -> ServerCertificate:
    key = ec.generate_private_key(ec.SECP256R1())
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")]))
        .issuer_name(authority.certificate.subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(
            x509.SubjectAlternativeName(
                [x509.DNSName("localhost"), x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]
            ),
            critical=False,
        )
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(_key_usage(key_cert_sign=False), critical=True)
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(authority.key.public_key()),
            critical=False,
        )
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .sign(authority.key, hashes.SHA256())
    )

    return _write_key_pair(certificate, key, directory, name)


def make_self_signed_certificate(
    directory: Path, name: str = "self-signed", ca: bool = False
) -> ServerCertificate:
    """
    A self-signed localhost certificate like the ones `openssl req -x509` makes:
    no authority key identifier, and basicConstraints CA:TRUE when `ca` is set.
    """
    key = ec.generate_private_key(ec.SECP256R1())
    name_attributes = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(name_attributes)
        .issuer_name(name_attributes)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(
            x509.SubjectAlternativeName(
                [x509.DNSName("localhost"), x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]
            ),
            critical=False,
        )
    )
    if ca:
        builder = builder.add_extension(
            x509.BasicConstraints(ca=True, path_length=None), critical=True
        )
    certificate = builder.sign(key, hashes.SHA256())
    return _write_key_pair(certificate, key, directory, name)


def write_pem_bundle(path: Path, *certificates: x509.Certificate) -> Path:
    path.write_bytes(
        b"".join(c.public_bytes(serialization.Encoding.PEM) for c in certificates)
    )
    return path


@pytest.fixture(scope="session")
def certificate_authority() -> CertificateAuthority:
    """
    A certificate authority trusted by the tests that ask for it.
    """
    return make_certificate_authority("url-poller test CA")


@pytest.fixture(scope="session")
def unknown_authority() -> CertificateAuthority:
    """
    A certificate authority that no trust store knows about.
    """
    return make_certificate_authority("url-poller unknown CA")


@pytest.fixture
def server_certificate(
    certificate_authority: CertificateAuthority, tmp_path: Path
) -> ServerCertificate:
    """
    A server certificate for localhost signed by the test CA.
    """
    return make_server_certificate(certificate_authority, tmp_path)


@pytest.fixture
def ca_bundle(certificate_authority: CertificateAuthority, tmp_path: Path) -> Path:
    """
    A PEM file holding the test CA certificate.
    """
    return write_pem_bundle(tmp_path / "ca-bundle.pem", certificate_authority.certificate)


@pytest.fixture
def untrusted_server_certificate(
    unknown_authority: CertificateAuthority, tmp_path: Path
) -> ServerCertificate:
    """
    A server certificate for localhost signed by a CA nobody trusts.
    """
    return make_server_certificate(unknown_authority, tmp_path, name="untrusted")


@pytest.fixture(params=[False, True], ids=["end-entity", "ca-true"])
def pinned_certificate(request: pytest.FixtureRequest, tmp_path: Path) -> ServerCertificate:
    """
    A self-signed localhost certificate that a test trusts directly, with and
    without basicConstraints CA:TRUE.
    """
    return make_self_signed_certificate(tmp_path, name="pinned", ca=request.param)
