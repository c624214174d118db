import asyncio
import contextlib
import datetime
import ipaddress
import ssl

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from connkit.connection import Connection
from connkit.info import ConnectInfo
from connkit.tcp import TcpConnectorService
from connkit.tls_connect import (
    INVALID_SERVER_NAME,
    TlsConnector,
    default_client_context,
)


def _key_usage(cert_sign):
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=cert_sign,
        crl_sign=cert_sign,
        encipher_only=False,
        decipher_only=False,
    )


@pytest.fixture
def pki(tmp_path):
    now = datetime.datetime.now(datetime.timezone.utc)
    start, end = now - datetime.timedelta(days=1), now + datetime.timedelta(days=1)

    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "connkit test ca")])
    ca_ski = x509.SubjectKeyIdentifier.from_public_key(ca_key.public_key())
    ca_cert = (
        x509.CertificateBuilder()
        .subject_name(ca_name)
        .issuer_name(ca_name)
        .public_key(ca_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(start)
        .not_valid_after(end)
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(_key_usage(True), critical=True)
        .add_extension(ca_ski, critical=False)
        .sign(ca_key, hashes.SHA256())
    )

    leaf_key = ec.generate_private_key(ec.SECP256R1())
    leaf_cert = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")]))
        .issuer_name(ca_name)
        .public_key(leaf_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(start)
        .not_valid_after(end)
        .add_extension(
            x509.SubjectAlternativeName(
                [
                    x509.DNSName("localhost"),
                    x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
                ]
            ),
            critical=False,
        )
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(_key_usage(False), critical=True)
        .add_extension(
            x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(leaf_key.public_key()),
            critical=False,
        )
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(ca_ski),
            critical=False,
        )
        .sign(ca_key, hashes.SHA256())
    )

    cert_path = tmp_path / "cert.pem"
    key_path = tmp_path / "key.pem"
    cert_path.write_bytes(leaf_cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        leaf_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )

    server_ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    server_ctx.load_cert_chain(str(cert_path), str(key_path))
    client_ctx = ssl.create_default_context(
        cadata=ca_cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
    )
    return server_ctx, client_ctx


@contextlib.asynccontextmanager
async def _tls_server(server_ctx):
    async def handle(reader, writer):
        with contextlib.suppress(OSError):
            writer.write(b"test")
            await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0, ssl=server_ctx)
    try:
        yield server.sockets[0].getsockname()[:2]
    finally:
        server.close()
        await server.wait_closed()


async def _close(writer):
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()


@pytest.mark.asyncio
async def test_handshake_with_hostname(pki):
    server_ctx, client_ctx = pki
    async with _tls_server(server_ctx) as addr:
        tcp = await TcpConnectorService().call(
            ConnectInfo.with_addr(f"localhost:{addr[1]}", addr)
        )
        tls = await TlsConnector.service(client_ctx).call(tcp)
        reader, writer = tls.io
        assert writer.get_extra_info("ssl_object").server_hostname == "localhost"
        assert tls.hostname() == "localhost"
        assert await reader.readexactly(4) == b"test"
        await _close(writer)


@pytest.mark.asyncio
async def test_handshake_with_ip_address(pki):
    server_ctx, client_ctx = pki
    async with _tls_server(server_ctx) as addr:
        tcp = await TcpConnectorService().call(ConnectInfo.with_addr(addr[0], addr))
        service = await TlsConnector(client_ctx).new_service()
        tls = await service.call(tcp)
        reader, writer = tls.io
        assert await reader.readexactly(4) == b"test"
        assert tls.request == addr[0]
        await _close(writer)


@pytest.mark.asyncio
async def test_untrusted_certificate_fails(pki):
    server_ctx, _ = pki
    async with _tls_server(server_ctx) as addr:
        tcp = await TcpConnectorService().call(ConnectInfo.with_addr("localhost", addr))
        with pytest.raises(ssl.SSLCertVerificationError):
            await TlsConnector().new_service().into_inner().call(tcp)


@pytest.mark.asyncio
async def test_hostname_mismatch_fails(pki):
    server_ctx, client_ctx = pki
    async with _tls_server(server_ctx) as addr:
        tcp = await TcpConnectorService().call(
            ConnectInfo.with_addr("other.example.com", addr)
        )
        with pytest.raises(ssl.SSLCertVerificationError):
            await TlsConnector.service(client_ctx).call(tcp)


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["exa mple.com", "", "-bad.example.com", "a..b"])
async def test_invalid_server_name(name):
    service = TlsConnector.service(default_client_context())
    with pytest.raises(ValueError, match=INVALID_SERVER_NAME):
        await service.call(Connection(name, (None, None)))


def test_default_client_context_verifies():
    ctx = default_client_context()
    assert ctx.verify_mode == ssl.CERT_REQUIRED
    assert ctx.check_hostname is True