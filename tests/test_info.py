import ipaddress

import pytest

from connkit.host import UriHost
from connkit.info import ConnectInfo


def test_addr_iter_multi():
    localhost = ("127.0.0.1", 8080)
    unspecified = ("0.0.0.0", 8080)
    info = ConnectInfo("hello").set_addrs([localhost, unspecified])

    it = info.addrs()
    assert next(it) == localhost
    assert next(it) == unspecified
    assert next(it, None) is None

    owned = info.take_addrs()
    assert next(owned) == localhost
    assert next(owned) == unspecified
    assert next(owned, None) is None
    assert not info.is_resolved()


def test_addr_iter_single():
    localhost = ("127.0.0.1", 8080)
    info = ConnectInfo("hello").set_addrs([localhost])
    it = info.addrs()
    assert next(it) == localhost
    assert next(it, None) is None

    assert list(ConnectInfo("hello").addrs()) == []


def test_local_addr():
    conn = ConnectInfo("hello").set_local_addr([127, 0, 0, 1])
    assert conn.local_addr == ipaddress.IPv4Address("127.0.0.1")


def test_local_addr_from_text():
    conn = ConnectInfo("hello").set_local_addr("::1")
    assert conn.local_addr == ipaddress.IPv6Address("::1")


def test_request_ref():
    conn = ConnectInfo("hello")
    assert conn.request == "hello"


def test_set_connect_addr_into_option():
    addr = ("127.0.0.1", 4242)

    conn = ConnectInfo("hello").set_addr(None)
    assert next(conn.addrs(), None) is None

    conn = ConnectInfo("hello").set_addr(addr)
    assert next(conn.addrs()) == addr


def test_addrs_doc_example():
    addr = ("127.0.0.1", 4242)
    assert next(ConnectInfo("localhost").addrs(), None) is None
    assert next(ConnectInfo.with_addr("localhost", addr).addrs()) == addr


def test_take_addrs_doc_example():
    addr = ("127.0.0.1", 4242)
    conn = ConnectInfo("localhost")
    assert next(conn.take_addrs(), None) is None

    conn = ConnectInfo.with_addr("localhost", addr)
    assert next(conn.take_addrs()) == addr
    assert list(conn.addrs()) == []


def test_addresses_are_normalised():
    conn = ConnectInfo("hello").set_addr((ipaddress.ip_address("127.0.0.1"), 80))
    assert list(conn.addrs()) == [("127.0.0.1", 80)]


def test_invalid_address_rejected():
    with pytest.raises(ValueError):
        ConnectInfo("hello").set_addr(("not-an-ip", 80))
    with pytest.raises(ValueError):
        ConnectInfo("hello").set_addr(("127.0.0.1", 70000))


def test_set_addrs_empty_is_unresolved():
    conn = ConnectInfo("hello").set_addr(("127.0.0.1", 1)).set_addrs([])
    assert not conn.is_resolved()


def test_port_from_request_wins():
    conn = ConnectInfo("example.com:8080").set_port(9090)
    assert conn.port() == 8080
    assert conn.hostname() == "example.com"


def test_port_fallback_and_display():
    conn = ConnectInfo("example.com").set_port(443)
    assert conn.port() == 443
    assert str(conn) == "example.com:443"


def test_port_defaults_to_zero():
    assert ConnectInfo("example.com").port() == 0


def test_uri_request_port():
    conn = ConnectInfo(UriHost("https://example.com"))
    assert conn.hostname() == "example.com"
    assert conn.port() == 443


def test_set_port_out_of_range():
    with pytest.raises(ValueError):
        ConnectInfo("example.com").set_port(-1)


def test_equality_and_hash():
    a = ConnectInfo("hello").set_addr(("127.0.0.1", 1))
    b = ConnectInfo("hello").set_addr(("127.0.0.1", 1))
    assert a == b
    assert hash(a) == hash(b)
    assert a != ConnectInfo("hello")