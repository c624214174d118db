import pytest

from connkit.host import Host, UriHost, host_hostname, host_port, scheme_to_port


@pytest.mark.parametrize(
    "request_text, hostname, port",
    [
        ("example.com", "example.com", None),
        ("example.com:8080", "example.com", 8080),
        ("example:8080", "example", 8080),
        ("example.com:false", "example.com", None),
        ("example.com:false:false", "example.com", None),
    ],
)
def test_host_parsing(request_text, hostname, port):
    assert host_hostname(request_text) == hostname
    assert host_port(request_text) == port


def test_port_out_of_range_is_none():
    assert host_port("example.com:70000") is None


def test_unsupported_type_raises():
    with pytest.raises(TypeError):
        host_hostname(42)
    with pytest.raises(TypeError):
        host_port(42)


class _NameOnly(Host):
    def hostname(self):
        return "example.com"


def test_custom_host_default_port():
    h = _NameOnly()
    assert host_hostname(h) == "example.com"
    assert host_port(h) is None


def test_host_is_abstract():
    with pytest.raises(TypeError):
        Host()


def test_uri_explicit_port():
    uri = UriHost("https://localhost:8443/path")
    assert uri.hostname() == "localhost"
    assert uri.port() == 8443


def test_uri_scheme_port():
    assert UriHost("https://localhost").port() == 443
    assert UriHost("http://localhost/").port() == 80
    assert UriHost("postgres://db.example.com/app").port() == 5432


def test_uri_unknown_scheme_has_no_port():
    assert UriHost("gopher://example.com").port() is None


def test_uri_without_host():
    uri = UriHost("/only/a/path")
    assert uri.hostname() == ""
    assert uri.port() is None


def test_uri_ipv6_host():
    uri = UriHost("http://[::1]:8080/")
    assert uri.hostname() == "[::1]"
    assert uri.port() == 8080


def test_uri_invalid_port():
    with pytest.raises(ValueError):
        UriHost("http://localhost:notaport/")


def test_uri_through_helpers():
    uri = UriHost("wss://example.com")
    assert host_hostname(uri) == "example.com"
    assert host_port(uri) == 443
    assert str(uri) == "wss://example.com"


@pytest.mark.parametrize(
    "scheme, port",
    [
        ("http", 80),
        ("https", 443),
        ("ws", 80),
        ("wss", 443),
        ("amqp", 5672),
        ("amqps", 5671),
        ("mqtt", 1883),
        ("mqtts", 8883),
        ("ftp", 21),
        ("ftps", 990),
        ("redis", 6379),
        ("mysql", 3306),
        ("postgres", 5432),
        ("unknown", None),
        (None, None),
    ],
)
def test_scheme_to_port(scheme, port):
    assert scheme_to_port(scheme) == port