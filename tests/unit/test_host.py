from urllib.parse import parse_qs, urlsplit

import pytest

from authroutes.routing import build_host_urls
from authroutes.routing.context import RequestContext

from conftest import make_settings


def split(url):
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}", parse_qs(parts.query)


@pytest.mark.parametrize(
    "url, scheme, expected",
    [
        ("http://example.com/a", "https", "https://example.com/a"),
        ("https://example.com/a", "http", "http://example.com/a"),
        ("http://example.com/a/b", "relative", "/a/b"),
        ("//example.com/a", "https", "https://example.com/a"),
        ("http://example.com/a", None, "http://example.com/a"),
    ],
)
def test_set_url_scheme(host, url, scheme, expected):
    assert host.set_url_scheme(url, scheme) == expected


def test_request_scheme_is_used_when_none_given(registry, tokens):
    host = build_host_urls(make_settings(), registry, RequestContext(scheme="https"), tokens)

    assert host.set_url_scheme("http://example.com/", None) == "https://example.com/"
    assert host.build_url("about") == "https://example.com/about"


def test_force_ssl_admin_applies_to_login_urls(registry, tokens):
    host = build_host_urls(make_settings(force_ssl_admin=True), registry, RequestContext(), tokens)

    assert host.login_url() == "https://example.com/login/"
    assert host.build_url("about") == "http://example.com/about"


def test_login_url_arguments(host):
    base, query = split(host.login_url("/dashboard", force_reauth=True))

    assert base == "http://example.com/login/"
    assert query == {"redirect_to": ["/dashboard"], "reauth": ["1"]}


def test_registration_and_lost_password_urls(host):
    assert host.registration_url() == "http://example.com/register/"

    base, query = split(host.lostpassword_url("/back"))
    assert base == "http://example.com/lostpassword/"
    assert query == {"redirect_to": ["/back"]}


def test_activation_url_uses_network_home(registry, tokens):
    settings = make_settings(multisite=True, network_home_url="http://network.example.com")
    host = build_host_urls(settings, registry, RequestContext(), tokens)

    assert host.activation_url("abc") == "http://network.example.com/activate/?key=abc"
    assert host.signup_url() == "http://network.example.com/signup/"


def test_login_endpoint_keeps_its_own_urls(registry, tokens):
    host = build_host_urls(make_settings(), registry, RequestContext(path="/wp-login.php"), tokens)

    assert host.login_url() == "http://example.com/wp-login.php"
    assert host.registration_url() == "http://example.com/wp-login.php?action=register"


def test_site_url_is_based_on_site_url_setting(registry, tokens):
    settings = make_settings(site_url="http://example.com/wp")
    host = build_host_urls(settings, registry, RequestContext(), tokens)

    assert host.unfiltered_site_url("wp-cron.php") == "http://example.com/wp/wp-cron.php"
    assert host.site_url("wp-login.php") == "http://example.com/login/"
