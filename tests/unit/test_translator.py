from urllib.parse import parse_qs, urlsplit

import pytest

from authroutes.actions import Action, ActionRegistry
from authroutes.routing import build_host_urls
from authroutes.routing.context import RequestContext
from authroutes.utils.crypto import NONCE_QUERY_ARG

from conftest import make_registry, make_settings


def split(url):
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}", parse_qs(parts.query, keep_blank_values=True)


def test_login_url_translates_to_login_action(host):
    assert host.site_url("wp-login.php", "login") == "http://example.com/login/"


@pytest.mark.parametrize(
    "legacy_action, expected",
    [
        ("retrievepassword", "lostpassword"),
        ("rp", "resetpass"),
        ("lostpassword", "lostpassword"),
        ("register", "register"),
    ],
)
def test_alias_resolution(host, legacy_action, expected):
    url = host.translator.translate(f"http://example.com/wp-login.php?action={legacy_action}", "login", host.context)

    assert url == f"http://example.com/{expected}/"


def test_extra_arguments_are_preserved_and_action_removed(host):
    url = host.translator.translate(
        "http://example.com/wp-login.php?action=lostpassword&foo=bar", "login", host.context
    )
    base, query = split(url)

    assert base == "http://example.com/lostpassword/"
    assert query == {"foo": ["bar"]}


def test_html_escaped_separators_are_decoded(host):
    url = host.translator.translate(
        "http://example.com/wp-login.php?action=rp&amp;key=abc&amp;login=bob", "login", host.context
    )
    _, query = split(url)

    assert query == {"key": ["abc"], "login": ["bob"]}


@pytest.mark.parametrize(
    "legacy, expected",
    [
        ("action=lostpassword&reg=1&not=2", "http://example.com/lostpassword/?reg=1&not=2"),
        ("action=register&copy=1", "http://example.com/register/?copy=1"),
        ("action=rp&para=x&sect=y&key=abc", "http://example.com/resetpass/?para=x&sect=y&key=abc"),
    ],
)
def test_argument_names_that_look_like_entities_are_kept(host, legacy, expected):
    url = host.translator.translate(f"http://example.com/wp-login.php?{legacy}", "login", host.context)

    assert url == expected


def test_repeated_array_arguments_are_all_kept(host):
    url = host.translator.translate(
        "http://example.com/wp-login.php?action=register&role[]=a&role[]=b", "login", host.context
    )
    base, query = split(url)

    assert base == "http://example.com/register/"
    assert query == {"role[]": ["a", "b"]}


def test_encoded_values_are_encoded_once(host):
    url = host.translator.translate(
        "http://example.com/wp-login.php?redirect_to=http%3A%2F%2Fexample.com%2Fa%20b", "login", host.context
    )
    _, query = split(url)

    assert query == {"redirect_to": ["http://example.com/a b"]}


def test_end_to_end_without_permalinks(query_settings, tokens):
    registry = make_registry()
    host = build_host_urls(query_settings, registry, RequestContext(), tokens)

    url = host.site_url("wp-login.php?action=rp&key=abc&login=bob", "login")
    base, query = split(url)

    assert base == "http://example.com/"
    assert query == {"action": ["resetpass"], "key": ["abc"], "login": ["bob"]}


def test_signup_and_activate_endpoints(host):
    assert host.site_url("wp-signup.php") == "http://example.com/signup/"
    assert host.site_url("wp-activate.php?key=k1") == "http://example.com/activate/?key=k1"


def test_unknown_endpoint_is_untouched(host):
    assert host.site_url("wp-cron.php?doing=1") == "http://example.com/wp-cron.php?doing=1"
    assert host.site_url("") == "http://example.com"


@pytest.mark.parametrize("legacy", ["wp-login.php?action=rp", "wp-signup.php", "wp-login.php?action=postpass"])
def test_unregistered_action_returns_input_byte_identical(settings, tokens, legacy):
    registry = ActionRegistry([Action("login")])
    host = build_host_urls(settings, registry, RequestContext(), tokens)
    url = f"http://example.com/{legacy}&x=%2F" if "?" in legacy else f"http://example.com/{legacy}"

    assert host.translator.translate(url, "login", host.context) == url


def test_empty_action_parameter_is_not_treated_as_login(host):
    url = "http://example.com/wp-login.php?action="

    assert host.translator.translate(url, "login", host.context) == url


@pytest.mark.parametrize(
    "context",
    [
        RequestContext(path="/wp-login.php"),
        RequestContext(path="/wp-admin/options.php", is_admin=True),
        RequestContext(path="/", is_customize_preview=True),
    ],
)
def test_restricted_contexts_are_not_rewritten(host, context):
    url = "http://example.com/wp-login.php?action=register"

    assert host.translator.translate(url, "login", context) == url


def test_admin_form_submission_is_rewritten(host):
    context = RequestContext(path="/wp-admin/admin-post.php", method="POST", is_admin=True)

    assert host.translator.translate("http://example.com/wp-login.php", "login", context) == "http://example.com/login/"


def test_translation_is_idempotent(host, query_host):
    for h in (host, query_host):
        once = h.site_url("wp-login.php?action=retrievepassword&foo=bar", "login")
        assert h.translator.translate(once, "login", h.context) == once


def test_malformed_url_is_returned_unchanged(host):
    url = "http://[::1/wp-login.php"

    assert host.translator.translate(url, "login", host.context) == url


def test_unspecified_scheme_uses_login_scheme():
    settings = make_settings(force_ssl_admin=True)
    host = build_host_urls(settings, make_registry(), RequestContext())

    assert host.translator.translate("http://example.com/wp-login.php", None, host.context) == "https://example.com/login/"


def test_network_scope_depends_on_which_filter_fired():
    settings = make_settings(multisite=True, network_home_url="http://network.example.com")
    host = build_host_urls(settings, make_registry(), RequestContext())

    assert host.site_url("wp-login.php", "login") == "http://example.com/login/"
    assert host.network_site_url("wp-login.php", "login") == "http://network.example.com/login/"
    assert host.signup_url() == "http://network.example.com/signup/"


def test_logout_url_with_permalinks(host, tokens):
    url = host.logout_url("http://example.com/after?x=1")
    base, query = split(url)

    assert base == "http://example.com/logout/"
    assert query["redirect_to"] == ["http://example.com/after?x=1"]
    assert query[NONCE_QUERY_ARG] == [tokens.create_nonce("log-out")]
    assert "action" not in query


def test_logout_url_without_redirect(host):
    _, query = split(host.logout_url())

    assert "redirect_to" not in query
    assert NONCE_QUERY_ARG in query


def test_logout_url_without_permalinks_keeps_query_form(query_host, tokens):
    base, query = split(query_host.logout_url())

    assert base == "http://example.com/"
    assert query["action"] == ["logout"]
    assert query[NONCE_QUERY_ARG] == [tokens.create_nonce("log-out")]


def test_logout_filter_bails_when_logout_not_registered(settings, tokens):
    registry = ActionRegistry([Action("login")])
    host = build_host_urls(settings, registry, RequestContext(), tokens)
    original = "http://example.com/wp-login.php?action=logout&_wpnonce=abc"

    assert host.translator.filter_logout_url(original, "") == original
