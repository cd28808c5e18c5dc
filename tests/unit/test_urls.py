import pytest

from authroutes.utils.urls import (
    add_query_arg,
    get_query_arg,
    home_relative_path,
    parse_query,
    specialchars_decode,
)


def test_only_escaped_special_chars_are_decoded():
    assert specialchars_decode("a=1&amp;b=&quot;x&quot;&amp;c=&#039;&lt;&gt;") == "a=1&b=\"x\"&c='<>"
    assert specialchars_decode("a=1&reg=2&not=3&copy=4") == "a=1&reg=2&not=3&copy=4"
    assert specialchars_decode("a=&amp;lt;") == "a=&lt;"


def test_parse_query_keeps_php_semantics_for_repeats():
    assert parse_query("a=1&a=2&b[]=x&b[]=y&c=") == {"a": "2", "b[]": ["x", "y"], "c": ""}
    assert parse_query("") == {}
    assert parse_query(None) == {}


def test_add_query_arg_merges_replaces_and_removes():
    url = add_query_arg({"b": "3", "c": None, "d[]": ["p", "q"]}, "http://example.com/x/?a=1&b=2&c=4#frag")

    assert url == "http://example.com/x/?a=1&b=3&d%5B%5D=p&d%5B%5D=q#frag"
    assert get_query_arg("d[]", url) == ["p", "q"]
    assert get_query_arg("c", url) is None


@pytest.mark.parametrize(
    "path, home_url, expected",
    [
        ("/blog/login/", "http://example.com/blog", "/login/"),
        ("/blog", "http://example.com/blog/", "/"),
        ("/blogger/login/", "http://example.com/blog", "/blogger/login/"),
        ("/login/", "http://example.com", "/login/"),
        ("", "http://example.com", "/"),
    ],
)
def test_home_relative_path(path, home_url, expected):
    assert home_relative_path(path, home_url) == expected
