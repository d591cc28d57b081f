# File: tests/test_link_resolver.py
import pytest
from site_stream.crawler.extractor import parse_document
from site_stream.crawler.link_resolver import canonicalize, discover_links, origin_of, resolve_link

SCOPE = "https://a.example"


def links_of(html: str, visited=()):
    return discover_links(parse_document(html), SCOPE, set(visited))


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://A.Example/path?q=1", "https://a.example"),
        ("http://a.example:80/x", "http://a.example"),
        ("https://a.example:8443/x", "https://a.example:8443"),
        ("https://user:pw@a.example/", "https://a.example"),
    ],
)
def test_origin_of(url, expected):
    assert origin_of(url) == expected


@pytest.mark.parametrize("url", ["/relative", "ftp://a.example/f", "mailto:x@a.example", "https://"])
def test_origin_of_rejects_non_http_urls(url):
    with pytest.raises(ValueError):
        origin_of(url)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://a.example", "https://a.example/"),
        ("HTTPS://A.EXAMPLE:443/Page", "https://a.example/Page"),
        ("http://a.example:8080/p?x=1#frag", "http://a.example:8080/p?x=1#frag"),
        ("javascript:void(0)", None),
        ("relative/path", None),
    ],
)
def test_canonicalize(url, expected):
    assert canonicalize(url) == expected


def test_resolution_uses_origin_not_page_url():
    # relative links resolve against the origin even when found deep in the site
    assert resolve_link("page2", SCOPE) == "https://a.example/page2"
    assert resolve_link("../up", SCOPE) == "https://a.example/up"


@pytest.mark.parametrize("href", ["http://[::1", "https://a.example:99999/x", "http://a.example:port/"])
def test_malformed_references_are_dropped(href):
    assert resolve_link(href, SCOPE) is None


def test_in_scope_links_are_kept_and_foreign_dropped():
    html = (
        '<a href="https://a.example/page2">in</a>'
        '<a href="https://other.example/x">out</a>'
        '<a href="/page3">relative</a>'
        '<a href="//other.example/y">protocol-relative</a>'
        '<a href="mailto:me@a.example">mail</a>'
        '<a>no href</a>'
        '<a href="  ">blank</a>'
    )
    assert links_of(html) == ["https://a.example/page2", "https://a.example/page3"]


def test_prefix_containment_admits_lookalike_hosts():
    # scope check is a plain string prefix on the origin
    assert links_of('<a href="https://a.example.evil.test/">x</a>') == ["https://a.example.evil.test/"]


def test_visited_urls_are_compared_after_resolution():
    html = '<a href="/seen">a</a><a href="https://a.example/new">b</a>'
    assert links_of(html, visited={"https://a.example/seen"}) == ["https://a.example/new"]


def test_duplicates_within_page_keep_first_position():
    html = '<a href="/b">1</a><a href="/a">2</a><a href="https://a.example/b">3</a>'
    assert links_of(html) == ["https://a.example/b", "https://a.example/a"]
