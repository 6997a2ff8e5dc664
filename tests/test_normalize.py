import pytest

from iriref import (
    IRI,
    URI,
    AbsoluteComponents,
    Components,
    InvalidIdentifier,
    compose,
    normalize_iri,
    normalize_percent_encoding,
    normalize_uri,
    remove_dot_segments,
    to_absolute_iri,
    to_absolute_uri,
)


@pytest.mark.parametrize("path, expected", [
    ("/a/b/../c", "/a/c"),
    ("/a/b/c/..", "/a/b/"),
    ("/a/b/c/./../../g", "/a/g"),
    ("mid/content=5/../6", "mid/6"),
    ("../a", "a"),
    ("./a", "a"),
    ("../../a/./b", "a/b"),
    (".", ""),
    ("..", ""),
    ("/.", "/"),
    ("/..", "/"),
    ("/../../x", "/x"),
    ("a/..", "/"),
    ("/a//b/../c", "/a//c"),
    ("/a/.b/..c/", "/a/.b/..c/"),
    ("", ""),
])
def test_remove_dot_segments(path, expected):
    assert remove_dot_segments(path) == expected


@pytest.mark.parametrize("value, expected", [
    ("http://a/%7Euser", "http://a/~user"),
    ("http://a/%2f", "http://a/%2F"),
    ("HTTP://Example.COM/", "http://example.com/"),
    ("http://User:Pw@Example.COM:80/", "http://user:pw@example.com:80/"),
    ("http://a/b/../c/./d", "http://a/c/d"),
    ("http://a/%2E%2E/b", "http://a/b"),
    ("http://a/?%7e%2F%3a", "http://a/?~/:"),
    ("http://a/#%41%23", "http://a/#A%23"),
    ("http://a/%3a%40%3B", "http://a/:@;"),
    ("http://a/%C3%A9", "http://a/%C3%A9"),
    ("http://a?%25", "http://a?%25"),
    ("http://a/b?q=./../", "http://a/b?q=./../"),
    ("urn:Example:Foo", "urn:Example:Foo"),
    ("http://%7Ea/", "http://%7ea/"),
    ("a:/.//b", "a:/.//b"),
    ("a:/b/..//c", "a:/.//c"),
])
def test_normalize_uri(value, expected):
    assert normalize_uri(value) == expected


@pytest.mark.parametrize("value, expected", [
    ("http://a/%C3%A9", "http://a/é"),
    ("HTTP://Résumé.Example/", "http://résumé.example/"),
    ("http://a/?%EE%80%80", "http://a/?%EE%80%80"),
    ("http://a/%c3", "http://a/%C3"),
    ("http://a/%c3%41", "http://a/%C3A"),
    ("http://a/%C3%A9%2F", "http://a/é%2F"),
    ("http://a/%F0%9F%98%80", "http://a/\U0001f600"),
    ("http://a/%7E?%7E#%7E", "http://a/~?~#~"),
])
def test_normalize_iri(value, expected):
    assert normalize_iri(value) == expected


@pytest.mark.parametrize("value", [
    "http://a/%2E%2E/%2e/b",
    "HTTP://x/%7e/../%41?%62#%63",
    "a:/.//b",
    "a:/b/..//c",
    "http://a/b/c/..",
    "mailto:%4a.Doe@Example.com",
])
def test_normalize_uri_is_idempotent(value):
    once = normalize_uri(value)
    assert normalize_uri(once) == once


def test_normalize_iri_is_idempotent():
    once = normalize_iri("http://Ü.example/%C3%BC/./%2e%2E/x?%EE%80%80")
    assert once == "http://ü.example/x?%EE%80%80"
    assert normalize_iri(once) == once


def test_normalize_rejects_references():
    with pytest.raises(InvalidIdentifier):
        normalize_uri("//a/b")


def test_to_absolute():
    assert to_absolute_uri("HTTP://a/b/../c?q#frag") == "http://a/c?q"
    assert to_absolute_uri("urn:a") == "urn:a"
    assert to_absolute_iri("http://é/x#y") == "http://é/x"


def test_normalize_percent_encoding():
    assert normalize_percent_encoding("%7euser%2f", URI.unescaped(":@")) == "~user%2F"
    assert normalize_percent_encoding("%2f%3F", URI.unescaped(":@/?")) == "/?"
    assert normalize_percent_encoding("%E2%82%AC", URI.unescaped(":@")) == "%E2%82%AC"
    assert normalize_percent_encoding("%e2%82%ac", IRI.unescaped(":@")) == "€"
    assert normalize_percent_encoding("no escapes", URI.unescaped(":@")) == "no escapes"


def test_compose():
    assert compose(Components(scheme="HTTP", authority="A", host="A", path="/x/../y"), URI) == "http://a/y"
    assert compose(AbsoluteComponents(scheme="urn", path="a:b", query="%7e"), URI) == "urn:a:b?~"
    assert compose(Components(scheme="s", path="", query="", fragment=""), URI) == "s:?#"
