"""iriref.parse
Recognizers and parsers for the URI and IRI productions of RFC 3986 and RFC 3987.
"""

import dataclasses
import logging
import re
from typing import Self, cast

from .grammar import ALPHABETS, IRI, URI, pattern

logger = logging.getLogger(__name__)


class InvalidIdentifier(ValueError):
    """Raised when a string does not fully match the production it was parsed under."""

    def __init__(self: Self, production: str, value: str) -> None:
        super().__init__(production, value)
        self.production: str = production
        self.value: str = value

    def __str__(self: Self) -> str:
        return f"Invalid {self.production}: {self.value}"


@dataclasses.dataclass(frozen=True, kw_only=True)
class _Parts:
    """Fields shared by every production. `userinfo`, `host` and `port` are only set alongside `authority`."""

    authority: str | None = None
    userinfo: str | None = None
    host: str | None = None
    port: str | None = None
    path: str
    query: str | None = None

    def _recompose(self: Self, scheme: str | None, fragment: str | None) -> str:
        """Recomposition from RFC 3986 section 5.3, with every field exactly as captured"""
        result: str = ""
        if scheme is not None:
            result += f"{scheme}:"
        if self.authority is not None:
            result += f"//{self.authority}"
        result += self.path
        if self.query is not None:
            result += f"?{self.query}"
        if fragment is not None:
            result += f"#{fragment}"
        return result


@dataclasses.dataclass(frozen=True, kw_only=True)
class AbsoluteComponents(_Parts):
    """An absolute-URI or absolute-IRI. There is no fragment to hold."""

    scheme: str

    def serialize(self: Self) -> str:
        return self._recompose(self.scheme, None)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Components(_Parts):
    """A URI or IRI."""

    scheme: str
    fragment: str | None = None

    def serialize(self: Self) -> str:
        return self._recompose(self.scheme, self.fragment)


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReferenceComponents(_Parts):
    """A URI-reference or IRI-reference. The scheme is absent for relative references."""

    scheme: str | None = None
    fragment: str | None = None

    def serialize(self: Self) -> str:
        return self._recompose(self.scheme, self.fragment)


_RECORDS: dict[str, type[AbsoluteComponents | Components | ReferenceComponents]] = {
    production: record
    for alphabet in ALPHABETS
    for production, record in (
        (alphabet.identifier, Components),
        (alphabet.reference, ReferenceComponents),
        (alphabet.absolute, AbsoluteComponents),
    )
}


def matches(value: str, production: str) -> bool:
    """Whether all of value matches the named production."""
    return pattern(production).match(value) is not None


def parse_as(value: str, production: str) -> AbsoluteComponents | Components | ReferenceComponents:
    """Parse value under the named production, raising InvalidIdentifier when it does not match."""
    m: re.Match[str] | None = pattern(production).match(value)
    if m is None:
        logger.debug("Rejected %r as %s", value, production)
        raise InvalidIdentifier(production, value)

    fields: dict[str, str | None] = m.groupdict()

    # Only one of the two path captures takes part in a match.
    path_without_authority: str | None = fields.pop("path2")
    if fields["authority"] is None:
        fields["path"] = path_without_authority

    return _RECORDS[production](**fields)


def is_uri(value: str) -> bool:
    return matches(value, URI.identifier)


def is_uri_reference(value: str) -> bool:
    return matches(value, URI.reference)


def is_absolute_uri(value: str) -> bool:
    return matches(value, URI.absolute)


def is_iri(value: str) -> bool:
    return matches(value, IRI.identifier)


def is_iri_reference(value: str) -> bool:
    return matches(value, IRI.reference)


def is_absolute_iri(value: str) -> bool:
    return matches(value, IRI.absolute)


def parse_uri(value: str) -> Components:
    """RFC 3986-compliant URI parser.
    The scheme is required; e.g. "http://example.org/path?query#fragment" or "urn:isbn:0451450523".
    """
    return cast(Components, parse_as(value, URI.identifier))


def parse_uri_reference(value: str) -> ReferenceComponents:
    """RFC 3986-compliant URI-reference parser.
    Accepts a URI or a relative reference such as "../path?query".
    """
    return cast(ReferenceComponents, parse_as(value, URI.reference))


def parse_absolute_uri(value: str) -> AbsoluteComponents:
    """RFC 3986-compliant absolute-URI parser. A fragment is rejected."""
    return cast(AbsoluteComponents, parse_as(value, URI.absolute))


def parse_iri(value: str) -> Components:
    """RFC 3987-compliant IRI parser.
    Use this when the identifier may carry non-ASCII characters (e.g. "https://en.wiktionary.org/wiki/Ῥόδος").
    """
    return cast(Components, parse_as(value, IRI.identifier))


def parse_iri_reference(value: str) -> ReferenceComponents:
    """RFC 3987-compliant IRI-reference parser."""
    return cast(ReferenceComponents, parse_as(value, IRI.reference))


def parse_absolute_iri(value: str) -> AbsoluteComponents:
    """RFC 3987-compliant absolute-IRI parser. A fragment is rejected."""
    return cast(AbsoluteComponents, parse_as(value, IRI.absolute))
