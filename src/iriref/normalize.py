"""iriref.normalize
Canonical serialization of parsed identifiers: percent-encoding normalization,
dot-segment removal and the composer built on both.
"""

import dataclasses
import re
from typing import cast

from .grammar import IRI, URI, Alphabet
from .parse import AbsoluteComponents, Components, parse_as

# RFC 3987 section 3.2 maps a URI to an IRI by decoding complete UTF-8 sequences, so a run of
# triplets is decoded as a whole and only octets that do not form a permitted character stay encoded.
_PCT_ENCODED_RUN: re.Pattern[str] = re.compile(r"(?:%[0-9A-Fa-f]{2})+")

# Characters, beyond unreserved and sub-delims, that may stay unencoded in each component.
_PATH_EXTRA: str = ":@"
_QUERY_EXTRA: str = ":@/?"
_FRAGMENT_EXTRA: str = _QUERY_EXTRA


def _utf8_width(lead: int) -> int:
    """Length of the UTF-8 sequence that starts with the octet lead, or 1 when lead cannot start one."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 1


def _normalize_run(run: str, unescaped: re.Pattern[str]) -> str:
    octets: bytes = bytes.fromhex(run.replace("%", ""))
    result: str = ""
    position: int = 0
    while position < len(octets):
        width: int = _utf8_width(octets[position])
        char: str = octets[position : position + width].decode("utf-8", errors="replace")
        if unescaped.fullmatch(char):
            result += char
            position += width
        else:
            result += f"%{octets[position]:02X}"
            position += 1
    return result


def normalize_percent_encoding(text: str, unescaped: re.Pattern[str]) -> str:
    """Decode each percent-encoded character that unescaped accepts, and uppercase the hex digits of the rest.
    e.g. normalize_percent_encoding("%7euser%2f", URI.unescaped(":@")) == "~user%2F"
    """
    return _PCT_ENCODED_RUN.sub(lambda m: _normalize_run(m[0], unescaped), text)


def remove_dot_segments(path: str) -> str:
    """Implementation of the "remove_dot_segments" routine from RFC 3986 section 5.2.4"""
    output: str = ""
    while len(path) > 0:
        if path.startswith("../") or path.startswith("./"):
            _, _, path = path.partition("/")
        elif path.startswith("/./") or path == "/.":
            path = "/" + path[3:]
        elif path.startswith("/../") or path == "/..":
            path = "/" + path[4:]
            output, _, _ = output.rpartition("/")
        elif path in (".", ".."):
            path = ""
        else:
            # The first segment, with its leading "/" if it has one.
            end: int = path.find("/", 1)
            if end == -1:
                end = len(path)
            output += path[:end]
            path = path[end:]
    return output


def normalize_path(path: str, alphabet: Alphabet) -> str:
    """Path with its percent-encoding normalized and then its dot-segments removed, so "%2E" segments go too."""
    return remove_dot_segments(normalize_percent_encoding(path, alphabet.unescaped(_PATH_EXTRA)))


def compose(components: Components | AbsoluteComponents, alphabet: Alphabet) -> str:
    """Canonical string form of parsed components.

    The scheme and the whole authority are lowercased, and the authority is
    otherwise kept as captured. The path has its percent-encoding normalized and
    its dot-segments removed; the query and fragment only have their
    percent-encoding normalized, each with the characters it may carry literally.
    """
    result: str = f"{components.scheme.lower()}:"
    path: str = normalize_path(components.path, alphabet)
    if components.authority is not None:
        result += f"//{components.authority.lower()}"
    elif path.startswith("//"):
        # Would read back as an authority.
        path = f"/.{path}"
    result += path
    if components.query is not None:
        result += f"?{normalize_percent_encoding(components.query, alphabet.unescaped(_QUERY_EXTRA))}"
    fragment: str | None = components.fragment if isinstance(components, Components) else None
    if fragment is not None:
        result += f"#{normalize_percent_encoding(fragment, alphabet.unescaped(_FRAGMENT_EXTRA))}"
    return result


def _normalize(value: str, alphabet: Alphabet) -> str:
    return compose(cast(Components, parse_as(value, alphabet.identifier)), alphabet)


def _to_absolute(value: str, alphabet: Alphabet) -> str:
    components: Components = cast(Components, parse_as(value, alphabet.identifier))
    return compose(dataclasses.replace(components, fragment=None), alphabet)


def normalize_uri(value: str) -> str:
    """Syntax-based normalization of a URI (RFC 3986 section 6.2.2)."""
    return _normalize(value, URI)


def normalize_iri(value: str) -> str:
    """Syntax-based normalization of an IRI (RFC 3987 section 5.3.2)."""
    return _normalize(value, IRI)


def to_absolute_uri(value: str) -> str:
    """Normalized URI with its fragment dropped."""
    return _to_absolute(value, URI)


def to_absolute_iri(value: str) -> str:
    return _to_absolute(value, IRI)
