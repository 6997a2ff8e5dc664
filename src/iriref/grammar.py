"""iriref.grammar
ABNF rules from RFC 3986 and RFC 3987 written as regular expressions.
Every unbounded repetition of characters is possessive, so a failed match never backtracks into it.
"""

import dataclasses
import functools
import logging
import re

logger = logging.getLogger(__name__)

# Each of these ABNF rules is from RFC 3986, 3987, or 5234.
# Names ending in _CHARS are the bodies of bracket expressions, so an alphabet can extend them.

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
_UNRESERVED_CHARS: str = r"A-Za-z0-9\-._~"

# ucschar = %xA0-D7FF / %xF900-FDCF / %xFDF0-FFEF
#         / %x10000-1FFFD / %x20000-2FFFD / %x30000-3FFFD
#         / %x40000-4FFFD / %x50000-5FFFD / %x60000-6FFFD
#         / %x70000-7FFFD / %x80000-8FFFD / %x90000-9FFFD
#         / %xA0000-AFFFD / %xB0000-BFFFD / %xC0000-CFFFD
#         / %xD0000-DFFFD / %xE1000-EFFFD
_UCSCHAR_CHARS: str = (
    "\xa0-\ud7ff\uf900-\ufdcf\ufdf0-\uffef"
    "\U00010000-\U0001fffd\U00020000-\U0002fffd\U00030000-\U0003fffd"
    "\U00040000-\U0004fffd\U00050000-\U0005fffd\U00060000-\U0006fffd"
    "\U00070000-\U0007fffd\U00080000-\U0008fffd\U00090000-\U0009fffd"
    "\U000a0000-\U000afffd\U000b0000-\U000bfffd\U000c0000-\U000cfffd"
    "\U000d0000-\U000dfffd\U000e1000-\U000efffd"
)

# iprivate = %xE000-F8FF / %xF0000-FFFFD / %x100000-10FFFD
_IPRIVATE_CHARS: str = "\ue000-\uf8ff\U000f0000-\U000ffffd\U00100000-\U0010fffd"

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
_SUB_DELIMS_CHARS: str = r"!$&'()*+,;="

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
_HEXDIG: str = r"[0-9A-Fa-f]"

# pct-encoded = "%" HEXDIG HEXDIG
_PCT_ENCODED: str = rf"%{_HEXDIG}{{2}}"

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME: str = r"(?P<scheme>[A-Za-z][A-Za-z0-9+\-.]*+)"

# port = *DIGIT
_PORT: str = r"(?P<port>[0-9]*+)"

# dec-octet = DIGIT / %x31-39 DIGIT / "1" 2DIGIT / "2" %x30-34 DIGIT / "25" %x30-35
_DEC_OCTET: str = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9][0-9]|[0-9])"

# IPv4address = dec-octet "." dec-octet "." dec-octet "." dec-octet
_IPV4ADDRESS: str = rf"{_DEC_OCTET}(?:\.{_DEC_OCTET}){{3}}"

# h16 = 1*4HEXDIG
_H16: str = rf"{_HEXDIG}{{1,4}}"

# ls32 = ( h16 ":" h16 ) / IPv4address
_LS32: str = rf"(?:{_H16}:{_H16}|{_IPV4ADDRESS})"


def _ipv6address() -> str:
    """IPv6address from RFC 3986 section 3.2.2.

    The first two alternatives have no elided group. In the rest, the count of
    h16 pieces allowed before "::" grows by one as the count after it shrinks:

                                    6( h16 ":" ) ls32
        /                       "::" 5( h16 ":" ) ls32
        / [               h16 ] "::" 4( h16 ":" ) ls32
        / [ *1( h16 ":" ) h16 ] "::" 3( h16 ":" ) ls32
        ...
        / [ *6( h16 ":" ) h16 ] "::"
    """
    alternatives: list[str] = [rf"(?:{_H16}:){{6}}{_LS32}", rf"::(?:{_H16}:){{5}}{_LS32}"]
    tails: tuple[str, ...] = (
        rf"(?:{_H16}:){{4}}{_LS32}",
        rf"(?:{_H16}:){{3}}{_LS32}",
        rf"(?:{_H16}:){{2}}{_LS32}",
        rf"{_H16}:{_LS32}",
        _LS32,
        _H16,
        "",
    )
    for leading, tail in enumerate(tails):
        alternatives.append(rf"(?:(?:{_H16}:){{0,{leading}}}{_H16})?::{tail}")
    return "(?:" + "|".join(alternatives) + ")"


_IPV6ADDRESS: str = _ipv6address()

# IPvFuture = "v" 1*HEXDIG "." 1*( unreserved / sub-delims / ":" )
_IPVFUTURE: str = rf"[vV]{_HEXDIG}++\.[{_UNRESERVED_CHARS}{_SUB_DELIMS_CHARS}:]++"

# IP-literal = "[" ( IPv6address / IPvFuture  ) "]"
_IP_LITERAL: str = rf"\[(?:{_IPV6ADDRESS}|{_IPVFUTURE})\]"

# A relative-path reference must not look like it starts with a scheme:
# path-noscheme = segment-nz-nc *( "/" segment )
_NOSCHEME: str = r"(?![^/?#:]*+:)"


@dataclasses.dataclass(frozen=True)
class Alphabet:
    """The character repertoire a family of productions is written in.

    `unreserved` and `private` are bracket-expression bodies. `private` is only
    admitted in queries and is empty for URIs.
    """

    name: str
    unreserved: str
    private: str = ""

    @property
    def identifier(self) -> str:
        """URI or IRI: scheme required, fragment allowed."""
        return self.name

    @property
    def reference(self) -> str:
        """URI-reference or IRI-reference: every component optional but the path."""
        return f"{self.name}-reference"

    @property
    def absolute(self) -> str:
        """absolute-URI or absolute-IRI: scheme required, no fragment."""
        return f"absolute-{self.name}"

    @property
    def productions(self) -> tuple[str, str, str]:
        return (self.identifier, self.reference, self.absolute)

    def unescaped(self, extra: str) -> re.Pattern[str]:
        """Single characters a component may carry without percent-encoding: unreserved, sub-delims and `extra`."""
        return _unescaped(self, extra)


URI: Alphabet = Alphabet("URI", _UNRESERVED_CHARS)

# iunreserved = ALPHA / DIGIT / "-" / "." / "_" / "~" / ucschar
IRI: Alphabet = Alphabet("IRI", _UNRESERVED_CHARS + _UCSCHAR_CHARS, _IPRIVATE_CHARS)

ALPHABETS: tuple[Alphabet, ...] = (URI, IRI)


@functools.cache
def _unescaped(alphabet: Alphabet, extra: str) -> re.Pattern[str]:
    return re.compile(rf"[{alphabet.unreserved}{_SUB_DELIMS_CHARS}{re.escape(extra)}]")


@functools.cache
def _sources(alphabet: Alphabet) -> dict[str, str]:
    """Regular expression source of the three productions of one alphabet, keyed by production name."""
    unreserved: str = alphabet.unreserved

    # pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
    pchar: str = rf"(?:[{unreserved}{_SUB_DELIMS_CHARS}:@]|{_PCT_ENCODED})"

    # segment = *pchar
    segment: str = rf"{pchar}*+"

    # path-abempty = *( "/" segment )
    path_abempty: str = rf"(?:/{segment})*+"

    # userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
    userinfo: str = rf"(?P<userinfo>(?:[{unreserved}{_SUB_DELIMS_CHARS}:]|{_PCT_ENCODED})*+)"

    # reg-name = *( unreserved / pct-encoded / sub-delims )
    reg_name: str = rf"(?:[{unreserved}{_SUB_DELIMS_CHARS}]|{_PCT_ENCODED})*+"

    # host = IP-literal / IPv4address / reg-name
    host: str = rf"(?P<host>{_IP_LITERAL}|{_IPV4ADDRESS}|{reg_name})"

    # authority = [ userinfo "@" ] host [ ":" port ]
    authority: str = rf"(?P<authority>(?:{userinfo}@)?{host}(?::{_PORT})?)"

    # hier-part = "//" authority path-abempty / path-absolute / path-rootless / path-empty
    # The last three alternatives share one capture: any path not opening with "//".
    hier_part: str = rf"(?://{authority}(?P<path>{path_abempty})|(?P<path2>(?!//){segment}{path_abempty}))"

    # query = *( pchar / "/" / "?" )
    # iquery = *( ipchar / iprivate / "/" / "?" )
    query: str = rf"(?:\?(?P<query>(?:[{unreserved}{_SUB_DELIMS_CHARS}:@/?{alphabet.private}]|{_PCT_ENCODED})*+))?"

    # fragment = *( pchar / "/" / "?" )
    fragment: str = rf"(?:#(?P<fragment>(?:[{unreserved}{_SUB_DELIMS_CHARS}:@/?]|{_PCT_ENCODED})*+))?"

    return {
        # URI = scheme ":" hier-part [ "?" query ] [ "#" fragment ]
        alphabet.identifier: rf"\A{_SCHEME}:{hier_part}{query}{fragment}\Z",
        # URI-reference = URI / relative-ref
        alphabet.reference: rf"\A(?:{_SCHEME}:|{_NOSCHEME}){hier_part}{query}{fragment}\Z",
        # absolute-URI = scheme ":" hier-part [ "?" query ]
        alphabet.absolute: rf"\A{_SCHEME}:{hier_part}{query}\Z",
    }


@functools.cache
def pattern(production: str) -> re.Pattern[str]:
    """Anchored, compiled pattern for a production name such as "URI-reference" or "absolute-IRI".
    Patterns are compiled on first use and shared afterwards.
    """
    for alphabet in ALPHABETS:
        sources: dict[str, str] = _sources(alphabet)
        if production in sources:
            logger.debug("Compiling the %s production", production)
            return re.compile(sources[production])
    raise ValueError(f"unknown production {production!r}")
