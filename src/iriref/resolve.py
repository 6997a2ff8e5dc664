"""iriref.resolve
Reference resolution (RFC 3986 section 5.2) and its inverse, relativization.
"""

import logging
from typing import cast

from .grammar import IRI, URI, Alphabet
from .normalize import compose, normalize_path
from .parse import AbsoluteComponents, Components, ReferenceComponents, parse_as

logger = logging.getLogger(__name__)


def _authority_fields(components: AbsoluteComponents | ReferenceComponents) -> dict[str, str | None]:
    return {
        "authority": components.authority,
        "userinfo": components.userinfo,
        "host": components.host,
        "port": components.port,
    }


def _merge_paths(base: AbsoluteComponents, path: str) -> str:
    """Implementation of the "merge" routine defined in RFC 3986 section 5.2.3"""
    if base.authority is not None and len(base.path) == 0:
        return f"/{path}"
    directory, slash, _ = base.path.rpartition("/")
    return directory + slash + path


def resolve_reference(reference: str, base: str, alphabet: Alphabet) -> str:
    """The "Transform References" algorithm from RFC 3986 section 5.2.2, composed into canonical form.

    reference is parsed as a URI-reference (or IRI-reference) and base as an
    absolute-URI (or absolute-IRI); either failing raises InvalidIdentifier.
    Dot-segments are removed when the result is composed.
    """
    r: ReferenceComponents = cast(ReferenceComponents, parse_as(reference, alphabet.reference))
    b: AbsoluteComponents = cast(AbsoluteComponents, parse_as(base, alphabet.absolute))

    scheme: str
    authority: dict[str, str | None]
    path: str
    query: str | None

    if r.scheme is not None:
        scheme = r.scheme
        authority = _authority_fields(r)
        path = r.path
        query = r.query
    else:
        if r.authority is not None:
            authority = _authority_fields(r)
            path = r.path
            query = r.query
        else:
            if len(r.path) == 0:
                path = b.path
                query = r.query if r.query is not None else b.query
            else:
                path = r.path if r.path.startswith("/") else _merge_paths(b, r.path)
                query = r.query
            authority = _authority_fields(b)
        scheme = b.scheme

    target: Components = Components(scheme=scheme, path=path, query=query, fragment=r.fragment, **authority)
    return compose(target, alphabet)


def _relative_path(directory: str, path: str) -> str | None:
    """Relative-path reference leading from directory to path, or None when no such reference exists.

    directory is the merge prefix of the base (empty, or ending in "/") and
    both arguments are already free of dot-segments.
    """
    segments: list[str]
    if not directory.startswith("/"):
        if path.startswith("/"):
            # ".." cannot climb out of a rootless directory, but an absolute path needs no climbing.
            return f"/.{path}" if path.startswith("//") else path
        if not path.startswith(directory):
            return None
        segments = path[len(directory) :].split("/")
    elif not path.startswith("/"):
        return None
    else:
        source: list[str] = directory.split("/")[:-1]
        target: list[str] = path.split("/")
        # The common ancestor never includes the final segment of target.
        common: int = 0
        while common < len(source) and common < len(target) - 1 and source[common] == target[common]:
            common += 1
        segments = [".."] * (len(source) - common) + target[common:]

    if segments[0] == "" or ":" in segments[0]:
        # Would read back as an absolute path or a scheme, or as the base itself when empty.
        segments.insert(0, ".")
    return "/".join(segments)


def relativize(uri: str, relative_to: str, alphabet: Alphabet) -> str:
    """Shortest reference that resolves against uri to relative_to.

    uri is parsed as an absolute-URI (or absolute-IRI) and relative_to as a URI
    (or IRI). When the schemes or authorities differ, or the path of relative_to
    cannot be reached from the path of uri, there is no relative form and
    relative_to is returned unchanged. The query and fragment of relative_to
    are carried over verbatim.
    """
    source: AbsoluteComponents = cast(AbsoluteComponents, parse_as(uri, alphabet.absolute))
    target: Components = cast(Components, parse_as(relative_to, alphabet.identifier))

    result: str | None = None
    if target.scheme == source.scheme and target.authority == source.authority:
        path: str = normalize_path(target.path, alphabet)
        # An empty reference would also inherit the query of uri.
        if path == normalize_path(source.path, alphabet) and (target.query is not None or source.query is None):
            result = ""
        elif target.authority is not None and len(path) == 0:
            # Any relative path would be merged under "/".
            result = f"//{target.authority}"
        else:
            result = _relative_path(normalize_path(_merge_paths(source, ""), alphabet), path)

    if result is None:
        logger.debug("No reference relative to %r reaches %r", uri, relative_to)
        return relative_to

    if target.query is not None:
        result += f"?{target.query}"
    if target.fragment is not None:
        result += f"#{target.fragment}"
    return result


def resolve_uri(reference: str, base: str) -> str:
    """Resolve a URI-reference against an absolute-URI.
    e.g. resolve_uri("../g", "http://a/b/c/d;p?q") == "http://a/b/g"
    """
    return resolve_reference(reference, base, URI)


def resolve_iri(reference: str, base: str) -> str:
    """Resolve an IRI-reference against an absolute-IRI."""
    return resolve_reference(reference, base, IRI)


def to_relative_uri(uri: str, relative_to: str) -> str:
    return relativize(uri, relative_to, URI)


def to_relative_iri(iri: str, relative_to: str) -> str:
    return relativize(iri, relative_to, IRI)
