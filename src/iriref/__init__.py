__version__ = "0.1"

from .grammar import ALPHABETS, IRI, URI, Alphabet
from .parse import AbsoluteComponents, Components, InvalidIdentifier, ReferenceComponents, is_absolute_iri, is_absolute_uri, is_iri, is_iri_reference, is_uri, is_uri_reference, matches, parse_absolute_iri, parse_absolute_uri, parse_as, parse_iri, parse_iri_reference, parse_uri, parse_uri_reference
from .normalize import compose, normalize_iri, normalize_percent_encoding, normalize_uri, remove_dot_segments, to_absolute_iri, to_absolute_uri
from .resolve import relativize, resolve_iri, resolve_reference, resolve_uri, to_relative_iri, to_relative_uri
