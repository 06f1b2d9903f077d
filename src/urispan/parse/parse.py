"""urispan.parse.parse
Span-based RFC 3986 URI splitter.
Nothing here validates the grammar: the input is cut at its delimiters and
every component is kept as an offset pair into the original string.
"""

import dataclasses
import logging
import re

from typing import NamedTuple, Self

from .errors import MissingScheme

logger = logging.getLogger(__name__)

# port = *DIGIT
_PORT_PAT: re.Pattern[str] = re.compile(r"[0-9]+")
_PORT_PAT_BYTES: re.Pattern[bytes] = re.compile(rb"[0-9]+")


class Span(NamedTuple):
    """Half-open [start, end) offsets into a parsed URI."""

    start: int
    end: int

    @property
    def length(self: Self) -> int:
        return self.end - self.start

    def of(self: Self, data: str | bytes) -> str | bytes:
        return data[self.start : self.end]


_COMPONENTS: tuple[str, ...] = ("scheme", "authority", "userinfo", "host", "port", "path", "query", "fragment")


@dataclasses.dataclass(frozen=True)
class ParsedUri:
    """The components of a URI. You should not instantiate this directly. Use parse() instead.

    Every component is stored as a Span over `uri`; the accessors slice `uri`
    so they return str for str input and bytes for bytes input.
    """

    uri: str | bytes
    scheme_span: Span
    authority_span: Span | None = None
    userinfo_span: Span | None = None
    host_span: Span | None = None
    port_span: Span | None = None
    # None when there is no '/' after the authority; path then reads as empty
    path_span: Span | None = None
    query_span: Span | None = None
    fragment_span: Span | None = None

    def _get(self: Self, span: Span | None) -> str | bytes | None:
        if span is None:
            return None
        return span.of(self.uri)

    @property
    def scheme(self: Self) -> str | bytes:
        return self.scheme_span.of(self.uri)

    @property
    def authority(self: Self) -> str | bytes | None:
        return self._get(self.authority_span)

    @property
    def userinfo(self: Self) -> str | bytes | None:
        return self._get(self.userinfo_span)

    @property
    def host(self: Self) -> str | bytes | None:
        return self._get(self.host_span)

    @property
    def port(self: Self) -> str | bytes | None:
        return self._get(self.port_span)

    @property
    def port_number(self: Self) -> int | None:
        """The port as an int, or None if it is absent or empty.
        Raises ValueError unless the port is ASCII digits only.
        """
        if self.port_span is None or self.port_span.length == 0:
            return None
        port: str | bytes = self.port
        pattern = _PORT_PAT if isinstance(port, str) else _PORT_PAT_BYTES
        if pattern.fullmatch(port) is None:
            raise ValueError(f"port is not a decimal number: {port!r}")
        return int(port, base=10)

    @property
    def path(self: Self) -> str | bytes:
        if self.path_span is None:
            return self.uri[:0]
        return self.path_span.of(self.uri)

    @property
    def query(self: Self) -> str | bytes | None:
        return self._get(self.query_span)

    @property
    def fragment(self: Self) -> str | bytes | None:
        return self._get(self.fragment_span)

    def spans(self: Self) -> dict[str, Span | None]:
        return {name: getattr(self, f"{name}_span") for name in _COMPONENTS}

    def serialize(self: Self) -> str | bytes:
        """Recompose the URI from its components, after RFC 3986 section 5.3"""
        colon, slash, at, question, hash_ = _delimiters(self.uri)

        result = self.scheme + colon
        if self.authority_span is not None:
            result += slash + slash
            if self.userinfo_span is not None:
                result += self.userinfo + at
            result += self.host
            if self.port_span is not None:
                result += colon + self.port
            if self.path_span is not None:
                result += slash
        result += self.path
        if self.query_span is not None:
            result += question + self.query
        if self.fragment_span is not None:
            result += hash_ + self.fragment
        return result

    def __str__(self: Self) -> str:
        return self.uri if isinstance(self.uri, str) else self.uri.decode("ascii", errors="backslashreplace")


def _delimiters(uri: str | bytes) -> tuple[str, ...] | tuple[bytes, ...]:
    """The five delimiters ':', '/', '@', '?', '#' in the same type as uri."""
    if isinstance(uri, str):
        return (":", "/", "@", "?", "#")
    return (b":", b"/", b"@", b"?", b"#")


def _find(uri: str | bytes, needle: str | bytes, start: int, end: int | None = None) -> int | None:
    pos: int = uri.find(needle, start) if end is None else uri.find(needle, start, end)
    return None if pos == -1 else pos


def _first(*positions: int | None) -> int:
    """First of positions that is not None. The last one must always be present."""
    return next(p for p in positions if p is not None)


def parse(uri: str | bytes) -> ParsedUri:
    """Split uri into scheme, authority (userinfo, host, port), path, query and fragment.

    Raises MissingScheme when there is no ':' in uri.
    """
    if isinstance(uri, (bytearray, memoryview)):
        uri = bytes(uri)
    elif not isinstance(uri, (str, bytes)):
        raise TypeError(f"expected str or bytes-like object, got {type(uri).__name__}")

    colon, slash, at, question, hash_ = _delimiters(uri)
    length: int = len(uri)

    scheme_end: int | None = _find(uri, colon, 0)
    if scheme_end is None:
        raise MissingScheme(uri)
    scheme_span = Span(0, scheme_end)

    # An authority needs "//" plus at least one more character after the colon.
    if length - scheme_end <= 3 or uri[scheme_end + 1 : scheme_end + 3] != slash + slash:
        logger.debug("no authority in %r, the rest is path", uri)
        return ParsedUri(uri=uri, scheme_span=scheme_span, path_span=Span(scheme_end + 1, length))

    authority_start: int = scheme_end + 3

    # Each delimiter is searched for from where the previous one was found,
    # so that path_start <= query_start <= fragment_start.
    path_start: int | None = _find(uri, slash, authority_start)
    query_start: int | None = _find(uri, question, _first(path_start, authority_start))
    fragment_start: int | None = _find(uri, hash_, _first(query_start, path_start, authority_start))

    authority_end: int = _first(path_start, query_start, fragment_start, length)
    path_end: int = _first(query_start, fragment_start, length)
    query_end: int = _first(fragment_start, length)
    fragment_end: int = length

    userinfo_end: int | None = _find(uri, at, authority_start, authority_end)
    host_start: int = authority_start if userinfo_end is None else userinfo_end + 1
    port_start: int | None = _find(uri, colon, host_start, authority_end)
    host_end: int = _first(port_start, authority_end)

    logger.debug("authority of %r spans [%d, %d)", uri, authority_start, authority_end)

    return ParsedUri(
        uri=uri,
        scheme_span=scheme_span,
        authority_span=Span(authority_start, authority_end),
        userinfo_span=None if userinfo_end is None else Span(authority_start, userinfo_end),
        host_span=Span(host_start, host_end),
        port_span=None if port_start is None else Span(port_start + 1, authority_end),
        path_span=None if path_start is None else Span(path_start + 1, path_end),
        query_span=None if query_start is None else Span(query_start + 1, query_end),
        fragment_span=None if fragment_start is None else Span(fragment_start + 1, fragment_end),
    )
