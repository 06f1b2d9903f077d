"""urispan.parse.errors
Everything raised on purpose by urispan is a ValueError, same as the rest of
the urllib.parse family, so `except ValueError` keeps working for callers.
"""

from typing import Self


class URIError(ValueError):
    """Base class for parse and percent-coding failures."""


class MissingScheme(URIError):
    """The input has no ':' so there is no scheme to split off."""

    def __init__(self: Self, uri: str | bytes) -> None:
        super().__init__(f"missing scheme: no ':' in {uri!r}")
        self.uri: str | bytes = uri


class InvalidHexDigit(URIError):
    """A '%' is not followed by two hexadecimal digits."""

    def __init__(self: Self, data: str | bytes, position: int) -> None:
        super().__init__(f"invalid percent-escape at offset {position} in {data!r}")
        self.data: str | bytes = data
        self.position: int = position
