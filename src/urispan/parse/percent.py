"""urispan.parse.percent
Percent-encoding over the RFC 3986 unreserved set.

Both directions size the output in a first pass and then fill a single
bytearray in a second pass.
"""

from .errors import InvalidHexDigit

_DEFAULT_ENCODING: str = "utf-8"

_HEXDIG: bytes = b"0123456789ABCDEF"

_PERCENT: int = 0x25

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
# fmt: off
_UNRESERVED: tuple[bool, ...] = tuple(bool(flag) for flag in (
    # 0  1  2  3  4  5  6  7  8  9  A  B  C  D  E  F
      0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,  # 0
      0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,  # 1
      0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 0,  # 2
      1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0,  # 3
      0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,  # 4
      1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 1,  # 5
      0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1,  # 6
      1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 1, 0,  # 7
))
# fmt: on


def is_unreserved(byte: int) -> bool:
    """True if byte can appear in a URI without percent-encoding.
    Anything outside ASCII is always escaped.
    """
    if 0 <= byte < 128:
        return _UNRESERVED[byte]
    return False


def _hexval(data: bytes, position: int) -> int:
    h: int = data[position]
    if 48 <= h <= 57:
        return h - 48
    if 65 <= h <= 70:
        return h - 55
    if 97 <= h <= 102:
        return h - 87
    raise ValueError


def _as_bytes(data: str | bytes | bytearray | memoryview) -> bytes:
    if isinstance(data, str):
        return data.encode(_DEFAULT_ENCODING)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected str or bytes-like object, got {type(data).__name__}")


def _invalid(data: str | bytes, raw: bytes, position: int) -> InvalidHexDigit:
    """The error for a bad escape at byte offset position of raw, reported against data."""
    if isinstance(data, str):
        # everything before an ASCII "%" is complete UTF-8
        return InvalidHexDigit(data, len(raw[:position].decode(_DEFAULT_ENCODING)))
    return InvalidHexDigit(raw, position)


def url_encode(data: str | bytes) -> str | bytes:
    """Percent-encode every byte of data that is not unreserved, with uppercase hex digits.
    str input is encoded as UTF-8 first and an (ASCII) str is returned.
    """
    raw: bytes = _as_bytes(data)

    # the '%' takes the place of the byte, so each escape costs 2 more
    size: int = len(raw)
    for b in raw:
        if not is_unreserved(b):
            size += 2

    res = bytearray(size)
    j: int = 0
    for b in raw:
        if is_unreserved(b):
            res[j] = b
            j += 1
        else:
            res[j + 0] = _PERCENT
            res[j + 1] = _HEXDIG[(b >> 4) & 0xF]
            res[j + 2] = _HEXDIG[(b >> 0) & 0xF]
            j += 3

    if isinstance(data, str):
        return res.decode("ascii")
    return bytes(res)


def url_decode(data: str | bytes) -> str | bytes:
    """Expand every %XX escape in data into the byte it stands for.

    Raises InvalidHexDigit if a '%' is not followed by two hex digits,
    including a '%' too close to the end. Nothing is returned on failure.
    The error carries the input as given; its position counts characters
    for str input and bytes otherwise.
    str input is treated as UTF-8 and the decoded bytes must be UTF-8 too.
    """
    raw: bytes = _as_bytes(data)
    n: int = len(raw)

    # First pass: validate every escape and size the result
    size: int = n
    i: int = 0
    while i < n:
        if raw[i] == _PERCENT:
            try:
                _hexval(raw, i + 1)
                _hexval(raw, i + 2)
            except (ValueError, IndexError):
                raise _invalid(data, raw, i) from None
            size -= 2
            i += 3
        else:
            i += 1

    # Second pass
    res = bytearray(size)
    i = j = 0
    while i < n:
        b: int = raw[i]
        if b == _PERCENT:
            res[j] = (_hexval(raw, i + 1) << 4) | _hexval(raw, i + 2)
            i += 3
        else:
            res[j] = b
            i += 1
        j += 1

    if isinstance(data, str):
        return res.decode(_DEFAULT_ENCODING)
    return bytes(res)


urlEncode = url_encode
urlDecode = url_decode
