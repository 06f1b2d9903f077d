__version__ = "0.1"

from .errors import InvalidHexDigit, MissingScheme, URIError
from .parse import ParsedUri, Span, parse
from .percent import is_unreserved, urlDecode, url_decode, urlEncode, url_encode
