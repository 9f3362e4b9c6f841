"""Charset validation shared by the scanner and the patcher."""

import codecs

from modforge.errors import UnsupportedEncoding


def resolve_charset(charset: str) -> str:
    """Return the canonical codec name for a text charset.

    Raises:
        UnsupportedEncoding: If the name is unknown or is not a text
            encoding (e.g. ``base64``).
    """
    try:
        info = codecs.lookup(charset)
    except (LookupError, TypeError) as e:
        raise UnsupportedEncoding(charset) from e
    # bytes-to-bytes codecs (base64, hex, zlib) are registered as non-text
    if not getattr(info, "_is_text_encoding", True):
        raise UnsupportedEncoding(charset)
    return info.name
