"""Percent-encoding for URL parameter values."""

from urllib.parse import quote_plus


def encode_param(value: str) -> str:
    """Encode a value for a path segment, query value or fragment.

    Values are form-encoded as UTF-8: letters, digits and "-_.*" are kept,
    everything else is percent-encoded ("~" included). Form encoding turns
    spaces into '+', which is only valid inside query strings, so every '+'
    is rewritten as '%20'. A literal '+' in the input is already '%2B' at
    that point and is not affected.

    Args:
        value: Raw parameter value.

    Returns:
        Percent-encoded value.
    """
    return quote_plus(value, safe="*").replace("+", "%20").replace("~", "%7E")
