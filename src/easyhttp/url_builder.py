"""URL assembly from a template plus path, query and fragment parameters.

Steps run in a fixed order, each one on the previous step's output:
trailing slashes are trimmed, {name} tokens are replaced, the query
string is appended, then the fragment. The result must parse as an
absolute URI.
"""

import re
from collections.abc import Mapping

import httpx

from easyhttp.exceptions import MalformedUrlError
from easyhttp.utils.codec import encode_param

# Characters that may never appear unescaped in a URI (RFC 3986)
_ILLEGAL_URI_CHARS = re.compile(r'[\x00-\x20\x7f"<>\\^`{|}]')


def remove_end_slashes(url: str) -> str:
    """Strip every trailing '/'. "a.com/api/user///" becomes "a.com/api/user"."""
    return url.rstrip("/")


def replace_path_params(url: str, path_params: Mapping[str, str]) -> str:
    """Replace each {key} token with the encoded value, in map order.

    Tokens without a matching key are left untouched.
    """
    for key, value in path_params.items():
        url = url.replace("{" + key + "}", encode_param(value))
    return url


def add_query_params(url: str, query_params: Mapping[str, str]) -> str:
    """Append key=value pairs in map order. Keys are not encoded."""
    if not query_params:
        return url
    query = "&".join(f"{key}={encode_param(value)}" for key, value in query_params.items())
    return f"{url}?{query}"


def add_fragment(url: str, fragment: str | None) -> str:
    if fragment is not None and fragment.strip():
        return f"{url}#{encode_param(fragment)}"
    return url


def expand_url(
    url: str,
    path_params: Mapping[str, str] | None = None,
    query_params: Mapping[str, str] | None = None,
    fragment: str | None = None,
) -> str:
    """Run every string transformation without parsing the result.

    Args:
        url: URL template, may contain {name} tokens.
        path_params: Values for the {name} tokens.
        query_params: Query string entries.
        fragment: Optional fragment, ignored when blank.

    Returns:
        The assembled URL string.
    """
    url = remove_end_slashes(url)
    url = replace_path_params(url, path_params or {})
    url = add_query_params(url, query_params or {})
    return add_fragment(url, fragment)


def build_url(
    url: str,
    path_params: Mapping[str, str] | None = None,
    query_params: Mapping[str, str] | None = None,
    fragment: str | None = None,
) -> httpx.URL:
    """Assemble and parse the final absolute URL.

    Returns:
        The parsed httpx.URL.

    Raises:
        MalformedUrlError: If the assembled string is not an absolute URI,
            e.g. it is relative, lacks a scheme or host, or still contains
            characters such as an unreplaced {token}.
    """
    expanded = expand_url(url, path_params, query_params, fragment)

    illegal = _ILLEGAL_URI_CHARS.search(expanded)
    if illegal:
        raise MalformedUrlError(
            expanded, f"Illegal character {illegal.group()!r} at index {illegal.start()}"
        )

    try:
        parsed = httpx.URL(expanded)
    except httpx.InvalidURL as e:
        raise MalformedUrlError(expanded, str(e)) from e

    if not parsed.is_absolute_url:
        raise MalformedUrlError(expanded, "URI is not absolute")
    return parsed
