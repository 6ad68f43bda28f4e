"""HTTP constants shared by the request builder."""

from enum import Enum


class Header(str, Enum):
    """Common request header names with a dedicated builder setter."""

    USER_AGENT = "User-Agent"
    ACCEPT = "Accept"
    ACCEPT_LANGUAGE = "Accept-Language"
    ACCEPT_ENCODING = "Accept-Encoding"
    AUTHORIZATION = "Authorization"
    CONTENT_TYPE = "Content-Type"
    COOKIE = "Cookie"
    REFERER = "Referer"
    ORIGIN = "Origin"


# Chunk size used when streaming request and response bodies
CHUNK_SIZE = 64 * 1024

DEFAULT_RESPONSE_FILE = "response.tmp"
