"""
Bearer token extraction from an incoming request.
"""

import re
from typing import Optional

from starlette.requests import HTTPConnection

from ..validation import is_valid_format


def extract_token(
    request: HTTPConnection,
    *,
    header_key: Optional[str] = "authorization",
    cookie_key: Optional[str] = "token",
    url_key: Optional[str] = "token",
    token_type: str = "Bearer",
) -> Optional[str]:
    """Return the raw token from the query string, cookie or header.

    Lookup order is query parameter, then cookie, then header; pass ``None``
    for a key to skip that location. A ``<token_type> `` prefix on the header
    value is stripped.
    """
    if url_key and request.query_params.get(url_key):
        return request.query_params[url_key]

    if cookie_key and request.cookies.get(cookie_key):
        return request.cookies[cookie_key]

    if header_key:
        value = request.headers.get(header_key)
        if value:
            token = re.sub(rf"^{re.escape(token_type)}(\s+|$)", "", value.strip(), flags=re.IGNORECASE)
            return token or None

    return None


__all__ = ["extract_token", "is_valid_format"]
