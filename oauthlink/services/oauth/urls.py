"""URL helpers for building provider authorization URLs."""
from collections.abc import Iterable, Mapping
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from .exceptions import InvalidUrlError

_ALLOWED_SCHEMES = {"http", "https"}


def build_url(base: str, params: Mapping[str, str | None]) -> str:
    """
    Append query parameters to ``base``.

    Values are percent-encoded per RFC 3986 (space becomes ``%20``),
    parameters whose value is ``None`` are dropped, and insertion order is kept.

    Raises:
        InvalidUrlError: If ``base`` has no http(s) scheme or no host
    """
    parts = urlsplit(base)
    if parts.scheme not in _ALLOWED_SCHEMES or not parts.netloc:
        raise InvalidUrlError(base)

    query = urlencode(
        [(key, value) for key, value in params.items() if value is not None],
        quote_via=quote,
        safe="",
    )
    if not query:
        return base
    existing = parts.query.rstrip("&")
    # query goes before any fragment
    return urlunsplit(parts._replace(query=f"{existing}&{query}" if existing else query))


def join_scopes(defaults: Iterable[str], extra: Iterable[str], delimiter: str = " ") -> str:
    """Combine provider default scopes with configured ones (deduplicated, order-preserving)."""
    seen: set[str] = set()
    result: list[str] = []
    for scope in [*defaults, *extra]:
        if scope and scope not in seen:
            seen.add(scope)
            result.append(scope)
    return delimiter.join(result)
