import re
from urllib.parse import urlparse

from preview_api.exceptions import InvalidURL

# scheme, optional www., host ending in a 2-6 letter suffix, optional path/query
_URL_SHAPE = re.compile(
    r"[a-z][a-z0-9+.\-]*://(www\.)?[-a-z0-9@:%._+~#=]{1,256}\.[a-z]{2,6}\b"
    r"([-a-z0-9@:%_+.~#?&/=]*)",
    re.IGNORECASE,
)
_FETCHABLE = re.compile(r"^https?://[^\s$.?#].[^\s]*$", re.IGNORECASE)


def validate_url(raw: str | None) -> str:
    """Return the URL to fetch for ``raw`` or raise :class:`InvalidURL`.

    Input without a scheme delimiter gets ``http://`` prepended before the
    shape check, so ``example.com`` and ``http://example.com`` are equivalent.
    """
    url = (raw or "").strip()
    if not url:
        raise InvalidURL(raw)
    if "://" not in url:
        url = "http://" + url
    if not _URL_SHAPE.match(url):
        raise InvalidURL(raw)
    return url


def hostname_of(url: str) -> str:
    try:
        hostname = urlparse(url).hostname
    except ValueError as exc:
        raise InvalidURL(url) from exc
    if not hostname:
        raise InvalidURL(url)
    return hostname


def is_fetchable(url: str) -> bool:
    """Only plain http(s) URLs are handed to the fetchers."""
    return bool(_FETCHABLE.match(url))
