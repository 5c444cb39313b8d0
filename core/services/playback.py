"""Playback URL construction for generated videos."""

from urllib.parse import urlencode, urlsplit, urlunsplit

from core.constants import PLAYBACK_KEY_PARAM


def build_playback_url(uri: str, api_key: str | None) -> str:
    """Append the service credential to a video URI for direct playback.

    Service download URIs require the key as a query parameter. The result
    embeds a secret and must not be logged.

    Args:
        uri: Raw video URI returned by the service.
        api_key: Credential to append; the URI is returned unchanged if empty.

    Returns:
        A URL playable without extra headers.
    """
    if not api_key:
        return uri

    parts = urlsplit(uri)
    extra = urlencode({PLAYBACK_KEY_PARAM: api_key})
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
