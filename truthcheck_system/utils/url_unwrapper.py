"""Click-tracking URL unwrapping and tracker-parameter stripping.

Search providers sometimes return redirect links (Bing "ck/a?u=...") instead
of the destination. unwrap_redirect() recovers the destination so domain
classification sees the real publisher.
"""

from urllib.parse import parse_qsl, unquote, urlencode, urlsplit, urlunsplit

TRACKER_PARAMS = frozenset({
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "fbclid",
    "gclid",
    "igshid",
    "mc_cid",
    "mc_eid",
})

BING_TARGET_PARAMS = ("u", "url", "r", "ru", "to", "target")

MAX_DECODE_ROUNDS = 3


def decode_multi(value: str, rounds: int = MAX_DECODE_ROUNDS) -> str:
    """Percent-decode repeatedly until stable, at most `rounds` times."""
    out = value
    for _ in range(rounds):
        decoded = unquote(out)
        if decoded == out:
            break
        out = decoded
    return out


def strip_trackers(url: str) -> str:
    """Remove analytics query parameters, keeping everything else."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.query:
        return url

    kept = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key.lower() not in TRACKER_PARAMS
    ]
    return urlunsplit(parts._replace(query=urlencode(kept)))


def _hostname(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def unwrap_bing(url: str) -> str:
    """Return the destination of a Bing click-tracking URL, or url unchanged."""
    if not _hostname(url).endswith("bing.com"):
        return url

    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=False):
        if key.lower() in BING_TARGET_PARAMS and value:
            return strip_trackers(decode_multi(value))
    return url


def unwrap_redirect(url: str) -> str:
    """
    Unwrap known redirectors and strip tracker parameters.

    Examples:
        >>> unwrap_redirect("https://www.bing.com/ck/a?u=https%3A%2F%2Fapnews.com%2Fx")
        'https://apnews.com/x'
    """
    if not url:
        return url
    if _hostname(url).endswith("bing.com"):
        return unwrap_bing(url)
    return strip_trackers(url)
