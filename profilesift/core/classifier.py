"""URL-based platform detection and username inference."""

from urllib.parse import urlsplit

from profilesift.models.platform import Platform, PlatformClassification


# Host markers in priority order - first match wins
PLATFORM_MARKERS: list[tuple[Platform, tuple[str, ...]]] = [
    (Platform.INSTAGRAM, ("instagram.com",)),
    (Platform.TWITTER_X, ("twitter.com", "x.com")),
    (Platform.TIKTOK, ("tiktok.com",)),
    (Platform.FACEBOOK, ("facebook.com",)),
    (Platform.LINKEDIN, ("linkedin.com",)),
    (Platform.REDDIT, ("reddit.com",)),
    (Platform.YOUTUBE, ("youtube.com",)),
]

# Generic path segments that precede the actual handle
SKIP_SEGMENTS = frozenset({"user", "users", "u", "profile", "in", "channel", "c"})

UNKNOWN_USERNAME = "unknown"


def detect_platform(url: str) -> Platform:
    """
    Map a profile URL to its platform.

    Examples:
        "https://www.instagram.com/janedoe" -> Platform.INSTAGRAM
        "https://x.com/jack" -> Platform.TWITTER_X
        "https://example.org/jane" -> Platform.UNKNOWN
    """
    lowered = url.lower()
    for platform, markers in PLATFORM_MARKERS:
        if any(marker in lowered for marker in markers):
            return platform
    return Platform.UNKNOWN


def extract_username(url: str) -> str:
    """
    Infer the profile handle from the URL path.

    Examples:
        "https://reddit.com/user/janedoe123" -> "janedoe123"
        "https://www.tiktok.com/@creator" -> "creator"
        "https://linkedin.com/in/jane-doe" -> "jane-doe"
        "not a url" -> "unknown"
    """
    try:
        parsed = urlsplit(url.strip())
    except ValueError:
        return UNKNOWN_USERNAME

    if not parsed.scheme or not parsed.netloc:
        return UNKNOWN_USERNAME

    parts = [part for part in parsed.path.split("/") if part]
    if not parts:
        return UNKNOWN_USERNAME

    username = next(
        (part for part in parts if part not in SKIP_SEGMENTS and not part.startswith("@")),
        parts[0],
    )
    return username.removeprefix("@") or UNKNOWN_USERNAME


def classify(url: str) -> PlatformClassification:
    """Classify a profile URL. Never raises."""
    return PlatformClassification(
        platform=detect_platform(url),
        username=extract_username(url),
    )
