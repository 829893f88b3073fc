"""Sanitization of extracted metrics into the final analysis envelope."""

import math
import string

from profilesift.models.profile import ExtractedProfile, ProfileFlags, ProfileMetrics
from profilesift.models.result import AnalysisResult

NUMBERS_HEAVY_MIN_DIGITS = 4
VERY_SHORT_MAX_LENGTH = 3


def normalize_count(value: float) -> int:
    """
    Round to the nearest integer (halves up) and floor at zero.

    Examples:
        1200000 -> 1200000
        12.5 -> 13
        -5 -> 0
    """
    whole = math.floor(value)
    return max(0, whole + (value - whole >= 0.5))


def compute_username_flags(username: str, extracted: ExtractedProfile) -> ProfileFlags:
    """
    Recompute risk flags from the resolved username.

    Digit and length checks run locally; the model can only add a flag,
    never clear one.
    """
    reported = extracted.username_flags
    digits = sum(1 for ch in username if ch in string.digits)
    return ProfileFlags(
        numbers_heavy=digits >= NUMBERS_HEAVY_MIN_DIGITS or reported.numbers_heavy,
        no_profile_pic=not extracted.has_profile_pic,
        random_characters=reported.random_characters,
        very_short=len(username) <= VERY_SHORT_MAX_LENGTH or reported.very_short,
    )


def normalize(extracted: ExtractedProfile, url_username: str) -> AnalysisResult:
    """
    Build the response envelope from an extracted profile.

    Args:
        extracted: Parsed or default extraction record
        url_username: Username inferred from the URL, used when the
            extracted username is empty

    Returns:
        AnalysisResult with sanitized counts and recomputed flags
    """
    username = extracted.username or url_username

    return AnalysisResult(
        success=True,
        platform=extracted.platform,
        confidence=extracted.confidence,
        notes=extracted.notes,
        profile=ProfileMetrics(
            username=username,
            followers_count=normalize_count(extracted.followers_count),
            following_count=normalize_count(extracted.following_count),
            posts_count=normalize_count(extracted.posts_count),
            bio_length=normalize_count(extracted.bio_length),
            account_age=normalize_count(extracted.account_age),
            username_flags=compute_username_flags(username, extracted),
        ),
    )
