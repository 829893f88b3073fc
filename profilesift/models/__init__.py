"""Pydantic models for profilesift."""

from profilesift.models.platform import Platform, PlatformClassification
from profilesift.models.scrape import ScrapeResult
from profilesift.models.profile import (
    ExtractedProfile,
    ProfileFlags,
    ProfileMetrics,
    UsernameFlags,
)
from profilesift.models.result import AnalysisResult, ErrorResponse

__all__ = [
    "Platform",
    "PlatformClassification",
    "ScrapeResult",
    "ExtractedProfile",
    "UsernameFlags",
    "ProfileFlags",
    "ProfileMetrics",
    "AnalysisResult",
    "ErrorResponse",
]
