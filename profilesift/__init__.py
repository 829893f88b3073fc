"""profilesift - social profile signal extraction for fraud-risk scoring."""

from profilesift.models.platform import Platform, PlatformClassification
from profilesift.models.scrape import ScrapeResult
from profilesift.models.profile import ExtractedProfile
from profilesift.models.result import AnalysisResult
from profilesift.config import AnalyzerConfig
from profilesift.core.classifier import classify
from profilesift.core.orchestrator import ProfileAnalyzer
from profilesift.core.exporter import to_json, to_dict, save_json, load_json

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "ProfileAnalyzer",
    "AnalyzerConfig",
    "classify",
    # Models
    "Platform",
    "PlatformClassification",
    "ScrapeResult",
    "ExtractedProfile",
    "AnalysisResult",
    # Export utilities
    "to_json",
    "to_dict",
    "save_json",
    "load_json",
    "__version__",
]
