"""Analysis response models."""

from pydantic import BaseModel

from profilesift.models.profile import Confidence, ProfileMetrics


class AnalysisResult(BaseModel):
    """Envelope returned for every analyzed profile URL."""

    success: bool = True
    platform: str
    confidence: Confidence
    notes: str
    profile: ProfileMetrics


class ErrorResponse(BaseModel):
    """Error body for requests rejected before the pipeline runs."""

    error: str
