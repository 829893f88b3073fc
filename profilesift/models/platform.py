"""Platform classification models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Platform(str, Enum):
    """Social network a profile URL belongs to."""
    INSTAGRAM = "Instagram"
    TWITTER_X = "Twitter/X"
    TIKTOK = "TikTok"
    FACEBOOK = "Facebook"
    LINKEDIN = "LinkedIn"
    REDDIT = "Reddit"
    YOUTUBE = "YouTube"
    UNKNOWN = "Unknown"


class PlatformClassification(BaseModel):
    """Platform label and best-effort username inferred from a URL."""

    model_config = ConfigDict(frozen=True)

    platform: Platform
    username: str
