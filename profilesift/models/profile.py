"""Profile metrics models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

Confidence = Literal["high", "medium", "low"]


class UsernameFlags(BaseModel):
    """Username heuristics as reported by the extraction model."""

    model_config = ConfigDict(extra="ignore")

    numbers_heavy: bool = False
    random_characters: bool = False
    very_short: bool = False


class ExtractedProfile(BaseModel):
    """
    Structured metrics read from a scraped profile page.

    Counts are kept as floats so that out-of-range model output (fractions,
    negatives) survives validation and is sanitized by the normalizer.
    """

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    username: str
    followers_count: float = 0
    following_count: float = 0
    posts_count: float = 0
    bio_length: float = 0
    account_age: float = 0  # days, 0 = unknown
    has_profile_pic: bool = True
    username_flags: UsernameFlags = UsernameFlags()
    platform: str
    confidence: Confidence = "low"
    notes: str = ""

    @field_validator("username", "platform", "notes", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("username_flags", mode="before")
    @classmethod
    def _none_as_no_flags(cls, value):
        return {} if value is None else value

    @field_validator("confidence", mode="before")
    @classmethod
    def _fold_confidence(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ProfileFlags(BaseModel):
    """Username and profile risk flags recomputed by the normalizer."""

    numbers_heavy: bool = False
    no_profile_pic: bool = False
    random_characters: bool = False
    very_short: bool = False


class ProfileMetrics(BaseModel):
    """Sanitized metrics handed to the risk-scoring stage."""

    username: str
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    bio_length: int = 0
    account_age: int = 0
    username_flags: ProfileFlags = ProfileFlags()
