from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
    UNKNOWN = "unknown"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Article(BaseModel):
    """A single news article."""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    title: str = ""
    description: str = ""
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    source: Optional[str] = None


class TechnicalAnalysis(BaseModel):
    """Output from the Technical Analyst."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    trend: Trend

    # Price levels (historical min / max of the filtered closes)
    support: Optional[float] = None
    resistance: Optional[float] = None
    rsi: Optional[float] = Field(default=None, ge=0.0, le=100.0)

    price_levels: list[float] = Field(default_factory=list)  # oldest first


class SentimentAnalysis(BaseModel):
    """Output from the Sentiment Watchdog."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    sentiment: SentimentLabel
    relevance: float = Field(ge=0.0, le=100.0, default=0.0)  # percent of articles matched
    key_points: list[str] = Field(default_factory=list, max_length=3)
    total_relevant: int = 0
