from pydantic import BaseModel, Field
from typing import Optional

from libs.domain_models.analysis import SentimentAnalysis, TechnicalAnalysis
from libs.domain_models.recommendation import Recommendation


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    services: dict = Field(default_factory=dict)


class QuoteResponse(BaseModel):
    instrument: str
    bid: float
    ask: float
    spread: float


class AnalysisReport(BaseModel):
    """Response of /api/analysis/{instrument}."""
    instrument: str
    granularity: str
    technical: TechnicalAnalysis
    sentiment: SentimentAnalysis
    recommendation: Recommendation
    errors: list[str] = Field(
        default_factory=list,
        description="Fetch failures; the matching analysis ran on empty input.",
    )
    candle_count: Optional[int] = None
