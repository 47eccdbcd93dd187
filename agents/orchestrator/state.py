import operator
from typing import Annotated, Optional, TypedDict

from libs.domain_models.analysis import Article, SentimentAnalysis, TechnicalAnalysis
from libs.domain_models.candle import Candle
from libs.domain_models.recommendation import Recommendation


class AnalysisState(TypedDict):
    """Shared state across the analysis graph."""
    instrument: str
    granularity: str
    count: int

    # Fetched data (empty when a fetch failed)
    candles: list[Candle]
    articles: list[Article]

    technical_result: Optional[TechnicalAnalysis]
    sentiment_result: Optional[SentimentAnalysis]
    final_recommendation: Optional[Recommendation]

    # Parallel branches may both report failures
    errors: Annotated[list[str], operator.add]
