"""
Sentiment Watchdog.

Filters articles that mention either currency of an instrument and scores
them against fixed keyword lists. Returns SentimentAnalysis.
"""
import logging
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from libs.domain_models.analysis import Article, SentimentAnalysis, SentimentLabel

logger = logging.getLogger(__name__)


POSITIVE_KEYWORDS = ("rise", "gain", "bullish", "up", "positive", "strength", "buy")
NEGATIVE_KEYWORDS = ("fall", "loss", "bearish", "down", "negative", "weak", "sell")

MAX_KEY_POINTS = 3


def _as_article(item: Union[Article, dict]) -> Optional[Article]:
    if isinstance(item, Article):
        return item
    if not isinstance(item, dict):
        return None
    try:
        return Article.model_validate({k: v for k, v in item.items() if v is not None})
    except ValidationError as e:
        logger.debug("Skipping malformed article %r: %s", item, e)
        return None


def instrument_codes(instrument: str) -> list[str]:
    """'EUR_USD' → ['eur', 'usd']."""
    return [part for part in instrument.lower().split("_") if part]


def is_relevant(article: Article, codes: list[str]) -> bool:
    title = article.title.lower()
    description = article.description.lower()
    return any(code in title or code in description for code in codes)


def keyword_score(article: Article) -> int:
    """+1 per positive keyword present, -1 per negative keyword present."""
    text = f"{article.title} {article.description}".lower()
    positives = sum(1 for kw in POSITIVE_KEYWORDS if kw in text)
    negatives = sum(1 for kw in NEGATIVE_KEYWORDS if kw in text)
    return positives - negatives


def analyze_sentiment(
    articles: Iterable[Union[Article, dict]],
    instrument: str,
) -> SentimentAnalysis:
    """Score news sentiment for one instrument."""
    all_articles = [a for a in map(_as_article, articles or []) if a is not None]
    if not all_articles:
        return SentimentAnalysis(sentiment=SentimentLabel.NEUTRAL)

    codes = instrument_codes(instrument)
    relevant = [a for a in all_articles if is_relevant(a, codes)]
    score = sum(keyword_score(a) for a in relevant)

    if score > 0:
        label = SentimentLabel.POSITIVE
    elif score < 0:
        label = SentimentLabel.NEGATIVE
    else:
        label = SentimentLabel.NEUTRAL

    return SentimentAnalysis(
        sentiment=label,
        relevance=len(relevant) / len(all_articles) * 100,
        key_points=[a.title for a in relevant[:MAX_KEY_POINTS]],
        total_relevant=len(relevant),
    )
