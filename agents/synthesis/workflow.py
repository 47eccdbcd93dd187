"""
Synthesis step.
Fuses technical trend + news sentiment + RSI → Recommendation.

Decision order:
  1. (trend, sentiment) lookup      → action, confidence delta, rationale
  2. RSI against the action         → -10 stretched / +5 healthy
  3. Sentiment relevance            → + relevance * 0.2
  4. Clamp [10, 100], round, derive the risk tier
"""
import math
from typing import Optional

from agents.risk_assessor.workflow import assess_risk
from libs.domain_models.analysis import SentimentAnalysis, SentimentLabel, TechnicalAnalysis, Trend
from libs.domain_models.recommendation import Recommendation, TradeAction


BASE_CONFIDENCE = 50
MIN_CONFIDENCE = 10
MAX_CONFIDENCE = 100
RELEVANCE_WEIGHT = 0.2

RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70

_CAUTION = "Consider with caution."
_WAIT = "Wait for stronger technical signals."

# (trend, sentiment) → (action, confidence delta, rationale lead-in)
_DECISIONS = {
    (Trend.BULLISH, SentimentLabel.POSITIVE): (
        TradeAction.BUY, 20,
        "Technical analysis shows bullish trend with positive market sentiment.",
    ),
    (Trend.BEARISH, SentimentLabel.NEGATIVE): (
        TradeAction.SELL, 20,
        "Technical analysis shows bearish trend with negative market sentiment.",
    ),
    (Trend.BULLISH, SentimentLabel.NEUTRAL): (
        TradeAction.BUY, 10,
        f"Technical analysis shows bullish trend but sentiment is neutral. {_CAUTION}",
    ),
    (Trend.BEARISH, SentimentLabel.NEUTRAL): (
        TradeAction.SELL, 10,
        f"Technical analysis shows bearish trend but sentiment is neutral. {_CAUTION}",
    ),
    (Trend.NEUTRAL, SentimentLabel.POSITIVE): (
        TradeAction.BUY, -10,
        f"Market sentiment is positive but technical trend is neutral. {_WAIT}",
    ),
    (Trend.NEUTRAL, SentimentLabel.NEGATIVE): (
        TradeAction.SELL, -10,
        f"Market sentiment is negative but technical trend is neutral. {_WAIT}",
    ),
}

# Everything else, neutral+neutral and unknown trends included.
_MIXED = (
    TradeAction.HOLD, -20,
    "Both technical and sentiment analysis are mixed. No clear signal identified.",
)


def _level(value: Optional[float]) -> str:
    return f"{value:.5f}" if value is not None else "N/A"


def _rsi_adjustment(action: TradeAction, rsi: Optional[float]) -> tuple[int, str]:
    if rsi is None:
        return 0, ""
    if (action == TradeAction.BUY and rsi < RSI_OVERSOLD) or \
            (action == TradeAction.SELL and rsi > RSI_OVERBOUGHT):
        return -10, f" RSI at {rsi:.2f} suggests potential overbought/oversold condition."
    if (action == TradeAction.BUY and RSI_OVERSOLD < rsi < RSI_OVERBOUGHT) or \
            (action == TradeAction.SELL and RSI_OVERSOLD < rsi < RSI_OVERBOUGHT):
        return 5, f" RSI at {rsi:.2f} confirms healthy momentum."
    return 0, ""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def fuse_recommendation(
    technical: TechnicalAnalysis,
    sentiment: SentimentAnalysis,
    instrument: str,
) -> Recommendation:
    """Combine both analyses into a single trade recommendation."""
    key = (Trend(technical.trend), SentimentLabel(sentiment.sentiment))
    action, delta, lead = _DECISIONS.get(key, _MIXED)
    confidence = BASE_CONFIDENCE + delta
    reasoning = (
        f"{lead} Support at {_level(technical.support)}, "
        f"resistance at {_level(technical.resistance)}."
    )

    rsi_delta, rsi_note = _rsi_adjustment(action, technical.rsi)
    confidence += rsi_delta
    reasoning += rsi_note

    confidence += sentiment.relevance * RELEVANCE_WEIGHT
    confidence = _round_half_up(min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence)))

    return Recommendation(
        instrument=instrument,
        action=action,
        confidence=confidence,
        risk_level=assess_risk(confidence),
        reasoning=reasoning,
    )
