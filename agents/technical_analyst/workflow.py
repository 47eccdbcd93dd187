"""
Technical Analyst.

Pure, synchronous analysis of a candle series:
  candles_from_payload → broker JSON to Candle models
  closing_prices       → numeric closes, non-numeric or non-finite entries dropped
  analyze_technical    → trend, support/resistance, simplified RSI
"""
import logging
from typing import Any, Iterable, Union

import numpy as np
import pandas as pd
from pydantic import ValidationError

from libs.domain_models.analysis import TechnicalAnalysis, Trend
from libs.domain_models.candle import Candle

logger = logging.getLogger(__name__)


TREND_WINDOW = 10
TREND_THRESHOLD = 0.005
RSI_PERIOD = 14


def candles_from_payload(payload: Any) -> list[Candle]:
    """Parse a broker candle payload, skipping entries that are not candles."""
    if not isinstance(payload, dict):
        return []
    candles = []
    for raw in payload.get("candles") or []:
        try:
            candles.append(Candle.model_validate(raw))
        except ValidationError as e:
            logger.debug("Skipping malformed candle %r: %s", raw, e)
    return candles


def _raw_close(candle: Union[Candle, dict]) -> Any:
    if isinstance(candle, Candle):
        value = candle.close
    elif isinstance(candle, dict):
        mid = candle.get("mid")
        value = mid.get("c") if isinstance(mid, dict) else None
    else:
        return None
    # pandas would coerce True to 1.0
    return None if isinstance(value, bool) else value


def closing_prices(candles: Iterable[Union[Candle, dict]]) -> list[float]:
    """Closing prices oldest→newest; unparsable or non-finite entries are dropped."""
    raw = pd.Series([_raw_close(c) for c in candles], dtype=object)
    closes = pd.to_numeric(raw, errors="coerce").astype(float)
    closes = closes[np.isfinite(closes)]
    return [float(p) for p in closes]


def _classify_trend(prices: list[float]) -> Trend:
    recent = prices[-TREND_WINDOW:]
    oldest, newest = recent[0], recent[-1]
    if newest > oldest * (1 + TREND_THRESHOLD):
        return Trend.BULLISH
    if newest < oldest * (1 - TREND_THRESHOLD):
        return Trend.BEARISH
    return Trend.NEUTRAL


def simple_rsi(prices: list[float], period: int = RSI_PERIOD) -> float | None:
    """
    Simplified RSI: per-step gains/losses over the whole series, then the
    plain mean of the last ``period`` of each. No Wilder smoothing.

    Returns None with fewer than ``period`` prices or when the average
    loss is exactly zero.
    """
    if len(prices) < period:
        return None

    changes = pd.Series(prices).diff().iloc[1:]
    gains = changes.clip(lower=0)
    losses = (-changes).clip(lower=0)

    avg_gain = float(gains.tail(period).sum()) / period
    avg_loss = float(losses.tail(period).sum()) / period
    if avg_loss == 0:
        return None

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def analyze_technical(candles: Iterable[Union[Candle, dict]]) -> TechnicalAnalysis:
    """Main entry point for the Technical Analyst. Never raises on bad data."""
    prices = closing_prices(candles or [])

    if len(prices) < 2:
        return TechnicalAnalysis(trend=Trend.UNKNOWN, price_levels=prices)

    return TechnicalAnalysis(
        trend=_classify_trend(prices),
        support=min(prices),
        resistance=max(prices),
        rsi=simple_rsi(prices),
        price_levels=prices,
    )
