from agents.technical_analyst.workflow import (
    analyze_technical,
    candles_from_payload,
    closing_prices,
    simple_rsi,
)

__all__ = ["analyze_technical", "candles_from_payload", "closing_prices", "simple_rsi"]
