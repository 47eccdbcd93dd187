from .candle import Candle, CandleMid
from .analysis import Article, TechnicalAnalysis, SentimentAnalysis, Trend, SentimentLabel
from .recommendation import Recommendation, RiskLevel, TradeAction
from .pricing import PriceQuote, AccountSummary, quotes_from_pricing, account_from_payload

__all__ = [
    "Candle",
    "CandleMid",
    "Article",
    "TechnicalAnalysis",
    "SentimentAnalysis",
    "Trend",
    "SentimentLabel",
    "Recommendation",
    "RiskLevel",
    "TradeAction",
    "PriceQuote",
    "AccountSummary",
    "quotes_from_pricing",
    "account_from_payload",
]
