"""
Analysis orchestrator (LangGraph).

Nodes:
  fetch_market_data → broker candles for the instrument
  fetch_news        → articles from the configured news source
  run_technical     → trend / support / resistance / RSI
  run_sentiment     → keyword sentiment over relevant articles
  synthesize        → Recommendation

The two fetch → analyze branches run in parallel and join at synthesize.
A failed fetch is logged and recorded in ``errors``; its analyzer then sees
an empty collection, so a recommendation is always produced.
"""
import asyncio
import logging

import httpx
from langgraph.graph import StateGraph, START, END

from agents.orchestrator.state import AnalysisState
from agents.sentiment_watchdog.workflow import analyze_sentiment
from agents.synthesis.workflow import fuse_recommendation
from agents.technical_analyst.workflow import analyze_technical, candles_from_payload
from connectors.news_radar.sources import NewsSource
from connectors.oanda.client import BrokerError, OandaClient

logger = logging.getLogger(__name__)


DEFAULT_GRANULARITY = "M15"
DEFAULT_COUNT = 500


def build_analysis_graph(broker: OandaClient, news_source: NewsSource):
    """Compile the pipeline graph bound to the given collaborators."""

    async def fetch_market_data(state: AnalysisState) -> dict:
        try:
            payload = await broker.get_candles(
                state["instrument"], granularity=state["granularity"], count=state["count"]
            )
        except (BrokerError, httpx.HTTPError) as e:
            logger.error("Candle fetch for %s failed: %s", state["instrument"], e)
            return {"candles": [], "errors": [f"market_data: {e}"]}
        return {"candles": candles_from_payload(payload)}

    async def fetch_news(state: AnalysisState) -> dict:
        try:
            # feedparser blocks; keep it off the event loop
            articles = await asyncio.to_thread(news_source.fetch_articles)
        except Exception as e:
            logger.exception("News fetch failed")
            return {"articles": [], "errors": [f"news: {e}"]}
        return {"articles": articles}

    def run_technical(state: AnalysisState) -> dict:
        return {"technical_result": analyze_technical(state["candles"])}

    def run_sentiment(state: AnalysisState) -> dict:
        return {"sentiment_result": analyze_sentiment(state["articles"], state["instrument"])}

    def synthesize(state: AnalysisState) -> dict:
        recommendation = fuse_recommendation(
            state["technical_result"], state["sentiment_result"], state["instrument"]
        )
        logger.info(
            "%s → %s (confidence %d, %s risk)",
            state["instrument"], recommendation.action,
            recommendation.confidence, recommendation.risk_level,
        )
        return {"final_recommendation": recommendation}

    g = StateGraph(AnalysisState)
    g.add_node("fetch_market_data", fetch_market_data)
    g.add_node("fetch_news", fetch_news)
    g.add_node("run_technical", run_technical)
    g.add_node("run_sentiment", run_sentiment)
    g.add_node("synthesize", synthesize)

    g.add_edge(START, "fetch_market_data")
    g.add_edge(START, "fetch_news")
    g.add_edge("fetch_market_data", "run_technical")
    g.add_edge("fetch_news", "run_sentiment")
    g.add_edge(["run_technical", "run_sentiment"], "synthesize")
    g.add_edge("synthesize", END)
    return g.compile()


async def analyze_instrument(
    instrument: str,
    broker: OandaClient,
    news_source: NewsSource,
    granularity: str = DEFAULT_GRANULARITY,
    count: int = DEFAULT_COUNT,
) -> AnalysisState:
    """
    Main entry point. Returns the final graph state: technical_result,
    sentiment_result, final_recommendation and any fetch errors.
    """
    graph = build_analysis_graph(broker, news_source)
    initial: AnalysisState = {
        "instrument": instrument.upper(),
        "granularity": granularity,
        "count": count,
        "candles": [],
        "articles": [],
        "technical_result": None,
        "sentiment_result": None,
        "final_recommendation": None,
        "errors": [],
    }
    return await graph.ainvoke(initial)
