"""
FastAPI gateway for the FX analysis dashboard.

Endpoints:
  GET  /health                        — liveness + broker credential status
  GET  /api/account                   — raw broker account payload
  GET  /api/account/summary           — dashboard account fields
  GET  /api/pricing?instruments=A,B   — raw broker pricing payload
  GET  /api/quotes?instruments=A,B    — bid / ask / spread per instrument
  GET  /api/candles/{instrument}      — raw broker candles
  GET  /api/instruments               — tradeable instruments
  GET  /api/news                      — articles from the configured news source
  GET  /api/analysis/{instrument}     — technical + sentiment + recommendation
  GET  /docs                          — Swagger UI (auto-generated)
"""
import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from agents.orchestrator.workflow import DEFAULT_COUNT, DEFAULT_GRANULARITY, analyze_instrument
from api.schemas import AnalysisReport, HealthResponse, QuoteResponse
from connectors.news_radar.sources import NewsSource, build_news_source
from connectors.oanda.client import BrokerError, OandaClient
from libs.config import Settings, configure_logging, load_settings
from libs.domain_models.pricing import AccountSummary, account_from_payload, quotes_from_pricing

logger = logging.getLogger(__name__)

VERSION = "0.1.0"
MAX_CANDLES = 5000  # broker limit per request


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    app.state.broker = OandaClient(settings)
    app.state.news_source = build_news_source(settings)
    if not settings.broker_configured:
        logger.warning("OANDA_API_KEY / OANDA_ACCOUNT_ID not set; broker calls will fail")
    try:
        yield
    finally:
        await app.state.broker.close()


# ── App ──────────────────────────────────────────────────────────

app = FastAPI(
    title="FX Analysis Dashboard",
    description=(
        "Proxies the OANDA v3 REST API for account, pricing and candle data, "
        "and produces rule-based trade recommendations from technical trend, "
        "RSI and news keyword sentiment. No trade execution."
    ),
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Dependencies ─────────────────────────────────────────────────

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_broker(request: Request) -> OandaClient:
    return request.app.state.broker


def get_news_source(request: Request) -> NewsSource:
    return request.app.state.news_source


def _split_instruments(raw: str | None) -> list[str]:
    parts = [p.strip().upper() for p in (raw or "").split(",") if p.strip()]
    return parts or ["EUR_USD"]


async def _proxy(what: str, call):
    try:
        return await call
    except (BrokerError, httpx.HTTPError) as e:
        logger.error("Error fetching %s: %s", what, e)
        raise HTTPException(status_code=500, detail=f"Failed to fetch {what} data") from e


# ── Routes ───────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health(settings: Settings = Depends(get_settings)):
    """Liveness check — returns service status."""
    return HealthResponse(
        status="ok",
        version=VERSION,
        services={
            "oanda": "configured" if settings.broker_configured else "missing_credentials",
            "oanda_environment": settings.oanda_environment,
            "news": settings.news_source,
        },
    )


@app.get("/api/account", tags=["Broker"])
async def account(broker: OandaClient = Depends(get_broker)):
    return await _proxy("account", broker.get_account_details())


@app.get("/api/account/summary", response_model=AccountSummary, tags=["Broker"])
async def account_summary(broker: OandaClient = Depends(get_broker)):
    payload = await _proxy("account", broker.get_account_details())
    summary = account_from_payload(payload)
    if summary is None:
        raise HTTPException(status_code=502, detail="Unable to load account information")
    return summary


@app.get("/api/pricing", tags=["Broker"])
async def pricing(
    instruments: str | None = Query(None, description="Comma-separated, e.g. EUR_USD,GBP_USD"),
    broker: OandaClient = Depends(get_broker),
):
    return await _proxy("pricing", broker.get_pricing(_split_instruments(instruments)))


@app.get("/api/quotes", response_model=list[QuoteResponse], tags=["Broker"])
async def quotes(
    instruments: str | None = Query(None, description="Comma-separated, e.g. EUR_USD,GBP_USD"),
    broker: OandaClient = Depends(get_broker),
):
    payload = await _proxy("pricing", broker.get_pricing(_split_instruments(instruments)))
    return [
        QuoteResponse(instrument=q.instrument, bid=q.bid, ask=q.ask, spread=q.spread)
        for q in quotes_from_pricing(payload)
    ]


@app.get("/api/candles/{instrument}", tags=["Broker"])
async def candles(
    instrument: str,
    granularity: str = Query("H1"),
    count: int = Query(500, ge=1, le=MAX_CANDLES),
    broker: OandaClient = Depends(get_broker),
):
    return await _proxy("candle", broker.get_candles(instrument.upper(), granularity, count))


@app.get("/api/instruments", tags=["Broker"])
async def instruments(broker: OandaClient = Depends(get_broker)):
    return await _proxy("instruments", broker.get_instruments())


@app.get("/api/news", tags=["News"])
def news(news_source: NewsSource = Depends(get_news_source)):
    articles = news_source.fetch_articles()
    return {
        "status": "success",
        "articles": [a.model_dump(by_alias=True) for a in articles],
    }


@app.get("/api/analysis/{instrument}", response_model=AnalysisReport, tags=["Analysis"])
async def analysis(
    instrument: str,
    granularity: str = Query(DEFAULT_GRANULARITY),
    count: int = Query(DEFAULT_COUNT, ge=1, le=MAX_CANDLES),
    broker: OandaClient = Depends(get_broker),
    news_source: NewsSource = Depends(get_news_source),
):
    """
    Run the full pipeline for one instrument:
    1. Retrieve candles and news in parallel
    2. Technical analysis (trend, support/resistance, RSI)
    3. Keyword sentiment over relevant articles
    4. Fuse into a buy / sell / hold recommendation with confidence and risk
    """
    state = await analyze_instrument(instrument, broker, news_source, granularity, count)
    return AnalysisReport(
        instrument=state["instrument"],
        granularity=granularity,
        technical=state["technical_result"],
        sentiment=state["sentiment_result"],
        recommendation=state["final_recommendation"],
        errors=state["errors"],
        candle_count=len(state["candles"]),
    )


# ── Dev runner ───────────────────────────────────────────────────

if __name__ == "__main__":
    _settings = load_settings()
    configure_logging(_settings.log_level)
    uvicorn.run("api.main:app", host=_settings.api_host, port=_settings.port, reload=True)
