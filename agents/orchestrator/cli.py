"""
Run the analysis pipeline for one instrument from the command line.

Usage:
  python -m agents.orchestrator.cli EUR_USD --granularity M15 --count 500
  python -m agents.orchestrator.cli EUR_USD --json
"""
import argparse
import asyncio
import json

from agents.orchestrator.workflow import DEFAULT_COUNT, DEFAULT_GRANULARITY, analyze_instrument
from connectors.news_radar.sources import build_news_source
from connectors.oanda.client import OandaClient
from libs.config import configure_logging, load_settings


def _print_report(state: dict) -> None:
    ta = state["technical_result"]
    sa = state["sentiment_result"]
    rec = state["final_recommendation"]
    rsi = "N/A" if ta.rsi is None else f"{ta.rsi:.2f}"
    print(f"\n=== {state['instrument']} ({state['granularity']}) ===")
    print(f"Trend:       {ta.trend}   RSI: {rsi}")
    print(f"Sentiment:   {sa.sentiment} ({sa.total_relevant} relevant, {sa.relevance:.2f}%)")
    print(f"Signal:      {rec.action.upper()}  confidence {rec.confidence}%  {rec.risk_level} risk")
    print(f"Reasoning:   {rec.reasoning}")
    for err in state["errors"]:
        print(f"[warn] {err}")


async def run(instrument: str, granularity: str, count: int, as_json: bool) -> dict:
    settings = load_settings()
    configure_logging(settings.log_level)
    broker = OandaClient(settings)
    try:
        state = await analyze_instrument(
            instrument, broker, build_news_source(settings), granularity, count
        )
    finally:
        await broker.close()

    if as_json:
        print(json.dumps({
            "instrument": state["instrument"],
            "technical": state["technical_result"].model_dump(),
            "sentiment": state["sentiment_result"].model_dump(),
            "recommendation": state["final_recommendation"].model_dump(),
            "errors": state["errors"],
        }))
    else:
        _print_report(state)
    return state


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rule-based FX trade recommendation")
    parser.add_argument("instrument", help="e.g. EUR_USD")
    parser.add_argument("--granularity", default=DEFAULT_GRANULARITY, help="Candle granularity")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="Number of candles")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args(argv)
    state = asyncio.run(run(args.instrument, args.granularity, args.count, args.json))
    return 1 if state["errors"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
