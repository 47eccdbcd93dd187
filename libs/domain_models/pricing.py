"""
Typed views over broker pricing and account payloads for the dashboard panels.
"""
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class PriceQuote(BaseModel):
    """Top-of-book quote for one instrument."""
    model_config = ConfigDict(frozen=True)

    instrument: str
    bid: float
    ask: float

    @property
    def spread(self) -> float:
        return round(self.ask - self.bid, 5)


class AccountSummary(BaseModel):
    """The account fields shown on the dashboard."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    alias: Optional[str] = None
    balance: float = 0.0
    currency: str = ""
    margin_used: float = Field(default=0.0, alias="marginUsed")
    margin_available: float = Field(default=0.0, alias="marginAvailable")
    open_trade_count: int = Field(default=0, alias="openTradeCount")
    unrealized_pl: float = Field(default=0.0, alias="unrealizedPL")


def quotes_from_pricing(payload: dict) -> list[PriceQuote]:
    """Build quotes from a pricing payload, skipping entries without a bid/ask bucket."""
    quotes = []
    for price in (payload or {}).get("prices") or []:
        try:
            quotes.append(PriceQuote(
                instrument=price["instrument"],
                bid=price["bids"][0]["price"],
                ask=price["asks"][0]["price"],
            ))
        except (KeyError, IndexError, TypeError, ValidationError) as e:
            logger.warning("Skipping malformed price entry: %s", e)
    return quotes


def account_from_payload(payload: dict) -> Optional[AccountSummary]:
    """Return None when the payload carries no usable account block."""
    account = (payload or {}).get("account")
    if not account:
        return None
    try:
        return AccountSummary.model_validate(account)
    except ValidationError as e:
        logger.warning("Malformed account payload: %s", e)
        return None
