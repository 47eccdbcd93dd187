from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class TradeAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Recommendation(BaseModel):
    """
    Final output from the Synthesis step.
    This is what the API returns to the dashboard.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    instrument: str
    action: TradeAction
    confidence: int = Field(ge=10, le=100)
    risk_level: RiskLevel
    reasoning: str
