from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt
from typing import Optional, Union


# Strict numbers so a boolean is rejected rather than read as 1.0
PriceValue = Optional[Union[StrictFloat, StrictInt, str]]


class CandleMid(BaseModel):
    """Midpoint OHLC for one bucket. The broker sends prices as strings."""
    o: PriceValue = None
    h: PriceValue = None
    l: PriceValue = None
    c: PriceValue = None


class Candle(BaseModel):
    """Broker candle, oldest first within a series."""
    model_config = ConfigDict(extra="ignore")

    time: Optional[str] = None
    volume: int = 0
    complete: bool = True
    mid: Optional[CandleMid] = None

    @property
    def close(self) -> PriceValue:
        return self.mid.c if self.mid is not None else None
