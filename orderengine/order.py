"""Order records and the side of the book they belong to."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class Side(Enum):
    """Which side of the book an order sits on."""

    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, text: str) -> "Side":
        """Return BUY for the exact text "BUY" and SELL for anything else."""
        return cls.BUY if text == "BUY" else cls.SELL


@dataclass
class Order:
    """A limit order for one symbol."""

    id: str
    symbol: str
    quantity: int
    price: float
    side: Side
    timestamp: float = field(default_factory=time.monotonic)