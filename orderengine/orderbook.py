"""Order books that match incoming orders against resting ones."""

from __future__ import annotations

import abc
import bisect
import dataclasses
import sys
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Callable, TextIO

from .order import Order, Side


@dataclass(frozen=True)
class Trade:
    """A fill between an incoming order and a resting one."""

    incoming_id: str
    resting_id: str
    price: float
    quantity: int


class OrderBook(abc.ABC):
    """Common interface of all order books."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out

    @property
    def _stream(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @abc.abstractmethod
    def add_order(self, order: Order) -> list[Trade]:
        """Add an order, match what crosses, and return the resulting trades."""

    @abc.abstractmethod
    def total_orders(self) -> int:
        """Number of orders resting in the book."""

    @abc.abstractmethod
    def print_book(self, file: TextIO | None = None) -> None:
        """Write the resting orders to ``file`` (standard output by default)."""


class _PriceLevels:
    """FIFO queues of orders keyed by price, walked best price first."""

    def __init__(self, descending: bool) -> None:
        self._levels: dict[float, deque[Order]] = {}
        self._prices: list[float] = []
        self._descending = descending

    def prices(self) -> list[float]:
        return self._prices[::-1] if self._descending else list(self._prices)

    def queue(self, price: float) -> deque[Order]:
        return self._levels[price]

    def remove(self, price: float) -> deque[Order]:
        """Drop the level at ``price`` and return its queue."""
        index = bisect.bisect_left(self._prices, price)
        self._prices.pop(index)
        return self._levels.pop(price)

    def append(self, order: Order) -> None:
        queue = self._levels.get(order.price)
        if queue is None:
            bisect.insort(self._prices, order.price)
            queue = self._levels[order.price] = deque()
        queue.append(order)

    def __iter__(self) -> Iterator[tuple[float, deque[Order]]]:
        for price in self.prices():
            yield price, self._levels[price]

    def count(self) -> int:
        return sum(len(queue) for queue in self._levels.values())


class RealisticOrderBook(OrderBook):
    """Price-time priority book with price levels on each side."""

    def __init__(self, out: TextIO | None = None) -> None:
        super().__init__(out)
        self._buys = _PriceLevels(descending=True)
        self._sells = _PriceLevels(descending=False)

    def add_order(self, order: Order) -> list[Trade]:
        if order.quantity <= 0:
            return []
        working = dataclasses.replace(order)
        if working.side is Side.BUY:
            trades = self._match(working, self._sells, lambda price: price <= working.price)
            resting = self._buys
        else:
            trades = self._match(working, self._buys, lambda price: price >= working.price)
            resting = self._sells
        if working.quantity > 0:
            resting.append(working)
        return trades

    def _match(
        self,
        order: Order,
        opposite: _PriceLevels,
        crosses: Callable[[float], bool],
    ) -> list[Trade]:
        trades: list[Trade] = []
        for price in opposite.prices():
            if order.quantity <= 0 or not crosses(price):
                break
            queue = opposite.queue(price)
            while queue and order.quantity > 0:
                resting = queue[0]
                if resting.symbol != order.symbol:
                    break
                traded = min(resting.quantity, order.quantity)
                trades.append(Trade(order.id, resting.id, price, traded))
                self._stream.write(
                    f"MATCH: {order.id} x {resting.id} @ {price:g} for {traded}units\n"
                )
                order.quantity -= traded
                resting.quantity -= traded
                if resting.quantity == 0:
                    queue.popleft()
            if not queue:
                opposite.remove(price)
        return trades

    def total_orders(self) -> int:
        return self._buys.count() + self._sells.count()

    def print_book(self, file: TextIO | None = None) -> None:
        stream = file if file is not None else self._stream
        stream.write("---- SELL ORDERS ----\n")
        for price, queue in self._sells:
            for order in queue:
                stream.write(f"{order.symbol} SELL {order.quantity} @ {price:g}\n")
        stream.write("---- BUY ORDERS ----\n")
        for price, queue in self._buys:
            for order in queue:
                stream.write(f"{order.symbol} BUY {order.quantity} @ {price:g}\n")


class NaiveOrderBook(OrderBook):
    """Book kept as two plain lists; each buy fills against at most one sell per pass."""

    def __init__(self, out: TextIO | None = None) -> None:
        super().__init__(out)
        self._buys: list[Order] = []
        self._sells: list[Order] = []

    def add_order(self, order: Order) -> list[Trade]:
        target = self._buys if order.side is Side.BUY else self._sells
        target.append(dataclasses.replace(order))
        return self._match()

    def _match(self) -> list[Trade]:
        trades: list[Trade] = []
        remaining_buys: list[Order] = []
        for buy in self._buys:
            remaining = buy.quantity
            sell = next(
                (
                    s
                    for s in self._sells
                    if s.symbol == buy.symbol and s.price <= buy.price
                ),
                None,
            )
            if sell is not None and remaining > 0:
                traded = min(sell.quantity, buy.quantity)
                trades.append(Trade(buy.id, sell.id, sell.price, traded))
                self._stream.write(
                    f"MATCH: {buy.id} x {sell.id} @ {sell.price:g} for {traded} units\n"
                )
                remaining -= traded
                sell.quantity -= traded
                if sell.quantity == 0:
                    self._sells.remove(sell)
            if remaining > 0:
                remaining_buys.append(dataclasses.replace(buy, quantity=remaining))
        self._buys = remaining_buys
        return trades

    def total_orders(self) -> int:
        return len(self._buys) + len(self._sells)

    def print_book(self, file: TextIO | None = None) -> None:
        stream = file if file is not None else self._stream
        stream.write("Buy Orders:\n")
        for order in self._buys:
            stream.write(f"{order.id} {order.symbol} {order.price:g} {order.quantity}\n")
        stream.write("Sell Orders:\n")
        for order in self._sells:
            stream.write(f"{order.id} {order.symbol} {order.price:g} {order.quantity}\n")