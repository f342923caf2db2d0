"""Routing of orders to one book per symbol."""

from __future__ import annotations

import threading
from typing import Callable

from .order import Order
from .orderbook import OrderBook, RealisticOrderBook, Trade


class SymbolOrderBookManager:
    """Keeps one order book per symbol, each guarded by its own lock."""

    def __init__(self, book_factory: Callable[[], OrderBook] = RealisticOrderBook) -> None:
        self._factory = book_factory
        self._books: dict[str, OrderBook] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._map_lock = threading.Lock()

    def add_order(self, order: Order) -> list[Trade]:
        """Send an order to the book of its symbol, creating the book if needed."""
        with self._map_lock:
            book = self._books.get(order.symbol)
            if book is None:
                book = self._books[order.symbol] = self._factory()
                self._locks[order.symbol] = threading.Lock()
            lock = self._locks[order.symbol]
        with lock:
            return book.add_order(order)

    def book(self, symbol: str) -> OrderBook:
        """Return the book of a symbol; KeyError if no order for it has arrived."""
        with self._map_lock:
            return self._books[symbol]

    def symbols(self) -> list[str]:
        """Symbols that have a book, sorted."""
        with self._map_lock:
            return sorted(self._books)