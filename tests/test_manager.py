import io
import threading

import pytest

from orderengine.manager import SymbolOrderBookManager
from orderengine.order import Order, Side
from orderengine.orderbook import NaiveOrderBook, RealisticOrderBook


@pytest.fixture
def manager():
    return SymbolOrderBookManager(lambda: RealisticOrderBook(io.StringIO()))


def test_books_created_per_symbol(manager):
    manager.add_order(Order("a", "AAPL", 1, 10.0, Side.BUY))
    manager.add_order(Order("m", "MSFT", 1, 10.0, Side.SELL))
    assert manager.symbols() == ["AAPL", "MSFT"]
    assert manager.book("AAPL") is not manager.book("MSFT")


def test_orders_of_different_symbols_do_not_match(manager):
    manager.add_order(Order("a", "AAPL", 1, 10.0, Side.BUY))
    trades = manager.add_order(Order("m", "MSFT", 1, 10.0, Side.SELL))
    assert trades == []
    assert manager.book("AAPL").total_orders() == 1


def test_same_symbol_matches(manager):
    manager.add_order(Order("s", "AAPL", 2, 10.0, Side.SELL))
    trades = manager.add_order(Order("b", "AAPL", 2, 10.0, Side.BUY))
    assert [(t.incoming_id, t.resting_id) for t in trades] == [("b", "s")]


def test_unknown_symbol_raises(manager):
    with pytest.raises(KeyError):
        manager.book("NOPE")


def test_default_factory_is_realistic():
    manager = SymbolOrderBookManager()
    manager.add_order(Order("z", "AAPL", 0, 10.0, Side.BUY))
    manager.add_order(Order("b", "AAPL", 3, 10.0, Side.BUY))
    book = manager.book("AAPL")
    assert isinstance(book, RealisticOrderBook)
    assert book.total_orders() == 1
    out = io.StringIO()
    book.print_book(out)
    assert out.getvalue() == (
        "---- SELL ORDERS ----\n"
        "---- BUY ORDERS ----\n"
        "AAPL BUY 3 @ 10\n"
    )


def test_custom_factory_used():
    manager = SymbolOrderBookManager(lambda: NaiveOrderBook(io.StringIO()))
    manager.add_order(Order("b", "AAPL", 1, 10.0, Side.BUY))
    book = manager.book("AAPL")
    assert isinstance(book, NaiveOrderBook)
    out = io.StringIO()
    book.print_book(out)
    assert out.getvalue() == "Buy Orders:\nb AAPL 10 1\nSell Orders:\n"


def test_concurrent_adds_all_match(manager):
    per_thread = 50

    def worker(tag):
        for i in range(per_thread):
            manager.add_order(Order(f"{tag}b{i}", "AAPL", 1, 100.0, Side.BUY))
            manager.add_order(Order(f"{tag}s{i}", "AAPL", 1, 100.0, Side.SELL))

    threads = [threading.Thread(target=worker, args=(t,)) for t in "wxyz"]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert manager.book("AAPL").total_orders() == 0