import io
import json
import socket

import pytest

from orderengine.manager import SymbolOrderBookManager
from orderengine.order import Side
from orderengine.orderbook import RealisticOrderBook
from orderengine.server import SocketServer, parse_order

STATUS_LINE = '{"status":"Order received and processed."}\n'


def order_line(**overrides):
    data = {"id": "o1", "symbol": "AAPL", "price": 100.0, "quantity": 5, "side": "BUY"}
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def manager():
    return SymbolOrderBookManager(lambda: RealisticOrderBook(io.StringIO()))


@pytest.fixture
def server(manager):
    srv = SocketServer(0, manager, n_threads=2, host="127.0.0.1", out=io.StringIO())
    yield srv
    srv.stop()


def test_parse_order_fields():
    order = parse_order(order_line())
    assert (order.id, order.symbol, order.price, order.quantity, order.side) == (
        "o1",
        "AAPL",
        100.0,
        5,
        Side.BUY,
    )


def test_parse_order_other_side_is_sell():
    assert parse_order(order_line(side="whatever")).side is Side.SELL


def test_parse_order_missing_field():
    data = json.loads(order_line())
    del data["price"]
    with pytest.raises(ValueError, match="Missing required order fields."):
        parse_order(json.dumps(data))


def test_parse_order_not_json():
    with pytest.raises(ValueError):
        parse_order("{not json")


def test_parse_order_wrong_type():
    with pytest.raises(ValueError):
        parse_order(order_line(symbol=7))


def test_process_line_accepts_order(server, manager):
    assert server.process_line(order_line()) == STATUS_LINE
    assert manager.book("AAPL").total_orders() == 1


def test_process_line_reports_error(server):
    response = json.loads(server.process_line('{"id": "x"}'))
    assert response == {"error": "Missing required order fields."}


def test_process_line_empty_is_ignored(server):
    assert server.process_line("") is None


def test_address_before_start_raises(manager):
    srv = SocketServer(0, manager, n_threads=1, out=io.StringIO())
    with pytest.raises(RuntimeError):
        srv.address()
    srv.stop()


def test_round_trip_over_tcp(server, manager):
    server.start()
    host, port = server.address()
    with socket.create_connection((host, port), timeout=5) as client:
        payload = order_line(id="s1", side="SELL") + "\n\n" + order_line(id="b1") + "\n"
        client.sendall(payload.encode())
        reader = client.makefile("r")
        first = reader.readline()
        second = reader.readline()
    assert [first, second] == [STATUS_LINE, STATUS_LINE]
    assert manager.book("AAPL").total_orders() == 0


def test_error_response_over_tcp(server):
    server.start()
    with socket.create_connection(server.address(), timeout=5) as client:
        client.sendall(b"garbage\n")
        line = client.makefile("r").readline()
    assert "error" in json.loads(line)