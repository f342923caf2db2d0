# orderengine

A small order-matching engine with a TCP gateway.

Incoming orders are routed to one order book per symbol. Each book matches
buy and sell orders with price-time priority. The best price trades first.
Orders at the same price trade in the order they arrived. Whatever does not
trade stays in the book as a resting order.

## Installation

```
pip install .
```

No third-party packages are needed at run time.

## Running the gateway

```
orderengine [--port PORT] [--host HOST] [--threads N]
```

| option      | default           | meaning                              |
|-------------|-------------------|--------------------------------------|
| `--port`    | `9000`            | TCP port to listen on                |
| `--host`    | all interfaces    | address to bind to                   |
| `--threads` | `5`               | worker threads that serve clients    |

The server keeps running until it reads a line from standard input. Press
Enter in the terminal to stop it. You can also start it with
`python -m orderengine.cli`.

The server writes its log lines to standard output. The order books write a
`MATCH: ...` line there for every fill.

### Protocol

A client sends one JSON object per line. An order must have all of these
fields:

| field      | type   | meaning                                   |
|------------|--------|-------------------------------------------|
| `id`       | string | identifier chosen by the client           |
| `symbol`   | string | instrument, e.g. `"AAPL"`                 |
| `price`    | number | limit price                               |
| `quantity` | number | number of units, truncated to an integer  |
| `side`     | string | `"BUY"`; any other string is a sell order |

For example:

```
{"id": "o1", "symbol": "AAPL", "price": 101.5, "quantity": 10, "side": "BUY"}
```

The server sends one compact JSON line back for each non-empty line. On
success the reply is:

```
{"status":"Order received and processed."}
```

If the line is not valid JSON, or the object lacks a field, or a field has
the wrong type, the reply is `{"error":"<reason>"}` and the connection stays
open. A missing field gives the reason `Missing required order fields.`.
Empty lines are ignored. A client that sends nothing for five seconds is
disconnected.

## Using the library

```python
from orderengine.order import Order, Side
from orderengine.orderbook import RealisticOrderBook

book = RealisticOrderBook()
book.add_order(Order(id="s1", symbol="AAPL", quantity=5, price=100.0, side=Side.SELL))
trades = book.add_order(Order(id="b1", symbol="AAPL", quantity=8, price=101.0, side=Side.BUY))

print(trades)               # [Trade(incoming_id='b1', resting_id='s1', price=100.0, quantity=5)]
print(book.total_orders())  # 1: the remaining 3 units of b1 rest on the buy side
book.print_book()
```

- `orderengine.order`: `Side` (`BUY`, `SELL`; `Side.parse(text)` gives `BUY`
  only for the exact text `"BUY"`) and the `Order` dataclass (`id`,
  `symbol`, `quantity`, `price`, `side`, `timestamp`).
- `orderengine.orderbook`: the abstract `OrderBook` with `add_order(order)`,
  which returns a list of `Trade` records, `total_orders()`, and
  `print_book(file=None)`. Each book takes an optional `out` stream for its
  `MATCH` lines, which is standard output by default.
  - `RealisticOrderBook` keeps a FIFO queue for each price level. It ignores
    orders with a quantity of zero or less. An incoming order can fill
    against as many resting orders as it crosses. It does not change the
    order you pass in.
  - `NaiveOrderBook` keeps two plain lists in arrival order. On each pass,
    every buy fills against at most one crossing sell. It is useful as a
    simple reference.
- `orderengine.manager`: `SymbolOrderBookManager` creates a book for each
  new symbol. The default book is `RealisticOrderBook`. You can pass a
  `book_factory` to use another kind. Each book is guarded by its own lock,
  so you can call the manager from several threads. `book(symbol)` raises
  `KeyError` for a symbol that has no orders yet. `symbols()` returns the
  known symbols sorted.

```python
from orderengine.manager import SymbolOrderBookManager

manager = SymbolOrderBookManager()
manager.add_order(Order(id="b2", symbol="MSFT", quantity=1, price=50.0, side=Side.BUY))
print(manager.symbols())                   # ['MSFT']
print(manager.book("MSFT").total_orders()) # 1
```

- `orderengine.threadpool`: `ThreadPool(n_workers)` runs callables on a fixed
  set of threads.
  - `enqueue(fn, *args, **kwargs)` returns a `concurrent.futures.Future`.
  - `shutdown()` finishes the queued tasks and then joins the workers. After
    that, `enqueue` raises `RuntimeError`.
  - You can use the pool as a context manager.
- `orderengine.server`: `SocketServer(port, book_manager, n_threads=5,
  host="", out=None)` with `start()`, `stop()`, `address()` and
  `process_line(line)`. `process_line` handles one protocol line and returns
  the reply line. Port `0` binds to a free port, and `address()` tells you
  which one. `parse_order(line)` turns one protocol line into an `Order` and
  raises `ValueError` if the line is malformed or incomplete.

## What it does not do

- Orders cannot be cancelled or amended once they are sent.
- Clients get no trade reports or book snapshots over the connection. Fills
  appear only on the server's standard output and in the values that
  `add_order` returns.
- Books live in memory only and are lost when the process exits.
- There is no authentication.

## Tests

```
pip install ".[test]"
pytest
```