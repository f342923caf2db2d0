"""TCP server that takes newline-delimited JSON orders."""

from __future__ import annotations

import json
import socket
import sys
import threading
from typing import Any, TextIO

from .manager import SymbolOrderBookManager
from .order import Order, Side
from .threadpool import ThreadPool

_REQUIRED_FIELDS = ("id", "symbol", "price", "quantity", "side")
_RECV_SIZE = 1023
_CLIENT_TIMEOUT = 5.0
_ACCEPT_POLL = 0.2


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _string_field(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def _number_field(data: dict, key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field '{key}' must be a number")
    return value


def _order_from_json(data: Any) -> Order:
    if not isinstance(data, dict) or any(key not in data for key in _REQUIRED_FIELDS):
        raise ValueError("Missing required order fields.")
    return Order(
        id=_string_field(data, "id"),
        symbol=_string_field(data, "symbol"),
        price=float(_number_field(data, "price")),
        quantity=int(_number_field(data, "quantity")),
        side=Side.parse(_string_field(data, "side")),
    )


def parse_order(line: str) -> Order:
    """Parse one JSON order line; ValueError if it is malformed or incomplete."""
    return _order_from_json(json.loads(line))


class SocketServer:
    """Accepts clients and hands each one to a worker from a thread pool."""

    def __init__(
        self,
        port: int,
        book_manager: SymbolOrderBookManager,
        n_threads: int = 5,
        host: str = "",
        out: TextIO | None = None,
    ) -> None:
        self.port = port
        self.host = host
        self._manager = book_manager
        self._pool = ThreadPool(n_threads)
        self._out = out
        self._print_lock = threading.Lock()
        self._running = threading.Event()
        self._sock: socket.socket | None = None
        self._thread: threading.Thread | None = None

    def _log(self, *parts: Any) -> None:
        stream = self._out if self._out is not None else sys.stdout
        with self._print_lock:
            print("".join(str(part) for part in parts), file=stream, flush=True)

    def start(self) -> None:
        """Bind, listen and start accepting clients in a background thread."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise RuntimeError("Socket creation error.") from exc
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
            except OSError:
                pass
        try:
            sock.bind((self.host, self.port))
        except OSError as exc:
            sock.close()
            raise RuntimeError("[SocketServer] Bind error on socket server start.") from exc
        try:
            sock.listen(3)
        except OSError as exc:
            sock.close()
            raise RuntimeError(
                "[SocketServer] Listening error on socket server start."
            ) from exc
        sock.settimeout(_ACCEPT_POLL)
        self._sock = sock
        self._running.set()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop accepting, close the socket and wait for the workers."""
        self._running.clear()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._sock is not None:
            self._sock.close()
        self._pool.shutdown()

    def address(self) -> tuple[str, int]:
        """The (host, port) the server is bound to."""
        if self._sock is None:
            raise RuntimeError("server has not been started")
        host, port = self._sock.getsockname()[:2]
        return host, port

    def _serve(self) -> None:
        assert self._sock is not None
        self._log("[SocketServer] Listening on port ", self.address()[1], "...")
        while self._running.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                if not self._running.is_set():
                    break
                self._log("[SocketServer] Error while accepting client.")
                continue
            conn.settimeout(_CLIENT_TIMEOUT)
            try:
                self._pool.enqueue(self._handle_client, conn)
            except RuntimeError:
                conn.close()

    def _handle_client(self, conn: socket.socket) -> None:
        buffer = b""
        with conn:
            while True:
                try:
                    chunk = conn.recv(_RECV_SIZE)
                except OSError:
                    chunk = b""
                if not chunk:
                    self._log("[SocketServer] Client disconnected")
                    break
                buffer += chunk
                *lines, buffer = buffer.split(b"\n")
                for raw in lines:
                    response = self.process_line(raw.decode("utf-8", errors="replace"))
                    if response is None:
                        continue
                    try:
                        conn.sendall(response.encode("utf-8"))
                    except OSError:
                        pass

    def process_line(self, line: str) -> str | None:
        """Handle one request line and return the response line, or None if empty."""
        if not line:
            return None
        try:
            data = json.loads(line)
            self._log("[SocketServer] Order received: ", _dump(data))
            self._manager.add_order(_order_from_json(data))
            response = {"status": "Order received and processed."}
        except Exception as exc:
            self._log("[SocketServer] Invalid order format or parse error: ", exc)
            response = {"error": str(exc)}
        return _dump(response) + "\n"