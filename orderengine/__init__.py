"""Per-symbol order books with price-time matching, a thread pool and a JSON-over-TCP gateway."""

__version__ = "0.1.0"