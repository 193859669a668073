"""cinemaweb — force-directed relationship graph of works and the people behind them."""

__version__ = "0.1.0"
