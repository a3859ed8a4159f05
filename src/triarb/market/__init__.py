"""Market data module for the real-time quote feed."""

from triarb.market.feed import QuoteFeed, decode_quote
from triarb.market.quote_cache import QuoteCache
from triarb.market.symbols import TriangleSymbols


__all__ = [
    "QuoteCache",
    "QuoteFeed",
    "TriangleSymbols",
    "decode_quote",
]
