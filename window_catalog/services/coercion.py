"""
Conversions between the store representation of a window and the API shape.

Prices are persisted as fixed-point decimal strings so currency amounts never
pass through binary floating point in the database; the API always speaks
floats. Galleries are persisted as JSON-encoded arrays and surfaced as lists.
"""
import json
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Union

PRICE_QUANTUM = Decimal("0.01")


def format_price(price: Union[float, int, Decimal]) -> str:
    """Format a price for the store, e.g. ``1999.99`` -> ``"1999.99"``, ``5`` -> ``"5.00"``."""
    # str() first so 1999.99 becomes Decimal("1999.99"), not its binary expansion
    return str(Decimal(str(price)).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP))


def parse_price(value: Union[str, Decimal, float]) -> float:
    return float(value)


def encode_gallery(urls: Iterable[str]) -> str:
    return json.dumps(list(urls))


def decode_gallery(value: Any) -> List[str]:
    """Decode a stored gallery into a list of URL strings.

    Already-decoded lists pass through. Missing, malformed or non-array values
    decode to an empty list rather than failing the whole read.
    """
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if not isinstance(value, (list, tuple)):
        return []
    return [url for url in value if isinstance(url, str)]
