"""
Parse one generated ingredient line.

Lines come from the meal plan generator in the loose form::

    <name>[ [SALE:<store>]][ [REUSED]][ - $<price>]

Tags may appear in either order; the price, when present, trails the line.
Parsing never raises. A line with no usable name comes back with an empty
``name`` and the caller drops it.

Examples:
    "Chicken breast [SALE:Zehrs] - $8.99"
    -> ParsedIngredient(name="Chicken breast", price="$8.99",
                        is_on_sale=True, store="Zehrs")
    "Rice [REUSED]"
    -> ParsedIngredient(name="Rice", price=None, is_reused=True)
"""

import re
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Optional, Tuple

SALE_TAG = re.compile(r"\[SALE:([^\]]+)\]")
REUSED_TAG = re.compile(r"\[REUSED\]")
# Only a dollar amount at the very end of the line counts; amounts mentioned
# mid-description stay part of the name.
TRAILING_PRICE = re.compile(r"(?:\s*-)?\s*\$(\d+(?:\.\d+)?)\s*$")
PRICE_STRING = re.compile(r"^\$(\d+(?:\.\d+)?)$")


@dataclass(frozen=True)
class ParsedIngredient:
    """A cleaned ingredient line."""

    name: str
    price: Optional[str] = None  # "$X.XX"; None until estimated
    is_on_sale: bool = False
    store: str = ""  # Sale store, empty unless is_on_sale
    is_reused: bool = False  # Already bought earlier in the week

    @property
    def has_price(self) -> bool:
        return self.price is not None

    @property
    def amount(self) -> Decimal:
        """Numeric price, zero when unpriced."""
        return price_amount(self.price)

    def with_price(self, price: str) -> "ParsedIngredient":
        return replace(self, price=price)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "price": self.price,
            "is_on_sale": self.is_on_sale,
            "store": self.store,
            "is_reused": self.is_reused,
        }


def _squash(text: str) -> str:
    return " ".join(text.split())


def extract_sale_store(text: str) -> Tuple[Optional[str], str]:
    """
    Pull the ``[SALE:<store>]`` tag out of a line.

    Returns:
        (store name or None, line without the tag)
    """
    match = SALE_TAG.search(text)
    if not match:
        return None, text
    store = match.group(1).strip()
    return store, SALE_TAG.sub(" ", text)


def extract_reused(text: str) -> Tuple[bool, str]:
    """Pull the ``[REUSED]`` tag out of a line."""
    if not REUSED_TAG.search(text):
        return False, text
    return True, REUSED_TAG.sub(" ", text)


def extract_trailing_price(text: str) -> Tuple[Optional[str], str]:
    """
    Pull a trailing ``- $X.XX`` (dash optional) off a line.

    Returns:
        (price digits such as "8.99" or None, line without the price)
    """
    match = TRAILING_PRICE.search(text.rstrip())
    if not match:
        return None, text
    return match.group(1), text.rstrip()[:match.start()]


def format_price(digits: str) -> str:
    """
    Format a numeric string as "$X.XX".

    Args:
        digits: e.g. "8.99", "2", "3.5"

    Returns:
        "$8.99", "$2.00", "$3.50"
    """
    value = Decimal(digits)
    # quantize needs room for every integer digit plus the two cents
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(digits) + 2)
        value = value.quantize(Decimal("0.01"))
    return f"${value}"


def price_amount(price: Optional[str]) -> Decimal:
    """
    Numeric value of a "$X.XX" price string.

    Missing or malformed prices count as zero.
    """
    if not price:
        return Decimal("0")
    match = PRICE_STRING.match(price.strip())
    if not match:
        return Decimal("0")
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return Decimal("0")


def parse_ingredient(raw: Any) -> ParsedIngredient:
    """
    Parse a raw ingredient line.

    Steps run left to right on a working copy of the line: SALE tag,
    REUSED tag, trailing price, then whitespace cleanup.

    Args:
        raw: Ingredient line as emitted by the meal plan generator

    Returns:
        ParsedIngredient; ``name`` is empty when nothing usable remains
        and ``price`` is None when the line carried no trailing price
    """
    if not isinstance(raw, str):
        return ParsedIngredient(name="")

    store, working = extract_sale_store(raw)
    is_reused, working = extract_reused(working)
    digits, working = extract_trailing_price(working)

    return ParsedIngredient(
        name=_squash(working),
        price=format_price(digits) if digits is not None else None,
        is_on_sale=store is not None,
        store=store or "",
        is_reused=is_reused,
    )


def clean_ingredient_name(raw: Any) -> str:
    """Display name of a raw ingredient line with all markers removed."""
    return parse_ingredient(raw).name
