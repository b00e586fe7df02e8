"""
Currency symbols and money formatting for calculation strings.
"""

from __future__ import annotations

CURRENCY_SYMBOLS: dict[str, str] = {
    "GBP": "£",
    "EUR": "€",
    "USD": "$",
    "AUD": "A$",
    "NZD": "NZ$",
    "CAD": "C$",
    "ZAR": "R",
    "INR": "₹",
    "AED": "AED ",
}


def get_currency_symbol(currency_code: str | None) -> str:
    """Symbol for an ISO currency code; unknown codes render as 'XYZ '."""
    if not currency_code:
        return ""
    code = currency_code.strip().upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def format_money(amount: float, symbol: str = "") -> str:
    return f"{symbol}{amount:,.2f}"
