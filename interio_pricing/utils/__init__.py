from .logger import setup_logging
from .units import convert_length, mm_to_cm, cm_to_mm, mm_to_m
from .currency import get_currency_symbol, format_money

__all__ = [
    "setup_logging",
    "convert_length",
    "mm_to_cm",
    "cm_to_mm",
    "mm_to_m",
    "get_currency_symbol",
    "format_money",
]
