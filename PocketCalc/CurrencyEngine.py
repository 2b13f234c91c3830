# CurrencyEngine.py
"""""
Currency tables (base USD) and conversion.

fetch_exchange_rates() asks the Frankfurter service for live rates; callers keep
DEFAULT_EXCHANGE_RATES when it returns None.
"""""
import logging
import math

import requests

from . import config_manager as config_manager
from . import error as E

logger = logging.getLogger(__name__)


# Rough USD-relative values, used whenever live rates are unavailable
DEFAULT_EXCHANGE_RATES = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 151.5,
    "INR": 83.5,
    "CAD": 1.36,
    "AUD": 1.52,
    "CNY": 7.23,
    "CHF": 0.91,
    "SGD": 1.35,
}

CURRENCY_NAMES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "INR": "Indian Rupee",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "CNY": "Chinese Yuan",
    "CHF": "Swiss Franc",
    "SGD": "Singapore Dollar",
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "C$",
    "AUD": "A$",
    "CNY": "¥",
    "CHF": "Fr",
    "SGD": "S$",
}

CURRENCY_FLAGS = {
    "USD": "🇺🇸",
    "EUR": "🇪🇺",
    "GBP": "🇬🇧",
    "JPY": "🇯🇵",
    "INR": "🇮🇳",
    "CAD": "🇨🇦",
    "AUD": "🇦🇺",
    "CNY": "🇨🇳",
    "CHF": "🇨🇭",
    "SGD": "🇸🇬",
}


def fetch_exchange_rates(url=None, timeout=None):
    """Return live USD-based rates, or None if the service cannot be used."""
    if url is None:
        url = config_manager.load_setting_value("currency_api_url")
    if timeout is None:
        timeout = config_manager.load_setting_value("request_timeout")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
        rates = {"USD": 1.0}
        rates.update({code: float(rate) for code, rate in data["rates"].items()})
        return rates

    except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error("%s%s", E.ERROR_MESSAGES["6001"], e)
        return None


def merge_rates(current_rates, fresh_rates):
    """Fresh rates win; currencies the service does not list keep their old value."""
    merged = dict(current_rates)
    if fresh_rates:
        merged.update(fresh_rates)
    return merged


def convert_currency(amount, from_currency, to_currency, rates=None):
    if rates is None:
        rates = DEFAULT_EXCHANGE_RATES
    if not math.isfinite(amount):
        return 0

    rate_from = rates.get(from_currency)
    rate_to = rates.get(to_currency)
    if not rate_from or not rate_to:
        return 0

    # via the USD base
    in_usd = amount / rate_from
    return in_usd * rate_to


def get_exchange_rate(from_currency, to_currency, rates=None):
    """1 unit of from_currency expressed in to_currency."""
    if rates is None:
        rates = DEFAULT_EXCHANGE_RATES
    rate_from = rates.get(from_currency)
    rate_to = rates.get(to_currency)
    if not rate_from or not rate_to:
        return 0
    return rate_to / rate_from


def format_currency(value):
    """Thousands separators, at least 2 and at most 4 decimals."""
    if not math.isfinite(value):
        return "---"
    text = f"{value:,.4f}"
    whole, decimals = text.split(".")
    decimals = decimals.rstrip("0").ljust(2, "0")
    return f"{whole}.{decimals}"
