"""
Tests for CurrencyEngine

Network access is replaced with monkeypatch; no request leaves the test run.
"""

import math

import pytest
import requests

from PocketCalc import CurrencyEngine


class FakeResponse:

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class TestFetchExchangeRates:

    def test_success(self, monkeypatch) -> None:
        calls = {}

        def fake_get(url, timeout):
            calls["url"] = url
            calls["timeout"] = timeout
            return FakeResponse({"base": "USD", "rates": {"EUR": 0.9, "GBP": "0.8"}})

        monkeypatch.setattr(requests, "get", fake_get)
        rates = CurrencyEngine.fetch_exchange_rates("https://rates.test/latest", timeout=3)

        assert rates == {"USD": 1.0, "EUR": 0.9, "GBP": 0.8}
        assert calls == {"url": "https://rates.test/latest", "timeout": 3}

    def test_network_error_returns_none(self, monkeypatch) -> None:
        def fake_get(url, timeout):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(requests, "get", fake_get)
        assert CurrencyEngine.fetch_exchange_rates("https://rates.test/latest", timeout=3) is None

    def test_http_error_returns_none(self, monkeypatch) -> None:
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse({}, status_code=503))
        assert CurrencyEngine.fetch_exchange_rates("https://rates.test/latest", timeout=3) is None

    def test_bad_payload_returns_none(self, monkeypatch) -> None:
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse({"error": "nope"}))
        assert CurrencyEngine.fetch_exchange_rates("https://rates.test/latest", timeout=3) is None

        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(ValueError("not json")))
        assert CurrencyEngine.fetch_exchange_rates("https://rates.test/latest", timeout=3) is None

    def test_defaults_from_config(self, monkeypatch) -> None:
        calls = {}

        def fake_get(url, timeout):
            calls["url"] = url
            calls["timeout"] = timeout
            return FakeResponse({"rates": {}})

        monkeypatch.setattr(requests, "get", fake_get)
        monkeypatch.setattr(CurrencyEngine.config_manager, "load_setting_value",
                            lambda key: {"currency_api_url": "https://cfg.test", "request_timeout": 7}[key])

        assert CurrencyEngine.fetch_exchange_rates() == {"USD": 1.0}
        assert calls == {"url": "https://cfg.test", "timeout": 7}


class TestConversion:

    def test_merge_rates(self) -> None:
        merged = CurrencyEngine.merge_rates({"USD": 1.0, "INR": 83.5}, {"USD": 1.0, "EUR": 0.9})
        assert merged == {"USD": 1.0, "INR": 83.5, "EUR": 0.9}
        assert CurrencyEngine.merge_rates({"USD": 1.0}, None) == {"USD": 1.0}

    def test_convert_with_defaults(self) -> None:
        assert CurrencyEngine.convert_currency(100, "USD", "EUR") == pytest.approx(92.0)
        assert CurrencyEngine.convert_currency(92, "EUR", "USD") == pytest.approx(100.0)

    def test_cross_rate(self) -> None:
        rates = {"USD": 1.0, "EUR": 0.5, "GBP": 0.25}
        assert CurrencyEngine.convert_currency(10, "EUR", "GBP", rates) == pytest.approx(5.0)
        assert CurrencyEngine.get_exchange_rate("EUR", "GBP", rates) == pytest.approx(0.5)

    def test_unknown_currency(self) -> None:
        assert CurrencyEngine.convert_currency(10, "USD", "XYZ") == 0
        assert CurrencyEngine.get_exchange_rate("XYZ", "USD") == 0

    def test_non_finite_amount(self) -> None:
        assert CurrencyEngine.convert_currency(math.inf, "USD", "EUR") == 0

    def test_tables_cover_every_currency(self) -> None:
        codes = set(CurrencyEngine.DEFAULT_EXCHANGE_RATES)
        assert codes == set(CurrencyEngine.CURRENCY_NAMES)
        assert codes == set(CurrencyEngine.CURRENCY_SYMBOLS)
        assert codes == set(CurrencyEngine.CURRENCY_FLAGS)


class TestFormatCurrency:

    def test_two_to_four_decimals(self) -> None:
        assert CurrencyEngine.format_currency(1234.5) == "1,234.50"
        assert CurrencyEngine.format_currency(0.12345) == "0.1235"
        assert CurrencyEngine.format_currency(5) == "5.00"

    def test_non_finite(self) -> None:
        assert CurrencyEngine.format_currency(math.nan) == "---"
