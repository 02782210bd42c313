"""Unit tests for execution helpers and the Binance client (no network)."""

import pytest
from binance.exceptions import BinanceAPIException

from conftest import make_candles
from fakes import FakeClient
from vol_regime_bot.core.types import Candle
from vol_regime_bot.execution import binance_futures
from vol_regime_bot.execution.base import fetch_interval_map
from vol_regime_bot.execution.binance_futures import parse_kline


def test_parse_kline():
    raw = [1700000000000, "100.5", "101.0", "99.5", "100.8", "1234.5", 1700014399999, "0", 10, "0", "0", "0"]
    candle = parse_kline(raw, "4h")
    assert candle == Candle(
        open_time=1700000000000,
        close_time=1700014399999,
        open=100.5,
        high=101.0,
        low=99.5,
        close=100.8,
        volume=1234.5,
        interval="4h",
    )


def test_fetch_interval_map():
    client = FakeClient({"4h": make_candles([1.0, 2.0, 3.0], "4h"), "1d": make_candles([5.0], "1d")})
    candles = fetch_interval_map(client, "SOLUSDT", ["4h", "1d"], limit=2)
    assert list(candles) == ["4h", "1d"]
    assert [c.close for c in candles["4h"]] == [2.0, 3.0]
    assert client.kline_calls == [("SOLUSDT", "4h", 2), ("SOLUSDT", "1d", 2)]


class StubBinance:
    """Stands in for binance.client.Client; records futures orders."""

    def __init__(self, *args, **kwargs):
        self.orders = []
        self.fail_with = None

    def futures_exchange_info(self):
        return {"symbols": [{
            "symbol": "SOLUSDT",
            "filters": [{"filterType": "LOT_SIZE", "minQty": "0.01", "stepSize": "0.01"}],
        }]}

    def futures_create_order(self, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        self.orders.append(kwargs)
        return {"orderId": 42, "avgPrice": "101.5"}


def _api_error(status_code):
    err = BinanceAPIException.__new__(BinanceAPIException)
    err.status_code = status_code
    err.code = -1003
    err.message = "Too many requests"
    return err


@pytest.fixture
def binance_client(monkeypatch):
    monkeypatch.setattr(binance_futures, "Client", StubBinance)
    return binance_futures.BinanceFuturesClient("key", "secret", testnet=True)


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr(binance_futures.time, "sleep", calls.append)
    return calls


def test_submit_order_rounds_to_lot_and_sets_side(binance_client):
    result = binance_client.submit_order("SOLUSDT", -0.057)
    assert result.success is True
    assert result.order_id == "42"
    assert result.avg_price == 101.5
    assert result.quantity == pytest.approx(0.05)
    order = binance_client._client.orders[0]
    assert order["side"] == "SELL"
    assert order["type"] == "MARKET"
    assert order["quantity"] == "0.05"


def test_submit_order_rejects_zero_and_sub_lot(binance_client):
    with pytest.raises(ValueError):
        binance_client.submit_order("SOLUSDT", 0.0)
    with pytest.raises(ValueError):
        binance_client.submit_order("SOLUSDT", 0.004)
    assert binance_client._client.orders == []


def test_submit_order_exchange_error_returns_failed_result(binance_client):
    binance_client._client.fail_with = _api_error(400)
    result = binance_client.submit_order("SOLUSDT", 0.1)
    assert result.success is False
    assert "Too many requests" in result.message


@pytest.mark.parametrize("status_code", [429, 418])
def test_retry_on_rate_limit_retries(status_code, sleeps):
    calls = []

    @binance_futures.retry_on_rate_limit(max_retries=3, base_delay=1.0)
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise _api_error(status_code)
        return "ok"

    assert flaky() == "ok"
    assert len(calls) == 3
    assert sleeps == [1.0, 2.0]


def test_retry_on_rate_limit_reraises_other_errors(sleeps):
    calls = []

    @binance_futures.retry_on_rate_limit(max_retries=3)
    def broken():
        calls.append(1)
        raise _api_error(400)

    with pytest.raises(BinanceAPIException):
        broken()
    assert len(calls) == 1
    assert sleeps == []


def test_retry_on_rate_limit_gives_up(sleeps):
    calls = []

    @binance_futures.retry_on_rate_limit(max_retries=2, base_delay=0.5)
    def limited():
        calls.append(1)
        raise _api_error(429)

    with pytest.raises(BinanceAPIException):
        limited()
    assert len(calls) == 2
    assert sleeps == [0.5]
