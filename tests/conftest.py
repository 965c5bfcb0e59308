"""Shared fixtures for ledger tests."""

import pytest


@pytest.fixture
def btc_fills() -> list[dict]:
    return [
        {"time": 1000, "coin": "BTC", "side": "buy", "sz": "1.0", "px": "50000", "fee": "5", "closedPnl": None},
        {"time": 2000, "coin": "BTC", "side": "sell", "sz": "1.0", "px": "51000", "fee": "5", "closedPnl": "1000"},
    ]


@pytest.fixture
def btc_funding() -> list[dict]:
    return [
        {"time": 1500, "coin": "BTC", "usdc": "-2.5", "fundingRate": "0.0001"},
    ]


@pytest.fixture
def user_state() -> dict:
    return {
        "assetPositions": [
            {"type": "oneWay", "position": {"coin": "BTC", "unrealizedPnl": "12.5"}},
            {"type": "oneWay", "position": {"coin": "ETH", "unrealizedPnl": "bad"}},
        ],
        "marginSummary": {"accountValue": "10000.0"},
    }
