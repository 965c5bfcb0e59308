from datetime import datetime, timedelta, timezone
from decimal import Decimal

from ledger.models import (
    DepositEvent,
    FillEvent,
    FundingEvent,
    LiquidationEvent,
    Timeline,
    WithdrawalEvent,
)
from ledger.services import PnLCalculator, TimelineService

DAY_MS = 86_400_000


def build(fills, funding=()):
    return TimelineService().build_timeline("0xabc", list(fills), list(funding))


def fill(time, coin="BTC", fee="1", closed_pnl=None):
    return {"time": time, "coin": coin, "side": "B", "sz": "1", "px": "100", "fee": fee, "closedPnl": closed_pnl}


def test_summary_for_btc_round_trip(btc_fills, btc_funding):
    timeline = build(btc_fills, btc_funding)

    summary = PnLCalculator().calculate_summary("0xabc", timeline, Decimal(0))

    assert summary.wallet == "0xabc"
    assert summary.realized_pnl == Decimal("1000")
    assert summary.funding_pnl == Decimal("-2.5")
    assert summary.trading_fees == Decimal("10")
    assert summary.total_pnl == Decimal("1000")
    assert summary.net_pnl == Decimal("987.5")
    assert summary.period_start == timeline.from_timestamp
    assert summary.period_end == timeline.to_timestamp

    btc = summary.by_asset["BTC"]
    assert btc.trade_count == 2
    assert btc.realized_pnl == Decimal("1000")
    assert btc.funding_pnl == Decimal("-2.5")
    assert btc.fees == Decimal("10")
    assert btc.net_pnl == Decimal("987.5")


def test_summary_adds_unrealized_to_total(btc_fills, btc_funding):
    summary = PnLCalculator().calculate_summary("0xabc", build(btc_fills, btc_funding), Decimal("12.5"))

    assert summary.unrealized_pnl == Decimal("12.5")
    assert summary.total_pnl == Decimal("1012.5")
    assert summary.net_pnl == Decimal("1000")


def test_summary_totals_equal_sum_of_assets():
    fills = [
        fill(1000, "BTC", fee="0.1", closed_pnl="1.1"),
        fill(2000, "ETH", fee="0.2", closed_pnl="-0.7"),
        fill(3000, "ETH", fee="0.3"),
        fill(4000, "SOL", fee="0.01", closed_pnl="0.03"),
    ]
    funding = [
        {"time": 1500, "coin": "BTC", "usdc": "0.1"},
        {"time": 2500, "coin": "DOGE", "usdc": "-0.2"},
    ]

    summary = PnLCalculator().calculate_summary("0xabc", build(fills, funding), Decimal(0))
    assets = summary.by_asset.values()

    assert sum((a.realized_pnl for a in assets), Decimal(0)) == summary.realized_pnl == Decimal("0.43")
    assert sum((a.funding_pnl for a in assets), Decimal(0)) == summary.funding_pnl == Decimal("-0.1")
    assert sum((a.fees for a in assets), Decimal(0)) == summary.trading_fees == Decimal("0.61")
    assert summary.by_asset["ETH"].trade_count == 2
    assert summary.by_asset["DOGE"].trade_count == 0
    assert set(summary.by_asset) == {"BTC", "ETH", "SOL", "DOGE"}


def test_summary_sums_are_exact():
    fills = [fill(i, fee="0.1") for i in range(1, 11)]

    summary = PnLCalculator().calculate_summary("0xabc", build(fills), Decimal(0))

    assert summary.trading_fees == Decimal("1.0")
    assert summary.by_asset["BTC"].net_pnl == Decimal("-1.0")


def test_summary_fill_without_realized_pnl_still_counts():
    summary = PnLCalculator().calculate_summary("0xabc", build([fill(1000, fee="2")]), Decimal(0))

    btc = summary.by_asset["BTC"]
    assert btc.trade_count == 1
    assert btc.realized_pnl == Decimal(0)
    assert btc.fees == Decimal("2")
    assert btc.net_pnl == Decimal("-2")


def test_summary_empty_timeline():
    before = datetime.now(timezone.utc)
    summary = PnLCalculator().calculate_summary("0xabc", build([]), Decimal(0))
    after = datetime.now(timezone.utc)

    assert summary.realized_pnl == Decimal(0)
    assert summary.unrealized_pnl == Decimal(0)
    assert summary.total_pnl == Decimal(0)
    assert summary.funding_pnl == Decimal(0)
    assert summary.trading_fees == Decimal(0)
    assert summary.net_pnl == Decimal(0)
    assert summary.by_asset == {}
    assert summary.period_start == summary.period_end
    assert before <= summary.period_start <= after


def test_summary_ignores_other_event_types():
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    timeline = Timeline(
        wallet="0xabc",
        events=[
            LiquidationEvent(timestamp=ts, coin="BTC", size=Decimal("1"), price=Decimal("1"), loss=Decimal("50")),
            DepositEvent(timestamp=ts, amount=Decimal("1000"), token="USDC"),
            WithdrawalEvent(timestamp=ts, amount=Decimal("10"), token="USDC"),
        ],
        from_timestamp=ts,
        to_timestamp=ts,
    )

    summary = PnLCalculator().calculate_summary("0xabc", timeline, Decimal(0))

    assert summary.net_pnl == Decimal(0)
    assert summary.by_asset == {}


def test_daily_single_bucket(btc_fills, btc_funding):
    daily = PnLCalculator().calculate_daily(build(btc_fills, btc_funding))

    assert len(daily) == 1
    assert daily[0].date == "1970-01-01"
    assert daily[0].pnl == Decimal("987.5")
    assert daily[0].cumulative_pnl == Decimal("987.5")


def test_daily_buckets_by_utc_date_and_accumulates():
    fills = [
        fill(2 * DAY_MS + 10, fee="1", closed_pnl="10"),
        fill(DAY_MS - 1, fee="0.5", closed_pnl="-3"),
        fill(DAY_MS, fee="0.25"),
    ]
    funding = [{"time": 2 * DAY_MS + 20, "coin": "BTC", "usdc": "0.75"}]

    daily = PnLCalculator().calculate_daily(build(fills, funding))

    assert [d.date for d in daily] == ["1970-01-01", "1970-01-02", "1970-01-03"]
    assert [d.pnl for d in daily] == [Decimal("-3.5"), Decimal("-0.25"), Decimal("9.75")]
    assert [d.cumulative_pnl for d in daily] == [Decimal("-3.5"), Decimal("-3.75"), Decimal("6.00")]

    for prev, cur in zip(daily, daily[1:]):
        assert cur.cumulative_pnl == prev.cumulative_pnl + cur.pnl
    assert daily[-1].cumulative_pnl == sum((d.pnl for d in daily), Decimal(0))


def test_daily_counts_liquidation_loss():
    ts = datetime(2024, 3, 5, 23, 59, tzinfo=timezone.utc)
    timeline = Timeline(
        wallet="0xabc",
        events=[
            FillEvent(timestamp=ts, coin="BTC", side="B", size=Decimal("1"), price=Decimal("1"),
                      fee=Decimal("1"), realized_pnl=Decimal("5")),
            FundingEvent(timestamp=ts, coin="BTC", amount=Decimal("0.5")),
            LiquidationEvent(timestamp=ts + timedelta(minutes=2), coin="BTC", size=Decimal("1"),
                             price=Decimal("1"), loss=Decimal("40")),
            DepositEvent(timestamp=ts, amount=Decimal("1000"), token="USDC"),
        ],
        from_timestamp=ts,
        to_timestamp=ts + timedelta(minutes=2),
    )

    daily = PnLCalculator().calculate_daily(timeline)

    assert [(d.date, d.pnl, d.cumulative_pnl) for d in daily] == [
        ("2024-03-05", Decimal("4.5"), Decimal("4.5")),
        ("2024-03-06", Decimal("-40"), Decimal("-35.5")),
    ]


def test_daily_empty_timeline():
    assert PnLCalculator().calculate_daily(build([])) == []


def test_unrealized_skips_bad_entries(user_state):
    assert PnLCalculator().calculate_unrealized_from_state(user_state) == Decimal("12.5")


def test_unrealized_sums_positions():
    state = {
        "assetPositions": [
            {"position": {"unrealizedPnl": "1.25"}},
            {"position": {"unrealizedPnl": "-0.5"}},
            {"position": {}},
            {"position": {"unrealizedPnl": 3}},
            {},
            "junk",
        ]
    }
    assert PnLCalculator().calculate_unrealized_from_state(state) == Decimal("0.75")


def test_unrealized_malformed_snapshot_is_zero():
    calculator = PnLCalculator()
    assert calculator.calculate_unrealized_from_state({}) == Decimal(0)
    assert calculator.calculate_unrealized_from_state({"assetPositions": "nope"}) == Decimal(0)
    assert calculator.calculate_unrealized_from_state(None) == Decimal(0)
    assert calculator.calculate_unrealized_from_state([]) == Decimal(0)


def test_sums_are_exact_across_magnitudes():
    timeline = build([
        fill(1000, coin="BTC", fee="0", closed_pnl="1e20"),
        fill(2000, coin="ETH", fee="0", closed_pnl="1e-10"),
        fill(3000, coin="BTC", fee="0", closed_pnl="-1e20"),
    ])
    calculator = PnLCalculator()

    summary = calculator.calculate_summary("0xabc", timeline, Decimal(0))

    assert summary.realized_pnl == Decimal("1e-10")
    assert summary.net_pnl == Decimal("1e-10")
    assert summary.by_asset["BTC"].realized_pnl == Decimal(0)
    assert summary.by_asset["ETH"].realized_pnl == Decimal("1e-10")

    daily = calculator.calculate_daily(timeline)
    assert len(daily) == 1
    assert daily[0].pnl == Decimal("1e-10")
    assert daily[0].cumulative_pnl == Decimal("1e-10")


def test_huge_exponent_fee_does_not_overflow():
    timeline = build([fill(1000, fee="1e1000000")])
    assert len(timeline.events) == 1
    calculator = PnLCalculator()

    summary = calculator.calculate_summary("0xabc", timeline, Decimal(0))

    assert summary.trading_fees == Decimal("1e1000000")
    assert summary.net_pnl == Decimal("-1e1000000")
    assert summary.by_asset["BTC"].net_pnl == Decimal("-1e1000000")

    daily = calculator.calculate_daily(timeline)
    assert daily[0].pnl == Decimal("-1e1000000")
    assert daily[0].cumulative_pnl == Decimal("-1e1000000")
