"""Tests for strategy adherence, capital ratios and the history view."""

import logging

import pytest

from journal.engine.metrics import capital_pct, rules_followed_pct
from journal.schemas.strategy import StrategyRead, StrategyRule
from journal.schemas.trade import AppliedRule, CloseEvent, TradeRead
from journal.services.history import build_history, trade_detail


def _strategy(open_rules: int = 2, close_rules: int = 2) -> StrategyRead:
    return StrategyRead(
        id="s1",
        strategy_name="Breakout",
        open_position_rules=[StrategyRule(rule=f"open {i}") for i in range(open_rules)],
        close_position_rules=[StrategyRule(rule=f"close {i}") for i in range(close_rules)],
    )


def _trade(**overrides) -> TradeRead:
    fields = {
        "symbol_name": "AMD",
        "open_date": "2024-02-01",
        "entry_price": "100",
        "quantity": "10",
    }
    fields.update(overrides)
    return TradeRead(**fields)


def _applied(n: int) -> list[AppliedRule]:
    return [AppliedRule(id=str(i), rule=f"rule {i}") for i in range(n)]


# ---------------------------------------------------------------------------
# 1. Metrics
# ---------------------------------------------------------------------------

class TestRulesFollowed:
    def test_share_of_rules(self):
        trade = _trade(applied_open_rules=_applied(2), applied_close_rules=_applied(1))
        assert rules_followed_pct(trade, _strategy()) == pytest.approx(75)

    def test_no_rules_applied(self):
        assert rules_followed_pct(_trade(), _strategy()) == 0

    def test_without_strategy(self):
        assert rules_followed_pct(_trade(), None) is None

    def test_strategy_without_rules_is_not_applicable(self):
        assert rules_followed_pct(_trade(), _strategy(0, 0)) is None


class TestCapitalPct:
    def test_percentage(self):
        assert capital_pct(250, "10000") == pytest.approx(2.5)

    def test_negative_amount(self):
        assert capital_pct(-500, "10000") == pytest.approx(-5)

    @pytest.mark.parametrize("capital", [None, "", "0", "lots"])
    def test_unusable_capital(self, capital):
        assert capital_pct(100, capital) is None


# ---------------------------------------------------------------------------
# 2. History view
# ---------------------------------------------------------------------------

def test_trade_detail_carries_position():
    trade = _trade(close_events=[CloseEvent(date="2024-02-03", quantity_sold=4, sell_price=110, result=40)])
    detail = trade_detail(trade)
    assert detail.id == trade.id
    assert detail.position.remaining_quantity == 6
    assert detail.position.total_realized == 40
    assert detail.rules_followed_pct is None


def test_trade_detail_warns_when_oversold(caplog):
    trade = _trade(quantity_sold="5", close_events=[CloseEvent(date="2024-02-03", quantity_sold=8)])
    with caplog.at_level(logging.WARNING):
        detail = trade_detail(trade)
    assert detail.position.oversold is True
    assert "over-sold" in caplog.text


def test_build_history_splits_and_totals():
    open_trade = _trade(
        symbol_name="OPEN",
        close_events=[CloseEvent(date="2024-02-03", quantity_sold=2, sell_price=120, result=40)],
    )
    older = _trade(symbol_name="OLDER", close_date="2024-02-10", close_time="10:00", result="100")
    newer = _trade(
        symbol_name="NEWER",
        close_date="2024-02-12",
        close_time="10:00",
        result="-20.5",
        strategy_id="s1",
        applied_open_rules=_applied(1),
    )

    history = build_history([older, open_trade, newer], strategies={"s1": _strategy()}, capital="1000")

    assert [t.symbol_name for t in history.open_trades] == ["OPEN"]
    assert [t.symbol_name for t in history.closed_trades] == ["NEWER", "OLDER"]
    assert history.total == pytest.approx(119.5)
    assert history.capital == "1000"
    assert history.total_pct_of_capital == pytest.approx(11.95)
    assert history.closed_trades[0].rules_followed_pct == pytest.approx(25)
    assert history.closed_trades[1].rules_followed_pct is None


def test_build_history_without_capital():
    history = build_history([_trade(close_date="2024-02-10", close_time="10:00", result="5")])
    assert history.total == 5
    assert history.total_pct_of_capital is None
