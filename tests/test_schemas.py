"""Validation tests for trade, strategy and profile schemas."""

import pytest
from pydantic import ValidationError

from journal.schemas.profile import CapitalUpdate
from journal.schemas.strategy import StrategyCreate, StrategyRead, StrategyRule
from journal.schemas.trade import CloseEventCreate, TradeCreate, TradeRead


def _payload(**overrides) -> dict:
    data = {
        "symbol_name": " AAPL ",
        "position_type": "buy",
        "open_date": "2024-03-01",
        "open_time": "09:30",
        "entry_price": "100",
        "quantity": "10",
    }
    data.update(overrides)
    return data


class TestTradeCreate:
    def test_valid_trade_is_normalised(self):
        trade = TradeCreate(**_payload(entry_price=" 100.5 "))
        assert trade.symbol_name == "AAPL"
        assert trade.entry_price == "100.5"
        assert trade.close_date is None

    def test_numbers_may_be_sent_as_numbers(self):
        trade = TradeCreate(**_payload(entry_price=100, quantity=2.5))
        assert trade.entry_price == "100"
        assert trade.quantity == "2.5"

    def test_empty_optional_numbers_become_none(self):
        trade = TradeCreate(**_payload(sell_price="", result="  "))
        assert trade.sell_price is None
        assert trade.result is None

    @pytest.mark.parametrize("overrides", [
        {"symbol_name": "   "},
        {"position_type": "hold"},
        {"open_date": ""},
        {"open_date": "03/01/2024"},
        {"open_time": "9.30"},
        {"entry_price": "abc"},
        {"entry_price": "-1"},
        {"quantity": "0"},
        {"quantity": "nan"},
        {"quantity_sold": "11"},
        {"rating": 6},
    ])
    def test_rejects_invalid(self, overrides):
        with pytest.raises(ValidationError):
            TradeCreate(**_payload(**overrides))

    def test_accepts_iso_datetime_dates(self):
        trade = TradeCreate(**_payload(close_date="2024-03-05T15:00:00Z", close_time="15:00", result="10"))
        assert trade.close_date == "2024-03-05T15:00:00Z"


class TestCloseEventCreate:
    def test_defaults(self):
        event = CloseEventCreate(date="2024-03-05", quantity_sold=2, sell_price=105)
        assert event.time == "12:00"
        assert event.result is None

    @pytest.mark.parametrize("overrides", [
        {"quantity_sold": 0},
        {"sell_price": -1},
        {"date": "yesterday"},
        {"time": "noon"},
    ])
    def test_rejects_invalid(self, overrides):
        data = {"date": "2024-03-05", "quantity_sold": 2, "sell_price": 105}
        data.update(overrides)
        with pytest.raises(ValidationError):
            CloseEventCreate(**data)


class TestTradeRead:
    def test_null_json_columns_become_empty(self):
        trade = TradeRead(
            symbol_name="X",
            close_events=None,
            applied_open_rules=None,
            open_other_details=None,
        )
        assert trade.close_events == []
        assert trade.applied_open_rules == []
        assert trade.open_other_details == {}


class TestStrategySchemas:
    def test_rule_ids_are_generated(self):
        strategy = StrategyCreate(
            strategy_name="Pullback",
            open_position_rules=[{"rule": "Wait for retest"}],
            close_position_rules=[{"rule": "Trail stop", "priority": "high"}],
        )
        ids = {r.id for r in strategy.open_position_rules + strategy.close_position_rules}
        assert len(ids) == 2

    def test_duplicate_rule_ids_rejected(self):
        rule = StrategyRule(id="r1", rule="Same")
        with pytest.raises(ValidationError):
            StrategyCreate(strategy_name="Dup", open_position_rules=[rule], close_position_rules=[rule])

    def test_bad_priority_rejected(self):
        with pytest.raises(ValidationError):
            StrategyRule(rule="x", priority="urgent")

    def test_read_tolerates_null_rules(self):
        assert StrategyRead(strategy_name="Old", open_position_rules=None).open_position_rules == []


class TestCapitalUpdate:
    def test_trims(self):
        assert CapitalUpdate(capital=" 2500 ").capital == "2500"

    @pytest.mark.parametrize("capital", ["0", "-10", "lots", "inf"])
    def test_rejects(self, capital):
        with pytest.raises(ValidationError):
            CapitalUpdate(capital=capital)
