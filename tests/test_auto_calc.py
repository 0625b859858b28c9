"""Tests for the result formula, the debouncer and the auto-calculator session."""

import asyncio

import pytest

from journal.engine.auto_calc import CalcMode, ResultAutoCalculator, calculate_result
from journal.engine.debounce import Debouncer

DELAY = 0.01


async def _quiet(periods: int = 5):
    await asyncio.sleep(DELAY * periods)


# ---------------------------------------------------------------------------
# 1. calculate_result
# ---------------------------------------------------------------------------

class TestCalculateResult:
    def test_long_profit(self):
        assert calculate_result("100", "150", "10", "10", "buy") == "500.00"

    def test_short_loss(self):
        assert calculate_result("100", "150", "10", "10", "sell") == "-500.00"

    def test_short_profit(self):
        assert calculate_result(100, 90, 5, None, "sell") == "50.00"

    def test_falls_back_to_quantity(self):
        assert calculate_result("100", "101.5", "", "4") == "6.00"

    def test_rounds_to_two_decimals(self):
        assert calculate_result("0.1", "0.2", "3") == "0.30"

    def test_zero_is_not_negative(self):
        assert calculate_result("100", "100", "5", None, "sell") == "0.00"

    @pytest.mark.parametrize("entry, exit_, qty", [
        ("", "150", "10"),
        ("100", None, "10"),
        ("100", "150", None),
        ("abc", "150", "10"),
    ])
    def test_incomplete_inputs(self, entry, exit_, qty):
        assert calculate_result(entry, exit_, qty) is None


# ---------------------------------------------------------------------------
# 2. Debouncer
# ---------------------------------------------------------------------------

class TestDebouncer:
    @pytest.mark.asyncio
    async def test_only_last_trigger_runs(self):
        calls = []
        debouncer = Debouncer(calls.append, DELAY)

        for value in range(5):
            debouncer.trigger(value)
        assert debouncer.pending is True

        await _quiet()
        assert calls == [4]
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_async_function(self):
        calls = []

        async def record(value):
            calls.append(value)

        debouncer = Debouncer(record, DELAY)
        debouncer.trigger("x")
        await _quiet()
        assert calls == ["x"]

    @pytest.mark.asyncio
    async def test_separate_bursts_each_run(self):
        calls = []
        debouncer = Debouncer(calls.append, DELAY)

        debouncer.trigger(1)
        await _quiet()
        debouncer.trigger(2)
        await _quiet()
        assert calls == [1, 2]

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_call(self):
        calls = []
        debouncer = Debouncer(calls.append, DELAY)

        debouncer.trigger(1)
        assert debouncer.cancel() is True
        assert debouncer.cancel() is False
        await _quiet()
        assert calls == []

    @pytest.mark.asyncio
    async def test_close_refuses_new_triggers(self):
        calls = []
        debouncer = Debouncer(calls.append, DELAY)

        debouncer.trigger(1)
        debouncer.close()
        await _quiet()
        assert calls == []
        assert debouncer.closed is True
        with pytest.raises(RuntimeError):
            debouncer.trigger(2)

    @pytest.mark.asyncio
    async def test_failing_call_is_logged(self, caplog):
        def boom():
            raise ValueError("bad input")

        debouncer = Debouncer(boom, DELAY)
        debouncer.trigger()
        await _quiet()
        assert "failed" in caplog.text

    def test_negative_delay(self):
        with pytest.raises(ValueError):
            Debouncer(print, -1)


# ---------------------------------------------------------------------------
# 3. ResultAutoCalculator
# ---------------------------------------------------------------------------

class TestResultAutoCalculator:
    @pytest.mark.asyncio
    async def test_burst_of_edits_computes_once(self):
        pushed = []
        calc = ResultAutoCalculator(on_result=pushed.append, delay=DELAY)

        calc.update(entry_price="100", quantity="10")
        calc.update(sell_price="1")
        calc.update(sell_price="15")
        calc.update(sell_price="150")
        await _quiet()

        assert pushed == ["500.00"]
        assert calc.result == "500.00"
        assert calc.mode is CalcMode.AUTO

    @pytest.mark.asyncio
    async def test_direction_change_recomputes(self):
        pushed = []
        calc = ResultAutoCalculator(
            fields={"entry_price": "100", "sell_price": "150", "quantity": "10"},
            on_result=pushed.append,
            delay=DELAY,
        )
        calc.update(position_type="sell")
        await _quiet()
        assert pushed == ["-500.00"]

    @pytest.mark.asyncio
    async def test_async_callback(self):
        pushed = []

        async def push(value):
            pushed.append(value)

        calc = ResultAutoCalculator(on_result=push, delay=DELAY)
        calc.update(entry_price="10", sell_price="12", quantity="3")
        await _quiet()
        assert pushed == ["6.00"]

    @pytest.mark.asyncio
    async def test_incomplete_inputs_keep_previous_result(self):
        pushed = []
        calc = ResultAutoCalculator(result="42.00", on_result=pushed.append, delay=DELAY)
        calc.update(entry_price="100")
        await _quiet()
        assert pushed == []
        assert calc.result == "42.00"

    @pytest.mark.asyncio
    async def test_unchanged_values_do_not_trigger(self):
        calc = ResultAutoCalculator(fields={"entry_price": "100"}, delay=DELAY)
        calc.update(entry_price="100")
        assert calc.pending is False

    @pytest.mark.asyncio
    async def test_manual_edit_stops_auto_calculation(self):
        pushed = []
        calc = ResultAutoCalculator(on_result=pushed.append, delay=DELAY)

        calc.update(entry_price="100", sell_price="150", quantity="10")
        calc.mark_manual("99.99")
        await _quiet()
        assert pushed == []
        assert calc.result == "99.99"

        calc.update(sell_price="200")
        assert calc.pending is False
        await _quiet()
        assert calc.mode is CalcMode.MANUAL
        assert calc.result == "99.99"

    @pytest.mark.asyncio
    async def test_reset_returns_to_auto(self):
        pushed = []
        calc = ResultAutoCalculator(on_result=pushed.append, delay=DELAY)
        calc.mark_manual("1.00")

        calc.reset({"entry_price": "10", "quantity": "2"})
        assert calc.mode is CalcMode.AUTO
        assert calc.result == ""

        calc.update(sell_price="15")
        await _quiet()
        assert pushed == ["10.00"]

    @pytest.mark.asyncio
    async def test_close_drops_pending_computation(self):
        pushed = []
        calc = ResultAutoCalculator(on_result=pushed.append, delay=DELAY)
        calc.update(entry_price="100", sell_price="150", quantity="10")
        calc.close()
        await _quiet()
        assert pushed == []

    def test_unknown_field(self):
        calc = ResultAutoCalculator(delay=DELAY)
        with pytest.raises(ValueError):
            calc.update(rating=3)
