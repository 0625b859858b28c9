"""Result auto-calculator for the trade close form.

Keeps the displayed result in sync with entry price, exit price, quantity
and direction until the user edits the result by hand. Recomputation is
debounced so a burst of keystrokes produces a single calculation.
"""

from enum import Enum
import inspect
import logging
from typing import Any, Callable

from journal.config import settings
from journal.engine.debounce import Debouncer
from journal.utils.numbers import to_number

logger = logging.getLogger(__name__)

WATCHED_FIELDS = ("entry_price", "sell_price", "quantity_sold", "quantity", "position_type")


def calculate_result(
    entry_price,
    sell_price,
    quantity_sold=None,
    quantity=None,
    position_type: str = "buy",
) -> str | None:
    """Profit/loss as text with two decimals, or None if inputs are incomplete.

    Uses quantity_sold, falling back to quantity when it is empty. A sell
    (short) position profits when the exit price is below the entry price.
    """
    entry = to_number(entry_price)
    exit_ = to_number(sell_price)
    qty = to_number(quantity_sold)
    if qty is None:
        qty = to_number(quantity)
    if entry is None or exit_ is None or qty is None:
        return None

    multiplier = 1 if position_type == "buy" else -1
    result = (exit_ - entry) * qty * multiplier
    if result == 0:
        result = 0.0  # avoid "-0.00"
    return f"{result:.2f}"


class CalcMode(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


class ResultAutoCalculator:
    """One editing session of the close form's result field.

    Starts in AUTO mode. Any change to a watched field schedules a
    recomputation after the quiet period. Editing the result directly
    (``mark_manual``) switches to MANUAL for the rest of the session;
    only ``reset`` returns to AUTO.
    """

    def __init__(
        self,
        fields: dict[str, Any] | None = None,
        result: str = "",
        on_result: Callable[[str], Any] | None = None,
        delay: float | None = None,
    ):
        if delay is None:
            delay = settings.result_debounce_ms / 1000
        self.fields: dict[str, Any] = _initial_fields()
        self.fields.update(_watched(fields or {}))
        self.result = result
        self.mode = CalcMode.AUTO
        self.on_result = on_result
        self._debouncer = Debouncer(self._recompute, delay)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def update(self, **changes) -> None:
        """Record field edits; schedules a recomputation while in AUTO mode."""
        unknown = set(changes) - set(WATCHED_FIELDS)
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")
        changed = {k: v for k, v in changes.items() if self.fields.get(k) != v}
        self.fields.update(changed)
        if not changed or self.mode is CalcMode.MANUAL:
            return
        self._debouncer.trigger()

    def mark_manual(self, value: str | None = None) -> None:
        """The user took over the result field; stop auto-calculating."""
        self.mode = CalcMode.MANUAL
        self._debouncer.cancel()
        if value is not None:
            self.result = value

    def reset(self, fields: dict[str, Any] | None = None, result: str = "") -> None:
        """Start a new editing session (e.g. the form reopened for another trade)."""
        self._debouncer.cancel()
        self.fields = _initial_fields()
        self.fields.update(_watched(fields or {}))
        self.result = result
        self.mode = CalcMode.AUTO

    def close(self) -> None:
        """Tear the session down; a pending computation never runs."""
        self._debouncer.close()

    async def _recompute(self) -> None:
        if self.mode is CalcMode.MANUAL:
            return
        value = calculate_result(**self.fields)
        if value is None or value == self.result:
            return
        self.result = value
        logger.debug(f"Auto-calculated result {value}")
        if self.on_result is not None:
            outcome = self.on_result(value)
            if inspect.isawaitable(outcome):
                await outcome


def _watched(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if k in WATCHED_FIELDS}


def _initial_fields() -> dict[str, Any]:
    fields: dict[str, Any] = {name: None for name in WATCHED_FIELDS}
    fields["position_type"] = "buy"
    return fields
