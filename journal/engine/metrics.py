"""Strategy adherence and capital ratios."""

from journal.schemas.strategy import StrategyRead
from journal.schemas.trade import TradeRead
from journal.utils.numbers import to_number


def rules_followed_pct(trade: TradeRead, strategy: StrategyRead | None) -> float | None:
    """Share of the strategy's rules the trade applied, in percent.

    None ("not applicable") when there is no strategy or it has no rules.
    """
    if strategy is None:
        return None
    total_rules = len(strategy.open_position_rules) + len(strategy.close_position_rules)
    if total_rules == 0:
        return None
    followed = len(trade.applied_open_rules) + len(trade.applied_close_rules)
    return followed / total_rules * 100


def capital_pct(amount: float, capital: str | None) -> float | None:
    """amount as a percentage of the starting capital; None without usable capital."""
    base = to_number(capital)
    if not base:
        return None
    return amount / base * 100
