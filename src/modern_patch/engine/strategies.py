"""Pure helpers for running layered fallback chains.

A chain is an ordered list of (name, callable) pairs. Each callable
returns a StrategyResult; the first SUCCESS or HARD_FAILURE ends the
chain, TRY_NEXT moves on.
"""

import logging
from typing import Any, Callable, Sequence

from modern_patch.models.result_models import StrategyOutcome, StrategyResult

logger = logging.getLogger(__name__)

Strategy = tuple[str, Callable[[], StrategyResult]]


def succeed(strategy: str, value: Any = None, detail: str = "") -> StrategyResult:
    return StrategyResult(outcome=StrategyOutcome.SUCCESS, strategy=strategy, value=value, detail=detail)


def try_next(strategy: str, detail: str = "") -> StrategyResult:
    return StrategyResult(outcome=StrategyOutcome.TRY_NEXT, strategy=strategy, detail=detail)


def hard_failure(strategy: str, detail: str = "") -> StrategyResult:
    return StrategyResult(outcome=StrategyOutcome.HARD_FAILURE, strategy=strategy, detail=detail)


def run_chain(strategies: Sequence[Strategy]) -> StrategyResult:
    """Run strategies in order until one succeeds or fails hard.

    Args:
        strategies: Ordered (name, callable) pairs.

    Returns:
        The deciding StrategyResult. When every strategy asks to try the
        next one, a TRY_NEXT result from the last strategy is returned
        (or an "exhausted" TRY_NEXT for an empty chain).
    """
    last = try_next("exhausted", "no strategies to run")
    for name, strategy in strategies:
        last = strategy()
        logger.debug("Strategy %s -> %s %s", name, last.outcome.value, last.detail)
        if last.outcome != StrategyOutcome.TRY_NEXT:
            return last
    return last
