"""Season statistics math: coercion, accumulation, reversal and standouts.

A statistics object is a dict of seven categories, each a flat dict of
numeric counters (see ``STAT_SCHEMA``). Every counter accumulates by sum
except ``kicking.longest_fg``, which accumulates by max. Spreadsheet columns
are named ``<category>_<counter>``.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

Number = int | float
Stats = Dict[str, Dict[str, Number]]

STAT_SCHEMA: Dict[str, Tuple[str, ...]] = {
    "passing": ("completions", "attempts", "yards", "touchdowns", "interceptions", "sacks", "fumbles"),
    "rushing": ("attempts", "yards", "touchdowns", "fumbles"),
    "receiving": ("receptions", "targets", "yards", "touchdowns"),
    "returns": ("returns", "yards", "touchdowns"),
    "defense": (
        "tackles",
        "tackles_for_loss",
        "sacks",
        "forced_fumbles",
        "interceptions",
        "passes_defended",
        "safeties",
        "touchdowns",
    ),
    "kicking": ("xp_made", "xp_attempts", "fg_made", "fg_attempts", "longest_fg"),
    "punting": ("punts", "yards"),
}

# (category, counter) pairs reduced with max instead of sum.
MAX_COUNTERS = frozenset({("kicking", "longest_fg")})


def stat_column(category: str, counter: str) -> str:
    """Spreadsheet column holding ``category.counter``."""
    return f"{category}_{counter}"


def to_number(value: Any) -> Number:
    """Coerce a cell value to a number; blanks and garbage become 0.

    Accepts a decimal comma ("1,5"). Integral values come back as ``int``.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return 0
        try:
            num = float(text)
        except ValueError:
            return 0
    if math.isnan(num) or math.isinf(num):
        return 0
    return int(num) if num.is_integer() else num


def empty_stats() -> Stats:
    return {category: {counter: 0 for counter in counters} for category, counters in STAT_SCHEMA.items()}


def _counter(stats: Optional[Mapping[str, Any]], category: str, counter: str) -> Number:
    if not isinstance(stats, Mapping):
        return 0
    block = stats.get(category)
    if not isinstance(block, Mapping):
        return 0
    return to_number(block.get(counter))


def coerce_game_stats(row: Mapping[str, Any]) -> Stats:
    """Build one game's statistics delta from a flat spreadsheet row."""
    return {
        category: {counter: to_number(row.get(stat_column(category, counter))) for counter in counters}
        for category, counters in STAT_SCHEMA.items()
    }


def _combine(
    current: Optional[Mapping[str, Any]],
    delta: Optional[Mapping[str, Any]],
    op: Callable[[Number, Number], Number],
    max_op: Callable[[Number, Number], Number],
) -> Stats:
    result: Stats = {}
    for category, counters in STAT_SCHEMA.items():
        block: Dict[str, Number] = {}
        for counter in counters:
            a = _counter(current, category, counter)
            b = _counter(delta, category, counter)
            block[counter] = max_op(a, b) if (category, counter) in MAX_COUNTERS else op(a, b)
        result[category] = block
    return result


def add_stats(current: Optional[Mapping[str, Any]], delta: Optional[Mapping[str, Any]]) -> Stats:
    """Apply one game's delta onto season totals."""
    return _combine(current, delta, lambda a, b: a + b, max)


def subtract_stats(current: Optional[Mapping[str, Any]], delta: Optional[Mapping[str, Any]]) -> Stats:
    """Revert a previously applied delta, flooring every counter at zero.

    ``longest_fg`` cannot be reverted from a delta, so the current value is kept.
    """
    return _combine(current, delta, lambda a, b: max(0, a - b), lambda a, _b: a)


def aggregate_team_stats(stats_list: Iterable[Optional[Mapping[str, Any]]]) -> Stats:
    """Sum the season stats of a roster."""
    total = empty_stats()
    for stats in stats_list:
        total = add_stats(total, stats)
    return total


def _best(
    entries: List[Dict[str, Any]],
    qualifies: Callable[[Mapping[str, Any]], bool],
    score: Callable[[Mapping[str, Any]], float],
) -> Optional[Dict[str, Any]]:
    best: Optional[Dict[str, Any]] = None
    best_score = 0.0
    for entry in entries:
        stats = entry.get("stats") or {}
        if not qualifies(stats):
            continue
        value = score(stats)
        # Strictly greater keeps the earliest entry on ties.
        if best is None or value > best_score:
            best, best_score = entry, value
    return best


def _leader(category: str, counter: str):
    def qualifies(stats: Mapping[str, Any]) -> bool:
        return _counter(stats, category, counter) > 0

    def score(stats: Mapping[str, Any]) -> float:
        return float(_counter(stats, category, counter))

    return qualifies, score


def _ratio(category: str, numerator: str, denominator: str):
    def qualifies(stats: Mapping[str, Any]) -> bool:
        return _counter(stats, category, denominator) > 0

    def score(stats: Mapping[str, Any]) -> float:
        return _counter(stats, category, numerator) / (_counter(stats, category, denominator) or 1)

    return qualifies, score


STANDOUT_RULES = {
    "offense": {
        "passer": _leader("passing", "touchdowns"),
        "rusher": _leader("rushing", "yards"),
        "receiver": _leader("receiving", "yards"),
    },
    "defense": {
        "tackler": _leader("defense", "tackles"),
        "pass_rusher": _leader("defense", "sacks"),
        "interceptor": _leader("defense", "interceptions"),
    },
    "specialists": {
        "kicker": _ratio("kicking", "fg_made", "fg_attempts"),
        "punter": _ratio("punting", "yards", "punts"),
        "returner": _leader("returns", "yards"),
    },
}


def find_standouts(entries: List[Dict[str, Any]]) -> Dict[str, Dict[str, Optional[Dict[str, Any]]]]:
    """Pick the standout player per role from roster entries carrying ``stats``.

    Kickers rank by field-goal percentage and punters by yards per punt;
    every other role ranks by its headline counter. Roles with no
    qualifying player are ``None``.
    """
    return {
        group: {role: _best(entries, qualifies, score) for role, (qualifies, score) in rules.items()}
        for group, rules in STANDOUT_RULES.items()
    }
