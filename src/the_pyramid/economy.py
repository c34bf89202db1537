# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
economy.py — Layer 1: pure economic calculators.

Nothing here mutates state.  Every multiplier is read from config at call
time so balance changes never touch the formulas.

  power(node)                        money + capitalised income + received capital
  coup_cost(attacker, defender)      integer price of a coup, never below the floor
  coup_chance(attacker, defender, x) success percent, clamped to [min, max]
  downline_income(pyramid, id)       share of every descendant's income
  upline_skim(pyramid, id)           share of own income paid upward
  investor_payouts(node, income)     proportional split of settled income
  ownership_percent(node, amount)    stake as a percent of received capital
  gini_coefficient(values)           inequality of node money, for metrics
"""
import math

from . import config


def power(node) -> float:
    return (node.money
            + node.income * config.POWER_INCOME_MULTIPLIER
            + node.investments_received * config.POWER_INVESTMENT_MULTIPLIER)


def coup_cost(attacker, defender) -> int:
    raw = (power(defender) * config.COUP_COST_MULTIPLIER
           - power(attacker) * config.COUP_POWER_REDUCTION)
    return max(config.COUP_MIN_COST, math.floor(raw))


def coup_chance(attacker, defender, extra_investment: float = 0) -> float:
    raw = (config.COUP_SUCCESS_BASE
           + (power(attacker) + extra_investment - power(defender))
           / config.COUP_POWER_SCALE)
    return max(config.COUP_MIN_CHANCE, min(config.COUP_MAX_CHANCE, raw))


def downline_income(pyramid, node_id) -> float:
    total = 0.0
    for did in pyramid.descendants(node_id):
        total += pyramid.nodes[did].income
    return total * config.DOWNLINE_INCOME_PERCENT


def upline_skim(pyramid, node_id) -> float:
    node = pyramid.nodes[node_id]
    if node.parent_id is None:
        return 0.0
    return node.income * config.UPLINE_SKIM_PERCENT


def investor_payouts(node, settled_income: float) -> dict:
    if node.investments_received <= 0:
        return {}
    return {inv_id: amount / node.investments_received * settled_income
            for inv_id, amount in node.investors.items()}


def ownership_percent(node, investment_amount: float) -> float:
    if node.investments_received <= 0:
        return 0.0
    return investment_amount / node.investments_received * 100


def gini_coefficient(values) -> float:
    """Gini of non-negative values (0 = equal, →1 = one node holds it all)."""
    vals = sorted(max(0.0, v) for v in values)
    n = len(vals)
    if n == 0:
        return 0.0
    total = sum(vals)
    if total == 0:
        return 0.0
    cum = sum((2 * (i + 1) - n - 1) * v for i, v in enumerate(vals))
    return round(cum / (n * total), 4)
