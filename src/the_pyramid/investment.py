# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
investment.py — Layer 3: the investment engine.

Capital placed by one node into another is recorded in the target's investor
ledger and raises its power (and so its coup odds).  Investors are paid
INVESTMENT_ROI × stake when the target wins a coup, and a proportional share
of its settled income every day.

Denial ladder for can_invest (first failure wins):
  SelfInvestment → DirectUpline → DirectDownline → UplineCannotInvest → TierTooLow

The tier gate applies only when a tier index is supplied (player investments).
"""
import math

from . import config
from .economy import power
from .outcomes import Outcome, Reason


def tier_index(level: int) -> int:
    """Rank earned by sitting at *level*; climbing one level unlocks one tier."""
    return max(0, min(len(config.TIERS) - 1, len(config.TIERS) - 1 - level))


def required_tier(level: int) -> int:
    return config.INVESTMENT_TIER_REQUIREMENTS.get(level, 0)


def can_invest(pyramid, investor_id, target_id, player_tier=None) -> Outcome:
    investor = pyramid.get(investor_id)
    target   = pyramid.get(target_id)
    if investor is None or target is None:
        return Outcome.denied(Reason.NOT_FOUND)
    if investor_id == target_id:
        return Outcome.denied(Reason.SELF_INVESTMENT, "Cannot invest in yourself")
    if investor.parent_id == target_id:
        return Outcome.denied(Reason.DIRECT_UPLINE,
                              "Your direct upline already profits from you")
    if target.parent_id == investor_id:
        return Outcome.denied(Reason.DIRECT_DOWNLINE,
                              "You already profit from your direct downline")
    if pyramid.is_upline_of(investor_id, target_id):
        return Outcome.denied(Reason.UPLINE_CANNOT_INVEST,
                              f"{target.name} is in your downline; you already profit from them")
    if pyramid.is_upline_of(target_id, investor_id):
        return Outcome.denied(Reason.UPLINE_CANNOT_INVEST,
                              f"{target.name} is in your upline")
    if player_tier is not None:
        level = pyramid.level_of(target_id)
        need  = required_tier(level)
        if player_tier < need:
            tier_name = config.TIERS[need]
            return Outcome.denied(Reason.TIER_TOO_LOW,
                                  f"Requires {tier_name} rank to invest in Level {level} nodes",
                                  required_tier=tier_name)
    return Outcome.success()


def max_investment(pyramid, target_id, investor_id) -> int:
    target   = pyramid.nodes[target_id]
    existing = target.investors.get(investor_id, 0)
    return max(0, math.floor(power(target) * config.INVESTMENT_CAP_FRACTION) - existing)


def invest(pyramid, investor_id, target_id, amount: float, player_tier=None) -> Outcome:
    """Move *amount* from investor to target's ledger; all-or-nothing."""
    allowed = can_invest(pyramid, investor_id, target_id, player_tier)
    if not allowed.ok:
        return allowed
    if amount <= 0:
        return Outcome.denied(Reason.INVALID_AMOUNT, "Investment must be positive")

    investor = pyramid.nodes[investor_id]
    target   = pyramid.nodes[target_id]
    if investor.money < amount:
        return Outcome.denied(Reason.INSUFFICIENT_FUNDS,
                              f"Need ${amount:,.0f}, have ${investor.money:,.0f}")
    cap = max_investment(pyramid, target_id, investor_id)
    if amount > cap:
        return Outcome.denied(Reason.EXCEEDS_CAP,
                              f"At most ${cap:,.0f} more can go into {target.name}",
                              cap=cap)

    investor.money -= amount
    target.investments_received += amount
    target.investors[investor_id] = target.investors.get(investor_id, 0) + amount
    return Outcome.success(f"{investor.name} invested ${amount:,.0f} in {target.name}",
                           investor=investor_id, target=target_id, amount=amount)
