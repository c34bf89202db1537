# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
coup.py — Layer 2: the coup engine.

A node may try to buy out its direct parent.  One attempt walks

    Ineligible → Evaluated → Resolved{Success | Failure}

Preconditions (checked in this order, first failure wins):
  1. NotDirectUpline      — defender must be the attacker's parent
  2. AttackerOnCooldown   — attacker attempted a coup too recently
  3. TargetProtected      — defender survived a coup too recently
  4. InsufficientFunds    — money must cover cost + extra investment

The success chance is computed before any money leaves the attacker, so the
number quoted to the initiator is the number the roll is compared against.

Failure policy (config.FAILED_COUP_POLICY):
  redistribute   — ledger survives; the lost money is split evenly across
                   the attacker's own downline, arming them for a coup of
                   their own
  keep_ledger    — ledger survives; the money is simply gone
  forfeit_ledger — ledger and investments_received cleared; investors lose
"""
import math

from . import config
from .economy import coup_chance, coup_cost
from .outcomes import Outcome, Reason


def check_coup(pyramid, attacker_id, defender_id, amount: float, now: float) -> Outcome:
    """Run the precondition ladder without touching anything."""
    attacker = pyramid.get(attacker_id)
    defender = pyramid.get(defender_id)
    if attacker is None or defender is None:
        return Outcome.denied(Reason.NOT_FOUND)
    if amount < 0:
        return Outcome.denied(Reason.INVALID_AMOUNT, "Coup investment cannot be negative")
    if attacker.parent_id != defender_id:
        return Outcome.denied(Reason.NOT_DIRECT_UPLINE,
                              f"{defender.name} is not {attacker.name}'s direct upline")
    if now < attacker.attacker_cooldown_until:
        wait = attacker.attacker_cooldown_until - now
        return Outcome.denied(Reason.ATTACKER_ON_COOLDOWN,
                              f"{attacker.name} must wait {wait:.0f}s before another coup",
                              remaining=wait)
    if now < defender.protected_until:
        wait = defender.protected_until - now
        return Outcome.denied(Reason.TARGET_PROTECTED,
                              f"{defender.name} is protected for {wait:.0f}s",
                              remaining=wait)
    cost = coup_cost(attacker, defender)
    if attacker.money < cost + amount:
        return Outcome.denied(Reason.INSUFFICIENT_FUNDS,
                              f"Coup needs ${cost + amount:,.0f}, have ${attacker.money:,.0f}",
                              cost=cost, needed=cost + amount)
    return Outcome.success(cost=cost)


def attempt_coup(pyramid, attacker_id, defender_id, amount: float, rng, now: float) -> Outcome:
    """Resolve one coup in place.  Denials leave the pyramid untouched."""
    check = check_coup(pyramid, attacker_id, defender_id, amount, now)
    if not check.ok:
        return check

    attacker = pyramid.nodes[attacker_id]
    defender = pyramid.nodes[defender_id]
    cost     = check.detail['cost']
    chance   = coup_chance(attacker, defender, amount)
    spent    = cost + amount

    attacker.money -= spent
    attacker.attacker_cooldown_until = now + config.ATTACKER_COOLDOWN_SECS

    roll = rng.random() * 100
    detail = {
        'attacker': attacker_id, 'defender': defender_id,
        'cost': cost, 'investment': amount, 'spent': spent,
        'chance': chance, 'roll': roll,
    }

    if roll < chance:
        payouts = {}
        for inv_id, stake in attacker.investors.items():
            payout = math.floor(stake * config.INVESTMENT_ROI)
            investor = pyramid.get(inv_id)
            if investor is not None:
                investor.money += payout
            payouts[inv_id] = payout
        attacker.investors = {}
        attacker.investments_received = 0

        swapped, new_root = pyramid.rewire_swap(attacker_id, defender_id)
        if not swapped:
            return Outcome(False, Reason.SELF_SWAP,
                           "Coup won but the positions could not be swapped", detail)
        detail.update(payouts=payouts, new_root=new_root, success=True)
        return Outcome(True, None,
                       f"{attacker.name} bought out {defender.name} "
                       f"({roll:.1f} < {chance:.1f}%)", detail)

    defender.protected_until = now + config.DEFENDER_COOLDOWN_SECS
    detail['protected_until'] = defender.protected_until

    policy = config.FAILED_COUP_POLICY
    if policy == 'forfeit_ledger':
        detail['forfeited'] = dict(attacker.investors)
        attacker.investors = {}
        attacker.investments_received = 0
    elif policy == 'redistribute':
        downline = pyramid.descendants(attacker_id)
        share    = math.floor(spent / len(downline)) if downline else 0
        if share > 0:
            for did in downline:
                pyramid.nodes[did].money += share
        detail['redistributed'] = {'per_descendant': share, 'count': len(downline)}

    # A resolved-but-failed coup is still a completed action, not a denial.
    return Outcome(True, None,
                   f"{attacker.name} failed to buy out {defender.name} "
                   f"({roll:.1f} ≥ {chance:.1f}%)", dict(detail, success=False))
