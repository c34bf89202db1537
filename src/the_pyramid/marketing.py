# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
marketing.py — Layer 6: time-boxed recruitment campaigns.

A campaign is started by the player (start_event), counts down in simulated
hours (tick_events), and is resolved at the next day boundary after it runs
out (resolve_event): every successful Bernoulli trial becomes one new
player-owned node directly beneath the player.

Tiers (config.MARKETING_TIERS)
──────────────────────────────
  social-media   24 h   cheap, likely, few attempts
  home-party     48 h
  workshop      168 h   expensive, unlikely, many attempts, bonus recruits
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from . import config
from .outcomes import Outcome, Reason


@dataclass
class MarketingEvent:
    event_id:        str
    tier:            str
    name:            str
    remaining_hours: float
    total_hours:     float
    chance:          float    # per-attempt success chance before investment
    max_attempts:    int
    investment:      float = 0

    @property
    def finished(self) -> bool:
        return self.remaining_hours <= 0


# ── Parameters ─────────────────────────────────────────────────────────────

def event_params(tier: str, charisma: int, reputation: int, recruiting_power: int = 1) -> tuple:
    """(chance, max_attempts) for a campaign started with these stats."""
    cfg    = config.MARKETING_TIERS[tier]
    chance = (cfg['base'] + charisma * cfg['per_charisma']
              + max(0, recruiting_power - 1) * config.MARKETING_RECRUITING_BONUS)
    chance = min(config.MARKETING_BASE_CHANCE_CAP,
                 chance + reputation * config.MARKETING_REPUTATION_BONUS)
    return chance, cfg['attempts'] + charisma // 2


def effective_attempts(event: MarketingEvent) -> int:
    return event.max_attempts + math.floor(event.investment * config.MARKETING_ATTEMPTS_MULTIPLIER)


def effective_chance(event: MarketingEvent) -> float:
    boost = min(config.MARKETING_SUCCESS_BOOST_CAP,
                event.investment * config.MARKETING_SUCCESS_MULTIPLIER)
    return min(config.MARKETING_CHANCE_CAP, event.chance + boost)


# ── Lifecycle ──────────────────────────────────────────────────────────────

def start_event(player, player_node, tier: str, investment: float, event_id: str) -> Outcome:
    """Validate and pay for a campaign.  The new event rides in detail['event']."""
    cfg = config.MARKETING_TIERS.get(tier)
    if cfg is None:
        return Outcome.denied(Reason.NOT_FOUND, f"No marketing tier {tier!r}")
    if investment and not (config.MARKETING_MIN_INVESTMENT <= investment
                           <= config.MARKETING_MAX_INVESTMENT):
        return Outcome.denied(Reason.INVALID_AMOUNT,
                              f"Investment must be 0 or ${config.MARKETING_MIN_INVESTMENT}"
                              f"-${config.MARKETING_MAX_INVESTMENT}")
    if player.energy < cfg['energy']:
        return Outcome.denied(Reason.INSUFFICIENT_ENERGY,
                              f"{cfg['name']} needs {cfg['energy']} energy")
    if player_node.money < investment:
        return Outcome.denied(Reason.INSUFFICIENT_FUNDS,
                              f"Need ${investment:,.0f} to back the campaign")

    chance, attempts = event_params(tier, player.charisma, player.reputation,
                                    player.recruiting_power)
    event = MarketingEvent(event_id, tier, cfg['name'], cfg['hours'], cfg['hours'],
                           chance, attempts, investment or 0)
    player.energy     -= cfg['energy']
    player_node.money -= investment or 0
    return Outcome.success(f"📣 Started {cfg['name']} for {cfg['hours']}h", event=event)


def tick_events(events: list, hours: float) -> None:
    for event in events:
        event.remaining_hours -= hours


def generate_results(event: MarketingEvent, rng) -> int:
    """Count successful recruitment attempts, plus workshop bonus recruits."""
    chance    = effective_chance(event)
    successes = 0
    for _ in range(effective_attempts(event)):
        if rng.random() < chance:
            successes += 1

    if event.tier == 'workshop':
        pending = successes
        while pending:
            bonus = 0
            for _ in range(pending):
                if rng.random() < config.WORKSHOP_BONUS_CHANCE:
                    bonus += 1
            successes += bonus
            pending = bonus if config.WORKSHOP_BONUS_CHAINING else 0
    return successes


def resolve_event(pyramid, player, event: MarketingEvent, rng) -> list:
    """Turn an event's successes into player-owned nodes under the player."""
    from .graph import PLAYER_OWNED, spawn_node

    successes = generate_results(event, rng)
    player_id = pyramid.player_id
    if pyramid.level_of(player_id) + 1 > config.MAX_LEVEL:
        return []
    recruits = []
    for _ in range(successes):
        if len(pyramid.nodes) >= config.MAX_NODES:
            break
        node = spawn_node(pyramid, player_id, PLAYER_OWNED, rng)
        recruits.append(node.id)
    player.recruits += len(recruits)
    return recruits
