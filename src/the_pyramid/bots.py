# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
bots.py — Layer 4: autonomous agent policy.

Every non-player node carries a profile from config.BOT_PROFILES.  A profile
is a bundle of multipliers over the base rates plus a target preference:

  coup_mult        × BOT_COUP_CHANCE_PER_TICK     chance to consider a coup
  min_coup_odds                                    refuse worse odds (percent)
  invest_mult      × BOT_INVEST_CHANCE_PER_TICK   chance to consider investing
  invest_pct_mult  × BOT_INVEST_PERCENT           stake size
  savings_mult                                     caution: raises money gates
  target           none | siblings | high_power | high_income | threatened

Call order each day (see day_cycle.py):
  bot_tick(pyramid, id, rng, now)   — income, coup decision, invest decision
  ai_expansion(pyramid, rng)        — AI nodes recruit prospects and grow
"""
import math

from . import config
from .coup import attempt_coup
from .economy import coup_chance, coup_cost, downline_income, power, upline_skim
from .investment import can_invest, invest


def _pick(rng, seq):
    return seq[min(len(seq) - 1, int(rng.random() * len(seq)))]


# ── Profiles ──────────────────────────────────────────────────────────────

def profile_band(level: int) -> str:
    if level <= 2:
        return 'top'
    if level <= 5:
        return 'middle'
    return 'bottom'


def select_profile(level: int, rng) -> str:
    """Weighted draw from the level band's profile table."""
    weights = config.LEVEL_PROFILE_WEIGHTS[profile_band(level)]
    ticket  = rng.random() * sum(weights.values())
    for key, weight in weights.items():
        ticket -= weight
        if ticket <= 0:
            return key
    return 'opportunist'


def profile_of(node) -> dict:
    return config.BOT_PROFILES.get(node.profile, config.BOT_PROFILES['opportunist'])


# ── Target selection ──────────────────────────────────────────────────────

def investment_candidates(pyramid, bot_id) -> list:
    return [nid for nid in pyramid.nodes
            if nid != bot_id and can_invest(pyramid, bot_id, nid).ok]


def _top_pick(pyramid, bot_id, rng, key):
    candidates = investment_candidates(pyramid, bot_id)
    if not candidates:
        return None
    candidates.sort(key=lambda nid: key(pyramid.nodes[nid]), reverse=True)
    return _pick(rng, candidates[:config.TOP_CANDIDATES])


def _sibling_pick(pyramid, bot_id, rng):
    siblings = pyramid.siblings(bot_id)
    return _pick(rng, siblings) if siblings else None


def _threatened_pick(pyramid, bot_id, rng):
    ready = []
    for nid in investment_candidates(pyramid, bot_id):
        parent = pyramid.parent_of(nid)
        if parent is None:
            continue
        if coup_chance(pyramid.nodes[nid], parent) >= config.THREATENED_COUP_ODDS:
            ready.append(nid)
    if ready:
        return _pick(rng, ready)
    return _sibling_pick(pyramid, bot_id, rng)


def select_target(pyramid, bot_id, preference: str, rng):
    if preference == 'high_power':
        return _top_pick(pyramid, bot_id, rng, power)
    if preference == 'high_income':
        return _top_pick(pyramid, bot_id, rng, lambda n: n.income)
    if preference == 'threatened':
        return _threatened_pick(pyramid, bot_id, rng)
    return _sibling_pick(pyramid, bot_id, rng)


# ══════════════════════════════════════════════════════════════════════════
# Per-bot tick
# ══════════════════════════════════════════════════════════════════════════

def bot_tick(pyramid, bot_id, rng, now: float) -> list:
    """One day of decisions for one bot.

    Returns a list of (kind, Outcome) pairs for the actions it actually took,
    kind being 'coup' or 'invest'.
    """
    bot = pyramid.get(bot_id)
    if bot is None or bot.is_player:
        return []
    profile = profile_of(bot)
    actions = []

    earned = bot.income + downline_income(pyramid, bot_id) - upline_skim(pyramid, bot_id)
    bot.money += max(0.0, earned)

    # ── Coup decision ─────────────────────────────────────────────────────
    if (bot.parent_id is not None
            and rng.random() < config.BOT_COUP_CHANCE_PER_TICK * profile['coup_mult']):
        parent = pyramid.nodes[bot.parent_id]
        cost   = coup_cost(bot, parent)
        chance = coup_chance(bot, parent)
        gate   = cost * config.BOT_COUP_MONEY_BUFFER * profile['savings_mult']
        if bot.money >= gate and chance >= profile['min_coup_odds']:
            extra  = math.floor(bot.money * config.BOT_COUP_EXTRA_INVEST)
            result = attempt_coup(pyramid, bot_id, parent.id, extra, rng, now)
            if result.ok:
                actions.append(('coup', result))

    # ── Investment decision (independent draw) ────────────────────────────
    min_money = config.BOT_MIN_INVEST_MONEY * profile['savings_mult']
    if (rng.random() < config.BOT_INVEST_CHANCE_PER_TICK * profile['invest_mult']
            and bot.money > min_money):
        target_id = select_target(pyramid, bot_id, profile['target'], rng)
        if target_id is not None:
            amount = math.floor(bot.money * config.BOT_INVEST_PERCENT
                                * profile['invest_pct_mult'])
            if amount > config.BOT_MIN_INVEST_AMOUNT:
                result = invest(pyramid, bot_id, target_id, amount)
                if result.ok:
                    actions.append(('invest', result))

    return actions


# ══════════════════════════════════════════════════════════════════════════
# AI expansion
# ══════════════════════════════════════════════════════════════════════════

def ai_expansion(pyramid, rng) -> list:
    """AI nodes recruit one unowned child each and sometimes grow below it.

    Only nodes that were AI-controlled when the pass started act, so a node
    promoted this pass waits until the next day.  Returns log lines.
    """
    from .graph import AI_CONTROLLED, UNOWNED, spawn_node

    lines  = []
    levels = pyramid.levels()
    acting = [n.id for n in pyramid.nodes.values() if n.control == AI_CONTROLLED]
    for ai_id in acting:
        ai = pyramid.get(ai_id)
        if ai is None or ai.control != AI_CONTROLLED:
            continue
        prospects = [c for c in ai.child_ids if pyramid.nodes[c].control == UNOWNED]
        if not prospects or rng.random() >= config.AI_NODE_RECRUIT_CHANCE:
            continue
        recruit_id = _pick(rng, prospects)
        pyramid.set_control(recruit_id, AI_CONTROLLED)
        lines.append(f"🤖 {ai.name} recruited {pyramid.nodes[recruit_id].name}")

        if rng.random() >= config.AI_NODE_EXPANSION_CHANCE:
            continue
        new_level = levels.get(recruit_id, pyramid.level_of(recruit_id)) + 1
        if new_level > config.MAX_LEVEL:
            continue
        count = 1 + int(rng.random() * config.AI_EXPANSION_MAX_NEW)
        for _ in range(min(count, config.AI_EXPANSION_MAX_NEW)):
            if len(pyramid.nodes) >= config.MAX_NODES:
                break
            fresh = spawn_node(pyramid, recruit_id, UNOWNED, rng)
            lines.append(f"🌱 {fresh.name} joined under {pyramid.nodes[recruit_id].name} "
                         f"at level {new_level}")
    return lines
