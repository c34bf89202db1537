# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
day_cycle.py — Layer 7: the tick orchestrator.

advance_time(state, hours, rng, now) moves the simulated clock and runs one
full day pass for every midnight it crosses.  Order within a day matters;
each step reads what the previous one wrote:

  1. daily energy bonus        (throttled by wall clock)
  2. income settlement         dividends to investors, player's daily income
  3. bot AI                    every non-player node, once
  4. AI expansion              recruit prospects, grow the graph
  5. inventory trading         supplier restock, parent → child sales
  6. retail sales              deepest first, 20 % commission one hop up
  7. marketing resolution      campaigns whose hours have run out
  8. weekly ranks              only when a 7-day boundary is crossed

After the last day: rest completion, then the out-of-energy loss check.
Mutates *state* in place; dispatch() hands it a private copy.
"""
import math

from . import config
from .bots import ai_expansion, bot_tick
from .economy import downline_income, investor_payouts, upline_skim
from .marketing import resolve_event, tick_events
from .state import finish_game, log_event
from .trade import inventory_trading, run_sales, supplier_restock, weekly_ranks


# ══════════════════════════════════════════════════════════════════════════
# Day steps
# ══════════════════════════════════════════════════════════════════════════

def _energy_bonus(state, now: float) -> None:
    last = state.last_daily_energy_bonus
    if last is not None and now - last < config.DAILY_BONUS_THROTTLE_SECS:
        return
    before = state.player.energy
    state.player.energy = min(config.MAX_ENERGY, before + config.DAILY_ENERGY_BONUS)
    state.last_daily_energy_bonus = now
    if state.player.energy > before:
        log_event(state, f"☀ New day — +{state.player.energy - before} energy "
                         f"({state.player.energy}/{config.MAX_ENERGY})")


def _settle_income(state) -> None:
    pyramid = state.pyramid
    dividends: dict = {}
    for node in pyramid.nodes.values():
        if node.investments_received <= 0:
            continue
        settled = node.income + downline_income(pyramid, node.id)
        if settled <= 0:
            continue
        for inv_id, amount in investor_payouts(node, settled).items():
            dividends[inv_id] = dividends.get(inv_id, 0.0) + amount
    for inv_id, amount in dividends.items():
        investor = pyramid.get(inv_id)
        if investor is not None:
            investor.money += amount

    pid  = pyramid.player_id
    earn = (state.player.recruits * config.INCOME_PER_RECRUIT
            + downline_income(pyramid, pid) - upline_skim(pyramid, pid))
    state.player_node.money += max(0.0, earn)


def _run_bots(state, rng, now: float) -> None:
    pyramid = state.pyramid
    for bot_id in [nid for nid in pyramid.nodes if nid != pyramid.player_id]:
        for kind, result in bot_tick(pyramid, bot_id, rng, now):
            d = result.detail
            if kind == 'invest':
                state.stats['investments'] += 1
                if d['target'] == pyramid.player_id:
                    log_event(state, f"💰 {result.message} — you")
                continue
            state.stats['coups_attempted'] += 1
            if d.get('success'):
                state.stats['coups_succeeded'] += 1
                log_event(state, f"⚔ COUP — {result.message}")
                if d.get('new_root'):
                    log_event(state, f"👑 NEW ROOT — {pyramid.nodes[d['new_root']].name} "
                                     f"now tops the pyramid")
                if d['defender'] == pyramid.player_id:
                    finish_game(state, False,
                                f"{pyramid.nodes[d['attacker']].name} BOUGHT OUT your position")
                    return
            elif d['defender'] == pyramid.player_id:
                log_event(state, f"🛡 {result.message} — you held on")


def _run_trade(state, rng) -> None:
    pyramid = state.pyramid
    supplier_restock(pyramid, rng)
    inventory_trading(pyramid, rng)
    summary = run_sales(pyramid, rng, state.player.charisma)
    state.stats['units_sold']    += summary['units']
    state.stats['sales_revenue'] += summary['revenue']
    state.player.total_sales_random += summary['player_units']
    if summary['player_units'] or summary['player_commission']:
        log_event(state, f"🛒 You sold {summary['player_units']} units "
                         f"(+${summary['player_revenue']:,}) and earned "
                         f"${summary['player_commission']:,} commission")


def _resolve_marketing(state, rng) -> None:
    done = [e for e in state.marketing_events if e.finished]
    if not done:
        return
    state.marketing_events = [e for e in state.marketing_events if not e.finished]
    for event in done:
        new_ids = resolve_event(state.pyramid, state.player, event, rng)
        state.stats['recruits_gained'] += len(new_ids)
        names = ', '.join(state.pyramid.nodes[n].name for n in new_ids) or 'nobody'
        log_event(state, f"📣 {event.name} finished — RECRUITED {len(new_ids)} ({names})")


def run_day(state, rng, now: float, week_crossed: bool) -> None:
    _energy_bonus(state, now)
    _settle_income(state)
    _run_bots(state, rng, now)
    if state.game_over:
        return
    for line in ai_expansion(state.pyramid, rng):
        log_event(state, line)
    _run_trade(state, rng)
    _resolve_marketing(state, rng)
    if week_crossed:
        week = (state.day - 1) // config.DAYS_PER_WEEK
        log_event(state, f"📅 WEEK {week} complete")
        for line in weekly_ranks(state.player):
            log_event(state, line)


# ══════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════

def complete_rest(state) -> None:
    player = state.player
    if not player.is_resting or state.total_hours < player.rest_until:
        return
    rested = player.rest_until - player.rest_started
    gain   = min(config.MAX_ENERGY - player.energy,
                 math.ceil(rested * player.recovery * config.REST_ENERGY_SCALE))
    gain   = max(0, gain)
    player.energy     += gain
    player.is_resting  = False
    log_event(state, f"😴 Rest finished after {rested}h — +{gain} energy")


def check_exhaustion(state) -> None:
    player = state.player
    if (player.energy <= 0 and state.player_money < config.ENERGY_PRICE
            and not player.is_resting):
        finish_game(state, False, "out of energy and too broke to buy more")


def advance_time(state, hours: int, rng, now: float) -> None:
    end_total = state.total_hours + hours
    end_day, end_hour = divmod(end_total, config.HOURS_PER_DAY)
    ticked = 0

    while state.day < end_day and not state.game_over:
        # Campaigns only age up to this midnight before it is resolved
        step = config.HOURS_PER_DAY - state.hour
        tick_events(state.marketing_events, step)
        ticked += step
        state.day += 1
        state.hour = 0
        week_crossed = (state.day - 1) % config.DAYS_PER_WEEK == 0
        run_day(state, rng, now, week_crossed)

    tick_events(state.marketing_events, hours - ticked)
    state.day, state.hour = end_day, end_hour
    complete_rest(state)
    check_exhaustion(state)
