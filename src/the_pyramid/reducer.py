# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
reducer.py — dispatch(): the single entry point that changes a game.

    new_state, outcome = dispatch(state, action, rng=random, now=None)

Copy-on-write: the incoming state is deep-copied, the action is applied to
the copy, and the copy is returned only if the action succeeded.  On any
denial the caller gets back the very object it passed in, untouched, plus
an Outcome naming the reason.

Gates, in order:
  ResetGame           always allowed
  game over           everything else denied (GameOver)
  resting             only AdvanceTime allowed (Resting)
"""
import math
import random
import time

from . import config
from .actions import (
    Action, AdvanceTime, AttemptCoup, BuyProduct, CollectMoney, ForceGameOver,
    Invest, MoveUp, ResetGame, Rest, RestockDownstream, SellDownstream,
    StartMarketing, UpgradeCharisma, UpgradeEnergy, UpgradeInventory,
    UpgradeRecruiting,
)
from .coup import attempt_coup
from .day_cycle import advance_time
from .graph import PLAYER_OWNED
from .investment import invest, tier_index
from .marketing import start_event
from .outcomes import Outcome, Reason
from .state import finish_game, log_event, new_game
from .trade import buy_product, restock_downstream, sell_downstream


def _need_energy(state, amount: int, what: str):
    if state.player.energy < amount:
        return Outcome.denied(Reason.INSUFFICIENT_ENERGY,
                              f"{what} needs {amount} energy, have {state.player.energy}")
    return None


def _need_money(state, amount: float, what: str):
    if state.player_money < amount:
        return Outcome.denied(Reason.INSUFFICIENT_FUNDS,
                              f"{what} costs ${amount:,.0f}, have ${state.player_money:,.0f}")
    return None


def _check_top(state) -> None:
    if state.pyramid.root_id == state.pyramid.player_id:
        log_event(state, "👑 NEW ROOT — you sit at the top of the pyramid")
        finish_game(state, True, "you reached the top of the pyramid")


# ══════════════════════════════════════════════════════════════════════════
# Handlers — each mutates the private copy and returns an Outcome
# ══════════════════════════════════════════════════════════════════════════

def _advance_time(state, action, rng, now):
    if action.hours < 1:
        return Outcome.denied(Reason.INVALID_AMOUNT, "Advance by at least one hour")
    advance_time(state, action.hours, rng, now)
    return Outcome.success(f"Advanced {action.hours}h", day=state.day, hour=state.hour)


def _attempt_coup(state, action, rng, now):
    pyramid = state.pyramid
    you     = pyramid.player_id
    parent  = pyramid.parent_of(you)
    if parent is None:
        return Outcome.denied(Reason.NOT_DIRECT_UPLINE, "Nobody is above you")
    result = attempt_coup(pyramid, you, parent.id, action.amount, rng, now)
    if not result.ok:
        return result
    state.stats['coups_attempted'] += 1
    if result.detail['success']:
        state.stats['coups_succeeded'] += 1
        log_event(state, f"⚔ COUP — {result.message}")
        _check_top(state)
    else:
        log_event(state, f"🛡 {result.message}")
    return result


def _invest(state, action, rng, now):
    pyramid = state.pyramid
    tier    = tier_index(state.player_level)
    result  = invest(pyramid, pyramid.player_id, action.target_id, action.amount, tier)
    if result.ok:
        state.stats['investments'] += 1
        log_event(state, f"💰 {result.message}")
    return result


def _move_up(state, action, rng, now):
    pyramid = state.pyramid
    you     = pyramid.player_id
    parent  = pyramid.parent_of(you)
    if parent is None:
        return Outcome.denied(Reason.NOT_DIRECT_UPLINE, "Nobody is above you")
    denied = _need_energy(state, config.MOVE_UP_ENERGY, "Moving up")
    if denied:
        return denied
    target_level = pyramid.level_of(parent.id)
    required = math.ceil((config.LEVELS - 1 - target_level) * config.MOVE_UP_RECRUIT_FACTOR)
    if state.player.recruits < required:
        return Outcome.denied(Reason.INSUFFICIENT_RECRUITS,
                              f"Level {target_level} needs {required} recruits, "
                              f"have {state.player.recruits}", required=required)
    swapped, _ = pyramid.rewire_swap(you, parent.id)
    if not swapped:
        return Outcome.denied(Reason.SELF_SWAP, "Could not swap positions")
    state.player.energy   -= config.MOVE_UP_ENERGY
    state.player.recruits -= required
    log_event(state, f"⬆ You moved up past {parent.name} to level {target_level}")
    _check_top(state)
    return Outcome.success(f"Moved up to level {target_level}",
                           level=target_level, recruits_spent=required)


def _collect_money(state, action, rng, now):
    denied = _need_energy(state, config.COLLECT_ENERGY, "Collecting")
    if denied:
        return denied
    total = 0.0
    for node in state.pyramid.nodes.values():
        if node.control == PLAYER_OWNED and node.money > 0:
            total += node.money
            node.money = 0
    state.player_node.money += total
    state.player.energy     -= config.COLLECT_ENERGY
    state.pyramid.touch()
    log_event(state, f"💵 Collected ${total:,.0f} from your network")
    return Outcome.success(f"Collected ${total:,.0f}", collected=total)


def _upgrade_charisma(state, action, rng, now):
    cost = state.player.charisma * config.CHARISMA_COST_PER_LEVEL
    denied = _need_money(state, cost, "Charisma upgrade")
    if denied:
        return denied
    state.player_node.money -= cost
    state.player.charisma   += 1
    return Outcome.success(f"Charisma → {state.player.charisma}", cost=cost)


def _upgrade_recruiting(state, action, rng, now):
    cost = state.player.recruiting_power * config.RECRUITING_COST_PER_LEVEL
    denied = _need_money(state, cost, "Recruiting upgrade")
    if denied:
        return denied
    state.player_node.money       -= cost
    state.player.recruiting_power += 1
    return Outcome.success(f"Recruiting power → {state.player.recruiting_power}", cost=cost)


def _upgrade_energy(state, action, rng, now):
    if state.player.energy >= config.MAX_ENERGY:
        return Outcome.denied(Reason.ENERGY_FULL, "Energy is already full")
    denied = _need_money(state, config.ENERGY_PRICE, "Energy")
    if denied:
        return denied
    state.player_node.money -= config.ENERGY_PRICE
    state.player.energy = min(config.MAX_ENERGY,
                              state.player.energy + config.ENERGY_PER_PURCHASE)
    return Outcome.success(f"Energy → {state.player.energy}", cost=config.ENERGY_PRICE)


def _upgrade_inventory(state, action, rng, now):
    node = state.player_node
    cost = node.max_inventory * config.INVENTORY_COST_PER_SLOT
    denied = _need_money(state, cost, "Inventory upgrade")
    if denied:
        return denied
    node.money         -= cost
    node.max_inventory += config.INVENTORY_UPGRADE_STEP
    return Outcome.success(f"Inventory capacity → {node.max_inventory}", cost=cost)


def _rest(state, action, rng, now):
    if action.hours < 1:
        return Outcome.denied(Reason.INVALID_AMOUNT, "Rest for at least one hour")
    lo, hi = config.REST_RECOVERY_RANGE
    player = state.player
    player.recovery     = lo + rng.random() * (hi - lo)
    player.is_resting   = True
    player.rest_started = state.total_hours
    player.rest_until   = state.total_hours + action.hours
    log_event(state, f"😴 Resting for {action.hours}h ({player.recovery:.0%} recovery)")
    return Outcome.success(f"Resting for {action.hours}h", rest_until=player.rest_until)


def _buy_product(state, action, rng, now):
    denied = _need_energy(state, config.PRODUCT_BUY_ENERGY, "Buying stock")
    if denied:
        return denied
    result = buy_product(state.pyramid, state.pyramid.player_id, action.product_id, action.qty)
    if result.ok:
        state.player.energy -= config.PRODUCT_BUY_ENERGY
        record = state.player.product_purchases[action.product_id]
        record['weekly'] += action.qty
        record['total']  += action.qty
    return result


def _sell_downstream(state, action, rng, now):
    result = sell_downstream(state.pyramid, state.pyramid.player_id,
                             action.target_id, action.product_id, action.qty)
    if result.ok:
        state.player.total_sales_downstream += action.qty
        state.pyramid.touch()
    return result


def _restock_downstream(state, action, rng, now):
    denied = _need_energy(state, config.RESTOCK_ENERGY, "Restocking")
    if denied:
        return denied
    result = restock_downstream(state.pyramid, state.pyramid.player_id,
                                action.target_id, action.product_id, action.qty)
    if result.ok:
        state.player.energy -= config.RESTOCK_ENERGY
        state.pyramid.touch()
    return result


def _start_marketing(state, action, rng, now):
    result = start_event(state.player, state.player_node, action.tier,
                         action.investment, state.next_event_id())
    if result.ok:
        state.marketing_events.append(result.detail['event'])
        log_event(state, result.message)
    return result


def _force_game_over(state, action, rng, now):
    finish_game(state, action.is_winner, "the game was ended")
    return Outcome.success("Game over", is_winner=action.is_winner)


_HANDLERS = {
    AdvanceTime:       _advance_time,
    AttemptCoup:       _attempt_coup,
    Invest:            _invest,
    MoveUp:            _move_up,
    CollectMoney:      _collect_money,
    UpgradeCharisma:   _upgrade_charisma,
    UpgradeRecruiting: _upgrade_recruiting,
    UpgradeEnergy:     _upgrade_energy,
    UpgradeInventory:  _upgrade_inventory,
    Rest:              _rest,
    BuyProduct:        _buy_product,
    SellDownstream:    _sell_downstream,
    RestockDownstream: _restock_downstream,
    StartMarketing:    _start_marketing,
    ForceGameOver:     _force_game_over,
}

# Clock advances are not counted as player turns
_UNTIMED = (AdvanceTime, ForceGameOver)


# ══════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════

def dispatch(state, action: Action, rng=random, now: float = None) -> tuple:
    """Apply *action* to a copy of *state*; return (state', Outcome)."""
    if now is None:
        now = time.time()
    if isinstance(action, ResetGame):
        return new_game(rng), Outcome.success("New game")

    handler = _HANDLERS.get(type(action))
    if handler is None:
        return state, Outcome.denied(Reason.UNKNOWN_ACTION,
                                     f"Unknown action {type(action).__name__}")
    if state.game_over:
        return state, Outcome.denied(Reason.GAME_OVER, "The game is over")
    if state.player.is_resting and not isinstance(action, AdvanceTime):
        return state, Outcome.denied(Reason.RESTING, "You are resting")

    work    = state.clone()
    outcome = handler(work, action, rng, now)
    if not outcome.ok:
        return state, outcome
    if not isinstance(action, _UNTIMED):
        work.turns += 1
    return work, outcome
