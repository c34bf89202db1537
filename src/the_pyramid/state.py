# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
state.py — The whole game as one value.

GameState bundles the pyramid, the player's stats, the clock, running
campaigns and the event log.  dispatch() deep-copies it before every action,
so nothing in here may hold a reference that must survive a copy (open
files, the rng, wall-clock sources).

The player's wallet and stock live on the player-position node;
GameState.player_money / player_inventory are the read side.
"""
import copy

from . import config
from .graph import generate_pyramid


class PlayerStats:
    def __init__(self):
        self.energy            = config.STARTING_ENERGY
        self.recruits          = 0
        self.charisma          = 1
        self.recruiting_power  = 1
        self.reputation        = 1
        self.is_resting        = False
        self.rest_until        = 0     # absolute simulated hour
        self.rest_started      = 0
        self.recovery          = 0.0
        self.total_sales_random     = 0
        self.total_sales_downstream = 0
        self.product_purchases = {pid: {'weekly': 0, 'total': 0, 'rank': None}
                                  for pid in config.PRODUCTS}


class GameState:
    def __init__(self, pyramid, player=None):
        self.pyramid                 = pyramid
        self.player                  = player or PlayerStats()
        self.day                     = 1
        self.hour                    = config.START_HOUR
        self.turns                   = 0
        self.marketing_events: list  = []
        self.last_daily_energy_bonus = None   # wall-clock seconds
        self.game_over               = False
        self.is_winner               = False
        self.game_over_reason        = ''
        self.event_log: list         = []
        self.log_count               = 0      # lines ever logged, pruning aside
        self.stats = {
            'coups_attempted':  0,
            'coups_succeeded':  0,
            'investments':      0,
            'units_sold':       0,
            'sales_revenue':    0,
            'recruits_gained':  0,
        }
        self._event_seq = 0

    # ── Convenience views ─────────────────────────────────────────────────

    @property
    def player_node(self):
        return self.pyramid.player

    @property
    def player_money(self) -> float:
        return self.player_node.money

    @property
    def player_inventory(self) -> dict:
        return self.player_node.inventory

    @property
    def player_level(self) -> int:
        return self.pyramid.level_of(self.pyramid.player_id)

    @property
    def total_hours(self) -> int:
        return self.day * config.HOURS_PER_DAY + self.hour

    def next_event_id(self) -> str:
        self._event_seq += 1
        return f"marketing_{self._event_seq}"

    def clone(self) -> 'GameState':
        return copy.deepcopy(self)


def log_event(state: GameState, msg: str) -> None:
    """Stamp, record and echo one narrative line."""
    line = f"Day {state.day:03d} {state.hour:02d}:00: {msg}"
    state.event_log.append(line)
    state.log_count += 1
    if len(state.event_log) > config.EVENT_LOG_MAX:
        del state.event_log[:-config.EVENT_LOG_MAX]
    print(line)


def finish_game(state: GameState, is_winner: bool, reason: str) -> None:
    if state.game_over:
        return
    state.game_over        = True
    state.is_winner        = is_winner
    state.game_over_reason = reason
    banner = '🏆 GAME OVER — YOU WIN' if is_winner else '💀 GAME OVER'
    log_event(state, f"{banner}: {reason}")


def new_game(rng) -> GameState:
    pyramid = generate_pyramid(rng)
    state   = GameState(pyramid)
    state.player_node.inventory = {pid: config.STARTING_PRODUCT_UNITS
                                   for pid in config.PRODUCTS}
    you = state.player_node
    log_event(state, f"🔺 Welcome to the pyramid — you start at level "
                     f"{state.player_level} with ${you.money:,.0f} "
                     f"({len(pyramid.nodes)} members)")
    return state
