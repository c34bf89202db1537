# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
sim.py — Headless runner for the pyramid simulation.

Run with:  python -m the_pyramid --days 60 --seed 7 --autopilot

Layer architecture
──────────────────
  Layer 0 · graph       — nodes, edges, traversal, swap surgery, generation
  Layer 1 · economy     — power, coup cost/chance, downline income, payouts
  Layer 2 · coup        — precondition ladder, roll, swap or protection
  Layer 3 · investment  — ledger, caps, tier gate
  Layer 4 · bots        — profiles, coup/invest decisions, AI expansion
  Layer 5 · trade       — supplier restock, trading, sales, commission
  Layer 6 · marketing   — recruitment campaigns
  Layer 7 · day_cycle   — orchestrates 1-6 once per simulated midnight
  reducer               — dispatch(state, action): the only way in
  report                — plotly charts of a finished run (--report)

The clock is simulated: every hour advanced moves the injected wall clock by
config.SECONDS_PER_HOUR, so cooldowns behave as they would in real time.
"""

import argparse
import pathlib
import random
import sys
from datetime import datetime

from . import config
from .actions import (
    AdvanceTime, AttemptCoup, BuyProduct, CollectMoney, MoveUp, Rest,
    StartMarketing, UpgradeEnergy,
)
from .economy import coup_chance
from .metrics import MetricsLogger
from .reducer import dispatch
from .report import write_report
from .snapshot import write_snapshot
from .state import new_game


# ══════════════════════════════════════════════════════════════════════════
# Logging — event log to file; headline events on the terminal
# ══════════════════════════════════════════════════════════════════════════

class _EventTee:
    """Full event log to file; the terminal gets headline events only.

    Event lines look like "Day 012 00:00: ⚔ COUP — ...".  The emoji after the
    stamp decides whether a line is headline news; everything else is only
    counted, and the counts are printed with the final summary.
    """

    # Event-log prefixes worth showing live
    _HEADLINES = ('⚔', '👑', '🛡', '📣', '⬆', '📅', '🏆', '💀', '⚠', '[Simulation')

    passthrough: bool = False   # True → show everything (final summary)

    def __init__(self, log_fh, terminal):
        self._log     = log_fh
        self._term    = terminal
        self._pending = ''
        self.hidden: dict = {}

    @staticmethod
    def _message(line: str) -> str:
        if line.startswith('Day ') and ': ' in line:
            return line.split(': ', 1)[1]
        return line.strip()

    def write(self, text: str) -> None:
        self._log.write(text)
        self._log.flush()
        self._pending += text
        while '\n' in self._pending:
            line, self._pending = self._pending.split('\n', 1)
            msg = self._message(line)
            if self.passthrough or msg.startswith(self._HEADLINES):
                self._term.write(line + '\n')
                self._term.flush()
            elif msg:
                tag = msg.split(' ', 1)[0]
                self.hidden[tag] = self.hidden.get(tag, 0) + 1

    def hidden_summary(self) -> str:
        top = sorted(self.hidden.items(), key=lambda kv: -kv[1])[:6]
        return '  '.join(f"{tag}×{count}" for tag, count in top)

    def flush(self) -> None:
        self._log.flush()

    def fileno(self) -> int:
        return self._term.fileno()


# ══════════════════════════════════════════════════════════════════════════
# Autopilot — a simple greedy player for unattended runs
# ══════════════════════════════════════════════════════════════════════════

def autopilot(state, now: float) -> list:
    """Actions worth trying this morning, most valuable first."""
    pyramid = state.pyramid
    you     = pyramid.player
    player  = state.player
    plan    = []

    parent = pyramid.parent_of(you.id)
    if parent is not None and now >= parent.protected_until:
        if coup_chance(you, parent) >= 50:
            plan.append(AttemptCoup(0))
        plan.append(MoveUp())
    if not state.marketing_events:
        tier = 'home-party' if player.energy >= 8 else 'social-media'
        plan.append(StartMarketing(tier, 0))
    plan.append(CollectMoney())
    if player.energy <= 3 and state.player_money >= config.ENERGY_PRICE * 2:
        plan.append(UpgradeEnergy())
    if you.stock() < 3 and player.energy > config.PRODUCT_BUY_ENERGY + 2:
        cheapest = min(config.PRODUCTS, key=lambda pid: config.PRODUCTS[pid]['cost'])
        plan.append(BuyProduct(cheapest, 5))
    if player.energy <= 1:
        plan.append(Rest(8))
    return plan


# ══════════════════════════════════════════════════════════════════════════
# Runner
# ══════════════════════════════════════════════════════════════════════════

def _parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Headless runner for the pyramid simulation')
    parser.add_argument('--days', type=int, default=30,
                        help='Simulated days to run (default: 30)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for a reproducible run')
    parser.add_argument('--autopilot', action='store_true',
                        help='Let a greedy policy play the player each morning')
    parser.add_argument('--metrics-dir', type=str, default=None,
                        help='Write per-day CSV metrics into this directory')
    parser.add_argument('--snapshot', type=str, default=None,
                        help='Refresh a JSON snapshot at this path every day')
    parser.add_argument('--report', type=str, default=None,
                        help='Write an HTML chart of the run here (needs --metrics-dir)')
    return parser.parse_args(argv)


def run(argv=None) -> None:
    args = _parse_args(argv)
    seed = args.seed if args.seed is not None else random.randrange(1_000_000)
    rng  = random.Random(seed)

    if hasattr(sys.stdout, 'reconfigure'):
        sys.stdout.reconfigure(encoding='utf-8')

    # ── Set up file logging ────────────────────────────────────────────────
    pathlib.Path('logs').mkdir(exist_ok=True)
    _ts       = datetime.now().strftime('%Y%m%d_%H%M%S')
    _log_path = f'logs/run_{_ts}.txt'
    _log_fh   = open(_log_path, 'w', encoding='utf-8')
    _real     = sys.stdout
    _tee      = _EventTee(_log_fh, _real)
    sys.stdout = _tee

    _real.write(f"Log → {_log_path}\n")
    _real.write(f"Running {args.days}-day pyramid (seed {seed})  "
                f"(coups / recruits / weeks show below)\n\n")

    metrics = MetricsLogger(seed, args.metrics_dir) if args.metrics_dir else None
    state   = new_game(rng)
    clock   = 0.0

    try:
        for _ in range(args.days):
            if state.game_over:
                break
            if args.autopilot:
                for action in autopilot(state, clock):
                    state, _ = dispatch(state, action, rng, clock)
                    if state.game_over:
                        break
            if state.game_over:
                break

            logged  = state.log_count
            state, _ = dispatch(state, AdvanceTime(config.HOURS_PER_DAY), rng, clock)
            clock += config.HOURS_PER_DAY * config.SECONDS_PER_HOUR

            if metrics:
                metrics.record_day(state)
                fresh = min(state.log_count - logged, len(state.event_log))
                for entry in state.event_log[len(state.event_log) - fresh:]:
                    for kw in ('COUP', 'RECRUITED', 'NEW ROOT', 'GAME OVER'):
                        if kw in entry:
                            metrics.record_event(state.day, kw, entry)
            if args.snapshot:
                write_snapshot(state, args.snapshot)

            _real.write(f"  [Day {state.day:3d}]  Money:${state.player_money:>10,.0f}  "
                        f"Energy:{state.player.energy:2d}  "
                        f"Recruits:{state.player.recruits:3d}  "
                        f"Level:{state.player_level}  "
                        f"Nodes:{len(state.pyramid.nodes)}\n")
            _real.flush()

    except KeyboardInterrupt:
        print("\n\n[Simulation interrupted by user]\n")

    finally:
        _real.write('\n')
        _tee.passthrough = True
        if _tee.hidden:
            print(f"Quiet events: {_tee.hidden_summary()}")
        print(f"Final: day {state.day}, level {state.player_level}, "
              f"${state.player_money:,.0f}, {state.player.recruits} recruits, "
              f"{state.stats['coups_succeeded']}/{state.stats['coups_attempted']} coups won")
        if state.game_over:
            print(f"Result: {'WIN' if state.is_winner else 'LOSS'} — {state.game_over_reason}")
        if metrics:
            metrics.finalize(state)
            metrics.close()
            if args.report:
                print(f"Report → {write_report(metrics.metrics_path, args.report)}")
        sys.stdout = _real
        _log_fh.close()
        print(f"\nFull log saved → {_log_path}")


# ══════════════════════════════════════════════════════════════════════════
if __name__ == '__main__':
    run()
