# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
metrics.py — Per-day metrics logger for headless pyramid runs.

Writes one row per simulated day plus discrete events to CSV files under
*output_dir*, and appends a one-line run summary on finalize().
"""

import csv
import os
import time
from pathlib import Path

from .economy import gini_coefficient


class MetricsLogger:
    """Collects per-day simulation metrics and writes them to CSV."""

    def __init__(self, seed: int, output_dir: str = "data"):
        self.seed       = seed
        self.output_dir = output_dir
        Path(output_dir).mkdir(parents=True, exist_ok=True)

        self.metrics_path  = os.path.join(output_dir, f"metrics_seed_{seed}.csv")
        self._events_path  = os.path.join(output_dir, f"events_seed_{seed}.csv")
        self._metrics_fh   = open(self.metrics_path, 'w', newline='', encoding='utf-8')
        self._events_fh    = open(self._events_path, 'w', newline='', encoding='utf-8')
        self._metrics_writer = csv.writer(self._metrics_fh)
        self._events_writer  = csv.writer(self._events_fh)

        self._metrics_writer.writerow([
            'seed', 'day', 'nodes', 'version', 'root',
            'player_money', 'player_energy', 'player_recruits', 'player_level',
            'coups_attempted', 'coups_succeeded', 'investments',
            'units_sold', 'sales_revenue', 'gini',
        ])
        self._events_writer.writerow(['seed', 'day', 'event_type', 'detail'])
        self._metrics_fh.flush()
        self._events_fh.flush()

        self.days_recorded   = 0
        self._peak_nodes     = 0
        self._best_level     = None
        self._gini_values    = []
        self.start_time      = time.time()

    # ── Recording ─────────────────────────────────────────────────────────

    def record_day(self, state) -> None:
        pyramid = state.pyramid
        gini    = gini_coefficient(n.money for n in pyramid.nodes.values())
        level   = state.player_level
        self._metrics_writer.writerow([
            self.seed, state.day, len(pyramid.nodes), pyramid.version,
            pyramid.nodes[pyramid.root_id].name,
            round(state.player_money, 2), state.player.energy,
            state.player.recruits, level,
            state.stats['coups_attempted'], state.stats['coups_succeeded'],
            state.stats['investments'], state.stats['units_sold'],
            state.stats['sales_revenue'], gini,
        ])
        self._metrics_fh.flush()
        self.days_recorded += 1
        self._peak_nodes    = max(self._peak_nodes, len(pyramid.nodes))
        self._best_level    = level if self._best_level is None else min(self._best_level, level)
        self._gini_values.append(gini)

    def record_event(self, day: int, event_type: str, detail: str = "") -> None:
        self._events_writer.writerow([self.seed, day, event_type, detail])
        self._events_fh.flush()

    # ── Summary & cleanup ─────────────────────────────────────────────────

    def finalize(self, state) -> None:
        """Append this run's headline numbers to run_summaries.csv."""
        summary_path = os.path.join(self.output_dir, "run_summaries.csv")
        file_exists  = os.path.isfile(summary_path)
        mean_gini = (round(sum(self._gini_values) / len(self._gini_values), 4)
                     if self._gini_values else 0.0)
        with open(summary_path, 'a', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            if not file_exists:
                writer.writerow([
                    'seed', 'days', 'final_nodes', 'peak_nodes',
                    'best_player_level', 'final_player_money',
                    'coups_attempted', 'coups_succeeded', 'investments',
                    'units_sold', 'mean_gini', 'game_over', 'is_winner',
                    'reason', 'wall_clock_seconds',
                ])
            writer.writerow([
                self.seed, self.days_recorded, len(state.pyramid.nodes),
                self._peak_nodes, self._best_level, round(state.player_money, 2),
                state.stats['coups_attempted'], state.stats['coups_succeeded'],
                state.stats['investments'], state.stats['units_sold'],
                mean_gini, state.game_over, state.is_winner,
                state.game_over_reason, round(time.time() - self.start_time, 2),
            ])

    def close(self) -> None:
        """Flush and close the CSV handles.  Call after finalize()."""
        for fh in (self._metrics_fh, self._events_fh):
            if not fh.closed:
                fh.flush()
                fh.close()
