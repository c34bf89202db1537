# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
snapshot.py — Read-only views of a game for anything outside the core.

graph_snapshot() flattens the pyramid into plain dicts and lists; the
version field is the only staleness signal a viewer needs (re-render in full
whenever it changes).  write_snapshot() serialises a whole game to JSON with
an atomic rename-swap so a reader never sees a half-written file.
"""

import json
import os
import pathlib

from .economy import power

SNAPSHOT_PATH: pathlib.Path = pathlib.Path("pyramid_snapshot.json")


def graph_snapshot(pyramid) -> dict:
    levels = pyramid.levels()
    nodes  = []
    for n in pyramid.nodes.values():
        nodes.append({
            'id':                   n.id,
            'name':                 n.name,
            'control':              n.control,
            'profile':              n.profile,
            'level':                levels.get(n.id),
            'money':                round(n.money, 2),
            'income':               round(n.income, 2),
            'investments_received': n.investments_received,
            'investors':            dict(n.investors),
            'power':                round(power(n), 2),
            'parent_id':            n.parent_id,
            'child_ids':            list(n.child_ids),
            'protected_until':      n.protected_until,
            'inventory':            dict(n.inventory),
            'max_inventory':        n.max_inventory,
        })
    return {
        'version':   pyramid.version,
        'root_id':   pyramid.root_id,
        'player_id': pyramid.player_id,
        'nodes':     nodes,
        'links':     [{'source': c, 'target': p} for c, p in pyramid.links()],
    }


def game_snapshot(state) -> dict:
    p = state.player
    return {
        'day':        state.day,
        'hour':       state.hour,
        'turns':      state.turns,
        'game_over':  state.game_over,
        'is_winner':  state.is_winner,
        'reason':     state.game_over_reason,
        'player': {
            'money':            round(state.player_money, 2),
            'energy':           p.energy,
            'recruits':         p.recruits,
            'charisma':         p.charisma,
            'recruiting_power': p.recruiting_power,
            'reputation':       p.reputation,
            'level':            state.player_level,
            'resting':          p.is_resting,
            'inventory':        dict(state.player_inventory),
            'products':         {k: dict(v) for k, v in p.product_purchases.items()},
        },
        'marketing':  [{'name': e.name, 'tier': e.tier,
                        'remaining_hours': e.remaining_hours}
                       for e in state.marketing_events],
        'stats':      dict(state.stats),
        'graph':      graph_snapshot(state.pyramid),
        'event_tail': state.event_log[-40:],
    }


def write_snapshot(state, path=None) -> pathlib.Path:
    """Serialise *state* to *path* atomically; returns the path written."""
    target = pathlib.Path(path) if path else SNAPSHOT_PATH
    tmp    = target.with_suffix('.tmp')
    tmp.write_text(json.dumps(game_snapshot(state), separators=(',', ':')),
                   encoding='utf-8')
    os.replace(tmp, target)
    return target
