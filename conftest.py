"""
conftest.py — shared pytest fixtures for the pyramid test suite
================================================================
Provides a scripted random source and a small hand-built hierarchy:

    P (root)
    └── D
        ├── A
        │   ├── C1
        │   └── C2
        ├── S1
        └── S2
"""

import pytest

from the_pyramid import config
from the_pyramid.graph import AI_CONTROLLED, PLAYER_POSITION, Node, Pyramid


class ScriptedRng:
    """Stands in for the ``random`` module: returns queued values, then *default*."""

    def __init__(self, *values, default=0.5):
        self._values = list(values)
        self.default = default
        self.calls   = 0

    def random(self) -> float:
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self.default


def build_pyramid(parents: dict, player=None, money=None) -> Pyramid:
    """Build a Pyramid from an ordered {node_id: parent_id} mapping."""
    pyramid = Pyramid()
    for nid, parent_id in parents.items():
        node = Node(nid, nid, AI_CONTROLLED, profile='grinder', money=0.0, income=0.0)
        pyramid.add(node)
        if parent_id is None:
            pyramid.root_id = nid
        else:
            node.parent_id = parent_id
            pyramid.nodes[parent_id].child_ids.append(nid)
    if player is not None:
        pyramid.nodes[player].control = PLAYER_POSITION
        pyramid.nodes[player].profile = None
        pyramid.player_id = player
    for nid, amount in (money or {}).items():
        pyramid.nodes[nid].money = amount
    return pyramid


SMALL_TREE = {
    'P': None,
    'D': 'P',
    'A': 'D',
    'S1': 'D',
    'S2': 'D',
    'C1': 'A',
    'C2': 'A',
}


@pytest.fixture
def small_tree():
    return build_pyramid(SMALL_TREE, player='C2')


@pytest.fixture
def rng_zero():
    return ScriptedRng(default=0.0)


@pytest.fixture
def rng_high():
    return ScriptedRng(default=0.999)


@pytest.fixture(autouse=True)
def _restore_config():
    """Let tests poke config constants without leaking into each other."""
    saved = {k: v for k, v in vars(config).items() if k.isupper()}
    yield
    for k, v in saved.items():
        setattr(config, k, v)
