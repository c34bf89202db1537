"""
test_bots.py — pytest suite for the_pyramid.bots
=================================================
Covers: profile selection, target preferences, the per-bot daily tick
(income, coup decision, investment decision) and AI expansion.
"""

import pytest

from conftest import SMALL_TREE, ScriptedRng, build_pyramid
from the_pyramid import config
from the_pyramid.bots import (
    ai_expansion, bot_tick, investment_candidates, profile_band,
    select_profile, select_target,
)
from the_pyramid.graph import AI_CONTROLLED, UNOWNED


@pytest.fixture
def tree():
    return build_pyramid(SMALL_TREE, player='C2')


# ─────────────────────────────────────────────────────
# Profiles
# ─────────────────────────────────────────────────────

class TestProfiles:
    def test_bands(self):
        assert profile_band(0) == 'top'
        assert profile_band(2) == 'top'
        assert profile_band(3) == 'middle'
        assert profile_band(5) == 'middle'
        assert profile_band(6) == 'bottom'

    def test_low_draw_takes_first_entry(self):
        assert select_profile(0, ScriptedRng(0.0)) == 'grinder'

    def test_high_draw_takes_last_entry(self):
        assert select_profile(7, ScriptedRng(0.999)) == 'kingmaker'

    def test_every_draw_is_a_known_profile(self):
        for i in range(20):
            assert select_profile(4, ScriptedRng(i / 20)) in config.BOT_PROFILES


# ─────────────────────────────────────────────────────
# Target selection
# ─────────────────────────────────────────────────────

class TestSelectTarget:
    def test_candidates_skip_upline_and_downline(self, tree):
        assert sorted(investment_candidates(tree, 'A')) == ['S1', 'S2']

    def test_high_power_prefers_richest(self, tree):
        tree.nodes['S1'].money = 500
        tree.nodes['S2'].money = 100
        assert select_target(tree, 'A', 'high_power', ScriptedRng(0.0)) == 'S1'

    def test_high_income_prefers_best_earner(self, tree):
        tree.nodes['S2'].income = 50
        assert select_target(tree, 'A', 'high_income', ScriptedRng(0.0)) == 'S2'

    def test_siblings(self, tree):
        assert select_target(tree, 'A', 'siblings', ScriptedRng(0.0)) == 'S1'
        assert select_target(tree, 'A', 'none', ScriptedRng(0.999)) == 'S2'

    def test_root_has_no_sibling_target(self, tree):
        assert select_target(tree, 'P', 'siblings', ScriptedRng(0.0)) is None

    def test_threatened_picks_node_ready_to_coup(self, tree):
        tree.nodes['C2'].money = 2000          # 30 % against A
        tree.nodes['D'].money = 100_000        # S1/S2 hopeless against D
        assert select_target(tree, 'C1', 'threatened', ScriptedRng(0.0)) == 'C2'

    def test_threatened_falls_back_to_siblings(self, tree):
        tree.nodes['A'].money = 100_000
        tree.nodes['D'].money = 100_000
        assert select_target(tree, 'C1', 'threatened', ScriptedRng(0.0)) == 'C2'
        tree.nodes['C2'].money = 0
        assert select_target(tree, 'S1', 'threatened', ScriptedRng(0.0)) == 'A'


# ─────────────────────────────────────────────────────
# bot_tick
# ─────────────────────────────────────────────────────

class TestBotTick:
    def test_income_settled(self, tree):
        for nid in ('A', 'C1', 'C2'):
            tree.nodes[nid].income = 10
        actions = bot_tick(tree, 'A', ScriptedRng(default=0.999), 0.0)
        # 10 own + 30 % of 20 downline − 10 % skim
        assert tree.nodes['A'].money == pytest.approx(15)
        assert actions == []

    def test_no_income_leaves_money_alone(self, tree):
        tree.nodes['A'].money = 50
        bot_tick(tree, 'A', ScriptedRng(default=0.999), 0.0)
        assert tree.nodes['A'].money == 50

    def test_player_is_skipped(self, tree):
        rng = ScriptedRng()
        assert bot_tick(tree, 'C2', rng, 0.0) == []
        assert rng.calls == 0

    def test_shark_coups_when_rich(self, tree):
        tree.nodes['A'].profile = 'shark'
        tree.nodes['A'].money = 10_000
        tree.nodes['D'].money = 100
        actions = bot_tick(tree, 'A', ScriptedRng(0.0, 0.0, 0.999), 0.0)
        kinds = [k for k, _ in actions]
        assert kinds == ['coup']
        assert actions[0][1].detail['success'] is True
        assert actions[0][1].detail['investment'] == 2000
        assert tree.nodes['A'].parent_id == 'P'

    def test_coup_skipped_below_money_gate(self, tree):
        tree.nodes['A'].profile = 'shark'
        tree.nodes['A'].money = 250            # gate is 200 × 1.5
        actions = bot_tick(tree, 'A', ScriptedRng(0.0, 0.999), 0.0)
        assert actions == []
        assert tree.nodes['A'].parent_id == 'D'

    def test_root_never_coups(self, tree):
        tree.nodes['P'].profile = 'shark'
        tree.nodes['P'].money = 10_000
        # the only draw is the investment one
        rng = ScriptedRng(default=0.999)
        bot_tick(tree, 'P', rng, 0.0)
        assert rng.calls == 1

    def test_vc_invests_in_richest_candidate(self, tree):
        tree.nodes['A'].profile = 'vc'
        tree.nodes['A'].money = 1000
        tree.nodes['S1'].money = 500
        tree.nodes['S2'].money = 100
        actions = bot_tick(tree, 'A', ScriptedRng(0.999, 0.0, 0.0), 0.0)
        assert [k for k, _ in actions] == ['invest']
        assert tree.nodes['A'].money == 850      # floor(1000 × 0.1 × 1.5)
        assert tree.nodes['S1'].investors == {'A': 150}

    def test_poor_bot_does_not_invest(self, tree):
        tree.nodes['A'].profile = 'vc'
        tree.nodes['A'].money = 100              # needs > 150
        assert bot_tick(tree, 'A', ScriptedRng(0.999, 0.0, 0.0), 0.0) == []


# ─────────────────────────────────────────────────────
# ai_expansion
# ─────────────────────────────────────────────────────

class TestAiExpansion:
    def _pair(self):
        pyramid = build_pyramid({'R': None, 'U': 'R', 'Y': 'R'}, player='Y')
        pyramid.nodes['U'].control = UNOWNED
        return pyramid

    def test_recruits_and_grows(self):
        pyramid = self._pair()
        lines = ai_expansion(pyramid, ScriptedRng(default=0.0))
        u = pyramid.nodes['U']
        assert u.control == AI_CONTROLLED
        assert len(u.child_ids) == 1
        assert pyramid.nodes[u.child_ids[0]].control == UNOWNED
        assert len(lines) == 2
        assert pyramid.consistency_errors() == []

    def test_high_draw_does_nothing(self):
        pyramid = self._pair()
        assert ai_expansion(pyramid, ScriptedRng(default=0.999)) == []
        assert pyramid.nodes['U'].control == UNOWNED

    def test_promoted_node_waits_a_day(self):
        pyramid = self._pair()
        ai_expansion(pyramid, ScriptedRng(default=0.0))
        new_id = pyramid.nodes['U'].child_ids[0]
        assert pyramid.nodes[new_id].control == UNOWNED
        ai_expansion(pyramid, ScriptedRng(default=0.0))
        assert pyramid.nodes[new_id].control == AI_CONTROLLED

    def test_node_ceiling(self, monkeypatch):
        monkeypatch.setattr(config, 'MAX_NODES', 3)
        pyramid = self._pair()
        ai_expansion(pyramid, ScriptedRng(default=0.0))
        assert len(pyramid.nodes) == 3

    def test_depth_ceiling(self, monkeypatch):
        monkeypatch.setattr(config, 'MAX_LEVEL', 1)
        pyramid = self._pair()
        ai_expansion(pyramid, ScriptedRng(default=0.0))
        assert pyramid.nodes['U'].child_ids == []
