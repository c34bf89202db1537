"""
test_investment.py — pytest suite for the_pyramid.investment
=============================================================
Covers: tier mapping, the can_invest denial ladder, the cap, and the
money/ledger bookkeeping of invest().
"""

import pytest

from conftest import SMALL_TREE, build_pyramid
from the_pyramid import config
from the_pyramid.investment import (
    can_invest, invest, max_investment, required_tier, tier_index,
)
from the_pyramid.outcomes import Reason


@pytest.fixture
def tree():
    return build_pyramid(SMALL_TREE, player='C2',
                         money={'C2': 1000, 'S1': 400, 'C1': 300, 'P': 5000})


# ─────────────────────────────────────────────────────
# Tiers
# ─────────────────────────────────────────────────────

class TestTiers:
    def test_bottom_level_is_newcomer(self):
        assert config.TIERS[tier_index(9)] == 'Hopeful Newcomer'

    def test_top_level_is_highest_reachable(self):
        assert tier_index(0) == len(config.TIERS) - 1

    def test_deeper_than_ladder_clamps_to_zero(self):
        assert tier_index(42) == 0

    def test_climbing_unlocks_one_tier_per_level(self):
        assert tier_index(5) - tier_index(6) == 1

    def test_required_tier_table(self):
        assert required_tier(7) == 0
        assert required_tier(0) == 7
        assert required_tier(99) == 0


# ─────────────────────────────────────────────────────
# can_invest ladder
# ─────────────────────────────────────────────────────

class TestCanInvest:
    def test_unrelated_nodes_may_invest(self, tree):
        assert can_invest(tree, 'C2', 'S1').ok

    def test_sibling_allowed(self, tree):
        assert can_invest(tree, 'C2', 'C1').ok

    def test_self(self, tree):
        assert can_invest(tree, 'C2', 'C2').reason == Reason.SELF_INVESTMENT

    def test_direct_upline(self, tree):
        assert can_invest(tree, 'C2', 'A').reason == Reason.DIRECT_UPLINE

    def test_direct_downline(self, tree):
        assert can_invest(tree, 'A', 'C2').reason == Reason.DIRECT_DOWNLINE

    def test_deep_upline_target(self, tree):
        assert can_invest(tree, 'C2', 'D').reason == Reason.UPLINE_CANNOT_INVEST

    def test_deep_downline_target(self, tree):
        assert can_invest(tree, 'D', 'C1').reason == Reason.UPLINE_CANNOT_INVEST

    def test_missing_node(self, tree):
        assert can_invest(tree, 'C2', 'ghost').reason == Reason.NOT_FOUND

    def test_tier_too_low(self, tree):
        # S1 sits on level 2, which needs tier 5
        out = can_invest(tree, 'C2', 'S1', player_tier=4)
        assert out.reason == Reason.TIER_TOO_LOW
        assert out.detail['required_tier'] == config.TIERS[5]

    def test_tier_high_enough(self, tree):
        assert can_invest(tree, 'C2', 'S1', player_tier=5).ok

    def test_relationship_checked_before_tier(self, tree):
        assert can_invest(tree, 'C2', 'A', player_tier=0).reason == Reason.DIRECT_UPLINE


# ─────────────────────────────────────────────────────
# invest
# ─────────────────────────────────────────────────────

class TestInvest:
    def test_moves_money_into_ledger(self, tree):
        out = invest(tree, 'C2', 'S1', 100)
        s1 = tree.nodes['S1']
        assert out.ok
        assert tree.nodes['C2'].money == 900
        assert s1.investments_received == 100
        assert s1.investors == {'C2': 100}
        assert out.detail == {'investor': 'C2', 'target': 'S1', 'amount': 100}

    def test_repeat_investments_accumulate(self, tree):
        invest(tree, 'C2', 'S1', 50)
        invest(tree, 'C2', 'S1', 30)
        assert tree.nodes['S1'].investors['C2'] == 80
        assert tree.consistency_errors() == []

    def test_raises_target_power(self, tree):
        from the_pyramid.economy import power
        before = power(tree.nodes['S1'])
        invest(tree, 'C2', 'S1', 100)
        assert power(tree.nodes['S1']) == pytest.approx(before + 150)

    def test_zero_amount(self, tree):
        assert invest(tree, 'C2', 'S1', 0).reason == Reason.INVALID_AMOUNT

    def test_insufficient_funds(self, tree):
        tree.nodes['C2'].money = 10
        out = invest(tree, 'C2', 'S1', 100)
        assert out.reason == Reason.INSUFFICIENT_FUNDS
        assert tree.nodes['S1'].investors == {}

    def test_cap_is_half_of_target_power(self, tree):
        assert max_investment(tree, 'S1', 'C2') == 200
        out = invest(tree, 'C2', 'S1', 201)
        assert out.reason == Reason.EXCEEDS_CAP
        assert out.detail['cap'] == 200

    def test_cap_shrinks_by_existing_stake(self, tree):
        invest(tree, 'C2', 'S1', 100)
        # power now 400 + 150 = 550 → floor(275) − 100
        assert max_investment(tree, 'S1', 'C2') == 175

    def test_denied_leaves_everything_alone(self, tree):
        invest(tree, 'C2', 'A', 100)
        assert tree.nodes['C2'].money == 1000
        assert tree.nodes['A'].investments_received == 0
