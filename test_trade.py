"""
test_trade.py — pytest suite for the_pyramid.trade
===================================================
Covers: supplier restock, parent→child trading, retail sales with
commission, weekly product ranks, and the player's buy / sell-downstream /
restock-downstream transfers.
"""

import pytest

from conftest import SMALL_TREE, ScriptedRng, build_pyramid
from the_pyramid import config
from the_pyramid.graph import PLAYER_OWNED
from the_pyramid.outcomes import Reason
from the_pyramid.state import PlayerStats
from the_pyramid.trade import (
    buy_product, inventory_trading, restock_downstream, run_sales,
    sale_attempts, sale_chance, sell_downstream, supplier_restock,
    weekly_ranks,
)

OILS = 'essential-oils'
KIT  = 'lifestyle-kit'


@pytest.fixture
def tree():
    return build_pyramid(SMALL_TREE, player='C2', money={'C2': 1000})


@pytest.fixture
def owned(tree):
    """One player-owned recruit under the player, with a little cash."""
    node = tree.insert_node('C2', name='Recruit', control=PLAYER_OWNED, money=100)
    tree.nodes['C2'].inventory = {OILS: 5}
    return node


# ─────────────────────────────────────────────────────
# Daily flows
# ─────────────────────────────────────────────────────

class TestSupplierRestock:
    def test_low_stock_bot_buys_at_cost(self, tree, rng_zero):
        tree.nodes['S1'].money = 1000
        bought = supplier_restock(tree, rng_zero)
        s1 = tree.nodes['S1']
        assert bought == 10
        assert s1.inventory == {OILS: 10}
        assert s1.money == 900

    def test_player_never_restocked(self, tree, rng_zero):
        supplier_restock(tree, rng_zero)
        assert tree.nodes['C2'].inventory == {}
        assert tree.nodes['C2'].money == 1000

    def test_well_stocked_bot_skipped(self, tree, rng_zero):
        s1 = tree.nodes['S1']
        s1.money = 1000
        s1.inventory = {OILS: 5}
        supplier_restock(tree, rng_zero)
        assert s1.inventory == {OILS: 5}


class TestInventoryTrading:
    def test_parent_sells_to_child_at_downsell(self, tree, rng_zero):
        tree.nodes['D'].inventory = {OILS: 10}
        tree.nodes['A'].money = 100
        moved = inventory_trading(tree, rng_zero)
        assert moved == 3
        assert tree.nodes['A'].inventory == {OILS: 3}
        assert tree.nodes['A'].money == 55
        assert tree.nodes['D'].money == 45
        assert tree.nodes['D'].inventory[OILS] == 7

    def test_player_left_out(self, tree, rng_zero):
        tree.nodes['A'].inventory = {OILS: 10}
        inventory_trading(tree, rng_zero)
        assert tree.nodes['C2'].inventory == {}

    def test_no_trade_on_high_draw(self, tree, rng_high):
        tree.nodes['D'].inventory = {OILS: 10}
        tree.nodes['A'].money = 100
        assert inventory_trading(tree, rng_high) == 0


# ─────────────────────────────────────────────────────
# Retail sales
# ─────────────────────────────────────────────────────

class TestSaleOdds:
    def test_bottom_level(self):
        assert sale_chance(config.PRODUCTS[OILS], 7, False) == pytest.approx(0.33)

    def test_higher_levels_sell_better(self):
        assert sale_chance(config.PRODUCTS[OILS], 0, False) == pytest.approx(0.54)

    def test_owned_and_charisma_bonus(self):
        assert sale_chance(config.PRODUCTS[OILS], 7, True, 5) == pytest.approx(0.48)

    def test_capped(self):
        assert sale_chance(config.PRODUCTS[OILS], 0, True, 50) == config.SALE_CHANCE_CAP

    def test_attempts(self):
        assert sale_attempts(7, 10) == 1
        assert sale_attempts(0, 10) == 5
        assert sale_attempts(0, 2) == 2


class TestRunSales:
    def test_commission_to_parent(self, tree, rng_zero):
        tree.nodes['C1'].inventory = {OILS: 5}
        summary = run_sales(tree, rng_zero)
        assert tree.nodes['C1'].inventory[OILS] == 2
        assert tree.nodes['C1'].money == 60
        assert tree.nodes['A'].money == 15
        assert summary['units'] == 3
        assert summary['revenue'] == 75

    def test_player_sales_reported(self, tree, rng_zero):
        tree.nodes['C2'].inventory = {KIT: 2}
        summary = run_sales(tree, rng_zero)
        assert summary['player_units'] == 2
        assert summary['player_revenue'] == 192
        assert tree.nodes['C2'].money == 1192
        assert tree.nodes['A'].money == 48

    def test_player_commission_from_downline(self, tree, owned, rng_zero):
        owned.inventory = {OILS: 1}
        summary = run_sales(tree, rng_zero)
        assert summary['player_commission'] == 5

    def test_no_sales_on_high_draw(self, tree, rng_high):
        tree.nodes['C1'].inventory = {OILS: 5}
        summary = run_sales(tree, rng_high)
        assert summary['units'] == 0
        assert tree.nodes['A'].money == 0


class TestWeeklyRanks:
    def test_promotion_and_reset(self):
        player = PlayerStats()
        player.product_purchases[OILS]['weekly'] = 16
        lines = weekly_ranks(player)
        record = player.product_purchases[OILS]
        assert record['rank'] == 'Silver Seller'
        assert record['weekly'] == 0
        assert len(lines) == 1

    def test_no_demotion(self):
        player = PlayerStats()
        player.product_purchases[OILS].update(weekly=5, rank='Gold Seller')
        assert weekly_ranks(player) == []
        assert player.product_purchases[OILS]['rank'] == 'Gold Seller'


# ─────────────────────────────────────────────────────
# Player transfers
# ─────────────────────────────────────────────────────

class TestBuyProduct:
    def test_buy_at_cost(self, tree):
        out = buy_product(tree, 'C2', 'wellness-supplements', 5)
        assert out.ok
        assert tree.nodes['C2'].money == 900
        assert tree.nodes['C2'].inventory == {'wellness-supplements': 5}

    def test_no_room(self, tree):
        tree.nodes['C2'].inventory = {OILS: 18}
        assert buy_product(tree, 'C2', OILS, 5).reason == Reason.INSUFFICIENT_INVENTORY_SPACE

    def test_cannot_afford(self, tree):
        tree.nodes['C2'].money = 40
        assert buy_product(tree, 'C2', KIT, 1).reason == Reason.INSUFFICIENT_FUNDS

    def test_unknown_product(self, tree):
        assert buy_product(tree, 'C2', 'snake-oil', 1).reason == Reason.UNKNOWN_PRODUCT

    def test_bad_quantity(self, tree):
        assert buy_product(tree, 'C2', OILS, 0).reason == Reason.INVALID_AMOUNT


class TestSellDownstream:
    def test_seller_books_downsell_price(self, tree, owned):
        out = sell_downstream(tree, 'C2', owned.id, OILS, 3)
        assert out.ok
        assert tree.nodes['C2'].money == 1045
        assert tree.nodes['C2'].inventory[OILS] == 2
        assert owned.inventory == {OILS: 3}
        assert owned.money == 100

    def test_only_owned_nodes(self, tree, owned):
        assert sell_downstream(tree, 'C2', 'C1', OILS, 1).reason == Reason.NOT_OWNED

    def test_missing_target(self, tree, owned):
        assert sell_downstream(tree, 'C2', 'ghost', OILS, 1).reason == Reason.NOT_FOUND

    def test_not_enough_stock(self, tree, owned):
        out = sell_downstream(tree, 'C2', owned.id, OILS, 9)
        assert out.reason == Reason.INSUFFICIENT_INVENTORY

    def test_target_capacity(self, tree, owned):
        owned.max_inventory = 2
        out = sell_downstream(tree, 'C2', owned.id, OILS, 3)
        assert out.reason == Reason.CAPACITY_EXCEEDED
        assert tree.nodes['C2'].inventory[OILS] == 5


class TestRestockDownstream:
    def test_target_pays(self, tree, owned):
        out = restock_downstream(tree, 'C2', owned.id, OILS, 2)
        assert out.ok
        assert owned.money == 70
        assert tree.nodes['C2'].money == 1030
        assert owned.inventory == {OILS: 2}

    def test_target_cannot_afford(self, tree, owned):
        owned.money = 0
        out = restock_downstream(tree, 'C2', owned.id, OILS, 2)
        assert out.reason == Reason.INSUFFICIENT_FUNDS
        assert owned.inventory == {}
