# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
trade.py — Layer 5: products, inventory trading, sales and commission.

Goods enter the network from the company (supplier restock or the player's
own purchases), move down the hierarchy at the downsell price, and leave it
as retail sales to random customers.  Every retail sale pays the selling
node 80 % and its direct parent 20 %; because nodes are processed deepest
first, money climbs the pyramid one hop per node per day.

Call order each day (see day_cycle.py):
  supplier_restock(pyramid, rng)
  inventory_trading(pyramid, rng)
  run_sales(pyramid, rng, charisma)
  weekly_ranks(player)                — only when a week boundary is crossed

Player-initiated transfers (reducer.py):
  buy_product / sell_downstream / restock_downstream
"""
import math

from . import config
from .outcomes import Outcome, Reason


def _pick(rng, seq):
    return seq[min(len(seq) - 1, int(rng.random() * len(seq)))]


def _product(product_id):
    return config.PRODUCTS.get(product_id)


# ══════════════════════════════════════════════════════════════════════════
# Daily automatic flows
# ══════════════════════════════════════════════════════════════════════════

def supplier_restock(pyramid, rng) -> int:
    """Low-stock bots buy from the company at base cost.  Returns units bought."""
    bought = 0
    product_ids = list(config.PRODUCTS)
    for node in pyramid.nodes.values():
        if node.is_player:
            continue
        if node.stock() >= node.max_inventory * config.SUPPLIER_RESTOCK_BELOW:
            continue
        if rng.random() >= config.SUPPLIER_RESTOCK_CHANCE:
            continue
        pid   = _pick(rng, product_ids)
        cost  = config.PRODUCTS[pid]['cost']
        want  = math.floor(node.max_inventory * config.SUPPLIER_RESTOCK_FILL) - node.stock()
        units = min(want, node.free_space(), math.floor(node.money / cost))
        if units <= 0:
            continue
        node.money -= units * cost
        node.inventory[pid] = node.inventory.get(pid, 0) + units
        bought += units
    return bought


def inventory_trading(pyramid, rng) -> int:
    """Parents sell a few units to children at the downsell price.

    The player's node is left out on both sides; the player trades through
    explicit actions.  Returns units moved.
    """
    moved = 0
    for child in list(pyramid.nodes.values()):
        if child.is_player or child.parent_id is None:
            continue
        parent = pyramid.nodes[child.parent_id]
        if parent.is_player or parent.stock() == 0:
            continue
        if rng.random() >= config.TRADE_CHANCE:
            continue
        held  = [pid for pid, qty in parent.inventory.items() if qty > 0]
        pid   = _pick(rng, held)
        price = config.PRODUCTS[pid]['downsell']
        units = min(config.TRADE_MAX_UNITS, parent.inventory[pid],
                    child.free_space(), math.floor(child.money / price))
        if units <= 0:
            continue
        parent.inventory[pid] -= units
        child.inventory[pid]   = child.inventory.get(pid, 0) + units
        child.money  -= units * price
        parent.money += units * price
        moved += units
    return moved


def sale_chance(product, level: int, owned: bool, charisma: int = 0) -> float:
    height = max(0, config.LEVELS - 1 - level)
    chance = product['chance'] + config.SALE_BASE_BONUS + height * config.SALE_LEVEL_FACTOR
    if owned:
        chance += config.SALE_OWNED_BONUS
    chance += charisma * config.SALE_CHARISMA_BONUS
    return min(config.SALE_CHANCE_CAP, chance)


def sale_attempts(level: int, stock: int) -> int:
    height = max(0, config.LEVELS - 1 - level)
    return min(stock, max(1, math.floor(1 + height * config.SALE_ATTEMPT_FACTOR)))


def run_sales(pyramid, rng, charisma: int = 1) -> dict:
    """Retail sales for every stocked node, deepest first, with commission."""
    from .graph import PLAYER_OWNED

    levels  = pyramid.levels()
    order   = sorted(levels, key=lambda nid: levels[nid], reverse=True)
    summary = {'units': 0, 'revenue': 0, 'player_units': 0,
               'player_revenue': 0, 'player_commission': 0}
    for nid in order:
        node = pyramid.nodes[nid]
        if node.stock() == 0:
            continue
        level = levels[nid]
        owned = node.is_player or node.control == PLAYER_OWNED
        bonus = charisma if node.is_player else 0
        revenue = 0
        for pid in list(node.inventory):
            qty = node.inventory[pid]
            if qty <= 0:
                continue
            product = config.PRODUCTS[pid]
            chance  = sale_chance(product, level, owned, bonus)
            sold = 0
            for _ in range(sale_attempts(level, qty)):
                if rng.random() < chance:
                    sold += 1
            if sold:
                node.inventory[pid] -= sold
                revenue += sold * product['price']
                summary['units'] += sold
                if node.is_player:
                    summary['player_units'] += sold
        if revenue == 0:
            continue
        summary['revenue'] += revenue
        commission = 0
        parent = pyramid.parent_of(nid)
        if parent is not None:
            commission = math.floor(revenue * config.COMMISSION_PERCENT)
            parent.money += commission
            if parent.is_player:
                summary['player_commission'] += commission
        node.money += revenue - commission
        if node.is_player:
            summary['player_revenue'] += revenue - commission
    return summary


def weekly_ranks(player) -> list:
    """Promote product ranks from this week's purchases, then reset the counters."""
    lines = []
    for pid, record in player.product_purchases.items():
        earned = None
        for rank_name, need in config.PRODUCT_RANKS:
            if record['weekly'] >= need:
                earned = rank_name
        current = record.get('rank')
        if earned and _rank_index(earned) > _rank_index(current):
            record['rank'] = earned
            lines.append(f"🏅 {config.PRODUCTS[pid]['name']}: promoted to {earned}")
        record['weekly'] = 0
    return lines


def _rank_index(rank_name) -> int:
    for i, (name, _) in enumerate(config.PRODUCT_RANKS):
        if name == rank_name:
            return i
    return -1


# ══════════════════════════════════════════════════════════════════════════
# Player-initiated transfers
# ══════════════════════════════════════════════════════════════════════════

def _check_qty(product_id, qty) -> Outcome:
    if _product(product_id) is None:
        return Outcome.denied(Reason.UNKNOWN_PRODUCT, f"No product called {product_id!r}")
    if qty <= 0:
        return Outcome.denied(Reason.INVALID_AMOUNT, "Quantity must be positive")
    return Outcome.success()


def buy_product(pyramid, buyer_id, product_id, qty: int) -> Outcome:
    """Buy from the company at base cost into the buyer's own stock."""
    check = _check_qty(product_id, qty)
    if not check.ok:
        return check
    buyer   = pyramid.nodes[buyer_id]
    product = _product(product_id)
    total   = product['cost'] * qty
    if buyer.free_space() < qty:
        return Outcome.denied(Reason.INSUFFICIENT_INVENTORY_SPACE,
                              f"Room for {buyer.free_space()} more units only")
    if buyer.money < total:
        return Outcome.denied(Reason.INSUFFICIENT_FUNDS,
                              f"{qty} {product['name']} cost ${total:,}")
    buyer.money -= total
    buyer.inventory[product_id] = buyer.inventory.get(product_id, 0) + qty
    return Outcome.success(f"Bought {qty} {product['name']} for ${total:,}",
                           product=product_id, qty=qty, cost=total)


def _downstream_check(pyramid, seller_id, target_id, product_id, qty) -> Outcome:
    from .graph import PLAYER_OWNED

    check = _check_qty(product_id, qty)
    if not check.ok:
        return check
    target = pyramid.get(target_id)
    if target is None:
        return Outcome.denied(Reason.NOT_FOUND, f"No node {target_id}")
    if target.control != PLAYER_OWNED:
        return Outcome.denied(Reason.NOT_OWNED, f"{target.name} is not in your network")
    seller = pyramid.nodes[seller_id]
    have   = seller.inventory.get(product_id, 0)
    if have < qty:
        return Outcome.denied(Reason.INSUFFICIENT_INVENTORY,
                              f"Have {have} {_product(product_id)['name']}, need {qty}")
    if target.stock() + qty > target.max_inventory:
        return Outcome.denied(Reason.CAPACITY_EXCEEDED,
                              f"{target.name} has room for {target.free_space()} units")
    return Outcome.success()


def _transfer(seller, target, product_id, qty) -> None:
    seller.inventory[product_id] -= qty
    target.inventory[product_id] = target.inventory.get(product_id, 0) + qty


def sell_downstream(pyramid, seller_id, target_id, product_id, qty: int) -> Outcome:
    """Consign stock to an owned node; the seller books the downsell price."""
    check = _downstream_check(pyramid, seller_id, target_id, product_id, qty)
    if not check.ok:
        return check
    seller  = pyramid.nodes[seller_id]
    target  = pyramid.nodes[target_id]
    revenue = _product(product_id)['downsell'] * qty
    _transfer(seller, target, product_id, qty)
    seller.money += revenue
    return Outcome.success(f"Sold {qty} {_product(product_id)['name']} to {target.name} "
                           f"for ${revenue:,}", revenue=revenue, qty=qty)


def restock_downstream(pyramid, seller_id, target_id, product_id, qty: int) -> Outcome:
    """Ship stock to an owned node that pays the downsell price out of its own money."""
    check = _downstream_check(pyramid, seller_id, target_id, product_id, qty)
    if not check.ok:
        return check
    seller = pyramid.nodes[seller_id]
    target = pyramid.nodes[target_id]
    cost   = _product(product_id)['downsell'] * qty
    if target.money < cost:
        return Outcome.denied(Reason.INSUFFICIENT_FUNDS,
                              f"{target.name} needs ${cost:,}, has ${target.money:,.0f}")
    _transfer(seller, target, product_id, qty)
    target.money -= cost
    seller.money += cost
    return Outcome.success(f"Restocked {target.name} with {qty} "
                           f"{_product(product_id)['name']} for ${cost:,}",
                           revenue=cost, qty=qty)
