# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
graph.py — Layer 0: the hierarchy graph every other layer mutates.

Representation
──────────────
  Pyramid.nodes   — id → Node, insertion ordered (generation order first)
  Node.parent_id  — None only for the root
  Node.child_ids  — ordered list; kept as the exact mirror of parent_id
  Pyramid.version — bumped on every structural change (node added, edges
                    rewired, control tag changed); the only staleness signal
                    a viewer gets.

Every upward or downward walk carries a visited set.  The graph is acyclic by
construction, so a revisit is an invariant violation: it is printed with a ⚠,
appended to Pyramid.violations as "CycleDetected: ...", and the walk stops
with what it has.

Public API
──────────
  Pyramid.ancestors(id) / parent_of(id) / descendants(id) / siblings(id)
  Pyramid.level_of(id) / levels() / is_upline_of(upline, id)
  Pyramid.insert_node(parent_id, **attrs)   → Node   (raises NodeNotFound)
  Pyramid.rewire_swap(a_id, b_id)           → (swapped, new_root_id)
  generate_pyramid(rng, levels)             → Pyramid
  spawn_node(pyramid, parent_id, control, rng) → Node
"""
from collections import deque

from . import config
from .names import make_name
from .outcomes import Reason

# ── Control tags ───────────────────────────────────────────────────────────
PLAYER_POSITION = 'player-position'
PLAYER_OWNED    = 'player-owned'
AI_CONTROLLED   = 'ai-controlled'
UNOWNED         = 'unowned'
CONTROL_TAGS    = (PLAYER_POSITION, PLAYER_OWNED, AI_CONTROLLED, UNOWNED)


class NodeNotFound(KeyError):
    """Raised by insert_node when the requested parent does not exist."""


# ══════════════════════════════════════════════════════════════════════════
# Node
# ══════════════════════════════════════════════════════════════════════════

class Node:
    def __init__(self, node_id, name, control=UNOWNED, profile=None,
                 money=0.0, income=0.0):
        self.id                      = node_id
        self.name                    = name
        self.control                 = control
        self.profile                 = profile    # None for the player
        self.money                   = money
        self.income                  = income     # per day tick
        self.investments_received    = 0
        self.investors: dict         = {}         # investor_id → amount
        self.parent_id               = None
        self.child_ids: list         = []
        # ── Cooldowns (wall-clock seconds; expire by comparison) ──────────
        self.protected_until         = 0.0
        self.attacker_cooldown_until = 0.0
        # ── Trading ───────────────────────────────────────────────────────
        self.inventory: dict         = {}         # product_id → units
        self.max_inventory           = config.DEFAULT_MAX_INVENTORY

    @property
    def is_player(self) -> bool:
        return self.control == PLAYER_POSITION

    def stock(self) -> int:
        return sum(self.inventory.values())

    def free_space(self) -> int:
        return max(0, self.max_inventory - self.stock())

    def __repr__(self) -> str:
        return f"Node({self.id!r}, {self.name!r}, {self.control})"


# ══════════════════════════════════════════════════════════════════════════
# Pyramid container
# ══════════════════════════════════════════════════════════════════════════

class Pyramid:
    def __init__(self):
        self.nodes: dict      = {}
        self.root_id          = None
        self.player_id        = None
        self.version          = 0
        self.violations: list = []
        self._next_id         = 0

    # ── Bookkeeping ───────────────────────────────────────────────────────

    def new_id(self) -> str:
        self._next_id += 1
        return f"node_{self._next_id}"

    def touch(self) -> None:
        self.version += 1

    def _violation(self, reason: Reason, msg: str) -> None:
        """Entries read "<ReasonCode>: <detail>" so callers can match on the code."""
        entry = f"{reason}: {msg}"
        self.violations.append(entry)
        print(f"⚠ {entry}")

    def get(self, node_id):
        return self.nodes.get(node_id)

    @property
    def player(self):
        return self.nodes.get(self.player_id)

    def add(self, node: Node) -> Node:
        """Register a detached node (generation only)."""
        self.nodes[node.id] = node
        return node

    def links(self) -> list:
        """(child_id, parent_id) pairs, one per non-root node."""
        return [(n.id, n.parent_id) for n in self.nodes.values()
                if n.parent_id is not None]

    # ── Traversal ─────────────────────────────────────────────────────────

    def parent_of(self, node_id):
        node = self.nodes.get(node_id)
        if node is None or node.parent_id is None:
            return None
        return self.nodes.get(node.parent_id)

    def children(self, node_id) -> list:
        node = self.nodes.get(node_id)
        return [self.nodes[c] for c in node.child_ids] if node else []

    def ancestors(self, node_id) -> list:
        """Ids above *node_id*, nearest first."""
        chain   = []
        visited = {node_id}
        current = self.nodes.get(node_id)
        while current is not None and current.parent_id is not None:
            pid = current.parent_id
            if pid in visited:
                self._violation(Reason.CYCLE_DETECTED, f"walking up from {node_id} at {pid}")
                break
            visited.add(pid)
            chain.append(pid)
            current = self.nodes.get(pid)
        return chain

    def is_upline_of(self, upline_id, node_id) -> bool:
        return upline_id in self.ancestors(node_id)

    def descendants(self, node_id) -> list:
        """Breadth-first ids of the whole subtree below *node_id*."""
        result  = []
        visited = {node_id}
        queue   = deque([node_id])
        while queue:
            current = self.nodes.get(queue.popleft())
            if current is None:
                continue
            for cid in current.child_ids:
                if cid in visited:
                    self._violation(Reason.CYCLE_DETECTED, f"walking down from {node_id} at {cid}")
                    continue
                visited.add(cid)
                result.append(cid)
                queue.append(cid)
        return result

    def siblings(self, node_id) -> list:
        parent = self.parent_of(node_id)
        if parent is None:
            return []
        return [c for c in parent.child_ids if c != node_id]

    def level_of(self, node_id) -> int:
        return len(self.ancestors(node_id))

    def levels(self) -> dict:
        """Depth of every node reachable from the root, in one pass."""
        if self.root_id is None:
            return {}
        depth   = {self.root_id: 0}
        queue   = deque([self.root_id])
        while queue:
            nid = queue.popleft()
            for cid in self.nodes[nid].child_ids:
                if cid in depth:
                    self._violation(Reason.CYCLE_DETECTED, f"computing levels at {cid}")
                    continue
                depth[cid] = depth[nid] + 1
                queue.append(cid)
        return depth

    # ── Mutation ──────────────────────────────────────────────────────────

    def link(self, child_id, parent_id) -> None:
        """Point *child_id* at *parent_id*, keeping both edge lists in step."""
        child = self.nodes[child_id]
        if child.parent_id is not None:
            old = self.nodes.get(child.parent_id)
            if old is not None and child_id in old.child_ids:
                old.child_ids.remove(child_id)
        child.parent_id = parent_id
        if parent_id is not None:
            parent = self.nodes[parent_id]
            if child_id not in parent.child_ids:
                parent.child_ids.append(child_id)
        self.touch()

    def insert_node(self, parent_id, **attrs) -> Node:
        """Create a node under *parent_id*; attrs override Node defaults."""
        if parent_id not in self.nodes:
            raise NodeNotFound(parent_id)
        node_id = self.new_id()
        node    = Node(node_id, attrs.pop('name', node_id))
        for key, value in attrs.items():
            setattr(node, key, value)
        self.nodes[node_id] = node
        self.link(node_id, parent_id)
        return node

    def rewire_swap(self, a_id, b_id) -> tuple:
        """Swap child *a_id* into the position of its parent *b_id*.

        A takes B's parent and B's other children; B becomes A's only new
        child and inherits A's old children.  Returns (swapped, new_root_id);
        new_root_id is A's id when B was the root, else None.
        """
        if a_id == b_id:
            self._violation(Reason.SELF_SWAP, f"refused to swap {a_id} with itself")
            return False, None
        a = self.nodes.get(a_id)
        b = self.nodes.get(b_id)
        if a is None or b is None or a.parent_id != b_id:
            self._violation(Reason.NOT_DIRECT_UPLINE,
                            f"swap of non-adjacent nodes {a_id} / {b_id} refused")
            return False, None

        b_parent_id   = b.parent_id
        b_others      = [c for c in b.child_ids if c != a_id]
        a_children    = list(a.child_ids)

        a.parent_id   = b_parent_id
        a.child_ids   = [b_id] + b_others
        b.parent_id   = a_id
        b.child_ids   = a_children

        for cid in b_others:
            self.nodes[cid].parent_id = a_id
        for cid in a_children:
            self.nodes[cid].parent_id = b_id

        new_root = None
        if b_parent_id is None:
            self.root_id = a_id
            new_root     = a_id
        else:
            grand = self.nodes[b_parent_id]
            grand.child_ids = [a_id if c == b_id else c for c in grand.child_ids]
        self.touch()
        return True, new_root

    def remove_subtree(self, node_id) -> list:
        """Delete *node_id* and everything below it.  Initialisation only."""
        doomed = [node_id] + self.descendants(node_id)
        node   = self.nodes[node_id]
        if node.parent_id is not None:
            self.nodes[node.parent_id].child_ids.remove(node_id)
        for nid in doomed:
            del self.nodes[nid]
        self.touch()
        return doomed

    def set_control(self, node_id, control) -> None:
        self.nodes[node_id].control = control
        self.touch()

    # ── Invariant audit ───────────────────────────────────────────────────

    def consistency_errors(self) -> list:
        """Human-readable list of broken invariants (empty when healthy)."""
        errors  = []
        players = [n.id for n in self.nodes.values() if n.control == PLAYER_POSITION]
        if len(players) != 1:
            errors.append(f"expected one player position, found {len(players)}")
        for n in self.nodes.values():
            if n.parent_id is not None:
                parent = self.nodes.get(n.parent_id)
                if parent is None or n.id not in parent.child_ids:
                    errors.append(f"{n.id} not listed under its parent {n.parent_id}")
            elif n.id != self.root_id:
                errors.append(f"{n.id} has no parent but is not the root")
            if len(set(n.child_ids)) != len(n.child_ids):
                errors.append(f"{n.id} lists a child twice")
            for cid in n.child_ids:
                child = self.nodes.get(cid)
                if child is None or child.parent_id != n.id:
                    errors.append(f"{cid} listed under {n.id} but points elsewhere")
            if n.investments_received != sum(n.investors.values()):
                errors.append(f"{n.id} ledger does not sum to investments received")
            seen, up = {n.id}, n.parent_id
            while up is not None and up in self.nodes:
                if up in seen:
                    errors.append(f"{n.id} sits on a parent cycle")
                    break
                seen.add(up)
                up = self.nodes[up].parent_id
        return errors


# ══════════════════════════════════════════════════════════════════════════
# Generation
# ══════════════════════════════════════════════════════════════════════════

def _starting_stats(rng, level: int, levels: int) -> tuple:
    lo, hi        = config.BOT_RANDOM_MONEY
    from_bottom   = levels - 1 - level
    money = (lo + int(rng.random() * (hi - lo))
             + int(config.BOT_BASE_MONEY * config.BOT_MONEY_SCALE_BASE ** from_bottom))
    income = (rng.random() * config.BOT_RANDOM_INCOME
              + config.BOT_BASE_INCOME * config.BOT_INCOME_SCALE_BASE ** from_bottom)
    return money, income


def generate_pyramid(rng, levels: int = None) -> Pyramid:
    """Build a full binary pyramid and seat the player near the bottom.

    Level L holds 2**L nodes; the bottom level starts unowned, everything
    above it is AI-controlled.  The player replaces one node at level
    PLAYER_START_LEVEL_MIN or deeper, then any direct children beyond
    PLAYER_START_DOWNLINE_SLOTS are trimmed away with their subtrees.
    """
    from .bots import select_profile   # profile tables live with the AI layer

    levels  = levels or config.LEVELS
    pyramid = Pyramid()
    used    = set()
    rows: list = []

    for level in range(levels):
        row = []
        for _ in range(2 ** level):
            name = make_name(rng, used)
            used.add(name)
            control = AI_CONTROLLED if level < levels - 1 else UNOWNED
            node    = Node(pyramid.new_id(), name, control,
                           profile=select_profile(level, rng))
            node.money, node.income = _starting_stats(rng, level, levels)
            pyramid.add(node)
            row.append(node)
        rows.append(row)

    for level in range(levels - 1):
        for i, parent in enumerate(rows[level]):
            for child in rows[level + 1][2 * i: 2 * i + 2]:
                child.parent_id = parent.id
                parent.child_ids.append(child.id)

    pyramid.root_id = rows[0][0].id

    start_min = min(config.PLAYER_START_LEVEL_MIN, levels - 1)
    eligible  = [n for row in rows[start_min:] for n in row]
    seat      = eligible[min(len(eligible) - 1, int(rng.random() * len(eligible)))]
    seat.name      = 'You'
    seat.control   = PLAYER_POSITION
    seat.profile   = None
    seat.money     = config.STARTING_MONEY
    seat.income    = 0.0
    pyramid.player_id = seat.id

    for extra in list(seat.child_ids[config.PLAYER_START_DOWNLINE_SLOTS:]):
        pyramid.remove_subtree(extra)

    pyramid.version = 1
    return pyramid


def spawn_node(pyramid: Pyramid, parent_id, control, rng) -> Node:
    """Insert one fresh agent under *parent_id* with newcomer stats."""
    from .bots import select_profile

    level = pyramid.level_of(parent_id) + 1
    used  = {n.name for n in pyramid.nodes.values()}
    name  = make_name(rng, used)
    return pyramid.insert_node(
        parent_id,
        name=name,
        control=control,
        profile=select_profile(level, rng),
        money=level * 10,
        income=config.BOT_BASE_INCOME * 0.5,
    )
