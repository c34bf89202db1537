# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
outcomes.py — Tagged results shared by every engine and by dispatch().

Denials are ordinary return values, never exceptions: an engine that refuses
an action hands back Outcome(ok=False, reason=Reason.X) and leaves the graph
untouched.  Reason is a str Enum so codes compare equal to their plain names
("InsufficientFunds") and serialise without help.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Reason(str, Enum):
    # ── Coup ──────────────────────────────────────────────────────────────
    NOT_DIRECT_UPLINE            = 'NotDirectUpline'
    ATTACKER_ON_COOLDOWN         = 'AttackerOnCooldown'
    TARGET_PROTECTED             = 'TargetProtected'
    INSUFFICIENT_FUNDS           = 'InsufficientFunds'
    # ── Investment ────────────────────────────────────────────────────────
    SELF_INVESTMENT              = 'SelfInvestment'
    DIRECT_UPLINE                = 'DirectUpline'
    DIRECT_DOWNLINE              = 'DirectDownline'
    UPLINE_CANNOT_INVEST         = 'UplineCannotInvest'
    TIER_TOO_LOW                 = 'TierTooLow'
    EXCEEDS_CAP                  = 'ExceedsCap'
    # ── Trading ───────────────────────────────────────────────────────────
    INSUFFICIENT_INVENTORY_SPACE = 'InsufficientInventorySpace'
    INSUFFICIENT_INVENTORY       = 'InsufficientInventory'
    CAPACITY_EXCEEDED            = 'CapacityExceeded'
    UNKNOWN_PRODUCT              = 'UnknownProduct'
    # ── Player / reducer ──────────────────────────────────────────────────
    INSUFFICIENT_ENERGY          = 'InsufficientEnergy'
    INSUFFICIENT_RECRUITS        = 'InsufficientRecruits'
    ENERGY_FULL                  = 'EnergyFull'
    NOT_FOUND                    = 'NotFound'
    NOT_OWNED                    = 'NotOwned'
    RESTING                      = 'Resting'
    GAME_OVER                    = 'GameOver'
    INVALID_AMOUNT               = 'InvalidAmount'
    UNKNOWN_ACTION               = 'UnknownAction'
    # ── Invariant violations ──────────────────────────────────────────────
    SELF_SWAP                    = 'SelfSwap'
    CYCLE_DETECTED               = 'CycleDetected'

    def __str__(self) -> str:
        return self.value


@dataclass
class Outcome:
    """Result of one engine call or one dispatched action."""

    ok:      bool
    reason:  Reason | None = None
    message: str           = ''
    detail:  dict          = field(default_factory=dict)

    @classmethod
    def success(cls, message: str = '', **detail) -> 'Outcome':
        return cls(True, None, message, detail)

    @classmethod
    def denied(cls, reason: Reason, message: str = '', **detail) -> 'Outcome':
        return cls(False, reason, message or reason.value, detail)

    def __bool__(self) -> bool:
        return self.ok
