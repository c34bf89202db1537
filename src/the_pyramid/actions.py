# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
actions.py — The closed set of things a player (or the clock) can do.

Every action is a small dataclass deriving from Action.  dispatch() in
reducer.py matches on the concrete type; an object of any other type is
rejected, so the set stays closed.

Actions
───────
  AdvanceTime(hours)                        run the clock, day passes included
  AttemptCoup(amount)                       buy out your direct upline
  Invest(target_id, amount)                 back another node
  MoveUp()                                  peaceful swap with your upline
  CollectMoney()                            sweep cash from owned nodes
  UpgradeCharisma() / UpgradeRecruiting()   stat purchases
  UpgradeEnergy() / UpgradeInventory()
  Rest(hours)                               lock actions, regain energy
  BuyProduct(product_id, qty)               company stock at base cost
  SellDownstream(target_id, product_id, qty)
  RestockDownstream(target_id, product_id, qty)
  StartMarketing(tier, investment)          recruitment campaign
  ResetGame()                               fresh pyramid
  ForceGameOver(is_winner)                  end the run immediately
"""

from __future__ import annotations

import abc
from dataclasses import dataclass


@dataclass
class Action(abc.ABC):
    """Sealed base class.  Every concrete action must inherit from this."""

    @abc.abstractmethod
    def describe(self) -> str:
        """Human-readable description for log messages."""


@dataclass
class AdvanceTime(Action):
    hours: int = 1

    def describe(self) -> str:
        return f"AdvanceTime(hours={self.hours})"


@dataclass
class AttemptCoup(Action):
    """Coup the direct upline, adding *amount* on top of the coup cost."""
    amount: float = 0

    def describe(self) -> str:
        return f"AttemptCoup(amount={self.amount})"


@dataclass
class Invest(Action):
    target_id: str
    amount:    float

    def describe(self) -> str:
        return f"Invest(target_id={self.target_id!r}, amount={self.amount})"


@dataclass
class MoveUp(Action):
    def describe(self) -> str:
        return "MoveUp()"


@dataclass
class CollectMoney(Action):
    def describe(self) -> str:
        return "CollectMoney()"


@dataclass
class UpgradeCharisma(Action):
    def describe(self) -> str:
        return "UpgradeCharisma()"


@dataclass
class UpgradeRecruiting(Action):
    def describe(self) -> str:
        return "UpgradeRecruiting()"


@dataclass
class UpgradeEnergy(Action):
    """Buy ENERGY_PER_PURCHASE energy for ENERGY_PRICE money."""

    def describe(self) -> str:
        return "UpgradeEnergy()"


@dataclass
class UpgradeInventory(Action):
    def describe(self) -> str:
        return "UpgradeInventory()"


@dataclass
class Rest(Action):
    hours: int = 8

    def describe(self) -> str:
        return f"Rest(hours={self.hours})"


@dataclass
class BuyProduct(Action):
    product_id: str
    qty:        int = 1

    def describe(self) -> str:
        return f"BuyProduct(product_id={self.product_id!r}, qty={self.qty})"


@dataclass
class SellDownstream(Action):
    target_id:  str
    product_id: str
    qty:        int = 1

    def describe(self) -> str:
        return (f"SellDownstream(target_id={self.target_id!r}, "
                f"product_id={self.product_id!r}, qty={self.qty})")


@dataclass
class RestockDownstream(Action):
    target_id:  str
    product_id: str
    qty:        int = 1

    def describe(self) -> str:
        return (f"RestockDownstream(target_id={self.target_id!r}, "
                f"product_id={self.product_id!r}, qty={self.qty})")


@dataclass
class StartMarketing(Action):
    tier:       str   = 'social-media'
    investment: float = 0

    def describe(self) -> str:
        return f"StartMarketing(tier={self.tier!r}, investment={self.investment})"


@dataclass
class ResetGame(Action):
    def describe(self) -> str:
        return "ResetGame()"


@dataclass
class ForceGameOver(Action):
    is_winner: bool = False

    def describe(self) -> str:
        return f"ForceGameOver(is_winner={self.is_winner})"
