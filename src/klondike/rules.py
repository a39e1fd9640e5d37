# rules.py - Klondike move legality
from typing import Sequence

from klondike import common as C


def can_move_to_foundation(card: C.Card, foundation: Sequence[C.Card]) -> bool:
    """Aces start a foundation; otherwise same suit, one rank up."""
    if not foundation:
        return card.rank == C.ACE
    top = foundation[-1]
    nxt = C.successor(top.rank)
    return nxt is not None and card.suit == top.suit and card.rank == nxt


def can_move_to_tableau(card: C.Card, pile: Sequence[C.Card]) -> bool:
    """Kings fill empty piles; otherwise opposite color, one rank down."""
    if not pile:
        return card.rank == C.KING
    top = pile[-1]
    prev = C.predecessor(top.rank)
    return prev is not None and card.color() != top.color() and card.rank == prev
